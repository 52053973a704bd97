"""Web server configuration."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..channels.target import Target
from ..exceptions import ConfigError
from .uvicorn import UvicornConfig


@dataclass
class HttpOptions:
    """
    Plaintext listener configuration.

    Attributes:
        enable: Start the plaintext listener (default: False)
        port: Bind port (default: 80)
    """

    enable: bool = False
    port: int = 80


@dataclass
class HttpsOptions:
    """
    Encrypted listener configuration.

    Attributes:
        enable: Start the encrypted listener (default: False)
        port: Bind port (default: 443)
        private_key: Path to the PEM private key file
        certificate: Path to the PEM certificate file
    """

    enable: bool = False
    port: int = 443
    private_key: str | None = None
    certificate: str | None = None


@dataclass
class SessionOptions:
    """
    Cookie session configuration.

    Attributes:
        enable: Attach session middleware to the root pipeline (default: False)
        pass_phrase: Secret used to sign the session cookie
    """

    enable: bool = False
    pass_phrase: str = ""


@dataclass
class ChannelOptions:
    """
    Realtime channel configuration.

    Attributes:
        enable: Create realtime servers once listeners are live (default: False)
        options: Keyword arguments passed to socketio.AsyncServer
        target: Listeners that get a realtime server (default: BOTH)
    """

    enable: bool = False
    options: dict[str, Any] = field(default_factory=dict)
    target: Target = Target.BOTH


@dataclass
class WebServerOptions:
    """
    Complete web server configuration, one explicit section per feature.

    Attributes:
        host: Bind address shared by both listeners (default: "0.0.0.0")
        http: Plaintext listener settings
        https: Encrypted listener settings
        sessions: Cookie session settings
        channels: Realtime channel settings
        uvicorn: Transport tuning shared by both listeners
    """

    host: str = "0.0.0.0"
    http: HttpOptions = field(default_factory=HttpOptions)
    https: HttpsOptions = field(default_factory=HttpsOptions)
    sessions: SessionOptions = field(default_factory=SessionOptions)
    channels: ChannelOptions = field(default_factory=ChannelOptions)
    uvicorn: UvicornConfig = field(default_factory=UvicornConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> WebServerOptions:
        """
        Build options from a plain mapping (e.g. parsed YAML).

        Args:
            data: Mapping with optional sections: host, http, https,
                sessions, channels, uvicorn

        Returns:
            WebServerOptions with unspecified values defaulted

        Raises:
            ConfigError: If a section or key is unknown or malformed
        """
        data = dict(data or {})
        sections: dict[str, Any] = {}

        unknown = set(data) - {f.name for f in dataclasses.fields(cls)}
        if unknown:
            raise ConfigError("Unknown option sections", sections=sorted(unknown))

        if data.get("host") is not None:
            sections["host"] = str(data["host"])

        for name, section_cls in _SECTIONS.items():
            if name in data and data[name] is not None:
                sections[name] = _build_section(name, section_cls, data[name])

        channels = sections.get("channels")
        if channels is not None and isinstance(channels.target, str):
            sections["channels"] = dataclasses.replace(
                channels, target=_parse_target(channels.target)
            )
        return cls(**sections)


_SECTIONS: dict[str, type[Any]] = {
    "http": HttpOptions,
    "https": HttpsOptions,
    "sessions": SessionOptions,
    "channels": ChannelOptions,
    "uvicorn": UvicornConfig,
}


def _build_section(name: str, section_cls: type[Any], value: Any) -> Any:
    """Build one option section dataclass from a mapping."""
    if isinstance(value, section_cls):
        return value
    if not isinstance(value, Mapping):
        raise ConfigError("Option section must be a mapping", section=name)

    allowed = {f.name for f in dataclasses.fields(section_cls)}
    unknown = set(value) - allowed
    if unknown:
        raise ConfigError(
            "Unknown option keys", section=name, keys=sorted(str(k) for k in unknown)
        )
    return section_cls(**value)


def _parse_target(value: str) -> Target:
    """Parse a channel target name (case-insensitive)."""
    try:
        return Target[value.upper()]
    except KeyError:
        raise ConfigError("Unknown channel target", target=value) from None

"""
Options loading from YAML files with environment variable overrides.

Environment Variable Override Format:
    <PREFIX><SECTION>_<KEY>=value

Examples:
    DUALSERVE_HTTP_PORT=8080
    DUALSERVE_HTTPS_PRIVATE_KEY=/etc/ssl/private/server.key
    DUALSERVE_SESSIONS_ENABLE=true
    DUALSERVE_HOST=127.0.0.1
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from ..exceptions import ConfigError
from .options import WebServerOptions

logger = logging.getLogger("dualserve.config")

DEFAULT_ENV_PREFIX = "DUALSERVE_"


def load_options(
    path: str | Path | None = None,
    env_prefix: str | None = DEFAULT_ENV_PREFIX,
) -> WebServerOptions:
    """
    Load web server options from a YAML file and the environment.

    Args:
        path: YAML file to read (None = start from defaults)
        env_prefix: Prefix of override variables (None disables overrides)

    Returns:
        Parsed WebServerOptions

    Raises:
        ConfigError: If the file cannot be read or parsed, or contains
            unknown options
    """
    data: dict[str, Any] = {}

    if path is not None:
        data = _read_yaml(Path(path))

    if env_prefix:
        data = apply_env_overrides(data, env_prefix)

    return WebServerOptions.from_dict(data)


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from disk."""
    try:
        with open(path) as f:
            content = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError("Cannot read options file", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError("Invalid YAML in options file", path=str(path)) from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError("Options file must contain a mapping", path=str(path))
    return content


def apply_env_overrides(data: dict[str, Any], env_prefix: str) -> dict[str, Any]:
    """
    Apply environment variable overrides to option data.

    The first component after the prefix names the section; the rest,
    joined with underscores, names the key within it. A single component
    names a top-level value (e.g. DUALSERVE_HOST).

    Args:
        data: Option data dictionary (modified in place)
        env_prefix: Prefix of override variables

    Returns:
        Option data with overrides applied
    """
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(env_prefix):
            continue

        parts = env_key[len(env_prefix) :].lower().split("_")
        value = _convert_env_value(env_value)

        if len(parts) == 1:
            data[parts[0]] = value
        else:
            section = data.get(parts[0])
            if not isinstance(section, dict):
                section = data[parts[0]] = {}
            section["_".join(parts[1:])] = value

        logger.debug(f"option override from environment: {env_key}")

    return data


def _convert_env_value(value: str) -> bool | int | float | str | None:
    """
    Convert environment variable string to appropriate type.

    Args:
        value: Environment variable value as string

    Returns:
        Converted value with appropriate type
    """
    if value.lower() in ("null", "none", ""):
        return None

    if value.lower() in ("true", "false"):
        return value.lower() == "true"

    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    return value

"""Realtime channel targets."""

from enum import Enum


class Target(Enum):
    """Selects which transport-bound realtime server(s) an operation applies to."""

    BOTH = 0
    PLAIN = 1
    ENCRYPTED = 2

    def matches(self, kind: "Target") -> bool:
        """Check whether this target selects the server bound to ``kind``."""
        return self is Target.BOTH or self is kind

"""Appearance modes.

This module is STABLE. Safe for `from` imports everywhere.
"""

from __future__ import annotations

from enum import Enum

from appearance_theme.core.errors import UnknownMode


class Mode(Enum):
    """Light/dark appearance signal reported by the host."""

    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value: object) -> "Mode":
        """Coerce a Mode or a case-insensitive mode name. Raises UnknownMode otherwise."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownMode(value)


ALL_MODES: tuple[Mode, ...] = (Mode.LIGHT, Mode.DARK)

"""Configured candidate themes per mode.

The engine only reads these lists. add() is the one mutation, used by the
add-theme command; the host persists the change through on_change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from appearance_theme.core.errors import UnknownMode
from appearance_theme.core.modes import ALL_MODES, Mode

logger = logging.getLogger(__name__)


class Candidates:
    def __init__(
        self,
        lists: Optional[dict[Mode, list[str]]] = None,
        on_change: Optional[Callable[["Candidates"], None]] = None,
    ) -> None:
        self._lists: dict[Mode, list[str]] = {mode: [] for mode in ALL_MODES}
        for mode, items in (lists or {}).items():
            self._lists[Mode.parse(mode)] = _dedupe(items)
        self._on_change = on_change

    @classmethod
    def from_dict(
        cls,
        data: object,
        on_change: Optional[Callable[["Candidates"], None]] = None,
    ) -> "Candidates":
        """Build from the settings-file shape {"light": [...], "dark": [...]}.

        Unknown modes and non-string entries are skipped with a warning.
        """
        lists: dict[Mode, list[str]] = {}
        if isinstance(data, dict):
            for key, items in data.items():
                try:
                    mode = Mode.parse(key)
                except UnknownMode:
                    logger.warning("Ignoring candidates for unknown mode %r", key)
                    continue
                if not isinstance(items, list):
                    logger.warning("Ignoring non-list candidates for %s", mode.value)
                    continue
                valid = [item for item in items if isinstance(item, str) and item]
                if len(valid) != len(items):
                    logger.warning("Skipped %d invalid %s candidates", len(items) - len(valid), mode.value)
                lists[mode] = valid
        elif data is not None:
            logger.warning("Ignoring candidates setting of type %s", type(data).__name__)
        return cls(lists, on_change=on_change)

    def available(self, mode: Mode) -> list[str]:
        return list(self._lists[mode])

    def add(self, mode: Mode, item: str) -> bool:
        """Append item to mode's list if absent. Returns whether it was added."""
        items = self._lists[mode]
        if item in items:
            return False
        items.append(item)
        if self._on_change is not None:
            self._on_change(self)
        return True

    def to_dict(self) -> dict[str, list[str]]:
        return {mode.value: list(self._lists[mode]) for mode in ALL_MODES}


def _dedupe(items) -> list[str]:
    out: list[str] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out

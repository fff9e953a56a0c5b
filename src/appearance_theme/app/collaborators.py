"""Contracts between the engine and its host, plus dispatcher outcome types.

// [LAW:one-type-per-behavior] One result type for every dispatcher operation.

This module is STABLE. Safe for `from` imports everywhere.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from appearance_theme.core.modes import Mode


class ThemeApplier(Protocol):
    def apply(self, item: str) -> None:
        """Load theme `item`. Must be safe to call repeatedly with the same item.

        Raise on failure; the dispatcher logs and does not retry.
        """
        ...


class SelectionPrompt(Protocol):
    def __call__(
        self, mode: Mode, candidates: Sequence[str], default_hint: Optional[str]
    ) -> str:
        """Ask the user to pick one of `candidates`. Raise PromptCancelled on abort."""
        ...


class Confirm(Protocol):
    def __call__(self, question: str) -> bool: ...


class CurrentModeProvider(Protocol):
    def __call__(self) -> Mode: ...


class NullApplier:
    """Applier for hosts with nothing to apply. Remembers what it was asked to load."""

    def __init__(self) -> None:
        self.applied: list[str] = []

    def apply(self, item: str) -> None:
        self.applied.append(item)


class DispatchStatus(Enum):
    APPLIED = "applied"
    DEBOUNCED = "debounced"
    DISABLED = "disabled"
    NOT_CONFIGURED = "not_configured"
    NO_PREFERENCE = "no_preference"
    RECORDED_NOT_APPLIED = "recorded_not_applied"
    NOTHING_TO_CYCLE = "nothing_to_cycle"
    CANCELLED = "cancelled"
    APPLY_FAILED = "apply_failed"
    ADDED = "added"
    UNCHANGED = "unchanged"
    RESET = "reset"


# Outcomes the host should surface as warnings.
WARNING_STATUSES = frozenset({
    DispatchStatus.NOT_CONFIGURED,
    DispatchStatus.NO_PREFERENCE,
    DispatchStatus.NOTHING_TO_CYCLE,
    DispatchStatus.CANCELLED,
    DispatchStatus.APPLY_FAILED,
})


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    mode: Optional[Mode] = None
    item: Optional[str] = None
    message: str = ""

    @property
    def applied(self) -> bool:
        return self.status is DispatchStatus.APPLIED

    @property
    def is_warning(self) -> bool:
        return self.status in WARNING_STATUSES

"""Turn host mode-change events and user commands into theme applications.

// [LAW:locality-or-seam] All "what happens when the mode changes" logic lives here.
// [LAW:single-enforcer] _apply() is the only caller of the apply collaborator.

Two kinds of entry point:

- on_mode_changed() runs inside the host's notification callback. It must
  never block, so it never prompts: it applies the saved choice or warns.
- choose_explicit(), cycle_recent(), reset() are user commands and may prompt.

All state (the last seen mode, the enabled flag) lives on the instance.
Hosts construct one dispatcher per process and route every event to it.
"""

from __future__ import annotations

import logging
from typing import Optional

from appearance_theme.app.collaborators import (
    Confirm,
    CurrentModeProvider,
    DispatchResult,
    DispatchStatus,
    ThemeApplier,
)
from appearance_theme.app.selection_engine import SelectionEngine
from appearance_theme.core.errors import NoCandidatesConfigured, PromptCancelled
from appearance_theme.core.modes import ALL_MODES, Mode

logger = logging.getLogger(__name__)


class ChangeDispatcher:
    def __init__(
        self,
        engine: SelectionEngine,
        applier: ThemeApplier,
        current_mode: CurrentModeProvider,
        enabled: bool = True,
    ) -> None:
        self.engine = engine
        self.applier = applier
        self._current_mode = current_mode
        self._enabled = enabled
        self._last_seen: Optional[Mode] = None

    @property
    def store(self):
        return self.engine.store

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_seen(self) -> Optional[Mode]:
        return self._last_seen

    def current_mode(self) -> Mode:
        return Mode.parse(self._current_mode())

    # ─── Host notification path ───────────────────────────────────────────

    def on_mode_changed(self, mode) -> DispatchResult:
        """Handle the host's appearance signal. Never prompts."""
        mode = Mode.parse(mode)
        if not self._enabled:
            logger.debug("Ignoring %s notification while disabled", mode.value)
            return DispatchResult(DispatchStatus.DISABLED, mode)
        if mode == self._last_seen:
            logger.debug("Debounced repeated %s notification", mode.value)
            return DispatchResult(DispatchStatus.DEBOUNCED, mode)
        self._last_seen = mode
        return self._apply_saved(mode)

    def apply_current(self) -> DispatchResult:
        """Re-apply the saved theme for the live mode, ignoring debounce."""
        mode = self.current_mode()
        self._last_seen = mode
        return self._apply_saved(mode)

    def _apply_saved(self, mode: Mode) -> DispatchResult:
        if not self.engine.available_candidates(mode):
            return self._warn(
                DispatchStatus.NOT_CONFIGURED,
                mode,
                f"No {mode.value} themes configured; add one with add-theme",
            )
        recent = self.store.most_recent(mode)
        if recent is None:
            return self._warn(
                DispatchStatus.NO_PREFERENCE,
                mode,
                f"No {mode.value} theme preference saved, pick one manually with choose-theme",
            )
        return self._apply(mode, recent)

    # ─── User commands ────────────────────────────────────────────────────

    def choose_explicit(self, mode=None) -> DispatchResult:
        """Prompt for a theme for mode (default: live mode) and apply it if that mode is live."""
        target = Mode.parse(mode) if mode is not None else self.current_mode()
        try:
            item = self.engine.select(target, force_prompt=True)
        except NoCandidatesConfigured as e:
            return self._warn(DispatchStatus.NOT_CONFIGURED, target, str(e))
        except PromptCancelled as e:
            return self._warn(DispatchStatus.CANCELLED, target, str(e) or "Selection cancelled")

        live = self.current_mode()
        if target != live:
            return DispatchResult(
                DispatchStatus.RECORDED_NOT_APPLIED,
                target,
                item,
                f"Saved {item!r} for {target.value} mode; not applied because the system is in {live.value} mode",
            )
        return self._apply(target, item)

    def cycle_recent(self, direction: int = 1) -> DispatchResult:
        """Promote the next (+1) or last (-1) recent theme of the live mode and apply it.

        Rotate-by-one: with two saved themes, repeated cycling alternates.
        With no saved themes this falls back to a prompt.
        """
        mode = self.current_mode()
        recency = self.store.recency_list(mode)
        if not recency:
            try:
                item = self.engine.select(mode, force_prompt=True)
            except NoCandidatesConfigured as e:
                return self._warn(DispatchStatus.NOT_CONFIGURED, mode, str(e))
            except PromptCancelled as e:
                return self._warn(DispatchStatus.CANCELLED, mode, str(e) or "Selection cancelled")
            return self._apply(mode, item)
        if len(recency) == 1:
            return self._warn(
                DispatchStatus.NOTHING_TO_CYCLE,
                mode,
                f"Only one recent {mode.value} theme ({recency[0]!r}); nothing to cycle",
            )
        item = recency[1] if direction >= 0 else recency[-1]
        self.store.record_choice(mode, item)
        return self._apply(mode, item)

    def add_candidate(self, mode, item: str) -> DispatchResult:
        mode = Mode.parse(mode)
        if self.engine.candidates.add(mode, item):
            return DispatchResult(
                DispatchStatus.ADDED, mode, item, f"Added {item!r} to {mode.value} themes"
            )
        return DispatchResult(
            DispatchStatus.UNCHANGED, mode, item, f"{item!r} is already a {mode.value} theme"
        )

    def reset(self, confirm: Confirm) -> DispatchResult:
        """Clear all saved preferences once confirm() agrees."""
        if not confirm("Forget all saved theme preferences?"):
            return DispatchResult(DispatchStatus.CANCELLED, message="Reset cancelled")
        self.store.clear()
        self._last_seen = None
        logger.info("Theme preferences reset")
        return DispatchResult(DispatchStatus.RESET, message="Theme preferences reset")

    def enable(self) -> DispatchResult:
        """Start reacting to notifications and apply the live mode's theme now."""
        self._enabled = True
        self._last_seen = None
        return self.on_mode_changed(self.current_mode())

    def disable(self) -> DispatchResult:
        self._enabled = False
        self._last_seen = None
        return DispatchResult(DispatchStatus.DISABLED, message="Automatic theme switching disabled")

    # ─── Queries ──────────────────────────────────────────────────────────

    def list_recent(self, mode=None) -> list[str]:
        target = Mode.parse(mode) if mode is not None else self.current_mode()
        return self.store.recency_list(target)

    def show_preferences(self) -> dict:
        return {
            "enabled": self._enabled,
            "last_seen": self._last_seen.value if self._last_seen else None,
            "modes": {
                mode.value: {
                    "candidates": self.engine.available_candidates(mode),
                    "recent": self.store.recency_list(mode),
                }
                for mode in ALL_MODES
            },
        }

    # ─── Internals ────────────────────────────────────────────────────────

    def _apply(self, mode: Mode, item: str) -> DispatchResult:
        try:
            self.applier.apply(item)
        except Exception as e:
            logger.exception("Failed to apply %s theme %r", mode.value, item)
            return DispatchResult(
                DispatchStatus.APPLY_FAILED, mode, item, f"Failed to apply {item!r}: {e}"
            )
        logger.info("Applied %s theme %r", mode.value, item)
        return DispatchResult(DispatchStatus.APPLIED, mode, item, f"Theme: {item}")

    def _warn(self, status: DispatchStatus, mode: Mode, message: str) -> DispatchResult:
        logger.warning(message)
        return DispatchResult(status, mode, message=message)

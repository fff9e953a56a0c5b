"""Textual integration: a Textual app as both host and apply target.

// [LAW:one-way-deps] Depends on the dispatcher. No upward deps.
// [LAW:locality-or-seam] All Textual theme wiring here; the app just delegates.

Usage inside an App subclass:

    self._theme_bridge = ThemeModeBridge(self, store, candidates)
    ...
    def on_system_appearance(self, dark: bool) -> None:
        self._theme_bridge.notify(dark)
"""

from __future__ import annotations

import logging
from typing import Optional

from textual.app import App

from appearance_theme.app.candidates import Candidates
from appearance_theme.app.collaborators import DispatchResult
from appearance_theme.app.dispatcher import ChangeDispatcher
from appearance_theme.app.preference_store import PreferenceStore
from appearance_theme.app.selection_engine import SelectionEngine
from appearance_theme.core.errors import ApplyFailed, PromptCancelled
from appearance_theme.core.modes import Mode

logger = logging.getLogger(__name__)


class TextualThemeApplier:
    """Apply by setting app.theme. Unknown theme names raise ApplyFailed."""

    def __init__(self, app: App) -> None:
        self.app = app

    def apply(self, item: str) -> None:
        if item not in self.app.available_themes:
            raise ApplyFailed(f"Theme {item!r} is not registered with the app")
        if self.app.theme != item:
            self.app.theme = item


def _no_prompt(mode, candidates, default_hint):
    # Textual hosts pick themes through their own UI and call record_choice.
    raise PromptCancelled("Interactive selection is not available in this app")


class ThemeModeBridge:
    """Feeds the app's appearance signal to a dispatcher and tracks the live mode."""

    def __init__(
        self,
        app: App,
        store: PreferenceStore,
        candidates: Candidates,
        prompt=None,
    ) -> None:
        self.app = app
        self._mode: Optional[Mode] = None
        engine = SelectionEngine(store, candidates, prompt or _no_prompt)
        self.dispatcher = ChangeDispatcher(engine, TextualThemeApplier(app), self.current_mode)

    def current_mode(self) -> Mode:
        """Last notified mode, else the darkness of the app's active theme."""
        if self._mode is not None:
            return self._mode
        return Mode.DARK if self.app.current_theme.dark else Mode.LIGHT

    def notify(self, dark: bool) -> DispatchResult:
        self._mode = Mode.DARK if dark else Mode.LIGHT
        result = self.dispatcher.on_mode_changed(self._mode)
        if result.is_warning:
            self.app.notify(result.message, severity="warning")
        return result


def cycle_theme(app: App, bridge: ThemeModeBridge, direction: int) -> None:
    """Cycle to the next (+1) or previous (-1) recent theme of the live mode."""
    result = bridge.dispatcher.cycle_recent(direction)
    severity = "warning" if result.is_warning else "information"
    app.notify(result.message, severity=severity)

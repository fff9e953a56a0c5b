"""Decide which theme to use for a mode.

The fast path returns the cached choice with no prompt and no write. Only
an empty recency list or force_prompt=True reaches the prompt collaborator.
"""

from __future__ import annotations

import logging

from appearance_theme.app.candidates import Candidates
from appearance_theme.app.collaborators import SelectionPrompt
from appearance_theme.app.preference_store import PreferenceStore
from appearance_theme.core.errors import NoCandidatesConfigured, PromptCancelled, UnknownMode
from appearance_theme.core.modes import Mode

logger = logging.getLogger(__name__)


class SelectionEngine:
    def __init__(
        self,
        store: PreferenceStore,
        candidates: Candidates,
        prompt: SelectionPrompt,
    ) -> None:
        self.store = store
        self.candidates = candidates
        self._prompt = prompt

    def available_candidates(self, mode: Mode) -> list[str]:
        if not isinstance(mode, Mode):
            raise UnknownMode(mode)
        return self.candidates.available(mode)

    def select(self, mode: Mode, force_prompt: bool = False) -> str:
        """Return the theme to use for mode, prompting when needed.

        Raises NoCandidatesConfigured when a prompt is needed but mode has no
        candidates, and PromptCancelled when the user aborts or the prompt
        itself fails. Neither case touches the recency list.
        """
        if not isinstance(mode, Mode):
            raise UnknownMode(mode)
        recent = self.store.most_recent(mode)
        if not force_prompt and recent is not None:
            return recent

        candidates = self.available_candidates(mode)
        if not candidates:
            raise NoCandidatesConfigured(mode)

        try:
            choice = self._prompt(mode, candidates, recent)
        except PromptCancelled:
            raise
        except Exception as e:
            logger.exception("Theme prompt for %s mode failed", mode.value)
            raise PromptCancelled(f"Selection failed: {e}") from e
        if not choice:
            raise PromptCancelled(f"No {mode.value} theme selected")

        self.store.record_choice(mode, choice)
        logger.info("Selected %s theme %r", mode.value, choice)
        return choice

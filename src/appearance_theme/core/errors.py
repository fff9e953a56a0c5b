"""Error taxonomy for the preference store and selection engine.

// [LAW:one-source-of-truth] Every failure the core can signal is named here.

Storage and configuration errors are recovered where they occur and logged.
UnknownMode is the only one allowed to escape to the host, since it means a
collaborator handed us something that is not a mode.
"""


class AppearanceThemeError(Exception):
    """Base class for all appearance-theme errors."""


class CorruptState(AppearanceThemeError):
    """Persisted preference data could not be parsed."""


class PersistenceFailure(AppearanceThemeError):
    """Writing preference data failed. In-memory state stays authoritative."""


class UnknownMode(AppearanceThemeError, ValueError):
    """A value outside {light, dark} was used as a mode."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown appearance mode: {value!r}")
        self.value = value


class NoCandidatesConfigured(AppearanceThemeError):
    """The candidate list for a mode is empty."""

    def __init__(self, mode) -> None:
        super().__init__(f"No themes configured for {mode.value} mode")
        self.mode = mode


class PromptCancelled(AppearanceThemeError):
    """The user aborted a selection prompt."""


class ApplyFailed(AppearanceThemeError):
    """The apply collaborator could not load a theme."""

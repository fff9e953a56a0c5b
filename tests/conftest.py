"""Shared fixtures for appearance-theme tests."""

import pytest

from appearance_theme.app.candidates import Candidates
from appearance_theme.app.dispatcher import ChangeDispatcher
from appearance_theme.app.preference_store import PreferenceStore
from appearance_theme.app.selection_engine import SelectionEngine
from appearance_theme.core.modes import Mode
from tests.harness.fakes import FakePrompt, FixedMode, MemoryBlobStore, RecordingApplier


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep settings, state and logs inside tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setenv("APPEARANCE_THEME_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("APPEARANCE_THEME_STATE", raising=False)
    monkeypatch.delenv("APPEARANCE_THEME_MODE", raising=False)
    monkeypatch.delenv("APPEARANCE_THEME_LOG_FILE", raising=False)
    monkeypatch.delenv("APPEARANCE_THEME_LOG_LEVEL", raising=False)


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def blob():
    return MemoryBlobStore()


@pytest.fixture
def store(blob):
    return PreferenceStore(blob)


@pytest.fixture
def candidates():
    return Candidates({Mode.LIGHT: ["a", "b"], Mode.DARK: ["c", "d"]})


@pytest.fixture
def prompt():
    return FakePrompt()


@pytest.fixture
def applier():
    return RecordingApplier()


@pytest.fixture
def live_mode():
    return FixedMode(Mode.DARK)


@pytest.fixture
def engine(store, candidates, prompt):
    return SelectionEngine(store, candidates, prompt)


@pytest.fixture
def dispatcher(engine, applier, live_mode):
    return ChangeDispatcher(engine, applier, live_mode)

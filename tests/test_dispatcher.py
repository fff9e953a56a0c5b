"""Tests for ChangeDispatcher: debounce, notification path, and user commands."""

import logging

import pytest

from appearance_theme.app.candidates import Candidates
from appearance_theme.app.collaborators import DispatchStatus
from appearance_theme.app.dispatcher import ChangeDispatcher
from appearance_theme.app.selection_engine import SelectionEngine
from appearance_theme.core.errors import UnknownMode
from appearance_theme.core.modes import Mode

from tests.harness.fakes import FixedMode, RecordingApplier


class TestOnModeChanged:
    def test_no_saved_preference_warns(self, dispatcher, applier, prompt, caplog):
        with caplog.at_level(logging.WARNING):
            result = dispatcher.on_mode_changed(Mode.DARK)
        assert result.status is DispatchStatus.NO_PREFERENCE
        assert applier.applied == []
        assert prompt.calls == []
        assert any("no dark theme preference saved" in r.message.lower() for r in caplog.records)

    def test_explicit_choice_then_notification_applies(self, dispatcher, applier, prompt, store, live_mode):
        live_mode.mode = Mode.LIGHT
        prompt.answers = ["c"]
        result = dispatcher.choose_explicit(Mode.DARK)
        assert result.status is DispatchStatus.RECORDED_NOT_APPLIED
        assert store.most_recent(Mode.DARK) == "c"

        result = dispatcher.on_mode_changed(Mode.DARK)
        assert result.status is DispatchStatus.APPLIED
        assert applier.applied == ["c"]
        assert len(prompt.calls) == 1

    def test_unconfigured_mode_warns(self, store, prompt, applier, live_mode, caplog):
        store.record_choice(Mode.LIGHT, "kept")
        engine = SelectionEngine(store, Candidates({Mode.LIGHT: [], Mode.DARK: ["c"]}), prompt)
        dispatcher = ChangeDispatcher(engine, applier, live_mode)

        with caplog.at_level(logging.WARNING):
            result = dispatcher.on_mode_changed(Mode.LIGHT)

        assert result.status is DispatchStatus.NOT_CONFIGURED
        assert applier.applied == []
        assert store.recency_list(Mode.LIGHT) == ["kept"]
        assert any("no light themes configured" in r.message.lower() for r in caplog.records)

    def test_repeated_notification_applies_once(self, dispatcher, applier, store):
        store.record_choice(Mode.DARK, "c")
        first = dispatcher.on_mode_changed(Mode.DARK)
        second = dispatcher.on_mode_changed(Mode.DARK)
        assert first.status is DispatchStatus.APPLIED
        assert second.status is DispatchStatus.DEBOUNCED
        assert applier.applied == ["c"]

    def test_flap_reapplies_each_mode(self, dispatcher, applier, store):
        store.record_choice(Mode.DARK, "c")
        store.record_choice(Mode.LIGHT, "a")
        for mode in [Mode.DARK, Mode.LIGHT, Mode.LIGHT, Mode.DARK]:
            dispatcher.on_mode_changed(mode)
        assert applier.applied == ["c", "a", "c"]

    def test_warning_still_updates_last_seen(self, dispatcher):
        dispatcher.on_mode_changed(Mode.DARK)
        assert dispatcher.last_seen is Mode.DARK
        assert dispatcher.on_mode_changed(Mode.DARK).status is DispatchStatus.DEBOUNCED

    def test_never_prompts(self, dispatcher, prompt):
        for mode in [Mode.DARK, Mode.LIGHT, Mode.DARK]:
            dispatcher.on_mode_changed(mode)
        assert prompt.calls == []

    def test_accepts_mode_names(self, dispatcher, store, applier):
        store.record_choice(Mode.DARK, "c")
        assert dispatcher.on_mode_changed("Dark").applied
        assert applier.applied == ["c"]

    def test_unknown_mode_is_loud(self, dispatcher):
        with pytest.raises(UnknownMode):
            dispatcher.on_mode_changed("sepia")

    def test_apply_failure_keeps_recency(self, engine, store, live_mode, caplog):
        store.record_choice(Mode.DARK, "c")
        dispatcher = ChangeDispatcher(engine, RecordingApplier(fail=True), live_mode)
        with caplog.at_level(logging.ERROR):
            result = dispatcher.on_mode_changed(Mode.DARK)
        assert result.status is DispatchStatus.APPLY_FAILED
        assert result.is_warning
        assert store.recency_list(Mode.DARK) == ["c"]
        assert any("failed to apply" in r.message.lower() for r in caplog.records)

    def test_disabled_ignores_notifications(self, dispatcher, applier, store):
        store.record_choice(Mode.DARK, "c")
        dispatcher.disable()
        result = dispatcher.on_mode_changed(Mode.DARK)
        assert result.status is DispatchStatus.DISABLED
        assert dispatcher.last_seen is None
        assert applier.applied == []


class TestChooseExplicit:
    def test_applies_when_target_is_live(self, dispatcher, prompt, applier, store):
        prompt.answers = ["d"]
        result = dispatcher.choose_explicit(Mode.DARK)
        assert result.status is DispatchStatus.APPLIED
        assert applier.applied == ["d"]
        assert store.most_recent(Mode.DARK) == "d"

    def test_defaults_to_live_mode(self, dispatcher, prompt, applier):
        prompt.answers = ["c"]
        result = dispatcher.choose_explicit()
        assert result.mode is Mode.DARK
        assert applier.applied == ["c"]

    def test_always_prompts_even_with_saved_choice(self, dispatcher, prompt, store):
        store.record_choice(Mode.DARK, "c")
        prompt.answers = ["d"]
        dispatcher.choose_explicit(Mode.DARK)
        assert prompt.calls == [(Mode.DARK, ["c", "d"], "c")]

    def test_other_mode_recorded_not_applied(self, dispatcher, prompt, applier, store):
        prompt.answers = ["a"]
        result = dispatcher.choose_explicit(Mode.LIGHT)
        assert result.status is DispatchStatus.RECORDED_NOT_APPLIED
        assert "dark mode" in result.message
        assert applier.applied == []
        assert store.most_recent(Mode.LIGHT) == "a"

    def test_cancel_reports_cancelled(self, dispatcher, prompt, applier, store):
        prompt.answers = [None]
        result = dispatcher.choose_explicit(Mode.DARK)
        assert result.status is DispatchStatus.CANCELLED
        assert applier.applied == []
        assert store.recency_list(Mode.DARK) == []

    def test_prompt_failure_reports_cancelled(self, store, candidates, applier, live_mode, caplog):
        def terminal_gone(mode, candidates, default_hint):
            raise OSError("terminal went away")

        engine = SelectionEngine(store, candidates, terminal_gone)
        dispatcher = ChangeDispatcher(engine, applier, live_mode)
        with caplog.at_level(logging.WARNING):
            result = dispatcher.choose_explicit(Mode.DARK)

        assert result.status is DispatchStatus.CANCELLED
        assert "terminal went away" in result.message
        assert applier.applied == []
        assert store.recency_list(Mode.DARK) == []
        assert any(r.exc_info for r in caplog.records)

    def test_no_candidates_reports_not_configured(self, store, prompt, applier, live_mode):
        dispatcher = ChangeDispatcher(SelectionEngine(store, Candidates(), prompt), applier, live_mode)
        result = dispatcher.choose_explicit(Mode.DARK)
        assert result.status is DispatchStatus.NOT_CONFIGURED
        assert prompt.calls == []


class TestCycleRecent:
    def test_forward_promotes_second(self, dispatcher, store, applier):
        store.record_choice(Mode.DARK, "d")
        store.record_choice(Mode.DARK, "c")
        assert store.recency_list(Mode.DARK) == ["c", "d"]

        result = dispatcher.cycle_recent()
        assert result.applied
        assert store.recency_list(Mode.DARK) == ["d", "c"]
        assert applier.applied == ["d"]

    def test_two_items_alternate(self, dispatcher, store, applier):
        store.record_choice(Mode.DARK, "d")
        store.record_choice(Mode.DARK, "c")
        for _ in range(3):
            dispatcher.cycle_recent(1)
        assert applier.applied == ["d", "c", "d"]

    def test_backward_promotes_last(self, dispatcher, store, applier):
        for item in ["x", "y", "z"]:
            store.record_choice(Mode.DARK, item)
        dispatcher.cycle_recent(-1)
        assert store.recency_list(Mode.DARK) == ["x", "z", "y"]
        assert applier.applied == ["x"]

    def test_forward_with_three_is_rotate_by_one(self, dispatcher, store, applier):
        for item in ["x", "y", "z"]:
            store.record_choice(Mode.DARK, item)
        dispatcher.cycle_recent(1)
        dispatcher.cycle_recent(1)
        assert applier.applied == ["y", "z"]
        assert store.recency_list(Mode.DARK) == ["z", "y", "x"]

    def test_single_item_nothing_to_cycle(self, dispatcher, store, applier):
        store.record_choice(Mode.DARK, "c")
        result = dispatcher.cycle_recent()
        assert result.status is DispatchStatus.NOTHING_TO_CYCLE
        assert applier.applied == []

    def test_empty_falls_back_to_prompt(self, dispatcher, prompt, store, applier):
        prompt.answers = ["d"]
        result = dispatcher.cycle_recent()
        assert result.applied
        assert len(prompt.calls) == 1
        assert store.recency_list(Mode.DARK) == ["d"]
        assert applier.applied == ["d"]

    def test_empty_with_failing_prompt_reports_cancelled(self, store, candidates, applier, live_mode):
        def broken(mode, candidates, default_hint):
            raise RuntimeError("no tty")

        dispatcher = ChangeDispatcher(SelectionEngine(store, candidates, broken), applier, live_mode)
        result = dispatcher.cycle_recent()
        assert result.status is DispatchStatus.CANCELLED
        assert store.recency_list(Mode.DARK) == []
        assert applier.applied == []

    def test_uses_live_mode(self, dispatcher, store, applier, live_mode):
        live_mode.mode = Mode.LIGHT
        store.record_choice(Mode.LIGHT, "b")
        store.record_choice(Mode.LIGHT, "a")
        store.record_choice(Mode.DARK, "c")
        dispatcher.cycle_recent()
        assert applier.applied == ["b"]
        assert store.recency_list(Mode.DARK) == ["c"]


class TestOtherCommands:
    def test_add_candidate_idempotent(self, dispatcher, store, applier):
        first = dispatcher.add_candidate(Mode.LIGHT, "new")
        second = dispatcher.add_candidate("light", "new")
        assert first.status is DispatchStatus.ADDED
        assert second.status is DispatchStatus.UNCHANGED
        assert dispatcher.engine.available_candidates(Mode.LIGHT) == ["a", "b", "new"]
        assert store.recency_list(Mode.LIGHT) == []
        assert applier.applied == []

    def test_reset_requires_confirmation(self, dispatcher, store):
        store.record_choice(Mode.DARK, "c")
        result = dispatcher.reset(lambda question: False)
        assert result.status is DispatchStatus.CANCELLED
        assert store.recency_list(Mode.DARK) == ["c"]

    def test_reset_clears_and_persists(self, dispatcher, store, blob):
        store.record_choice(Mode.DARK, "c")
        dispatcher.on_mode_changed(Mode.DARK)
        questions = []
        result = dispatcher.reset(lambda question: questions.append(question) or True)
        assert result.status is DispatchStatus.RESET
        assert len(questions) == 1
        assert store.snapshot() == {}
        assert blob.data == b"{}\n"
        assert dispatcher.last_seen is None

    def test_apply_current_ignores_debounce(self, dispatcher, store, applier):
        store.record_choice(Mode.DARK, "c")
        dispatcher.on_mode_changed(Mode.DARK)
        result = dispatcher.apply_current()
        assert result.applied
        assert applier.applied == ["c", "c"]

    def test_apply_current_never_prompts(self, dispatcher, prompt):
        result = dispatcher.apply_current()
        assert result.status is DispatchStatus.NO_PREFERENCE
        assert prompt.calls == []

    def test_enable_applies_live_mode(self, dispatcher, store, applier):
        store.record_choice(Mode.DARK, "c")
        dispatcher.on_mode_changed(Mode.DARK)
        dispatcher.disable()
        assert not dispatcher.enabled
        result = dispatcher.enable()
        assert dispatcher.enabled
        assert result.applied
        assert applier.applied == ["c", "c"]

    def test_list_recent(self, dispatcher, store):
        store.record_choice(Mode.LIGHT, "a")
        store.record_choice(Mode.DARK, "c")
        assert dispatcher.list_recent() == ["c"]
        assert dispatcher.list_recent("light") == ["a"]

    def test_show_preferences(self, dispatcher, store):
        store.record_choice(Mode.DARK, "c")
        dispatcher.on_mode_changed(Mode.DARK)
        assert dispatcher.show_preferences() == {
            "enabled": True,
            "last_seen": "dark",
            "modes": {
                "light": {"candidates": ["a", "b"], "recent": []},
                "dark": {"candidates": ["c", "d"], "recent": ["c"]},
            },
        }


def test_dispatcher_state_is_per_instance(engine, applier, store):
    store.record_choice(Mode.DARK, "c")
    first = ChangeDispatcher(engine, applier, FixedMode(Mode.DARK))
    second = ChangeDispatcher(engine, applier, FixedMode(Mode.DARK))
    first.on_mode_changed(Mode.DARK)
    second.on_mode_changed(Mode.DARK)
    assert applier.applied == ["c", "c"]

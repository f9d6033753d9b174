# tests/unit/test_state.py

from datetime import UTC, datetime

import pytest

from tcrwatch.state import SPINNER_FRAMES, RunState, RunStatus


def test_initial_state_is_idle():
    state = RunState()
    assert state.is_idle
    assert not state.paused
    assert state.display_status_emoji == "👀"
    assert state.last_run_finished_at is None


def test_begin_and_finish_run():
    state = RunState()
    state.begin_run("Bar.cs")

    assert state.test_run_in_progress
    assert state.current_file == "Bar.cs"
    assert state.status is RunStatus.RESOLVING
    assert not state.is_idle

    before = datetime.now(UTC)
    state.finish_run("TestsPassed")

    assert state.is_idle
    assert state.current_file is None
    assert state.last_outcome == "TestsPassed"
    assert state.runs_completed == 1
    assert state.last_run_finished_at >= before


def test_finish_without_outcome_does_not_count():
    state = RunState()
    state.begin_run("Bar.cs")
    state.finish_run()
    assert state.runs_completed == 0
    assert not state.test_run_in_progress


def test_only_one_run_at_a_time():
    state = RunState()
    state.begin_run("A.cs")
    with pytest.raises(RuntimeError):
        state.begin_run("B.cs")


def test_toggle_pause_updates_emoji():
    state = RunState()
    assert state.toggle_pause() is True
    assert state.display_status_emoji == "⏸️"
    assert state.toggle_pause() is False
    assert state.display_status_emoji == "👀"


def test_update_status_sets_emoji():
    state = RunState()
    state.update_status(RunStatus.REVERTING)
    assert state.display_status_emoji == "⏪"


def test_spinner_cycles():
    state = RunState()
    frames = [state.advance_spinner() for _ in range(len(SPINNER_FRAMES))]
    assert frames == ["/", "-", "\\", "|"]

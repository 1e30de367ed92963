import pytest

from src.core.question_generator import get_fallback_questions
from src.core.session_machine import InterviewSessionStateMachine, StateTransitionError
from src.models.interview import ResumeData, SessionState


def _started() -> InterviewSessionStateMachine:
    machine = InterviewSessionStateMachine()
    machine.start("cand-1", get_fallback_questions())
    return machine


def test_full_walk_through_six_questions():
    machine = _started()
    assert machine.state == SessionState.ACTIVE
    assert machine.session.time_remaining_seconds == 20
    assert machine.has_incomplete_session is True

    for expected_index in range(1, 6):
        assert machine.advance() is True
        assert machine.session.current_index == expected_index
        assert machine.session.time_remaining_seconds == machine.current_question().time_limit_seconds

    assert machine.progress() == 83
    assert machine.advance() is False
    assert machine.session.current_index == 5

    assert machine.complete() is True
    assert machine.state == SessionState.COMPLETED
    assert machine.session.is_active is False
    assert machine.has_incomplete_session is False

    # Idempotent
    assert machine.complete() is False
    assert machine.state == SessionState.COMPLETED


def test_tick_only_moves_time_while_active():
    machine = _started()
    assert machine.tick(12) is True
    assert machine.session.time_remaining_seconds == 12

    assert machine.pause() is True
    assert machine.tick(3) is False
    assert machine.session.time_remaining_seconds == 12

    assert machine.resume() is True
    assert machine.tick(-4) is True
    assert machine.session.time_remaining_seconds == 0


def test_pause_and_resume_are_noops_in_wrong_state():
    machine = InterviewSessionStateMachine()
    assert machine.pause() is False
    assert machine.resume() is False

    machine = _started()
    assert machine.resume() is False
    machine.pause()
    assert machine.pause() is False
    assert machine.advance() is False


def test_start_requires_six_questions_and_no_existing_session():
    machine = InterviewSessionStateMachine()
    with pytest.raises(ValueError):
        machine.start("cand-1", get_fallback_questions()[:5])

    machine = _started()
    with pytest.raises(StateTransitionError):
        machine.start("cand-2", get_fallback_questions())


def test_clear_discards_session_and_resume_data():
    machine = _started()
    machine.set_resume_data(ResumeData(name="Ada", email="ada@example.com", phone="555"))
    machine.clear()

    assert machine.state == SessionState.UNINITIALIZED
    assert machine.session is None
    assert machine.resume_data is None
    assert machine.progress() == 0


def test_snapshot_restore_preserves_cursor_and_timer():
    machine = _started()
    machine.advance()
    machine.advance()
    machine.tick(41)
    machine.pause()

    restored = InterviewSessionStateMachine()
    restored.restore(machine.snapshot())

    assert restored.state == SessionState.PAUSED
    assert restored.session.current_index == 2
    assert restored.session.time_remaining_seconds == 41
    assert restored.has_incomplete_session is True


def test_change_callbacks_fire_and_errors_are_contained():
    machine = InterviewSessionStateMachine()
    seen = []

    def broken(_machine):
        raise RuntimeError("listener failed")

    machine.on_change(broken)
    machine.on_change(lambda m: seen.append(m.state))
    machine.start("cand-1", get_fallback_questions())
    machine.pause()

    assert seen == [SessionState.ACTIVE, SessionState.PAUSED]

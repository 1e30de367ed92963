"""
Interview Session State Machine - lifecycle of one candidate's interview.

Owns the question cursor, the remaining-time value and the
pause/active/completed flags. Holds no clock: time only moves when an
external driver calls ``tick``.
"""

import logging
from datetime import datetime
from typing import Callable, Sequence

from src.models.interview import InterviewSession, InterviewSnapshot, ResumeData, SessionState
from src.models.question import QUESTIONS_PER_INTERVIEW, InterviewQuestion

logger = logging.getLogger(__name__)


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


class InterviewSessionStateMachine:
    """
    Manages the session lifecycle using a state machine pattern.

    States:
        UNINITIALIZED → ACTIVE ⇄ PAUSED
                          ↓        ↓
                        COMPLETED (terminal, only clear() leaves it)

    Transitions that don't apply in the current state are no-ops
    and return False; only ``start`` over an existing session raises.
    """

    VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
        SessionState.UNINITIALIZED: [SessionState.ACTIVE],
        SessionState.ACTIVE: [SessionState.PAUSED, SessionState.COMPLETED, SessionState.UNINITIALIZED],
        SessionState.PAUSED: [SessionState.ACTIVE, SessionState.COMPLETED, SessionState.UNINITIALIZED],
        SessionState.COMPLETED: [SessionState.UNINITIALIZED],
    }

    def __init__(self):
        self._session: InterviewSession | None = None
        self.has_incomplete_session = False
        self.resume_data: ResumeData | None = None
        self._change_callbacks: list[Callable[["InterviewSessionStateMachine"], None]] = []

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def session(self) -> InterviewSession | None:
        """Current session, if any (a copy; mutate only through transitions)."""
        return self._session.model_copy() if self._session else None

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.UNINITIALIZED
        return self._session.state

    def current_question(self) -> InterviewQuestion | None:
        """Question currently being answered."""
        if self._session is None:
            return None
        return self._session.current_question

    def progress(self) -> int:
        """Percentage of questions already passed (0 when there is no session)."""
        if self._session is None:
            return 0
        return round(self._session.current_index / self._session.total_questions * 100)

    def _can_transition(self, new_state: SessionState) -> bool:
        return new_state in self.VALID_TRANSITIONS[self.state]

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def start(self, candidate_id: str, questions: Sequence[InterviewQuestion]) -> InterviewSession:
        """
        Start a session for a candidate.

        Raises:
            StateTransitionError: A session already exists
            ValueError: The question set is not a full interview
        """
        if self.state != SessionState.UNINITIALIZED:
            raise StateTransitionError(
                f"Invalid transition from {self.state.value} to {SessionState.ACTIVE.value}. "
                f"Clear the current session first."
            )
        if len(questions) != QUESTIONS_PER_INTERVIEW:
            raise ValueError(
                f"An interview needs exactly {QUESTIONS_PER_INTERVIEW} questions, got {len(questions)}"
            )

        questions = tuple(questions)
        self._session = InterviewSession(
            candidate_id=candidate_id,
            questions=questions,
            current_index=0,
            time_remaining_seconds=questions[0].time_limit_seconds,
            is_active=True,
            is_paused=False,
            started_at=datetime.utcnow(),
        )
        self.has_incomplete_session = True

        logger.info(f"Session started for candidate {candidate_id}: {SessionState.UNINITIALIZED.value} → {SessionState.ACTIVE.value}")
        self._notify()
        return self.session

    def pause(self) -> bool:
        """Freeze the session timer."""
        if self.state != SessionState.ACTIVE:
            return False

        self._session.is_paused = True
        logger.info(f"Session {self._session.candidate_id}: {SessionState.ACTIVE.value} → {SessionState.PAUSED.value}")
        self._notify()
        return True

    def resume(self) -> bool:
        """Unfreeze a paused session."""
        if self.state != SessionState.PAUSED:
            return False

        self._session.is_paused = False
        logger.info(f"Session {self._session.candidate_id}: {SessionState.PAUSED.value} → {SessionState.ACTIVE.value}")
        self._notify()
        return True

    def tick(self, time_remaining_seconds: float) -> bool:
        """Set the remaining time for the current question (Active only)."""
        if self.state != SessionState.ACTIVE:
            return False

        self._session.time_remaining_seconds = max(0, time_remaining_seconds)
        self._notify()
        return True

    def advance(self) -> bool:
        """Move the cursor to the next question and reset its timer."""
        if self.state != SessionState.ACTIVE or self._session.is_last_question:
            return False

        self._session.current_index += 1
        self._session.time_remaining_seconds = self._session.current_question.time_limit_seconds
        logger.info(
            f"Session {self._session.candidate_id}: question "
            f"{self._session.current_index + 1}/{self._session.total_questions}"
        )
        self._notify()
        return True

    def complete(self) -> bool:
        """Finish the session. Repeated calls are no-ops."""
        if not self._can_transition(SessionState.COMPLETED):
            return False

        old_state = self.state
        self._session.is_active = False
        self._session.is_paused = False
        self.has_incomplete_session = False
        logger.info(f"Session {self._session.candidate_id}: {old_state.value} → {SessionState.COMPLETED.value}")
        self._notify()
        return True

    def clear(self) -> None:
        """Discard the session and any uncommitted resume data."""
        old_state = self.state
        self._session = None
        self.has_incomplete_session = False
        self.resume_data = None
        logger.info(f"Session cleared: {old_state.value} → {SessionState.UNINITIALIZED.value}")
        self._notify()

    def set_resume_data(self, resume: ResumeData) -> None:
        """Hold resume fields for the candidate about to be interviewed."""
        self.resume_data = resume
        self._notify()

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def snapshot(self) -> InterviewSnapshot:
        """Serializable view of everything that must survive a reload."""
        return InterviewSnapshot(
            session=self.session,
            has_incomplete_session=self.has_incomplete_session,
            resume_data=self.resume_data.model_copy() if self.resume_data else None,
        )

    def restore(self, snapshot: InterviewSnapshot) -> None:
        """Rehydrate from a snapshot, keeping cursor and timer exactly."""
        self._session = snapshot.session.model_copy() if snapshot.session else None
        self.has_incomplete_session = snapshot.has_incomplete_session
        self.resume_data = snapshot.resume_data
        logger.info(f"Session restored in state {self.state.value}")

    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================

    def on_change(self, callback: Callable[["InterviewSessionStateMachine"], None]) -> None:
        """Register a callback invoked after every mutation."""
        self._change_callbacks.append(callback)

    def _notify(self) -> None:
        for callback in self._change_callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"State change callback error: {e}")

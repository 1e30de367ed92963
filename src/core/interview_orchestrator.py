"""
Interview Orchestrator - coordinates one candidate's interview.

This is the central coordinator for the interview process. It wires
question generation, answer evaluation and summaries to the session
state machine and candidate roster, schedules the short pause between
questions, and persists everything that must survive a reload.
"""

import logging
from typing import Awaitable, Callable

from src.config import Settings
from src.core.answer_evaluator import AnswerEvaluationService
from src.core.candidate_roster import CandidateRoster, ResumeExtractor, missing_resume_fields
from src.core.question_generator import QuestionGenerationService
from src.core.scheduling import AsyncioScheduler, Callback, ScheduledTask, TaskScheduler
from src.core.session_machine import InterviewSessionStateMachine, StateTransitionError
from src.core.summary_generator import CandidateSummaryGenerator
from src.models.candidate import Candidate, CandidateStatus, RosterSnapshot
from src.models.evaluation import Answer, mean_score
from src.models.interview import InterviewSession, InterviewSnapshot, ResumeData, SessionState
from src.models.question import InterviewQuestion
from src.storage import CANDIDATES_NAMESPACE, INTERVIEW_NAMESPACE, SnapshotStore

logger = logging.getLogger(__name__)

DEFAULT_ADVANCE_DELAY_SECONDS = 2.0


class InterviewOrchestrator:
    """
    Runs the interview flow on top of the session state machine.

    Flow:
        register_candidate → start_interview → submit_answer (×6)
                                                    ↓
                                    advance after a short delay, or
                                    finish: summary + final score

    The orchestrator coordinates between:
    - Question generation (AI with offline fallback)
    - Answer evaluation (AI with heuristic fallback)
    - Candidate summaries
    - Snapshot storage
    """

    def __init__(
        self,
        question_service: QuestionGenerationService,
        evaluation_service: AnswerEvaluationService,
        summary_generator: CandidateSummaryGenerator,
        machine: InterviewSessionStateMachine | None = None,
        roster: CandidateRoster | None = None,
        scheduler: TaskScheduler | None = None,
        store: SnapshotStore | None = None,
        advance_delay_seconds: float = DEFAULT_ADVANCE_DELAY_SECONDS,
        resume_extractor: ResumeExtractor | None = None,
    ):
        """
        Initialize the orchestrator with component dependencies.

        Args:
            question_service: Produces the six interview questions
            evaluation_service: Scores answers
            summary_generator: Writes the end-of-interview summary
            machine: Session state machine
            roster: Candidate records
            scheduler: Runs the delayed move to the next question
            store: Snapshot storage; nothing is persisted when omitted
            advance_delay_seconds: Pause between an answer and the next question
            resume_extractor: Turns uploaded resumes into contact fields
        """
        self.question_service = question_service
        self.evaluation_service = evaluation_service
        self.summary_generator = summary_generator
        self.machine = machine or InterviewSessionStateMachine()
        self.roster = roster or CandidateRoster()
        self.scheduler = scheduler or AsyncioScheduler()
        self.store = store
        self.advance_delay_seconds = advance_delay_seconds
        self.resume_extractor = resume_extractor

        # Step waiting to run after an answer; kept across pause/resume
        self._pending_step: Callback | None = None
        self._pending_task: ScheduledTask | None = None

        # Set while an answer is being scored / the interview is being closed
        self._answering = False
        self._finishing = False

        # Event callbacks
        self._answer_callbacks: list[Callable[[str, Answer], Awaitable[None]]] = []
        self._completion_callbacks: list[Callable[[Candidate], Awaitable[None]]] = []

        self.machine.on_change(lambda _machine: self._persist())

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        question_service: QuestionGenerationService,
        evaluation_service: AnswerEvaluationService,
        summary_generator: CandidateSummaryGenerator,
        scheduler: TaskScheduler | None = None,
    ) -> "InterviewOrchestrator":
        return cls(
            question_service,
            evaluation_service,
            summary_generator,
            scheduler=scheduler,
            store=SnapshotStore(settings.state_dir),
            advance_delay_seconds=settings.question_advance_delay_seconds,
        )

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def session(self) -> InterviewSession | None:
        return self.machine.session

    @property
    def state(self) -> SessionState:
        return self.machine.state

    @property
    def has_pending_step(self) -> bool:
        return self._pending_step is not None

    def current_question(self) -> InterviewQuestion | None:
        return self.machine.current_question()

    def progress(self) -> int:
        return self.machine.progress()

    # =========================================================================
    # CANDIDATES
    # =========================================================================

    def register_candidate(self, resume: ResumeData) -> Candidate:
        """
        Create a candidate from resume fields.

        Raises:
            ValueError: Name, email or phone is missing
        """
        missing = missing_resume_fields(resume)
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        candidate = self.roster.add_candidate(resume.name, resume.email, resume.phone)
        self.machine.set_resume_data(resume)
        return candidate

    async def import_resume(self, content: bytes, filename: str) -> ResumeData:
        """
        Extract contact fields from an uploaded resume.

        The result is held as uncommitted resume data until the
        candidate is registered.

        Raises:
            RuntimeError: No resume extractor is configured
        """
        if self.resume_extractor is None:
            raise RuntimeError("No resume extractor configured")

        resume = await self.resume_extractor.extract(content, filename)
        self.machine.set_resume_data(resume)

        missing = missing_resume_fields(resume)
        if missing:
            logger.info(f"Resume {filename} is missing: {', '.join(missing)}")
        return resume

    async def regenerate_summary(self, candidate_id: str) -> Candidate:
        """
        Rewrite a candidate's summary from their recorded answers.

        Raises:
            KeyError: Unknown candidate
        """
        candidate = self.roster.get(candidate_id)
        if candidate is None:
            raise KeyError(candidate_id)

        summary = await self.summary_generator.summarize(candidate.name, candidate.answers)
        updated = self.roster.update_candidate(candidate_id, summary=summary)
        self._persist()
        return updated

    # =========================================================================
    # INTERVIEW FLOW
    # =========================================================================

    async def start_interview(self, candidate_id: str) -> InterviewSession:
        """
        Generate questions and start the session.

        A candidate whose earlier session was abandoned starts over:
        answers from that attempt are discarded.

        Raises:
            KeyError: Unknown candidate
            StateTransitionError: A session is already in progress, or
                the candidate has already completed an interview
        """
        candidate = self.roster.get(candidate_id)
        if candidate is None:
            raise KeyError(candidate_id)
        if candidate.status == CandidateStatus.COMPLETED:
            raise StateTransitionError(f"Candidate {candidate_id} has already completed an interview")
        if self.state != SessionState.UNINITIALIZED:
            raise StateTransitionError(
                f"Cannot start an interview while a session is {self.state.value}"
            )

        questions = await self.question_service.generate_with_fallback()
        session = self.machine.start(candidate_id, questions)

        if candidate.answers:
            logger.info(f"Discarding {len(candidate.answers)} answers from an abandoned attempt")
            self.roster.reset_candidate(candidate_id)
            self._persist()

        logger.info(f"Interview started for candidate {candidate_id}")
        return session

    async def submit_answer(
        self,
        answer_text: str,
        time_spent_seconds: float | None = None,
    ) -> Answer:
        """
        Score the answer to the current question and queue the next step.

        Args:
            answer_text: Candidate's answer (may be empty on timeout)
            time_spent_seconds: Defaults to the time used so far on the question

        Raises:
            StateTransitionError: No active session, or the current
                question was already answered
        """
        if self.state != SessionState.ACTIVE:
            raise StateTransitionError(f"Cannot answer while session is {self.state.value}")
        if self._answering or self._finishing:
            raise StateTransitionError("An answer to the current question is already being scored")
        if self._pending_step is not None:
            raise StateTransitionError("Current question has already been answered")

        session = self.machine.session
        question = session.current_question
        if time_spent_seconds is None:
            time_spent_seconds = question.time_limit_seconds - session.time_remaining_seconds
        time_spent_seconds = max(0.0, time_spent_seconds)

        self._answering = True
        try:
            evaluation = await self.evaluation_service.evaluate_with_fallback(
                question, answer_text, time_spent_seconds
            )
        finally:
            self._answering = False

        current = self.machine.session
        if (
            current is None
            or current.candidate_id != session.candidate_id
            or current.current_index != session.current_index
            or self.state == SessionState.COMPLETED
        ):
            raise StateTransitionError("Session changed while the answer was being scored")

        answer = Answer(
            question_id=question.id,
            question_text=question.text,
            answer_text=answer_text,
            difficulty=question.difficulty,
            time_limit_seconds=question.time_limit_seconds,
            time_spent_seconds=time_spent_seconds,
            score=evaluation.score,
            feedback=evaluation.feedback,
            strengths=evaluation.strengths,
            improvements=evaluation.improvements,
            evaluated_at=evaluation.evaluated_at,
        )
        self.roster.add_answer(session.candidate_id, answer)
        self._persist()

        logger.info(
            f"Answer recorded: candidate={session.candidate_id} "
            f"question={question.id} score={answer.score}"
        )

        if session.is_last_question:
            self._schedule(self._finish)
        else:
            self._schedule(self._advance)

        for callback in self._answer_callbacks:
            try:
                await callback(session.candidate_id, answer)
            except Exception as e:
                logger.error(f"Answer callback error: {e}")

        return answer

    async def tick(self, time_remaining_seconds: float, draft_answer: str = "") -> bool:
        """
        Update the question timer.

        When time runs out, whatever the candidate has typed is submitted.
        Returns False when the session is not active.
        """
        if not self.machine.tick(time_remaining_seconds):
            return False

        if (
            self.machine.session.time_remaining_seconds <= 0
            and self._pending_step is None
            and not self._answering
        ):
            logger.info("Time expired, submitting current answer")
            await self.submit_answer(draft_answer)
        return True

    def pause(self) -> bool:
        """Pause the session; a queued step waits until resume."""
        if not self.machine.pause():
            return False
        self._cancel_pending_task()
        return True

    def resume(self) -> bool:
        if not self.machine.resume():
            return False
        if self._pending_step is not None:
            self._pending_task = self.scheduler.call_later(
                self.advance_delay_seconds, self._pending_step
            )
        return True

    async def complete_interview(self) -> Candidate | None:
        """End the interview now, scoring whatever was answered."""
        if self.state not in (SessionState.ACTIVE, SessionState.PAUSED) or self._finishing:
            return None
        self._cancel_pending_task()
        return await self._finish()

    def clear(self) -> None:
        """Abandon the current session; candidate records are kept."""
        self._cancel_pending_task()
        self._clear_pending()
        self.machine.clear()

    # =========================================================================
    # SCHEDULED STEPS
    # =========================================================================

    def _schedule(self, step: Callback) -> None:
        self._pending_step = step
        # A paused session keeps the step until resume
        if self.state == SessionState.ACTIVE:
            self._pending_task = self.scheduler.call_later(self.advance_delay_seconds, step)

    def _cancel_pending_task(self) -> None:
        if self._pending_task is not None:
            self._pending_task.cancel()
            self._pending_task = None

    def _clear_pending(self) -> None:
        self._pending_step = None
        self._pending_task = None

    async def _advance(self) -> None:
        self._clear_pending()
        self.machine.advance()

    async def _finish(self) -> Candidate | None:
        self._clear_pending()

        session = self.machine.session
        if session is None or self._finishing:
            return None

        candidate = self.roster.get(session.candidate_id)
        if candidate is None:
            logger.error(f"Finishing interview for unknown candidate {session.candidate_id}")
            self.machine.complete()
            return None

        self._finishing = True
        try:
            summary = await self.summary_generator.summarize(candidate.name, candidate.answers)
        finally:
            self._finishing = False

        current = self.machine.session
        if current is None or current.candidate_id != candidate.id:
            logger.warning(f"Session for candidate {candidate.id} was cleared before it finished")
            return None

        score = mean_score(candidate.answers)
        self.roster.complete_candidate(candidate.id, score, summary)
        self.machine.complete()

        completed = self.roster.get(candidate.id)
        logger.info(f"Interview complete for candidate {candidate.id}: score={score}")

        for callback in self._completion_callbacks:
            try:
                await callback(completed)
            except Exception as e:
                logger.error(f"Completion callback error: {e}")

        return completed

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(INTERVIEW_NAMESPACE, self.machine.snapshot())
            self.store.save(CANDIDATES_NAMESPACE, self.roster.snapshot())
        except OSError as e:
            logger.error(f"Failed to persist interview state: {e}")

    def restore(self) -> bool:
        """Rehydrate session and roster from storage. Returns True if anything was loaded."""
        if self.store is None:
            return False

        roster = self.store.load(CANDIDATES_NAMESPACE, RosterSnapshot)
        if roster is not None:
            self.roster.restore(roster)

        interview = self.store.load(INTERVIEW_NAMESPACE, InterviewSnapshot)
        if interview is not None:
            self.machine.restore(interview)
            self._requeue_answered_question()

        return roster is not None or interview is not None

    def _requeue_answered_question(self) -> None:
        """Re-queue the step lost when a reload hit between answer and advance."""
        session = self.machine.session
        if session is None or self.state == SessionState.COMPLETED:
            return

        candidate = self.roster.get(session.candidate_id)
        if candidate is None:
            return

        # Only answers given during this session count
        current_id = session.current_question.id
        answered = any(
            answer.question_id == current_id and answer.evaluated_at >= session.started_at
            for answer in candidate.answers
        )
        if not answered:
            return

        step = self._finish if session.is_last_question else self._advance
        self._schedule(step)

    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================

    def on_answer(self, callback: Callable[[str, Answer], Awaitable[None]]) -> None:
        """Register a callback for recorded answers."""
        self._answer_callbacks.append(callback)

    def on_complete(self, callback: Callable[[Candidate], Awaitable[None]]) -> None:
        """Register a callback for completed interviews."""
        self._completion_callbacks.append(callback)

"""
Interview API endpoints

Handles interview session lifecycle:
- Starting interviews
- Submitting answers
- Pausing, resuming and timer ticks
- Completing or abandoning interviews
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.api.dependencies import get_orchestrator
from src.core.interview_orchestrator import InterviewOrchestrator
from src.core.session_machine import StateTransitionError
from src.models.candidate import Candidate
from src.models.evaluation import Answer
from src.models.interview import ResumeData
from src.models.question import InterviewQuestion

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class StartRequest(BaseModel):
    """Request model for starting an interview."""
    candidate_id: str


class AnswerRequest(BaseModel):
    """Request model for submitting an answer."""
    answer_text: str = ""
    time_spent_seconds: float | None = Field(default=None, ge=0)


class TickRequest(BaseModel):
    """Timer update from the client."""
    time_remaining_seconds: float
    draft_answer: str = ""


class SessionStatusResponse(BaseModel):
    """Response for session status."""
    state: str
    candidate_id: str | None = None
    current_index: int = 0
    total_questions: int = 0
    current_question: InterviewQuestion | None = None
    time_remaining_seconds: float = 0
    progress: int = 0
    awaiting_next_question: bool = False
    has_incomplete_session: bool = False
    resume_data: ResumeData | None = None
    started_at: datetime | None = None


def _status(orchestrator: InterviewOrchestrator) -> SessionStatusResponse:
    session = orchestrator.session
    response = SessionStatusResponse(
        state=orchestrator.state.value,
        progress=orchestrator.progress(),
        awaiting_next_question=orchestrator.has_pending_step,
        has_incomplete_session=orchestrator.machine.has_incomplete_session,
        resume_data=orchestrator.machine.resume_data,
    )
    if session is not None:
        response.candidate_id = session.candidate_id
        response.current_index = session.current_index
        response.total_questions = session.total_questions
        response.current_question = session.current_question
        response.time_remaining_seconds = session.time_remaining_seconds
        response.started_at = session.started_at
    return response


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.post("/start", response_model=SessionStatusResponse)
async def start_interview(
    request: StartRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionStatusResponse:
    """
    Start the interview for a registered candidate.

    Questions come from the AI provider, or the built-in set when it
    is unavailable.
    """
    try:
        await orchestrator.start_interview(request.candidate_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Candidate not found")
    except StateTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _status(orchestrator)


@router.get("", response_model=SessionStatusResponse)
async def get_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionStatusResponse:
    """Get the current session status."""
    return _status(orchestrator)


@router.post("/answer", response_model=Answer)
async def submit_answer(
    request: AnswerRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Answer:
    """
    Submit an answer to the current question.

    The answer is scored immediately; the next question follows after
    a short delay.
    """
    try:
        return await orchestrator.submit_answer(request.answer_text, request.time_spent_seconds)
    except StateTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/tick", response_model=SessionStatusResponse)
async def tick(
    request: TickRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionStatusResponse:
    """Update the remaining time; an expired timer submits the draft answer."""
    await orchestrator.tick(request.time_remaining_seconds, request.draft_answer)
    return _status(orchestrator)


@router.post("/pause", response_model=SessionStatusResponse)
async def pause_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionStatusResponse:
    """Pause the interview timer."""
    if not orchestrator.pause():
        raise HTTPException(
            status_code=409,
            detail=f"Cannot pause interview in state: {orchestrator.state.value}"
        )
    return _status(orchestrator)


@router.post("/resume", response_model=SessionStatusResponse)
async def resume_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionStatusResponse:
    """Resume a paused interview."""
    if not orchestrator.resume():
        raise HTTPException(
            status_code=409,
            detail=f"Cannot resume interview in state: {orchestrator.state.value}"
        )
    return _status(orchestrator)


@router.post("/complete", response_model=Candidate)
async def complete_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Candidate:
    """End the interview early and score what has been answered."""
    candidate = await orchestrator.complete_interview()
    if candidate is None:
        raise HTTPException(status_code=409, detail="No interview in progress")
    return candidate


@router.delete("", response_model=SessionStatusResponse)
async def clear_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionStatusResponse:
    """Abandon the current session. Candidate records are kept."""
    orchestrator.clear()
    return _status(orchestrator)

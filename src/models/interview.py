"""
Interview session and state models for InterviewPilot
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from src.models.question import InterviewQuestion


class SessionState(str, Enum):
    """Interview session state machine states."""

    UNINITIALIZED = "uninitialized"  # No session yet
    ACTIVE = "active"  # Candidate is answering
    PAUSED = "paused"  # Timer frozen
    COMPLETED = "completed"  # Terminal, only clear() removes it


class ResumeData(BaseModel):
    """Best-effort fields extracted from a resume by an external collaborator."""

    name: str = ""
    email: str = ""
    phone: str = ""
    extracted_text: str = ""


class InterviewSession(BaseModel):
    """One candidate's interview session."""

    candidate_id: str
    questions: tuple[InterviewQuestion, ...] = Field(
        ...,
        description="Fixed ordered question set, immutable after start"
    )
    current_index: int = Field(default=0, ge=0)
    time_remaining_seconds: float = Field(default=0, ge=0)
    is_active: bool = True
    is_paused: bool = False
    started_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> InterviewQuestion:
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index >= self.total_questions - 1

    @property
    def state(self) -> SessionState:
        """Derive the state machine state from the persisted flags."""
        if not self.is_active:
            return SessionState.COMPLETED
        if self.is_paused:
            return SessionState.PAUSED
        return SessionState.ACTIVE


class InterviewSnapshot(BaseModel):
    """What survives a reload in the "interview" namespace."""

    session: InterviewSession | None = None
    has_incomplete_session: bool = False
    resume_data: ResumeData | None = None

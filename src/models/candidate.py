"""
Candidate roster models for InterviewPilot
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from src.models.evaluation import Answer


class CandidateStatus(str, Enum):
    """Where a candidate is in the interview process."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class CandidateSort(str, Enum):
    """Roster orderings."""

    SCORE = "score"  # Highest first
    NAME = "name"  # Alphabetical
    DATE = "date"  # Newest first


class Candidate(BaseModel):
    """A candidate and their interview record."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    email: str
    phone: str
    score: int = Field(default=0, ge=0, le=100)
    status: CandidateStatus = CandidateStatus.PENDING
    summary: str = ""
    answers: list[Answer] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: datetime | None = None


class RosterSnapshot(BaseModel):
    """What survives a reload in the "candidates" namespace."""

    candidates: list[Candidate] = Field(default_factory=list)

"""
Data models and schemas for InterviewPilot

Contains Pydantic models for:
- Interview questions
- Answers and evaluations
- Interview sessions
- Candidates
"""

from src.models.question import (
    Difficulty,
    InterviewQuestion,
    QUESTIONS_PER_INTERVIEW,
    TIME_LIMITS,
)
from src.models.evaluation import Answer, AnswerEvaluation, clamp_score
from src.models.interview import (
    InterviewSession,
    InterviewSnapshot,
    ResumeData,
    SessionState,
)
from src.models.candidate import Candidate, CandidateSort, CandidateStatus, RosterSnapshot

__all__ = [
    # Question
    "Difficulty",
    "InterviewQuestion",
    "QUESTIONS_PER_INTERVIEW",
    "TIME_LIMITS",
    # Evaluation
    "Answer",
    "AnswerEvaluation",
    "clamp_score",
    # Interview
    "InterviewSession",
    "InterviewSnapshot",
    "ResumeData",
    "SessionState",
    # Candidate
    "Candidate",
    "CandidateSort",
    "CandidateStatus",
    "RosterSnapshot",
]

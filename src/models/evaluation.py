"""
Evaluation models for InterviewPilot

Defines scoring structures for evaluating candidate answers.
"""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from src.models.question import Difficulty

MIN_SCORE = 0
MAX_SCORE = 100


def clamp_score(value: float) -> int:
    """Round half-up and clamp into the 0-100 score range."""
    return max(MIN_SCORE, min(MAX_SCORE, int(math.floor(value + 0.5))))


class EvaluationPayload(BaseModel):
    """Shape the provider must return for one answer evaluation."""

    model_config = ConfigDict(strict=True)

    score: float
    feedback: StrictStr
    strengths: list[StrictStr]
    improvements: list[StrictStr]


class AnswerEvaluation(BaseModel):
    """Result of evaluating one answer."""

    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    feedback: str
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    evaluated_at: datetime = Field(default_factory=datetime.utcnow)
    is_fallback: bool = Field(
        default=False,
        description="Produced by the offline heuristic rather than the AI provider"
    )


class Answer(BaseModel):
    """A candidate's answer together with its evaluation."""

    question_id: str
    question_text: str
    answer_text: str
    difficulty: Difficulty
    time_limit_seconds: int = Field(..., gt=0)
    time_spent_seconds: float = Field(..., ge=0)

    # Evaluation
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE)
    feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    evaluated_at: datetime = Field(default_factory=datetime.utcnow)


def mean_score(answers: list[Answer]) -> int:
    """Rounded mean score across answers (0 when there are none)."""
    if not answers:
        return 0
    return clamp_score(sum(a.score for a in answers) / len(answers))

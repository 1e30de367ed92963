"""
Question models for InterviewPilot
"""

from collections import Counter
from enum import Enum
from typing import Iterable

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Difficulty(str, Enum):
    """Question difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def time_limit_seconds(self) -> int:
        """Answer time allowed for this difficulty."""
        return TIME_LIMITS[self]

    @classmethod
    def normalize(cls, value: object) -> "Difficulty | None":
        """Map loosely formatted provider output ("Easy", " HARD ") to a level."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


TIME_LIMITS: dict[Difficulty, int] = {
    Difficulty.EASY: 20,
    Difficulty.MEDIUM: 60,
    Difficulty.HARD: 120,
}

QUESTIONS_PER_INTERVIEW = 6

# Canonical 2/2/2 split, in the order questions are asked
CANONICAL_DISTRIBUTION: dict[Difficulty, int] = {
    Difficulty.EASY: 2,
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 2,
}


class InterviewQuestion(BaseModel):
    """A single interview question."""

    id: str = Field(..., min_length=1, description="Unique question ID")
    text: str = Field(..., min_length=1, description="The question text")
    difficulty: Difficulty = Field(..., description="Difficulty level")
    time_limit_seconds: int = Field(..., gt=0, description="Seconds allowed to answer")

    @classmethod
    def create(cls, id: str, text: str, difficulty: Difficulty) -> "InterviewQuestion":
        """Build a question whose time limit follows from its difficulty."""
        return cls(
            id=id,
            text=text,
            difficulty=difficulty,
            time_limit_seconds=difficulty.time_limit_seconds,
        )


class GeneratedQuestionPayload(BaseModel):
    """One question as the provider returns it, before normalization."""

    id: str | int | None = None
    question: str
    difficulty: Difficulty
    time_limit: float = Field(
        ...,
        strict=True,
        validation_alias=AliasChoices("timeLimit", "time_limit", "time_limit_seconds"),
    )

    @field_validator("question")
    @classmethod
    def _non_empty_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("question text is empty")
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: object) -> Difficulty:
        level = Difficulty.normalize(value)
        if level is None:
            raise ValueError(f"unknown difficulty: {value!r}")
        return level


def difficulty_distribution(questions: Iterable[InterviewQuestion]) -> dict[Difficulty, int]:
    """Count questions per difficulty (every level present, possibly zero)."""
    counts = Counter(q.difficulty for q in questions)
    return {level: counts.get(level, 0) for level in Difficulty}

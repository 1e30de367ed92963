"""
Answer Evaluation Service for InterviewPilot

Scores a single answer:
- AI evaluation with schema validation and score clamping
- Deterministic heuristic fallback when the AI path fails
"""

import logging
from datetime import datetime

from src.core.ai_service import AIService
from src.core.decoding import decode
from src.models.evaluation import AnswerEvaluation, EvaluationPayload, clamp_score
from src.models.question import Difficulty, InterviewQuestion
from src.prompts.evaluator import EvaluatorPrompts

logger = logging.getLogger(__name__)


# Fallback heuristic weights
BASE_SCORE = 50
LENGTH_BONUSES = ((200, 15), (100, 10), (50, 5))  # (longer than N chars, bonus)
SLOW_RATIO, SLOW_PENALTY = 0.8, -10
QUICK_RATIO, QUICK_BONUS = 0.3, 5
DIFFICULTY_ADJUSTMENTS = {
    Difficulty.EASY: 10,
    Difficulty.MEDIUM: 0,
    Difficulty.HARD: -5,
}
KEYWORD_BONUS, KEYWORD_BONUS_CAP = 3, 20

TECHNICAL_KEYWORDS = (
    "function", "component", "react", "node", "javascript", "typescript",
    "api", "database", "sql", "nosql", "mongodb", "express", "async",
    "promise", "callback", "event", "state", "props", "hook", "middleware",
)

FALLBACK_FEEDBACK = (
    "Automatic evaluation (AI unavailable). Answer provided covers key concepts "
    "with reasonable depth. Consider adding more technical details and examples."
)
FALLBACK_STRENGTHS = ("Provided relevant answer", "Used appropriate terminology")
FALLBACK_IMPROVEMENTS = ("Add more technical details", "Include specific examples", "Consider edge cases")


def find_keywords(answer_text: str) -> list[str]:
    """Vocabulary terms appearing anywhere in the answer (case-insensitive)."""
    lowered = answer_text.lower()
    return [keyword for keyword in TECHNICAL_KEYWORDS if keyword in lowered]


def heuristic_score(
    question: InterviewQuestion,
    answer_text: str,
    time_spent_seconds: float,
) -> int:
    """
    Deterministic offline score.

    base + length bonus + time bonus + difficulty adjustment + keyword bonus,
    rounded and clamped to 0-100.
    """
    score = BASE_SCORE

    length = len(answer_text.strip())
    for threshold, bonus in LENGTH_BONUSES:
        if length > threshold:
            score += bonus
            break

    time_ratio = time_spent_seconds / question.time_limit_seconds
    if time_ratio > SLOW_RATIO:
        score += SLOW_PENALTY
    elif time_ratio < QUICK_RATIO:
        score += QUICK_BONUS

    score += DIFFICULTY_ADJUSTMENTS[question.difficulty]

    score += min(len(find_keywords(answer_text)) * KEYWORD_BONUS, KEYWORD_BONUS_CAP)

    return clamp_score(score)


class AnswerEvaluationService:
    """
    Evaluates candidate answers.

    ``evaluate`` is the AI path and raises on any failure;
    ``evaluate_with_fallback`` always produces a score.
    """

    def __init__(self, ai_service: AIService):
        """
        Args:
            ai_service: Shared AI service
        """
        self.ai_service = ai_service
        self.prompts = EvaluatorPrompts()

    async def evaluate(
        self,
        question: InterviewQuestion,
        answer_text: str,
        time_spent_seconds: float,
    ) -> AnswerEvaluation:
        """
        Evaluate an answer with the AI provider.

        Raises:
            AIServiceError: Infra failure, PARSE_ERROR or INVALID_RESPONSE
        """
        prompt = self.prompts.generate_evaluation_prompt(question, answer_text, time_spent_seconds)
        response = await self.ai_service.generate_text(prompt, "evaluate_answer")

        payload: EvaluationPayload = decode(response, EvaluationPayload, "object").unwrap()

        evaluation = AnswerEvaluation(
            score=clamp_score(payload.score),
            feedback=payload.feedback,
            strengths=list(payload.strengths),
            improvements=list(payload.improvements),
            evaluated_at=datetime.utcnow(),
        )

        logger.info(f"Evaluation complete: question={question.id} score={evaluation.score}")
        return evaluation

    def fallback_evaluation(
        self,
        question: InterviewQuestion,
        answer_text: str,
        time_spent_seconds: float,
    ) -> AnswerEvaluation:
        """Heuristic evaluation used when the AI path is unavailable."""
        return AnswerEvaluation(
            score=heuristic_score(question, answer_text, time_spent_seconds),
            feedback=FALLBACK_FEEDBACK,
            strengths=list(FALLBACK_STRENGTHS),
            improvements=list(FALLBACK_IMPROVEMENTS),
            evaluated_at=datetime.utcnow(),
            is_fallback=True,
        )

    async def evaluate_with_fallback(
        self,
        question: InterviewQuestion,
        answer_text: str,
        time_spent_seconds: float,
    ) -> AnswerEvaluation:
        """Evaluate an answer, falling back to the heuristic on any error."""
        evaluation = None
        if not self.ai_service.offline:
            try:
                evaluation = await self.evaluate(question, answer_text, time_spent_seconds)
            except Exception as e:
                logger.warning(f"Using fallback evaluation due to AI service error: {e}")

        if evaluation is None:
            evaluation = self.fallback_evaluation(question, answer_text, time_spent_seconds)

        self.ai_service.record_score(
            name="answer_score",
            value=evaluation.score,
            comment=f"Question: {question.id}, fallback: {evaluation.is_fallback}",
        )
        return evaluation

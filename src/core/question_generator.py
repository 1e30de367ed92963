"""
Question Generation Service for InterviewPilot

Produces the fixed-size interview question set:
- AI generation with strict structural validation
- Deterministic offline fallback set
"""

import logging

from pydantic import ValidationError

from src.core.ai_service import AIService
from src.core.decoding import decode
from src.core.request_executor import AIServiceError, ErrorKind
from src.models.question import (
    CANONICAL_DISTRIBUTION,
    QUESTIONS_PER_INTERVIEW,
    Difficulty,
    GeneratedQuestionPayload,
    InterviewQuestion,
    difficulty_distribution,
)
from src.prompts.interviewer import InterviewerPrompts

logger = logging.getLogger(__name__)


FALLBACK_QUESTIONS: tuple[tuple[str, str, Difficulty], ...] = (
    ("fallback_q1", "What is the difference between useState and useEffect hooks in React?", Difficulty.EASY),
    ("fallback_q2", "Explain the concept of props drilling and how you would solve it.", Difficulty.EASY),
    ("fallback_q3", "How would you implement JWT authentication in a Node.js Express application?", Difficulty.MEDIUM),
    ("fallback_q4", "Describe how you would optimize React application performance.", Difficulty.MEDIUM),
    ("fallback_q5", "Design a scalable file upload system for a web application.", Difficulty.HARD),
    ("fallback_q6", "How would you implement real-time features in a React/Node.js application?", Difficulty.HARD),
)


def get_fallback_questions() -> list[InterviewQuestion]:
    """The canonical offline question set: always the same 6, in order."""
    return [
        InterviewQuestion.create(id=question_id, text=text, difficulty=difficulty)
        for question_id, text, difficulty in FALLBACK_QUESTIONS
    ]


class QuestionGenerationService:
    """
    Generates interview question sets.

    Semantic rejections (unparseable or invalid output) are raised, not
    retried; infra retries belong to the request executor.
    """

    def __init__(self, ai_service: AIService):
        """
        Args:
            ai_service: Shared AI service
        """
        self.ai_service = ai_service
        self.prompts = InterviewerPrompts()

    async def generate(self) -> list[InterviewQuestion]:
        """
        Generate a question set with the AI provider.

        Returns:
            Exactly 6 validated questions

        Raises:
            AIServiceError: Infra failure, PARSE_ERROR or INVALID_RESPONSE
        """
        prompt = self.prompts.generate_questions_prompt()
        response = await self.ai_service.generate_text(prompt, "generate_questions")

        raw_items = decode(response, list, "array").unwrap()

        if len(raw_items) != QUESTIONS_PER_INTERVIEW:
            raise AIServiceError(
                f"AI generated invalid number of questions: {len(raw_items)}",
                ErrorKind.INVALID_RESPONSE,
            )

        questions = [self._validate_item(item, index) for index, item in enumerate(raw_items)]

        distribution = difficulty_distribution(questions)
        if distribution != CANONICAL_DISTRIBUTION:
            logger.warning(
                "Question difficulty distribution not optimal: "
                + ", ".join(f"{level.value}={count}" for level, count in distribution.items())
            )

        logger.info(f"Generated {len(questions)} interview questions")
        return questions

    def _validate_item(self, item: object, index: int) -> InterviewQuestion:
        """Validate one provider item and normalize it into an InterviewQuestion."""
        try:
            payload = GeneratedQuestionPayload.model_validate(item)
        except ValidationError as e:
            raise AIServiceError(
                f"Invalid question structure at index {index}: {e.error_count()} error(s)",
                ErrorKind.INVALID_RESPONSE,
            ) from e

        question_id = str(payload.id).strip() if payload.id is not None else ""
        if not question_id:
            question_id = f"q{index + 1}"

        expected_limit = payload.difficulty.time_limit_seconds
        if payload.time_limit != expected_limit:
            logger.warning(
                f"Question {question_id}: time limit {payload.time_limit} does not match "
                f"{payload.difficulty.value}, using {expected_limit}s"
            )

        return InterviewQuestion.create(
            id=question_id,
            text=payload.question,
            difficulty=payload.difficulty,
        )

    async def generate_with_fallback(self) -> list[InterviewQuestion]:
        """Generate questions, falling back to the fixed set on any error."""
        if self.ai_service.offline:
            return get_fallback_questions()

        try:
            return await self.generate()
        except Exception as e:
            logger.warning(f"Using fallback questions due to AI service error: {e}")
            return get_fallback_questions()

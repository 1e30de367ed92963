"""
API Dependencies

Builds the service graph once at start-up and hands it to endpoints
through FastAPI dependency injection.
"""

from dataclasses import dataclass

from fastapi import Request

from src.config import Settings
from src.core.ai_service import AIService
from src.core.answer_evaluator import AnswerEvaluationService
from src.core.interview_orchestrator import InterviewOrchestrator
from src.core.provider import TextProvider
from src.core.question_generator import QuestionGenerationService
from src.core.scheduling import TaskScheduler
from src.core.summary_generator import CandidateSummaryGenerator


@dataclass
class ServiceContainer:
    """Every long-lived component the API needs."""

    settings: Settings
    ai_service: AIService
    orchestrator: InterviewOrchestrator

    async def close(self):
        await self.ai_service.close()


def build_container(
    settings: Settings,
    provider: TextProvider | None = None,
    scheduler: TaskScheduler | None = None,
) -> ServiceContainer:
    """
    Compose the application's services.

    Args:
        settings: Application settings
        provider: Text provider override (defaults to Gemini)
        scheduler: Scheduler override (defaults to the event loop)
    """
    ai_service = AIService.from_settings(settings, provider=provider)

    orchestrator = InterviewOrchestrator.from_settings(
        settings,
        question_service=QuestionGenerationService(ai_service),
        evaluation_service=AnswerEvaluationService(ai_service),
        summary_generator=CandidateSummaryGenerator(ai_service),
        scheduler=scheduler,
    )

    return ServiceContainer(settings=settings, ai_service=ai_service, orchestrator=orchestrator)


# ============================================================================
# DEPENDENCIES
# ============================================================================

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_orchestrator(request: Request) -> InterviewOrchestrator:
    """Get the interview orchestrator built at start-up."""
    return get_container(request).orchestrator


def get_ai_service(request: Request) -> AIService:
    """Get the shared AI service built at start-up."""
    return get_container(request).ai_service

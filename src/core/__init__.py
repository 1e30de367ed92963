"""
Core business logic modules for InterviewPilot

Contains:
- AI Service: Rate-limited, retried access to the text provider
- Question Generation: Six interview questions with an offline fallback
- Answer Evaluation: AI scoring with a heuristic fallback
- Summary Generation: End-of-interview candidate summaries
- Session State Machine: Lifecycle of one candidate's interview
- Interview Orchestrator: Ties the services to the session and roster
"""

from src.core.ai_service import AIService, AIServiceStatus
from src.core.answer_evaluator import AnswerEvaluationService
from src.core.candidate_roster import CandidateRoster
from src.core.interview_orchestrator import InterviewOrchestrator
from src.core.question_generator import QuestionGenerationService
from src.core.rate_limiter import RateLimiter
from src.core.request_executor import AIServiceError, ErrorKind, RequestExecutor
from src.core.session_machine import InterviewSessionStateMachine, StateTransitionError
from src.core.summary_generator import CandidateSummaryGenerator

__all__ = [
    "AIService",
    "AIServiceStatus",
    "AIServiceError",
    "ErrorKind",
    "RateLimiter",
    "RequestExecutor",
    "QuestionGenerationService",
    "AnswerEvaluationService",
    "CandidateSummaryGenerator",
    "CandidateRoster",
    "InterviewSessionStateMachine",
    "StateTransitionError",
    "InterviewOrchestrator",
]

"""
Candidate Summary Generator for InterviewPilot

Turns a finished interview's answers into a short narrative:
- AI-written summary when the provider is reachable
- Templated sentence from the mean score otherwise
"""

import logging

from src.core.ai_service import AIService
from src.models.evaluation import Answer, mean_score
from src.prompts.report import ReportPrompts

logger = logging.getLogger(__name__)

NO_ANSWERS_SUMMARY = "No answers provided for evaluation."


def competency_label(score: int) -> str:
    """Qualitative competency level for a mean score."""
    if score >= 80:
        return "Strong"
    elif score >= 65:
        return "Good"
    elif score >= 50:
        return "Adequate"
    else:
        return "Below expectations"


def hiring_recommendation(score: int) -> str:
    """Hiring recommendation for a mean score."""
    if score >= 75:
        return "Hire"
    elif score >= 60:
        return "Consider"
    else:
        return "No Hire"


def fallback_summary(candidate_name: str, answers: list[Answer]) -> str:
    """Deterministic summary sentence built from the mean score."""
    if not answers:
        return NO_ANSWERS_SUMMARY

    score = mean_score(answers)
    return (
        f"{candidate_name} demonstrated {competency_label(score).lower()} technical competency "
        f"with an overall score of {score}/100. Showed understanding of core concepts with room "
        f"for improvement in advanced topics. Recommendation: {hiring_recommendation(score)}."
    )


class CandidateSummaryGenerator:
    """Generates the end-of-interview candidate summary."""

    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service
        self.prompts = ReportPrompts()

    async def summarize(self, candidate_name: str, answers: list[Answer]) -> str:
        """
        Summarize a candidate's interview.

        Never raises: any provider failure yields the templated summary.
        """
        if not answers:
            return NO_ANSWERS_SUMMARY

        if self.ai_service.offline:
            return fallback_summary(candidate_name, answers)

        prompt = self.prompts.generate_summary_prompt(candidate_name, answers, mean_score(answers))

        try:
            summary = (await self.ai_service.generate_text(prompt, "generate_summary")).strip()
        except Exception as e:
            logger.warning(f"Using fallback summary due to AI service error: {e}")
            return fallback_summary(candidate_name, answers)

        if not summary:
            logger.warning("AI returned an empty summary, using fallback")
            return fallback_summary(candidate_name, answers)

        return summary

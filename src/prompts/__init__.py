"""
AI prompt templates for InterviewPilot

Contains structured prompts for:
- Question generation
- Answer evaluation
- Candidate summaries
"""

from src.prompts.interviewer import InterviewerPrompts
from src.prompts.evaluator import EvaluatorPrompts
from src.prompts.report import ReportPrompts

__all__ = [
    "InterviewerPrompts",
    "EvaluatorPrompts",
    "ReportPrompts",
]

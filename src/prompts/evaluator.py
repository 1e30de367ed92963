"""
AI Evaluator Prompt Templates

Contains the prompt for scoring one candidate answer on a 0-100 scale.
"""

from src.models.question import Difficulty, InterviewQuestion


class EvaluatorPrompts:
    """
    Prompt templates for AI evaluation of answers.

    Key principles:
    - Objective, rubric-based scoring
    - Expectations scale with difficulty
    - Identify both strengths and gaps
    """

    SYSTEM_CONTEXT = """You are an expert technical interviewer evaluating a Full Stack Developer candidate's answer.
"""

    DIFFICULTY_EXPECTATIONS = {
        Difficulty.EASY: "Expect clear basic understanding and correct fundamentals",
        Difficulty.MEDIUM: "Expect practical experience and implementation details",
        Difficulty.HARD: "Expect system thinking, trade-offs, and architectural considerations",
    }

    SCORING_GUIDELINES = """Score Guidelines:
- 90-100: Exceptional answer, demonstrates senior-level understanding
- 75-89: Good answer, shows solid understanding with minor gaps
- 60-74: Adequate answer, basic understanding but missing important details
- 40-59: Below expectations, significant gaps in knowledge
- 0-39: Poor answer, fundamental misunderstandings or no relevant content
"""

    def generate_evaluation_prompt(
        self,
        question: InterviewQuestion,
        answer_text: str,
        time_spent_seconds: float,
    ) -> str:
        """Generate prompt for evaluating an answer."""

        level = question.difficulty
        time_spent = round(time_spent_seconds)

        return f"""{self.SYSTEM_CONTEXT}
QUESTION ({level.value.upper()} - {question.time_limit_seconds}s limit):
{question.text}

CANDIDATE'S ANSWER:
{answer_text}

TIME SPENT: {time_spent} seconds (out of {question.time_limit_seconds} seconds)

Evaluate this answer based on:
1. Technical accuracy and correctness
2. Depth of knowledge demonstrated
3. Practical understanding vs theoretical knowledge
4. Communication clarity
5. Time management (considering difficulty level)

For {level.value} level questions:
- {self.DIFFICULTY_EXPECTATIONS[level]}

Return ONLY a valid JSON object in this exact format:
{{
  "score": 85,
  "feedback": "Good understanding of the concepts with practical examples. Could improve on error handling details.",
  "strengths": ["Clear explanation", "Good examples", "Understands core concepts"],
  "improvements": ["Add error handling details", "Mention performance considerations"]
}}

{self.SCORING_GUIDELINES}
Evaluate objectively and provide constructive feedback.
"""

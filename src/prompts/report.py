"""
Candidate Summary Prompt Templates

Contains the prompt for the final narrative summary of an interview.
"""

from src.models.evaluation import Answer


class ReportPrompts:
    """Prompt templates for the end-of-interview candidate summary."""

    def generate_summary_prompt(
        self,
        candidate_name: str,
        answers: list[Answer],
        average_score: int,
    ) -> str:
        """Generate prompt for summarizing a candidate's interview."""

        performance = "\n".join(
            f"""
Question {index} ({answer.difficulty.value}): {answer.question_text}
Answer: {answer.answer_text}
Score: {answer.score}/100
Time: {round(answer.time_spent_seconds)}s / {answer.time_limit_seconds}s"""
            for index, answer in enumerate(answers, start=1)
        )

        return f"""Generate a concise professional summary for candidate: {candidate_name}

Interview Performance:
{performance}

Overall Score: {average_score}/100

Generate a 2-3 sentence professional summary highlighting:
- Overall technical competency level
- Key strengths demonstrated
- Areas for improvement
- Hiring recommendation (Strong Hire / Hire / No Hire)

Return only the summary text, no JSON formatting.
"""

"""
AI Interviewer Prompt Templates

Contains the prompt for generating a full interview question set.
Wording is a replaceable template; the structure it asks for
(6 questions, 2 per difficulty, fixed time limits) is not.
"""

import json

from src.models.question import CANONICAL_DISTRIBUTION, QUESTIONS_PER_INTERVIEW, TIME_LIMITS, Difficulty


class InterviewerPrompts:
    """
    Prompt templates for the AI interviewer.

    Key principles:
    - Practical knowledge over trivia
    - Progressive difficulty from easy to hard
    - Strict JSON output
    """

    ROLE = "Full Stack Developer positions focusing on React and Node.js"

    SYSTEM_CONTEXT = f"""You are an expert technical interviewer for {ROLE}.
"""

    TOPICS = {
        Difficulty.EASY: "React basics, JavaScript fundamentals",
        Difficulty.MEDIUM: "Node.js, APIs, Database concepts",
        Difficulty.HARD: "System design, Architecture, Advanced concepts",
    }

    EXAMPLE_QUESTIONS = [
        ("What is the difference between useState and useEffect hooks in React?", Difficulty.EASY),
        ("Explain how you would handle form validation in React.", Difficulty.EASY),
        ("How would you implement authentication in a Node.js API?", Difficulty.MEDIUM),
        ("Describe how you would optimize database queries in a Node.js application.", Difficulty.MEDIUM),
        ("Design a scalable real-time chat application architecture using React and Node.js.", Difficulty.HARD),
        ("How would you handle microservices communication and error handling in a distributed system?", Difficulty.HARD),
    ]

    def generate_questions_prompt(self) -> str:
        """Generate prompt for creating a complete question set."""

        structure = "\n".join(
            f"- {count} {level.value.capitalize()} questions ({TIME_LIMITS[level]} seconds each): {self.TOPICS[level]}"
            for level, count in CANONICAL_DISTRIBUTION.items()
        )

        example = json.dumps(
            [
                {
                    "id": f"q{i}",
                    "question": text,
                    "difficulty": level.value,
                    "timeLimit": TIME_LIMITS[level],
                }
                for i, (text, level) in enumerate(self.EXAMPLE_QUESTIONS, start=1)
            ],
            indent=2,
        )

        return f"""{self.SYSTEM_CONTEXT}
Generate exactly {QUESTIONS_PER_INTERVIEW} interview questions with the following structure:
{structure}

Requirements:
- Questions should test practical knowledge, not just theory
- Include a mix of coding concepts, problem-solving, and architecture
- Make questions specific to Full Stack development with React/Node.js
- Ensure progressive difficulty from Easy to Hard

Return ONLY a valid JSON array in this exact format:
{example}

Generate {QUESTIONS_PER_INTERVIEW} new unique questions following this structure.
"""

"""
InterviewPilot - AI-assisted technical screening interviews

Runs a timed six-question interview, scores every answer and writes a
candidate summary, falling back to offline behaviour whenever the AI
provider is slow, throttled or unreachable.
"""

__version__ = "0.1.0"
__author__ = "InterviewPilot Team"

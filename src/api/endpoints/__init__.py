"""
API endpoint modules for InterviewPilot
"""

from src.api.endpoints import candidates, interview, status

__all__ = ["candidates", "interview", "status"]

"""
API layer for InterviewPilot

Contains FastAPI routers for:
- Interview session lifecycle
- Candidate roster
- AI service status
"""

from src.api.router import api_router

__all__ = ["api_router"]

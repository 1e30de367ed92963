"""
Main API router for InterviewPilot

Aggregates all API routes and provides the main application router.
"""

from fastapi import APIRouter

from src.api.endpoints import candidates, interview, status

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(
    interview.router,
    prefix="/interview",
    tags=["Interview"]
)

api_router.include_router(
    candidates.router,
    prefix="/candidates",
    tags=["Candidates"]
)

api_router.include_router(
    status.router,
    prefix="/ai",
    tags=["AI"]
)

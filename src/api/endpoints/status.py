"""
AI service status endpoints
"""

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_ai_service
from src.core.ai_service import AIService, AIServiceStatus

router = APIRouter()


@router.get("/status", response_model=AIServiceStatus)
async def get_ai_status(ai_service: AIService = Depends(get_ai_service)) -> AIServiceStatus:
    """
    Check whether the AI provider is reachable.

    Returns 503 when the provider rejects the configured credentials;
    any other failure is reported in the body since the interview
    keeps working on fallbacks.
    """
    status = await ai_service.check_availability()
    if status.auth_error:
        raise HTTPException(status_code=503, detail=status.error or "AI provider authentication failed")
    return status

"""
Candidate API endpoints

Provides the interviewer's view of the roster:
- Registering candidates from resume fields
- Searching, filtering and sorting
- Candidate detail and summaries
"""

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_orchestrator
from src.core.interview_orchestrator import InterviewOrchestrator
from src.models.candidate import Candidate, CandidateSort, CandidateStatus
from src.models.interview import ResumeData

router = APIRouter()


@router.post("", response_model=Candidate, status_code=201)
async def register_candidate(
    resume: ResumeData,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Candidate:
    """Register a candidate. Name, email and phone are required."""
    try:
        return orchestrator.register_candidate(resume)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[Candidate])
async def list_candidates(
    search: str | None = None,
    status: CandidateStatus | None = None,
    sort_by: CandidateSort = CandidateSort.SCORE,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> list[Candidate]:
    """List candidates, optionally filtered by name/email and status."""
    return orchestrator.roster.list_candidates(search=search, status=status, sort_by=sort_by)


@router.get("/{candidate_id}", response_model=Candidate)
async def get_candidate(
    candidate_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Candidate:
    """Get one candidate with their answers."""
    candidate = orchestrator.roster.get(candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return candidate


@router.post("/{candidate_id}/summary", response_model=Candidate)
async def regenerate_summary(
    candidate_id: str,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> Candidate:
    """Rewrite the candidate's summary from their recorded answers."""
    try:
        return await orchestrator.regenerate_summary(candidate_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Candidate not found")

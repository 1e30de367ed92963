"""
Candidate Roster for InterviewPilot

Keeps every candidate's record: contact details, answers, final score
and summary. Provides the search/filter/sort view interviewers use.
"""

import logging
from datetime import datetime
from typing import Any, Protocol

from src.models.candidate import Candidate, CandidateSort, CandidateStatus, RosterSnapshot
from src.models.evaluation import Answer
from src.models.interview import ResumeData

logger = logging.getLogger(__name__)

REQUIRED_RESUME_FIELDS = ("name", "email", "phone")


class ResumeExtractor(Protocol):
    """Turns an uploaded resume into plain text and best-effort contact fields."""

    async def extract(self, content: bytes, filename: str) -> ResumeData: ...


def missing_resume_fields(resume: ResumeData | None) -> list[str]:
    """Contact fields that still need to be filled in before interviewing."""
    if resume is None:
        return list(REQUIRED_RESUME_FIELDS)
    return [field for field in REQUIRED_RESUME_FIELDS if not getattr(resume, field).strip()]


class CandidateRoster:
    """In-memory candidate store, persisted through snapshots."""

    def __init__(self):
        self._candidates: dict[str, Candidate] = {}

    def add_candidate(self, name: str, email: str, phone: str) -> Candidate:
        """Register a new pending candidate."""
        candidate = Candidate(name=name.strip(), email=email.strip(), phone=phone.strip())
        self._candidates[candidate.id] = candidate
        logger.info(f"Added candidate {candidate.id}")
        return candidate.model_copy(deep=True)

    def get(self, candidate_id: str) -> Candidate | None:
        candidate = self._candidates.get(candidate_id)
        return candidate.model_copy(deep=True) if candidate else None

    def update_candidate(self, candidate_id: str, **updates: Any) -> Candidate | None:
        """Apply field updates; unknown candidates are ignored."""
        candidate = self._candidates.get(candidate_id)
        if not candidate:
            return None
        updated = Candidate.model_validate({**candidate.model_dump(), **updates})
        self._candidates[candidate_id] = updated
        return updated.model_copy(deep=True)

    def add_answer(self, candidate_id: str, answer: Answer) -> bool:
        """Append an answer; the first one moves the candidate in progress."""
        candidate = self._candidates.get(candidate_id)
        if not candidate:
            logger.warning(f"Answer for unknown candidate {candidate_id} dropped")
            return False

        candidate.answers.append(answer)
        if candidate.status == CandidateStatus.PENDING:
            candidate.status = CandidateStatus.IN_PROGRESS
        return True

    def complete_candidate(self, candidate_id: str, score: int, summary: str) -> bool:
        """Record the final score and summary."""
        candidate = self._candidates.get(candidate_id)
        if not candidate:
            return False

        candidate.status = CandidateStatus.COMPLETED
        candidate.score = score
        candidate.summary = summary
        candidate.completed_at = datetime.utcnow()
        logger.info(f"Candidate {candidate_id} completed with score {score}")
        return True

    def reset_candidate(self, candidate_id: str) -> bool:
        """Drop answers and results so the candidate can interview again."""
        candidate = self._candidates.get(candidate_id)
        if not candidate:
            return False

        candidate.answers = []
        candidate.status = CandidateStatus.PENDING
        candidate.score = 0
        candidate.summary = ""
        candidate.completed_at = None
        return True

    def list_candidates(
        self,
        search: str | None = None,
        status: CandidateStatus | None = None,
        sort_by: CandidateSort = CandidateSort.SCORE,
    ) -> list[Candidate]:
        """Filtered and sorted view of the roster."""
        candidates = list(self._candidates.values())

        if search:
            needle = search.lower()
            candidates = [
                c for c in candidates
                if needle in c.name.lower() or needle in c.email.lower()
            ]

        if status is not None:
            candidates = [c for c in candidates if c.status == status]

        if sort_by == CandidateSort.SCORE:
            candidates.sort(key=lambda c: c.score, reverse=True)
        elif sort_by == CandidateSort.NAME:
            candidates.sort(key=lambda c: c.name.lower())
        elif sort_by == CandidateSort.DATE:
            candidates.sort(key=lambda c: c.created_at, reverse=True)

        return [c.model_copy(deep=True) for c in candidates]

    def clear_all(self) -> None:
        self._candidates.clear()

    def __len__(self) -> int:
        return len(self._candidates)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def snapshot(self) -> RosterSnapshot:
        return RosterSnapshot(candidates=[c.model_copy(deep=True) for c in self._candidates.values()])

    def restore(self, snapshot: RosterSnapshot) -> None:
        self._candidates = {c.id: c.model_copy(deep=True) for c in snapshot.candidates}
        logger.info(f"Restored {len(self._candidates)} candidates")

"""
Persistence for InterviewPilot

Stores the interview session and candidate roster as snapshots that
survive a restart.
"""

from src.storage.snapshot_store import CANDIDATES_NAMESPACE, INTERVIEW_NAMESPACE, SnapshotStore

__all__ = ["SnapshotStore", "INTERVIEW_NAMESPACE", "CANDIDATES_NAMESPACE"]

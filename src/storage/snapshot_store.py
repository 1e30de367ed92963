"""
Snapshot persistence for InterviewPilot

Each namespace ("interview", "candidates") is stored as one JSON
document. Writes go to a temporary file first and are then moved into
place, so a crash never leaves a half-written snapshot behind.
"""

import logging
import os
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

INTERVIEW_NAMESPACE = "interview"
CANDIDATES_NAMESPACE = "candidates"


class SnapshotStore:
    """File-backed store of opaque serialized snapshots."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path(self, namespace: str) -> Path:
        return self.directory / f"{namespace}.json"

    def save(self, namespace: str, snapshot: BaseModel) -> None:
        """Replace a namespace's snapshot."""
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(namespace)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(snapshot.model_dump_json(), encoding="utf-8")
        os.replace(tmp_path, path)

    def load(self, namespace: str, model: type[M]) -> M | None:
        """
        Load a namespace's snapshot.

        Returns None when nothing was saved yet or the stored document
        no longer matches the model.
        """
        path = self._path(namespace)
        if not path.exists():
            return None

        try:
            return model.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, ValueError) as e:
            logger.error(f"Discarding unreadable {namespace} snapshot: {e}")
            return None

    def clear(self, namespace: str) -> None:
        self._path(namespace).unlink(missing_ok=True)

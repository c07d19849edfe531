"""
File-backed job list for use without a server.

Mirrors the original browser-only mode: no accounts, no validation, and
deleting really removes the record.
"""
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .state import TrackerState

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "company", "position", "status", "dateApplied", "salary", "location", "jobUrl", "notes", "priority", "tags",
)


def _blank(field: str):
    return [] if field == "tags" else ""


class LocalJobStore:
    def __init__(self, path):
        self.path = Path(path)

    def all(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        jobs = json.loads(text)
        if not isinstance(jobs, list):
            raise ValueError(f"{self.path} does not contain a job list")
        return jobs

    def save_all(self, jobs: List[Dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(jobs, indent=2), encoding="utf-8")

    def _next_id(self, jobs: List[Dict[str, Any]]) -> str:
        taken = {str(job.get("id")) for job in jobs}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def add(self, job: Dict[str, Any]) -> Dict[str, Any]:
        state = TrackerState(self.all())
        # Only missing values are blanked; 0 is a real salary
        record = {field: _blank(field) if job.get(field) is None else job[field] for field in EDITABLE_FIELDS}
        record["id"] = self._next_id(state.jobs)
        record["dateAdded"] = datetime.utcnow().isoformat()
        state.upsert(record)
        self.save_all(state.jobs)
        logger.debug("Added local job %s", record["id"])
        return record

    def update(self, job_id, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        state = TrackerState(self.all())
        job = state.find(job_id)
        if job is None:
            return None
        updated = {**job, **{k: v for k, v in fields.items() if k in EDITABLE_FIELDS}}
        state.upsert(updated)
        self.save_all(state.jobs)
        return updated

    def delete(self, job_id) -> bool:
        state = TrackerState(self.all())
        if not state.remove(job_id):
            return False
        self.save_all(state.jobs)
        return True

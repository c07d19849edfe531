import json
from datetime import date
from typing import Any, Dict, List, Optional

STATUSES = ("applied", "interview", "offer", "rejected", "withdrawn")


def _job_id(job: Dict[str, Any]):
    # Server records carry "id"; records from the legacy browser export may use "_id"
    return job.get("id", job.get("_id"))


def _applied_on(job: Dict[str, Any]) -> date:
    value = job.get("dateApplied") or ""
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return date.min


class TrackerState:
    """
    In-memory cache of the caller's job records plus the search/filter logic
    applied to it. Records are the camelCase dicts returned by the API.
    """

    def __init__(self, jobs: Optional[List[Dict[str, Any]]] = None):
        self.jobs: List[Dict[str, Any]] = list(jobs or [])

    def find(self, job_id) -> Optional[Dict[str, Any]]:
        for job in self.jobs:
            if str(_job_id(job)) == str(job_id):
                return job
        return None

    def upsert(self, job: Dict[str, Any]) -> None:
        """Replace the cached copy of ``job`` or append it if unseen."""
        for index, cached in enumerate(self.jobs):
            if str(_job_id(cached)) == str(_job_id(job)):
                self.jobs[index] = job
                return
        self.jobs.append(job)

    def remove(self, job_id) -> bool:
        before = len(self.jobs)
        self.jobs = [job for job in self.jobs if str(_job_id(job)) != str(job_id)]
        return len(self.jobs) != before

    def search(self, term: str, jobs: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on company or position."""
        jobs = self.jobs if jobs is None else jobs
        term = (term or "").strip().lower()
        if not term:
            return list(jobs)
        return [
            job for job in jobs
            if term in (job.get("company") or "").lower() or term in (job.get("position") or "").lower()
        ]

    def filter_status(self, status: str, jobs: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        jobs = self.jobs if jobs is None else jobs
        if not status:
            return list(jobs)
        return [job for job in jobs if job.get("status") == status]

    def visible(self, term: str = "", status: str = "") -> List[Dict[str, Any]]:
        """Search, then status filter, newest application first."""
        jobs = self.filter_status(status, self.search(term))
        return sorted(jobs, key=_applied_on, reverse=True)

    def summary(self) -> Dict[str, int]:
        counts = {status: 0 for status in STATUSES}
        for job in self.jobs:
            if job.get("status") in counts:
                counts[job["status"]] += 1
        return {
            "totalApplied": len(self.jobs),
            "totalInterviews": counts["interview"],
            "totalOffers": counts["offer"],
            "totalRejected": counts["rejected"],
        }

    def export_json(self) -> str:
        return json.dumps(self.jobs, indent=2)

    def import_json(self, text: str) -> int:
        """
        Replace the cache with a previously exported list.

        Raises ValueError when the payload is not JSON or not a list.
        """
        try:
            imported = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError("Error importing data: file is not valid JSON") from e
        if not isinstance(imported, list):
            raise ValueError("Invalid file format: expected a list of jobs")
        self.jobs = imported
        return len(imported)

"""
HTTP client for the Job Tracker API.

The client holds no record cache; callers keep fetched jobs in a
``TrackerState``. Its only state is the base URL and the bearer token.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request failed. ``errors`` lists field violations for 400 responses."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []

    def __str__(self):
        if not self.errors:
            return self.message
        details = "; ".join(f"{e.get('field')}: {e.get('message')}" for e in self.errors)
        return f"{self.message}: {details}"


class TokenStore:
    """Keeps the bearer token on disk between sessions."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        token = self.path.read_text(encoding="utf-8").strip()
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class JobTrackerClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #
    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise ApiError(f"Could not reach the server at {self.base_url}") from e

        if not response.ok:
            raise self._error_from(response)
        return response.json()

    @staticmethod
    def _error_from(response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or body.get("detail") or f"Request failed with status {response.status_code}"
        return ApiError(str(message), status_code=response.status_code, errors=body.get("errors"))

    # ------------------------------------------------------------------ #
    # Authentication
    # ------------------------------------------------------------------ #
    def register(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/auth/register", json={"email": email, "password": password})

    def login(self, email: str, password: str) -> str:
        data = self._request("POST", "/api/auth/login", data={"username": email, "password": password})
        self.token = data["access_token"]
        return self.token

    # ------------------------------------------------------------------ #
    # Jobs
    # ------------------------------------------------------------------ #
    def list_jobs(self, include_archived: bool = False) -> List[Dict[str, Any]]:
        params = {"includeArchived": "true"} if include_archived else None
        return self._request("GET", "/api/jobs", params=params)["jobs"]

    def get_job(self, job_id) -> Dict[str, Any]:
        return self._request("GET", f"/api/jobs/{job_id}")["job"]

    def create_job(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/jobs", json=job)["job"]

    def update_job(self, job_id, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/api/jobs/{job_id}", json=fields)["job"]

    def archive_job(self, job_id) -> Dict[str, Any]:
        return self._request("DELETE", f"/api/jobs/{job_id}")["job"]

    def get_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/api/jobs/stats")["stats"]

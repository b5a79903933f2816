"""
HTTP client for the Bookshelf API and a local projection of reading sessions.

The projection lets a UI show a logged day immediately. Every change is
applied tentatively, sent to the server, and then replaced by what the server
answered; on any failure the previous state is restored. The server is
always the source of truth.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from bookshelf.services.aggregator import summarize_sessions
from bookshelf.services.ledger import MergePolicy

logger = logging.getLogger(__name__)


class ProjectionError(Exception):
    """A change could not be confirmed by the server and was rolled back."""

    def __init__(self, message: str, envelope: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.envelope = envelope


class BookshelfClient:
    def __init__(
        self,
        http: httpx.Client,
        token: Optional[str] = None,
        api_prefix: str = "/api/v1",
    ):
        self.http = http
        self.token = token
        self.api_prefix = api_prefix.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Send a request and return the decoded response envelope.

        Transport failures propagate as ``httpx.HTTPError``.
        """
        response = self.http.request(
            method, f"{self.api_prefix}{path}", headers=self._headers(), **kwargs
        )
        try:
            envelope = response.json()
        except ValueError:
            envelope = None
        if not isinstance(envelope, dict):
            return {
                "success": False,
                "error": f"Unexpected {response.status_code} response",
                "message": response.text[:200],
            }
        return envelope

    def login(self, username: str, password: str) -> Dict[str, Any]:
        envelope = self._request(
            "POST", "/auth/login-json", json={"username": username, "password": password}
        )
        if envelope.get("success"):
            self.token = envelope["data"]["access_token"]
        return envelope

    def list_sessions(self) -> Dict[str, Any]:
        return self._request("GET", "/reading-sessions/")

    def log_session(self, date: str, minutes: int) -> Dict[str, Any]:
        return self._request(
            "POST", "/reading-sessions/", json={"date": date, "minutes": minutes}
        )

    def delete_session(self, date: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/reading-sessions/{date}")

    def reading_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/reading-sessions/stats")


class SessionProjection:
    """Local ``{date: minutes}`` view of the current user's reading sessions."""

    def __init__(
        self, client: BookshelfClient, policy: MergePolicy = MergePolicy.ABSOLUTE
    ):
        self.client = client
        self.policy = MergePolicy(policy)
        self.entries: Dict[str, int] = {}

    def refresh(self) -> Dict[str, int]:
        """Replace the projection with the server's sessions."""
        try:
            envelope = self.client.list_sessions()
        except httpx.HTTPError as e:
            raise ProjectionError(f"Could not load reading sessions: {e}") from e
        if not envelope.get("success"):
            raise ProjectionError(_failure_message(envelope), envelope)

        self.entries = {
            session["date"]: session["minutes"] for session in envelope.get("data") or []
        }
        return dict(self.entries)

    def log(self, date: str, minutes: int) -> Dict[str, Any]:
        """Log minutes for ``date`` and reconcile with the server's answer.

        Returns the ``data`` of the server response.
        """
        snapshot = dict(self.entries)
        self._apply_tentative(date, minutes)

        try:
            envelope = self.client.log_session(date, minutes)
        except httpx.HTTPError as e:
            self.entries = snapshot
            logger.warning(f"Rolled back tentative log for {date}: {e}")
            raise ProjectionError(f"Could not log reading time for {date}: {e}") from e

        if not envelope.get("success"):
            self.entries = snapshot
            logger.warning(f"Rolled back tentative log for {date}: {envelope.get('error')}")
            raise ProjectionError(_failure_message(envelope), envelope)

        data = envelope.get("data") or {}
        self._confirm(date, data.get("session"))
        return data

    def remove(self, date: str) -> bool:
        snapshot = dict(self.entries)
        self.entries.pop(date, None)

        try:
            envelope = self.client.delete_session(date)
        except httpx.HTTPError as e:
            self.entries = snapshot
            raise ProjectionError(f"Could not remove reading time for {date}: {e}") from e

        if not envelope.get("success"):
            self.entries = snapshot
            raise ProjectionError(_failure_message(envelope), envelope)
        return bool((envelope.get("meta") or {}).get("removed"))

    def minutes_for(self, date: str) -> int:
        return self.entries.get(date, 0)

    def sessions(self) -> List[Dict[str, Any]]:
        return [
            {"date": day, "minutes": minutes}
            for day, minutes in sorted(self.entries.items(), reverse=True)
        ]

    def summary(self):
        """Reading summary computed locally from the projection."""
        return summarize_sessions(self.sessions())

    def _apply_tentative(self, date: str, minutes: int) -> None:
        if self.policy is MergePolicy.ADDITIVE:
            self.entries[date] = self.entries.get(date, 0) + minutes
        elif minutes == 0:
            self.entries.pop(date, None)
        else:
            self.entries[date] = minutes

    def _confirm(self, date: str, session: Optional[Dict[str, Any]]) -> None:
        if session is None:
            self.entries.pop(date, None)
        else:
            self.entries[session["date"]] = session["minutes"]


def _failure_message(envelope: Dict[str, Any]) -> str:
    return envelope.get("message") or envelope.get("error") or "Request failed"

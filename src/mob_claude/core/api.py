"""Synchronous HTTP client for the mob-claude dashboard.

One-shot requests against {api_url}/api with a fixed 30s timeout and no
retries. A 404 on a read means "not found" and is returned as None; any other
unexpected status raises APIError with the status code and body.
"""

from dataclasses import dataclass, field
from datetime import datetime
from urllib.parse import quote

import httpx
import orjson

DEFAULT_TIMEOUT = 30.0


class DashboardError(Exception):
    """Base class for dashboard failures."""

    pass


class DashboardUnavailableError(DashboardError):
    """Raised when the dashboard cannot be reached or times out."""

    pass


class APIError(DashboardError):
    """Raised when the dashboard answers with an unexpected status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"API error ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


@dataclass
class Workstream:
    """The dashboard's representation of a branch."""

    id: str
    repo_url: str
    branch: str
    plan_text: str = ""
    is_active: bool = False
    team_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Workstream":
        return cls(
            id=str(data.get("id", "")),
            repo_url=data.get("repoUrl", ""),
            branch=data.get("branch", ""),
            plan_text=data.get("planText") or "",
            is_active=bool(data.get("isActive", False)),
            team_id=str(data.get("teamId", "")),
        )


@dataclass
class Team:
    id: str
    name: str
    display_name: str = ""
    workstreams: list[Workstream] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Team":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            display_name=data.get("displayName") or "",
            workstreams=[Workstream.from_dict(w) for w in data.get("workstreams") or []],
        )


@dataclass
class Rotation:
    id: str
    workstream_id: str
    driver_name: str
    summary_tldr: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Rotation":
        return cls(
            id=str(data.get("id", "")),
            workstream_id=str(data.get("workstreamId", "")),
            driver_name=data.get("driverName", ""),
            summary_tldr=data.get("summaryTldr") or "",
        )


@dataclass
class RotationRequest:
    """Payload for recording a completed rotation."""

    driver_name: str
    started_at: datetime
    driver_note: str = ""
    summary_tldr: str = ""
    summary_json: dict | None = None
    plan_snapshot: str = ""

    def to_dict(self) -> dict:
        payload: dict = {
            "driverName": self.driver_name,
            "startedAt": self.started_at.isoformat(timespec="seconds"),
        }
        if self.driver_note:
            payload["driverNote"] = self.driver_note
        if self.summary_tldr:
            payload["summaryTldr"] = self.summary_tldr
        if self.summary_json is not None:
            payload["summaryJson"] = self.summary_json
        if self.plan_snapshot:
            payload["planSnapshot"] = self.plan_snapshot
        return payload


def _segment(value: str) -> str:
    """Percent-encode a single path segment (slashes included)."""
    return quote(value, safe="")


class DashboardClient:
    """Client for one team on one dashboard."""

    def __init__(
        self,
        base_url: str,
        team_name: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.team_name = team_name
        self._client = httpx.Client(
            base_url=f"{self.base_url}/api",
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "DashboardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def _team_path(self) -> str:
        return f"/teams/{_segment(self.team_name)}"

    def _workstream_path(self, branch: str) -> str:
        return f"{self._team_path}/workstreams/{_segment(branch)}"

    def _request(self, method: str, path: str, payload: dict | None = None) -> httpx.Response:
        """Send one request, mapping transport failures to DashboardUnavailableError."""
        headers = {}
        content = None
        if payload is not None:
            content = orjson.dumps(payload)
            headers["Content-Type"] = "application/json"
        try:
            return self._client.request(method, path, content=content, headers=headers)
        except httpx.TimeoutException as e:
            raise DashboardUnavailableError(f"request to {path} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise DashboardUnavailableError(f"dashboard unreachable: {e}") from e

    @staticmethod
    def _check(resp: httpx.Response, accepted: tuple[int, ...] = (200,)) -> None:
        if resp.status_code not in accepted:
            raise APIError(resp.status_code, resp.text)

    @staticmethod
    def _decode(resp: httpx.Response, what: str) -> dict:
        try:
            data = orjson.loads(resp.content)
        except orjson.JSONDecodeError as e:
            raise DashboardError(f"failed to decode {what}: {e}") from e
        if not isinstance(data, dict):
            raise DashboardError(f"failed to decode {what}: expected a JSON object")
        return data

    def get_team(self) -> Team | None:
        """Fetch the team and its workstreams. None if the team is unknown."""
        resp = self._request("GET", self._team_path)
        if resp.status_code == 404:
            return None
        self._check(resp)
        return Team.from_dict(self._decode(resp, "team"))

    def create_workstream(self, repo_url: str, branch: str) -> Workstream:
        """Create, or get the existing, workstream for a branch."""
        resp = self._request(
            "POST",
            f"{self._team_path}/workstreams",
            {"repoUrl": repo_url, "branch": branch},
        )
        self._check(resp, (200, 201))
        return Workstream.from_dict(self._decode(resp, "workstream"))

    def get_workstream(self, branch: str) -> Workstream | None:
        resp = self._request("GET", self._workstream_path(branch))
        if resp.status_code == 404:
            return None
        self._check(resp)
        return Workstream.from_dict(self._decode(resp, "workstream"))

    def get_plan(self, branch: str) -> str | None:
        """Fetch the remote plan text.

        The dashboard may answer with {"planText": ...} or with the raw text.

        Returns:
            The plan text, or None if the workstream has no plan.
        """
        resp = self._request("GET", f"{self._workstream_path(branch)}/plan")
        if resp.status_code == 404:
            return None
        self._check(resp)

        try:
            data = orjson.loads(resp.content)
        except orjson.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return data.get("planText") or None
        return resp.text or None

    def update_plan(self, branch: str, plan_text: str) -> None:
        """Replace the remote plan with plan_text."""
        resp = self._request(
            "PUT", f"{self._workstream_path(branch)}/plan", {"planText": plan_text}
        )
        self._check(resp)

    def create_rotation(self, branch: str, rotation: RotationRequest) -> Rotation:
        resp = self._request(
            "POST", f"{self._workstream_path(branch)}/rotations", rotation.to_dict()
        )
        self._check(resp, (200, 201))
        return Rotation.from_dict(self._decode(resp, "rotation"))

    def ping(self) -> None:
        """Check the dashboard is reachable and healthy.

        Raises:
            DashboardError: If it is not.
        """
        resp = self._request("GET", "/health")
        self._check(resp)

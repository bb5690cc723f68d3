"""Session dataclass for mob-claude."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Session:
    """Represents the rotation currently in progress.

    Attributes:
        branch: Base branch the plan and summaries are keyed by
        repo_url: Remote URL of the repository ("unknown" if none)
        driver_name: Person at the keyboard for this rotation
        started_at: When the rotation started (timezone-aware)
        workstream_id: Dashboard workstream ID, if registration succeeded
    """

    branch: str
    repo_url: str
    driver_name: str
    started_at: datetime
    workstream_id: str | None = None

    def __post_init__(self) -> None:
        """Validate session fields."""
        if not self.branch:
            raise ValueError("Session branch must not be empty")
        if self.started_at.tzinfo is None:
            raise ValueError("Session started_at must be timezone-aware")

    def to_dict(self) -> dict:
        data = {
            "branch": self.branch,
            "repoUrl": self.repo_url,
            "startedAt": self.started_at.isoformat(timespec="seconds"),
            "driverName": self.driver_name,
        }
        if self.workstream_id:
            data["workstreamId"] = self.workstream_id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            branch=data["branch"],
            repo_url=data.get("repoUrl", ""),
            driver_name=data.get("driverName", ""),
            started_at=datetime.fromisoformat(data["startedAt"]),
            workstream_id=data.get("workstreamId") or None,
        )

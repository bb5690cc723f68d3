"""Rotation summary models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SummaryContent:
    """Human-readable content of a rotation summary.

    Attributes:
        tldr: One-line summary of what was accomplished
        changes: Specific changes made during the rotation
        next_steps: Suggestions for the next driver
        fallback_reason: Why the generated summary was replaced by the
            fallback, or None when the backend produced the content
    """

    tldr: str
    changes: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    fallback_reason: str | None = None


@dataclass(frozen=True)
class RotationSummary:
    """Immutable record of one completed rotation."""

    timestamp: datetime
    driver_name: str
    driver_note: str
    tldr: str
    changes: tuple[str, ...]
    next_steps: tuple[str, ...]
    branch: str

    @classmethod
    def from_content(
        cls,
        content: SummaryContent,
        *,
        timestamp: datetime,
        driver_name: str,
        driver_note: str,
        branch: str,
    ) -> "RotationSummary":
        return cls(
            timestamp=timestamp,
            driver_name=driver_name,
            driver_note=driver_note,
            tldr=content.tldr,
            changes=tuple(content.changes),
            next_steps=tuple(content.next_steps),
            branch=branch,
        )

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "driverName": self.driver_name,
            "driverNote": self.driver_note,
            "tldr": self.tldr,
            "changes": list(self.changes),
            "nextSteps": list(self.next_steps),
            "branch": self.branch,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RotationSummary":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            driver_name=data.get("driverName", ""),
            driver_note=data.get("driverNote", ""),
            tldr=data.get("tldr", ""),
            changes=tuple(data.get("changes") or ()),
            next_steps=tuple(data.get("nextSteps") or ()),
            branch=data.get("branch", ""),
        )

    def summary_json(self) -> dict:
        """Structured part of the summary sent to the dashboard."""
        return {"changes": list(self.changes), "nextSteps": list(self.next_steps)}

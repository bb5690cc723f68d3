"""Local plan and rotation summary storage.

Plans live in .claude/plans/mob-{branch}.md (one per branch, with path
separators in the branch name replaced by hyphens). Summaries live in
.claude/mob/summaries/{timestamp}.json, one per rotation, so sorting the
filenames sorts the rotations chronologically.
"""

from datetime import datetime
from pathlib import Path

import orjson

from mob_claude.core.project import get_plans_dir, get_summaries_dir
from mob_claude.core.summary import RotationSummary

SUMMARY_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"

PLAN_TEMPLATE = """# Mob Session: {branch}

## Goal
_Describe the goal of this mob session_

## Current Status
- [ ] Task 1
- [ ] Task 2

## Notes
_Add notes during the session_

## Decisions Made
_Document important decisions_

---
Created: {created}
"""


def _summary_sort_key(path: Path) -> tuple[str, int]:
    """Order by timestamp, then by collision suffix ("-1", "-2", ...)."""
    timestamp_len = len("YYYY-MM-DDTHH-MM-SS")
    base, rest = path.stem[:timestamp_len], path.stem[timestamp_len + 1 :]
    return (base, int(rest) if rest.isdigit() else 0)


def sanitize_branch(branch: str) -> str:
    """Turn a branch name into a string safe to use as a filename.

    Examples:
        "feature/auth" -> "feature-auth"
        "team\\x" -> "team-x"
    """
    return branch.replace("/", "-").replace("\\", "-")


class PlanStore:
    """Reads and writes plan documents and rotation summaries for a project."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.plans_dir = get_plans_dir(root)
        self.summaries_dir = get_summaries_dir(root)

    def plan_path(self, branch: str) -> Path:
        """Get the plan file path for a branch."""
        return self.plans_dir / f"mob-{sanitize_branch(branch)}.md"

    def load_plan(self, branch: str) -> str:
        """Read the plan for a branch.

        Returns:
            The plan text, or "" if no plan exists yet.

        Raises:
            OSError: If the plan cannot be read or is not valid UTF-8.
        """
        path = self.plan_path(branch)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except UnicodeDecodeError as e:
            raise OSError(f"{path} is not valid UTF-8: {e}") from e

    def save_plan(self, branch: str, content: str) -> Path:
        """Write the plan for a branch. Returns the file path."""
        self.plans_dir.mkdir(parents=True, exist_ok=True)
        path = self.plan_path(branch)
        path.write_text(content, encoding="utf-8")
        return path

    def create_default_plan(self, branch: str, now: datetime) -> Path:
        """Write a templated plan for a new branch. Returns the file path."""
        content = PLAN_TEMPLATE.format(
            branch=branch, created=now.isoformat(timespec="seconds")
        )
        return self.save_plan(branch, content)

    def save_summary(self, summary: RotationSummary) -> Path:
        """Write a rotation summary to its own file.

        The filename is the summary timestamp. Writing an identical summary
        again reuses the existing file; a different summary with the same
        timestamp gets a numeric suffix instead of replacing it.

        Returns:
            Path of the summary file.
        """
        self.summaries_dir.mkdir(parents=True, exist_ok=True)
        content = orjson.dumps(summary.to_dict(), option=orjson.OPT_INDENT_2)
        stem = summary.timestamp.strftime(SUMMARY_TIMESTAMP_FORMAT)

        path = self.summaries_dir / f"{stem}.json"
        suffix = 0
        while path.exists():
            if path.read_bytes() == content:
                return path
            suffix += 1
            path = self.summaries_dir / f"{stem}-{suffix}.json"

        path.write_bytes(content)
        return path

    def list_summaries(self) -> list[Path]:
        """List summary files, oldest first."""
        if not self.summaries_dir.exists():
            return []
        return sorted(
            (p for p in self.summaries_dir.iterdir() if p.is_file() and p.suffix == ".json"),
            key=_summary_sort_key,
        )

    def load_summary(self, path: Path) -> RotationSummary:
        return RotationSummary.from_dict(orjson.loads(path.read_bytes()))

    def latest_summary(self) -> RotationSummary | None:
        """Load the most recent rotation summary, if any."""
        files = self.list_summaries()
        if not files:
            return None
        return self.load_summary(files[-1])

"""Session state tracking for mob-claude.

The active rotation is stored as a single JSON object in
.claude/mob/current.json:

    {"branch": ..., "repoUrl": ..., "startedAt": ..., "driverName": ...,
     "workstreamId": ...}

The process is re-invoked once per command, so every mutation is flushed to
disk before returning. At most one session exists per working copy.
"""

import os
from datetime import datetime, timezone
from pathlib import Path

import orjson

from mob_claude.core.session import Session


class PersistenceError(Exception):
    """Raised when the session file cannot be read or written."""

    pass


def _write_durable(path: Path, content: bytes) -> None:
    """Write content via a temp file, fsync, then rename over path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    with open(tmp_path, "wb") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


class SessionTracker:
    """Persists the metadata of the in-progress rotation."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def begin(
        self,
        branch: str,
        repo_url: str,
        driver_name: str,
        *,
        started_at: datetime | None = None,
        workstream_id: str | None = None,
    ) -> Session:
        """Record a new active session, replacing any existing one.

        Args:
            branch: Base branch for the rotation.
            repo_url: Repository remote URL.
            driver_name: Current driver.
            started_at: Start time; defaults to now (UTC).
            workstream_id: Dashboard workstream ID, if registered.

        Returns:
            The persisted Session.

        Raises:
            PersistenceError: If the session cannot be written.
        """
        session = Session(
            branch=branch,
            repo_url=repo_url,
            driver_name=driver_name,
            started_at=started_at or datetime.now(timezone.utc),
            workstream_id=workstream_id,
        )
        try:
            _write_durable(
                self.path, orjson.dumps(session.to_dict(), option=orjson.OPT_INDENT_2)
            )
        except OSError as e:
            raise PersistenceError(f"could not save session to {self.path}: {e}") from e
        return session

    def current(self) -> Session | None:
        """Load the active session.

        Returns:
            The Session, or None if no rotation is active.

        Raises:
            PersistenceError: If the file exists but cannot be read or decoded.
        """
        if not self.path.exists():
            return None
        try:
            data = orjson.loads(self.path.read_bytes())
            return Session.from_dict(data)
        except (OSError, orjson.JSONDecodeError) as e:
            raise PersistenceError(f"could not read session from {self.path}: {e}") from e
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PersistenceError(f"corrupt session file {self.path}: {e}") from e

    def clear(self) -> None:
        """Remove the active session. Safe to call when none exists.

        Raises:
            PersistenceError: If an existing session file cannot be removed.
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(f"could not clear session {self.path}: {e}") from e

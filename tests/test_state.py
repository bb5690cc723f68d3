"""Tests for session state tracking."""

import os
from datetime import datetime, timezone

import orjson
import pytest

from mob_claude.core.state import PersistenceError, SessionTracker


def test_current_without_session(tracker):
    """Test no session is a valid, non-error outcome."""
    assert tracker.current() is None


def test_begin_writes_session_file(tracker):
    """Test begin persists the session as JSON."""
    started = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)

    session = tracker.begin("feature-x", "repo", "Ada", started_at=started, workstream_id="ws-1")

    data = orjson.loads(tracker.path.read_bytes())
    assert data == {
        "branch": "feature-x",
        "repoUrl": "repo",
        "startedAt": "2026-03-02T09:30:00+00:00",
        "driverName": "Ada",
        "workstreamId": "ws-1",
    }
    assert tracker.current() == session


def test_begin_survives_new_tracker(tracker):
    """Test state is visible to a fresh tracker (next process invocation)."""
    tracker.begin("feature-x", "repo", "Ada")

    again = SessionTracker(tracker.path)
    assert again.current().driver_name == "Ada"


def test_begin_overwrites_existing_session(tracker):
    """Test last begin wins."""
    tracker.begin("feature-x", "repo", "Ada")
    tracker.begin("feature-y", "repo", "Grace")

    session = tracker.current()
    assert session.branch == "feature-y"
    assert session.driver_name == "Grace"


def test_begin_leaves_no_temp_file(tracker):
    tracker.begin("feature-x", "repo", "Ada")
    assert os.listdir(tracker.path.parent) == ["current.json"]


def test_begin_defaults_start_time_to_now(tracker):
    before = datetime.now(timezone.utc).replace(microsecond=0)
    session = tracker.begin("feature-x", "repo", "Ada")
    assert session.started_at >= before


def test_clear_removes_session(tracker):
    tracker.begin("feature-x", "repo", "Ada")

    tracker.clear()

    assert tracker.current() is None
    assert not tracker.path.exists()


def test_clear_is_idempotent(tracker):
    """Test clearing with no session is not an error."""
    tracker.clear()
    tracker.clear()
    assert tracker.current() is None


def test_current_corrupt_file_raises(tracker):
    """Test a corrupt session file is a hard error."""
    tracker.path.parent.mkdir(parents=True)
    tracker.path.write_text("{not json")

    with pytest.raises(PersistenceError, match="could not read session"):
        tracker.current()


def test_current_missing_fields_raises(tracker):
    tracker.path.parent.mkdir(parents=True)
    tracker.path.write_text('{"driverName": "Ada"}')

    with pytest.raises(PersistenceError, match="corrupt session file"):
        tracker.current()


def test_begin_unwritable_raises(tmp_path):
    """Test a failed write surfaces as PersistenceError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    tracker = SessionTracker(blocker / "mob" / "current.json")

    with pytest.raises(PersistenceError, match="could not save session"):
        tracker.begin("feature-x", "repo", "Ada")

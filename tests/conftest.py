"""Shared pytest fixtures for mob-claude tests."""

from contextlib import contextmanager

import httpx
import pytest

from mob_claude.core.api import DashboardClient
from mob_claude.core.config import Config
from mob_claude.core.plans import PlanStore
from mob_claude.core.project import get_session_path
from mob_claude.core.rotation import RotationOrchestrator
from mob_claude.core.state import SessionTracker
from mob_claude.core.workspace import Workspace
from tests.helpers import API_URL, TEAM, Clock, FakeDashboard, FakeGenerator, FakeMob


@pytest.fixture
def project_root(tmp_path):
    """Empty working copy root."""
    return tmp_path


@pytest.fixture
def mob():
    return FakeMob()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def dashboard():
    return FakeDashboard()


@pytest.fixture
def client(dashboard):
    client = DashboardClient(API_URL, TEAM, transport=httpx.MockTransport(dashboard.handler))
    yield client
    client.close()


@pytest.fixture
def plans(project_root):
    return PlanStore(project_root)


@pytest.fixture
def tracker(project_root):
    return SessionTracker(get_session_path(project_root))


@pytest.fixture
def make_orchestrator(mob, tracker, plans, generator):
    """Factory for an orchestrator wired to in-memory collaborators."""

    def factory(client=None, config=None, **overrides):
        kwargs = {
            "mob": mob,
            "tracker": tracker,
            "plans": plans,
            "generator": generator,
            "config": config or Config(team_name=TEAM if client else ""),
            "client": client,
            "now": Clock(),
        }
        kwargs.update(overrides)
        return RotationOrchestrator(**kwargs)

    return factory


@pytest.fixture
def use_workspace(monkeypatch, project_root):
    """Point every command at an in-memory workspace.

    Commands import open_workspace directly, so it is patched in each module.
    """

    def install(orchestrator, warnings=None):
        workspace = Workspace(
            root=project_root, orchestrator=orchestrator, warnings=list(warnings or [])
        )

        @contextmanager
        def fake_open_workspace():
            yield workspace

        for module in ("start", "next", "done", "status"):
            monkeypatch.setattr(
                f"mob_claude.commands.{module}.open_workspace", fake_open_workspace
            )
        return workspace

    return install

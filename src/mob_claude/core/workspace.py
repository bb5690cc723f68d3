"""Wiring of the orchestrator for the current project."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from mob_claude.core.api import DashboardClient
from mob_claude.core.config import Config, ConfigError, load_config
from mob_claude.core.mob import MobWrapper
from mob_claude.core.plans import PlanStore
from mob_claude.core.project import get_root_path, get_session_path
from mob_claude.core.rotation import RotationOrchestrator
from mob_claude.core.state import SessionTracker
from mob_claude.core.summarize import ClaudeGenerator


@dataclass
class Workspace:
    root: Path
    orchestrator: RotationOrchestrator
    warnings: list[str] = field(default_factory=list)

    @property
    def config(self) -> Config:
        return self.orchestrator.config

    def close(self) -> None:
        if self.orchestrator.client is not None:
            self.orchestrator.client.close()


def build_workspace(root: Path | None = None) -> Workspace:
    """Assemble the orchestrator and its collaborators for a project.

    A config file that cannot be loaded is reported as a warning and the
    defaults are used instead. A single invalid field only resets that field.
    """
    root = root or get_root_path()
    warnings: list[str] = []
    try:
        config = load_config(root, warnings=warnings)
    except ConfigError as e:
        warnings.append(f"could not load config: {e}")
        config = Config()

    client = None
    if config.remote_enabled:
        client = DashboardClient(config.api_url, config.team_name)

    orchestrator = RotationOrchestrator(
        mob=MobWrapper(),
        tracker=SessionTracker(get_session_path(root)),
        plans=PlanStore(root),
        generator=ClaudeGenerator(config.model, config.max_turns),
        config=config,
        client=client,
    )
    return Workspace(root=root, orchestrator=orchestrator, warnings=warnings)


@contextmanager
def open_workspace() -> Iterator[Workspace]:
    workspace = build_workspace()
    try:
        yield workspace
    finally:
        workspace.close()

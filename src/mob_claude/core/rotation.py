"""Rotation lifecycle: start, next and done.

States:

    IDLE --start--> ACTIVE --next--> HANDING_OFF --> IDLE
                       \\--done--> HANDING_OFF --> COMPLETED

Hard failures (mob missing, no session for `next`, session file unusable)
abort the command before anything is handed to mob. Everything else
(dashboard down, summary backend down, local plan/summary writes) is recorded
as a warning on the result and the transition carries on.

The session is cleared before mob hands control to the next driver, so a
stale session never attributes work to a driver who has already left.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from mob_claude.core.api import DashboardClient, DashboardError, RotationRequest
from mob_claude.core.config import Config
from mob_claude.core.mob import MobError, MobWrapper, base_branch
from mob_claude.core.plans import PlanStore
from mob_claude.core.reconcile import PlanSyncResult, push_plan, reconcile_on_start
from mob_claude.core.session import Session
from mob_claude.core.state import SessionTracker
from mob_claude.core.summarize import ContentGenerator, note_only_summary, synthesize
from mob_claude.core.summary import RotationSummary, SummaryContent


class RotationState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    HANDING_OFF = "handing_off"
    COMPLETED = "completed"


class NoActiveSessionError(Exception):
    """Raised when a rotation needs a session and none is active."""

    def __init__(self) -> None:
        super().__init__("no active mob session. Run 'mob-claude start' first")


@dataclass
class StartResult:
    session: Session
    branch: str
    plan: PlanSyncResult
    warnings: list[str] = field(default_factory=list)


@dataclass
class RotationResult:
    """Outcome of `next` or `done`."""

    state: RotationState
    summary: RotationSummary | None = None
    summary_path: Path | None = None
    warnings: list[str] = field(default_factory=list)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RotationOrchestrator:
    """Drives a working copy through the mob rotation lifecycle."""

    def __init__(
        self,
        mob: MobWrapper,
        tracker: SessionTracker,
        plans: PlanStore,
        generator: ContentGenerator,
        config: Config,
        client: DashboardClient | None = None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.mob = mob
        self.tracker = tracker
        self.plans = plans
        self.generator = generator
        self.config = config
        self.client = client
        self.now = now
        self._handing_off = False

    def state(self) -> RotationState:
        if self._handing_off:
            return RotationState.HANDING_OFF
        if self.tracker.current() is None:
            return RotationState.IDLE
        return RotationState.ACTIVE

    def start(self, mob_args: Sequence[str] = ()) -> StartResult:
        """Start or join a mob session and reconcile the branch's plan.

        Args:
            mob_args: Arguments passed through to `mob start` (e.g. a branch).

        Raises:
            MobNotInstalledError: If mob is unavailable.
            MobError: If `mob start` fails or the branch cannot be resolved.
            PersistenceError: If the session cannot be saved.
        """
        self.mob.ensure_installed()
        warnings: list[str] = []

        existing = self.tracker.current()
        if existing is not None:
            warnings.append(
                f"replacing active session on {existing.branch} "
                f"(driver {existing.driver_name})"
            )

        self.mob.start(mob_args)

        branch = self.mob.current_branch()
        base = base_branch(branch) or branch
        try:
            repo_url = self.mob.repo_url()
        except MobError:
            repo_url = "unknown"

        remote_plan = None
        if self.client is not None:
            try:
                remote_plan = self.client.get_plan(base)
            except DashboardError as e:
                warnings.append(f"could not fetch plan from dashboard: {e}")

        now = self.now()
        plan = reconcile_on_start(self.plans, base, remote_plan, now=now)
        warnings.extend(plan.warnings)

        driver_name = self.mob.driver_name()

        workstream_id = None
        if self.client is not None:
            try:
                workstream_id = self.client.create_workstream(repo_url, base).id or None
            except DashboardError as e:
                warnings.append(f"could not register with dashboard: {e}")

        session = self.tracker.begin(
            base,
            repo_url,
            driver_name,
            started_at=now,
            workstream_id=workstream_id,
        )
        return StartResult(session=session, branch=branch, plan=plan, warnings=warnings)

    def next(
        self,
        note: str = "",
        skip_summary: bool = False,
        mob_args: Sequence[str] = (),
    ) -> RotationResult:
        """Record the rotation and hand off to the next driver.

        Raises:
            MobNotInstalledError: If mob is unavailable.
            NoActiveSessionError: If no session was started.
            PersistenceError: If the session cannot be read or cleared.
            MobError: If `mob next` fails.
        """
        self.mob.ensure_installed()
        session = self.tracker.current()
        if session is None:
            raise NoActiveSessionError()

        result = RotationResult(state=RotationState.HANDING_OFF)
        self._handing_off = True
        try:
            self._record(session, note, skip_summary, result)
            self.tracker.clear()
        finally:
            self._handing_off = False

        self.mob.next(mob_args)
        result.state = RotationState.IDLE
        return result

    def done(
        self,
        note: str = "",
        skip_summary: bool = False,
        mob_args: Sequence[str] = (),
    ) -> RotationResult:
        """Record the final rotation and complete the mob session.

        A session is optional here; without one no summary is recorded.

        Raises:
            MobNotInstalledError: If mob is unavailable.
            PersistenceError: If the session cannot be read or cleared.
            MobError: If `mob done` fails.
        """
        self.mob.ensure_installed()
        session = self.tracker.current()

        result = RotationResult(state=RotationState.HANDING_OFF)
        self._handing_off = True
        try:
            if session is None:
                result.warnings.append("no active session; skipping final summary")
            else:
                self._record(session, note, skip_summary, result)
            self.tracker.clear()
        finally:
            self._handing_off = False

        self.mob.done(mob_args)
        result.state = RotationState.COMPLETED
        return result

    def _summarize(
        self, session: Session, note: str, skip_summary: bool, warnings: list[str]
    ) -> SummaryContent:
        if skip_summary or self.config.skip_summary:
            return note_only_summary(note)

        try:
            diff = self.mob.diff_from_base()
        except MobError as e:
            warnings.append(f"could not get diff: {e}")
            diff = ""

        content = synthesize(diff, note, session.branch, generator=self.generator)
        if content.fallback_reason:
            warnings.append(f"summary backend unavailable: {content.fallback_reason}")
        return content

    def _record(
        self,
        session: Session,
        note: str,
        skip_summary: bool,
        result: RotationResult,
    ) -> None:
        """Produce, store and upload the summary for a finished rotation."""
        content = self._summarize(session, note, skip_summary, result.warnings)
        summary = RotationSummary.from_content(
            content,
            timestamp=self.now(),
            driver_name=session.driver_name,
            driver_note=note,
            branch=session.branch,
        )
        result.summary = summary

        try:
            result.summary_path = self.plans.save_summary(summary)
        except OSError as e:
            result.warnings.append(f"could not save summary: {e}")

        if self.client is None:
            return

        result.warnings.extend(push_plan(self.plans, self.client, session.branch))

        try:
            plan_snapshot = self.plans.load_plan(session.branch)
        except OSError:
            plan_snapshot = ""
        rotation = RotationRequest(
            driver_name=session.driver_name,
            started_at=session.started_at,
            driver_note=note,
            summary_tldr=summary.tldr,
            summary_json=summary.summary_json(),
            plan_snapshot=plan_snapshot,
        )
        try:
            self.client.create_rotation(session.branch, rotation)
        except DashboardError as e:
            result.warnings.append(f"could not upload rotation: {e}")

"""Plan reconciliation between the working copy and the dashboard.

At session start the local plan (L) and the remote plan (R) are compared and
one of them becomes authoritative locally:

    L absent,  R absent            -> create a templated plan locally
    L absent,  R present           -> adopt R
    L present, R absent            -> keep L
    L present, R present, equal    -> nothing to do
    L present, R present, differ   -> adopt R, backing up L first

No timestamps are compared. An empty plan counts as absent, and an
unreachable dashboard counts as "R absent".

At rotation end the flow is one-directional: the local plan replaces the
remote one.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from mob_claude.core.api import DashboardClient, DashboardError
from mob_claude.core.plans import SUMMARY_TIMESTAMP_FORMAT, PlanStore


class PlanAction(Enum):
    CREATE_DEFAULT = "create_default"
    ADOPT_REMOTE = "adopt_remote"
    KEEP_LOCAL = "keep_local"
    UNCHANGED = "unchanged"
    OVERWRITE_LOCAL = "overwrite_local"


@dataclass
class PlanSyncResult:
    """Outcome of reconciling a branch's plan."""

    action: PlanAction
    path: Path
    backup_path: Path | None = None
    warnings: list[str] = field(default_factory=list)


def decide(local: str | None, remote: str | None) -> PlanAction:
    """Pick the reconciliation action for a local and a remote plan."""
    if not local:
        return PlanAction.ADOPT_REMOTE if remote else PlanAction.CREATE_DEFAULT
    if not remote:
        return PlanAction.KEEP_LOCAL
    if local == remote:
        return PlanAction.UNCHANGED
    return PlanAction.OVERWRITE_LOCAL


def reconcile_on_start(
    store: PlanStore,
    branch: str,
    remote_plan: str | None,
    *,
    now: datetime,
) -> PlanSyncResult:
    """Make the local plan for branch authoritative.

    Never writes to the dashboard. Local write failures are reported as
    warnings on the result.

    Args:
        store: Local plan store.
        branch: Base branch the plan belongs to.
        remote_plan: Remote plan text, or None if absent or unreachable.
        now: Current time, used for the template and backup names.

    Returns:
        PlanSyncResult describing what was done.
    """
    path = store.plan_path(branch)
    try:
        local_plan = store.load_plan(branch)
    except OSError as e:
        return PlanSyncResult(
            action=PlanAction.KEEP_LOCAL,
            path=path,
            warnings=[f"could not read local plan {path}: {e}"],
        )

    action = decide(local_plan, remote_plan)
    result = PlanSyncResult(action=action, path=path)

    try:
        if action is PlanAction.CREATE_DEFAULT:
            store.create_default_plan(branch, now)
        elif action is PlanAction.ADOPT_REMOTE:
            store.save_plan(branch, remote_plan)
        elif action is PlanAction.OVERWRITE_LOCAL:
            backup_path = path.with_name(
                f"{path.name}.local-{now.strftime(SUMMARY_TIMESTAMP_FORMAT)}"
            )
            backup_path.write_text(local_plan)
            result.backup_path = backup_path
            store.save_plan(branch, remote_plan)
            result.warnings.append(
                f"local plan differed from the dashboard and was replaced; "
                f"previous local plan saved to {backup_path}"
            )
    except OSError as e:
        result.warnings.append(f"could not write plan {path}: {e}")

    return result


def push_plan(store: PlanStore, client: DashboardClient, branch: str) -> list[str]:
    """Overwrite the remote plan with the local one.

    Returns:
        Warning messages; empty on success or when there is nothing to push.
    """
    try:
        plan_text = store.load_plan(branch)
    except OSError as e:
        return [f"could not read local plan for sync: {e}"]
    if not plan_text:
        return []
    try:
        client.update_plan(branch, plan_text)
    except DashboardError as e:
        return [f"could not sync plan to dashboard: {e}"]
    return []

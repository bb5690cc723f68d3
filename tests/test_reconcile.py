"""Tests for plan reconciliation."""

from datetime import datetime, timezone

import pytest

from mob_claude.core.reconcile import PlanAction, decide, push_plan, reconcile_on_start

NOW = datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "local,remote,expected",
    [
        (None, None, PlanAction.CREATE_DEFAULT),
        ("", "", PlanAction.CREATE_DEFAULT),
        (None, "remote", PlanAction.ADOPT_REMOTE),
        ("local", None, PlanAction.KEEP_LOCAL),
        ("local", "", PlanAction.KEEP_LOCAL),
        ("same", "same", PlanAction.UNCHANGED),
        ("local", "remote", PlanAction.OVERWRITE_LOCAL),
    ],
)
def test_decide(local, remote, expected):
    assert decide(local, remote) == expected


def test_reconcile_creates_default(plans):
    result = reconcile_on_start(plans, "feature-x", None, now=NOW)

    assert result.action is PlanAction.CREATE_DEFAULT
    plan = plans.load_plan("feature-x")
    assert plan.startswith("# Mob Session: feature-x")
    assert result.warnings == []


def test_reconcile_adopts_remote(plans):
    result = reconcile_on_start(plans, "feature-x", "# Remote plan\n", now=NOW)

    assert result.action is PlanAction.ADOPT_REMOTE
    assert plans.load_plan("feature-x") == "# Remote plan\n"


def test_reconcile_keeps_local(plans):
    plans.save_plan("feature-x", "# Local plan\n")

    result = reconcile_on_start(plans, "feature-x", None, now=NOW)

    assert result.action is PlanAction.KEEP_LOCAL
    assert plans.load_plan("feature-x") == "# Local plan\n"


def test_reconcile_is_idempotent(plans):
    """Test a second run with the same inputs changes nothing."""
    reconcile_on_start(plans, "feature-x", "# Remote plan\n", now=NOW)
    before = sorted(p.name for p in plans.plan_path("feature-x").parent.iterdir())

    result = reconcile_on_start(plans, "feature-x", "# Remote plan\n", now=NOW)

    assert result.action is PlanAction.UNCHANGED
    after = sorted(p.name for p in plans.plan_path("feature-x").parent.iterdir())
    assert before == after


def test_reconcile_overwrite_backs_up_local(plans):
    """Test a differing local plan is preserved before being replaced."""
    plans.save_plan("feature-x", "# Local edits\n")

    result = reconcile_on_start(plans, "feature-x", "# Remote plan\n", now=NOW)

    assert result.action is PlanAction.OVERWRITE_LOCAL
    assert plans.load_plan("feature-x") == "# Remote plan\n"
    assert result.backup_path is not None
    assert result.backup_path.name == "mob-feature-x.md.local-2026-03-02T09-30-00"
    assert result.backup_path.read_text() == "# Local edits\n"
    assert len(result.warnings) == 1
    assert str(result.backup_path) in result.warnings[0]


def test_reconcile_write_failure_is_warning(plans, monkeypatch):
    def broken_save(branch, text):
        raise OSError("disk full")

    monkeypatch.setattr(plans, "save_plan", broken_save)

    result = reconcile_on_start(plans, "feature-x", "# Remote plan\n", now=NOW)

    assert result.action is PlanAction.ADOPT_REMOTE
    assert any("disk full" in w for w in result.warnings)


def test_reconcile_never_contacts_dashboard(plans, dashboard):
    reconcile_on_start(plans, "feature-x", "# Remote plan\n", now=NOW)
    assert dashboard.requests == []


def test_push_plan(plans, client, dashboard):
    plans.save_plan("feature/login", "# Plan\n- [x] done\n")

    warnings = push_plan(plans, client, "feature/login")

    assert warnings == []
    assert dashboard.plans["feature/login"] == "# Plan\n- [x] done\n"
    assert dashboard.writes == [("PUT", "/api/teams/platform/workstreams/feature%2Flogin/plan")]


def test_push_plan_nothing_to_push(plans, client, dashboard):
    assert push_plan(plans, client, "feature-x") == []
    assert dashboard.requests == []


def test_push_plan_unreachable(plans, client, dashboard):
    plans.save_plan("feature-x", "# Plan\n")
    dashboard.unreachable = True

    warnings = push_plan(plans, client, "feature-x")

    assert len(warnings) == 1
    assert warnings[0].startswith("could not sync plan to dashboard")

"""mob.sh and git wrapper for mob-claude.

Provides the process-execution side of a rotation: running `mob start`,
`mob next` and `mob done`, and the git queries used to identify the branch
and collect the rotation's diff.
"""

import getpass
import subprocess
from typing import Sequence

# Candidate base branches, tried in order when diffing a rotation.
BASE_BRANCH_CANDIDATES = ("origin/main", "origin/master", "main", "master")

MOB_INSTALL_HINT = "mob.sh is not installed or not in PATH. Install from: https://mob.sh"


class MobError(Exception):
    """Raised when a mob or git command fails."""

    pass


class MobNotInstalledError(MobError):
    """Raised when the mob executable is not available."""

    pass


def base_branch(branch: str) -> str:
    """Extract the logical branch name from a mob branch.

    Examples:
        "mob/feature-auth" -> "feature-auth"
        "feature-auth-wip" -> "feature-auth"
    """
    branch = branch.removeprefix("mob/")
    return branch.removesuffix("-wip")


def is_mob_branch(branch: str) -> bool:
    """Check if a branch name looks like a mob session branch."""
    return branch.startswith("mob/") or branch.endswith("-wip") or "/mob-" in branch


def _git(args: list[str]) -> str:
    """Run a git command and return its stdout.

    Raises:
        MobError: If git is missing or exits non-zero.
    """
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise MobError(f"git {args[0]} could not be run: {e}")
    if result.returncode != 0:
        raise MobError(f"git {args[0]} failed: {result.stderr.strip()}")
    return result.stdout


class MobWrapper:
    """Runs the mob CLI and the git queries around it."""

    def __init__(self, executable: str = "mob") -> None:
        self.executable = executable

    def is_installed(self) -> bool:
        """Check if mob is installed and runs."""
        try:
            result = subprocess.run(
                [self.executable, "version"],
                capture_output=True,
            )
        except OSError:
            return False
        return result.returncode == 0

    def ensure_installed(self) -> None:
        """Raises MobNotInstalledError unless mob is usable."""
        if not self.is_installed():
            raise MobNotInstalledError(MOB_INSTALL_HINT)

    def _passthrough(self, command: str, args: Sequence[str]) -> None:
        """Run a mob subcommand attached to the user's terminal."""
        try:
            result = subprocess.run([self.executable, command, *args])
        except OSError as e:
            raise MobNotInstalledError(f"{MOB_INSTALL_HINT} ({e})")
        if result.returncode != 0:
            raise MobError(f"mob {command} failed with exit code {result.returncode}")

    def start(self, args: Sequence[str] = ()) -> None:
        self._passthrough("start", args)

    def next(self, args: Sequence[str] = ()) -> None:
        self._passthrough("next", args)

    def done(self, args: Sequence[str] = ()) -> None:
        self._passthrough("done", args)

    def status(self) -> str:
        """Capture the output of `mob status`."""
        try:
            result = subprocess.run(
                [self.executable, "status"],
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise MobNotInstalledError(f"{MOB_INSTALL_HINT} ({e})")
        if result.returncode != 0:
            raise MobError(f"mob status failed: {result.stderr.strip()}")
        return result.stdout

    def current_branch(self) -> str:
        branch = _git(["branch", "--show-current"]).strip()
        if not branch:
            raise MobError("not on a branch (detached HEAD?)")
        return branch

    def base_branch(self) -> str:
        return base_branch(self.current_branch())

    def repo_url(self) -> str:
        return _git(["remote", "get-url", "origin"]).strip()

    def diff_since_last_commit(self) -> str:
        """Diff of staged and unstaged changes against HEAD.

        Falls back to a plain `git diff` in a repository with no commits.
        """
        try:
            return _git(["diff", "HEAD"])
        except MobError:
            return _git(["diff"])

    def diff_from_base(self) -> str:
        """Diff against the merge-base with the first resolvable base branch."""
        for candidate in BASE_BRANCH_CANDIDATES:
            try:
                merge_base = _git(["merge-base", candidate, "HEAD"]).strip()
                return _git(["diff", merge_base])
            except MobError:
                continue
        return self.diff_since_last_commit()

    def recent_commits(self, count: int = 10) -> str:
        return _git(["log", f"-{count}", "--oneline"])

    def driver_name(self) -> str:
        """Name of the current driver: git user.name, then OS user."""
        try:
            name = _git(["config", "--get", "user.name"]).strip()
        except MobError:
            name = ""
        if name:
            return name
        try:
            return getpass.getuser()
        except (OSError, KeyError):
            return "unknown"

"""Project location utilities for mob-claude.

All local state lives under the project root (git top-level, or cwd outside
a git repository):

- .claude/mob/config.json: configuration
- .claude/mob/current.json: the active session
- .claude/mob/summaries/: one JSON file per rotation
- .claude/plans/: one plan document per branch
"""

import subprocess
from pathlib import Path

MOB_DIR = Path(".claude") / "mob"
PLANS_DIR = Path(".claude") / "plans"


def get_root_path_for(path: Path) -> Path:
    """Get the project root for a path (git root or the path itself)."""
    try:
        result = subprocess.run(
            ["git", "-C", str(path), "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            check=True,
        )
        return Path(result.stdout.strip())
    except (subprocess.CalledProcessError, FileNotFoundError):
        return path


def get_root_path() -> Path:
    """Get the project root for the current working directory."""
    return get_root_path_for(Path.cwd())


def get_mob_dir(root: Path) -> Path:
    """Directory holding config, session and summaries."""
    return root / MOB_DIR


def get_config_path(root: Path) -> Path:
    return get_mob_dir(root) / "config.json"


def get_session_path(root: Path) -> Path:
    return get_mob_dir(root) / "current.json"


def get_summaries_dir(root: Path) -> Path:
    return get_mob_dir(root) / "summaries"


def get_plans_dir(root: Path) -> Path:
    return root / PLANS_DIR

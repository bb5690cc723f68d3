"""mob-claude configuration management.

Handles .claude/mob/config.json in the project root. The file holds a single
JSON object with camelCase keys; any missing field falls back to its default.
"""

from dataclasses import dataclass
from pathlib import Path

import orjson

from mob_claude.core.project import get_config_path

DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_MODEL = "haiku"
DEFAULT_MAX_TURNS = 3

CONFIG_KEYS = ("apiUrl", "teamName", "model", "maxTurns", "skipSummary")

# (JSON key, attribute, type, default)
FIELDS = (
    ("apiUrl", "api_url", str, DEFAULT_API_URL),
    ("teamName", "team_name", str, ""),
    ("model", "model", str, DEFAULT_MODEL),
    ("maxTurns", "max_turns", int, DEFAULT_MAX_TURNS),
    ("skipSummary", "skip_summary", bool, False),
)


class ConfigError(Exception):
    """Raised when the config file or a config value is invalid."""

    pass


@dataclass
class Config:
    """mob-claude settings.

    Attributes:
        api_url: Base URL of the team dashboard
        team_name: Dashboard team; the dashboard is unused while this is empty
        model: Model passed to the claude CLI for summaries
        max_turns: Turn budget for a single summary generation
        skip_summary: Never generate AI summaries when True
    """

    api_url: str = DEFAULT_API_URL
    team_name: str = ""
    model: str = DEFAULT_MODEL
    max_turns: int = DEFAULT_MAX_TURNS
    skip_summary: bool = False

    @property
    def remote_enabled(self) -> bool:
        """Whether the dashboard should be contacted at all."""
        return bool(self.api_url and self.team_name)

    def to_dict(self) -> dict:
        return {
            "apiUrl": self.api_url,
            "teamName": self.team_name,
            "model": self.model,
            "maxTurns": self.max_turns,
            "skipSummary": self.skip_summary,
        }

    @classmethod
    def from_dict(cls, data: dict, warnings: list[str] | None = None) -> "Config":
        """Build a config from a decoded JSON object, filling in defaults.

        Missing, empty and zero values take their default. A value of the
        wrong type raises ConfigError, unless a warnings list is given: then
        only that field falls back to its default and a message is appended.
        """
        values = {}
        for key, attr, kind, default in FIELDS:
            value = data.get(key)
            if not value and not isinstance(value, bool):
                values[attr] = default
            elif isinstance(value, kind) and (kind is bool or not isinstance(value, bool)):
                values[attr] = value
            elif warnings is None:
                raise ConfigError(f"{key} must be {kind.__name__}, got {value!r}")
            else:
                warnings.append(f"invalid {key} value {value!r}; using {default!r}")
                values[attr] = default
        return cls(**values)


def load_config(root: Path, *, warnings: list[str] | None = None) -> Config:
    """Read the config for a project, returning defaults if not found.

    Args:
        root: Project root.
        warnings: When given, fields with invalid values fall back to their
            defaults and are reported here instead of rejecting the file.

    Raises:
        ConfigError: If the file exists but cannot be read or decoded, or a
            field is invalid and no warnings list was given.
    """
    config_path = get_config_path(root)
    if not config_path.exists():
        return Config()
    try:
        content = config_path.read_bytes()
        data = orjson.loads(content) if content.strip() else {}
    except (orjson.JSONDecodeError, OSError) as e:
        raise ConfigError(f"could not read {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    return Config.from_dict(data, warnings)


def save_config(root: Path, config: Config) -> Path:
    """Write the config for a project. Returns the file path."""
    config_path = get_config_path(root)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(orjson.dumps(config.to_dict(), option=orjson.OPT_INDENT_2))
    return config_path


def set_config_value(config: Config, key: str, value: str) -> None:
    """Set a single config value from its string form.

    Args:
        config: Config to update in place.
        key: One of CONFIG_KEYS.
        value: Raw value as typed on the command line.

    Raises:
        ConfigError: For unknown keys or a non-integer maxTurns.
    """
    if key == "apiUrl":
        config.api_url = value
    elif key == "teamName":
        config.team_name = value
    elif key == "model":
        config.model = value
    elif key == "maxTurns":
        try:
            config.max_turns = int(value)
        except ValueError:
            raise ConfigError(f"invalid maxTurns value: {value}")
    elif key == "skipSummary":
        config.skip_summary = value in ("true", "1")
    else:
        raise ConfigError(
            f"unknown config key: {key}\nAvailable keys: {', '.join(CONFIG_KEYS)}"
        )

"""Rotation summary synthesis.

Turns a git diff and the driver's note into a structured summary using the
Claude CLI. Backend failures never reach the caller: an unavailable CLI, a
failing call, or output that does not match the expected shape all yield a
deterministic fallback summary instead.
"""

import shutil
import subprocess
from typing import Protocol

import orjson

from mob_claude.core.summary import SummaryContent

MAX_DIFF_LENGTH = 10_000
TRUNCATION_MARKER = "\n... (truncated)"
MAX_TLDR_LENGTH = 100

FALLBACK_TLDR = "Rotation completed"
SKIPPED_TLDR = "Rotation completed (summary skipped)"
FALLBACK_CHANGES = ["Changes made during rotation"]
FALLBACK_NEXT_STEPS = ["Continue from where the previous driver left off"]

PROMPT_TEMPLATE = """Analyze this git diff from a mob programming rotation and create a brief summary.

Driver's note: {note}

Git diff:
{diff}

Return a JSON object with:
- tldr: One sentence summary of what was accomplished (max 100 chars)
- changes: Array of 2-4 specific changes made
- nextSteps: Array of 1-3 suggested next steps for the next driver

Respond ONLY with a single valid JSON object, no explanation."""


class GenerationError(Exception):
    """Raised when the text-generation backend cannot produce output."""

    pass


class SummaryParseError(ValueError):
    """Raised when backend output is not a well-formed summary object."""

    pass


class ContentGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


class ClaudeGenerator:
    """Generates text with `claude -p`."""

    def __init__(self, model: str, max_turns: int, *, timeout: float = 120) -> None:
        self.model = model
        self.max_turns = max_turns
        self.timeout = timeout

    def generate(self, prompt: str) -> str:
        """Run the Claude CLI once and return its stdout.

        Raises:
            GenerationError: If the CLI is missing, times out, exits non-zero,
                or prints nothing.
        """
        if shutil.which("claude") is None:
            raise GenerationError("claude CLI not found in PATH")

        try:
            result = subprocess.run(
                [
                    "claude",
                    "-p",
                    prompt,
                    "--model",
                    self.model,
                    "--max-turns",
                    str(self.max_turns),
                    "--output-format",
                    "text",
                ],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise GenerationError(f"claude CLI timed out after {self.timeout}s")
        except OSError as e:
            raise GenerationError(f"claude CLI could not be run: {e}")

        if result.returncode != 0:
            raise GenerationError(
                f"claude CLI failed (exit {result.returncode}): {result.stderr.strip()}"
            )
        if not result.stdout.strip():
            raise GenerationError("claude CLI returned no output")
        return result.stdout


def truncate_diff(diff: str) -> str:
    """Cut a diff to MAX_DIFF_LENGTH characters, marking the cut."""
    if len(diff) > MAX_DIFF_LENGTH:
        return diff[:MAX_DIFF_LENGTH] + TRUNCATION_MARKER
    return diff


def truncate_note(note: str) -> str:
    """Shorten a note to at most MAX_TLDR_LENGTH characters.

    Longer notes keep their first 97 characters followed by "...".
    """
    if len(note) > MAX_TLDR_LENGTH:
        return note[: MAX_TLDR_LENGTH - 3] + "..."
    return note


def build_prompt(diff: str, driver_note: str) -> str:
    return PROMPT_TEMPLATE.format(note=driver_note, diff=truncate_diff(diff))


def _unwrap_fence(text: str) -> str:
    """Strip one surrounding ``` or ```json fence, if present."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    first_newline = text.find("\n")
    if first_newline == -1 or not text.endswith("```"):
        raise SummaryParseError("unterminated code fence in response")
    return text[first_newline + 1 : -3].strip()


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SummaryParseError(f"'{key}' must be a list of strings")
    return value


def parse_response(response: str) -> SummaryContent:
    """Parse backend output into summary content.

    The response must be exactly one JSON object, optionally wrapped in a
    fenced code block. Surrounding prose is rejected rather than sliced away,
    so a reply such as "Here is the summary:" followed by a fence is treated
    as a failed call and the rotation gets the fallback summary.

    Raises:
        SummaryParseError: If the response does not have the expected shape.
    """
    body = _unwrap_fence(response)
    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise SummaryParseError(f"response is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise SummaryParseError("response is not a JSON object")

    tldr = data.get("tldr")
    if not isinstance(tldr, str) or not tldr.strip():
        raise SummaryParseError("'tldr' must be a non-empty string")

    return SummaryContent(
        tldr=tldr.strip(),
        changes=_string_list(data, "changes"),
        next_steps=_string_list(data, "nextSteps"),
    )


def fallback_summary(driver_note: str, reason: str | None = None) -> SummaryContent:
    """Deterministic summary used when the backend is unavailable."""
    return SummaryContent(
        tldr=truncate_note(driver_note) if driver_note else FALLBACK_TLDR,
        changes=list(FALLBACK_CHANGES),
        next_steps=list(FALLBACK_NEXT_STEPS),
        fallback_reason=reason or "summary backend unavailable",
    )


def note_only_summary(driver_note: str) -> SummaryContent:
    """Minimal summary for rotations where generation was skipped."""
    return SummaryContent(tldr=truncate_note(driver_note) if driver_note else SKIPPED_TLDR)


def synthesize(
    diff: str,
    driver_note: str,
    branch: str,
    *,
    generator: ContentGenerator,
) -> SummaryContent:
    """Summarize a rotation.

    Calls the generator exactly once. Never raises for backend problems;
    check `fallback_reason` on the result to see whether the fallback was used.

    Args:
        diff: Changes made during the rotation.
        driver_note: Free-form note from the driver (may be empty).
        branch: Branch the rotation happened on.
        generator: Content-generation backend.

    Returns:
        SummaryContent with a non-empty tldr, changes and next steps.
    """
    prompt = build_prompt(diff, driver_note)
    if branch:
        prompt = f"Branch: {branch}\n\n{prompt}"

    try:
        content = parse_response(generator.generate(prompt))
    except (GenerationError, SummaryParseError) as e:
        return fallback_summary(driver_note, str(e))

    if not content.changes:
        content.changes = list(FALLBACK_CHANGES)
    if not content.next_steps:
        content.next_steps = list(FALLBACK_NEXT_STEPS)
    return content

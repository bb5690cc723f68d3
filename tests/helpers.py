"""In-memory stand-ins for the mob CLI, the summary backend and the dashboard."""

from datetime import datetime, timedelta, timezone
from urllib.parse import unquote

import httpx
import orjson

from mob_claude.core.mob import MOB_INSTALL_HINT, MobError, MobNotInstalledError, base_branch
from mob_claude.core.summarize import GenerationError

TEAM = "platform"
API_URL = "http://dashboard.test"

GOOD_RESPONSE = orjson.dumps(
    {
        "tldr": "Added login form validation",
        "changes": ["Validate email field", "Show inline errors"],
        "nextSteps": ["Wire up the submit handler"],
    }
).decode()


class FakeMob:
    """In-memory stand-in for MobWrapper."""

    def __init__(
        self,
        branch: str | None = "mob/feature-x",
        *,
        installed: bool = True,
        diff: str | None = "diff --git a/app.py b/app.py\n+print('hi')\n",
        repo_url: str | None = "git@github.com:acme/app.git",
        driver: str = "Ada",
        fail_on: str = "",
    ) -> None:
        self.branch = branch
        self.installed = installed
        self.diff = diff
        self._repo_url = repo_url
        self.driver = driver
        self.fail_on = fail_on
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def is_installed(self) -> bool:
        return self.installed

    def ensure_installed(self) -> None:
        if not self.installed:
            raise MobNotInstalledError(MOB_INSTALL_HINT)

    def _run(self, command: str, args) -> None:
        self.calls.append((command, tuple(args)))
        if self.fail_on == command:
            raise MobError(f"mob {command} failed with exit code 1")

    def start(self, args=()) -> None:
        self._run("start", args)
        if args and not args[0].startswith("-"):
            self.branch = args[0]

    def next(self, args=()) -> None:
        self._run("next", args)

    def done(self, args=()) -> None:
        self._run("done", args)

    def status(self) -> str:
        return "you are on base branch 'main'\n"

    def current_branch(self) -> str:
        if self.branch is None:
            raise MobError("not on a branch (detached HEAD?)")
        return self.branch

    def base_branch(self) -> str:
        return base_branch(self.current_branch())

    def repo_url(self) -> str:
        if self._repo_url is None:
            raise MobError("git remote failed: No such remote 'origin'")
        return self._repo_url

    def diff_from_base(self) -> str:
        if self.diff is None:
            raise MobError("git diff failed: not a git repository")
        return self.diff

    def recent_commits(self, count: int = 10) -> str:
        return "abc1234 mob next [ci-skip]\n"

    def driver_name(self) -> str:
        return self.driver

    @property
    def commands(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeGenerator:
    """In-memory content-generation backend."""

    def __init__(self, response: str = GOOD_RESPONSE, error: str = "") -> None:
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise GenerationError(self.error)
        return self.response


class FakeDashboard:
    """Stateful dashboard served through httpx.MockTransport."""

    def __init__(self, team: str = TEAM) -> None:
        self.team = team
        self.plans: dict[str, str] = {}
        self.workstreams: dict[str, dict] = {}
        self.rotations: list[dict] = []
        self.requests: list[tuple[str, str]] = []
        self.unreachable = False
        self.error_status: int | None = None

    @property
    def writes(self) -> list[tuple[str, str]]:
        return [r for r in self.requests if r[0] != "GET"]

    def _json(self, status: int, data) -> httpx.Response:
        return httpx.Response(status, content=orjson.dumps(data))

    def handler(self, request: httpx.Request) -> httpx.Response:
        raw_path = request.url.raw_path.decode().split("?")[0]
        self.requests.append((request.method, raw_path))
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)
        if self.error_status is not None:
            return httpx.Response(self.error_status, text="internal error")

        parts = [unquote(p) for p in raw_path.strip("/").split("/")]
        if parts[:1] != ["api"]:
            return httpx.Response(404, text="not found")
        parts = parts[1:]

        if parts == ["health"]:
            return self._json(200, {"status": "ok"})
        if len(parts) < 2 or parts[0] != "teams" or parts[1] != self.team:
            return httpx.Response(404, text="team not found")

        rest = parts[2:]
        body = orjson.loads(request.content) if request.content else None

        if not rest and request.method == "GET":
            return self._json(
                200,
                {
                    "id": "team-1",
                    "name": self.team,
                    "workstreams": list(self.workstreams.values()),
                },
            )
        if rest == ["workstreams"] and request.method == "POST":
            branch = body["branch"]
            ws = self.workstreams.setdefault(
                branch,
                {
                    "id": f"ws-{len(self.workstreams) + 1}",
                    "teamId": "team-1",
                    "repoUrl": body["repoUrl"],
                    "branch": branch,
                    "isActive": True,
                },
            )
            return self._json(201, ws)
        if len(rest) == 2 and rest[0] == "workstreams" and request.method == "GET":
            ws = self.workstreams.get(rest[1])
            if ws is None:
                return httpx.Response(404, text="workstream not found")
            return self._json(200, {**ws, "planText": self.plans.get(rest[1], "")})
        if len(rest) == 3 and rest[2] == "plan":
            branch = rest[1]
            if request.method == "GET":
                if branch not in self.plans:
                    return httpx.Response(404, text="plan not found")
                return self._json(200, {"planText": self.plans[branch]})
            if request.method == "PUT":
                self.plans[branch] = body["planText"]
                return self._json(200, {"planText": body["planText"]})
        if len(rest) == 3 and rest[2] == "rotations" and request.method == "POST":
            rotation = {
                "id": f"rot-{len(self.rotations) + 1}",
                "workstreamId": self.workstreams.get(rest[1], {}).get("id", ""),
                **body,
            }
            self.rotations.append(rotation)
            return self._json(201, rotation)

        return httpx.Response(404, text="not found")


class Clock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now

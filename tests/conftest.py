import sys
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from click.testing import CliRunner
import httpx
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from vdk_publish.channels.interfaces import (  # noqa: E402
    HubAuthStatus,
    HubUploadResult,
    IGitHubChannel,
    IHubChannel,
    PullRequestResult,
)
from vdk_publish.models import (  # noqa: E402
    Blueprint,
    HubShareStatus,
    ProjectContext,
)


LONG_PROSE = (
    "Keep components small and focused on a single responsibility. "
    "Prefer composition over inheritance when sharing behaviour. "
    "Name files after the component they export. "
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in (
        "GITHUB_TOKEN",
        "VDK_GITHUB_TOKEN",
        "VDK_GITHUB_API_URL",
        "VDK_HUB_URL",
        "VDK_HUB_API_KEY",
        "VDK_HUB_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "shop-app"
    root.mkdir()
    (root / "package.json").write_text(
        json.dumps({"name": "shop-app", "dependencies": {"react": "^18.0.0"}}),
        encoding="utf-8",
    )
    (root / "src").mkdir()
    (root / "src" / "App.tsx").write_text("export const App = () => null;\n", encoding="utf-8")
    return root


@pytest.fixture
def project_context() -> ProjectContext:
    return ProjectContext(
        name="shop-app",
        framework="react",
        language="typescript",
        technologies=("nodejs", "react"),
    )


@pytest.fixture
def write_rule(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / "rules" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cursor_rule(write_rule) -> Path:
    content = (
        "# React Guidelines\n\n"
        "- Use function components with hooks.\n"
        "- Keep state close to where it is used.\n\n"
        "```tsx\nexport function Button() { return <button />; }\n```\n\n"
        + LONG_PROSE
    )
    return write_rule(".cursorrules", content)


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()


class FakeHubChannel(IHubChannel):
    def __init__(self, authenticated: bool = True, accept_token: Optional[str] = None) -> None:
        self.authenticated = authenticated
        self.accept_token = accept_token
        self.saved_tokens: list[str] = []
        self.uploads: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def check_auth(self) -> HubAuthStatus:
        self.calls.append("check_auth")
        return HubAuthStatus(authenticated=self.authenticated, user="dev" if self.authenticated else None)

    def auth_url(self) -> str:
        return "https://hub.test/auth/github?state=abc&client=cli"

    def save_auth_token(self, token: str) -> None:
        self.calls.append("save_auth_token")
        self.saved_tokens.append(token)
        if self.accept_token is not None and token == self.accept_token:
            self.authenticated = True

    def upload_blueprint(
        self,
        blueprint: Blueprint,
        status: HubShareStatus,
        expires_at: datetime,
        metadata: dict[str, Any],
    ) -> HubUploadResult:
        self.calls.append("upload_blueprint")
        self.uploads.append(
            {
                "blueprint": blueprint,
                "status": status,
                "expires_at": expires_at,
                "metadata": metadata,
            }
        )
        return HubUploadResult(
            blueprint_id=blueprint.id,
            temp_url=f"https://hub.test/b/{blueprint.id}",
            expires_at=expires_at.isoformat(),
        )


class FakeGitHubChannel(IGitHubChannel):
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.requests: list[dict[str, Any]] = []
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def create_community_blueprint_pr(
        self,
        blueprint: Blueprint,
        original_path: str,
        project_context: ProjectContext,
        quality_score: int,
        custom_name: Optional[str] = None,
    ) -> PullRequestResult:
        self.requests.append(
            {
                "blueprint": blueprint,
                "original_path": original_path,
                "quality_score": quality_score,
                "custom_name": custom_name,
            }
        )
        if self.error is not None:
            raise self.error
        blueprint_id = custom_name or blueprint.id
        return PullRequestResult(
            pr_url="https://github.com/entro314-labs/VDK-Blueprints/pull/7",
            pr_number=7,
            blueprint_id=blueprint_id,
            branch_name=f"community-blueprint-{blueprint_id}",
            file_path=f"community/{blueprint.category}/{blueprint_id}.yaml",
        )


@pytest.fixture
def fake_hub() -> FakeHubChannel:
    return FakeHubChannel()


@pytest.fixture
def fake_github() -> FakeGitHubChannel:
    return FakeGitHubChannel()


@pytest.fixture
def no_network(monkeypatch) -> list[str]:
    """Fail any httpx request made while the fixture is active."""
    attempts: list[str] = []

    def _blocked(self, request, *args, **kwargs):
        attempts.append(str(request.url))
        raise AssertionError(f"unexpected network call: {request.url}")

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _blocked)
    return attempts


@pytest.fixture
def hub_factory() -> type[FakeHubChannel]:
    return FakeHubChannel


@pytest.fixture
def github_factory() -> type[FakeGitHubChannel]:
    return FakeGitHubChannel

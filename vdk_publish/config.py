import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from vdk_publish.constants import (
    GITHUB_API_URL,
    GITHUB_BASE_BRANCH,
    GITHUB_REPO_NAME,
    GITHUB_REPO_OWNER,
    GITHUB_TOKEN_ENV,
    HUB_URL,
)


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def default_hub_token_path() -> Path:
    return Path.home() / ".config" / "vdk" / "hub-auth"


@dataclass(frozen=True)
class GitHubSettings:
    token: str | None = None
    api_url: str = GITHUB_API_URL
    repo_owner: str = GITHUB_REPO_OWNER
    repo_name: str = GITHUB_REPO_NAME
    base_branch: str = GITHUB_BASE_BRANCH
    fork_settle_seconds: float = 3.0
    timeout: float = 30.0

    @property
    def upstream(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "GitHubSettings":
        source = os.environ if env is None else env
        token = next(
            (source[name] for name in GITHUB_TOKEN_ENV if source.get(name)), None
        )
        return cls(
            token=token,
            api_url=source.get("VDK_GITHUB_API_URL") or GITHUB_API_URL,
        )


@dataclass(frozen=True)
class HubSettings:
    base_url: str = HUB_URL
    api_key: str | None = None
    timeout: float = 30.0
    auth_token_path: Path = field(default_factory=default_hub_token_path)

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api"

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "HubSettings":
        source = os.environ if env is None else env
        return cls(
            base_url=source.get("VDK_HUB_URL") or HUB_URL,
            api_key=source.get("VDK_HUB_API_KEY") or None,
            timeout=_env_float(source, "VDK_HUB_TIMEOUT", 30.0),
        )

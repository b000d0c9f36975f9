from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from vdk_publish.models import Blueprint, HubShareStatus, ProjectContext


@dataclass(frozen=True)
class HubAuthStatus:
    authenticated: bool
    user: Optional[str] = None
    email: Optional[str] = None


@dataclass(frozen=True)
class HubUploadResult:
    blueprint_id: str
    temp_url: str
    expires_at: str
    confirmation_required: bool = False


@dataclass(frozen=True)
class PullRequestResult:
    pr_url: str
    pr_number: int
    blueprint_id: str
    branch_name: str
    file_path: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "pr_url": self.pr_url,
            "pr_number": self.pr_number,
            "blueprint_id": self.blueprint_id,
            "branch_name": self.branch_name,
            "file_path": self.file_path,
        }


class IHubChannel(ABC):
    def close(self) -> None:
        """Release the underlying HTTP client, if any."""

    @abstractmethod
    def check_auth(self) -> HubAuthStatus:
        raise NotImplementedError

    @abstractmethod
    def auth_url(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def save_auth_token(self, token: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def upload_blueprint(
        self,
        blueprint: Blueprint,
        status: HubShareStatus,
        expires_at: datetime,
        metadata: dict[str, Any],
    ) -> HubUploadResult:
        raise NotImplementedError


class IGitHubChannel(ABC):
    def close(self) -> None:
        """Release the underlying HTTP client, if any."""

    @abstractmethod
    def create_community_blueprint_pr(
        self,
        blueprint: Blueprint,
        original_path: str,
        project_context: ProjectContext,
        quality_score: int,
        custom_name: str | None = None,
    ) -> PullRequestResult:
        raise NotImplementedError

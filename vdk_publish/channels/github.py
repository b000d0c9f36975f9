"""Open community blueprint pull requests against the blueprints repository.

Every step tolerates being re-run: an existing fork is reused, an existing
branch is kept, an existing file is updated in place (last writer wins) and an
already-open pull request for the same head is returned as-is. Nothing is
cleaned up when a later step fails.
"""

from __future__ import annotations

import base64
import logging
import re
import time
from typing import Any, Callable

import httpx

from vdk_publish.channels.interfaces import IGitHubChannel, PullRequestResult
from vdk_publish.config import GitHubSettings
from vdk_publish.constants import (
    COMMUNITY_DIRNAME,
    GITHUB_TOKEN_SCOPES,
    GITHUB_TOKEN_URL,
    USER_AGENT,
)
from vdk_publish.conversion.frontmatter import serialize_blueprint
from vdk_publish.errors import ChannelError, GitHubAuthError, RepositoryNotFoundError
from vdk_publish.models import Blueprint, ProjectContext
from vdk_publish.utils import now_millis, slugify, to_base36, utc_now_iso

logger = logging.getLogger(__name__)

TOKEN_REMEDIATION = (
    "Set GITHUB_TOKEN or VDK_GITHUB_TOKEN environment variable.\n"
    f"Get a token from: {GITHUB_TOKEN_URL}\n"
    f"Required permissions: {GITHUB_TOKEN_SCOPES}"
)

_USERNAME_INVALID_RE = re.compile(r"[^a-z0-9]")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"HTTP {response.status_code}"


def generate_blueprint_id(
    frontmatter: dict[str, Any], username: str, millis: int | None = None
) -> str:
    title = str(frontmatter.get("title") or "untitled-blueprint")
    clean_title = slugify(title, max_length=30, fallback="untitled-blueprint")
    user_suffix = _USERNAME_INVALID_RE.sub("", username.lower())[:10] or "community"
    stamp = to_base36(now_millis() if millis is None else millis)
    return f"{clean_title}-{user_suffix}-{stamp}"


def render_pr_description(
    frontmatter: dict[str, Any], quality_score: int, file_path: str, blueprint_id: str
) -> str:
    tags = frontmatter.get("tags") or []
    platforms = frontmatter.get("platforms") or {}
    project = frontmatter.get("projectContext") or {}
    return f"""## Community Blueprint Contribution

**Blueprint Title**: {frontmatter.get("title", "")}
**Category**: {frontmatter.get("category", "core")}
**Quality Score**: {quality_score}/10
**File Path**: `{file_path}`

### Description
{frontmatter.get("description", "")}

### Technologies
{", ".join(str(tag) for tag in tags)}

### Target Platforms
{", ".join(str(name) for name in platforms)}

### Submission Details
- **Complexity**: {frontmatter.get("complexity", "unknown")}
- **Scope**: {frontmatter.get("scope", "unknown")}
- **Audience**: {frontmatter.get("audience", "unknown")}
- **Maturity**: {frontmatter.get("maturity", "unknown")}

### Review Checklist
- [ ] Blueprint follows the VDK Blueprint schema
- [ ] Content is clear and actionable
- [ ] No sensitive information (secrets, API keys) included
- [ ] Examples provided where appropriate
- [ ] Platform compatibility settings are appropriate
- [ ] Tags and categories are accurate

### Community Guidelines
This blueprint was contributed with vdk-publish. The content has been:
- Automatically validated for format compliance
- Scanned for security issues
- Quality-scored based on structure and examples
- Converted to the universal VDK Blueprint format

### Next Steps
After review and approval, deploy this blueprint with:
```bash
vdk deploy {blueprint_id}
```

---

**Quality Score**: {quality_score}/10 | **Format**: {frontmatter.get("originalFormat", "unknown")}
**Original Project**: {project.get("name", "Unknown") if isinstance(project, dict) else "Unknown"}
"""


class GitHubChannel(IGitHubChannel):
    def __init__(
        self,
        settings: GitHubSettings | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or GitHubSettings.from_env()
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=self.settings.api_url, timeout=self.settings.timeout
        )
        self._headers = headers
        self._sleep = sleep

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    @property
    def repo_name(self) -> str:
        return self.settings.repo_name

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, path, headers=self._headers, **kwargs)
        except httpx.HTTPError as exc:
            raise ChannelError(
                channel="github",
                message=f"GitHub request failed: {exc}",
                hint="Check your network connection and try again.",
            ) from exc
        if response.status_code == 401:
            raise GitHubAuthError(
                "GitHub token is invalid. Please check your GITHUB_TOKEN environment variable.",
                remediation=TOKEN_REMEDIATION,
            )
        return response

    def _fail(self, action: str, response: httpx.Response) -> ChannelError:
        return ChannelError(
            channel="github",
            message=f"{action}: {_error_message(response)}",
            status_code=response.status_code,
            hint="Re-run the command; completed steps are reused.",
        )

    def resolve_identity(self) -> str:
        if not self.settings.token:
            raise GitHubAuthError("GitHub token required.", remediation=TOKEN_REMEDIATION)
        response = self._request("GET", "/user")
        if not response.is_success:
            raise GitHubAuthError(
                f"GitHub authentication failed: {_error_message(response)}",
                remediation=TOKEN_REMEDIATION,
            )
        return str(response.json()["login"])

    def ensure_fork(self, username: str) -> dict[str, Any]:
        response = self._request("GET", f"/repos/{username}/{self.repo_name}")
        if response.is_success:
            return response.json()
        if response.status_code != 404:
            raise self._fail("Failed to look up fork", response)

        logger.info("Creating fork of %s", self.settings.upstream)
        created = self._request("POST", f"/repos/{self.settings.upstream}/forks")
        if created.status_code == 404:
            raise RepositoryNotFoundError(self.settings.upstream)
        if not created.is_success:
            raise self._fail("Failed to create fork", created)

        # Forks are created asynchronously and are not queryable right away.
        logger.info("Waiting %.1fs for fork to settle", self.settings.fork_settle_seconds)
        self._sleep(self.settings.fork_settle_seconds)
        return created.json()

    def create_branch(self, username: str, branch_name: str) -> None:
        repo = f"/repos/{username}/{self.repo_name}"
        ref = self._request("GET", f"{repo}/git/ref/heads/{self.settings.base_branch}")
        if not ref.is_success:
            raise self._fail("Failed to create branch", ref)
        sha = ref.json()["object"]["sha"]

        created = self._request(
            "POST",
            f"{repo}/git/refs",
            json={"ref": f"refs/heads/{branch_name}", "sha": sha},
        )
        if created.status_code == 422:
            logger.warning("Branch %s may already exist, continuing", branch_name)
            return
        if not created.is_success:
            raise self._fail("Failed to create branch", created)

    def create_file(
        self,
        username: str,
        branch_name: str,
        file_path: str,
        content: str,
        blueprint_id: str,
    ) -> None:
        url = f"/repos/{username}/{self.repo_name}/contents/{file_path}"
        payload: dict[str, Any] = {
            "message": f"Add community blueprint: {blueprint_id}",
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch_name,
        }
        existing = self._request("GET", url, params={"ref": branch_name})
        if existing.is_success:
            sha = existing.json().get("sha")
            if sha:
                payload["sha"] = sha
                payload["message"] = f"Update community blueprint: {blueprint_id}"

        response = self._request("PUT", url, json=payload)
        if not response.is_success:
            raise self._fail("Failed to create file", response)

    def create_pull_request(
        self,
        username: str,
        branch_name: str,
        frontmatter: dict[str, Any],
        quality_score: int,
        file_path: str,
        blueprint_id: str,
    ) -> dict[str, Any]:
        head = f"{username}:{branch_name}"
        pulls = f"/repos/{self.settings.upstream}/pulls"
        response = self._request(
            "POST",
            pulls,
            json={
                "title": f"Add community blueprint: {frontmatter.get('title', blueprint_id)}",
                "head": head,
                "base": self.settings.base_branch,
                "body": render_pr_description(
                    frontmatter, quality_score, file_path, blueprint_id
                ),
                "maintainer_can_modify": True,
            },
        )
        if response.is_success:
            return response.json()
        if response.status_code == 404:
            raise RepositoryNotFoundError(self.settings.upstream)
        if response.status_code == 422:
            existing = self._request("GET", pulls, params={"head": head, "state": "open"})
            if existing.is_success and existing.json():
                logger.warning("Pull request for %s already open, reusing it", head)
                return existing.json()[0]
        raise self._fail("Failed to create pull request", response)

    def check_pr_status(self, username: str, branch_name: str) -> dict[str, Any]:
        response = self._request(
            "GET",
            f"/repos/{self.settings.upstream}/pulls",
            params={"head": f"{username}:{branch_name}", "state": "all"},
        )
        if not response.is_success:
            return {"exists": False, "error": _error_message(response)}
        prs = response.json()
        if not prs:
            return {"exists": False}
        pr = prs[0]
        return {
            "exists": True,
            "status": pr.get("state"),
            "merged": pr.get("merged_at") is not None,
            "url": pr.get("html_url"),
            "number": pr.get("number"),
        }

    def blueprint_yaml(
        self,
        blueprint: Blueprint,
        project_context: ProjectContext,
        original_path: str | None,
        blueprint_id: str | None = None,
    ) -> str:
        frontmatter = {
            **blueprint.frontmatter,
            "id": blueprint_id or blueprint.id,
            "contributedBy": "vdk-publish community",
            "contributedAt": utc_now_iso(),
            "originalFile": original_path.replace("\\", "/").split("/")[-1]
            if original_path
            else "unknown",
            "projectContext": project_context.as_dict(),
        }
        return serialize_blueprint(frontmatter, blueprint.content)

    def create_community_blueprint_pr(
        self,
        blueprint: Blueprint,
        original_path: str,
        project_context: ProjectContext,
        quality_score: int,
        custom_name: str | None = None,
    ) -> PullRequestResult:
        username = self.resolve_identity()

        if custom_name:
            blueprint_id = slugify(custom_name)
        else:
            blueprint_id = generate_blueprint_id(blueprint.frontmatter, username)
        file_path = f"{COMMUNITY_DIRNAME}/{blueprint.category}/{blueprint_id}.yaml"
        branch_name = f"community-blueprint-{blueprint_id}"

        try:
            self.ensure_fork(username)
            self.create_branch(username, branch_name)
            self.create_file(
                username,
                branch_name,
                file_path,
                self.blueprint_yaml(
                    blueprint, project_context, original_path, blueprint_id
                ),
                blueprint_id,
            )
            pr = self.create_pull_request(
                username,
                branch_name,
                blueprint.frontmatter,
                quality_score,
                file_path,
                blueprint_id,
            )
        except (GitHubAuthError, RepositoryNotFoundError):
            raise
        except ChannelError as exc:
            raise ChannelError(
                channel="github",
                message=f"GitHub PR creation failed: {exc.message}",
                status_code=exc.status_code,
                hint=exc.hint,
            ) from exc

        return PullRequestResult(
            pr_url=str(pr.get("html_url", "")),
            pr_number=int(pr.get("number", 0)),
            blueprint_id=blueprint_id,
            branch_name=branch_name,
            file_path=file_path,
        )

"""Client for the hosted blueprint catalog (VDK Hub)."""

from __future__ import annotations

import logging
import os
import secrets
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from vdk_publish.channels.interfaces import HubAuthStatus, HubUploadResult, IHubChannel
from vdk_publish.config import HubSettings
from vdk_publish.constants import USER_AGENT
from vdk_publish.errors import HubAuthError, HubError
from vdk_publish.models import Blueprint, HubShareStatus
from vdk_publish.utils import to_jsonable

logger = logging.getLogger(__name__)

# status -> (message override, error code, retryable)
_STATUS_ERRORS: dict[int, tuple[str | None, str, bool]] = {
    400: (None, "BAD_REQUEST", False),
    401: ("Authentication failed", "UNAUTHORIZED", False),
    403: ("Access denied", "FORBIDDEN", False),
    404: ("Resource not found", "NOT_FOUND", False),
    409: (None, "CONFLICT", True),
    410: ("Resource expired", "GONE", False),
    429: ("Rate limit exceeded", "RATE_LIMITED", True),
    500: ("Server error", "SERVER_ERROR", True),
    503: ("Service unavailable", "UNAVAILABLE", True),
}


def hub_error_from_response(response: httpx.Response) -> HubError:
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    detail = None
    if isinstance(payload, dict):
        detail = payload.get("error") or payload.get("message")
    message = str(detail) if detail else f"HTTP {response.status_code}"

    known = _STATUS_ERRORS.get(response.status_code)
    if known is None:
        return HubError(
            message,
            status_code=response.status_code,
            error_code="UNKNOWN",
            retryable=response.status_code >= 500,
        )
    override, code, retryable = known
    return HubError(
        override or message,
        status_code=response.status_code,
        error_code=code,
        retryable=retryable,
    )


class HubChannel(IHubChannel):
    def __init__(
        self,
        settings: HubSettings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or HubSettings.from_env()
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.settings.timeout)
        self._auth_token: str | None = None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    @property
    def token_path(self) -> Path:
        return self.settings.auth_token_path

    def load_auth_token(self) -> str | None:
        try:
            token = self.token_path.read_text(encoding="utf-8").strip()
        except OSError:
            return None
        return token or None

    def save_auth_token(self, token: str) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(token.strip(), encoding="utf-8")
        os.chmod(self.token_path, 0o600)
        self._auth_token = token.strip()

    def clear_auth_token(self) -> None:
        self.token_path.unlink(missing_ok=True)
        self._auth_token = None

    def _token(self) -> str | None:
        if self.settings.api_key:
            return self.settings.api_key
        if self._auth_token is None:
            self._auth_token = self.load_auth_token()
        return self._auth_token

    def auth_url(self) -> str:
        state = secrets.token_urlsafe(8)
        return f"{self.settings.base_url.rstrip('/')}/auth/github?state={state}&client=cli"

    def check_auth(self) -> HubAuthStatus:
        if not self._token():
            return HubAuthStatus(authenticated=False)
        try:
            data = self._request("GET", "/auth/verify")
        except HubError as exc:
            logger.warning("Hub auth check failed: %s", exc.message)
            if not self.settings.api_key:
                self.clear_auth_token()
            return HubAuthStatus(authenticated=False)
        return HubAuthStatus(
            authenticated=True,
            user=data.get("user"),
            email=data.get("email"),
        )

    def upload_blueprint(
        self,
        blueprint: Blueprint,
        status: HubShareStatus,
        expires_at: datetime,
        metadata: dict[str, Any],
    ) -> HubUploadResult:
        payload = {
            "blueprint": {
                "frontmatter": blueprint.frontmatter,
                "content": blueprint.content,
                "format": "vdk-blueprint",
                "originalFormat": blueprint.original_format.value,
            },
            "status": status.value,
            "expires_at": expires_at.isoformat(),
            "metadata": metadata,
        }
        result = self._request("POST", "/blueprints/upload", payload=payload)
        return HubUploadResult(
            blueprint_id=str(result.get("blueprint_id") or blueprint.id),
            temp_url=str(result.get("temp_url", "")),
            expires_at=str(result.get("expires_at") or expires_at.isoformat()),
            confirmation_required=bool(result.get("confirmation_required", False)),
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        # One attempt per call; HubError.retryable tells callers whether to try again.
        token = self._token()
        if not token:
            raise HubAuthError(
                "Hub authentication required",
                remediation="Set VDK_HUB_API_KEY or publish with --github.",
            )

        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "Authorization": f"Bearer {token}",
        }
        url = f"{self.settings.api_url}{endpoint}"
        body = to_jsonable(payload) if payload is not None else None
        try:
            response = self._client.request(method, url, headers=headers, json=body)
        except httpx.HTTPError as exc:
            raise HubError(
                f"VDK Hub unreachable: {exc}", error_code="NETWORK", retryable=True
            ) from exc

        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                return {}
            return data if isinstance(data, dict) else {}
        raise hub_error_from_response(response)

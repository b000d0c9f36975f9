"""Tests for the VDK Hub channel (no real network)."""

import json
import stat
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

from vdk_publish.channels.hub import HubChannel, hub_error_from_response
from vdk_publish.config import HubSettings
from vdk_publish.errors import HubAuthError, HubError
from vdk_publish.models import Blueprint, FormatKind, HubShareStatus

EXPIRES = datetime(2026, 1, 2, 12, 0, tzinfo=timezone.utc)


def _hub(handler, tmp_path: Path, api_key: str | None = "key-1") -> HubChannel:
    settings = HubSettings(
        base_url="https://hub.test",
        api_key=api_key,
        auth_token_path=tmp_path / "vdk" / "hub-auth",
    )
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HubChannel(settings=settings, client=client)


@pytest.fixture
def blueprint() -> Blueprint:
    return Blueprint(
        frontmatter={"id": "hooks-1", "title": "Hooks", "created": datetime(2026, 1, 1).date()},
        content="# Hooks\n",
        original_format=FormatKind.MARKDOWN,
    )


def test_upload_sends_status_and_expiry(tmp_path: Path, blueprint: Blueprint) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"blueprint_id": "hub-7", "temp_url": "https://hub.test/t/7", "expires_at": "later"},
        )

    result = _hub(handler, tmp_path).upload_blueprint(
        blueprint, HubShareStatus.PRIVATE, EXPIRES, {"qualityScore": 6}
    )

    assert result.blueprint_id == "hub-7"
    assert result.temp_url == "https://hub.test/t/7"
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "https://hub.test/api/blueprints/upload"
    assert request.headers["Authorization"] == "Bearer key-1"
    payload = json.loads(request.content)
    assert payload["status"] == "private"
    assert payload["expires_at"] == EXPIRES.isoformat()
    assert payload["blueprint"]["frontmatter"]["created"] == "2026-01-01"
    assert payload["blueprint"]["originalFormat"] == "markdown"
    assert payload["metadata"] == {"qualityScore": 6}


def test_server_error_on_upload_is_sent_once(tmp_path: Path, blueprint: Blueprint) -> None:
    responses = [httpx.Response(500, json={"error": "boom"}), httpx.Response(200, json={})]
    posts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        posts.append(request)
        return responses.pop(0)

    with pytest.raises(HubError) as exc_info:
        _hub(handler, tmp_path).upload_blueprint(
            blueprint, HubShareStatus.PENDING_CONFIRMATION, EXPIRES, {}
        )

    assert len(posts) == 1
    assert exc_info.value.error_code == "SERVER_ERROR"
    assert exc_info.value.retryable is True
    assert exc_info.value.channel == "hub"


def test_rate_limited_upload_is_not_replayed(tmp_path: Path, blueprint: Blueprint) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(429)

    with pytest.raises(HubError) as exc_info:
        _hub(handler, tmp_path).upload_blueprint(blueprint, HubShareStatus.PRIVATE, EXPIRES, {})

    assert len(calls) == 1
    assert exc_info.value.error_code == "RATE_LIMITED"


def test_client_errors_are_not_retried(tmp_path: Path, blueprint: Blueprint) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(400, json={"error": "title missing"})

    with pytest.raises(HubError, match="title missing"):
        _hub(handler, tmp_path).upload_blueprint(blueprint, HubShareStatus.PRIVATE, EXPIRES, {})

    assert len(calls) == 1


def test_network_errors_are_reported_as_retryable(tmp_path: Path, blueprint: Blueprint) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(HubError) as exc_info:
        _hub(handler, tmp_path).upload_blueprint(blueprint, HubShareStatus.PRIVATE, EXPIRES, {})

    assert len(calls) == 1
    assert exc_info.value.error_code == "NETWORK"
    assert exc_info.value.retryable is True


def test_close_keeps_injected_client_open(tmp_path: Path) -> None:
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    hub = HubChannel(
        settings=HubSettings(base_url="https://hub.test", api_key="key-1"),
        client=client,
    )

    hub.close()

    assert client.is_closed is False


def test_close_releases_owned_client() -> None:
    hub = HubChannel(settings=HubSettings(base_url="https://hub.test", api_key="key-1"))

    hub.close()

    assert hub._client.is_closed is True



@pytest.mark.parametrize(
    ("status", "code", "retryable"),
    [
        (401, "UNAUTHORIZED", False),
        (403, "FORBIDDEN", False),
        (404, "NOT_FOUND", False),
        (409, "CONFLICT", True),
        (410, "GONE", False),
        (429, "RATE_LIMITED", True),
        (502, "UNKNOWN", True),
        (418, "UNKNOWN", False),
    ],
)
def test_status_mapping(status: int, code: str, retryable: bool) -> None:
    error = hub_error_from_response(httpx.Response(status))
    assert error.error_code == code
    assert error.retryable is retryable
    assert error.status_code == status


def test_upload_without_credentials_raises_auth_error(tmp_path: Path, blueprint: Blueprint) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(HubAuthError):
        _hub(handler, tmp_path, api_key=None).upload_blueprint(
            blueprint, HubShareStatus.PRIVATE, EXPIRES, {}
        )


def test_check_auth_without_token_skips_network(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _hub(handler, tmp_path, api_key=None).check_auth().authenticated is False


def test_check_auth_with_saved_token(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer saved-token"
        assert request.url.path == "/api/auth/verify"
        return httpx.Response(200, json={"user": "dev", "email": "dev@example.com"})

    hub = _hub(handler, tmp_path, api_key=None)
    hub.save_auth_token("saved-token\n")

    status = hub.check_auth()

    assert status.authenticated is True
    assert status.user == "dev"
    assert stat.S_IMODE(hub.token_path.stat().st_mode) == 0o600
    assert hub.token_path.read_text(encoding="utf-8") == "saved-token"


def test_rejected_saved_token_is_cleared(tmp_path: Path) -> None:
    hub = _hub(lambda request: httpx.Response(401), tmp_path, api_key=None)
    hub.save_auth_token("stale")

    assert hub.check_auth().authenticated is False
    assert not hub.token_path.exists()


def test_auth_url_points_at_hub(tmp_path: Path) -> None:
    url = _hub(lambda request: httpx.Response(200), tmp_path).auth_url()
    assert url.startswith("https://hub.test/auth/github?state=")
    assert url.endswith("&client=cli")

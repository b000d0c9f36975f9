import json
import re
import time
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from vdk_publish.constants import BLUEPRINT_ID_MAX_LENGTH
from vdk_publish.errors import RuleFileNotFoundError

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9_-]+")
_SLUG_SEPARATOR_RE = re.compile(r"-{2,}")


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
        raise RuleFileNotFoundError(path) from exc


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_safe(path: Path) -> tuple[Any | None, str | None]:
    if not path.exists():
        return None, None
    if path.stat().st_size == 0:
        return None, None
    try:
        return read_json(path), None
    except (OSError, ValueError) as exc:
        return None, str(exc)


def now_millis() -> int:
    return int(time.time() * 1000)


def today_stamp() -> str:
    return date.today().isoformat()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding requires a non-negative integer")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def slugify(
    text: str | None,
    max_length: int = BLUEPRINT_ID_MAX_LENGTH,
    fallback: str = "untitled",
) -> str:
    if not text or not text.strip():
        return fallback
    slug = _SLUG_INVALID_RE.sub("-", text.strip().lower())
    slug = _SLUG_SEPARATOR_RE.sub("-", slug).strip("-")
    if not slug:
        return fallback
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def generate_id(title: str | None, millis: int | None = None) -> str:
    """Blueprint id: ``slug(title)-base36(millis)``.

    Two ids for the same title only collide within the same millisecond.
    """
    stamp = now_millis() if millis is None else millis
    return f"{slugify(title)}-{to_base36(stamp)}"


def compact_home_path(path: str | Path) -> str:
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    home_prefix = f"{home}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str) -> str:
    home = str(Path.home())
    if text == home:
        return "~"
    return text.replace(f"{home}/", "~/")


def to_jsonable(value: Any) -> Any:
    """Coerce YAML-loaded values (dates, tuples) into JSON-compatible ones."""
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value

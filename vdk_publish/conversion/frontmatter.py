"""Parse and serialize the ``---\\n<yaml>\\n---\\n<body>`` blueprint artifact."""

from __future__ import annotations

from typing import Any

import yaml

from vdk_publish.validation.detector import FRONTMATTER_RE


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split ``text`` into (frontmatter, body).

    Raises ``yaml.YAMLError`` for malformed YAML and ``ValueError`` when the
    block is not a mapping. Text without a block yields ``({}, text)``.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    raw = yaml.safe_load(match.group(1))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("frontmatter must be a YAML mapping")
    return raw, text[match.end() :]


def dump_frontmatter(frontmatter: dict[str, Any]) -> str:
    return yaml.safe_dump(
        frontmatter,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    ).rstrip()


def serialize_blueprint(frontmatter: dict[str, Any], content: str) -> str:
    parts: list[str] = []
    parts.append("---")
    parts.append(dump_frontmatter(frontmatter))
    parts.append("---")
    parts.append(content)
    return "\n".join(parts)

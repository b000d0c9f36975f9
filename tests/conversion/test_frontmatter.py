"""Tests for blueprint artifact parsing and serialization."""

import pytest
import yaml

from vdk_publish.conversion.frontmatter import (
    dump_frontmatter,
    parse_frontmatter,
    serialize_blueprint,
)


def test_parse_splits_block_and_body() -> None:
    frontmatter, body = parse_frontmatter("---\nid: demo\ntags:\n  - a\n---\n# Body\n")
    assert frontmatter == {"id": "demo", "tags": ["a"]}
    assert body == "# Body\n"


def test_parse_without_block_returns_text() -> None:
    assert parse_frontmatter("# Just markdown\n") == ({}, "# Just markdown\n")


def test_parse_empty_block() -> None:
    frontmatter, body = parse_frontmatter("---\n\n---\nbody")
    assert frontmatter == {}
    assert body == "body"


def test_parse_rejects_non_mapping() -> None:
    with pytest.raises(ValueError):
        parse_frontmatter("---\n- a\n- b\n---\nbody")


def test_parse_raises_on_malformed_yaml() -> None:
    with pytest.raises(yaml.YAMLError):
        parse_frontmatter("---\ntitle: [unclosed\n---\nbody")


def test_dump_keeps_key_order() -> None:
    dumped = dump_frontmatter({"title": "Demo", "id": "demo", "version": "1.0.0"})
    assert dumped.splitlines() == ["title: Demo", "id: demo", "version: 1.0.0"]


def test_serialize_blueprint_shape() -> None:
    text = serialize_blueprint({"id": "demo", "title": "Démo"}, "# Body\n")
    assert text.startswith("---\nid: demo\ntitle: Démo\n---\n")
    assert text.endswith("# Body\n")

    frontmatter, body = parse_frontmatter(text)
    assert frontmatter == {"id": "demo", "title": "Démo"}
    assert body == "# Body\n"

"""Blueprint frontmatter schema check.

The field contract lives in ``blueprint.schema.json``; callers only see a
valid flag and a list of messages.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator

from vdk_publish.models import SchemaCheck
from vdk_publish.utils import to_jsonable

BLUEPRINT_SCHEMA_PATH = Path(__file__).resolve().parent / "blueprint.schema.json"

_RELATIONSHIP_FIELDS = ("requires", "suggests", "conflicts", "supersedes")


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


class ISchemaValidator(ABC):
    @abstractmethod
    def validate(self, frontmatter: dict[str, Any]) -> SchemaCheck:
        raise NotImplementedError


class BlueprintSchemaRepository:
    _cache: dict[str, dict[str, Any]] = {}

    def __init__(self, schema_path: Path = BLUEPRINT_SCHEMA_PATH) -> None:
        self.schema_path = schema_path

    def load_schema(self) -> dict[str, Any]:
        key = str(self.schema_path.resolve())
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        schema = json.loads(self.schema_path.read_text(encoding="utf-8"))
        self._cache[key] = schema
        return schema


class JsonSchemaBlueprintValidator(ISchemaValidator):
    def __init__(self, repository: BlueprintSchemaRepository | None = None) -> None:
        self._repository = repository or BlueprintSchemaRepository()
        self._validator = Draft7Validator(self._repository.load_schema())

    def validate(self, frontmatter: dict[str, Any]) -> SchemaCheck:
        if not isinstance(frontmatter, dict):
            return SchemaCheck(valid=False, errors=("Frontmatter must be a mapping",))
        payload = to_jsonable(frontmatter)
        errors = [
            format_schema_error(error)
            for error in sorted(
                self._validator.iter_errors(payload),
                key=lambda item: [str(part) for part in item.path],
            )
        ]
        errors.extend(_relationship_errors(payload))
        return SchemaCheck(valid=not errors, errors=tuple(errors))


def _relationship_errors(data: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    blueprint_id = data.get("id")
    for name in _RELATIONSHIP_FIELDS:
        items = data.get(name)
        if isinstance(items, list) and blueprint_id and blueprint_id in items:
            errors.append(f"Blueprint cannot reference itself in {name}")

    requires = data.get("requires")
    conflicts = data.get("conflicts")
    if isinstance(requires, list) and isinstance(conflicts, list):
        both = [item for item in requires if item in conflicts]
        if both:
            errors.append(f"Cannot both require and conflict with: {', '.join(both)}")
    return errors

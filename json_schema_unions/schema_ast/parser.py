"""
JSON Schema parser that builds the SchemaNode tree.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .nodes import SchemaNode

YAML_SUFFIXES = {".yaml", ".yml"}


class SchemaLoadError(Exception):
    """Raised when a schema document cannot be read or is not a schema object."""


class SchemaParser:
    """Parses JSON Schema documents into a SchemaNode tree."""

    # Keywords mapped onto SchemaNode fields; everything else goes to extra
    KNOWN_KEYWORDS = {
        "type",
        "description",
        "properties",
        "enum",
        "oneOf",
        "allOf",
        "anyOf",
        "not",
        "required",
        "items",
        "additionalProperties",
        "patternProperties",
        "definitions",
        "$defs",
    }

    def parse(self, document: Any) -> SchemaNode:
        """
        Parse a JSON Schema document.

        Args:
            document: The decoded JSON Schema

        Returns:
            Root SchemaNode

        Raises:
            SchemaLoadError: If the root is not a mapping
        """
        if not isinstance(document, dict):
            raise SchemaLoadError(f"Schema root must be an object, got {type(document).__name__}")
        return self._parse_node(document, "#")

    def _parse_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        node = SchemaNode()

        schema_type = schema.get("type")
        if isinstance(schema_type, str):
            node.type = schema_type
        elif schema_type is not None:
            # Type lists ("type": ["string", "null"]) are not modelled
            node.extra["type"] = schema_type

        if "description" in schema:
            node.description = schema["description"]

        for name, sub_schema in (schema.get("properties") or {}).items():
            node.properties[name] = self._parse_child(sub_schema, f"{path}/properties/{name}")

        if "enum" in schema:
            node.enum = list(schema["enum"])

        if "oneOf" in schema:
            node.one_of = [self._parse_child(s, f"{path}/oneOf/{i}") for i, s in enumerate(schema["oneOf"])]

        if "allOf" in schema:
            node.all_of = [self._parse_child(s, f"{path}/allOf/{i}") for i, s in enumerate(schema["allOf"])]

        if "anyOf" in schema:
            node.any_of = [self._parse_child(s, f"{path}/anyOf/{i}") for i, s in enumerate(schema["anyOf"])]

        if "not" in schema:
            node.not_ = self._parse_child(schema["not"], f"{path}/not")

        if "required" in schema:
            node.required = list(schema["required"])

        items = schema.get("items")
        if isinstance(items, list):
            node.items = [self._parse_child(s, f"{path}/items/{i}") for i, s in enumerate(items)]
        elif isinstance(items, dict):
            node.items = self._parse_node(items, f"{path}/items")
        elif items is not None:
            node.extra["items"] = items

        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            node.additional_properties = self._parse_node(additional, f"{path}/additionalProperties")
        elif additional is not None:
            node.additional_properties = additional

        for pattern, sub_schema in (schema.get("patternProperties") or {}).items():
            node.pattern_properties[pattern] = self._parse_child(sub_schema, f"{path}/patternProperties/{pattern}")

        for key in ("definitions", "$defs"):
            if key in schema:
                node.definitions_key = key
                for name, sub_schema in schema[key].items():
                    node.definitions[name] = self._parse_child(sub_schema, f"{path}/{key}/{name}")

        for key, value in schema.items():
            if key not in self.KNOWN_KEYWORDS:
                node.extra[key] = value

        return node

    def _parse_child(self, schema: Any, path: str) -> SchemaNode:
        # Boolean schemas ("true"/"false") survive as an untyped node carrying the literal
        if isinstance(schema, bool):
            return SchemaNode(boolean=schema)
        if not isinstance(schema, dict):
            raise SchemaLoadError(f"Invalid sub-schema at {path}: expected an object")
        return self._parse_node(schema, path)


def read_document(path: Path | str) -> Any:
    """Read a JSON or YAML document, choosing the decoder by file suffix."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file {path}: {e}") from e

    try:
        if path.suffix in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaLoadError(f"Failed to parse schema file {path}: {e}") from e


def load_schema_file(path: Path | str) -> SchemaNode:
    """Load a schema file into a SchemaNode tree."""
    return SchemaParser().parse(read_document(path))

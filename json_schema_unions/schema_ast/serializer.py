"""
Serializer turning a SchemaNode tree back into a JSON Schema document.
"""

from __future__ import annotations

import json
from typing import Any

import yaml

from .nodes import SchemaNode


class SchemaSerializer:
    """Serializes a SchemaNode tree into plain dicts and lists.

    A keyword is written whenever its field is not None, so an explicit
    "enum": [] or "required": [] from the source document is kept.
    """

    def serialize(self, node: SchemaNode) -> Any:
        if node.boolean is not None:
            return node.boolean

        result: dict[str, Any] = {}
        if node.type:
            result["type"] = node.type
        if node.description is not None:
            result["description"] = node.description
        if node.properties:
            result["properties"] = self._serialize_map(node.properties)
        if node.enum is not None:
            result["enum"] = list(node.enum)
        if node.one_of is not None:
            result["oneOf"] = self._serialize_list(node.one_of)
        if node.all_of is not None:
            result["allOf"] = self._serialize_list(node.all_of)
        if node.any_of is not None:
            result["anyOf"] = self._serialize_list(node.any_of)
        if node.not_ is not None:
            result["not"] = self.serialize(node.not_)
        if node.required is not None:
            result["required"] = list(node.required)

        if isinstance(node.items, list):
            result["items"] = self._serialize_list(node.items)
        elif node.items is not None:
            result["items"] = self.serialize(node.items)

        if isinstance(node.additional_properties, SchemaNode):
            result["additionalProperties"] = self.serialize(node.additional_properties)
        elif node.additional_properties is not None:
            result["additionalProperties"] = node.additional_properties

        if node.pattern_properties:
            result["patternProperties"] = self._serialize_map(node.pattern_properties)

        if node.definitions:
            result[node.definitions_key] = self._serialize_map(node.definitions)

        for key, value in node.extra.items():
            result.setdefault(key, value)
        return result

    def _serialize_list(self, nodes: list[SchemaNode]) -> list[Any]:
        return [self.serialize(child) for child in nodes]

    def _serialize_map(self, nodes: dict[str, SchemaNode]) -> dict[str, Any]:
        return {name: self.serialize(child) for name, child in nodes.items()}


def dump_schema(node: SchemaNode, fmt: str = "json", indent: int = 2) -> str:
    """
    Serialize a schema tree to text.

    Args:
        node: Root of the schema tree
        fmt: "json" or "yaml"
        indent: Indentation width

    Returns:
        The document text, ending with a newline
    """
    document = SchemaSerializer().serialize(node)
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, indent=indent)
    return json.dumps(document, indent=indent) + "\n"

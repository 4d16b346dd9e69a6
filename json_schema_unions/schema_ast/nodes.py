"""
Object model for JSON Schema documents.

A schema is a tree of SchemaNode instances. Every node owns its children:
no node is shared between two parents and there are no back-references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SchemaNode:
    """One schema object or sub-schema."""

    # "object", "string", "array"... Empty when the schema declares no type
    type: str = ""

    description: str | None = None

    # Property name -> sub-schema
    properties: dict[str, SchemaNode] = field(default_factory=dict)

    # None when the keyword is absent, as opposed to an empty list
    enum: list[Any] | None = None
    one_of: list[SchemaNode] | None = None
    required: list[str] | None = None

    # Composition keywords other than oneOf
    all_of: list[SchemaNode] | None = None
    any_of: list[SchemaNode] | None = None
    not_: SchemaNode | None = None

    # Single schema, or a list of schemas for tuple validation
    items: SchemaNode | list[SchemaNode] | None = None

    # Either a sub-schema or a plain boolean
    additional_properties: SchemaNode | bool | None = None

    # Regular expression -> sub-schema
    pattern_properties: dict[str, SchemaNode] = field(default_factory=dict)

    # Named sub-schemas from "definitions" or "$defs"
    definitions: dict[str, SchemaNode] = field(default_factory=dict)
    definitions_key: str = "definitions"

    # Set for boolean schemas ("true" / "false"), which carry no keywords
    boolean: bool | None = None

    # Every other keyword, kept verbatim
    extra: dict[str, Any] = field(default_factory=dict)

    def is_object(self) -> bool:
        return self.type == "object"


@dataclass
class DiscriminatorField:
    """Describes a tagged union field.

    Attributes:
        name: Declared field name, e.g. "ComponentType"
        json_name: Property name override; derived from name when empty
    """

    name: str = ""
    json_name: str = ""

    @staticmethod
    def from_value(value: str | dict[str, Any] | DiscriminatorField) -> DiscriminatorField:
        """Build a discriminator from a plain name or a {"name", "json_name"} mapping."""
        if isinstance(value, DiscriminatorField):
            return value
        if isinstance(value, str):
            return DiscriminatorField(name=value)
        return DiscriminatorField(name=value.get("name", ""), json_name=value.get("json_name", ""))

    def to_value(self) -> str | dict[str, str]:
        if not self.json_name:
            return self.name
        return {"name": self.name, "json_name": self.json_name}

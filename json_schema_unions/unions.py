"""
Rewrites discriminator-based unions into oneOf constraints.

A union is an object whose discriminator property holds an enum, each enum
value naming one sibling property (the union member). Validators cannot
enforce "only the member named by the discriminator is set", so each such
union is replaced by a oneOf with one {"required": [member]} entry per value.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .schema_ast.nodes import DiscriminatorField, SchemaNode
from .utils import to_lower_camel_case, unquote_literal
from .visitor import SchemaVisitor, VisitResult, edit_schema

logger = logging.getLogger(__name__)


@dataclass
class UnionRewrite:
    """Mutations planned for one discriminator at one node."""

    discriminator_property: str = ""
    enum: list[Any] = field(default_factory=list)
    one_of: list[SchemaNode] = field(default_factory=list)
    deleted_properties: list[str] = field(default_factory=list)


def enum_value_name(value: Any) -> str:
    """Return the field name an enum value stands for."""
    if isinstance(value, str):
        return unquote_literal(value)
    return unquote_literal(json.dumps(value))


class UnionOneOfVisitor(SchemaVisitor):
    """Visitor adding oneOf constraints for every union found in the tree."""

    def __init__(
        self,
        discriminators: Sequence[DiscriminatorField | str],
        remove_discriminators: bool = True,
        fields_to_skip: Iterable[str] = (),
    ):
        """
        Args:
            discriminators: Union discriminators, processed in order at each node
            remove_discriminators: Delete the discriminator property once rewritten
            fields_to_skip: Union members to drop from unions and from the schema
        """
        self.discriminators = [DiscriminatorField.from_value(d) for d in discriminators]
        self.remove_discriminators = remove_discriminators
        self.fields_to_skip = list(fields_to_skip)
        self._skipped_properties = {to_lower_camel_case(name) for name in self.fields_to_skip}

    def visit(self, schema: SchemaNode) -> VisitResult:
        if schema is None or not schema.is_object() or not schema.properties:
            return None, False

        for discriminator in self.discriminators:
            rewrite = self.plan(schema, discriminator)
            if rewrite is not None:
                self.apply(schema, rewrite)
        return None, False

    def plan(self, schema: SchemaNode, discriminator: DiscriminatorField) -> UnionRewrite | None:
        """Compute the rewrite of one union, or None if the node has no valid union for it."""
        property_name = discriminator.json_name or to_lower_camel_case(discriminator.name)
        discriminator_prop = schema.properties.get(property_name)
        if discriminator_prop is None or not discriminator_prop.enum:
            return None

        rewrite = UnionRewrite(discriminator_property=property_name)
        for value in discriminator_prop.enum:
            member = to_lower_camel_case(enum_value_name(value))
            if member not in schema.properties:
                logger.debug(
                    "Skipping union %r: enum value %r matches no property among %s",
                    property_name,
                    value,
                    sorted(schema.properties),
                )
                return None
            if member in self._skipped_properties:
                continue
            rewrite.enum.append(value)
            rewrite.one_of.append(SchemaNode(required=[member]))

        if self.remove_discriminators:
            rewrite.deleted_properties.append(property_name)
        rewrite.deleted_properties.extend(sorted(self._skipped_properties))
        return rewrite

    def apply(self, schema: SchemaNode, rewrite: UnionRewrite) -> None:
        # A union whose members were all excluded drops the keywords rather than
        # leaving an unsatisfiable "enum": []
        schema.one_of = rewrite.one_of or None
        schema.properties[rewrite.discriminator_property].enum = rewrite.enum or None
        for name in rewrite.deleted_properties:
            schema.properties.pop(name, None)
        logger.debug(
            "Rewrote union %r into oneOf over %s",
            rewrite.discriminator_property,
            [entry.required[0] for entry in rewrite.one_of],
        )


def add_union_one_of_constraints(
    schema: SchemaNode | None,
    union_discriminators: Sequence[DiscriminatorField | str],
    remove_discriminators: bool,
    fields_to_skip: Iterable[str] = (),
) -> None:
    """Add oneOf constraints for all the unions of a schema, in place.

    Unions are found at any depth. A union whose enum names a missing
    property is left untouched. When several discriminators share a node,
    the oneOf of the last one rewritten wins.

    Args:
        schema: Root of the schema tree
        union_discriminators: Discriminator descriptors or declared field names
        remove_discriminators: Delete discriminator properties after rewriting
        fields_to_skip: Union members excluded from every union and removed
    """
    edit_schema(schema, UnionOneOfVisitor(union_discriminators, remove_discriminators, fields_to_skip))

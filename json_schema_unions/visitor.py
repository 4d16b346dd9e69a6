"""
Generic depth-first walker over a SchemaNode tree.

A visitor is any callable taking a node and returning ``(next_visitor, stop)``:

- ``stop`` True prunes the node's subtree.
- ``next_visitor`` is used for the node's children; ``None`` means the
  same visitor keeps going one level deeper.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import Optional

from .schema_ast.nodes import SchemaNode

VisitResult = tuple[Optional["Visitor"], bool]
Visitor = Callable[[SchemaNode], VisitResult]


class SchemaVisitor(ABC):
    """Base class for visitors that keep state between nodes."""

    @abstractmethod
    def visit(self, schema: SchemaNode) -> VisitResult:
        """
        Visit one level of the schema.

        Args:
            schema: The node being visited

        Returns:
            Visitor for the children (None to reuse this one) and whether to stop
        """

    def __call__(self, schema: SchemaNode) -> VisitResult:
        return self.visit(schema)


def edit_schema(schema: SchemaNode | None, visitor: Visitor) -> None:
    """Apply the visitor to each level of the schema, pre-order.

    The walker itself never mutates the tree; visitors may.
    """
    if schema is None:
        return

    next_visitor, stop = visitor(schema)
    if stop:
        return
    if next_visitor is None:
        next_visitor = visitor

    for child in iter_children(schema):
        edit_schema(child, next_visitor)


def iter_children(schema: SchemaNode) -> Iterator[SchemaNode]:
    """Yield the direct sub-schemas of a node in a deterministic order.

    Properties are sorted by name, followed by items, additionalProperties,
    patternProperties sorted by pattern, allOf, anyOf, oneOf, not and
    definitions sorted by name.
    """
    # Snapshot: visitors may delete properties of the node being walked
    for name in sorted(schema.properties):
        yield schema.properties[name]

    if isinstance(schema.items, list):
        yield from schema.items
    elif schema.items is not None:
        yield schema.items

    if isinstance(schema.additional_properties, SchemaNode):
        yield schema.additional_properties

    for pattern in sorted(schema.pattern_properties):
        yield schema.pattern_properties[pattern]

    for branches in (schema.all_of, schema.any_of, schema.one_of):
        if branches:
            yield from branches

    if schema.not_ is not None:
        yield schema.not_

    for name in sorted(schema.definitions):
        yield schema.definitions[name]

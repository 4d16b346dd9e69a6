"""
Schema AST module.

Contains the schema object model, its parser and its serializer.
"""

from __future__ import annotations

from .nodes import DiscriminatorField, SchemaNode
from .parser import SchemaLoadError, SchemaParser, load_schema_file, read_document
from .serializer import SchemaSerializer, dump_schema

__all__ = [
    "SchemaNode",
    "DiscriminatorField",
    "SchemaParser",
    "SchemaSerializer",
    "SchemaLoadError",
    "load_schema_file",
    "read_document",
    "dump_schema",
]

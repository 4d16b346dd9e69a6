"""JSON Schema union rewriter

Walks JSON schema trees and turns discriminator-based unions into oneOf
constraints, with a harness validating YAML documents against the result.
"""

__version__ = "1.0.0"

from .config import ConfigurationError, HarnessConfig, OutputMode, UnionRewriteConfig, load_config
from .schema_ast import (
    DiscriminatorField,
    SchemaLoadError,
    SchemaNode,
    SchemaParser,
    SchemaSerializer,
    dump_schema,
    load_schema_file,
)
from .unions import UnionOneOfVisitor, add_union_one_of_constraints
from .visitor import SchemaVisitor, edit_schema
from .writer import AtomicWriter, SchemaWriteError

__all__ = [
    "SchemaNode",
    "DiscriminatorField",
    "SchemaParser",
    "SchemaSerializer",
    "SchemaLoadError",
    "load_schema_file",
    "dump_schema",
    "SchemaVisitor",
    "edit_schema",
    "UnionOneOfVisitor",
    "add_union_one_of_constraints",
    "UnionRewriteConfig",
    "HarnessConfig",
    "OutputMode",
    "ConfigurationError",
    "load_config",
    "AtomicWriter",
    "SchemaWriteError",
]

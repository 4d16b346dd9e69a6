"""
Configuration for union rewriting and for the validation harness.

Config files are JSON or YAML mappings whose keys match the dataclass
fields; unknown keys are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

from .schema_ast.nodes import DiscriminatorField
from .schema_ast.parser import SchemaLoadError, read_document


class ConfigurationError(Exception):
    """Raised when a configuration file is invalid."""


class OutputMode(str, Enum):
    """Controls behavior when the output file already exists."""

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class UnionRewriteConfig:
    """Configuration options for the union rewriter."""

    # Discriminator field names ("ComponentType") or {"name", "json_name"} mappings
    discriminators: list[str | dict[str, str]] = field(default_factory=list)

    # Whether to delete discriminator properties once their union is rewritten
    remove_discriminators: bool = True

    # Union members to exclude from unions and remove from the schema
    fields_to_skip: list[str] = field(default_factory=list)

    output_mode: OutputMode = OutputMode.ERROR_IF_EXISTS

    # Indentation of the written schema
    indent: int = 2

    @staticmethod
    def from_dict(d: dict) -> UnionRewriteConfig:
        """Create a config from a dictionary."""
        config = UnionRewriteConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        config.output_mode = OutputMode(config.output_mode)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "discriminators": self.discriminators,
            "remove_discriminators": self.remove_discriminators,
            "fields_to_skip": self.fields_to_skip,
            "output_mode": self.output_mode.value,
            "indent": self.indent,
        }

    def discriminator_fields(self) -> list[DiscriminatorField]:
        return [DiscriminatorField.from_value(d) for d in self.discriminators]


@dataclass
class HarnessConfig:
    """Configuration for the schema validation harness.

    Attributes:
        tests_dir: Directory holding the test-*.json suites and their test files
        schema_root: Directory SchemaFile entries are relative to
        snippet_root: Directory the YAML snippets listed in Files are relative to
        work_dir: Where assembled documents are written; None keeps them in memory
    """

    tests_dir: Path = Path(".")
    schema_root: Path | None = None
    snippet_root: Path | None = None
    work_dir: Path | None = None

    # Expected outcome marking a document that must validate
    pass_outcome: str = "PASS"

    @staticmethod
    def from_dict(d: dict) -> HarnessConfig:
        """Create a config from a dictionary."""
        config = HarnessConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        for k in ("tests_dir", "schema_root", "snippet_root", "work_dir"):
            value = getattr(config, k)
            if value is not None:
                setattr(config, k, Path(value))
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "tests_dir": str(self.tests_dir),
            "schema_root": str(self.schema_root) if self.schema_root else None,
            "snippet_root": str(self.snippet_root) if self.snippet_root else None,
            "work_dir": str(self.work_dir) if self.work_dir else None,
            "pass_outcome": self.pass_outcome,
        }

    def resolved_schema_root(self) -> Path:
        return self.schema_root if self.schema_root is not None else self.tests_dir

    def resolved_snippet_root(self) -> Path:
        return self.snippet_root if self.snippet_root is not None else self.tests_dir


ConfigT = TypeVar("ConfigT", UnionRewriteConfig, HarnessConfig)


def load_config(path: Path | str, config_class: type[ConfigT]) -> ConfigT:
    """
    Load a configuration file.

    Args:
        path: JSON or YAML file
        config_class: UnionRewriteConfig or HarnessConfig

    Returns:
        The parsed configuration

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping
    """
    try:
        parsed: Any = read_document(path)
    except SchemaLoadError as e:
        raise ConfigurationError(str(e)) from e

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")

    try:
        return config_class.from_dict(parsed)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

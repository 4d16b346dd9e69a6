"""
Atomic file writer for rewritten schemas.

Ensures that file writes are atomic so an interrupted run never leaves
a truncated schema behind.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import yaml


class SchemaWriteError(Exception):
    """Raised when serialized schema content fails validation before writing."""


class AtomicWriter:
    """Handles atomic file writes with validation.

    1. Write to a temporary file in the same directory
    2. Check the content parses in the declared format
    3. Atomically replace the target file
    """

    def write(self, path: Path, content: str, fmt: str = "json", validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            fmt: "json" or "yaml"
            validate: Whether to validate before finalizing

        Raises:
            SchemaWriteError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate_content(content, fmt)

            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass  # Best effort cleanup
            raise

    def write_if_not_exists(self, path: Path, content: str, fmt: str = "json", validate: bool = True) -> None:
        """Write content only if the file doesn't exist.

        Raises:
            FileExistsError: If the file already exists
            SchemaWriteError: If validation fails
        """
        if path.exists():
            raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite.")

        self.write(path, content, fmt, validate)

    def _validate_content(self, content: str, fmt: str) -> None:
        try:
            if fmt == "yaml":
                document = yaml.safe_load(content)
            else:
                document = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaWriteError(f"Serialized schema is not valid {fmt}: {e}") from e

        if not isinstance(document, dict):
            raise SchemaWriteError("Serialized schema is not an object")

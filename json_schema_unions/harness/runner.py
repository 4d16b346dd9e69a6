"""
Runs schema validation test suites.

Each test case assembles a YAML document from snippet files, validates it
against the suite's schema with a Draft 7 validator, and compares the
verdict with the expected outcome: "PASS" for documents that must validate,
otherwise a substring the validation error message must contain.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from ..config import HarnessConfig
from ..schema_ast.parser import SchemaLoadError, read_document
from .models import (
    CaseDefinition,
    CaseResult,
    DefinitionError,
    HarnessError,
    RunResult,
    SuiteDefinition,
    SuiteResult,
    Verdict,
)

logger = logging.getLogger(__name__)

SUITE_PREFIX = "test-"
SUITE_SUFFIX = ".json"


class DocumentLoader(yaml.SafeLoader):
    """SafeLoader keeping unquoted timestamps as strings, since JSON has no date type."""


DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _path_key(path) -> list[tuple[int, int | str]]:
    # Array indices sort numerically, before property names at the same depth
    return [(0, part) if isinstance(part, int) else (1, str(part)) for part in path]


def validate_document(document: Any, validator: Draft7Validator) -> tuple[bool, str]:
    """
    Validate a document against a compiled schema.

    Args:
        document: The decoded document
        validator: Validator built from the schema

    Returns:
        Whether the document is valid, and every error as "<path>: <message>"
        on its own line, sorted by path
    """
    errors = sorted(validator.iter_errors(document), key=lambda e: _path_key(e.absolute_path))
    if not errors:
        return True, ""

    lines = []
    for error in errors:
        path = "/".join(str(p) for p in error.absolute_path)
        lines.append(f"/{path}: {error.message}")
    return False, "\n".join(lines)


def compile_schema(schema_path: Path) -> Draft7Validator:
    """Load a schema file and build a Draft 7 validator for it.

    Raises:
        HarnessError: If the schema cannot be loaded or is not a valid schema
    """
    try:
        schema = read_document(schema_path)
        Draft7Validator.check_schema(schema)
    except SchemaLoadError as e:
        raise HarnessError(f"Schema compile failed: {schema_path}: {e}") from e
    except SchemaError as e:
        raise HarnessError(f"Schema compile failed: {schema_path}: {e.message}") from e
    return Draft7Validator(schema)


def discover_suites(tests_dir: Path) -> list[Path]:
    """Return the test-*.json files of a directory, sorted by name."""
    return sorted(
        p for p in tests_dir.iterdir() if p.is_file() and p.name.startswith(SUITE_PREFIX) and p.name.endswith(SUITE_SUFFIX)
    )


def _read_json(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            content = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DefinitionError(f"Failed to read and parse {path.name}: {e}") from e
    if not isinstance(content, dict):
        raise DefinitionError(f"Failed to read and parse {path.name}: root must be an object")
    return content


def read_suite(path: Path) -> SuiteDefinition:
    return SuiteDefinition.from_dict(path.name, _read_json(path))


def read_cases(path: Path) -> list[CaseDefinition]:
    content = _read_json(path)
    return [CaseDefinition.from_dict(d) for d in content.get("Tests") or []]


def evaluate_outcome(valid: bool, message: str, expect_outcome: str, pass_outcome: str = "PASS") -> tuple[Verdict, str]:
    """Compare a validation result with the expected outcome.

    Returns:
        The verdict and a description of the comparison
    """
    if not valid:
        if expect_outcome == pass_outcome:
            return Verdict.FAIL, f"Validate failure : {message}"
        if not expect_outcome:
            return Verdict.FAIL, f"No expected outcome was set, got : {message}"
        if expect_outcome not in message:
            return Verdict.FAIL, f"Did not fail as expected : {expect_outcome} got : {message}"
        return Verdict.PASS, expect_outcome

    if not expect_outcome:
        return Verdict.FAIL, "Document was valid - No expected outcome was set."
    if expect_outcome != pass_outcome:
        return Verdict.FAIL, f"Document was valid - Expected error not found : {expect_outcome}"
    return Verdict.PASS, ""


class HarnessRunner:
    """Runs every suite of a tests directory."""

    def __init__(self, config: HarnessConfig):
        self.config = config

    def run(self) -> RunResult:
        """
        Run all suites found in the tests directory.

        Returns:
            Per-suite results

        Raises:
            HarnessError: If the tests directory is missing or a schema does not compile
        """
        tests_dir = self.config.tests_dir
        if not tests_dir.is_dir():
            raise HarnessError(f"Tests directory not found: {tests_dir}")

        result = RunResult()
        for suite_path in discover_suites(tests_dir):
            try:
                suite = read_suite(suite_path)
            except DefinitionError as e:
                logger.warning("FAIL : %s", e)
                result.suites.append(SuiteResult(name=suite_path.name, errors=[str(e)]))
                continue
            result.suites.append(self.run_suite(suite))
        return result

    def run_suite(self, suite: SuiteDefinition) -> SuiteResult:
        logger.info("File %s : SchemaFile : %s , SchemaVersion : %s", suite.name, suite.schema_file, suite.schema_version)
        validator = compile_schema(self.config.resolved_schema_root() / suite.schema_file)

        suite_result = SuiteResult(name=suite.name, schema_file=suite.schema_file)
        for tests_file in suite.tests:
            try:
                cases = read_cases(self.config.tests_dir / tests_file)
            except DefinitionError as e:
                logger.warning("FAIL : %s", e)
                suite_result.errors.append(str(e))
                continue

            for case in cases:
                case_result = self.run_case(suite, case, validator)
                if case_result.verdict == Verdict.FAIL:
                    logger.warning("FAIL : %s : %s", case.file_name, case_result.message)
                elif case_result.verdict == Verdict.PASS:
                    logger.info("PASS : %s : %s", case.file_name, suite.schema_file)
                suite_result.cases.append(case_result)
        return suite_result

    def run_case(self, suite: SuiteDefinition, case: CaseDefinition, validator: Draft7Validator) -> CaseResult:
        if case.disabled:
            return CaseResult(file_name=case.file_name, verdict=Verdict.SKIPPED)

        try:
            text = self.assemble_document(suite, case)
        except (OSError, UnicodeDecodeError) as e:
            return CaseResult(file_name=case.file_name, verdict=Verdict.FAIL, message=f"failed reading snippet: {e}")

        if self.config.work_dir is not None:
            try:
                self._write_document(suite, case, text)
            except OSError as e:
                return CaseResult(
                    file_name=case.file_name, verdict=Verdict.FAIL, message=f"failed writing document: {e}"
                )

        try:
            document = yaml.load(text, Loader=DocumentLoader)
        except yaml.YAMLError as e:
            return CaseResult(file_name=case.file_name, verdict=Verdict.FAIL, message=f"failed to convert to json : {e}")

        valid, message = validate_document(document, validator)
        verdict, description = evaluate_outcome(valid, message, case.expect_outcome, self.config.pass_outcome)
        return CaseResult(file_name=case.file_name, verdict=verdict, message=description)

    def assemble_document(self, suite: SuiteDefinition, case: CaseDefinition) -> str:
        """Concatenate the snippets of a test case, prefixed by the schema version.

        Raises:
            OSError: If a snippet cannot be read
            UnicodeDecodeError: If a snippet is not UTF-8
        """
        parts = []
        if suite.schema_version:
            parts.append(f"schemaVersion: {suite.schema_version}\n")

        snippet_root = self.config.resolved_snippet_root()
        for i, snippet in enumerate(case.files):
            if i > 0:
                parts.append("\n")
            parts.append((snippet_root / snippet).read_text(encoding="utf-8"))
        return "".join(parts)

    def _write_document(self, suite: SuiteDefinition, case: CaseDefinition, text: str) -> None:
        suite_dir = self.config.work_dir / suite.name.split(".")[0]
        suite_dir.mkdir(parents=True, exist_ok=True)
        (suite_dir / case.file_name).write_text(text, encoding="utf-8")

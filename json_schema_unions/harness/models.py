"""
Test definitions and results of the validation harness.

Suite files (test-*.json) name a schema and the test files to run against it;
each test file lists test cases assembling a YAML document from snippets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HarnessError(Exception):
    """Raised when the harness cannot run at all (e.g. the schema does not compile)."""


class DefinitionError(Exception):
    """Raised when a suite or test file is unreadable or malformed."""


@dataclass
class SuiteDefinition:
    """A test-*.json file."""

    name: str = ""
    schema_file: str = ""
    schema_version: str = ""
    tests: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(name: str, d: dict[str, Any]) -> SuiteDefinition:
        return SuiteDefinition(
            name=name,
            schema_file=d.get("SchemaFile", ""),
            schema_version=d.get("SchemaVersion", ""),
            tests=list(d.get("Tests") or []),
        )


@dataclass
class CaseDefinition:
    """One document to assemble and validate."""

    file_name: str = ""
    expect_outcome: str = ""
    disabled: bool = False
    files: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> CaseDefinition:
        return CaseDefinition(
            file_name=d.get("FileName", ""),
            expect_outcome=d.get("ExpectOutcome", ""),
            disabled=bool(d.get("Disabled", False)),
            files=list(d.get("Files") or []),
        )


class Verdict(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    SKIPPED = "skipped"


@dataclass
class CaseResult:
    """Outcome of one test case."""

    file_name: str = ""
    verdict: Verdict = Verdict.PASS
    message: str = ""


@dataclass
class SuiteResult:
    """Outcome of one suite."""

    name: str = ""
    schema_file: str = ""
    cases: list[CaseResult] = field(default_factory=list)

    # Test files of the suite that could not be read
    errors: list[str] = field(default_factory=list)

    def count(self, verdict: Verdict) -> int:
        return sum(1 for case in self.cases if case.verdict == verdict)

    @property
    def total(self) -> int:
        return len(self.cases)

    @property
    def passed(self) -> int:
        return self.count(Verdict.PASS)

    @property
    def skipped(self) -> int:
        return self.count(Verdict.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(Verdict.FAIL)

    @property
    def succeeded(self) -> bool:
        return not self.errors and self.failed == 0


@dataclass
class RunResult:
    """Outcome of a whole harness run."""

    suites: list[SuiteResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(suite.total for suite in self.suites)

    @property
    def passed(self) -> int:
        return sum(suite.passed for suite in self.suites)

    @property
    def skipped(self) -> int:
        return sum(suite.skipped for suite in self.suites)

    @property
    def failed(self) -> int:
        return sum(suite.failed for suite in self.suites)

    @property
    def succeeded(self) -> bool:
        return all(suite.succeeded for suite in self.suites)

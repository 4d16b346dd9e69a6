"""
Validation harness.

Assembles YAML documents from snippets, validates them against a JSON
schema and compares the verdicts with the expected outcomes.
"""

from __future__ import annotations

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
from .report import render_report
from .runner import HarnessRunner, compile_schema, evaluate_outcome, validate_document

__all__ = [
    "HarnessRunner",
    "HarnessError",
    "DefinitionError",
    "SuiteDefinition",
    "CaseDefinition",
    "CaseResult",
    "SuiteResult",
    "RunResult",
    "Verdict",
    "compile_schema",
    "evaluate_outcome",
    "validate_document",
    "render_report",
]

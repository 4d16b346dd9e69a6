import json
import shutil
import unittest
from pathlib import Path

import pytest
from jsonschema import Draft7Validator

from json_schema_unions.config import HarnessConfig
from json_schema_unions.harness import (
    CaseDefinition,
    HarnessError,
    HarnessRunner,
    SuiteDefinition,
    Verdict,
    compile_schema,
    evaluate_outcome,
    render_report,
    validate_document,
)
from json_schema_unions.schema_ast import dump_schema, load_schema_file
from json_schema_unions.unions import add_union_one_of_constraints

HARNESS_DATA = Path(__file__).parent / "test_data" / "harness"


def rewritten_schema_root(tmp_path):
    """Write the devfile schema with its component union rewritten into oneOf"""
    schema = load_schema_file(HARNESS_DATA / "schemas" / "devfile.schema.json")
    add_union_one_of_constraints(schema, ["ComponentType"], True)
    schema_root = tmp_path / "schemas"
    schema_root.mkdir()
    (schema_root / "devfile.schema.json").write_text(dump_schema(schema))
    return schema_root


def harness_config(schema_root, **kwargs):
    return HarnessConfig(tests_dir=HARNESS_DATA, schema_root=schema_root, snippet_root=HARNESS_DATA, **kwargs)


class TestEvaluateOutcome(unittest.TestCase):
    def test_invalid_document_expected_to_pass(self):
        verdict, message = evaluate_outcome(False, "/a: boom", "PASS")
        self.assertEqual(verdict, Verdict.FAIL)
        self.assertIn("boom", message)

    def test_invalid_document_without_expectation(self):
        verdict, message = evaluate_outcome(False, "/a: boom", "")
        self.assertEqual(verdict, Verdict.FAIL)
        self.assertIn("No expected outcome", message)

    def test_invalid_document_with_other_error(self):
        verdict, message = evaluate_outcome(False, "/a: boom", "bang")
        self.assertEqual(verdict, Verdict.FAIL)
        self.assertIn("Did not fail as expected", message)

    def test_invalid_document_with_expected_error(self):
        verdict, _ = evaluate_outcome(False, "/a: boom", "boom")
        self.assertEqual(verdict, Verdict.PASS)

    def test_valid_document_without_expectation(self):
        verdict, message = evaluate_outcome(True, "", "")
        self.assertEqual(verdict, Verdict.FAIL)
        self.assertIn("No expected outcome", message)

    def test_valid_document_with_expected_error(self):
        verdict, message = evaluate_outcome(True, "", "boom")
        self.assertEqual(verdict, Verdict.FAIL)
        self.assertIn("Expected error not found", message)

    def test_valid_document_expected_to_pass(self):
        verdict, _ = evaluate_outcome(True, "", "PASS")
        self.assertEqual(verdict, Verdict.PASS)


class TestValidateDocument(unittest.TestCase):
    def setUp(self):
        self.validator = Draft7Validator(
            {
                "type": "object",
                "properties": {"a": {"type": "string"}, "b": {"type": "integer"}},
                "required": ["a"],
            }
        )

    def test_valid(self):
        self.assertEqual(validate_document({"a": "x"}, self.validator), (True, ""))

    def test_all_errors_sorted_by_path(self):
        valid, message = validate_document({"b": "x"}, self.validator)

        self.assertFalse(valid)
        self.assertEqual(message.splitlines(), ["/: 'a' is a required property", "/b: 'x' is not of type 'integer'"])

    def test_array_indices_sorted_numerically(self):
        validator = Draft7Validator({"type": "array", "items": {"type": "string"}})

        _, message = validate_document([1] * 11, validator)

        paths = [line.split(":")[0] for line in message.splitlines()]
        self.assertEqual(paths, [f"/{i}" for i in range(11)])


def test_compile_schema_errors(tmp_path):
    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"type": 12}))

    with pytest.raises(HarnessError, match="Schema compile failed"):
        compile_schema(invalid)
    with pytest.raises(HarnessError, match="Schema compile failed"):
        compile_schema(tmp_path / "missing.json")


def test_assemble_document_prefixes_schema_version():
    runner = HarnessRunner(harness_config(HARNESS_DATA / "schemas"))
    suite = SuiteDefinition(name="test-x.json", schema_version="2.0.0")
    case = CaseDefinition(
        file_name="x.yaml",
        files=["snippets/components-none.yaml", "snippets/components-container.yaml"],
    )

    text = runner.assemble_document(suite, case)

    assert text.startswith("schemaVersion: 2.0.0\ncomponents:\n")
    assert text.count("components:") == 2


def test_run_against_rewritten_schema(tmp_path):
    work_dir = tmp_path / "work"
    result = HarnessRunner(harness_config(rewritten_schema_root(tmp_path), work_dir=work_dir)).run()

    assert [suite.name for suite in result.suites] == ["test-components.json"]
    suite = result.suites[0]
    assert {case.file_name: case.verdict for case in suite.cases} == {
        "container.yaml": Verdict.PASS,
        "both.yaml": Verdict.PASS,
        "none.yaml": Verdict.PASS,
        "no-image.yaml": Verdict.PASS,
        "disabled.yaml": Verdict.SKIPPED,
    }
    assert (result.total, result.passed, result.skipped, result.failed) == (5, 4, 1, 0)
    assert result.succeeded

    assembled = work_dir / "test-components" / "container.yaml"
    assert assembled.read_text().startswith("schemaVersion: 2.0.0\n")
    assert not (work_dir / "test-components" / "disabled.yaml").exists()


def test_run_against_schema_without_one_of(tmp_path):
    result = HarnessRunner(harness_config(HARNESS_DATA / "schemas")).run()

    verdicts = {case.file_name: case.verdict for case in result.suites[0].cases}
    assert verdicts["both.yaml"] == Verdict.FAIL
    assert verdicts["none.yaml"] == Verdict.FAIL
    assert verdicts["container.yaml"] == Verdict.PASS
    assert result.failed == 2
    assert not result.succeeded


def test_missing_snippet_fails_case(tmp_path):
    tests_dir = tmp_path / "tests"
    tests_dir.mkdir()
    (tests_dir / "test-missing.json").write_text(
        json.dumps({"SchemaFile": "devfile.schema.json", "Tests": ["cases.json"]})
    )
    (tests_dir / "cases.json").write_text(
        json.dumps({"Tests": [{"FileName": "x.yaml", "ExpectOutcome": "PASS", "Files": ["nowhere.yaml"]}]})
    )

    config = HarnessConfig(tests_dir=tests_dir, schema_root=HARNESS_DATA / "schemas")
    result = HarnessRunner(config).run()

    case = result.suites[0].cases[0]
    assert case.verdict == Verdict.FAIL
    assert "failed reading snippet" in case.message


def test_unreadable_definitions_are_recorded(tmp_path):
    tests_dir = tmp_path / "tests"
    shutil.copytree(HARNESS_DATA, tests_dir)
    (tests_dir / "test-broken.json").write_text("{broken")
    (tests_dir / "test-missing-file.json").write_text(
        json.dumps({"SchemaFile": "devfile.schema.json", "Tests": ["tests/nope.json"]})
    )

    config = HarnessConfig(tests_dir=tests_dir, schema_root=rewritten_schema_root(tmp_path))
    result = HarnessRunner(config).run()

    by_name = {suite.name: suite for suite in result.suites}
    assert by_name["test-broken.json"].errors
    assert by_name["test-missing-file.json"].errors
    assert by_name["test-components.json"].succeeded
    assert not result.succeeded


def single_case_tests_dir(tmp_path, snippet, expect_outcome="PASS", file_name="doc.yaml"):
    """Build a tests directory with one suite and one case over a single snippet"""
    tests_dir = tmp_path / "tests"
    tests_dir.mkdir()
    (tests_dir / "schema.json").write_text(json.dumps({"type": "object", "properties": {"v": {"type": "string"}}}))
    (tests_dir / "test-a.json").write_text(json.dumps({"SchemaFile": "schema.json", "Tests": ["cases.json"]}))
    (tests_dir / "cases.json").write_text(
        json.dumps({"Tests": [{"FileName": file_name, "ExpectOutcome": expect_outcome, "Files": ["snippet.yaml"]}]})
    )
    (tests_dir / "snippet.yaml").write_bytes(snippet)
    return tests_dir


def test_snippet_not_utf8_fails_only_its_case(tmp_path):
    tests_dir = single_case_tests_dir(tmp_path, b"v: \xff\xfe\n")

    result = HarnessRunner(HarnessConfig(tests_dir=tests_dir)).run()

    case = result.suites[0].cases[0]
    assert case.verdict == Verdict.FAIL
    assert "failed reading snippet" in case.message


def test_unwritable_document_fails_only_its_case(tmp_path):
    tests_dir = single_case_tests_dir(tmp_path, b"v: x\n", file_name="")

    result = HarnessRunner(HarnessConfig(tests_dir=tests_dir, work_dir=tmp_path / "work")).run()

    case = result.suites[0].cases[0]
    assert case.verdict == Verdict.FAIL
    assert "failed writing document" in case.message


def test_unquoted_dates_stay_strings(tmp_path):
    tests_dir = single_case_tests_dir(tmp_path, b"v: 2020-01-01\n")

    result = HarnessRunner(HarnessConfig(tests_dir=tests_dir)).run()

    assert result.suites[0].cases[0].verdict == Verdict.PASS


def test_missing_tests_dir(tmp_path):
    with pytest.raises(HarnessError, match="Tests directory not found"):
        HarnessRunner(HarnessConfig(tests_dir=tmp_path / "nope")).run()


def test_render_report(tmp_path):
    passing = render_report(HarnessRunner(harness_config(rewritten_schema_root(tmp_path))).run())
    failing = render_report(HarnessRunner(harness_config(HARNESS_DATA / "schemas")).run())

    assert "test-components.json : devfile.schema.json" in passing
    assert "SKIPPED : disabled.yaml" in passing
    assert "OVERALL PASS:" in passing
    assert " 5 tests; 4 passed; 1 skipped; 0 failed." in passing

    assert "FAIL : both.yaml : Document was valid - Expected error not found" in failing
    assert "OVERALL FAIL: 2 of 5 tests failed." in failing


if __name__ == "__main__":
    unittest.main()

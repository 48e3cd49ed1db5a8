"""Tests for config validation."""

from spooqw.dsl.validator import ValidationResult, validate, validate_steps
from spooqw.pipeline.models import Step
from tests.conftest import CYCLIC_CONFIG, VALID_CONFIG


class TestValidate:
    def test_valid_config(self):
        result = validate(VALID_CONFIG)
        assert result.valid
        assert result.errors == []

    def test_missing_id(self):
        result = validate("steps:\n  - id: step1\n    kind: sql\n")
        assert not result.valid
        assert "Pipeline must have an 'id' field" in result.errors

    def test_blank_id(self):
        result = validate("id:   \nsteps:\n  - id: step1\n    kind: sql\n")
        assert "Pipeline must have an 'id' field" in result.errors

    def test_nested_id_does_not_count(self):
        result = validate("steps:\n  - id: step1\n    kind: sql\n")
        assert result.errors == ["Pipeline must have an 'id' field"]

    def test_missing_steps_section(self):
        result = validate("id: test")
        assert "Pipeline must have a 'steps' section" in result.errors
        assert "Pipeline must have at least one step" in result.errors

    def test_steps_section_without_steps(self):
        result = validate("id: test\nsteps:\n")
        assert result.errors == ["Pipeline must have at least one step"]

    def test_steps_section_with_only_dropped_items(self):
        result = validate("id: test\nsteps:\n  - id: no_kind\n    format: csv\n")
        assert result.errors == ["Pipeline must have at least one step"]

    def test_empty_text(self):
        result = validate("")
        assert not result.valid
        assert "Pipeline must have an 'id' field" in result.errors
        assert "Pipeline must have a 'steps' section" in result.errors

    def test_invalid_kind(self):
        text = '''
id: test
steps:
  - id: step1
    kind: invalid-kind
'''
        result = validate(text)
        assert result.errors == ["Invalid step kind 'invalid-kind' in step 'step1'"]

    def test_duplicate_ids_reported_once(self):
        text = '''
id: test
steps:
  - id: duplicate
    kind: sql
  - id: duplicate
    kind: sql
'''
        result = validate(text)
        assert result.errors.count("Duplicate step ID: 'duplicate'") == 1

    def test_duplicate_ids_one_error_per_repeat(self):
        steps = [Step(id="d", kind="sql") for _ in range(3)]
        result = validate_steps(steps)
        assert result.errors == ["Duplicate step ID: 'd'", "Duplicate step ID: 'd'"]

    def test_missing_format(self):
        text = '''
id: test
steps:
  - id: in
    kind: input
    path: /data/x.csv
  - id: out
    kind: output
    source: in
'''
        result = validate(text)
        assert result.errors == [
            "Step 'in' of kind 'input' should specify a format",
            "Step 'out' of kind 'output' should specify a format",
        ]

    def test_streaming_kinds_need_no_format(self):
        steps = [
            Step(id="stream", kind="input-stream"),
            Step(id="sink", kind="output-stream", source="stream"),
        ]
        assert validate_steps(steps).valid

    def test_unknown_source(self):
        text = '''
id: test
steps:
  - id: out
    kind: output
    format: parquet
    source: missing
'''
        result = validate(text)
        assert result.errors == ["Step 'out' references unknown source 'missing'"]

    def test_forward_reference_allowed(self):
        text = '''
id: test
steps:
  - id: a
    kind: sql
    source: b
  - id: b
    kind: sql
'''
        assert validate(text).valid

    def test_unknown_depends_on(self):
        steps = [
            Step(id="a", kind="sql"),
            Step(id="j", kind="sql", depends_on=["a", "ghost"]),
        ]
        result = validate_steps(steps)
        assert result.errors == ["Step 'j' depends on unknown step 'ghost'"]

    def test_errors_accumulate(self):
        text = '''
steps:
  - id: s1
    kind: bogus
  - id: s1
    kind: input
    source: nowhere
'''
        result = validate(text)
        assert result.errors == [
            "Pipeline must have an 'id' field",
            "Invalid step kind 'bogus' in step 's1'",
            "Duplicate step ID: 's1'",
            "Step 's1' of kind 'input' should specify a format",
            "Step 's1' references unknown source 'nowhere'",
        ]

    def test_cycles_allowed_by_default(self):
        assert validate(CYCLIC_CONFIG).valid

    def test_strict_rejects_cycles(self):
        result = validate(CYCLIC_CONFIG, strict=True)
        assert result.errors == ["Dependency cycle detected: a → b → a"]

    def test_strict_accepts_acyclic(self):
        assert validate(VALID_CONFIG, strict=True).valid

    def test_never_raises(self):
        for text in [None, "::", "steps: |\n  x", "- - -", "id: x\nsteps:\n  -\n"]:
            assert isinstance(validate(text), ValidationResult)

    def test_deep_nesting_does_not_raise(self):
        nested = "\n".join(" " * (i + 1) + f"k{i}:" for i in range(600))
        result = validate("id: p\nsteps:\n" + nested)
        assert result.errors == ["Pipeline must have at least one step"]


class TestValidationResult:
    def test_to_dict(self):
        assert ValidationResult().to_dict() == {"valid": True, "errors": []}
        assert ValidationResult(errors=["x"]).to_dict() == {"valid": False, "errors": ["x"]}

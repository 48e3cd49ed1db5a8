"""Tests for merging steps into an existing document."""

from spooqw.dsl.merge import merge
from spooqw.dsl.parser import extract_metadata, parse
from spooqw.pipeline.models import Step


EXISTING = '''
id: original-id
desc: Original description

steps:
  - id: old_step
    kind: input
    format: csv
'''


class TestMerge:
    def test_keeps_metadata_replaces_steps(self):
        text = merge(EXISTING, [Step(id="new_step", kind="output", format="parquet")])

        assert "id: original-id" in text
        assert "desc: Original description" in text
        assert "- id: new_step" in text
        assert "old_step" not in text

    def test_result_parses_to_new_steps(self, sample_steps):
        text = merge(EXISTING, sample_steps)
        assert parse(text) == sample_steps
        assert extract_metadata(text).id == "original-id"

    def test_existing_without_metadata_uses_default_id(self):
        text = merge("steps:\n  - id: a\n    kind: sql\n", [Step(id="b", kind="sql")])
        assert text.startswith("id: my-pipeline")
        assert "desc:" not in text

    def test_empty_existing_text(self):
        text = merge("", [])
        assert text == "id: my-pipeline\n\nsteps:"

    def test_drops_unknown_keys_and_comments(self):
        existing = "# header comment\nid: p\nowner: data-team\nsteps:\n"
        text = merge(existing, [Step(id="a", kind="sql")])
        assert "owner" not in text
        assert "#" not in text

    def test_does_not_mutate_input(self, sample_steps):
        before = [Step.from_dict(s.to_dict()) for s in sample_steps]
        merge(EXISTING, sample_steps)
        assert sample_steps == before

"""Merge new steps into an existing config document."""

from __future__ import annotations

from spooqw.dsl.parser import extract_metadata
from spooqw.dsl.serializer import serialize
from spooqw.pipeline.models import Step


def merge(existing_text: str | None, steps: list[Step]) -> str:
    """Keep the existing document's `id` and `desc`, replace all of its steps.

    The result is rendered fresh: comments, hand-chosen formatting and
    top-level keys other than `id`/`desc` are not carried over.
    """
    metadata = extract_metadata(existing_text)
    return serialize(steps, metadata.id, metadata.desc)

"""Pipeline config language: serializer, parser, validator and merge."""

from spooqw.dsl.serializer import DEFAULT_PIPELINE_ID, serialize, serialize_document
from spooqw.dsl.parser import extract_metadata, parse, parse_document, parse_tree
from spooqw.dsl.validator import ValidationResult, validate, validate_steps
from spooqw.dsl.merge import merge

__all__ = [
    "DEFAULT_PIPELINE_ID",
    "serialize",
    "serialize_document",
    "parse",
    "parse_document",
    "parse_tree",
    "extract_metadata",
    "validate",
    "validate_steps",
    "ValidationResult",
    "merge",
]

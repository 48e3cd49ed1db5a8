"""SpooqW — pipeline config language: serialize, parse, validate and merge step graphs."""

__version__ = "0.1.0"

from spooqw.pipeline.models import Step, Position, PipelineDocument, PipelineMetadata
from spooqw.pipeline.types import StepKind
from spooqw.dsl import (
    serialize,
    serialize_document,
    parse,
    parse_document,
    extract_metadata,
    validate,
    validate_steps,
    ValidationResult,
    merge,
)

__all__ = [
    "Step",
    "Position",
    "PipelineDocument",
    "PipelineMetadata",
    "StepKind",
    "serialize",
    "serialize_document",
    "parse",
    "parse_document",
    "extract_metadata",
    "validate",
    "validate_steps",
    "ValidationResult",
    "merge",
    "__version__",
]

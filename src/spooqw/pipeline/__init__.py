"""Pipeline step model, kinds and editor helpers."""

from spooqw.pipeline.types import StepKind, EdgeKind, FORMAT_REQUIRED_KINDS
from spooqw.pipeline.models import Step, Position, PipelineDocument, PipelineMetadata

__all__ = [
    "StepKind",
    "EdgeKind",
    "FORMAT_REQUIRED_KINDS",
    "Step",
    "Position",
    "PipelineDocument",
    "PipelineMetadata",
]

"""Step templates and editor operations on step lists.

All operations return new lists; the input list and its steps are never
mutated.
"""

from __future__ import annotations

from dataclasses import replace

from spooqw.pipeline.models import Position, Step
from spooqw.pipeline.types import StepKind


class UnknownStepError(Exception):
    """Raised when an editor operation names a step that does not exist."""
    def __init__(self, step_id: str):
        self.step_id = step_id
        super().__init__(f"Step '{step_id}' not found")


def unique_step_id(kind: str, steps: list[Step]) -> str:
    """Derive an unused step id from a kind: `input_stream`, `input_stream_1`, ..."""
    base = kind.replace("-", "_", 1)
    taken = {s.id for s in steps}
    step_id = base
    counter = 1
    while step_id in taken:
        step_id = f"{base}_{counter}"
        counter += 1
    return step_id


def new_step(kind: str | StepKind, steps: list[Step], position: Position | None = None) -> Step:
    """Build a step of `kind` pre-filled with sensible defaults.

    Steps that consume data are wired to the last step in `steps`.
    """
    try:
        kind = StepKind(kind)
    except ValueError:
        raise ValueError(f"Unknown step kind: {kind}") from None

    upstream = steps[-1].id if steps else None
    step = Step(id=unique_step_id(kind.value, steps), kind=kind.value, position=position)

    if kind is StepKind.INPUT:
        step.format = "csv"
        step.path = "/data/file.csv"
    elif kind is StepKind.INPUT_STREAM:
        step.format = "kafka"
        step.options = {
            "kafka.bootstrap.servers": "localhost:9092",
            "subscribe": "topic-name",
        }
    elif kind is StepKind.SQL:
        step.sql = f"SELECT * FROM {upstream or 'source_step'}"
    elif kind is StepKind.VARIABLE:
        step.sql = f"SELECT MAX(date) FROM {upstream or 'source'}"
    elif kind is StepKind.OUTPUT:
        step.source = upstream
        step.format = "parquet"
        step.path = "/output/file.parquet"
        step.options = {"mode": "overwrite"}
    elif kind is StepKind.OUTPUT_STREAM:
        step.source = upstream
        step.format = "console"
        step.options = {"outputMode": "append"}
    elif kind is StepKind.UDF:
        step.options = {"claz": "com.example.MyUDF"}
    elif kind is StepKind.CUSTOM:
        step.options = {"claz": "com.example.MyStep"}

    return step


def add_step(steps: list[Step], kind: str | StepKind, position: Position | None = None) -> list[Step]:
    return [*steps, new_step(kind, steps, position)]


def remove_step(steps: list[Step], step_id: str) -> list[Step]:
    """Drop a step. References to it are left for the validator to report."""
    if not any(s.id == step_id for s in steps):
        raise UnknownStepError(step_id)
    return [s for s in steps if s.id != step_id]


def connect(steps: list[Step], source_id: str, target_id: str) -> list[Step]:
    """Make `source_id` the primary upstream of `target_id`."""
    ids = {s.id for s in steps}
    for step_id in (source_id, target_id):
        if step_id not in ids:
            raise UnknownStepError(step_id)
    return [replace(s, source=source_id) if s.id == target_id else s for s in steps]

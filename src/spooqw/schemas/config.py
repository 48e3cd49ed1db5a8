"""Pydantic schemas for the config endpoints."""

from pydantic import BaseModel, Field

from spooqw.pipeline.models import Step
from spooqw.pipeline.types import EdgeKind, StepKind


class PositionSchema(BaseModel):
    x: float
    y: float


class StepSchema(BaseModel):
    """A step as exchanged over HTTP, using the config attribute names."""

    id: str = Field(min_length=1)
    kind: str
    short_desc: str | None = Field(default=None, alias="shortDesc")
    desc: str | None = None
    source: str | None = None
    format: str | None = None
    path: str | None = None
    sql: str | None = None
    cache: bool | None = None
    show: bool | None = None
    schema_: str | None = Field(default=None, alias="schema")
    options: dict[str, str] | None = None
    depends_on: list[str] | None = Field(default=None, alias="dependsOn")
    position: PositionSchema | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_step(cls, step: Step) -> "StepSchema":
        return cls.model_validate(step.to_dict())

    def to_step(self) -> Step:
        return Step.from_dict(self.model_dump(by_alias=True, exclude_none=True))


class ConfigRequest(BaseModel):
    config: str
    strict: bool | None = None


class ValidationResponse(BaseModel):
    valid: bool
    errors: list[str]


class DocumentResponse(BaseModel):
    id: str | None
    desc: str | None
    steps: list[StepSchema]


class RenderRequest(BaseModel):
    steps: list[StepSchema]
    id: str | None = None
    desc: str | None = None


class MergeRequest(BaseModel):
    config: str
    steps: list[StepSchema]


class ConfigResponse(BaseModel):
    config: str


class AddStepRequest(BaseModel):
    config: str
    kind: StepKind
    position: PositionSchema | None = None


class AddStepResponse(BaseModel):
    config: str
    step: StepSchema


class RemoveStepRequest(BaseModel):
    config: str
    step_id: str


class ConnectRequest(BaseModel):
    config: str
    source: str
    target: str


class GraphNode(BaseModel):
    id: str
    kind: str
    level: int


class GraphEdge(BaseModel):
    source: str
    target: str
    kind: EdgeKind


class GraphResponse(BaseModel):
    nodes: list[GraphNode]
    edges: list[GraphEdge]
    order: list[str]
    groups: list[list[str]]

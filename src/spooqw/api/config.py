"""Config API endpoints — validate, parse, render and merge pipeline config."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from spooqw.core.config import SpooqwSettings, get_settings
from spooqw.dag.resolver import CycleError, StepGraph
from spooqw.dsl import merge, parse, parse_document, serialize, validate
from spooqw.pipeline.models import Position
from spooqw.pipeline.templates import UnknownStepError, connect, new_step, remove_step
from spooqw.schemas.config import (
    AddStepRequest, AddStepResponse, ConfigRequest, ConfigResponse,
    ConnectRequest, DocumentResponse, GraphResponse, MergeRequest,
    RemoveStepRequest, RenderRequest, StepSchema, ValidationResponse,
)

logger = logging.getLogger("spooqw.api")

router = APIRouter(prefix="/config", tags=["config"])


@router.post("/validate", response_model=ValidationResponse)
async def validate_config(
    data: ConfigRequest,
    settings: SpooqwSettings = Depends(get_settings),
):
    """Validate config text. Problems are reported in the body, never as an HTTP error."""
    strict = settings.strict_validation if data.strict is None else data.strict
    result = validate(data.config, strict=strict)
    if not result.valid:
        logger.info(f"Config rejected with {len(result.errors)} error(s)")
    return result.to_dict()


@router.post("/parse", response_model=DocumentResponse, response_model_exclude_none=True)
async def parse_config(data: ConfigRequest):
    """Parse config text into its id, desc and steps."""
    document = parse_document(data.config)
    return DocumentResponse(
        id=document.id,
        desc=document.desc,
        steps=[StepSchema.from_step(s) for s in document.steps],
    )


@router.post("/render", response_model=ConfigResponse)
async def render_config(
    data: RenderRequest,
    settings: SpooqwSettings = Depends(get_settings),
):
    """Render steps as config text."""
    steps = [s.to_step() for s in data.steps]
    return ConfigResponse(config=serialize(steps, data.id or settings.default_pipeline_id, data.desc))


@router.post("/merge", response_model=ConfigResponse)
async def merge_config(data: MergeRequest):
    """Replace the steps of existing config text, keeping its id and desc."""
    steps = [s.to_step() for s in data.steps]
    return ConfigResponse(config=merge(data.config, steps))


@router.post("/graph", response_model=GraphResponse)
async def config_graph(data: ConfigRequest):
    """Dependency graph of the parsed steps: nodes with levels, edges and order."""
    graph = StepGraph.from_steps(parse(data.config))
    try:
        return graph.to_dict()
    except CycleError as e:
        raise HTTPException(400, str(e))


@router.post("/steps", response_model=AddStepResponse, response_model_exclude_none=True)
async def add_config_step(data: AddStepRequest):
    """Append a templated step of the requested kind."""
    document = parse_document(data.config)
    position = Position(x=data.position.x, y=data.position.y) if data.position else None
    step = new_step(data.kind, document.steps, position)
    return AddStepResponse(config=merge(data.config, [*document.steps, step]), step=StepSchema.from_step(step))


@router.post("/steps/remove", response_model=ConfigResponse)
async def remove_config_step(data: RemoveStepRequest):
    """Drop a step. Steps that referenced it are left for validation to flag."""
    try:
        steps = remove_step(parse(data.config), data.step_id)
    except UnknownStepError as e:
        raise HTTPException(404, str(e))
    return ConfigResponse(config=merge(data.config, steps))


@router.post("/connect", response_model=ConfigResponse)
async def connect_config_steps(data: ConnectRequest):
    """Set `target`'s source to `source`."""
    try:
        steps = connect(parse(data.config), data.source, data.target)
    except UnknownStepError as e:
        raise HTTPException(404, str(e))
    logger.info(f"Connected {data.source} → {data.target}")
    return ConfigResponse(config=merge(data.config, steps))

"""Validator — structural and semantic checks over pipeline config.

Validation never raises. Every applicable problem is reported so a document
can be fixed in one pass:

    1. a top-level `id` with a value
    2. a top-level `steps` section
    3. at least one parsed step
    4. unique step ids (one error per repeated occurrence)
    5. known step kinds
    6. a `format` on input and output steps
    7. `source` names an existing step
    8. every `dependsOn` entry names an existing step
    9. no dependency cycles (strict mode only)

Reference checks run against the whole step list, so a step may refer to
one declared after it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from spooqw.dag.resolver import StepGraph
from spooqw.dsl.parser import metadata_from_tree, parse_tree, steps_from_tree
from spooqw.pipeline.models import Step
from spooqw.pipeline.types import FORMAT_REQUIRED_KINDS, StepKind

logger = logging.getLogger("spooqw.dsl")


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def validate(text: str | None, *, strict: bool = False) -> ValidationResult:
    """Validate config text."""
    tree = parse_tree(text)
    errors = []

    if metadata_from_tree(tree).id is None:
        errors.append("Pipeline must have an 'id' field")

    if tree.get("steps") is None:
        errors.append("Pipeline must have a 'steps' section")

    errors.extend(validate_steps(steps_from_tree(tree), strict=strict).errors)

    result = ValidationResult(errors=errors)
    logger.debug(f"Validated config: {len(errors)} error(s)")
    return result


def validate_steps(steps: list[Step], *, strict: bool = False) -> ValidationResult:
    """Run the step-level checks on an already structured step list."""
    errors = []

    if not steps:
        errors.append("Pipeline must have at least one step")

    all_ids = {step.id for step in steps}
    seen: set[str] = set()

    for step in steps:
        if step.id in seen:
            errors.append(f"Duplicate step ID: '{step.id}'")
        seen.add(step.id)

        if not StepKind.is_valid(step.kind):
            errors.append(f"Invalid step kind '{step.kind}' in step '{step.id}'")

        if step.kind in FORMAT_REQUIRED_KINDS and not step.format:
            errors.append(f"Step '{step.id}' of kind '{step.kind}' should specify a format")

        if step.source and step.source not in all_ids:
            errors.append(f"Step '{step.id}' references unknown source '{step.source}'")

        for dep in step.depends_on or []:
            if dep not in all_ids:
                errors.append(f"Step '{step.id}' depends on unknown step '{dep}'")

    if strict:
        cycle = StepGraph.from_steps(steps, implicit=False).detect_cycles()
        if cycle:
            errors.append(f"Dependency cycle detected: {' → '.join(cycle)}")

    return ValidationResult(errors=errors)

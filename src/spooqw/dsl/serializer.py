"""Serializer — renders a step list as pipeline config text."""

from __future__ import annotations

from spooqw.pipeline.models import PipelineDocument, Step

DEFAULT_PIPELINE_ID = "my-pipeline"

STEP_INDENT = "  "
ATTR_INDENT = "    "
NESTED_INDENT = "      "

# Optional text attributes in output order. options, dependsOn and position
# are nested blocks and follow `schema`.
_TEXT_ATTRS = [
    ("short_desc", "shortDesc"),
    ("desc", "desc"),
    ("source", "source"),
    ("format", "format"),
    ("path", "path"),
    ("sql", "sql"),
]
_FLAG_ATTRS = [
    ("cache", "cache"),
    ("show", "show"),
]


def serialize(
    steps: list[Step],
    pipeline_id: str | None = None,
    pipeline_desc: str | None = None,
) -> str:
    """Render steps as config text.

    Attributes are emitted in a fixed order so output is deterministic and
    diffable. Values are written verbatim: nothing is quoted or escaped.
    """
    lines = [f"id: {pipeline_id or DEFAULT_PIPELINE_ID}"]
    lines.extend(_text_lines("desc", pipeline_desc, indent="", nested_indent=STEP_INDENT))
    lines.append("")
    lines.append("steps:")

    for step in steps:
        lines.extend(_step_lines(step))
        lines.append("")

    return "\n".join(lines).strip()


def serialize_document(document: PipelineDocument) -> str:
    return serialize(document.steps, document.id, document.desc)


def _step_lines(step: Step) -> list[str]:
    lines = [
        f"{STEP_INDENT}- id: {step.id}",
        f"{ATTR_INDENT}kind: {step.kind}",
    ]

    for attr, key in _TEXT_ATTRS:
        lines.extend(_text_lines(key, getattr(step, attr)))

    for attr, key in _FLAG_ATTRS:
        value = getattr(step, attr)
        if value is not None:
            lines.append(f"{ATTR_INDENT}{key}: {'true' if value else 'false'}")

    lines.extend(_text_lines("schema", step.schema))

    if step.options:
        lines.append(f"{ATTR_INDENT}options:")
        for key, value in step.options.items():
            lines.append(f"{NESTED_INDENT}{key}: {value}")

    if step.depends_on:
        lines.append(f"{ATTR_INDENT}dependsOn:")
        for dep in step.depends_on:
            lines.append(f"{NESTED_INDENT}- {dep}")

    if step.position is not None:
        lines.append(f"{ATTR_INDENT}position:")
        lines.append(f"{NESTED_INDENT}x: {_format_number(step.position.x)}")
        lines.append(f"{NESTED_INDENT}y: {_format_number(step.position.y)}")

    return lines


def _text_lines(
    key: str,
    value: str | None,
    indent: str = ATTR_INDENT,
    nested_indent: str = NESTED_INDENT,
) -> list[str]:
    if not value:
        return []
    if "\n" not in value:
        return [f"{indent}{key}: {value}"]

    # Literal block scalar; empty lines stay empty instead of carrying indent.
    # Leading spaces on the first content line need an indentation indicator.
    text_lines = value.split("\n")
    first = next((text_line for text_line in text_lines if text_line.strip()), "")
    header = f"|{len(nested_indent) - len(indent)}" if first.startswith(" ") else "|"
    lines = [f"{indent}{key}: {header}"]
    for text_line in text_lines:
        lines.append(f"{nested_indent}{text_line}" if text_line else "")
    return lines


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

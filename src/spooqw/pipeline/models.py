"""Step and pipeline document models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Position:
    """Editor canvas coordinate. Presentation only."""
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class Step:
    """A node in the pipeline graph.

    `kind` is kept as a plain string so that unknown kinds survive parsing;
    only the validator decides whether a kind is legal.
    """
    id: str
    kind: str
    short_desc: str | None = None
    desc: str | None = None
    source: str | None = None
    format: str | None = None
    path: str | None = None
    sql: str | None = None
    cache: bool | None = None
    show: bool | None = None
    schema: str | None = None
    options: dict[str, str] | None = None
    depends_on: list[str] | None = None
    position: Position | None = None

    def references(self) -> list[str]:
        """Upstream step ids named by `source` and `depends_on`, in order."""
        refs = []
        if self.source:
            refs.append(self.source)
        for dep in self.depends_on or []:
            if dep not in refs:
                refs.append(dep)
        return refs

    def to_dict(self) -> dict:
        """Serialize using the config attribute names, omitting absent fields."""
        data: dict[str, Any] = {"id": self.id, "kind": self.kind}
        for attr, key in _FIELD_KEYS:
            value = getattr(self, attr)
            if value is None:
                continue
            if attr == "position":
                value = value.to_dict()
            elif attr == "options":
                value = dict(value)
            elif attr == "depends_on":
                value = list(value)
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Step":
        kwargs: dict[str, Any] = {"id": data["id"], "kind": str(data["kind"])}
        for attr, key in _FIELD_KEYS:
            value = data.get(key)
            if value is None:
                continue
            if attr == "position":
                value = Position(x=value["x"], y=value["y"])
            elif attr == "options":
                value = {str(k): str(v) for k, v in value.items()}
            elif attr == "depends_on":
                value = [str(v) for v in value]
            kwargs[attr] = value
        return cls(**kwargs)


# (attribute, config key) for every optional field
_FIELD_KEYS = [
    ("short_desc", "shortDesc"),
    ("desc", "desc"),
    ("source", "source"),
    ("format", "format"),
    ("path", "path"),
    ("sql", "sql"),
    ("cache", "cache"),
    ("show", "show"),
    ("schema", "schema"),
    ("options", "options"),
    ("depends_on", "dependsOn"),
    ("position", "position"),
]


@dataclass
class PipelineMetadata:
    """Top-level `id` and `desc` of a pipeline document."""
    id: str | None = None
    desc: str | None = None

    def to_dict(self) -> dict:
        return {"id": self.id, "desc": self.desc}


@dataclass
class PipelineDocument:
    id: str | None = None
    desc: str | None = None
    steps: list[Step] = field(default_factory=list)

    @property
    def metadata(self) -> PipelineMetadata:
        return PipelineMetadata(id=self.id, desc=self.desc)

    def get_step(self, step_id: str) -> Step | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "desc": self.desc,
            "steps": [s.to_dict() for s in self.steps],
        }

"""Step kinds and related enums."""

from __future__ import annotations

from enum import Enum


class StepKind(str, Enum):
    INPUT = "input"
    INPUT_STREAM = "input-stream"
    SQL = "sql"
    VARIABLE = "variable"
    SCRIPT = "script"
    CUSTOM = "custom"
    CUSTOM_INPUT = "customInput"
    AVRO_SERDE = "avro-serde"
    UDF = "udf"
    OUTPUT = "output"
    OUTPUT_STREAM = "output-stream"
    PARSE_JSON = "parse-json"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in _KIND_VALUES


class EdgeKind(str, Enum):
    SOURCE = "source"
    DEPENDS_ON = "depends_on"
    IMPLICIT = "implicit"


_KIND_VALUES = frozenset(k.value for k in StepKind)

# Kinds that read or write data and therefore need a format
FORMAT_REQUIRED_KINDS = frozenset({StepKind.INPUT.value, StepKind.OUTPUT.value})

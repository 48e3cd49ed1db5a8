"""Parser — pipeline config text to steps.

The config format is a restricted block-style subset of YAML:

    document := { entry }                     entries at column 0
    entry    := KEY ":" [inline] [block]
    block    := mapping | sequence | literal
    mapping  := { KEY ":" [inline] [block] }  keys share one indent
    sequence := { "-" ( entry-head | inline ) }
    literal  := "|" [1-9] { deeper-indented or blank line }

Indentation is relative: any consistent indent works, and a sequence may
sit at the same column as the key that owns it. Blank and `#` comment lines
are ignored outside literal blocks. A digit after `|` fixes the block's
content indent relative to its key, so content lines may start with spaces.

The parser is permissive: it never raises on malformed text. Step items
missing `id` or `kind` are dropped, and an absent `steps:` section yields
no steps. Judging the document is the validator's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from spooqw.dsl.lexer import Line, literal_header, split_entry, tokenize
from spooqw.pipeline.models import PipelineDocument, PipelineMetadata, Position, Step

logger = logging.getLogger("spooqw.dsl")

# Deepest block nesting the parser descends into
MAX_DEPTH = 64


# ─── Syntax tree ───


@dataclass
class Literal:
    text: str


@dataclass
class Entry:
    key: str
    value: str | None
    line: int
    block: "Block | None" = None

    def scalar(self) -> str | None:
        """Text value: literal block content or the inline value."""
        if isinstance(self.block, Literal):
            return self.block.text or None
        return self.value


@dataclass
class Mapping:
    entries: list[Entry] = field(default_factory=list)

    def get(self, key: str) -> Entry | None:
        for entry in self.entries:
            if entry.key == key:
                return entry
        return None


@dataclass
class Item:
    line: int
    value: str | None = None
    mapping: Mapping | None = None


@dataclass
class Sequence:
    items: list[Item] = field(default_factory=list)


Block = Union[Mapping, Sequence, Literal]


class _Parser:
    """Recursive-descent parser over lexed lines.

    Nesting deeper than MAX_DEPTH blocks is not descended into: those lines
    are skipped like any other line no key owns.
    """

    def __init__(self, text: str):
        self.lines = tokenize(text)
        self.pos = 0

    def _peek(self) -> Line | None:
        while self.pos < len(self.lines) and not self.lines[self.pos].structural:
            self.pos += 1
        if self.pos < len(self.lines):
            return self.lines[self.pos]
        return None

    def parse_document(self) -> Mapping:
        document = Mapping()
        while True:
            line = self._peek()
            if line is None:
                break
            if line.indent > 0 or line.sequence_item:
                # Not owned by any top-level key
                self.pos += 1
                continue
            entry = self._parse_entry(line, line.text, line.indent, depth=0)
            if entry is not None:
                document.entries.append(entry)
        return document

    def _parse_mapping(self, indent: int, depth: int) -> Mapping:
        mapping = Mapping()
        while True:
            line = self._peek()
            if line is None or line.indent < indent:
                break
            if line.indent > indent or line.sequence_item:
                self.pos += 1
                continue
            entry = self._parse_entry(line, line.text, indent, depth)
            if entry is not None:
                mapping.entries.append(entry)
        return mapping

    def _parse_entry(self, line: Line, text: str, indent: int, depth: int) -> Entry | None:
        """Parse `text` (the entry part of `line`) whose key sits at `indent`."""
        self.pos += 1
        parts = split_entry(text)
        if parts is None:
            logger.debug(f"Line {line.number}: not a key/value entry, skipped")
            return None
        key, value = parts
        entry = Entry(key=key, value=value, line=line.number)
        entry.block = self._parse_block(indent, value, depth + 1)
        return entry

    def _parse_block(self, owner_indent: int, inline: str | None, depth: int) -> Block | None:
        header = literal_header(inline)
        if header is not None:
            return self._parse_literal(owner_indent, header)
        if inline is not None:
            return None

        line = self._peek()
        if line is None:
            return None
        if depth > MAX_DEPTH:
            if line.indent > owner_indent:
                logger.debug(f"Line {line.number}: nested deeper than {MAX_DEPTH} levels, skipped")
            return None
        if line.indent > owner_indent:
            if line.sequence_item:
                return self._parse_sequence(line.indent, depth)
            return self._parse_mapping(line.indent, depth)
        if line.indent == owner_indent and line.sequence_item:
            return self._parse_sequence(owner_indent, depth)
        return None

    def _parse_sequence(self, indent: int, depth: int) -> Sequence:
        sequence = Sequence()
        while True:
            line = self._peek()
            if line is None or line.indent < indent:
                break
            if line.indent > indent:
                self.pos += 1
                continue
            if not line.sequence_item:
                break
            sequence.items.append(self._parse_item(line, indent, depth))
        return sequence

    def _parse_item(self, line: Line, indent: int, depth: int) -> Item:
        rest = line.raw[indent + 1:]
        content = rest.strip()
        column = indent + 1 + len(rest) - len(rest.lstrip(" "))
        item = Item(line=line.number)

        if not content:
            # `-` alone: the item's mapping starts on the next line
            self.pos += 1
            following = self._peek()
            if following is not None and following.indent > indent and not following.sequence_item:
                item.mapping = self._parse_mapping(following.indent, depth)
            return item

        if split_entry(content) is None:
            self.pos += 1
            item.value = content
            return item

        first = self._parse_entry(line, content, column, depth)
        item.mapping = self._parse_mapping(column, depth)
        if first is not None:
            item.mapping.entries.insert(0, first)
        return item

    def _parse_literal(self, owner_indent: int, indicator: int) -> Literal:
        """Collect a `|` block. An indentation indicator fixes the content
        column at `owner_indent + indicator`; otherwise it is the smallest
        indent in the block."""
        body: list[Line] = []
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if not line.blank and line.indent <= owner_indent:
                break
            body.append(line)
            self.pos += 1

        while body and body[-1].blank:
            body.pop()
        if not body:
            return Literal("")

        if indicator:
            margin = owner_indent + indicator
        else:
            margin = min(line.indent for line in body if not line.blank)
        return Literal("\n".join(line.raw[min(margin, line.indent):] for line in body))


def parse_tree(text: str | None) -> Mapping:
    """Parse config text into its syntax tree (top-level mapping)."""
    return _Parser(text or "").parse_document()


# ─── Step extraction ───


def parse(text: str | None) -> list[Step]:
    """Parse config text into steps. Never raises."""
    return steps_from_tree(parse_tree(text))


def extract_metadata(text: str | None) -> PipelineMetadata:
    """Top-level `id` and `desc`; keys nested under `steps:` never match."""
    return metadata_from_tree(parse_tree(text))


def parse_document(text: str | None) -> PipelineDocument:
    tree = parse_tree(text)
    metadata = metadata_from_tree(tree)
    return PipelineDocument(id=metadata.id, desc=metadata.desc, steps=steps_from_tree(tree))


def metadata_from_tree(tree: Mapping) -> PipelineMetadata:
    return PipelineMetadata(
        id=_first_value(tree, "id"),
        desc=_first_value(tree, "desc"),
    )


def steps_from_tree(tree: Mapping) -> list[Step]:
    section = tree.get("steps")
    if section is None or not isinstance(section.block, Sequence):
        return []

    steps = []
    for item in section.block.items:
        step = _build_step(item)
        if step is not None:
            steps.append(step)
    return steps


def _first_value(tree: Mapping, key: str) -> str | None:
    for entry in tree.entries:
        if entry.key == key:
            value = entry.scalar()
            if value and value.strip():
                return value.strip()
    return None


def _build_step(item: Item) -> Step | None:
    if item.mapping is None:
        logger.debug(f"Line {item.line}: step item is not a mapping, dropped")
        return None

    fields = item.mapping
    step_id = _token(fields.get("id"))
    kind = _token(fields.get("kind"))
    if step_id is None or kind is None:
        logger.debug(f"Line {item.line}: step without id or kind, dropped")
        return None

    return Step(
        id=step_id,
        kind=kind,
        short_desc=_text(fields.get("shortDesc")),
        desc=_text(fields.get("desc")),
        source=_token(fields.get("source")),
        format=_token(fields.get("format")),
        path=_text(fields.get("path")),
        sql=_text(fields.get("sql")),
        cache=_flag(fields.get("cache")),
        show=_flag(fields.get("show")),
        schema=_text(fields.get("schema")),
        options=_options(fields.get("options")),
        depends_on=_depends_on(fields.get("dependsOn")),
        position=_position(fields.get("position")),
    )


def _token(entry: Entry | None) -> str | None:
    """First whitespace-delimited token of an inline value."""
    if entry is None or entry.value is None or literal_header(entry.value) is not None:
        return None
    return entry.value.split()[0]


def _text(entry: Entry | None) -> str | None:
    if entry is None:
        return None
    return entry.scalar()


def _flag(entry: Entry | None) -> bool | None:
    token = _token(entry)
    if token == "true":
        return True
    if token == "false":
        return False
    return None


def _options(entry: Entry | None) -> dict[str, str] | None:
    if entry is None or not isinstance(entry.block, Mapping):
        return None
    options = {}
    for option in entry.block.entries:
        options.setdefault(option.key, option.scalar() or "")
    return options or None


def _depends_on(entry: Entry | None) -> list[str] | None:
    if entry is None:
        return None
    if isinstance(entry.block, Sequence):
        deps = [item.value for item in entry.block.items if item.value]
        return deps or None
    if entry.value is None:
        return None

    value = entry.value
    if value.startswith("[") and value.endswith("]"):
        deps = [part.strip() for part in value[1:-1].split(",") if part.strip()]
        return deps or None
    return [value]


def _position(entry: Entry | None) -> Position | None:
    if entry is None or not isinstance(entry.block, Mapping):
        return None
    x = _number(entry.block.get("x"))
    y = _number(entry.block.get("y"))
    if x is None or y is None:
        return None
    return Position(x=x, y=y)


def _number(entry: Entry | None) -> float | None:
    if entry is None or entry.value is None:
        return None
    try:
        return float(entry.value)
    except ValueError:
        return None

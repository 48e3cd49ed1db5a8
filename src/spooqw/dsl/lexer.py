"""Line lexer for the block-style config grammar."""

from __future__ import annotations

import re
from dataclasses import dataclass

# `key: value` or `key:`; the key stops at the first colon that is followed
# by whitespace or end of line, so values like `s3://bucket` stay intact.
_ENTRY_RE = re.compile(r"^(?P<key>[^:\s#-][^:]*?|-[^:\s][^:]*?)\s*:(?:\s+(?P<value>.*))?$")

# `|` with optional chomping (`-`/`+`) and indentation (1-9) indicators in
# either order: `|`, `|-`, `|2`, `|2-`, `|-2`
_LITERAL_RE = re.compile(r"^\|(?:(?P<a>[1-9])[-+]?|[-+](?P<b>[1-9])?)?$")


@dataclass
class Line:
    number: int
    raw: str
    indent: int
    text: str

    @property
    def blank(self) -> bool:
        return not self.text

    @property
    def comment(self) -> bool:
        return self.text.startswith("#")

    @property
    def structural(self) -> bool:
        """True for lines that carry grammar (not blank, not a comment)."""
        return not self.blank and not self.comment

    @property
    def sequence_item(self) -> bool:
        return self.text == "-" or self.text.startswith("- ")


def tokenize(text: str) -> list[Line]:
    lines = []
    for number, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.lstrip(" ")
        lines.append(Line(
            number=number,
            raw=raw,
            indent=len(raw) - len(stripped),
            text=stripped.strip(),
        ))
    return lines


def split_entry(text: str) -> tuple[str, str | None] | None:
    """Split `key: value` into its parts. Returns None if `text` is not an entry."""
    match = _ENTRY_RE.match(text)
    if match is None:
        return None
    value = match.group("value")
    if value is not None:
        value = value.strip() or None
    return match.group("key"), value


def literal_header(value: str | None) -> int | None:
    """Indentation indicator of a literal block header.

    Returns 0 when the header has no indicator, and None when `value` does
    not open a literal block.
    """
    if value is None:
        return None
    match = _LITERAL_RE.match(value)
    if match is None:
        return None
    return int(match.group("a") or match.group("b") or 0)

"""Token types shared by the usage scanner.

Tokens are produced by an external Mustache parser (typically Hogan.js
``parse(scan(text))``). The scanner reads them but never mutates them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

# Usage contexts and variable records are plain dicts so results can be
# handed straight to json.dumps().
UsageContext = dict[str, Any]
UsageRecord = dict[str, Any]


class TokenTag(Enum):
    """Hogan.js tag spellings."""

    # Variable references
    ESCAPED = "_v"
    UNESCAPED = "{"
    AMPERSAND = "&"
    SECTION = "#"
    INVERTED = "^"
    PARTIAL = ">"

    # Everything else
    TEXT = "_t"
    NEWLINE = "\n"
    COMMENT = "!"
    SECTION_END = "/"
    DELIMITER = "="
    PARTIAL_BLOCK = "<"
    BLOCK = "$"


@dataclass(frozen=True, slots=True)
class Token:
    """One node of a parsed template.

    ``children`` is only set for sections and subroutines
    (``#``, ``^``, ``<``, ``$``).
    """

    tag: TokenTag | str
    name: str | None = None
    children: Sequence[Token] | None = None

    @classmethod
    def from_hogan(cls, raw: Mapping[str, Any]) -> Token:
        """Convert a Hogan.js token dict (``tag``, ``n``, ``nodes``) recursively."""
        nodes = raw.get("nodes")
        return cls(
            tag=raw["tag"],
            name=raw.get("n"),
            children=tuple(cls.from_hogan(node) for node in nodes) if nodes is not None else None,
        )


def tag_value(tag: TokenTag | str | None) -> str | None:
    """Return the raw tag string for a TokenTag or string."""
    if isinstance(tag, TokenTag):
        return tag.value
    return tag


def token_parts(token: Token | Mapping[str, Any]) -> tuple[str | None, str | None, Sequence[Any] | None]:
    """Read ``(tag, name, children)`` from a Token or a Hogan-style mapping."""
    if isinstance(token, Token):
        return tag_value(token.tag), token.name, token.children
    name = token.get("n", token.get("name"))
    children = token.get("nodes", token.get("children"))
    return tag_value(token.get("tag")), name, children

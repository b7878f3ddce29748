"""Role classification for template tokens.

Maps a token tag to the syntactic role its variable plays. Pure lookup,
no side effects; unknown tags are not references.
"""

from __future__ import annotations

from dataclasses import dataclass

from mustache_usage._types import TokenTag, tag_value


@dataclass(frozen=True, slots=True)
class Role:
    """Usage flags implied by a single token."""

    scalar: bool = False
    escaped: bool = False
    unescaped: bool = False
    section: bool = False
    noninverted: bool = False
    inverted: bool = False
    partial: bool = False

    @property
    def is_reference(self) -> bool:
        """Whether the token refers to a variable (or partial) at all."""
        return self.scalar or self.section or self.partial


NOT_A_REFERENCE = Role()

_ROLES: dict[str, Role] = {
    TokenTag.ESCAPED.value: Role(scalar=True, escaped=True),
    TokenTag.UNESCAPED.value: Role(scalar=True, unescaped=True),
    TokenTag.AMPERSAND.value: Role(scalar=True, unescaped=True),
    TokenTag.SECTION.value: Role(section=True, noninverted=True),
    TokenTag.INVERTED.value: Role(section=True, inverted=True),
    TokenTag.PARTIAL.value: Role(partial=True),
}


def classify_role(tag: TokenTag | str | None) -> Role:
    """Classify a token tag.

    Text, newlines, comments, section ends, delimiter changes and
    subroutine markers (and any unrecognized tag) give NOT_A_REFERENCE.

    Example:
            >>> classify_role("#")
        Role(scalar=False, ..., section=True, noninverted=True, ...)
    """
    key = tag_value(tag)
    if key is None:
        return NOT_A_REFERENCE
    return _ROLES.get(key, NOT_A_REFERENCE)

"""Tests for token role classification."""

from __future__ import annotations

import pytest

from mustache_usage import Role, TokenTag, classify_role
from mustache_usage.analysis import NOT_A_REFERENCE


class TestClassifyRole:
    """classify_role() lookup."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("_v", Role(scalar=True, escaped=True)),
            ("{", Role(scalar=True, unescaped=True)),
            ("&", Role(scalar=True, unescaped=True)),
            ("#", Role(section=True, noninverted=True)),
            ("^", Role(section=True, inverted=True)),
            (">", Role(partial=True)),
        ],
    )
    def test_reference_tags(self, tag: str, expected: Role) -> None:
        """Each reference tag maps to its flags."""
        assert classify_role(tag) == expected
        assert classify_role(tag).is_reference

    @pytest.mark.parametrize("tag", ["_t", "\n", "!", "/", "=", "<", "$", "", "??"])
    def test_non_reference_tags(self, tag: str) -> None:
        """Text, structure and unknown tags are not references."""
        assert classify_role(tag) is NOT_A_REFERENCE
        assert not classify_role(tag).is_reference

    def test_enum_tags(self) -> None:
        """TokenTag members classify like their raw spellings."""
        for tag in TokenTag:
            assert classify_role(tag) == classify_role(tag.value)

    def test_none(self) -> None:
        """A missing tag is not a reference."""
        assert classify_role(None) is NOT_A_REFERENCE

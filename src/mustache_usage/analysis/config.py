"""Scan options.

Options can be given as a ScanOptions instance or as a plain mapping
using either the camelCase names of the Hogan.js ecosystem
(``arrayLengthMember``) or the Python field names (``array_length_member``).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from mustache_usage.exceptions import ErrorCode, InvalidOptionError


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling how references are interpreted.

    Attributes:
        array_length_member: Member name read as an array length
            (``{{#items.length}}`` marks ``items`` as an array).
        collapse_nested: Treat a bare name inside a section as the same
            variable as an identically named one in an enclosing scope.
        include_name: Redundantly stamp each record with its own ``name``.
        max_depth: Maximum section nesting depth, or None (the default)
            for no limit. The walk is iterative, so this is only a cap
            for callers that want one.

    Example:
            >>> opts = ScanOptions(collapse_nested=False)
            >>> scan_variables(tree, opts)

    """

    array_length_member: str = "length"
    collapse_nested: bool = True
    include_name: bool = False
    max_depth: int | None = None


DEFAULT_OPTIONS = ScanOptions()

_ALIASES = {
    "arrayLengthMember": "array_length_member",
    "collapseNested": "collapse_nested",
    "includeName": "include_name",
    "maxDepth": "max_depth",
}

_TYPES: dict[str, tuple[type, ...]] = {
    "array_length_member": (str,),
    "collapse_nested": (bool,),
    "include_name": (bool,),
    "max_depth": (int, type(None)),
}


def resolve_options(options: ScanOptions | Mapping[str, Any] | None) -> ScanOptions:
    """Normalize user-supplied options, falling back to defaults for missing keys.

    Raises:
        InvalidOptionError: Unknown option name or wrongly typed value.
    """
    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, ScanOptions):
        return options

    known = {f.name for f in fields(ScanOptions)}
    values: dict[str, Any] = {}
    for key, value in options.items():
        field_name = _ALIASES.get(key, key)
        if field_name not in known:
            raise InvalidOptionError(
                key,
                f"Unknown scan option {key!r}; expected one of {sorted(_ALIASES)}",
            )
        expected = _TYPES[field_name]
        # bool is an int subclass; max_depth=True is a mistake, not 1
        if not isinstance(value, expected) or (
            field_name == "max_depth" and isinstance(value, bool)
        ):
            raise InvalidOptionError(
                key,
                f"Scan option {key!r} must be {' or '.join(t.__name__ for t in expected)}, "
                f"got {type(value).__name__}",
                code=ErrorCode.INVALID_OPTION_TYPE,
            )
        values[field_name] = value

    return replace(DEFAULT_OPTIONS, **values)

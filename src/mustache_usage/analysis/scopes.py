"""Scope helpers for the usage scanner.

The parent stack is a root-first list of usage contexts. Index 0 is the
root mapping (name -> record); every other entry is a variable record
whose names live under ``members`` or ``nested``.
"""

from __future__ import annotations

from collections.abc import Sequence

from mustache_usage._types import UsageContext, UsageRecord


def is_leaf(record: UsageRecord) -> bool:
    """Whether a record is known to be a scalar or an array.

    Flags are compared against ``True`` so that a root mapping holding a
    variable *named* ``array`` or ``scalar`` is never read as flagged.
    """
    return record.get("scalar") is True or record.get("array") is True


def find_in_parents(name: str, parents: Sequence[UsageContext]) -> UsageContext | None:
    """Find the container already holding ``name``, searching innermost first.

    The root is checked directly; other ancestors are checked through
    their ``members`` map, then their ``nested`` map.
    """
    for i in range(len(parents) - 1, -1, -1):
        parent = parents[i]
        if i == 0:
            if name in parent:
                return parent
        else:
            members = parent.get("members")
            if members and name in members:
                return members
            nested = parent.get("nested")
            if nested and name in nested:
                return nested
    return None


def find_nesting_scope(parents: Sequence[UsageContext]) -> UsageContext | None:
    """Return the map that loosely nested names should move to.

    That is the ``nested`` map of the innermost parent that is neither a
    scalar nor an array, or the root mapping itself.
    """
    for i in range(len(parents) - 1, -1, -1):
        parent = parents[i]
        if i == 0:
            return parent
        if not is_leaf(parent):
            return parent.setdefault("nested", {})
    return None

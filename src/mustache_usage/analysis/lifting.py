"""Lifting of nested names off scalar and array records.

A record's ``nested`` map collects names found inside its section that
were not proven to be its members. Once the record turns out to be a
scalar or an array, those names cannot belong to it, so they move to
the nearest enclosing scope that can hold them.

Moving names can fold one record into another of the same name. The
folded record may still be a context of the in-progress walk, so merges
note it in a ``Forwarding`` table and the walk follows that table to
the surviving record before writing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from mustache_usage._types import UsageContext, UsageRecord
from mustache_usage.analysis.scopes import find_nesting_scope, is_leaf

logger = logging.getLogger(__name__)

# Fields holding name -> record maps
_CONTEXT_FIELDS = ("members", "nested")

# id(merged-away record) -> (merged-away record, record it was merged into)
# The first item keeps the old record alive so its id cannot be reused.
Forwarding = dict[int, tuple[UsageRecord, UsageRecord]]


def follow(record: UsageRecord, forwarded: Forwarding) -> UsageRecord:
    """Return the record that ``record`` was (transitively) merged into, or itself."""
    while id(record) in forwarded:
        record = forwarded[id(record)][1]
    return record


def lift_nested(
    record: UsageRecord,
    parents: Sequence[UsageContext],
    forwarded: Forwarding | None = None,
) -> None:
    """Move ``record["nested"]`` into the nearest non-leaf enclosing scope.

    Call right after flagging ``record`` as scalar or array. No-op when
    the record has no nested map or no enclosing scope exists.
    """
    if "nested" not in record:
        return
    if forwarded:
        parents = [follow(parent, forwarded) for parent in parents]
    # scopes at or below the record itself cannot receive its names
    inside = _subtree_ids(record)
    for i, parent in enumerate(parents):
        if id(parent) in inside:
            parents = parents[:i]
            break
    scope = find_nesting_scope(parents)
    if scope is None:
        return

    # detach first: the scope may already hold this very record
    nested = record.pop("nested")
    if nested:
        logger.debug("Lifting nested names %s to enclosing scope", sorted(nested))
    merge_usage(scope, nested, spill=scope, forwarded=forwarded)


def merge_usage(
    target: UsageContext,
    source: UsageContext,
    spill: UsageContext,
    forwarded: Forwarding | None = None,
) -> None:
    """Deep-merge the usage context ``source`` into ``target``.

    Records and maps missing from ``target`` are moved by reference.
    Records present in both are merged field by field into the target's
    record, and the source record is entered in ``forwarded``. A merged
    record that ends up scalar or array gives its ``nested`` map to
    ``spill``.
    """
    work = [(target, source)]
    while work:
        into, names = work.pop()
        for name, record in names.items():
            existing = into.get(name)
            if existing is None:
                into[name] = record
            elif existing is not record:
                _merge_record(existing, record, spill, work, forwarded)


def _merge_record(
    target: UsageRecord,
    source: UsageRecord,
    spill: UsageContext,
    work: list[tuple[UsageContext, UsageContext]],
    forwarded: Forwarding | None,
) -> None:
    # elements records chain through {{#.}} sections; walk them in a loop
    while True:
        if forwarded is not None:
            forwarded[id(source)] = (source, target)

        elements = None
        for field, value in source.items():
            if field == "nested":
                continue
            if field in _CONTEXT_FIELDS or field == "elements":
                existing = target.get(field)
                if existing is None:
                    target[field] = value
                elif existing is not value:
                    if field == "elements":
                        elements = (existing, value)
                    else:
                        work.append((existing, value))
            else:
                target.setdefault(field, value)

        # flags are final now, so nested names go where they belong
        incoming = source.get("nested")
        if is_leaf(target):
            if "nested" in target:
                work.append((spill, target.pop("nested")))
            if incoming is not None:
                work.append((spill, incoming))
        elif incoming is not None:
            existing = target.get("nested")
            if existing is None:
                target["nested"] = incoming
            elif existing is not incoming:
                work.append((existing, incoming))

        if elements is None:
            return
        target, source = elements


def _subtree_ids(record: UsageRecord) -> set[int]:
    """Identities of ``record`` and every record reachable from it."""
    seen: set[int] = set()
    stack = [record]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        for field in _CONTEXT_FIELDS:
            children = current.get(field)
            if children:
                stack.extend(children.values())
        elements = current.get("elements")
        if elements is not None:
            stack.append(elements)
    return seen

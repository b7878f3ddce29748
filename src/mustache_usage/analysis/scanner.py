"""Usage context builder.

Walks a Hogan.js token tree once and records, for every variable
reference, how the template uses it: as a scalar substitution, a
section condition, a partial name, or an array iterated with ``{{.}}``.

Results are plain dicts. Each variable maps to a record that may hold:

- ``name``: the variable's own name (only with ``include_name``)
- ``scalar``, ``escaped``, ``unescaped``: ``{{v}}``, ``{{{v}}}``, ``{{&v}}``
- ``section``, ``noninverted``, ``inverted``: ``{{#v}}``, ``{{^v}}``
- ``partial``: ``{{>v}}`` (root level only)
- ``array``: iterated via ``{{.}}`` or measured via ``{{#v.length}}``
- ``members``: names proven by dot syntax to belong to the variable
- ``elements``: the record for ``{{.}}`` inside the variable's section
- ``nested``: names used inside the variable's section that may belong
  to it or to any enclosing scope

Scope Handling:
    - Dotted segments after the first resolve against ``members``
    - A bare name inside a section resolves against an ancestor that
      already knows it (``collapse_nested``) or the section's ``nested``
    - Scalars and arrays cannot own nested names; references inside
      their sections resolve against the nearest enclosing scope, and
      names recorded before the discovery are lifted out

Thread-safety: the walk keeps no module state. Concurrent scans must
use separate result trees.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from mustache_usage._types import Token, UsageContext, UsageRecord, token_parts
from mustache_usage.analysis.config import ScanOptions, resolve_options
from mustache_usage.analysis.lifting import Forwarding, follow, lift_nested
from mustache_usage.analysis.roles import Role, classify_role
from mustache_usage.analysis.scopes import find_in_parents, is_leaf
from mustache_usage.exceptions import ScanDepthError

logger = logging.getLogger(__name__)

# {{.}} refers to the current element of an array section
DOT = "."

_DONE = object()

TokenLike = Token | Mapping[str, Any]


def scan_variables(
    tokens: Sequence[TokenLike],
    options: ScanOptions | Mapping[str, Any] | None = None,
    context: UsageContext | None = None,
    parent_contexts: Sequence[UsageContext] | None = None,
) -> UsageContext:
    """Scan a token list or tree and return the populated usage context.

    A parsed tree (sections holding their children) gives the most
    accurate result; a flat token list still yields every reference, but
    without section nesting.

    Args:
        tokens: Tokens from a Mustache parser, as Token objects or
            Hogan.js-style dicts (``tag``, ``n``, ``nodes``)
        options: ScanOptions or a mapping of option names
        context: Receives the variables of the current scope; a new dict
            if omitted
        parent_contexts: Enclosing scopes, root first, for scanning a
            fragment as if it sat inside those sections

    Returns:
        The ``context`` argument, populated in place

    Raises:
        InvalidOptionError: Options contain an unknown or mistyped entry
        ScanDepthError: The tree nests deeper than ``options.max_depth``

    Example:
            >>> tree = [Token("{", "placeHtml"), Token("#", "names", [Token("_v", ".")])]
            >>> scan_variables(tree)
        {'placeHtml': {'scalar': True, 'unescaped': True},
         'names': {'section': True, 'noninverted': True, 'array': True,
                   'elements': {'scalar': True, 'escaped': True}}}
    """
    opts = resolve_options(options)
    if context is None:
        context = {}
    parents = list(parent_contexts) if parent_contexts else []
    _scan(tokens, opts, context, parents)
    return context


class UsageScanner:
    """Reusable scanner bound to one set of options.

    Each ``scan()`` call builds a fresh result tree, so one scanner can
    serve many templates.

    Example:
            >>> scanner = UsageScanner({"collapseNested": False})
            >>> usage = scanner.scan(tree)

    """

    def __init__(self, options: ScanOptions | Mapping[str, Any] | None = None) -> None:
        self._options = resolve_options(options)

    @property
    def options(self) -> ScanOptions:
        return self._options

    def scan(self, tokens: Sequence[TokenLike]) -> UsageContext:
        """Scan ``tokens`` into a new usage context."""
        return scan_variables(tokens, self._options)


@dataclass(slots=True)
class _Frame:
    """One open section of the walk."""

    tokens: Iterator[TokenLike]
    context: UsageContext
    parents: list[UsageContext]
    label: str | None


def _scan(
    tokens: Sequence[TokenLike],
    options: ScanOptions,
    context: UsageContext,
    parents: list[UsageContext],
) -> None:
    """Walk the tree depth first with an explicit stack of open sections.

    No recursion, so tree depth is bounded only by memory (or
    ``options.max_depth`` when set).
    """
    forwarded: Forwarding = {}
    stack = [_Frame(iter(tokens), context, parents, None)]
    while stack:
        frame = stack[-1]
        token = next(frame.tokens, _DONE)
        if token is _DONE:
            stack.pop()
            continue
        if forwarded:
            # a lift may have merged this scope into a same-named record
            frame.context = follow(frame.context, forwarded)
            frame.parents = [follow(parent, forwarded) for parent in frame.parents]

        tag, name, children = token_parts(token)
        role = classify_role(tag)

        nested_context = frame.context
        nested_parents = frame.parents.copy()
        if role.partial:
            # partials are template names, always recorded at the root
            root = frame.parents[0] if frame.parents else frame.context
            record = root.setdefault(name or "", {})
            record["partial"] = True
            if options.include_name:
                record["name"] = name or ""
        elif role.is_reference:
            nested_context = _resolve(
                name or "", role, options, frame.context, frame.parents, nested_parents, forwarded
            )

        if children is not None:
            label = name or str(tag)
            if options.max_depth is not None and len(stack) > options.max_depth:
                trail = [f.label for f in stack[1:]] + [label]
                logger.debug("Depth guard tripped at %s", " > ".join(trail))
                raise ScanDepthError(options.max_depth, trail)
            stack.append(_Frame(iter(children), nested_context, nested_parents, label))



def _resolve(
    name: str,
    role: Role,
    options: ScanOptions,
    context: UsageContext,
    parents: list[UsageContext],
    nested_parents: list[UsageContext],
    forwarded: Forwarding,
) -> UsageRecord:
    """Find or create the record ``name`` denotes and stamp ``role`` on it.

    ``nested_parents`` starts as a copy of ``parents`` and is extended
    with every scope passed through, becoming the parent stack for the
    token's children.
    """
    # lifting targets the token's enclosing scopes; at the root, the root itself
    lift_parents = parents or [context]
    scalar = role.scalar
    var_context = context

    if name == DOT and parents:
        # {{.}} proves the current context is an array
        if var_context.get("array") is not True:
            var_context["array"] = True
            lift_nested(var_context, lift_parents, forwarded)
        nested_parents.append(var_context)
        var_context = var_context.setdefault("elements", {})
    elif name == DOT:
        # no enclosing section: the root is not a variable and cannot be an array
        nested_parents.append(var_context)
        var_context = var_context.setdefault(DOT, {})
    else:
        parts = name.split(".")
        bare_length = (
            len(parts) == 1
            and parts[0] == options.array_length_member
            and var_context.get("array") is True
        )
        if not bare_length:
            # scalars and arrays don't own names; resolve against the nearest scope that can
            while is_leaf(var_context) and nested_parents:
                var_context = nested_parents.pop()

        last = len(parts) - 1
        for i, part in enumerate(parts):
            # x.length, or length directly in an array, marks an array and its scalar length
            is_array_length = (
                i == last
                and part == options.array_length_member
                and (i > 0 or var_context.get("array") is True)
            )
            if is_array_length:
                if var_context.get("array") is not True:
                    var_context["array"] = True
                    lift_nested(var_context, lift_parents, forwarded)
                scalar = True

            if i > 0 or is_array_length:
                scope = var_context.setdefault("members", {})
            elif nested_parents:
                scope = None
                if options.collapse_nested and part not in var_context.get("nested", {}):
                    scope = find_in_parents(part, nested_parents)
                    if scope is not None:
                        logger.debug("Collapsing %r onto enclosing scope", part)
                if scope is None:
                    scope = var_context.setdefault("nested", {})
            else:
                # the root context holds its names directly
                scope = var_context

            nested_parents.append(var_context)
            var_context = scope.setdefault(part, {})
            if options.include_name:
                var_context["name"] = part

    if scalar:
        if var_context.get("scalar") is not True:
            var_context["scalar"] = True
            lift_nested(var_context, lift_parents, forwarded)
        if role.escaped:
            var_context["escaped"] = True
        if role.unescaped:
            var_context["unescaped"] = True
    if role.section:
        var_context["section"] = True
        if role.noninverted:
            var_context["noninverted"] = True
        if role.inverted:
            var_context["inverted"] = True

    return var_context

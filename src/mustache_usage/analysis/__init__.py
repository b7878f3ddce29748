"""Static usage analysis for Mustache token trees.

Public API:
    scan_variables: Walk a token tree and build the usage context
    UsageScanner: Scanner bound to a set of options
    ScanOptions: Interpretation options
    classify_role: Token tag -> usage flags
    iter_records: Walk every record of a result

Example:
    >>> from mustache_usage.analysis import scan_variables
    >>> usage = scan_variables(tree)
    >>> usage["names"]["array"]
    True

"""

from mustache_usage.analysis.config import DEFAULT_OPTIONS, ScanOptions, resolve_options
from mustache_usage.analysis.lifting import Forwarding, follow, lift_nested, merge_usage
from mustache_usage.analysis.roles import NOT_A_REFERENCE, Role, classify_role
from mustache_usage.analysis.scanner import UsageScanner, scan_variables
from mustache_usage.analysis.scopes import find_in_parents, find_nesting_scope, is_leaf
from mustache_usage.analysis.visitor import format_path, iter_records

__all__ = [
    "DEFAULT_OPTIONS",
    "Forwarding",
    "NOT_A_REFERENCE",
    "Role",
    "ScanOptions",
    "UsageScanner",
    "classify_role",
    "find_in_parents",
    "find_nesting_scope",
    "follow",
    "format_path",
    "is_leaf",
    "iter_records",
    "lift_nested",
    "merge_usage",
    "resolve_options",
    "scan_variables",
]

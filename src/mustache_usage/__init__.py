"""mustache_usage — static variable usage analysis for Mustache templates.

Given the token tree of a Mustache/Hogan.js template, describes every
variable the template references and how: scalar substitution (escaped
or not), section condition (normal or inverted), partial name, or array
iterated with ``{{.}}``. Dotted names become members; names used inside
a section become nested references of that section.

Quickstart:
    >>> from mustache_usage import Token, scan_variables
    >>> tree = [
    ...     Token("{", "placeHtml"),
    ...     Token("#", "names.length", [Token("#", "names", [Token("_v", ".")])]),
    ... ]
    >>> scan_variables(tree)
    {'placeHtml': {'scalar': True, 'unescaped': True},
     'names': {'array': True,
               'members': {'length': {'scalar': True, 'section': True, 'noninverted': True}},
               'section': True, 'noninverted': True,
               'elements': {'scalar': True, 'escaped': True}}}

Hogan.js trees serialized as JSON can be passed as-is:
    >>> scan_variables(json.loads(hogan_tree_json))

Parsing template text is not part of this package; feed it the output
of any Mustache parser that produces Hogan-style tokens.

"""

from mustache_usage._types import Token, TokenTag, UsageContext, UsageRecord
from mustache_usage.analysis import (
    DEFAULT_OPTIONS,
    Role,
    ScanOptions,
    UsageScanner,
    classify_role,
    format_path,
    iter_records,
    scan_variables,
)
from mustache_usage.exceptions import (
    ErrorCode,
    InvalidOptionError,
    ScanDepthError,
    UsageScanError,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_OPTIONS",
    "ErrorCode",
    "InvalidOptionError",
    "Role",
    "ScanDepthError",
    "ScanOptions",
    "Token",
    "TokenTag",
    "UsageContext",
    "UsageRecord",
    "UsageScanError",
    "UsageScanner",
    "__version__",
    "classify_role",
    "format_path",
    "iter_records",
    "scan_variables",
]

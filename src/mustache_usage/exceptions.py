"""Exceptions for mustache_usage.

Exception Hierarchy:
UsageScanError (base)
├── InvalidOptionError    # Unknown or mistyped scan option
└── ScanDepthError        # Token tree nested deeper than max_depth

The walk itself never fails on token content: unknown tags are treated
as non-references and any name produces a record. Errors only come from
configuration and the depth guard.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Searchable error codes.

    Format: MU-{CATEGORY}-{NUMBER}
    Categories: OPT (options), SCN (scan)
    """

    INVALID_OPTION = "MU-OPT-001"
    INVALID_OPTION_TYPE = "MU-OPT-002"

    MAX_DEPTH_EXCEEDED = "MU-SCN-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'options', 'scan')."""
        prefix = self.value.split("-")[1]
        return {
            "OPT": "options",
            "SCN": "scan",
        }.get(prefix, "unknown")


class UsageScanError(Exception):
    """Base class for all scanner errors."""

    code: ErrorCode | None = None

    def __init__(self, message: str, code: ErrorCode | None = None) -> None:
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"[{self.code.value}] {self.message}"


class InvalidOptionError(UsageScanError):
    """Raised when scan options contain an unknown key or a wrongly typed value."""

    code = ErrorCode.INVALID_OPTION

    def __init__(self, option: str, message: str, code: ErrorCode | None = None) -> None:
        self.option = option
        super().__init__(message, code)


class ScanDepthError(UsageScanError):
    """Raised when the token tree nests deeper than ``ScanOptions.max_depth``.

    Example:
        ```
        ScanDepthError: [MU-SCN-001] Token tree exceeds max_depth=8
          at section 'items' (path: rows > cells > items)
        ```
    """

    code = ErrorCode.MAX_DEPTH_EXCEEDED

    def __init__(self, max_depth: int, section_path: list[str]) -> None:
        self.max_depth = max_depth
        self.section_path = section_path
        where = " > ".join(section_path) if section_path else "<root>"
        message = f"Token tree exceeds max_depth={max_depth}"
        if section_path:
            message += f"\n  at section {section_path[-1]!r} (path: {where})"
        super().__init__(message)

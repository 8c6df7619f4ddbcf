"""
Compile Context
===============

The CompileContext is the per-build carrier of diagnostics and macro state.
One context is created for each compilation and threaded through every
stage; it is never shared between builds.

Diagnostics
-----------
Problems are recorded, not raised. Each Diagnostic has a message, a stable
code (see DiagnosticCode) and, when known, a source position. Errors and
warnings are kept in separate ordered lists so a failed build can report
everything it found in one run:

    main.lin:4:9: error: Type mismatch: cannot assign string to number variable 'n' [TYPE_ERROR]
    warning: Renamed 2 variables to avoid conflicts [VARIABLES_RENAMED]

    1 error, 1 warning
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lingual.errors import SourcePosition
from lingual.compiler.ast import MacroDefinition
from lingual.compiler.errors import CompilationFailedError

logger = logging.getLogger(__name__)


class DiagnosticCode:
    """Stable identifiers attached to every diagnostic."""
    PARSE_ERROR = "PARSE_ERROR"
    UNDEFINED_MACRO = "UNDEFINED_MACRO"
    MACRO_ARGUMENT_MISMATCH = "MACRO_ARGUMENT_MISMATCH"
    MACRO_REDEFINED = "MACRO_REDEFINED"
    MACRO_NOT_EXPRESSION = "MACRO_NOT_EXPRESSION"
    MACRO_NOT_SINGLE_STATEMENT = "MACRO_NOT_SINGLE_STATEMENT"
    MACRO_RECURSION_LIMIT = "MACRO_RECURSION_LIMIT"
    INLINE_MACRO_ERROR = "INLINE_MACRO_ERROR"
    MIDDLEWARE_NOT_FOUND = "MIDDLEWARE_NOT_FOUND"
    VARIABLES_RENAMED = "VARIABLES_RENAMED"
    TYPE_ERROR = "TYPE_ERROR"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single reported problem.

    Attributes:
        message: Human-readable description
        code: Stable identifier from DiagnosticCode
        location: Source position, if known
        severity: ERROR or WARNING
    """
    message: str
    code: str
    location: Optional[SourcePosition] = None
    severity: Severity = Severity.ERROR

    def format(self, filename: str = "<input>") -> str:
        """Format as 'file:line:col: error: message [CODE]'."""
        text = f"{self.severity.value}: {self.message} [{self.code}]"
        if self.location is not None:
            return f"{filename}:{self.location.line}:{self.location.column}: {text}"
        return text

    def __str__(self) -> str:
        return self.format()


@dataclass
class CompileContext:
    """
    Mutable state for one build.

    Attributes:
        target: Target language name
        filename: Source filename used in reports
        errors: Accumulated errors, in the order found
        warnings: Accumulated warnings, in the order found
        macros: Active block macro definitions by name
    """
    target: str = "javascript"
    filename: str = "<input>"
    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    macros: dict[str, MacroDefinition] = field(default_factory=dict)

    def add_error(
        self,
        message: str,
        code: str,
        location: Optional[SourcePosition] = None,
    ) -> Diagnostic:
        """Record an error and return it."""
        diagnostic = Diagnostic(message, code, location, Severity.ERROR)
        self.errors.append(diagnostic)
        logger.debug(f"error recorded: {diagnostic}")
        return diagnostic

    def add_warning(
        self,
        message: str,
        code: str,
        location: Optional[SourcePosition] = None,
    ) -> Diagnostic:
        """Record a warning and return it."""
        diagnostic = Diagnostic(message, code, location, Severity.WARNING)
        self.warnings.append(diagnostic)
        logger.debug(f"warning recorded: {diagnostic}")
        return diagnostic

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def report(self) -> str:
        """Format all errors and warnings for display."""
        lines = [d.format(self.filename) for d in self.errors]
        lines.extend(d.format(self.filename) for d in self.warnings)

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )
        return "\n".join(lines)

    def raise_if_errors(self) -> None:
        """Raise CompilationFailedError if any errors were recorded."""
        if self.has_errors():
            raise CompilationFailedError(self.report(), self.error_count())

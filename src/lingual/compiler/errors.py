"""
Lingual Compiler Error Definitions
==================================

This module defines the exception classes raised by the compiler front end.
Errors carry the source position, a descriptive message and, where it is
useful, a hint about how to fix the problem.

Error Categories
----------------
1. **Syntax Errors**: Malformed token sequences (ParseError and subclasses)
2. **Macro Errors**: Failures while expanding block or inline macros
3. **Compilation Errors**: The aggregate report of a failed build

Only ParseError is fatal. Everything else the front end finds is recorded
as a Diagnostic on the CompileContext and the pipeline keeps running.

Error Message Format
--------------------
Errors are formatted consistently:

    filename:line:column: error: message
        source line
        ^
    hint: suggestion (if available)
"""

from typing import Optional

from lingual.errors import LingualError, SourcePosition


# =============================================================================
# Base Compiler Error
# =============================================================================

class CompilerError(LingualError):
    """
    Base exception for all compiler errors.

    Attributes:
        message: Human-readable error description
        position: Where in the source the error occurred (optional)
        filename: Source file name used in the location prefix
        hint: Optional suggestion for fixing the error
        source_line: The source text of the offending line (optional)
    """

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        filename: str = "<input>",
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.position = position
        self.filename = filename
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        """Location prefix as 'filename:line:column'."""
        if self.position is None:
            return self.filename
        return f"{self.filename}:{self.position.line}:{self.position.column}"

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            main.lin:3:9: error: Expected ';' after expression
                let x = 1
                        ^
            hint: every statement ends with a semicolon
        """
        parts = []

        if self.position is not None:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.position is not None:
            parts.append(f"    {self.source_line}")
            if self.position.column > 0:
                padding = " " * (4 + self.position.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class CompilationFailedError(CompilerError):
    """
    Raised when a build finishes with accumulated errors.

    The message is the full report produced by CompileContext.report(),
    which already carries locations, so no prefix is added.
    """

    def __init__(self, report: str, error_count: int = 0):
        self.report = report
        self.error_count = error_count
        # Bypass CompilerError formatting; the report is final.
        self.message = report
        self.position = None
        self.filename = "<input>"
        self.hint = None
        self.source_line = None
        LingualError.__init__(self, report)


# =============================================================================
# Syntax Errors
# =============================================================================

class ParseError(CompilerError):
    """
    The token sequence violates the grammar.

    Parsing stops at the first ParseError; there is no recovery.

    Attributes:
        found_kind: Kind name of the offending token
        found_text: Text of the offending token
        expected: Description of what the parser wanted instead
    """

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        found_kind: Optional[str] = None,
        found_text: Optional[str] = None,
        expected: Optional[str] = None,
        **kwargs,
    ):
        self.found_kind = found_kind
        self.found_text = found_text
        self.expected = expected
        super().__init__(message, position, **kwargs)

    @property
    def line(self) -> int:
        return self.position.line if self.position else 0

    @property
    def column(self) -> int:
        return self.position.column if self.position else 0


class UnexpectedTokenError(ParseError):
    """Encountered a token that cannot start or continue the construct."""

    def __init__(
        self,
        found_kind: str,
        found_text: str,
        expected: str,
        position: Optional[SourcePosition] = None,
        **kwargs,
    ):
        found = "end of input" if found_kind == "EOF" else f"'{found_text}'"
        message = f"Unexpected {found}, expected {expected}"
        super().__init__(
            message,
            position,
            found_kind=found_kind,
            found_text=found_text,
            expected=expected,
            **kwargs,
        )


class MissingTokenError(ParseError):
    """A required token (such as ';' or ')') was not found."""
    pass


# =============================================================================
# Macro Errors
# =============================================================================

class MacroExpansionError(CompilerError):
    """
    A macro could not be expanded.

    Raised by the inline macro runtime; the block expander converts it into
    a diagnostic instead of letting it escape.
    """

    def __init__(self, macro_name: str, message: str, **kwargs):
        self.macro_name = macro_name
        super().__init__(f"macro '{macro_name}': {message}", **kwargs)

"""
Lingual Error Hierarchy
=======================

This module defines the root of the exception hierarchy for the Lingual
toolchain, together with the source position types shared by every stage
of the compiler.

Exception Hierarchy
-------------------
LingualError (base)
└── CompilerError (see lingual.compiler.errors)
    ├── ParseError - token sequence violates the grammar
    │   ├── UnexpectedTokenError - a token appeared where it cannot
    │   └── MissingTokenError - a required token is absent
    ├── MacroExpansionError - a macro could not be expanded
    └── CompilationFailedError - aggregate report of a failed build

Positions
---------
Lines and columns are 1-indexed. A SourceSpan runs from the position of
its first character to the position just past its last character, so a
parent span encloses its children when

    parent.start <= child.start and child.end <= parent.end

Positions compare as (line, column) tuples.
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class LingualError(Exception):
    """
    Base exception for all Lingual errors.

    All exceptions raised by the toolchain inherit from this class, allowing
    callers to catch every compiler failure with a single except clause:

        try:
            compile_lingual(source)
        except LingualError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True, order=True)
class SourcePosition:
    """
    A single point in source text.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'line:column' for error messages."""
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """
    A half-open region of source text.

    Attributes:
        start: Position of the first character
        end: Position just past the last character
    """
    start: SourcePosition
    end: SourcePosition

    def encloses(self, other: "SourceSpan") -> bool:
        """Return True if other lies entirely within this span."""
        return self.start <= other.start and other.end <= self.end

    def merge(self, other: "SourceSpan") -> "SourceSpan":
        """Return the smallest span covering both spans."""
        return SourceSpan(min(self.start, other.start), max(self.end, other.end))

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


# Span used for nodes synthesized without a source origin.
NO_SPAN = SourceSpan(SourcePosition(0, 0), SourcePosition(0, 0))

"""
Lingual - Source-to-Source Compiler Front End
=============================================

Lingual is a small imperative language with declarative extras (types,
API endpoints, modules, macros) that compiles to several target
languages. This package holds the front end shared by every target.

Main Components
---------------
- **compiler**: lexer, parser, macro expander and middleware passes
    Produces the final, target-neutral AST and its diagnostics

- **languages**: target profiles and the emitter boundary
    Middleware lists and standard library bridge tables per target

- **cli**: command-line tools (lingualc)

Quick Start
-----------
    >>> from lingual import Compiler, CompilerOptions
    >>> compiler = Compiler(CompilerOptions(target="python"))
    >>> result = compiler.compile_source("fn add(a, b) { return a + b; }")
    >>> result.success
    True

Or use the command-line tool:
    $ lingualc app.lin --target typescript --ast
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from lingual.errors import LingualError, SourcePosition, SourceSpan
from lingual.compiler import (
    CompilationFailedError,
    CompileContext,
    Compiler,
    CompilerOptions,
    CompilerResult,
    ParseError,
    compile_lingual,
    parse_source,
    tokenize,
)
from lingual.languages import available_targets, get_profile

__all__ = [
    "__version__",
    # Exception hierarchy
    "LingualError",
    "CompilationFailedError",
    "ParseError",
    # Positions
    "SourcePosition",
    "SourceSpan",
    # Compiler
    "CompileContext",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_lingual",
    "parse_source",
    "tokenize",
    # Targets
    "available_targets",
    "get_profile",
]

"""
Lingual Compiler Front End
==========================

This package turns Lingual source into the language-agnostic tree the code
emitters consume. It provides:

- A lexer producing positioned tokens (total: bad characters become
  ERROR tokens)
- A recursive descent parser with explicit precedence levels
- A block and inline macro expander
- A middleware chain: variable renamer, type checker, hoister

Pipeline
--------
    Source → Lexer → Parser → Macro Expander → Middleware → Program

Usage
-----
>>> from lingual.compiler import Compiler, CompilerOptions
>>> result = Compiler(CompilerOptions(target="typescript")).compile_source(
...     "let x = 1 + 2;")
>>> result.program.body[0].inferred_type
'number'

Language Summary
----------------
- Declarations: function/fn, var/let/const with optional ': Type'
- Control flow: if/else, while, C-style for, return
- Declarative forms: type, api, module, import, export
- Macros: macro name(params) { ... } end, invoked as @name(args)
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Imports
# =============================================================================

from lingual.compiler.compiler import Compiler, CompilerOptions, CompilerResult, compile_lingual
from lingual.compiler.context import CompileContext, Diagnostic, DiagnosticCode, Severity
from lingual.compiler.errors import (
    CompilationFailedError,
    CompilerError,
    MacroExpansionError,
    MissingTokenError,
    ParseError,
    UnexpectedTokenError,
)
from lingual.compiler.lexer import Lexer, Token, TokenKind, tokenize
from lingual.compiler.macro_runtime import InlineMacroRuntime
from lingual.compiler.macros import MacroExpander, expand_program, substitute
from lingual.compiler.parser import Parser, parse, parse_source
from lingual.compiler.printer import ASTPrinter
from lingual.compiler.visitor import ASTTransformer, ASTVisitor, walk

__all__ = [
    "__version__",
    # Compiler
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_lingual",
    # Context
    "CompileContext",
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    # Errors
    "CompilationFailedError",
    "CompilerError",
    "MacroExpansionError",
    "MissingTokenError",
    "ParseError",
    "UnexpectedTokenError",
    # Stages
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    "Parser",
    "parse",
    "parse_source",
    "InlineMacroRuntime",
    "MacroExpander",
    "expand_program",
    "substitute",
    # Traversal
    "ASTPrinter",
    "ASTTransformer",
    "ASTVisitor",
    "walk",
]

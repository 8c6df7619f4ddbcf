"""
Lingual Compiler Main Module
============================

This module provides the main compiler interface. It runs the front end
from source text to the final tree an emitter consumes:

    Source → Lex → Parse → Expand macros → Middleware chain → Program

Usage
-----
Command line:
    $ lingualc app.lin --target python --ast

Programmatic:
    >>> from lingual.compiler import compile_lingual
    >>> program = compile_lingual('let x = 1 + 2;', target="typescript")

Compilation Pipeline
--------------------
1. **Lexical Analysis**: Convert source to tokens (never fails)
2. **Parsing**: Build the AST; the first grammar error stops the build
3. **Macro Expansion**: Replace block and inline macro calls
4. **Middleware**: Run the passes the target language asks for

Error Handling
--------------
Only a parse error stops the pipeline. Macro and type problems are
accumulated on the CompileContext and every stage still runs, so a single
invocation reports everything it can find. Whether to emit code in the
presence of errors is the caller's decision: compile_source() returns a
result with success=False, compile_lingual() raises.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from lingual.compiler.ast import Program
from lingual.compiler.context import CompileContext, DiagnosticCode
from lingual.compiler.errors import ParseError
from lingual.compiler.lexer import Token, tokenize
from lingual.compiler.macro_runtime import InlineMacroRuntime
from lingual.compiler.macros import DEFAULT_MAX_EXPANSION_PASSES, MacroExpander
from lingual.compiler.middleware import MiddlewareChain, MiddlewareRegistry, default_registry
from lingual.compiler.parser import Parser
from lingual.languages import available_targets, get_profile

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        target: Target language name (see lingual.languages)
        middleware: Explicit pass list; None uses the target's own list
        expand_inline_macros: Evaluate @name(args) against the inline
                              macro runtime when no block macro matches
        max_expansion_passes: Limit on macro expansion passes
        filename: Name used in diagnostics when compile_source gets none
    """
    target: str = "javascript"
    middleware: Optional[list[str]] = None
    expand_inline_macros: bool = True
    max_expansion_passes: int = DEFAULT_MAX_EXPANSION_PASSES
    filename: str = "<input>"

    def __post_init__(self):
        if self.target not in available_targets():
            raise ValueError(
                f"unknown target '{self.target}' "
                f"(available: {', '.join(available_targets())})"
            )
        if self.max_expansion_passes < 1:
            raise ValueError("max_expansion_passes must be at least 1")

    @property
    def middleware_names(self) -> list[str]:
        if self.middleware is not None:
            return list(self.middleware)
        return list(get_profile(self.target).middleware_dependencies)


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        success: True if no errors were recorded
        tokens: Token list from the lexer
        ast: Tree as parsed, before macros and middleware
        program: Final tree for the emitter (None after a parse error)
        context: Diagnostics and macro table of the build
    """
    filename: str = ""
    success: bool = False
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Program] = None
    program: Optional[Program] = None
    context: CompileContext = field(default_factory=CompileContext)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def errors(self) -> list:
        return self.context.errors

    @property
    def warnings(self) -> list:
        return self.context.warnings


class Compiler:
    """
    Front end driver.

    Example:
        compiler = Compiler(CompilerOptions(target="python"))
        result = compiler.compile_file("app.lin")
        if result.success:
            emit(result.program, result.context)

    Attributes:
        options: Compiler configuration
        inline_macros: Inline macro table shared by all builds of this
                       compiler; register custom macros here
        registry: Middleware passes available by name
    """

    def __init__(
        self,
        options: Optional[CompilerOptions] = None,
        registry: Optional[MiddlewareRegistry] = None,
    ):
        self.options = options or CompilerOptions()
        self.inline_macros = InlineMacroRuntime()
        self.registry = registry or default_registry()

    def compile_source(self, source: str, filename: Optional[str] = None) -> CompilerResult:
        """
        Run the front end over source text.

        Returns:
            CompilerResult; check result.success and result.context
        """
        filename = filename or self.options.filename
        context = CompileContext(target=self.options.target, filename=filename)
        result = CompilerResult(filename=filename, context=context)

        result.tokens = self._lex(source)

        try:
            result.ast = self._parse(result.tokens, filename, source.splitlines())
        except ParseError as e:
            context.add_error(e.message, DiagnosticCode.PARSE_ERROR, e.position)
            logger.debug(f"Parse failed: {e.message}")
            return result

        program = self._expand(result.ast, context)
        result.program = self._run_middleware(program, context)
        result.success = not context.has_errors()

        logger.debug(
            f"Compiled {filename}: {context.error_count()} errors, "
            f"{context.warning_count()} warnings"
        )
        return result

    def compile_file(self, filepath: str | Path) -> CompilerResult:
        """
        Compile a source file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")
        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))

    def _lex(self, source: str) -> list[Token]:
        return tokenize(source)

    def _parse(self, tokens: list[Token], filename: str, source_lines: list[str]) -> Program:
        return Parser(tokens, filename, source_lines).parse()

    def _expand(self, program: Program, context: CompileContext) -> Program:
        expander = MacroExpander(
            context,
            inline_runtime=self.inline_macros,
            max_passes=self.options.max_expansion_passes,
            expand_inline=self.options.expand_inline_macros,
        )
        return expander.expand_program(program)

    def _run_middleware(self, program: Program, context: CompileContext) -> Program:
        chain = MiddlewareChain(self.options.middleware_names, self.registry)
        return chain.run(program, context)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_lingual(
    source: str,
    target: str = "javascript",
    filename: str = "<input>",
) -> Program:
    """
    Compile source and return the final Program.

    Raises:
        CompilationFailedError: If any error was recorded
    """
    result = Compiler(CompilerOptions(target=target)).compile_source(source, filename)
    result.context.raise_if_errors()
    return result.program

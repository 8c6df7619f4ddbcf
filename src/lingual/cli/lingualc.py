"""
lingualc - Lingual Compiler Command-Line Interface
==================================================

This module implements the command-line interface for the Lingual front
end. It lexes, parses, expands macros and runs the target's middleware
passes, then reports diagnostics. Code generation is left to the
registered emitters.

Usage Examples
--------------
Check a file for the default target:
    $ lingualc app.lin

Pick a target and dump the final tree:
    $ lingualc app.lin -t typescript --ast

Inspect the lexer output or the tree before macro expansion:
    $ lingualc app.lin --tokens
    $ lingualc app.lin --raw

Override the middleware chain:
    $ lingualc app.lin --middleware hoister --middleware type-checker

List targets:
    $ lingualc --list-targets
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from lingual import __version__
from lingual.cli.errors import ExitCode, handle_cli_exception
from lingual.compiler import ASTPrinter, Compiler, CompilerOptions
from lingual.languages import available_targets, get_profile


def _list_targets(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    for name in available_targets():
        profile = get_profile(name)
        passes = ", ".join(profile.middleware_dependencies) or "(none)"
        click.echo(f"{name:<12} {profile.display_name:<12} {passes}")
    ctx.exit(ExitCode.SUCCESS)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-t", "--target",
    type=click.Choice(available_targets()),
    default="javascript",
    show_default=True,
    help="Target language; selects the middleware chain",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the final AST (after macros and middleware)",
)
@click.option(
    "--raw",
    is_flag=True,
    help="Print the AST as parsed, before macro expansion",
)
@click.option(
    "--middleware",
    multiple=True,
    help="Middleware pass to run instead of the target's list (can be repeated)",
)
@click.option(
    "-W", "--warnings-as-errors",
    is_flag=True,
    help="Treat warnings as errors",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.option(
    "--list-targets",
    is_flag=True,
    is_eager=True,
    expose_value=False,
    callback=_list_targets,
    help="List the available targets and exit",
)
@click.version_option(version=__version__, prog_name="lingualc")
def main(
    input_file: Path,
    target: str,
    tokens: bool,
    ast: bool,
    raw: bool,
    middleware: tuple[str, ...],
    warnings_as_errors: bool,
    verbose: bool,
) -> None:
    """
    Compile a Lingual source file.

    INPUT_FILE is the Lingual source file to compile.

    The front end reports every parse, macro and type problem it finds.
    The exit status is 0 when the build is clean, 1 when errors were
    recorded.

    \b
    Examples:
        lingualc app.lin                  # Check for JavaScript
        lingualc app.lin -t python --ast  # Dump the final tree
        lingualc app.lin --tokens         # Dump the token stream
        lingualc app.lin -W               # Fail on warnings too
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = CompilerOptions(
            target=target,
            middleware=list(middleware) if middleware else None,
        )

        if verbose:
            click.echo(f"Compiling {input_file}...")
            click.echo(f"Target: {target}")
            click.echo(f"Middleware: {', '.join(options.middleware_names) or '(none)'}")

        result = Compiler(options).compile_file(input_file)
        printer = ASTPrinter()

        if tokens:
            for token in result.tokens:
                click.echo(repr(token))

        if raw and result.ast is not None:
            click.echo(printer.print(result.ast))

        if ast and result.program is not None:
            click.echo(printer.print(result.program))

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            if result.program is not None:
                click.echo(f"Parsed: {len(result.program.body)} top-level statements")

        context = result.context
        if context.errors or context.warnings:
            click.echo(context.report(), err=True)

        failed = not result.success or (warnings_as_errors and context.warnings)
        if failed:
            sys.exit(ExitCode.BUILD_ERROR)

        click.echo(f"Compiled {input_file} ({target})")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()

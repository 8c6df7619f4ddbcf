"""
Middleware Base and Chain
=========================

A middleware is one AST-to-AST pass. Target languages name the passes they
need, in order; MiddlewareChain looks the names up in a registry and runs
them, threading the program and the shared CompileContext through.

Passes never raise for problems in the program. They record diagnostics
on the context and return a tree, so every pass runs even when an earlier
one found errors.

Registering a pass:

    registry = default_registry()
    registry.register(MyPass())
    chain = MiddlewareChain(["variable-renamer", "my-pass"], registry)
    program = chain.run(program, context)
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from lingual.compiler.ast import Program
from lingual.compiler.context import CompileContext, DiagnosticCode

logger = logging.getLogger(__name__)


class Middleware(ABC):
    """
    Base class for middleware passes.

    Attributes:
        name: Registry name used by target languages
        description: One-line summary for listings
    """
    name: str = ""
    description: str = ""

    @abstractmethod
    def apply(self, program: Program, context: CompileContext) -> Program:
        """Return the rewritten program."""


class MiddlewareRegistry:
    """Name-to-pass lookup table."""

    def __init__(self, middlewares: Iterable[Middleware] = ()):
        self._middlewares: dict[str, Middleware] = {}
        for middleware in middlewares:
            self.register(middleware)

    def register(self, middleware: Middleware) -> None:
        if not middleware.name:
            raise ValueError("middleware must have a name")
        self._middlewares[middleware.name] = middleware

    def get(self, name: str) -> Optional[Middleware]:
        return self._middlewares.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._middlewares

    @property
    def names(self) -> list[str]:
        return list(self._middlewares)


def default_registry() -> MiddlewareRegistry:
    """Registry holding the built-in passes."""
    from lingual.compiler.middleware.renamer import VariableRenamer
    from lingual.compiler.middleware.type_checker import TypeChecker
    from lingual.compiler.middleware.hoister import Hoister

    return MiddlewareRegistry([VariableRenamer(), TypeChecker(), Hoister()])


class MiddlewareChain:
    """
    Ordered list of passes.

    Unknown names are reported as MIDDLEWARE_NOT_FOUND warnings when the
    chain runs and are skipped.
    """

    def __init__(self, names: Iterable[str], registry: Optional[MiddlewareRegistry] = None):
        self.names = list(names)
        self.registry = registry or default_registry()

    def run(self, program: Program, context: CompileContext) -> Program:
        for name in self.names:
            middleware = self.registry.get(name)
            if middleware is None:
                context.add_warning(
                    f"Middleware '{name}' not found",
                    DiagnosticCode.MIDDLEWARE_NOT_FOUND,
                )
                continue

            errors_before = context.error_count()
            program = middleware.apply(program, context)
            logger.debug(
                f"Middleware '{name}' done "
                f"({context.error_count() - errors_before} new errors)"
            )
        return program

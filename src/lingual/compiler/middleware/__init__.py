"""
Middleware Passes
=================

AST-to-AST passes selected per target language:

- **variable-renamer**: unique names for declared variables
- **type-checker**: type inference and operator checks
- **hoister**: declarations first in every block
"""

from lingual.compiler.middleware.base import (
    Middleware,
    MiddlewareChain,
    MiddlewareRegistry,
    default_registry,
)
from lingual.compiler.middleware.renamer import VariableRenamer
from lingual.compiler.middleware.type_checker import TypeChecker
from lingual.compiler.middleware.hoister import Hoister

__all__ = [
    "Middleware",
    "MiddlewareChain",
    "MiddlewareRegistry",
    "default_registry",
    "VariableRenamer",
    "TypeChecker",
    "Hoister",
]

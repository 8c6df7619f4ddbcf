"""
Variable Renamer
================

Gives every declared variable a fresh, program-wide unique name so that
emitters for languages with different scoping rules cannot produce
clashes.

    let total = 0;          let _total_0 = 0;
    total = total + 1;  =>  _total_0 = _total_0 + 1;

Rules:
- Names are allocated as _<name>_<n> with one counter per run.
- Conventional loop and iteration names (i, j, k, index, key, value) are
  left alone.
- The table is flat. A second declaration of an already mapped name,
  in any block, reuses the first mapping.
- References are rewritten only after the declaration has been seen
  (depth-first, left to right). A declaration's own initializer sees the
  new name.
- Function names, parameters and obj.property labels are never renamed.
"""

import logging
from dataclasses import replace

from lingual.compiler.ast import Identifier, MemberExpression, Program, VariableDeclaration
from lingual.compiler.context import CompileContext, DiagnosticCode
from lingual.compiler.middleware.base import Middleware
from lingual.compiler.visitor import ASTTransformer

logger = logging.getLogger(__name__)

EXEMPT_NAMES = frozenset({"i", "j", "k", "index", "key", "value"})


class _RenameTransformer(ASTTransformer):

    def __init__(self):
        self.table: dict[str, str] = {}
        self._counter = 0

    def _mapped_name(self, name: str) -> str:
        if name in self.table:
            return self.table[name]
        if name in EXEMPT_NAMES:
            return name
        new_name = f"_{name}_{self._counter}"
        self._counter += 1
        self.table[name] = new_name
        return new_name

    def visit_VariableDeclaration(self, node: VariableDeclaration) -> VariableDeclaration:
        name = self._mapped_name(node.name)
        node = self.generic_visit(node)
        if name == node.name:
            return node
        return replace(node, name=name)

    def visit_Identifier(self, node: Identifier) -> Identifier:
        mapped = self.table.get(node.name)
        if mapped is None:
            return node
        return replace(node, name=mapped)

    def visit_MemberExpression(self, node: MemberExpression) -> MemberExpression:
        obj = self.visit(node.object)
        prop = self.visit(node.property) if node.computed else node.property
        if obj is node.object and prop is node.property:
            return node
        return replace(node, object=obj, property=prop)


class VariableRenamer(Middleware):
    """Middleware wrapper for the renaming pass."""
    name = "variable-renamer"
    description = "Renames variables to avoid conflicts and ensure unique names"

    def apply(self, program: Program, context: CompileContext) -> Program:
        transformer = _RenameTransformer()
        program = transformer.visit(program)

        renamed = len(transformer.table)
        if renamed:
            context.add_warning(
                f"Renamed {renamed} variables to avoid conflicts",
                DiagnosticCode.VARIABLES_RENAMED,
            )
        logger.debug(f"Renamer mapping: {transformer.table}")
        return program

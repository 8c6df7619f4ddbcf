"""
Hoister
=======

Moves function and variable declarations to the front of their own
statement list. The Program body and every block are partitioned
independently; nothing moves out of the block it was written in.

    foo();                   fn foo() { ... }
    fn foo() { ... }    =>   let x = 1;
    let x = 1;               foo();
    print(x);                print(x);

The partition is stable: declarations keep their relative order, and so
do the remaining statements.
"""

from dataclasses import replace

from lingual.compiler.ast import BlockStatement, Program, Statement, is_declaration
from lingual.compiler.context import CompileContext
from lingual.compiler.middleware.base import Middleware
from lingual.compiler.visitor import ASTTransformer


def stable_partition(statements: tuple[Statement, ...]) -> tuple[Statement, ...]:
    """Declarations first, everything else after, each group in order."""
    declarations = [s for s in statements if is_declaration(s)]
    others = [s for s in statements if not is_declaration(s)]
    return tuple(declarations + others)


class _HoistTransformer(ASTTransformer):

    def visit_Program(self, node: Program) -> Program:
        node = self.generic_visit(node)
        body = stable_partition(node.body)
        return node if body == node.body else replace(node, body=body)

    def visit_BlockStatement(self, node: BlockStatement) -> BlockStatement:
        node = self.generic_visit(node)
        statements = stable_partition(node.statements)
        return node if statements == node.statements else replace(node, statements=statements)


class Hoister(Middleware):
    """Middleware wrapper for the hoisting pass."""
    name = "hoister"
    description = "Moves variable and function declarations to the top of their scope"

    def apply(self, program: Program, context: CompileContext) -> Program:
        return _HoistTransformer().visit(program)

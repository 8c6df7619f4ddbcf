"""
Type Checker
============

Bottom-up type inference and checking over string type tags (see
lingual.compiler.types).

Each expression is checked after its operands, so by the time an operator
is examined both sides already carry an inferred_type. Names are looked up
in one flat table filled in as declarations are visited:

- variable declarations record their annotated type, or the type of their
  initializer when unannotated
- function declarations record 'function'
- parameters record their annotated type (any when unannotated)

Operator Rules
--------------
| Operator              | Operands required     | Result                      |
|-----------------------|-----------------------|-----------------------------|
| +                     | anything              | string if either is string, |
|                       |                       | otherwise number            |
| - * / %               | number, number        | number                      |
| < <= > >=             | number, number        | boolean                     |
| == != === !==         | anything              | boolean                     |
| && ||                 | boolean, boolean      | boolean                     |
| unary !               | boolean               | boolean                     |
| unary + -             | number                | number                      |
| ++ --                 | number                | number                      |
| call(), obj.prop      | callee function/any   | any                         |

'any' satisfies every requirement. A violation is recorded as a
TYPE_ERROR and the result type is reported anyway, so 1 - "x" is an error
whose type is still number.

Conditions of if, while and for must be boolean.
"""

import logging
from dataclasses import replace
from typing import Optional

from lingual.compiler import types
from lingual.compiler.ast import (
    ArrayExpression,
    BinaryExpression,
    CallExpression,
    Expression,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    Literal,
    MacroCall,
    MemberExpression,
    Node,
    Parameter,
    Program,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from lingual.compiler.context import CompileContext, DiagnosticCode
from lingual.compiler.middleware.base import Middleware
from lingual.compiler.visitor import ASTTransformer

logger = logging.getLogger(__name__)

ARITHMETIC_OPERATORS = frozenset({"-", "*", "/", "%"})
RELATIONAL_OPERATORS = frozenset({"<", "<=", ">", ">="})
EQUALITY_OPERATORS = frozenset({"==", "!=", "===", "!=="})
LOGICAL_OPERATORS = frozenset({"&&", "||"})


def binary_result_type(left: str, right: str, operator: str) -> str:
    """Result tag of a binary operator, whether or not it type checks."""
    if operator == "+":
        if types.STRING in (left, right):
            return types.STRING
        return types.NUMBER
    if operator in ARITHMETIC_OPERATORS:
        return types.NUMBER
    if operator in RELATIONAL_OPERATORS | EQUALITY_OPERATORS | LOGICAL_OPERATORS:
        return types.BOOLEAN
    return types.ANY


def is_valid_binary(left: str, right: str, operator: str) -> bool:
    if operator in ARITHMETIC_OPERATORS or operator in RELATIONAL_OPERATORS:
        return types.matches(left, types.NUMBER) and types.matches(right, types.NUMBER)
    if operator in LOGICAL_OPERATORS:
        return types.matches(left, types.BOOLEAN) and types.matches(right, types.BOOLEAN)
    return True


def unary_result_type(operand: str, operator: str) -> str:
    if operator == "!":
        return types.BOOLEAN
    if operator in ("+", "-", "++", "--"):
        return types.NUMBER
    return types.ANY


def is_valid_unary(operand: str, operator: str) -> bool:
    if operator == "!":
        return types.matches(operand, types.BOOLEAN)
    if operator in ("+", "-", "++", "--"):
        return types.matches(operand, types.NUMBER)
    return True


class _TypeTransformer(ASTTransformer):
    """Annotates every expression and declaration with its type tag."""

    def __init__(self, context: CompileContext):
        self.context = context
        self.table: dict[str, str] = {}

    def _error(self, message: str, node: Node) -> None:
        self.context.add_error(message, DiagnosticCode.TYPE_ERROR, node.span.start)

    @staticmethod
    def _type_of(node: Optional[Expression]) -> str:
        if node is None or node.inferred_type is None:
            return types.ANY
        return node.inferred_type

    # =========================================================================
    # Declarations
    # =========================================================================

    def visit_FunctionDeclaration(self, node: FunctionDeclaration) -> FunctionDeclaration:
        self.table[node.name] = types.FUNCTION
        return self.generic_visit(node)

    def visit_Parameter(self, node: Parameter) -> Parameter:
        self.table[node.name] = types.annotation_type(node.type_annotation)
        return node

    def visit_VariableDeclaration(self, node: VariableDeclaration) -> VariableDeclaration:
        node = self.generic_visit(node)
        init_type = self._type_of(node.initializer) if node.initializer else None

        if node.type_annotation is not None:
            declared = types.annotation_type(node.type_annotation)
        else:
            declared = init_type or types.ANY

        if init_type is not None and not types.is_assignable(init_type, declared):
            self._error(
                f"Type mismatch: cannot assign {init_type} to {declared} variable '{node.name}'",
                node,
            )

        self.table[node.name] = declared
        return replace(node, inferred_type=declared)

    # =========================================================================
    # Statements
    # =========================================================================

    def _check_condition(self, test: Optional[Expression]) -> None:
        if test is None:
            return
        test_type = self._type_of(test)
        if not types.matches(test_type, types.BOOLEAN):
            self._error(f"Condition must be boolean, got: {test_type}", test)

    def visit_IfStatement(self, node: IfStatement) -> IfStatement:
        node = self.generic_visit(node)
        self._check_condition(node.test)
        return node

    def visit_WhileStatement(self, node: WhileStatement) -> WhileStatement:
        node = self.generic_visit(node)
        self._check_condition(node.test)
        return node

    def visit_ForStatement(self, node: ForStatement) -> ForStatement:
        node = self.generic_visit(node)
        self._check_condition(node.test)
        return node

    # =========================================================================
    # Expressions
    # =========================================================================

    def visit_Literal(self, node: Literal) -> Literal:
        return replace(node, inferred_type=types.literal_type(node.value))

    def visit_Identifier(self, node: Identifier) -> Identifier:
        return replace(node, inferred_type=self.table.get(node.name, types.ANY))

    def visit_ArrayExpression(self, node: ArrayExpression) -> ArrayExpression:
        node = self.generic_visit(node)
        return replace(node, inferred_type=types.ARRAY)

    def visit_BinaryExpression(self, node: BinaryExpression) -> BinaryExpression:
        node = self.generic_visit(node)
        left = self._type_of(node.left)
        right = self._type_of(node.right)

        if node.is_assignment:
            return self._check_assignment(node, left, right)

        if not is_valid_binary(left, right, node.operator):
            self._error(f"Invalid operation: {left} {node.operator} {right}", node)
        return replace(node, inferred_type=binary_result_type(left, right, node.operator))

    def _check_assignment(self, node: BinaryExpression, target: str, value: str) -> BinaryExpression:
        if node.operator != "=":
            operator = node.operator[:-1]
            if not is_valid_binary(target, value, operator):
                self._error(f"Invalid operation: {target} {operator} {value}", node)
            value = binary_result_type(target, value, operator)

        if isinstance(node.left, Identifier) and not types.is_assignable(value, target):
            self._error(
                f"Type mismatch: cannot assign {value} to {target} variable '{node.left.name}'",
                node,
            )
        return replace(node, inferred_type=value)

    def visit_UnaryExpression(self, node: UnaryExpression) -> UnaryExpression:
        node = self.generic_visit(node)
        operand = self._type_of(node.operand)
        if not is_valid_unary(operand, node.operator):
            self._error(f"Invalid unary operation: {node.operator} {operand}", node)
        return replace(node, inferred_type=unary_result_type(operand, node.operator))

    def visit_CallExpression(self, node: CallExpression) -> CallExpression:
        node = self.generic_visit(node)
        callee = self._type_of(node.callee)
        if callee not in (types.FUNCTION, types.ANY):
            self._error(f"Cannot call non-function type: {callee}", node)
        return replace(node, inferred_type=types.ANY)

    def visit_MemberExpression(self, node: MemberExpression) -> MemberExpression:
        obj = self.visit(node.object)
        prop = self.visit(node.property) if node.computed else node.property
        return replace(node, object=obj, property=prop, inferred_type=types.ANY)

    def visit_MacroCall(self, node: MacroCall) -> MacroCall:
        node = self.generic_visit(node)
        return replace(node, inferred_type=types.ANY)


class TypeChecker(Middleware):
    """Middleware wrapper for the type checking pass."""
    name = "type-checker"
    description = "Validates types and performs basic type checking"

    def apply(self, program: Program, context: CompileContext) -> Program:
        transformer = _TypeTransformer(context)
        program = transformer.visit(program)
        logger.debug(f"Type table: {transformer.table}")
        return program


def infer_types(program: Program, context: CompileContext) -> Program:
    """Run the type checker on its own."""
    return TypeChecker().apply(program, context)

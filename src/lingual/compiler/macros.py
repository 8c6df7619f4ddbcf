"""
Block Macro Expander
====================

This module removes every macro definition and macro call from a Program.

Block Macros
------------
    macro log_twice(msg) {
        console.log(msg);
        console.log(msg);
    } end

    @log_twice("hi");

Definitions found anywhere in the tree are registered on the
CompileContext by name and removed. Each call is replaced by a copy of
the macro body in which every Identifier named after a parameter is
replaced by the argument expression at the same position.

Expansion runs in passes. A pass replaces every call it finds with its
expansion without looking inside the result; passes repeat until one
leaves no calls behind, so a macro may expand to calls of other macros.
Mutually recursive macros never reach that point; the pass limit turns
them into a MACRO_RECURSION_LIMIT error and the leftover calls are
dropped.

Call Positions
--------------
- Statement position (@m(x); in a statement list): the call is replaced
  by the body's statements. In a single-statement slot such as an if
  branch the statements are wrapped in a block.
- Expression position (let y = @m(x);): the body must be exactly one
  expression statement, whose expression takes the call's place.

A call with no block definition is tried against the inline macro
runtime, which evaluates text transforms such as @upper("x") eagerly.

Substitution
------------
substitute() is not hygienic: names bound inside the macro body are not
renamed, so a body declaring 'tmp' captures a call-site argument that
also refers to 'tmp'. All substitution goes through that one function.

Failures
--------
| Problem                        | Code                      | Call becomes |
|--------------------------------|---------------------------|--------------|
| Unknown macro                  | UNDEFINED_MACRO           | dropped      |
| Wrong number of arguments      | MACRO_ARGUMENT_MISMATCH   | dropped      |
| Multi-statement body in expr   | MACRO_NOT_EXPRESSION      | null         |
| Inline macro raised            | INLINE_MACRO_ERROR        | null         |

A dropped call in expression position becomes a null literal, since an
expression slot cannot be empty.
"""

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from lingual.errors import SourceSpan
from lingual.compiler.ast import (
    BlockStatement,
    Expression,
    ExpressionStatement,
    Identifier,
    Literal,
    MacroCall,
    MacroDefinition,
    MemberExpression,
    Node,
    Program,
    Statement,
)
from lingual.compiler.context import CompileContext, DiagnosticCode
from lingual.compiler.errors import MacroExpansionError
from lingual.compiler.macro_runtime import InlineMacroRuntime, MacroArgument
from lingual.compiler.visitor import ASTTransformer, walk

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXPANSION_PASSES = 64

# Fields whose children sit in statement position
STATEMENT_FIELDS = frozenset({
    "body", "statements", "consequent", "alternate", "init", "declaration",
})

# Statement slots that hold exactly one statement or nothing; a block
# would not be valid there
SINGLE_STATEMENT_FIELDS = frozenset({"init", "declaration"})


# =============================================================================
# Substitution
# =============================================================================

class _Substituter(ASTTransformer):
    """Replace parameter identifiers with argument expressions."""

    def __init__(self, bindings: Mapping[str, Expression]):
        self.bindings = bindings

    def visit_Identifier(self, node: Identifier) -> Expression:
        return self.bindings.get(node.name, node)

    def visit_MemberExpression(self, node: MemberExpression) -> MemberExpression:
        # obj.name: 'name' is a property label, not a reference
        obj = self.visit(node.object)
        prop = self.visit(node.property) if node.computed else node.property
        if obj is node.object and prop is node.property:
            return node
        return replace(node, object=obj, property=prop)


def substitute(tree: Node, bindings: Mapping[str, Expression]) -> Node:
    """
    Replace every Identifier whose name is bound with its bound expression.

    Args:
        tree: Template subtree (a statement or expression)
        bindings: Parameter name to argument expression

    Returns:
        New subtree; tree itself is left untouched
    """
    if not bindings:
        return tree
    return _Substituter(bindings).visit(tree)


class _Relocator(ASTTransformer):
    """Give every node of a template the span of the call site."""

    def __init__(self, span: SourceSpan):
        self.span = span

    def generic_visit(self, node: Node) -> Node:
        node = super().generic_visit(node)
        return replace(node, span=self.span)


def relocate(tree: Node, span: SourceSpan) -> Node:
    return _Relocator(span).visit(tree)


def contains_macro_calls(tree: Node) -> bool:
    return any(isinstance(node, MacroCall) for node in walk(tree))


# =============================================================================
# Slot-aware Base
# =============================================================================

class _StatementSplicer(ASTTransformer):
    """
    Transformer that knows whether the node it visits is a statement.

    A visit method may return a list in statement position. In a for
    initializer or an export the list must hold at most one statement and
    an empty list clears the slot; in other single-statement slots the
    list is wrapped in a block.
    """

    def __init__(self):
        self._in_statement_position = True
        self._slot = "body"

    @property
    def _in_single_statement_slot(self) -> bool:
        return self._slot in SINGLE_STATEMENT_FIELDS

    def visit_child(self, field_name: str, node: Node) -> Any:
        saved = self._in_statement_position, self._slot
        self._in_statement_position = field_name in STATEMENT_FIELDS
        self._slot = field_name
        try:
            result = self.visit(node)
        finally:
            self._in_statement_position, self._slot = saved
        if isinstance(result, list) and field_name in SINGLE_STATEMENT_FIELDS:
            return result[0] if result else None
        return result

    def _collapse(self, original: Node, nodes: list[Node]) -> Node:
        if len(nodes) == 1:
            return nodes[0]
        return BlockStatement(span=original.span, statements=tuple(nodes))


class _DefinitionCollector(_StatementSplicer):
    """Register macro definitions on the context and remove them."""

    def __init__(self, context: CompileContext):
        super().__init__()
        self.context = context

    def visit_MacroDefinition(self, node: MacroDefinition) -> list:
        if node.name in self.context.macros:
            self.context.add_warning(
                f"Macro '{node.name}' redefined",
                DiagnosticCode.MACRO_REDEFINED,
                node.span.start,
            )
        self.context.macros[node.name] = node
        logger.debug(f"Registered macro '{node.name}' with {len(node.params)} parameters")
        return []


class _CallStripper(_StatementSplicer):
    """Drop every remaining macro call."""

    def visit_MacroCall(self, node: MacroCall):
        if self._in_statement_position:
            return []
        return Literal(span=node.span, value=None)


# =============================================================================
# Expander
# =============================================================================

class MacroExpander(_StatementSplicer):
    """
    Expands block and inline macros until none remain.

    Example:
        context = CompileContext()
        program = MacroExpander(context).expand_program(parse_source(src))

    Args:
        context: Build context; receives definitions and diagnostics
        inline_runtime: Inline macro table (a fresh one if None)
        max_passes: Limit on expansion passes
        expand_inline: Evaluate @name(args) against the inline runtime
    """

    def __init__(
        self,
        context: CompileContext,
        inline_runtime: Optional[InlineMacroRuntime] = None,
        max_passes: int = DEFAULT_MAX_EXPANSION_PASSES,
        expand_inline: bool = True,
    ):
        super().__init__()
        self.context = context
        self.inline_runtime = inline_runtime or InlineMacroRuntime()
        self.max_passes = max_passes
        self.expand_inline = expand_inline
        self.expansion_count = 0

    def expand_program(self, program: Program) -> Program:
        """
        Return program with no macro definitions or calls left.

        Definitions remain available through context.macros.
        """
        passes = 0
        program = _DefinitionCollector(self.context).visit(program)

        while contains_macro_calls(program):
            if passes >= self.max_passes:
                self.context.add_error(
                    f"Macro expansion did not finish after {self.max_passes} passes",
                    DiagnosticCode.MACRO_RECURSION_LIMIT,
                )
                program = _CallStripper().visit(program)
                break
            self._in_statement_position = True
            program = self.visit(program)
            # Expansions may carry definitions of their own
            program = _DefinitionCollector(self.context).visit(program)
            passes += 1

        logger.debug(f"Macro expansion: {self.expansion_count} calls expanded in {passes} passes")
        return program

    def visit_MacroDefinition(self, node: MacroDefinition) -> list:
        return []

    def visit_MacroCall(self, node: MacroCall):
        in_statement = self._in_statement_position
        definition = self.context.macros.get(node.name)

        if definition is None:
            if self.expand_inline and self.inline_runtime.has_macro(node.name):
                return self._expand_inline(node, in_statement)
            self.context.add_error(
                f"Undefined macro '{node.name}'",
                DiagnosticCode.UNDEFINED_MACRO,
                node.span.start,
            )
            return self._dropped(node, in_statement)

        if len(node.args) != len(definition.params):
            self.context.add_error(
                f"Macro '{node.name}' expects {len(definition.params)} arguments, "
                f"got {len(node.args)}",
                DiagnosticCode.MACRO_ARGUMENT_MISMATCH,
                node.span.start,
            )
            return self._dropped(node, in_statement)

        bindings = dict(zip(definition.params, node.args))
        body = [substitute(relocate(stmt, node.span), bindings) for stmt in definition.body]
        self.expansion_count += 1

        if in_statement:
            if self._in_single_statement_slot and len(body) > 1:
                self.context.add_error(
                    f"Macro '{node.name}' expands to {len(body)} statements "
                    f"where a single statement is required",
                    DiagnosticCode.MACRO_NOT_SINGLE_STATEMENT,
                    node.span.start,
                )
                return []
            return body

        expression = _single_expression(body)
        if expression is None:
            self.context.add_error(
                f"Macro '{node.name}' cannot be used as an expression: "
                f"its body must be a single expression statement",
                DiagnosticCode.MACRO_NOT_EXPRESSION,
                node.span.start,
            )
            return Literal(span=node.span, value=None)
        return expression

    def _expand_inline(self, node: MacroCall, in_statement: bool):
        try:
            args = [_literal_argument(node.name, arg) for arg in node.args]
            value = self.inline_runtime.evaluate(node.name, args)
        except MacroExpansionError as e:
            self.context.add_error(e.message, DiagnosticCode.INLINE_MACRO_ERROR, node.span.start)
            value = None

        self.expansion_count += 1
        literal = Literal(span=node.span, value=value)
        if in_statement:
            return ExpressionStatement(span=node.span, expression=literal)
        return literal

    def _dropped(self, node: MacroCall, in_statement: bool):
        if in_statement:
            return []
        return Literal(span=node.span, value=None)


def _single_expression(body: list[Statement]) -> Optional[Expression]:
    if len(body) != 1:
        return None
    stmt = body[0]
    if isinstance(stmt, MacroCall):
        return stmt
    if isinstance(stmt, ExpressionStatement):
        return stmt.expression
    return None


def _literal_argument(macro_name: str, arg: Expression) -> MacroArgument:
    """Inline macros take literal text; a bare identifier passes its name."""
    if isinstance(arg, Literal) and arg.value is not None:
        return arg.value
    if isinstance(arg, Identifier):
        return arg.name
    raise MacroExpansionError(macro_name, "arguments must be literals or identifiers")


# =============================================================================
# Convenience Function
# =============================================================================

def expand_program(
    program: Program,
    context: CompileContext,
    inline_runtime: Optional[InlineMacroRuntime] = None,
    max_passes: int = DEFAULT_MAX_EXPANSION_PASSES,
) -> Program:
    """Expand all macros in program, recording problems on context."""
    expander = MacroExpander(context, inline_runtime, max_passes)
    return expander.expand_program(program)

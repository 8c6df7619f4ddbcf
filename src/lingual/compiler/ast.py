"""
Lingual Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the AST node types produced by the parser and
rewritten by the macro expander and the middleware passes. The same tree
type is handed to every code emitter, so it carries no target-specific
information.

Node Hierarchy
--------------
Node (base)
├── Program - root node holding the top-level statements
├── Statements
│   ├── FunctionDeclaration - function definition
│   ├── VariableDeclaration - var / let / const binding
│   ├── ExpressionStatement - expression used as a statement
│   ├── IfStatement - if/else
│   ├── WhileStatement - while loop
│   ├── ForStatement - C-style for loop
│   ├── ReturnStatement - return with optional value
│   ├── BlockStatement - { ... }
│   ├── TypeDeclaration - record type with named fields
│   ├── MacroDefinition - macro name(params) ... end
│   ├── ApiDefinition - declarative HTTP endpoint description
│   ├── ModuleDefinition - named group of statements
│   ├── ImportStatement - import from a module
│   └── ExportStatement - exported declaration
├── Expressions
│   ├── Identifier - name reference
│   ├── Literal - string, number, boolean or null
│   ├── BinaryExpression - binary operators and assignment
│   ├── UnaryExpression - prefix/postfix operators
│   ├── CallExpression - function call
│   ├── MemberExpression - obj.prop and obj[expr]
│   ├── ArrayExpression - [a, b, c]
│   └── MacroCall - @name(args), also valid as a statement
└── Support nodes
    ├── Parameter - function parameter
    ├── TypeAnnotation - Type, Type[], Type<A, B>
    ├── TypeField - one field of a TypeDeclaration
    └── ApiParameter - one parameter of an ApiDefinition

Design Notes
------------
- Nodes are frozen dataclasses; passes build new nodes with
  dataclasses.replace() instead of mutating.
- Child sequences are tuples.
- Every node has a span; spans are excluded from equality so trees can be
  compared structurally in tests.
- Expressions and variable declarations carry inferred_type, filled in by
  the type checker and also excluded from equality.
- Assignment is a BinaryExpression whose operator is '=' or a compound
  assignment operator.
"""

from dataclasses import dataclass, field, fields
from enum import Enum, auto
from typing import ClassVar, Iterator, Optional, Union

from lingual.errors import NO_SPAN, SourceSpan


# =============================================================================
# Node Kinds
# =============================================================================

class NodeKind(Enum):
    """Closed set of AST node variants."""
    PROGRAM = auto()
    # Statements
    FUNCTION_DECLARATION = auto()
    VARIABLE_DECLARATION = auto()
    EXPRESSION_STATEMENT = auto()
    IF_STATEMENT = auto()
    WHILE_STATEMENT = auto()
    FOR_STATEMENT = auto()
    RETURN_STATEMENT = auto()
    BLOCK_STATEMENT = auto()
    TYPE_DECLARATION = auto()
    MACRO_DEFINITION = auto()
    MACRO_CALL = auto()
    API_DEFINITION = auto()
    MODULE_DEFINITION = auto()
    IMPORT_STATEMENT = auto()
    EXPORT_STATEMENT = auto()
    # Expressions
    IDENTIFIER = auto()
    LITERAL = auto()
    BINARY_EXPRESSION = auto()
    UNARY_EXPRESSION = auto()
    CALL_EXPRESSION = auto()
    MEMBER_EXPRESSION = auto()
    ARRAY_EXPRESSION = auto()
    # Support
    PARAMETER = auto()
    TYPE_ANNOTATION = auto()
    TYPE_FIELD = auto()
    API_PARAMETER = auto()


BINDING_KINDS = ("var", "let", "const")

ASSIGNMENT_OPERATORS = frozenset({"=", "+=", "-=", "*=", "/=", "%="})

LiteralValue = Union[str, int, float, bool, None]

# Fields that hold annotations rather than children
NON_CHILD_FIELDS = frozenset({"span", "inferred_type"})


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class Node:
    """
    Base class for all AST nodes.

    Attributes:
        span: Source region covered by this node
    """
    kind: ClassVar[NodeKind]
    span: SourceSpan = field(default=NO_SPAN, compare=False, repr=False)

    def iter_fields(self) -> Iterator[tuple[str, object]]:
        """Yield (name, value) for every structural field."""
        for f in fields(self):
            if f.name not in NON_CHILD_FIELDS:
                yield f.name, getattr(self, f.name)

    def children(self) -> Iterator["Node"]:
        """Yield direct child nodes in field order."""
        for _, value in self.iter_fields():
            if isinstance(value, Node):
                yield value
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, Node):
                        yield item


@dataclass(frozen=True)
class Statement(Node):
    """Base class for statement nodes."""
    pass


@dataclass(frozen=True)
class Expression(Node):
    """
    Base class for expression nodes.

    Attributes:
        inferred_type: Type tag set by the type checker
    """
    inferred_type: Optional[str] = field(default=None, compare=False, repr=False)


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass(frozen=True)
class Program(Node):
    """
    Root of the tree.

    Attributes:
        body: Top-level statements in source order
    """
    kind: ClassVar[NodeKind] = NodeKind.PROGRAM
    body: tuple[Statement, ...] = ()


# =============================================================================
# Support Nodes
# =============================================================================

@dataclass(frozen=True)
class TypeAnnotation(Node):
    """
    A type written in source.

    Attributes:
        type_name: Base type name (number, string, User, ...)
        is_array: True for the Type[] form
        type_arguments: Arguments of the Type<A, B> form
    """
    kind: ClassVar[NodeKind] = NodeKind.TYPE_ANNOTATION
    type_name: str = ""
    is_array: bool = False
    type_arguments: tuple["TypeAnnotation", ...] = ()

    def __str__(self) -> str:
        text = self.type_name
        if self.type_arguments:
            text += "<" + ", ".join(str(a) for a in self.type_arguments) + ">"
        if self.is_array:
            text += "[]"
        return text


@dataclass(frozen=True)
class Parameter(Node):
    """
    Function parameter.

    Attributes:
        name: Parameter name
        type_annotation: Declared type, if any
    """
    kind: ClassVar[NodeKind] = NodeKind.PARAMETER
    name: str = ""
    type_annotation: Optional[TypeAnnotation] = None


@dataclass(frozen=True)
class TypeField(Node):
    """
    One field of a type declaration.

    Attributes:
        name: Field name
        value_type: Name of the field's type
    """
    kind: ClassVar[NodeKind] = NodeKind.TYPE_FIELD
    name: str = ""
    value_type: str = ""


@dataclass(frozen=True)
class ApiParameter(Node):
    """
    One parameter of an api block.

    Attributes:
        name: Parameter name
        type_annotation: Declared type
        required: True when marked 'required'
    """
    kind: ClassVar[NodeKind] = NodeKind.API_PARAMETER
    name: str = ""
    type_annotation: Optional[TypeAnnotation] = None
    required: bool = False


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Identifier(Expression):
    """Reference to a named value."""
    kind: ClassVar[NodeKind] = NodeKind.IDENTIFIER
    name: str = ""


@dataclass(frozen=True)
class Literal(Expression):
    """
    Constant value.

    Attributes:
        value: str, int, float, bool, or None for null
    """
    kind: ClassVar[NodeKind] = NodeKind.LITERAL
    value: LiteralValue = None


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation or assignment.

    Attributes:
        operator: Operator text ('+', '==', '=', '+=', ...)
        left: Left operand (assignment target for assignments)
        right: Right operand
    """
    kind: ClassVar[NodeKind] = NodeKind.BINARY_EXPRESSION
    operator: str = ""
    left: Optional[Expression] = None
    right: Optional[Expression] = None

    @property
    def is_assignment(self) -> bool:
        return self.operator in ASSIGNMENT_OPERATORS


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Unary operation.

    Attributes:
        operator: '!', '+', '-', '++' or '--'
        operand: The operand
        prefix: False for postfix x++ / x--
    """
    kind: ClassVar[NodeKind] = NodeKind.UNARY_EXPRESSION
    operator: str = ""
    operand: Optional[Expression] = None
    prefix: bool = True


@dataclass(frozen=True)
class CallExpression(Expression):
    """Function call: callee(args...)."""
    kind: ClassVar[NodeKind] = NodeKind.CALL_EXPRESSION
    callee: Optional[Expression] = None
    args: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class MemberExpression(Expression):
    """
    Member access.

    Attributes:
        object: The accessed value
        property: Identifier for obj.name, any expression for obj[expr]
        computed: True for the bracket form
    """
    kind: ClassVar[NodeKind] = NodeKind.MEMBER_EXPRESSION
    object: Optional[Expression] = None
    property: Optional[Expression] = None
    computed: bool = False


@dataclass(frozen=True)
class ArrayExpression(Expression):
    """Array literal: [a, b, c]."""
    kind: ClassVar[NodeKind] = NodeKind.ARRAY_EXPRESSION
    elements: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class MacroCall(Expression, Statement):
    """
    Macro invocation: @name(args).

    Appears both as an expression and, followed by ';', as a statement.
    None survive macro expansion.
    """
    kind: ClassVar[NodeKind] = NodeKind.MACRO_CALL
    name: str = ""
    args: tuple[Expression, ...] = ()


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class BlockStatement(Statement):
    """Compound statement: { statements }."""
    kind: ClassVar[NodeKind] = NodeKind.BLOCK_STATEMENT
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class FunctionDeclaration(Statement):
    """
    Function definition.

    Attributes:
        name: Function name
        params: Parameters in order
        return_type: Declared return type, if any
        body: Function body
    """
    kind: ClassVar[NodeKind] = NodeKind.FUNCTION_DECLARATION
    name: str = ""
    params: tuple[Parameter, ...] = ()
    return_type: Optional[TypeAnnotation] = None
    body: BlockStatement = field(default_factory=BlockStatement)


@dataclass(frozen=True)
class VariableDeclaration(Statement):
    """
    Variable binding.

    Attributes:
        binding_kind: 'var', 'let' or 'const'
        name: Variable name
        type_annotation: Declared type, if any
        initializer: Initial value, if any
        inferred_type: Type tag set by the type checker
    """
    kind: ClassVar[NodeKind] = NodeKind.VARIABLE_DECLARATION
    binding_kind: str = "let"
    name: str = ""
    type_annotation: Optional[TypeAnnotation] = None
    initializer: Optional[Expression] = None
    inferred_type: Optional[str] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.binding_kind not in BINDING_KINDS:
            raise ValueError(f"invalid binding kind: {self.binding_kind!r}")


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """Expression evaluated for its effect."""
    kind: ClassVar[NodeKind] = NodeKind.EXPRESSION_STATEMENT
    expression: Optional[Expression] = None


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    Conditional.

    Attributes:
        test: Condition
        consequent: Statement run when the condition holds
        alternate: Else branch, if any
    """
    kind: ClassVar[NodeKind] = NodeKind.IF_STATEMENT
    test: Optional[Expression] = None
    consequent: Optional[Statement] = None
    alternate: Optional[Statement] = None


@dataclass(frozen=True)
class WhileStatement(Statement):
    kind: ClassVar[NodeKind] = NodeKind.WHILE_STATEMENT
    test: Optional[Expression] = None
    body: Optional[Statement] = None


@dataclass(frozen=True)
class ForStatement(Statement):
    """
    C-style loop: for (init; test; update) body.

    Attributes:
        init: VariableDeclaration or ExpressionStatement, if any
        test: Loop condition, if any
        update: Expression run after each iteration, if any
        body: Loop body
    """
    kind: ClassVar[NodeKind] = NodeKind.FOR_STATEMENT
    init: Optional[Statement] = None
    test: Optional[Expression] = None
    update: Optional[Expression] = None
    body: Optional[Statement] = None


@dataclass(frozen=True)
class ReturnStatement(Statement):
    kind: ClassVar[NodeKind] = NodeKind.RETURN_STATEMENT
    value: Optional[Expression] = None


@dataclass(frozen=True)
class TypeDeclaration(Statement):
    """
    Record type: type Name { field: Type; ... }.

    Attributes:
        name: Type name
        fields: Fields in declaration order
    """
    kind: ClassVar[NodeKind] = NodeKind.TYPE_DECLARATION
    name: str = ""
    fields: tuple[TypeField, ...] = ()


@dataclass(frozen=True)
class MacroDefinition(Statement):
    """
    Block macro: macro name(params) statements end.

    Attributes:
        name: Macro name
        params: Parameter names in order
        body: Template statements
    """
    kind: ClassVar[NodeKind] = NodeKind.MACRO_DEFINITION
    name: str = ""
    params: tuple[str, ...] = ()
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ApiDefinition(Statement):
    """
    Declarative description of an HTTP endpoint.

    Attributes:
        name: Endpoint name
        method: HTTP verb (GET, POST, ...)
        path: Request path
        params: Request parameters
        returns: Response type, if declared
        headers: (name, value) pairs
        description: Free text, if declared
    """
    kind: ClassVar[NodeKind] = NodeKind.API_DEFINITION
    name: str = ""
    method: str = "GET"
    path: str = ""
    params: tuple[ApiParameter, ...] = ()
    returns: Optional[TypeAnnotation] = None
    headers: tuple[tuple[str, str], ...] = ()
    description: Optional[str] = None


@dataclass(frozen=True)
class ModuleDefinition(Statement):
    """Named group of statements: module Name { ... }."""
    kind: ClassVar[NodeKind] = NodeKind.MODULE_DEFINITION
    name: str = ""
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ImportStatement(Statement):
    """
    Import from another module.

    Attributes:
        module: Module path string
        default_name: Name bound by 'import x from ...'
        names: Names bound by 'import { a, b } from ...'
    """
    kind: ClassVar[NodeKind] = NodeKind.IMPORT_STATEMENT
    module: str = ""
    default_name: Optional[str] = None
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExportStatement(Statement):
    """Exported declaration: export <statement>."""
    kind: ClassVar[NodeKind] = NodeKind.EXPORT_STATEMENT
    declaration: Optional[Statement] = None


# =============================================================================
# Helpers
# =============================================================================

DECLARATION_TYPES = (FunctionDeclaration, VariableDeclaration)


def is_declaration(node: Node) -> bool:
    """True for the statements the hoister moves to the front."""
    return isinstance(node, DECLARATION_TYPES)

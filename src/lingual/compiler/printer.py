"""
AST Pretty Printer
==================

Produces an indented, human-readable dump of a tree for debugging and for
the lingualc --ast / --raw options.

Example output:
    Program
      Function: add(a: number, b: number): number
        Block
          Return (a + b) : number
"""

from lingual.compiler.ast import (
    ApiDefinition,
    ArrayExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExportStatement,
    Expression,
    ExpressionStatement,
    ForStatement,
    FunctionDeclaration,
    Identifier,
    IfStatement,
    ImportStatement,
    Literal,
    MacroCall,
    MacroDefinition,
    MemberExpression,
    ModuleDefinition,
    Node,
    Program,
    ReturnStatement,
    TypeDeclaration,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from lingual.compiler.visitor import ASTVisitor


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))

    Args:
        show_types: Append inferred types after expressions and declarations
    """

    def __init__(self, show_types: bool = True):
        self.output: list[str] = []
        self.indent_level = 0
        self.show_types = show_types

    def print(self, node: Node) -> str:
        """Print the tree and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _nested(self, label: str, node: Node | None) -> None:
        if node is None:
            return
        self._emit(label)
        self._indent()
        self.visit(node)
        self._dedent()

    def _typed(self, text: str, inferred_type: str | None) -> str:
        if self.show_types and inferred_type:
            return f"{text} : {inferred_type}"
        return text

    # =========================================================================
    # Statements
    # =========================================================================

    def visit_Program(self, node: Program):
        self._emit("Program")
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()

    def visit_FunctionDeclaration(self, node: FunctionDeclaration):
        params = ", ".join(
            f"{p.name}: {p.type_annotation}" if p.type_annotation else p.name
            for p in node.params
        )
        returns = f": {node.return_type}" if node.return_type else ""
        self._emit(f"Function: {node.name}({params}){returns}")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        annotation = f": {node.type_annotation}" if node.type_annotation else ""
        init = f" = {self._expr_str(node.initializer)}" if node.initializer else ""
        text = f"Variable ({node.binding_kind}): {node.name}{annotation}{init}"
        self._emit(self._typed(text, node.inferred_type))

    def visit_BlockStatement(self, node: BlockStatement):
        self._emit("Block")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def visit_IfStatement(self, node: IfStatement):
        self._emit(f"If ({self._expr_str(node.test)})")
        self._indent()
        self._nested("Then:", node.consequent)
        self._nested("Else:", node.alternate)
        self._dedent()

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit(f"While ({self._expr_str(node.test)})")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_ForStatement(self, node: ForStatement):
        test = self._expr_str(node.test)
        update = self._expr_str(node.update)
        self._emit(f"For (; {test}; {update})")
        self._indent()
        self._nested("Init:", node.init)
        self.visit(node.body)
        self._dedent()

    def visit_ReturnStatement(self, node: ReturnStatement):
        if node.value is not None:
            self._emit(f"Return {self._expr_str(node.value)}")
        else:
            self._emit("Return")

    def visit_TypeDeclaration(self, node: TypeDeclaration):
        fields = ", ".join(f"{f.name}: {f.value_type}" for f in node.fields)
        self._emit(f"Type: {node.name} {{ {fields} }}")

    def visit_MacroDefinition(self, node: MacroDefinition):
        self._emit(f"Macro: {node.name}({', '.join(node.params)})")
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()

    def visit_MacroCall(self, node: MacroCall):
        self._emit(f"MacroCall: {self._expr_str(node)}")

    def visit_ApiDefinition(self, node: ApiDefinition):
        self._emit(f"Api: {node.name} {node.method} {node.path!r}")
        self._indent()
        for param in node.params:
            required = " required" if param.required else ""
            self._emit(f"Param: {param.name}: {param.type_annotation}{required}")
        if node.returns:
            self._emit(f"Returns: {node.returns}")
        for key, value in node.headers:
            self._emit(f"Header: {key}: {value}")
        if node.description:
            self._emit(f"Description: {node.description}")
        self._dedent()

    def visit_ModuleDefinition(self, node: ModuleDefinition):
        self._emit(f"Module: {node.name}")
        self._indent()
        for stmt in node.body:
            self.visit(stmt)
        self._dedent()

    def visit_ImportStatement(self, node: ImportStatement):
        names = list(node.names)
        if node.default_name:
            names.insert(0, node.default_name)
        self._emit(f"Import: {', '.join(names)} from {node.module!r}")

    def visit_ExportStatement(self, node: ExportStatement):
        self._nested("Export", node.declaration)

    def generic_visit(self, node: Node) -> None:
        if isinstance(node, Expression):
            self._emit(self._expr_str(node))
        else:
            self._emit(node.__class__.__name__)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _expr_str(self, expr: Expression | None) -> str:
        """Convert an expression to a compact one-line form."""
        if expr is None:
            return ""
        return self._typed(self._format(expr), expr.inferred_type)

    def _format(self, expr: Expression) -> str:
        if isinstance(expr, Literal):
            if expr.value is None:
                return "null"
            if isinstance(expr.value, bool):
                return "true" if expr.value else "false"
            if isinstance(expr.value, str):
                return f'"{expr.value}"'
            return str(expr.value)
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, BinaryExpression):
            return f"({self._format(expr.left)} {expr.operator} {self._format(expr.right)})"
        if isinstance(expr, UnaryExpression):
            operand = self._format(expr.operand)
            if expr.prefix:
                return f"{expr.operator}{operand}"
            return f"{operand}{expr.operator}"
        if isinstance(expr, CallExpression):
            args = ", ".join(self._format(a) for a in expr.args)
            return f"{self._format(expr.callee)}({args})"
        if isinstance(expr, MemberExpression):
            if expr.computed:
                return f"{self._format(expr.object)}[{self._format(expr.property)}]"
            return f"{self._format(expr.object)}.{self._format(expr.property)}"
        if isinstance(expr, ArrayExpression):
            return "[" + ", ".join(self._format(e) for e in expr.elements) + "]"
        if isinstance(expr, MacroCall):
            args = ", ".join(self._format(a) for a in expr.args)
            return f"@{expr.name}({args})"
        return f"<{expr.__class__.__name__}>"

# =============================================================================
# test_parser.py - Parser Unit Tests
# =============================================================================
# Tests for the Lingual recursive descent parser.
#
# Test coverage includes:
#   - Declarations: functions, variables, types, imports, exports, modules
#   - Control flow: if/else, while, for, return, blocks
#   - Macro definitions (braced and bare bodies) and macro calls
#   - api blocks
#   - Expression precedence and associativity
#   - Source spans (every parent span encloses its children)
#   - Syntax errors with positions
# =============================================================================

import pytest

from lingual.compiler.ast import (
    ApiDefinition,
    ArrayExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExportStatement,
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
    ReturnStatement,
    TypeDeclaration,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)
from lingual.compiler.errors import MissingTokenError, ParseError, UnexpectedTokenError
from lingual.compiler.lexer import tokenize
from lingual.compiler.parser import Parser, parse, parse_source
from lingual.compiler.visitor import iter_child_nodes, walk
from lingual.errors import SourcePosition


# =============================================================================
# Helper Functions
# =============================================================================

def expr(source: str):
    """Parse a single expression statement and return its expression."""
    program = parse_source(source if source.endswith(";") else source + ";")
    assert len(program.body) == 1
    stmt = program.body[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def first(source: str):
    return parse_source(source).body[0]


# =============================================================================
# Declaration Tests
# =============================================================================

class TestFunctionDeclarations:
    """Test function declaration parsing."""

    def test_typed_function(self):
        """Parameters and return type keep their annotations."""
        func = first("fn add(a: number, b: number): number { return a + b; }")
        assert isinstance(func, FunctionDeclaration)
        assert func.name == "add"
        assert [p.name for p in func.params] == ["a", "b"]
        assert str(func.params[0].type_annotation) == "number"
        assert str(func.return_type) == "number"

        ret = func.body.statements[0]
        assert isinstance(ret, ReturnStatement)
        assert ret.value == BinaryExpression(
            operator="+", left=Identifier(name="a"), right=Identifier(name="b"),
        )

    def test_function_keyword(self):
        """'function' and 'fn' are interchangeable."""
        func = first("function main() {}")
        assert func.name == "main"
        assert func.params == ()
        assert func.return_type is None
        assert func.body == BlockStatement()

    def test_untyped_parameters(self):
        """Parameter annotations are optional."""
        func = first("fn f(x, y: string) {}")
        assert func.params[0].type_annotation is None
        assert str(func.params[1].type_annotation) == "string"

    def test_missing_body(self):
        """A function needs a block body."""
        with pytest.raises(MissingTokenError):
            parse_source("fn f();")


class TestVariableDeclarations:
    """Test var/let/const parsing."""

    @pytest.mark.parametrize("keyword", ["var", "let", "const"])
    def test_binding_kinds(self, keyword):
        """All three binding keywords produce a VariableDeclaration."""
        decl = first(f"{keyword} x = 1;")
        assert isinstance(decl, VariableDeclaration)
        assert decl.binding_kind == keyword
        assert decl.name == "x"
        assert decl.initializer == Literal(value=1)

    def test_without_initializer(self):
        """The initializer is optional."""
        decl = first("let x;")
        assert decl.initializer is None
        assert decl.type_annotation is None

    def test_array_annotation(self):
        """Type[] marks an array type."""
        decl = first("const names: string[] = [];")
        assert decl.type_annotation.type_name == "string"
        assert decl.type_annotation.is_array
        assert decl.initializer == ArrayExpression(elements=())

    def test_generic_annotation(self):
        """Generic type arguments nest."""
        decl = first("let m: Map<string, Array<number>>;")
        assert str(decl.type_annotation) == "Map<string, Array<number>>"

    def test_user_type_annotation(self):
        """Any identifier can name a type."""
        assert str(first("let u: User;").type_annotation) == "User"

    def test_invalid_binding_kind_rejected(self):
        """The node itself refuses an unknown binding kind."""
        with pytest.raises(ValueError):
            VariableDeclaration(binding_kind="val", name="x")

    def test_missing_semicolon(self):
        """The declaration must end with ';'."""
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("let x = 1")
        assert exc_info.value.message == "Expected ';', found end of input"


class TestDeclarativeForms:
    """Test type, import, export and module parsing."""

    def test_type_declaration(self):
        """Fields may be separated by ';' or nothing."""
        decl = first("type User { name: string; age: number address: Address }")
        assert isinstance(decl, TypeDeclaration)
        assert decl.name == "User"
        assert [(f.name, f.value_type) for f in decl.fields] == [
            ("name", "string"), ("age", "number"), ("address", "Address"),
        ]

    def test_default_import(self):
        """import name from "module"."""
        stmt = first('import http from "net/http";')
        assert isinstance(stmt, ImportStatement)
        assert stmt.default_name == "http"
        assert stmt.names == ()
        assert stmt.module == "net/http"

    def test_named_import(self):
        """import { a, b } from "module", without trailing ';'."""
        stmt = first('import { get, post } from "http"')
        assert stmt.default_name is None
        assert stmt.names == ("get", "post")

    def test_export(self):
        """export wraps the following statement."""
        stmt = first("export fn f() {}")
        assert isinstance(stmt, ExportStatement)
        assert isinstance(stmt.declaration, FunctionDeclaration)

    def test_module(self):
        """A module holds a list of statements."""
        mod = first("module util { let x = 1; fn f() {} }")
        assert isinstance(mod, ModuleDefinition)
        assert mod.name == "util"
        assert [type(s) for s in mod.body] == [VariableDeclaration, FunctionDeclaration]


class TestApiDefinitions:
    """Test api block parsing."""

    SOURCE = '''
    api getUser {
        method: get,
        path: "/users/{id}";
        params: { id: number required, verbose: boolean }
        returns: User
        headers: { "Accept": "application/json", "X-Trace": "on" }
        description: "Fetch one user"
    }
    '''

    def test_all_properties(self):
        """Every property is parsed; the method is upper-cased."""
        api = first(self.SOURCE)
        assert isinstance(api, ApiDefinition)
        assert api.name == "getUser"
        assert api.method == "GET"
        assert api.path == "/users/{id}"
        assert [(p.name, str(p.type_annotation), p.required) for p in api.params] == [
            ("id", "number", True),
            ("verbose", "boolean", False),
        ]
        assert str(api.returns) == "User"
        assert api.headers == (("Accept", "application/json"), ("X-Trace", "on"))
        assert api.description == "Fetch one user"

    def test_defaults(self):
        """Omitted properties take their defaults."""
        api = first("api ping { }")
        assert api.method == "GET"
        assert api.path == ""
        assert api.params == ()
        assert api.returns is None
        assert api.description is None

    def test_unknown_property(self):
        """Only the known property names are accepted."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("api x { verb: get }")
        assert exc_info.value.expected == "api property"


# =============================================================================
# Control Flow Tests
# =============================================================================

class TestControlFlow:
    """Test if, while, for, return and block parsing."""

    def test_if_else(self):
        """Both branches are statements."""
        stmt = first("if (x) { a(); } else b();")
        assert isinstance(stmt, IfStatement)
        assert stmt.test == Identifier(name="x")
        assert isinstance(stmt.consequent, BlockStatement)
        assert isinstance(stmt.alternate, ExpressionStatement)

    def test_if_without_else(self):
        """else is optional."""
        assert first("if (x) y();").alternate is None

    def test_else_if_chain(self):
        """else if nests an IfStatement in the alternate."""
        stmt = first("if (a) x(); else if (b) y(); else z();")
        assert isinstance(stmt.alternate, IfStatement)
        assert isinstance(stmt.alternate.alternate, ExpressionStatement)

    def test_while(self):
        """while takes a condition and a body."""
        stmt = first("while (n > 0) { n = n - 1; }")
        assert isinstance(stmt, WhileStatement)
        assert stmt.test.operator == ">"
        assert len(stmt.body.statements) == 1

    def test_for_full(self):
        """All three for clauses are parsed."""
        stmt = first("for (let i = 0; i < 10; i++) { log(i); }")
        assert isinstance(stmt, ForStatement)
        assert isinstance(stmt.init, VariableDeclaration)
        assert stmt.test.operator == "<"
        assert stmt.update == UnaryExpression(
            operator="++", operand=Identifier(name="i"), prefix=False,
        )

    def test_for_expression_init(self):
        """The initializer may be an expression."""
        stmt = first("for (i = 0; i < 3; i += 1) {}")
        assert isinstance(stmt.init, ExpressionStatement)
        assert stmt.update.operator == "+="

    def test_for_empty_clauses(self):
        """for (;;) has no init, test or update."""
        stmt = first("for (;;) {}")
        assert stmt.init is None
        assert stmt.test is None
        assert stmt.update is None

    def test_return_without_value(self):
        """return; has no value."""
        func = first("fn f() { return; }")
        assert func.body.statements[0] == ReturnStatement(value=None)

    def test_nested_blocks(self):
        """Blocks may appear as plain statements."""
        block = first("{ { x(); } }")
        assert isinstance(block, BlockStatement)
        assert isinstance(block.statements[0], BlockStatement)


# =============================================================================
# Macro Syntax Tests
# =============================================================================

class TestMacroSyntax:
    """Test macro definitions and calls."""

    def test_braced_macro(self):
        """Braces around the body belong to the macro."""
        macro = first("macro twice(x) { log(x); log(x); } end")
        assert isinstance(macro, MacroDefinition)
        assert macro.name == "twice"
        assert macro.params == ("x",)
        assert len(macro.body) == 2

    def test_bare_macro(self):
        """The body may be written without braces."""
        macro = first("macro one() log(1); end;")
        assert macro.params == ()
        assert len(macro.body) == 1

    def test_missing_end(self):
        """A macro must be closed with 'end'."""
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("macro m(a) { a; }")
        assert exc_info.value.message == "Expected 'end' to close macro 'm'"

    def test_statement_call(self):
        """A bare call followed by ';' is a MacroCall statement."""
        stmt = first("@log_twice(\"hi\");")
        assert isinstance(stmt, MacroCall)
        assert stmt.name == "log_twice"
        assert stmt.args == (Literal(value="hi"),)

    def test_expression_call(self):
        """A call inside an expression stays an expression."""
        decl = first("let y = @square(3) + 1;")
        assert isinstance(decl.initializer.left, MacroCall)

    def test_statement_call_span_includes_semicolon(self):
        """The statement form ends after the ';'."""
        stmt = first("@m(1);")
        assert stmt.span.end == SourcePosition(1, 7)


# =============================================================================
# Expression Tests
# =============================================================================

class TestPrecedence:
    """Test operator precedence and associativity."""

    def test_multiplication_binds_tighter(self):
        """1 + 2 * 3 parses as 1 + (2 * 3)."""
        e = expr("1 + 2 * 3")
        assert e.operator == "+"
        assert e.left == Literal(value=1)
        assert e.right.operator == "*"

    def test_parentheses_override(self):
        """(1 + 2) * 3 keeps the grouping."""
        e = expr("(1 + 2) * 3")
        assert e.operator == "*"
        assert e.left.operator == "+"

    def test_left_associative_subtraction(self):
        """a - b - c parses as (a - b) - c."""
        e = expr("a - b - c")
        assert e.operator == "-"
        assert e.left == BinaryExpression(
            operator="-", left=Identifier(name="a"), right=Identifier(name="b"),
        )
        assert e.right == Identifier(name="c")

    def test_left_associative_division(self):
        """a / b * c parses as (a / b) * c."""
        e = expr("a / b * c")
        assert e.operator == "*"
        assert e.left.operator == "/"

    def test_logical_levels(self):
        """&& binds tighter than ||."""
        e = expr("a || b && c")
        assert e.operator == "||"
        assert e.right.operator == "&&"

    def test_equality_below_relational(self):
        """a < b == c < d parses as (a < b) == (c < d)."""
        e = expr("a < b == c < d")
        assert e.operator == "=="
        assert e.left.operator == "<"
        assert e.right.operator == "<"

    def test_strict_equality(self):
        """=== and !== are equality operators."""
        assert expr("a === b").operator == "==="
        assert expr("a !== b").operator == "!=="

    def test_assignment_right_associative(self):
        """a = b = c parses as a = (b = c)."""
        e = expr("a = b = c")
        assert e.operator == "="
        assert e.left == Identifier(name="a")
        assert e.right.operator == "="
        assert e.is_assignment

    def test_assignment_lowest(self):
        """x = 1 + 2 assigns the sum."""
        e = expr("x = 1 + 2")
        assert e.operator == "="
        assert e.right.operator == "+"

    @pytest.mark.parametrize("op", ["+=", "-=", "*=", "/=", "%="])
    def test_compound_assignment(self, op):
        """Compound assignment is a BinaryExpression too."""
        e = expr(f"total {op} 2")
        assert e.operator == op
        assert e.is_assignment

    def test_member_assignment_target(self):
        """Members are valid assignment targets."""
        e = expr("user.name = \"x\"")
        assert isinstance(e.left, MemberExpression)

    def test_invalid_assignment_target(self):
        """Literals cannot be assigned to."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("1 = 2;")
        assert exc_info.value.message == "Invalid assignment target"
        assert exc_info.value.position == SourcePosition(1, 1)


class TestUnaryAndPostfix:
    """Test unary, call, member and index expressions."""

    def test_stacked_unary(self):
        """Prefix operators stack."""
        e = expr("!!done")
        assert e.operator == "!"
        assert e.operand.operator == "!"
        assert e.operand.operand == Identifier(name="done")

    def test_negation_binds_tighter_than_multiplication(self):
        """-a * b parses as (-a) * b."""
        e = expr("-a * b")
        assert e.operator == "*"
        assert isinstance(e.left, UnaryExpression)

    def test_prefix_increment(self):
        """++x is a prefix UnaryExpression."""
        e = expr("++x")
        assert e == UnaryExpression(operator="++", operand=Identifier(name="x"), prefix=True)

    def test_call_chain(self):
        """Calls, members and indexing chain left to right."""
        e = expr("client.users[0].name(1, 2)")
        assert isinstance(e, CallExpression)
        assert len(e.args) == 2
        member = e.callee
        assert member.property == Identifier(name="name")
        assert not member.computed
        index = member.object
        assert index.computed
        assert index.property == Literal(value=0)

    def test_keyword_property_name(self):
        """Keywords are allowed after '.'."""
        e = expr("schema.type")
        assert e.property == Identifier(name="type")

    def test_call_without_arguments(self):
        """f() has an empty argument tuple."""
        assert expr("f()") == CallExpression(callee=Identifier(name="f"), args=())

    def test_array_literal(self):
        """Array elements are full expressions."""
        e = expr("[1, \"two\", a + b]")
        assert isinstance(e, ArrayExpression)
        assert len(e.elements) == 3


class TestLiterals:
    """Test literal values."""

    def test_integer_and_float(self):
        """Integers stay int; decimals become float."""
        assert expr("42").value == 42
        assert isinstance(expr("42").value, int)
        assert expr("2.5").value == 2.5

    def test_boolean_and_null(self):
        """true, false and null have Python values."""
        assert expr("true").value is True
        assert expr("false").value is False
        assert expr("null").value is None


# =============================================================================
# Span Tests
# =============================================================================

SPAN_SOURCE = """
import { get } from "http";
type User { name: string }
fn area(w: number, h: number): number {
    let result = (w + 1) * -h;
    if (result > 10 && w != h) { return result; } else { return 0; }
}
for (let i = 0; i < 3; i++) { log(items[i].label, [1, 2]); }
while (x) x -= 1;
macro twice(v) { log(v); log(v); } end
@twice("hi");
api ping { method: get path: "/ping" returns: string }
module util { export fn id(x) { return x; } }
"""


class TestSpans:
    """Test that node spans nest."""

    def test_declaration_span(self):
        """The declaration covers keyword to ';'."""
        decl = first("let x = 1 + 2;")
        assert decl.span.start == SourcePosition(1, 1)
        assert decl.span.end == SourcePosition(1, 15)
        assert decl.initializer.span.start == SourcePosition(1, 9)
        assert decl.initializer.span.end == SourcePosition(1, 14)

    def test_every_parent_encloses_children(self):
        """For every node, each child's span lies inside the parent's."""
        program = parse_source(SPAN_SOURCE)
        for node in walk(program):
            for child in iter_child_nodes(node):
                assert node.span.encloses(child.span), (
                    f"{type(node).__name__} {node.span} does not enclose "
                    f"{type(child).__name__} {child.span}"
                )

    def test_program_covers_all_statements(self):
        """The program span runs from the first token to EOF."""
        program = parse_source(SPAN_SOURCE)
        assert program.span.start == program.body[0].span.start
        assert program.span.end >= program.body[-1].span.end


# =============================================================================
# Error Tests
# =============================================================================

class TestParseErrors:
    """Test syntax error reporting."""

    def test_unexpected_token(self):
        """A missing operand reports what was found and expected."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("let x = ;")
        error = exc_info.value
        assert error.message == "Unexpected ';', expected expression"
        assert (error.line, error.column) == (1, 9)
        assert error.found_text == ";"

    def test_error_token_reported(self):
        """Invalid characters surface as parse errors."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("let x = #;")
        assert exc_info.value.found_kind == "ERROR"
        assert exc_info.value.found_text == "#"

    def test_missing_identifier(self):
        """A declaration needs a name."""
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("let = 5;")
        assert exc_info.value.message == "Expected variable name, found '='"

    def test_unexpected_end_of_input(self):
        """Running out of tokens is reported as end of input."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("fn f() {")
        assert "end of input" in exc_info.value.message

    def test_deep_nesting_reported(self):
        """Nesting past the recursion limit is a parse error, not a crash."""
        depth = 200
        with pytest.raises(ParseError) as exc_info:
            parse_source("let x = " + "(" * depth + "1" + ")" * depth + ";")
        assert exc_info.value.message == "Expression nested too deeply"
        assert exc_info.value.line == 1

    def test_error_message_has_location_and_caret(self):
        """str() of the error shows file, line, column and a caret."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("let x = ;", filename="main.lin")
        lines = str(exc_info.value).splitlines()
        assert lines[0] == "main.lin:1:9: error: Unexpected ';', expected expression"
        assert lines[1] == "    let x = ;"
        assert lines[2] == " " * 12 + "^"

    def test_missing_expression_semicolon(self):
        """Expression statements need ';'."""
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("f() g()")
        assert exc_info.value.message == "Expected ';' after expression, found 'g'"


# =============================================================================
# Entry Point Tests
# =============================================================================

class TestEntryPoints:
    """Test parse() and Parser construction."""

    def test_parse_tokens(self):
        """parse() accepts a token list."""
        program = parse(tokenize("x;"))
        assert program.body == (ExpressionStatement(expression=Identifier(name="x")),)

    def test_missing_eof_is_added(self):
        """A token list without EOF is still parsed."""
        tokens = tokenize("x;")[:-1]
        program = Parser(tokens).parse()
        assert len(program.body) == 1

    def test_empty_program(self):
        """Empty source gives an empty program."""
        assert parse_source("").body == ()

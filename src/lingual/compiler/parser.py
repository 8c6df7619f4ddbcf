"""
Lingual Recursive Descent Parser
================================

This module turns the token list produced by the lexer into an AST.
It is a backtrack-free recursive descent parser with one token of
lookahead: every production is chosen by looking at the current token.

Grammar (Simplified EBNF)
-------------------------
program         ::= statement* EOF
statement       ::= function_decl | variable_decl | if_stmt | while_stmt
                  | for_stmt | return_stmt | block | macro_def | type_decl
                  | import_stmt | export_stmt | api_def | module_def
                  | expr_stmt

function_decl   ::= ('function' | 'fn') IDENT '(' params? ')' (':' type)? block
params          ::= param (',' param)*
param           ::= IDENT (':' type)?
variable_decl   ::= ('var' | 'let' | 'const') IDENT (':' type)? ('=' expr)? ';'
type            ::= (PRIMITIVE | IDENT) ('<' type (',' type)* '>')? ('[' ']')?

if_stmt         ::= 'if' '(' expr ')' statement ('else' statement)?
while_stmt      ::= 'while' '(' expr ')' statement
for_stmt        ::= 'for' '(' (variable_decl | expr_stmt | ';') expr? ';' expr? ')' statement
return_stmt     ::= 'return' expr? ';'
block           ::= '{' statement* '}'

macro_def       ::= 'macro' IDENT '(' params? ')' ('{' statement* '}' | statement*) 'end' ';'?
type_decl       ::= 'type' IDENT '{' (IDENT ':' type_name ';'?)* '}'
import_stmt     ::= 'import' (IDENT | '{' IDENT (',' IDENT)* '}') 'from' STRING ';'?
export_stmt     ::= 'export' statement
api_def         ::= 'api' IDENT '{' api_property* '}'
module_def      ::= 'module' IDENT '{' statement* '}'
expr_stmt       ::= expr ';'

Expression Precedence (lowest to highest)
-----------------------------------------
1.  assignment     = += -= *= /= %=      (right-associative)
2.  logical_or     ||
3.  logical_and    &&
4.  equality       == != === !==
5.  relational     < <= > >=
6.  additive       + -
7.  multiplicative * / %
8.  unary          ! + - ++ --          (prefix, stackable)
9.  postfix        call() .member [index] ++ --
10. primary        NUMBER STRING BOOLEAN null IDENT '(' expr ')'
                   '[' elements ']' '@' IDENT '(' args ')'

Every binary level is left-associative.

Error Handling
--------------
The first token that does not fit the grammar raises a ParseError with
the token's position, what was found, and what was expected. There is no
error recovery; the compiler reports the single error for the file.

Example Usage
-------------
>>> from lingual.compiler.parser import parse_source
>>> program = parse_source("let x = 1 + 2;")
>>> program.body[0].initializer.operator
'+'
"""

import logging
from typing import Callable, Optional

from lingual.errors import SourcePosition, SourceSpan
from lingual.compiler.lexer import PRIMITIVE_TYPES, Token, TokenKind, tokenize
from lingual.compiler.errors import MissingTokenError, ParseError, UnexpectedTokenError
from lingual.compiler.ast import (
    ASSIGNMENT_OPERATORS,
    BINDING_KINDS,
    ApiDefinition,
    ApiParameter,
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
    LiteralValue,
    MacroCall,
    MacroDefinition,
    MemberExpression,
    ModuleDefinition,
    Parameter,
    Program,
    ReturnStatement,
    Statement,
    TypeAnnotation,
    TypeDeclaration,
    TypeField,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)

logger = logging.getLogger(__name__)

# Token kinds whose text is matched literally by _check()
_SYMBOLIC_KINDS = (TokenKind.KEYWORD, TokenKind.OPERATOR, TokenKind.PUNCTUATION)

# Contextual words inside an api block
API_PROPERTIES = frozenset({"method", "path", "params", "returns", "headers", "description"})


class Parser:
    """
    Recursive descent parser for Lingual.

    The parser keeps an index into the token list and the previously
    consumed token, which marks where the node being built ends.

    Example:
        tokens = tokenize("fn main() { return 0; }")
        program = Parser(tokens).parse()
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer, ending with EOF
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            tokens = list(tokens) + [Token(TokenKind.EOF, "", 1, 1, 1, 1)]
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []
        self._pos = 0
        self._previous: Optional[Token] = None

    def parse(self) -> Program:
        """
        Parse the token list into a Program.

        Raises:
            ParseError: On the first grammar violation, or when nesting
                exceeds the interpreter's recursion limit
        """
        start = self._peek().start
        body = []
        try:
            while not self._at_end():
                body.append(self._parse_statement())
        except RecursionError:
            token = self._peek()
            raise ParseError(
                "Expression nested too deeply",
                token.start,
                found_kind=token.kind.name,
                found_text=token.text,
                filename=self.filename,
                source_line=self._get_source_line(token.line),
            ) from None

        program = Program(span=self._span_from(start, self._peek().end), body=tuple(body))
        logger.debug(f"Parsed {len(body)} top-level statements")
        return program

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._peek().kind is TokenKind.EOF

    def _peek(self, offset: int = 0) -> Token:
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def _advance(self) -> Token:
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        self._previous = token
        return token

    def _check(self, *texts: str) -> bool:
        """True if the current keyword/operator/punctuation is one of texts."""
        token = self._peek()
        return token.kind in _SYMBOLIC_KINDS and token.text in texts

    def _check_kind(self, *kinds: TokenKind) -> bool:
        return self._peek().kind in kinds

    def _match(self, *texts: str) -> Optional[Token]:
        """Consume the current token if it matches, returning it."""
        if self._check(*texts):
            return self._advance()
        return None

    def _expect(self, text: str, message: Optional[str] = None) -> Token:
        """
        Consume a specific keyword, operator or punctuation token.

        Raises:
            MissingTokenError: If the current token is something else
        """
        if self._check(text):
            return self._advance()
        raise self._missing(f"'{text}'", message)

    def _expect_identifier(self, what: str = "identifier") -> Token:
        if self._check_kind(TokenKind.IDENTIFIER):
            return self._advance()
        raise self._missing(what)

    def _expect_string(self, what: str = "string literal") -> Token:
        if self._check_kind(TokenKind.STRING):
            return self._advance()
        raise self._missing(what)

    def _missing(self, expected: str, message: Optional[str] = None) -> ParseError:
        current = self._peek()
        found = "end of input" if current.kind is TokenKind.EOF else f"'{current.text}'"
        if message is None:
            message = f"Expected {expected}, found {found}"
        return MissingTokenError(
            message,
            current.start,
            found_kind=current.kind.name,
            found_text=current.text,
            expected=expected,
            filename=self.filename,
            source_line=self._get_source_line(current.line),
        )

    def _unexpected(self, expected: str) -> ParseError:
        current = self._peek()
        return UnexpectedTokenError(
            current.kind.name,
            current.text,
            expected,
            current.start,
            filename=self.filename,
            source_line=self._get_source_line(current.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _span_from(self, start: SourcePosition, end: Optional[SourcePosition] = None) -> SourceSpan:
        """Span from start to the end of the last consumed token."""
        if end is None:
            end = self._previous.end if self._previous is not None else start
        return SourceSpan(start, max(start, end))

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse any statement, dispatching on the first token."""
        token = self._peek()

        if token.kind is TokenKind.KEYWORD:
            if token.text in ("function", "fn"):
                return self._parse_function_declaration()
            if token.text in BINDING_KINDS:
                return self._parse_variable_declaration()
            if token.text == "if":
                return self._parse_if_statement()
            if token.text == "while":
                return self._parse_while_statement()
            if token.text == "for":
                return self._parse_for_statement()
            if token.text == "return":
                return self._parse_return_statement()
            if token.text == "macro":
                return self._parse_macro_definition()
            if token.text == "type":
                return self._parse_type_declaration()
            if token.text == "import":
                return self._parse_import_statement()
            if token.text == "export":
                return self._parse_export_statement()
            if token.text == "api":
                return self._parse_api_definition()
            if token.text == "module":
                return self._parse_module_definition()

        if self._check("{"):
            return self._parse_block()

        return self._parse_expression_statement()

    def _parse_block(self) -> BlockStatement:
        start = self._peek().start
        self._expect("{")
        statements = []
        while not self._check("}") and not self._at_end():
            statements.append(self._parse_statement())
        self._expect("}")
        return BlockStatement(span=self._span_from(start), statements=tuple(statements))

    def _parse_function_declaration(self) -> FunctionDeclaration:
        """Parse: function|fn name(params) (: Type)? { body }."""
        start = self._advance().start
        name = self._expect_identifier("function name").text
        params = self._parse_parameter_list()

        return_type = None
        if self._match(":"):
            return_type = self._parse_type_annotation()

        body = self._parse_block()
        return FunctionDeclaration(
            span=self._span_from(start),
            name=name,
            params=tuple(params),
            return_type=return_type,
            body=body,
        )

    def _parse_parameter_list(self) -> list[Parameter]:
        self._expect("(")
        params = []
        if not self._check(")"):
            while True:
                params.append(self._parse_parameter())
                if not self._match(","):
                    break
        self._expect(")")
        return params

    def _parse_parameter(self) -> Parameter:
        name_token = self._expect_identifier("parameter name")
        type_annotation = None
        if self._match(":"):
            type_annotation = self._parse_type_annotation()
        return Parameter(
            span=self._span_from(name_token.start),
            name=name_token.text,
            type_annotation=type_annotation,
        )

    def _parse_type_annotation(self) -> TypeAnnotation:
        """Parse Type, Type[], Type<A, B> or Type<A>[]."""
        token = self._peek()
        if token.kind is TokenKind.IDENTIFIER or (
            token.kind is TokenKind.KEYWORD and token.text in PRIMITIVE_TYPES
        ):
            self._advance()
        else:
            raise self._unexpected("type name")

        type_arguments = []
        if self._match("<"):
            while True:
                type_arguments.append(self._parse_type_annotation())
                if not self._match(","):
                    break
            self._expect(">")

        is_array = False
        if self._check("[") and self._peek(1).is_(TokenKind.PUNCTUATION, "]"):
            self._advance()
            self._advance()
            is_array = True

        return TypeAnnotation(
            span=self._span_from(token.start),
            type_name=token.text,
            is_array=is_array,
            type_arguments=tuple(type_arguments),
        )

    def _parse_variable_declaration(self) -> VariableDeclaration:
        """Parse: var|let|const name (: Type)? (= expr)? ;"""
        keyword = self._advance()
        name = self._expect_identifier("variable name").text

        type_annotation = None
        if self._match(":"):
            type_annotation = self._parse_type_annotation()

        initializer = None
        if self._match("="):
            initializer = self._parse_expression()

        self._expect(";", None)
        return VariableDeclaration(
            span=self._span_from(keyword.start),
            binding_kind=keyword.text,
            name=name,
            type_annotation=type_annotation,
            initializer=initializer,
        )

    def _parse_if_statement(self) -> IfStatement:
        start = self._advance().start
        self._expect("(")
        test = self._parse_expression()
        self._expect(")")

        consequent = self._parse_statement()
        alternate = None
        if self._match("else"):
            alternate = self._parse_statement()

        return IfStatement(
            span=self._span_from(start),
            test=test,
            consequent=consequent,
            alternate=alternate,
        )

    def _parse_while_statement(self) -> WhileStatement:
        start = self._advance().start
        self._expect("(")
        test = self._parse_expression()
        self._expect(")")
        body = self._parse_statement()
        return WhileStatement(span=self._span_from(start), test=test, body=body)

    def _parse_for_statement(self) -> ForStatement:
        """Parse: for (init; test; update) body."""
        start = self._advance().start
        self._expect("(")

        # The initializer consumes its own ';'
        init = None
        if self._check(*BINDING_KINDS):
            init = self._parse_variable_declaration()
        elif not self._match(";"):
            init = self._parse_expression_statement()

        test = None
        if not self._check(";"):
            test = self._parse_expression()
        self._expect(";")

        update = None
        if not self._check(")"):
            update = self._parse_expression()
        self._expect(")")

        body = self._parse_statement()
        return ForStatement(
            span=self._span_from(start),
            init=init,
            test=test,
            update=update,
            body=body,
        )

    def _parse_return_statement(self) -> ReturnStatement:
        start = self._advance().start
        value = None
        if not self._check(";"):
            value = self._parse_expression()
        self._expect(";")
        return ReturnStatement(span=self._span_from(start), value=value)

    def _parse_expression_statement(self) -> Statement:
        """
        Parse an expression followed by ';'.

        A bare macro call becomes a MacroCall statement so the expander can
        splice a whole statement list in its place.
        """
        start = self._peek().start
        expression = self._parse_expression()
        self._expect(";", f"Expected ';' after expression, found {self._describe_current()}")
        span = self._span_from(start)
        if isinstance(expression, MacroCall):
            return MacroCall(span=span, name=expression.name, args=expression.args)
        return ExpressionStatement(span=span, expression=expression)

    def _describe_current(self) -> str:
        current = self._peek()
        return "end of input" if current.kind is TokenKind.EOF else f"'{current.text}'"

    # =========================================================================
    # Declarative Forms
    # =========================================================================

    def _parse_macro_definition(self) -> MacroDefinition:
        """
        Parse: macro name(params) body end.

        The body may be wrapped in braces; the braces belong to the macro,
        not to a block statement.
        """
        start = self._advance().start
        name = self._expect_identifier("macro name").text
        params = [p.name for p in self._parse_parameter_list()]

        body = []
        if self._match("{"):
            while not self._check("}") and not self._at_end():
                body.append(self._parse_statement())
            self._expect("}")
        else:
            while not self._check("end") and not self._at_end():
                body.append(self._parse_statement())

        self._expect("end", f"Expected 'end' to close macro '{name}'")
        self._match(";")
        return MacroDefinition(
            span=self._span_from(start),
            name=name,
            params=tuple(params),
            body=tuple(body),
        )

    def _parse_type_declaration(self) -> TypeDeclaration:
        """Parse: type Name { field: Type (;)? ... }."""
        start = self._advance().start
        name = self._expect_identifier("type name").text
        self._expect("{")

        fields = []
        while not self._check("}") and not self._at_end():
            field_token = self._expect_identifier("field name")
            self._expect(":")
            value_type = self._peek()
            if value_type.kind is TokenKind.IDENTIFIER or (
                value_type.kind is TokenKind.KEYWORD and value_type.text in PRIMITIVE_TYPES
            ):
                self._advance()
            else:
                raise self._unexpected("field type")
            fields.append(TypeField(
                span=self._span_from(field_token.start),
                name=field_token.text,
                value_type=value_type.text,
            ))
            self._match(";")

        self._expect("}")
        return TypeDeclaration(span=self._span_from(start), name=name, fields=tuple(fields))

    def _parse_import_statement(self) -> ImportStatement:
        """Parse: import name from "mod"; or import { a, b } from "mod";"""
        start = self._advance().start
        default_name = None
        names = []

        if self._match("{"):
            if not self._check("}"):
                while True:
                    names.append(self._expect_identifier("imported name").text)
                    if not self._match(","):
                        break
            self._expect("}")
        else:
            default_name = self._expect_identifier("imported name").text

        self._expect("from")
        module = self._expect_string("module path").text
        self._match(";")
        return ImportStatement(
            span=self._span_from(start),
            module=module,
            default_name=default_name,
            names=tuple(names),
        )

    def _parse_export_statement(self) -> ExportStatement:
        start = self._advance().start
        declaration = self._parse_statement()
        return ExportStatement(span=self._span_from(start), declaration=declaration)

    def _parse_module_definition(self) -> ModuleDefinition:
        start = self._advance().start
        name = self._expect_identifier("module name").text
        self._expect("{")
        body = []
        while not self._check("}") and not self._at_end():
            body.append(self._parse_statement())
        self._expect("}")
        return ModuleDefinition(span=self._span_from(start), name=name, body=tuple(body))

    def _parse_api_definition(self) -> ApiDefinition:
        """
        Parse an api block.

        Property names (method, path, params, returns, headers, description)
        are contextual: they are ordinary identifiers outside an api block.
        Each property may be followed by ';' or ','.
        """
        start = self._advance().start
        name = self._expect_identifier("api name").text
        self._expect("{")

        properties = {"name": name}
        while not self._check("}") and not self._at_end():
            prop = self._peek()
            if prop.kind is not TokenKind.IDENTIFIER or prop.text not in API_PROPERTIES:
                raise self._unexpected("api property")
            self._advance()
            self._expect(":")

            if prop.text == "method":
                properties["method"] = self._expect_identifier("HTTP method").text.upper()
            elif prop.text == "path":
                properties["path"] = self._expect_string("path string").text
            elif prop.text == "params":
                properties["params"] = tuple(self._parse_api_parameters())
            elif prop.text == "returns":
                properties["returns"] = self._parse_type_annotation()
            elif prop.text == "headers":
                properties["headers"] = tuple(self._parse_api_headers())
            else:
                properties["description"] = self._expect_string("description string").text

            self._match(";", ",")

        self._expect("}")
        return ApiDefinition(span=self._span_from(start), **properties)

    def _parse_api_parameters(self) -> list[ApiParameter]:
        self._expect("{")
        params = []
        while not self._check("}") and not self._at_end():
            name_token = self._expect_identifier("parameter name")
            self._expect(":")
            type_annotation = self._parse_type_annotation()
            required = False
            if self._peek().is_(TokenKind.IDENTIFIER, "required"):
                self._advance()
                required = True
            params.append(ApiParameter(
                span=self._span_from(name_token.start),
                name=name_token.text,
                type_annotation=type_annotation,
                required=required,
            ))
            self._match(";", ",")
        self._expect("}")
        return params

    def _parse_api_headers(self) -> list[tuple[str, str]]:
        self._expect("{")
        headers = []
        while not self._check("}") and not self._at_end():
            key = self._expect_string("header name").text
            self._expect(":")
            value = self._expect_string("header value").text
            headers.append((key, value))
            self._match(";", ",")
        self._expect("}")
        return headers

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_assignment()

    def _parse_assignment(self) -> Expression:
        """Parse assignment (right-associative)."""
        target_token = self._peek()
        expr = self._parse_logical_or()

        if self._check(*ASSIGNMENT_OPERATORS):
            if not isinstance(expr, (Identifier, MemberExpression)):
                raise ParseError(
                    "Invalid assignment target",
                    target_token.start,
                    found_kind=target_token.kind.name,
                    found_text=target_token.text,
                    expected="identifier or member expression",
                    filename=self.filename,
                    source_line=self._get_source_line(target_token.line),
                )
            operator = self._advance().text
            value = self._parse_assignment()
            return BinaryExpression(
                span=self._span_from(expr.span.start),
                operator=operator,
                left=expr,
                right=value,
            )

        return expr

    def _parse_logical_or(self) -> Expression:
        return self._parse_binary(self._parse_logical_and, ("||",))

    def _parse_logical_and(self) -> Expression:
        return self._parse_binary(self._parse_equality, ("&&",))

    def _parse_equality(self) -> Expression:
        return self._parse_binary(self._parse_relational, ("==", "!=", "===", "!=="))

    def _parse_relational(self) -> Expression:
        return self._parse_binary(self._parse_additive, ("<", "<=", ">", ">="))

    def _parse_additive(self) -> Expression:
        return self._parse_binary(self._parse_multiplicative, ("+", "-"))

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary(self._parse_unary, ("*", "/", "%"))

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: tuple[str, ...],
    ) -> Expression:
        """
        Generic left-associative binary level.

        Args:
            operand_parser: Parser for the next tighter level
            operators: Operator texts belonging to this level
        """
        start = self._peek().start
        expr = operand_parser()

        while self._peek().is_(TokenKind.OPERATOR) and self._peek().text in operators:
            operator = self._advance().text
            right = operand_parser()
            expr = BinaryExpression(
                span=self._span_from(start),
                operator=operator,
                left=expr,
                right=right,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """Parse prefix ! + - ++ -- (stackable)."""
        if self._peek().is_(TokenKind.OPERATOR) and self._peek().text in ("!", "+", "-", "++", "--"):
            op_token = self._advance()
            operand = self._parse_unary()
            return UnaryExpression(
                span=self._span_from(op_token.start),
                operator=op_token.text,
                operand=operand,
                prefix=True,
            )
        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Parse calls, member access, indexing and postfix ++ / --."""
        start = self._peek().start
        expr = self._parse_primary()

        while True:
            if self._match("("):
                args = self._parse_arguments()
                expr = CallExpression(span=self._span_from(start), callee=expr, args=tuple(args))

            elif self._match("."):
                member = self._peek()
                if member.kind not in (TokenKind.IDENTIFIER, TokenKind.KEYWORD, TokenKind.BOOLEAN):
                    raise self._missing("property name")
                self._advance()
                expr = MemberExpression(
                    span=self._span_from(start),
                    object=expr,
                    property=Identifier(span=member.span, name=member.text),
                    computed=False,
                )

            elif self._match("["):
                index = self._parse_expression()
                self._expect("]")
                expr = MemberExpression(
                    span=self._span_from(start),
                    object=expr,
                    property=index,
                    computed=True,
                )

            elif self._peek().is_(TokenKind.OPERATOR) and self._peek().text in ("++", "--"):
                operator = self._advance().text
                expr = UnaryExpression(
                    span=self._span_from(start),
                    operator=operator,
                    operand=expr,
                    prefix=False,
                )

            else:
                break

        return expr

    def _parse_arguments(self) -> list[Expression]:
        """Parse call arguments after '(' up to and including ')'."""
        args = []
        if not self._check(")"):
            while True:
                args.append(self._parse_assignment())
                if not self._match(","):
                    break
        self._expect(")")
        return args

    def _parse_primary(self) -> Expression:
        """Parse literals, identifiers, parentheses, arrays and macro calls."""
        token = self._peek()

        if token.kind is TokenKind.NUMBER:
            self._advance()
            return Literal(span=token.span, value=_number_value(token.text))

        if token.kind is TokenKind.STRING:
            self._advance()
            return Literal(span=token.span, value=token.text)

        if token.kind is TokenKind.BOOLEAN:
            self._advance()
            return Literal(span=token.span, value=token.text == "true")

        if token.is_(TokenKind.KEYWORD, "null"):
            self._advance()
            return Literal(span=token.span, value=None)

        if token.kind is TokenKind.IDENTIFIER:
            self._advance()
            return Identifier(span=token.span, name=token.text)

        if self._match("("):
            expr = self._parse_expression()
            self._expect(")")
            return expr

        if self._match("["):
            elements = []
            if not self._check("]"):
                while True:
                    elements.append(self._parse_assignment())
                    if not self._match(","):
                        break
            self._expect("]")
            return ArrayExpression(span=self._span_from(token.start), elements=tuple(elements))

        if self._match("@"):
            name = self._expect_identifier("macro name").text
            self._expect("(")
            args = self._parse_arguments()
            return MacroCall(span=self._span_from(token.start), name=name, args=tuple(args))

        raise self._unexpected("expression")


def _number_value(text: str) -> LiteralValue:
    """Integer literals stay int; anything with a fraction becomes float."""
    if "." in text:
        return float(text)
    return int(text)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(tokens: list[Token], filename: str = "<input>") -> Program:
    """Parse a token list into a Program."""
    return Parser(tokens, filename).parse()


def parse_source(source: str, filename: str = "<input>") -> Program:
    """
    Parse Lingual source code into an AST.

    Convenience function that combines lexing and parsing.

    Raises:
        ParseError: If the source does not match the grammar
    """
    tokens = tokenize(source)
    return Parser(tokens, filename, source.splitlines()).parse()

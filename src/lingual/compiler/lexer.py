"""
Lingual Lexer (Tokenizer)
=========================

This module converts Lingual source text into a flat list of tokens for
the parser.

The lexer is total: it never raises. A character it does not recognise
becomes an ERROR token so the parser can report it with a precise
position, and the token list always ends with exactly one EOF token.

Token Categories
----------------
- Keywords: function, fn, let, if, macro, type, api, ...
- Identifiers: letters or underscore, then letters, digits, underscore
- Numbers: 42, 3.14 (no exponent, no separators)
- Strings: "double" or 'single' quoted, escapes kept verbatim
- Booleans: true, false
- Operators: matched greedily, three characters first (===, ==, =)
- Punctuation: ( ) { } [ ] ; , .

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (an unterminated one runs to end of input)

Example Usage
-------------
>>> from lingual.compiler.lexer import tokenize
>>> for token in tokenize("let x = 42;"):
...     print(token)
Token(KEYWORD, 'let', 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(OPERATOR, '=', 1:7)
Token(NUMBER, '42', 1:9)
Token(PUNCTUATION, ';', 1:11)
Token(EOF, '', 1:12)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto

from lingual.errors import SourcePosition, SourceSpan

logger = logging.getLogger(__name__)


# =============================================================================
# Token Types
# =============================================================================

class TokenKind(Enum):
    """Closed set of token categories."""
    KEYWORD = auto()        # Reserved word
    IDENTIFIER = auto()     # User-defined name
    NUMBER = auto()         # Numeric literal
    STRING = auto()         # Quoted string literal
    BOOLEAN = auto()        # true / false
    OPERATOR = auto()       # + == && += ...
    PUNCTUATION = auto()    # ( ) { } [ ] ; , .
    EOF = auto()            # End of input
    ERROR = auto()          # Unrecognised character


# Reserved words
KEYWORDS: frozenset[str] = frozenset({
    # Declarations
    "function", "fn", "return",
    "var", "let", "const",
    # Control flow
    "if", "else", "while", "for",
    # Macros
    "macro", "end",
    # Declarative forms
    "type", "module", "api",
    "import", "export", "from", "as",
    # Literal
    "null",
    # Primitive type names
    "string", "number", "boolean", "void", "object", "array",
})

BOOLEAN_WORDS: frozenset[str] = frozenset({"true", "false"})

# Primitive type names accepted wherever a type is expected
PRIMITIVE_TYPES: frozenset[str] = frozenset({
    "string", "number", "boolean", "void", "object", "array",
})

# Operators grouped by length; the scanner tries the longest first
OPERATORS: dict[int, frozenset[str]] = {
    3: frozenset({"===", "!=="}),
    2: frozenset({
        "==", "!=", "<=", ">=", "&&", "||",
        "+=", "-=", "*=", "/=", "%=",
        "++", "--", "->",
    }),
    1: frozenset({"+", "-", "*", "/", "%", "=", "<", ">", "!", ":", "@"}),
}

PUNCTUATION: frozenset[str] = frozenset("(){}[];,.")

IDENT_START = string.ascii_letters + "_"
IDENT_CHARS = IDENT_START + string.digits
QUOTES = "\"'"


# =============================================================================
# Token Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single lexical token.

    Attributes:
        kind: Token category
        text: Source text of the token (string contents without quotes)
        line: Line of the first character (1-indexed)
        column: Column of the first character (1-indexed)
        end_line: Line just past the last character
        end_column: Column just past the last character
    """
    kind: TokenKind
    text: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.text!r}, {self.line}:{self.column})"

    @property
    def start(self) -> SourcePosition:
        return SourcePosition(self.line, self.column)

    @property
    def end(self) -> SourcePosition:
        return SourcePosition(self.end_line, self.end_column)

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(self.start, self.end)

    def is_(self, kind: TokenKind, text: str | None = None) -> bool:
        """Check kind and, optionally, exact text."""
        return self.kind is kind and (text is None or self.text == text)


# =============================================================================
# Lexer Class
# =============================================================================

class Lexer:
    """
    Single-pass tokenizer for Lingual source.

    The lexer keeps one cursor into the source and one line/column counter.
    At each position it tries, in order: whitespace and comments, numbers,
    identifiers and keywords, strings, operators, punctuation. Anything left
    over becomes a one-character ERROR token.

    Example:
        lexer = Lexer("fn add(a, b) { return a + b; }")
        tokens = lexer.tokenize()
    """

    def __init__(self, source: str):
        """
        Initialize the lexer.

        Args:
            source: Source code to tokenize
        """
        self.source = source
        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> list[Token]:
        """
        Tokenize the whole source.

        Returns:
            Tokens in source order, terminated by a single EOF token
        """
        tokens: list[Token] = []
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break
            tokens.append(self._scan_token())

        tokens.append(self._make_token(TokenKind.EOF, "", self._line, self._column))

        error_count = sum(1 for t in tokens if t.kind is TokenKind.ERROR)
        logger.debug(f"Tokenized {len(tokens)} tokens ({error_count} invalid characters)")
        return tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or '' past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character, keeping line and column in step."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _make_token(
        self,
        kind: TokenKind,
        text: str,
        start_line: int,
        start_column: int,
    ) -> Token:
        """Create a token that ends at the current position."""
        return Token(
            kind=kind,
            text=text,
            line=start_line,
            column=start_column,
            end_line=self._line,
            end_column=self._column,
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in " \t\n\r":
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_block_comment()
                continue

            break

    def _skip_block_comment(self) -> None:
        """Skip /* ... */; an unterminated comment consumes the rest."""
        self._advance()
        self._advance()
        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start_line = self._line
        start_column = self._column
        char = self._peek()

        if char in string.digits:
            return self._scan_number(start_line, start_column)

        if char in IDENT_START:
            return self._scan_identifier(start_line, start_column)

        if char in QUOTES:
            return self._scan_string(start_line, start_column)

        operator = self._match_operator()
        if operator is not None:
            for _ in operator:
                self._advance()
            return self._make_token(TokenKind.OPERATOR, operator, start_line, start_column)

        self._advance()
        if char in PUNCTUATION:
            return self._make_token(TokenKind.PUNCTUATION, char, start_line, start_column)

        return self._make_token(TokenKind.ERROR, char, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """Integer part, then an optional '.' with at least one digit."""
        start = self._pos
        while self._peek() in string.digits and not self._at_end():
            self._advance()

        if self._peek() == "." and self._peek(1) != "" and self._peek(1) in string.digits:
            self._advance()
            while self._peek() in string.digits and not self._at_end():
                self._advance()

        text = self.source[start:self._pos]
        return self._make_token(TokenKind.NUMBER, text, start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        start = self._pos
        while not self._at_end() and self._peek() in IDENT_CHARS:
            self._advance()

        text = self.source[start:self._pos]
        if text in BOOLEAN_WORDS:
            kind = TokenKind.BOOLEAN
        elif text in KEYWORDS:
            kind = TokenKind.KEYWORD
        else:
            kind = TokenKind.IDENTIFIER
        return self._make_token(kind, text, start_line, start_column)

    def _scan_string(self, start_line: int, start_column: int) -> Token:
        """
        Scan a quoted string.

        Escape sequences are kept as written (backslash plus character).
        An unterminated string runs to end of input and keeps what it read.
        """
        quote = self._advance()
        chars: list[str] = []

        while not self._at_end() and self._peek() != quote:
            char = self._advance()
            if char == "\\" and not self._at_end():
                chars.append(char + self._advance())
            else:
                chars.append(char)

        if not self._at_end():
            self._advance()  # closing quote

        return self._make_token(TokenKind.STRING, "".join(chars), start_line, start_column)

    def _match_operator(self) -> str | None:
        """Longest operator at the cursor, trying lengths 3, 2, 1."""
        for length in (3, 2, 1):
            candidate = self.source[self._pos:self._pos + length]
            if len(candidate) == length and candidate in OPERATORS[length]:
                return candidate
        return None


# =============================================================================
# Convenience Function
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """
    Tokenize Lingual source code.

    Args:
        source: Source text

    Returns:
        List of tokens ending with EOF
    """
    return Lexer(source).tokenize()

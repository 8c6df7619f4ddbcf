"""
Inline Macro Runtime
====================

Inline macros are pure text transforms invoked as @name(args). They are
evaluated eagerly against literal arguments, independently of block macro
expansion.

Builtins
--------
| Name       | Example input    | Result        |
|------------|------------------|---------------|
| upper      | "Hello"          | "HELLO"       |
| lower      | "Hello"          | "hello"       |
| camelCase  | "user-name"      | "userName"    |
| pascalCase | "user name"      | "UserName"    |
| snakeCase  | "userName"       | "user_name"   |
| kebabCase  | "UserName"       | "user-name"   |

The case converters split their input into words on spaces, hyphens,
underscores and lower-to-upper case boundaries, then rejoin.

Custom macros are registered with InlineMacroRuntime.register(name, fn);
a custom macro may not shadow a builtin.

Text Processing
---------------
process_text() rewrites every @name(args) occurrence in a string. A macro
that fails leaves its original text in place and logs a warning.
"""

import logging
import re
from typing import Callable, Union

from lingual.compiler.errors import MacroExpansionError

logger = logging.getLogger(__name__)

MacroArgument = Union[str, int, float, bool]
MacroFunction = Callable[..., object]

INLINE_MACRO_PATTERN = re.compile(r"@(\w+)\(([^)]*)\)")
_NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?")
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[A-Z]|\d+")


# =============================================================================
# Builtin Transforms
# =============================================================================

def split_words(text: str) -> list[str]:
    """
    Split an identifier-like string into lowercase words.

    >>> split_words("parseHTTPResponse_code-v2")
    ['parse', 'http', 'response', 'code', 'v', '2']
    """
    words = []
    for chunk in re.split(r"[\s_\-]+", str(text)):
        words.extend(w.lower() for w in _WORD_PATTERN.findall(chunk))
    return words


def to_camel_case(text: str) -> str:
    words = split_words(text)
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


def to_pascal_case(text: str) -> str:
    return "".join(w.capitalize() for w in split_words(text))


def to_snake_case(text: str) -> str:
    return "_".join(split_words(text))


def to_kebab_case(text: str) -> str:
    return "-".join(split_words(text))


BUILTIN_MACROS: dict[str, MacroFunction] = {
    "upper": lambda text: str(text).upper(),
    "lower": lambda text: str(text).lower(),
    "camelCase": to_camel_case,
    "pascalCase": to_pascal_case,
    "snakeCase": to_snake_case,
    "kebabCase": to_kebab_case,
}


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_argument(raw: str) -> MacroArgument:
    """
    Convert one raw argument string to a value.

    Quoted text becomes a string without its quotes, numbers become int or
    float, true/false become bool, anything else is kept as written.
    """
    text = raw.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    if _NUMBER_PATTERN.fullmatch(text):
        return float(text) if "." in text else int(text)
    if text == "true":
        return True
    if text == "false":
        return False
    return text


def parse_arguments(raw: str) -> list[MacroArgument]:
    """Split a comma-separated argument string, respecting quotes."""
    args = []
    current = []
    quote = None
    for char in raw:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
            current.append(char)
        elif char == ",":
            args.append("".join(current))
            current = []
        else:
            current.append(char)

    tail = "".join(current)
    if tail.strip() or args:
        args.append(tail)
    return [parse_argument(a) for a in args]


# =============================================================================
# Runtime
# =============================================================================

class InlineMacroRuntime:
    """
    Table of inline macros: the builtins plus caller-registered functions.

    Example:
        runtime = InlineMacroRuntime()
        runtime.register("repeat", lambda s, n: s * n)
        runtime.evaluate("repeat", ["ab", 2])     # 'abab'
        runtime.process_text("const X = @upper(x);")
    """

    def __init__(self):
        self._custom: dict[str, MacroFunction] = {}

    def register(self, name: str, function: MacroFunction) -> None:
        """
        Register a custom inline macro.

        Raises:
            ValueError: If name is a builtin or function is not callable
        """
        if name in BUILTIN_MACROS:
            raise ValueError(f"cannot redefine builtin macro '{name}'")
        if not callable(function):
            raise ValueError(f"macro '{name}' must be callable")
        self._custom[name] = function
        logger.debug(f"Registered inline macro '{name}'")

    def unregister(self, name: str) -> None:
        self._custom.pop(name, None)

    def has_macro(self, name: str) -> bool:
        return name in BUILTIN_MACROS or name in self._custom

    @property
    def names(self) -> list[str]:
        return sorted(set(BUILTIN_MACROS) | set(self._custom))

    def evaluate(self, name: str, args: list[MacroArgument]) -> str:
        """
        Evaluate an inline macro, builtins first.

        Raises:
            MacroExpansionError: If the macro is unknown or fails
        """
        function = BUILTIN_MACROS.get(name) or self._custom.get(name)
        if function is None:
            raise MacroExpansionError(name, "undefined macro")
        try:
            result = function(*args)
        except Exception as e:
            raise MacroExpansionError(name, str(e)) from e
        return str(result)

    def process_text(self, text: str) -> str:
        """Replace each @name(args) in text with the macro's result."""

        def substitute(match: re.Match) -> str:
            name, raw_args = match.group(1), match.group(2)
            try:
                return self.evaluate(name, parse_arguments(raw_args))
            except MacroExpansionError as e:
                logger.warning(f"Failed to expand inline macro @{name}: {e.message}")
                return match.group(0)

        return INLINE_MACRO_PATTERN.sub(substitute, text)

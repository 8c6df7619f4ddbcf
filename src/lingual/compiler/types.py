"""
Lingual Type Tags
=================

The type checker works with plain string tags rather than a structural
type system. The tags are what the emitters see in inferred_type.

| Tag      | Meaning                                   |
|----------|-------------------------------------------|
| number   | integer or floating point value           |
| string   | text                                      |
| boolean  | true / false                              |
| null     | the null literal                          |
| array    | array literal or T[] annotation           |
| function | a declared function                       |
| any      | unknown; compatible with every other tag  |

Rules for operators live with the type checker; this module only maps
values and annotations to tags and decides assignability.
"""

from typing import Optional

from lingual.compiler.ast import LiteralValue, TypeAnnotation

NUMBER = "number"
STRING = "string"
BOOLEAN = "boolean"
NULL = "null"
ARRAY = "array"
FUNCTION = "function"
ANY = "any"

# Annotation names that map directly to a tag
_ANNOTATION_TAGS = {
    "number": NUMBER,
    "string": STRING,
    "boolean": BOOLEAN,
    "array": ARRAY,
}


def literal_type(value: LiteralValue) -> str:
    """Tag for a literal value."""
    # bool first: True is also an int
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, (int, float)):
        return NUMBER
    if isinstance(value, str):
        return STRING
    if value is None:
        return NULL
    return ANY


def annotation_type(annotation: Optional[TypeAnnotation]) -> str:
    """
    Tag for a written type.

    Types the checker does not model (void, object, user-declared types,
    generics) become any.
    """
    if annotation is None:
        return ANY
    if annotation.is_array:
        return ARRAY
    if annotation.type_arguments:
        return ANY
    return _ANNOTATION_TAGS.get(annotation.type_name, ANY)


def is_assignable(source: str, target: str) -> bool:
    """True if a value tagged source may be stored where target is expected."""
    if ANY in (source, target):
        return True
    if source == NULL:
        return True
    return source == target


def matches(actual: str, expected: str) -> bool:
    """True if actual satisfies an operator's operand requirement."""
    return actual == expected or actual == ANY

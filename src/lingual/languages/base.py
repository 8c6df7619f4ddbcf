"""
Target Language Boundary
========================

Code emitters live outside the front end. This module fixes what an
emitter must provide and what the front end hands it.

A target language exposes:

- the ordered middleware pass names it needs (middleware_dependencies)
- transpile(program, context) returning emitted text
- generate_package_files(output_dir, base_name) writing manifests
- two lookup tables bridging a small standard library:
    call patterns      http.get, console.log, Math.floor, ...
    property patterns  response.json, data.length, ...

Template Placeholders
---------------------
| Placeholder | Replaced with                         |
|-------------|---------------------------------------|
| {args}      | all emitted arguments joined by ', '  |
| {args[i]}   | the i-th emitted argument             |
| {object}    | emitted object of a property access   |

The front end never interprets these tables; it only guarantees the tree
shape (CallExpression over MemberExpression) the emitter matches them on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from lingual.compiler.ast import Program
from lingual.compiler.context import CompileContext


@dataclass(frozen=True)
class FunctionMapping:
    """
    Standard library call bridge.

    Attributes:
        pattern: Dotted call pattern, e.g. 'http.get'
        template: Target code with {args} / {args[i]} placeholders
        is_async: The target call must be awaited
        imports: Import lines the template relies on
    """
    pattern: str
    template: str
    is_async: bool = False
    imports: tuple[str, ...] = ()


@dataclass(frozen=True)
class PropertyMapping:
    """
    Standard library property bridge.

    Attributes:
        pattern: Dotted property pattern, e.g. 'response.json'
        template: Target code with an {object} placeholder
        is_method: Append '()' after substitution
    """
    pattern: str
    template: str
    is_method: bool = False


@dataclass(frozen=True)
class LanguageProfile:
    """Declarative description of a target language."""
    name: str
    display_name: str
    description: str
    file_extension: str
    middleware_dependencies: tuple[str, ...] = ()
    function_mappings: tuple[FunctionMapping, ...] = ()
    property_mappings: tuple[PropertyMapping, ...] = ()
    version: str = "1.0.0"

    def find_function(self, pattern: str) -> Optional[FunctionMapping]:
        for mapping in self.function_mappings:
            if mapping.pattern == pattern:
                return mapping
        return None

    def find_property(self, pattern: str) -> Optional[PropertyMapping]:
        for mapping in self.property_mappings:
            if mapping.pattern == pattern:
                return mapping
        return None


def render_call_template(template: str, args: list[str]) -> str:
    """
    Fill {args} and {args[i]} placeholders.

    >>> render_call_template('post({args[0]}, json={args[1]})', ['url', 'body'])
    'post(url, json=body)'
    """
    text = template.replace("{args}", ", ".join(args))
    for index, arg in enumerate(args):
        text = text.replace(f"{{args[{index}]}}", arg)
    return text


def render_property_template(template: str, object_text: str, is_method: bool = False) -> str:
    text = template.replace("{object}", object_text)
    if is_method:
        text += "()"
    return text


class TargetLanguage(ABC):
    """
    Base class for code emitters.

    Subclasses supply a profile and implement the two emitting methods.
    """

    profile: LanguageProfile

    @property
    def name(self) -> str:
        return self.profile.name

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def description(self) -> str:
        return self.profile.description

    @property
    def middleware_dependencies(self) -> list[str]:
        return list(self.profile.middleware_dependencies)

    @property
    def function_mappings(self) -> list[FunctionMapping]:
        return list(self.profile.function_mappings)

    @property
    def property_mappings(self) -> list[PropertyMapping]:
        return list(self.profile.property_mappings)

    @abstractmethod
    def transpile(self, program: Program, context: CompileContext) -> str:
        """Return target source text for the final program."""

    @abstractmethod
    def generate_package_files(self, output_dir: Path, base_name: str) -> None:
        """Write project manifest files next to the emitted code."""

    def transpile_call(self, object_name: str, property_name: str, args: list[str]) -> Optional[str]:
        """Bridge object.property(args) through the call table, if mapped."""
        mapping = self.profile.find_function(f"{object_name}.{property_name}")
        if mapping is None:
            return None
        return render_call_template(mapping.template, args)

    def transpile_property(self, object_name: str, property_name: str) -> Optional[str]:
        """Bridge object.property through the property table, if mapped."""
        mapping = self.profile.find_property(f"{object_name}.{property_name}")
        if mapping is None:
            return None
        return render_property_template(mapping.template, object_name, mapping.is_method)

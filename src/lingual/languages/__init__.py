"""
Target Languages
================

Profiles for the supported output languages and the registry external
emitters plug into.

>>> from lingual.languages import get_profile
>>> get_profile("typescript").middleware_dependencies
('variable-renamer', 'type-checker', 'hoister')
"""

from typing import Optional

from lingual.languages.base import (
    FunctionMapping,
    LanguageProfile,
    PropertyMapping,
    TargetLanguage,
    render_call_template,
    render_property_template,
)
from lingual.languages.profiles import PROFILES

_LANGUAGES: dict[str, TargetLanguage] = {}


def available_targets() -> list[str]:
    """Names of all known targets, in registration order."""
    return list(PROFILES)


def get_profile(name: str) -> LanguageProfile:
    """
    Look up a target profile.

    Raises:
        KeyError: If the target is unknown
    """
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"unknown target language '{name}'") from None


def register_language(language: TargetLanguage) -> None:
    """Register an emitter; its profile becomes a known target."""
    PROFILES[language.name] = language.profile
    _LANGUAGES[language.name] = language


def get_language(name: str) -> Optional[TargetLanguage]:
    """The registered emitter for a target, if one was plugged in."""
    return _LANGUAGES.get(name)


__all__ = [
    "FunctionMapping",
    "LanguageProfile",
    "PropertyMapping",
    "TargetLanguage",
    "available_targets",
    "get_language",
    "get_profile",
    "register_language",
    "render_call_template",
    "render_property_template",
]

"""Name canonicalization helpers.

Factory, trait, alias and override names all pass through :func:`canonical_name`
so that ``"UserProfile"``, ``"user-profile"`` and ``"user_profile"`` refer to the
same thing.
"""
from __future__ import annotations

import re
from typing import Any

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_SEPARATORS = re.compile(r"[-\s.]+")


def underscore(word: str) -> str:
    """Convert CamelCase or dashed words to lower snake case.

    Examples:
        >>> underscore("UserProfile")
        'user_profile'
        >>> underscore("HTTPRequest")
        'http_request'
        >>> underscore("admin-user")
        'admin_user'
    """
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", word)
    text = _WORD_BOUNDARY.sub(r"\1_\2", text)
    text = _SEPARATORS.sub("_", text)
    return text.lower()


def humanize(word: str) -> str:
    """Turn a snake case name into a readable phrase (``"admin_user"`` -> ``"Admin user"``)."""
    text = word[:-3] if word.endswith("_id") else word
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]


def canonical_name(name: Any) -> str:
    """Return the canonical lookup form of a factory, trait or attribute name."""
    if isinstance(name, str):
        return underscore(name.strip())
    return underscore(str(name))


__all__ = ["underscore", "humanize", "canonical_name"]

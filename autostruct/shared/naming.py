"""Naming utilities for turning catalog names into Rust identifiers."""

from __future__ import annotations

import re
from functools import lru_cache

RUST_KEYWORDS: frozenset[str] = frozenset({
    "as",
    "async",
    "await",
    "break",
    "const",
    "continue",
    "crate",
    "dyn",
    "else",
    "enum",
    "extern",
    "false",
    "fn",
    "for",
    "if",
    "impl",
    "in",
    "let",
    "loop",
    "match",
    "mod",
    "move",
    "mut",
    "pub",
    "ref",
    "return",
    "self",
    "Self",
    "static",
    "struct",
    "super",
    "trait",
    "true",
    "type",
    "union",
    "unsafe",
    "use",
    "where",
    "while",
})

# Reserved for future editions; still rejected as plain identifiers.
RUST_RESERVED: frozenset[str] = frozenset({
    "abstract",
    "become",
    "box",
    "do",
    "final",
    "gen",
    "macro",
    "override",
    "priv",
    "try",
    "typeof",
    "unsized",
    "virtual",
    "yield",
})

# These cannot be written as raw identifiers.
_NON_RAW_KEYWORDS: frozenset[str] = frozenset({"crate", "self", "Self", "super"})

# Common irregular plurals
_IRREGULAR_PLURALS: dict[str, str] = {
    "children": "child",
    "people": "person",
    "men": "man",
    "women": "woman",
    "mice": "mouse",
    "geese": "goose",
    "teeth": "tooth",
    "feet": "foot",
    "data": "datum",
    "criteria": "criterion",
    "analyses": "analysis",
    "indices": "index",
    "appendices": "appendix",
    "matrices": "matrix",
    "vertices": "vertex",
    "aliases": "alias",
    "bonuses": "bonus",
    "buses": "bus",
    "campuses": "campus",
    "censuses": "census",
    "statuses": "status",
    "viruses": "virus",
}

_UNCOUNTABLE: frozenset[str] = frozenset({
    "equipment",
    "information",
    "metadata",
    "news",
    "series",
    "sheep",
    "species",
})

# Singular nouns the trailing "s" rule would cut; "menus" and "emus" are still plurals.
_SINGULAR_S: frozenset[str] = frozenset({
    "alias",
    "apparatus",
    "bonus",
    "bus",
    "cactus",
    "campus",
    "census",
    "consensus",
    "corpus",
    "focus",
    "genus",
    "nexus",
    "octopus",
    "radius",
    "status",
    "stimulus",
    "syllabus",
    "virus",
})

_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]+")


def _singularize_word(word: str) -> str:
    lower = word.lower()
    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_PLURALS:
        # Preserve original case pattern
        singular = _IRREGULAR_PLURALS[lower]
        if word[0].isupper():
            return singular.capitalize()
        return singular

    # Apply rules in order of specificity
    if lower.endswith("ies") and len(word) > 3:
        return word[:-3] + ("Y" if word[-1].isupper() else "y")
    if lower.endswith(("sses", "xes", "zes", "ches", "shes")) and len(word) > 4:
        return word[:-2]
    if lower.endswith(("ss", "is")) or lower in _SINGULAR_S:
        return word
    if lower.endswith("s") and len(word) > 1:
        return word[:-1]
    return word


@lru_cache(maxsize=1024)
def singularize(name: str) -> str:
    """Convert a plural name to its singular form.

    Only the last word of a snake_case or kebab-case name is inflected,
    so ``user_accounts`` becomes ``user_account``.
    """
    match = re.search(r"[0-9A-Za-z]+$", name)
    if not match:
        return name
    return name[: match.start()] + _singularize_word(match.group())


@lru_cache(maxsize=1024)
def to_pascal_case(value: str) -> str:
    """Convert a string to PascalCase.

    Examples:
        >>> to_pascal_case("hello_world")
        'HelloWorld'
        >>> to_pascal_case("hello-world")
        'HelloWorld'
        >>> to_pascal_case("helloWorld")
        'HelloWorld'
        >>> to_pascal_case("very happy")
        'VeryHappy'
    """
    value = _WORD_BOUNDARY.sub(r"\1_\2", value)
    parts = [part for part in _NON_ALNUM.split(value) if part]
    return "".join(part[0].upper() + part[1:].lower() for part in parts)


@lru_cache(maxsize=1024)
def to_snake_case(value: str) -> str:
    """Convert a string to snake_case.

    Examples:
        >>> to_snake_case("HelloWorld")
        'hello_world'
        >>> to_snake_case("hello-world")
        'hello_world'
    """
    value = _WORD_BOUNDARY.sub(r"\1_\2", value)
    value = _NON_ALNUM.sub("_", value)
    return value.lower().strip("_")


@lru_cache(maxsize=1024)
def sanitize_module_name(value: str) -> str:
    """Sanitize a snippet id for use as a Rust module (and file) name."""
    name = to_snake_case(value) or "module"
    if name[0].isdigit():
        name = f"m_{name}"
    if name in RUST_KEYWORDS or name in RUST_RESERVED:
        return f"{name}_"
    return name


@lru_cache(maxsize=1024)
def sanitize_field_name(value: str) -> str:
    """Sanitize a column or attribute name for use as a Rust field name."""
    sanitized = to_snake_case(value) or "field"
    if sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    if sanitized in _NON_RAW_KEYWORDS:
        return f"{sanitized}_"
    if sanitized in RUST_KEYWORDS or sanitized in RUST_RESERVED:
        return f"r#{sanitized}"
    return sanitized


@lru_cache(maxsize=1024)
def sanitize_type_name(value: str, fallback: str = "Unnamed") -> str:
    """Sanitize a value for use as a Rust type or enum variant name."""
    name = to_pascal_case(value) or fallback
    if name[0].isdigit():
        name = f"{fallback}{name}"
    if name == "Self":
        return f"{name}_"
    return name

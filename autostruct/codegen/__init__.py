"""Rust code generation: snippets, finalization and module output."""

from .generator import (
    CodeGenerator,
    EntityKind,
    GeneratorContext,
    Options,
    Snippet,
    apply_annotations,
    finalize,
    generate_snippets,
)
from .writer import ModuleSpec, write_snippets

__all__ = [
    "CodeGenerator",
    "EntityKind",
    "GeneratorContext",
    "Options",
    "Snippet",
    "apply_annotations",
    "finalize",
    "generate_snippets",
    "ModuleSpec",
    "write_snippets",
]

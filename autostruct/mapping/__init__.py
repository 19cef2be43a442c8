"""Type descriptors, the native type mapper and Rust rendering."""

from .descriptors import (
    Array,
    Custom,
    Nullable,
    Range,
    Scalar,
    TypeDescriptor,
    leaf,
    nullable,
    walk,
)
from .mapper import Category, CategoryTable, TypeMapper, UnknownTypePolicy
from .rust import dependencies_for, imports_for, render

__all__ = [
    # Descriptors
    "Array",
    "Custom",
    "Nullable",
    "Range",
    "Scalar",
    "TypeDescriptor",
    "leaf",
    "nullable",
    "walk",
    # Mapper
    "Category",
    "CategoryTable",
    "TypeMapper",
    "UnknownTypePolicy",
    # Rust rendering
    "dependencies_for",
    "imports_for",
    "render",
]

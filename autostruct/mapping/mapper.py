"""Native type name to descriptor mapping.

Each backend supplies a :data:`CategoryTable`: the mapping data, one
sub-table of native names per semantic category. :class:`TypeMapper`
holds the dispatch logic and is shared by every backend.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, Iterable, Mapping

from ..shared import DialectError, TypeMappingError, to_pascal_case
from .descriptors import Array, Custom, TypeDescriptor

logger = logging.getLogger(__name__)

DEFAULT_ARRAY_PREFIX: Final[str] = "_"


class Category(Enum):
    """Semantic categories partitioning a backend's native type names."""

    NUMERIC = "numeric"
    TEMPORAL = "temporal"
    STRING = "string"
    BINARY = "binary"
    BIT_STRING = "bit_string"
    NETWORK = "network"
    JSON = "json"
    GEOMETRIC = "geometric"
    TEXT_SEARCH = "text_search"
    RANGE = "range"
    SPECIALIZED = "specialized"
    EXTENSION = "extension"


class UnknownTypePolicy(Enum):
    """What to do with a native name that matches no category."""

    DEGRADE = "degrade"
    FAIL = "fail"


CategoryTable = Mapping[Category, Mapping[str, TypeDescriptor]]


class TypeMapper:
    """Maps native type names of one backend to type descriptors.

    Args:
        table: Category table for the backend.
        dialect: Backend name used in error messages.
        array_prefix: Marker the catalog prepends to array element types.
        policy: Behaviour for unclassified names.
        extensions: Names from the EXTENSION category to enable.

    Raises:
        DialectError: If a native name appears in more than one category.
    """

    __slots__ = ("_table", "_index", "dialect", "array_prefix", "policy")

    def __init__(
        self,
        table: CategoryTable,
        *,
        dialect: str,
        array_prefix: str = DEFAULT_ARRAY_PREFIX,
        policy: UnknownTypePolicy = UnknownTypePolicy.DEGRADE,
        extensions: Iterable[str] = (),
    ) -> None:
        self.dialect = dialect
        self.array_prefix = array_prefix
        self.policy = policy
        self._table = table
        self._index = self._build_index(table, {name.lower() for name in extensions})

    def _build_index(
        self,
        table: CategoryTable,
        extensions: set[str],
    ) -> dict[str, Category]:
        index: dict[str, Category] = {}
        for category, entries in table.items():
            for name in entries:
                key = name.lower()
                if key in index:
                    raise DialectError(
                        f"'{name}' is listed under both {index[key].value} "
                        f"and {category.value}",
                        self.dialect,
                    )
                if category is Category.EXTENSION and key not in extensions:
                    continue
                index[key] = category
        return index

    def classify(self, name: str) -> Category | None:
        """Return the category of a non-array native name, if any."""
        return self._index.get(name.lower())

    def map(self, name: str) -> TypeDescriptor:
        """Map a native type name to a descriptor.

        Raises:
            TypeMappingError: If the name is unclassified and the policy is FAIL.
        """
        # Catalogs name array element types with the prefix, so a user type
        # whose own name starts with it is read as an array as well.
        if self.array_prefix and name.startswith(self.array_prefix):
            return Array(self.map(name[len(self.array_prefix):]))

        category = self.classify(name)
        if category is None:
            return self._unclassified(name)
        return self._resolve(category, name)

    def _resolve(self, category: Category, name: str) -> TypeDescriptor:
        entries = self._table[category]
        key = name.lower()
        for candidate, descriptor in entries.items():
            if candidate.lower() == key:
                return descriptor
        raise DialectError(
            f"'{name}' classified as {category.value} but missing from its table",
            self.dialect,
        )

    def _unclassified(self, name: str) -> TypeDescriptor:
        if self.policy is UnknownTypePolicy.FAIL:
            raise TypeMappingError(name, f"{self.dialect} catalog type")
        logger.debug("Unclassified %s type '%s' mapped to a custom type", self.dialect, name)
        return Custom(to_pascal_case(name) or name, native=name)

    def known_names(self) -> list[str]:
        """Return every enabled native name, sorted."""
        return sorted(self._index)

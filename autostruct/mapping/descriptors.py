"""Target type descriptors.

A descriptor is one of a closed set of shapes. Leaves are :class:`Scalar`
members or :class:`Custom` names; :class:`Nullable`, :class:`Array` and
:class:`Range` wrap another descriptor. Descriptors know nothing about
the syntax of the language they are rendered into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union


class Scalar(Enum):
    """Leaf descriptor kinds."""

    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U32 = "u32"
    F32 = "f32"
    F64 = "f64"
    DECIMAL = "decimal"
    STRING = "string"
    BYTES = "bytes"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMESTAMP_TZ = "timestamp_tz"
    UUID = "uuid"
    JSON = "json"
    IP_NETWORK = "ip_network"
    MAC_ADDRESS = "mac_address"
    BIT = "bit"
    INTERVAL = "interval"
    MONEY = "money"
    TREE_PATH = "tree_path"
    UNIT = "unit"


@dataclass(frozen=True, slots=True)
class Nullable:
    inner: TypeDescriptor


@dataclass(frozen=True, slots=True)
class Array:
    inner: TypeDescriptor


@dataclass(frozen=True, slots=True)
class Range:
    inner: TypeDescriptor


@dataclass(frozen=True, slots=True)
class Custom:
    """A named type the mapper does not classify.

    ``native`` keeps the catalog name the descriptor was derived from so
    the generator can tie it back to an entity of the same schema. It
    does not take part in equality.
    """

    name: str
    native: str | None = field(default=None, compare=False)


TypeDescriptor = Union[Scalar, Nullable, Array, Range, Custom]

WRAPPERS = (Nullable, Array, Range)


def nullable(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Wrap a descriptor in exactly one :class:`Nullable`."""
    if isinstance(descriptor, Nullable):
        return descriptor
    return Nullable(descriptor)


def walk(descriptor: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield a descriptor and each wrapped descriptor down to its leaf."""
    current = descriptor
    while isinstance(current, WRAPPERS):
        yield current
        current = current.inner
    yield current


def leaf(descriptor: TypeDescriptor) -> Scalar | Custom:
    """Return the innermost, non-wrapper descriptor."""
    *_, last = walk(descriptor)
    return last  # type: ignore[return-value]

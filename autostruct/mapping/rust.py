"""Rust rendering of type descriptors and the imports they require."""

from __future__ import annotations

from typing import Final

from .descriptors import Array, Custom, Nullable, Range, Scalar, TypeDescriptor, walk

RUST_NAMES: Final[dict[Scalar, str]] = {
    Scalar.BOOL: "bool",
    Scalar.I8: "i8",
    Scalar.I16: "i16",
    Scalar.I32: "i32",
    Scalar.I64: "i64",
    Scalar.U32: "u32",
    Scalar.F32: "f32",
    Scalar.F64: "f64",
    Scalar.DECIMAL: "Decimal",
    Scalar.STRING: "String",
    Scalar.BYTES: "Vec<u8>",
    Scalar.DATE: "NaiveDate",
    Scalar.TIME: "NaiveTime",
    Scalar.TIMESTAMP: "NaiveDateTime",
    Scalar.TIMESTAMP_TZ: "DateTime<Utc>",
    Scalar.UUID: "Uuid",
    Scalar.JSON: "Value",
    Scalar.IP_NETWORK: "IpNetwork",
    Scalar.MAC_ADDRESS: "MacAddress",
    Scalar.BIT: "BitVec",
    Scalar.INTERVAL: "PgInterval",
    Scalar.MONEY: "PgMoney",
    Scalar.TREE_PATH: "PgLTree",
    Scalar.UNIT: "()",
}

RUST_IMPORTS: Final[dict[Scalar, tuple[str, ...]]] = {
    Scalar.DECIMAL: ("rust_decimal::Decimal",),
    Scalar.DATE: ("chrono::NaiveDate",),
    Scalar.TIME: ("chrono::NaiveTime",),
    Scalar.TIMESTAMP: ("chrono::NaiveDateTime",),
    Scalar.TIMESTAMP_TZ: ("chrono::DateTime", "chrono::Utc"),
    Scalar.UUID: ("uuid::Uuid",),
    Scalar.JSON: ("serde_json::Value",),
    Scalar.IP_NETWORK: ("ipnetwork::IpNetwork",),
    Scalar.MAC_ADDRESS: ("mac_address::MacAddress",),
    Scalar.BIT: ("bit_vec::BitVec",),
    Scalar.INTERVAL: ("sqlx::postgres::types::PgInterval",),
    Scalar.MONEY: ("sqlx::postgres::types::PgMoney",),
    Scalar.TREE_PATH: ("sqlx::postgres::types::PgLTree",),
}

RANGE_IMPORT: Final[str] = "std::ops::Range"


def render(descriptor: TypeDescriptor) -> str:
    """Render a descriptor as Rust type syntax."""
    if isinstance(descriptor, Scalar):
        return RUST_NAMES[descriptor]
    if isinstance(descriptor, Nullable):
        return f"Option<{render(descriptor.inner)}>"
    if isinstance(descriptor, Array):
        return f"Vec<{render(descriptor.inner)}>"
    if isinstance(descriptor, Range):
        return f"Range<{render(descriptor.inner)}>"
    if isinstance(descriptor, Custom):
        return descriptor.name.rsplit("::", 1)[-1]
    raise TypeError(f"not a type descriptor: {descriptor!r}")


def imports_for(descriptor: TypeDescriptor) -> set[str]:
    """Collect the import paths a descriptor needs, through every wrapper."""
    imports: set[str] = set()
    for part in walk(descriptor):
        if isinstance(part, Scalar):
            imports.update(RUST_IMPORTS.get(part, ()))
        elif isinstance(part, Range):
            imports.add(RANGE_IMPORT)
        elif isinstance(part, Custom) and "::" in part.name:
            imports.add(part.name)
    return imports


def dependencies_for(descriptor: TypeDescriptor) -> set[str]:
    """Collect sibling type names a descriptor refers to."""
    return {
        part.name
        for part in walk(descriptor)
        if isinstance(part, Custom) and "::" not in part.name
    }

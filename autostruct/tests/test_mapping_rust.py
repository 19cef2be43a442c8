import pytest

from autostruct.mapping.descriptors import Array, Custom, Nullable, Range, Scalar
from autostruct.mapping.rust import (
    RANGE_IMPORT,
    RUST_NAMES,
    dependencies_for,
    imports_for,
    render,
)


class TestRender:
    @pytest.mark.parametrize(
        "descriptor,expected",
        [
            (Scalar.I32, "i32"),
            (Scalar.BYTES, "Vec<u8>"),
            (Scalar.TIMESTAMP_TZ, "DateTime<Utc>"),
            (Nullable(Scalar.STRING), "Option<String>"),
            (Array(Array(Scalar.I32)), "Vec<Vec<i32>>"),
            (Nullable(Array(Scalar.UUID)), "Option<Vec<Uuid>>"),
            (Range(Scalar.DATE), "Range<NaiveDate>"),
            (Custom("Ltree"), "Ltree"),
            (Custom("geo_types::Point"), "Point"),
        ],
    )
    def test_render(self, descriptor, expected):
        assert render(descriptor) == expected

    def test_every_scalar_has_a_name(self):
        assert set(RUST_NAMES) == set(Scalar)

    def test_rejects_other_values(self):
        with pytest.raises(TypeError):
            render("int4")


class TestImports:
    def test_plain_scalar_needs_nothing(self):
        assert imports_for(Scalar.I64) == set()

    def test_walks_wrappers(self):
        assert imports_for(Nullable(Array(Scalar.DECIMAL))) == {"rust_decimal::Decimal"}

    def test_timestamp_with_zone(self):
        assert imports_for(Scalar.TIMESTAMP_TZ) == {"chrono::DateTime", "chrono::Utc"}

    def test_range(self):
        assert imports_for(Range(Scalar.UUID)) == {RANGE_IMPORT, "uuid::Uuid"}

    def test_qualified_custom(self):
        assert imports_for(Custom("geo_types::Point")) == {"geo_types::Point"}


class TestDependencies:
    def test_custom_is_sibling_dependency(self):
        assert dependencies_for(Nullable(Array(Custom("Mood")))) == {"Mood"}

    def test_qualified_custom_is_not_a_dependency(self):
        assert dependencies_for(Custom("geo_types::Point")) == set()

    def test_scalar(self):
        assert dependencies_for(Scalar.STRING) == set()

"""
test_values.py - 값 정규화 테스트

Export 방향 (normalize_for_cell):
- dates → YYYY-MM-DD, booleans → Y/N, Decimal → float

Import 방향 (cast_cell_value):
- 문자열 trim, 빈 값 → None
- boolean 토큰 y/yes/true/1/x/✓
- Excel 일련번호 → 날짜
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from pds212.core.values import (
    FieldType,
    cast_cell_value,
    cast_to_boolean,
    format_date,
    is_blank,
    normalize_for_cell,
)

# =============================================================================
# FieldType
# =============================================================================


class TestFieldTypeParse:
    """FieldType.parse 테스트."""

    def test_default_is_string(self):
        assert FieldType.parse(None) is FieldType.STRING
        assert FieldType.parse("") is FieldType.STRING

    def test_text_alias(self):
        assert FieldType.parse("text") is FieldType.STRING

    def test_case_insensitive(self):
        assert FieldType.parse(" Date ") is FieldType.DATE

    def test_unknown_raises(self):
        with pytest.raises(ValueError):
            FieldType.parse("currency")


# =============================================================================
# format_date
# =============================================================================


class TestFormatDate:
    """format_date 테스트."""

    def test_date(self):
        assert format_date(date(2024, 1, 5)) == "2024-01-05"

    def test_datetime(self):
        assert format_date(datetime(2024, 1, 5, 13, 45)) == "2024-01-05"

    def test_iso_string(self):
        assert format_date("2024-01-05T08:00:00") == "2024-01-05"

    def test_written_format(self):
        assert format_date("01/05/2024") == "2024-01-05"

    def test_excel_serial(self):
        """1900 날짜 체계에서 45296 = 2024-01-05."""
        assert format_date(45296) == "2024-01-05"

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", ["2024"]])
    def test_unparseable(self, value):
        assert format_date(value) is None


# =============================================================================
# normalize_for_cell
# =============================================================================


class TestNormalizeForCell:
    """Export 정규화."""

    def test_date_object_any_type(self):
        assert normalize_for_cell(date(1990, 5, 17)) == "1990-05-17"

    def test_declared_date_string(self):
        assert normalize_for_cell("1990-05-17T00:00:00", FieldType.DATE) == "1990-05-17"

    def test_declared_date_unparseable_kept(self):
        assert normalize_for_cell("Unknown", FieldType.DATE) == "Unknown"

    def test_undeclared_string_untouched(self):
        assert normalize_for_cell("1990-05-17T00:00:00") == "1990-05-17T00:00:00"

    def test_booleans(self):
        assert normalize_for_cell(True) == "Y"
        assert normalize_for_cell(False) == "N"
        assert normalize_for_cell(True, FieldType.BOOLEAN) == "Y"

    def test_decimal(self):
        value = normalize_for_cell(Decimal("35000.50"), FieldType.NUMERIC)

        assert isinstance(value, float)
        assert value == 35000.5

    def test_int_passthrough(self):
        assert normalize_for_cell(40) == 40


# =============================================================================
# cast_cell_value / cast_to_boolean
# =============================================================================


class TestCastToBoolean:
    """Import boolean 변환."""

    @pytest.mark.parametrize("value", ["Y", "yes", "TRUE", "1", "x", "✓", True, 1])
    def test_truthy(self, value):
        assert cast_to_boolean(value) is True

    @pytest.mark.parametrize("value", [None, "", "N", "no", "false", "0", False, 0])
    def test_falsy(self, value):
        assert cast_to_boolean(value) is False


class TestCastCellValue:
    """Import 변환."""

    def test_string_trimmed(self):
        assert cast_cell_value("  Juan  ") == "Juan"

    def test_blank_is_none(self):
        assert cast_cell_value("   ") is None
        assert cast_cell_value(None) is None

    def test_boolean_type_always_bool(self):
        assert cast_cell_value(None, FieldType.BOOLEAN) is False
        assert cast_cell_value("Y", FieldType.BOOLEAN) is True

    def test_date_from_datetime_cell(self):
        assert cast_cell_value(datetime(2016, 3, 2), FieldType.DATE) == "2016-03-02"

    def test_date_from_serial(self):
        assert cast_cell_value(45296, FieldType.DATE) == "2024-01-05"

    def test_numeric_integral_float(self):
        assert cast_cell_value(25000.0, FieldType.NUMERIC) == "25000"

    def test_numeric_fraction(self):
        assert cast_cell_value(1.68, FieldType.NUMERIC) == "1.68"

    def test_string_type_stringifies_numbers(self):
        """숫자로 입력된 전화번호는 텍스트로 돌아옴."""
        assert cast_cell_value(9171234567) == "9171234567"


class TestIsBlank:
    """is_blank 테스트."""

    def test_values(self):
        assert is_blank(None)
        assert is_blank("  ")
        assert not is_blank(0)
        assert not is_blank(False)
        assert not is_blank("x")

"""
Value normalization: record values -> cell values, cell values -> payload values.

의미 타입은 닫힌 집합 (FieldType). 타입은 매핑에서 선언,
date/bool/Decimal 객체는 런타임에도 추가로 인식.

규칙:
- 날짜 → YYYY-MM-DD (date, datetime, ISO-8601 문자열)
- boolean → "Y"/"N" (질문지 답변은 여기 거치지 않고 원본 그대로 기록)
- Decimal → float (openpyxl에 Decimal 셀 타입 없음)
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from openpyxl.utils.datetime import from_excel

DATE_FORMAT = "%Y-%m-%d"

# ISO-8601 실패 시 시도하는 관대한 포맷
_FALLBACK_DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
)

TRUTHY_TOKENS = frozenset({"y", "yes", "true", "1", "x", "✓", "✔"})


class FieldType(str, Enum):
    """매핑 필드의 선언된 의미 타입."""
    STRING = "string"
    DATE = "date"
    BOOLEAN = "boolean"
    NUMERIC = "numeric"

    @classmethod
    def parse(cls, raw: Any) -> "FieldType":
        """
        매핑의 'type' 값 파싱.

        Args:
            raw: 매핑 값 (None → STRING, "text" 별칭 → STRING)

        Raises:
            ValueError: 알 수 없는 타입명
        """
        if raw is None or raw == "":
            return cls.STRING
        name = str(raw).strip().lower()
        if name == "text":
            return cls.STRING
        return cls(name)


# =============================================================================
# Helpers
# =============================================================================

def is_blank(value: Any) -> bool:
    """None 또는 공백뿐인 문자열."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _stringify(value: Any) -> str:
    """셀 값 → 텍스트 (정수 float은 '.0' 제거)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    return str(value)


def format_date(value: Any) -> str | None:
    """
    날짜류 값을 YYYY-MM-DD로 변환.

    date, datetime, ISO-8601 문자열, 흔한 표기 몇 가지, Excel 일련번호 지원.

    Returns:
        포맷된 날짜, 비었거나 파싱 불가면 None
    """
    if value is None or value == "":
        return None

    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)

    if _is_number(value):
        try:
            return from_excel(float(value)).strftime(DATE_FORMAT)
        except (ValueError, OverflowError, TypeError):
            return None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).strftime(DATE_FORMAT)
    except ValueError:
        pass

    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime(DATE_FORMAT)
        except ValueError:
            continue

    return None


# =============================================================================
# Export direction
# =============================================================================

def normalize_for_cell(value: Any, field_type: FieldType = FieldType.STRING) -> Any:
    """
    레코드 값 → 셀에 쓸 값.

    선언된 타입으로 분기:
    - BOOLEAN → "Y"/"N"
    - DATE → 파싱되면 YYYY-MM-DD, 아니면 그대로
    - STRING / NUMERIC → 그대로 (단 bool → "Y"/"N", date 객체 → YYYY-MM-DD,
      Decimal → float)

    None / "" 은 호출자가 미리 건너뜀.
    """
    if field_type is FieldType.BOOLEAN:
        return "Y" if cast_to_boolean(value) else "N"

    if field_type is FieldType.DATE:
        formatted = format_date(value)
        return formatted if formatted is not None else value

    if isinstance(value, bool):
        return "Y" if value else "N"
    if isinstance(value, (date, datetime)):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, Decimal):
        return float(value)
    return value


# =============================================================================
# Import direction
# =============================================================================

def cast_to_boolean(value: Any) -> bool:
    """체크박스 / Y / X / TRUE 형태 셀 → bool."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if _is_number(value):
        return bool(value)
    return str(value).strip().lower() in TRUTHY_TOKENS


def cast_cell_value(value: Any, field_type: FieldType = FieldType.STRING) -> Any:
    """
    원본 셀 값 → payload 값.

    Returns:
        - BOOLEAN: 항상 bool
        - 그 외: 빈 셀은 None, 아니면 문자열 (날짜는 YYYY-MM-DD)
    """
    if field_type is FieldType.BOOLEAN:
        return cast_to_boolean(value)

    if value is None:
        return None

    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None

    if field_type is FieldType.DATE:
        return format_date(value)

    if field_type is FieldType.NUMERIC:
        return _stringify(value) if _is_number(value) else value

    return value if isinstance(value, str) else _stringify(value)

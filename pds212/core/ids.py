"""
ID and filename generation for exports.

규칙:
- export 파일명은 호출마다 고유: <prefix><employee_id>_<token>.xlsx
- token은 랜덤 (uuid4), 동시 export끼리 겹치지 않음
"""

import re
import uuid

from pds212.domain.constants import (
    EXPORT_FILENAME_PREFIX,
    EXPORT_FILENAME_SUFFIX,
    EXPORT_TOKEN_LENGTH,
)
from pds212.domain.errors import ErrorCodes, PolicyRejectError

EMPLOYEE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$")


def generate_export_token() -> str:
    """
    export 파일용 고유 token.

    Returns:
        소문자 hex 문자열 (EXPORT_TOKEN_LENGTH 자)
    """
    return uuid.uuid4().hex[:EXPORT_TOKEN_LENGTH]


def build_export_filename(employee_id: str, token: str | None = None) -> str:
    """
    직원별 export 파일명.

    Args:
        employee_id: 레코드 ID
        token: 고유 token (생략 시 생성)

    Returns:
        e.g. cs_form_212_export_EMP-001_3f2a9c1d0b7e4.xlsx
    """
    token = token or generate_export_token()
    return f"{EXPORT_FILENAME_PREFIX}{_sanitize_for_filename(employee_id)}_{token}{EXPORT_FILENAME_SUFFIX}"


def validate_employee_id(employee_id: str) -> None:
    """
    파일시스템 경로에 쓰기 전 직원 ID 검증.

    Raises:
        PolicyRejectError: INVALID_EMPLOYEE_ID
    """
    if not employee_id or not EMPLOYEE_ID_PATTERN.match(employee_id):
        raise PolicyRejectError(
            ErrorCodes.INVALID_EMPLOYEE_ID,
            employee_id=employee_id,
            pattern=EMPLOYEE_ID_PATTERN.pattern,
        )


def _sanitize_for_filename(value: str) -> str:
    """
    파일명에 안전한 문자열로 변환.

    - ASCII 영문, 숫자, '-' 유지
    - 공백 / '_' → '_'
    - 나머지는 제거
    """
    sanitized = ""
    for c in str(value):
        if c.isascii() and (c.isalnum() or c == "-"):
            sanitized += c
        elif c in " _":
            sanitized += "_"

    while "__" in sanitized:
        sanitized = sanitized.replace("__", "_")

    sanitized = sanitized.strip("_")
    return sanitized[:64] if sanitized else "UNKNOWN"

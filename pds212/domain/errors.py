"""
Error definitions for the export service.

규칙:
- 명시적 실패 → PolicyRejectError + ErrorCodes 코드
- 템플릿 로드 문제는 복구 (빈 워크북), raise 안 함
- export 디렉토리 실패 → OSError (ExportDirectoryError)
  I/O 에러를 처리하는 호출자가 별도 분류 없이 잡을 수 있음
"""

from pathlib import Path
from typing import Any


class PolicyRejectError(Exception):
    """
    요청을 즉시 중단해야 할 때 발생하는 에러.

    사용처:
    - 잘못된 매핑 설정
    - 읽을 수 없거나 잘못된 import 워크북
    - 없거나 손상된 직원 레코드

    Usage:
        raise PolicyRejectError("EMPLOYEE_NOT_FOUND", employee_id="EMP-001")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 응답용."""
        return {
            "code": self.code,
            **self.context,
        }


class MappingError(PolicyRejectError):
    """매핑 설정 파싱 실패 또는 알 수 없는 필드 참조."""


class ExportDirectoryError(OSError):
    """
    export 임시 디렉토리 생성 실패.

    호출자에게 그대로 전달 (치명적): 파일 경로 반환 없음.
    """

    def __init__(self, path: Path, reason: str = "") -> None:
        self.code = ErrorCodes.EXPORT_DIR_UNAVAILABLE
        self.path = path
        self.reason = reason
        message = f"[{self.code}] could not create export directory: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "path": str(self.path),
            "reason": self.reason,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Mapping ===
    MAPPING_INVALID = "MAPPING_INVALID"
    MAPPING_NOT_FOUND = "MAPPING_NOT_FOUND"

    # === Export ===
    EXPORT_DIR_UNAVAILABLE = "EXPORT_DIR_UNAVAILABLE"
    TEMPLATE_LOAD_FAILED = "TEMPLATE_LOAD_FAILED"  # warning, 복구됨

    # === Import ===
    IMPORT_FILE_UNREADABLE = "IMPORT_FILE_UNREADABLE"
    IMPORT_FILE_INVALID = "IMPORT_FILE_INVALID"
    IMPORT_NO_SHEETS = "IMPORT_NO_SHEETS"

    # === Store ===
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    EMPLOYEE_RECORD_CORRUPT = "EMPLOYEE_RECORD_CORRUPT"
    INVALID_EMPLOYEE_ID = "INVALID_EMPLOYEE_ID"

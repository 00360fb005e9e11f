"""
Export logging: 호출별 ExportLog + 섹션 카운터.

CsForm212Exporter.export() 호출마다 ExportLog 1개 생성:
- 템플릿 사용 여부 또는 빈 워크북 fallback (로드 에러 포함)
- 섹션별 기록/누락 row 수
- 결과, 출력 경로
"""

import logging
from datetime import UTC, datetime

from pds212.core.ids import generate_export_token
from pds212.domain.schemas import ExportLog, SectionLog

logger = logging.getLogger(__name__)


def create_export_log(employee_id: str) -> ExportLog:
    """
    새 ExportLog 생성.

    Args:
        employee_id: export 대상 레코드

    Returns:
        초기화된 ExportLog (result="pending")
    """
    now = datetime.now(UTC)
    export_id = f"EXP-{now.strftime('%Y%m%d%H%M%S')}-{generate_export_token()[:8]}"

    return ExportLog(
        export_id=export_id,
        employee_id=employee_id,
        started_at=now.isoformat(),
    )


def record_template(
    export_log: ExportLog,
    template_path: str | None,
    used: bool,
    error: str | None = None,
) -> None:
    """기본 템플릿 사용 여부 (또는 빈 워크북 fallback) 기록."""
    export_log.template_path = template_path
    export_log.template_used = used
    export_log.template_error = error


def record_section(
    export_log: ExportLog,
    section: str,
    rows_available: int,
    rows_written: int,
) -> SectionLog:
    """
    섹션 row 수 기록.

    누락 row는 DEBUG 로그만 (잘림은 매핑 정책).
    """
    entry = SectionLog(
        section=section,
        rows_available=rows_available,
        rows_written=rows_written,
        rows_dropped=max(rows_available - rows_written, 0),
    )
    export_log.sections.append(entry)

    if entry.rows_dropped:
        logger.debug(
            "Section %s: %d of %d rows beyond the mapped range were not written (export %s)",
            section,
            entry.rows_dropped,
            rows_available,
            export_log.export_id,
        )
    return entry


def complete_export_log(
    export_log: ExportLog,
    success: bool,
    output_path: str | None = None,
    error_code: str | None = None,
) -> None:
    """
    ExportLog 완료 처리.

    Args:
        export_log: ExportLog 인스턴스
        success: 파일 저장 성공 여부
        output_path: 저장된 파일 (성공 시)
        error_code: 에러 코드 (실패 시)
    """
    export_log.finished_at = datetime.now(UTC).isoformat()
    export_log.result = "success" if success else "failed"
    export_log.output_path = output_path
    if not success:
        export_log.error_code = error_code

"""
CS Form 212 exporter: employee record -> filled XLSX file.

쓰기 순서:
1. single fields
2. 가족 배경 (fixed-relation 블록)
3. 자녀, 학력, 자격
4. 경력 (primary designation row 먼저), 봉사활동, L&D
5. 추천인
6. 기타 정보 (자유 텍스트 블록)
7. 질문지 (체크박스 연결 셀용 진짜 boolean)

실패 정책:
- 템플릿 문제 → 빈 표준 워크북 (로그만, raise 안 함)
- export 디렉토리 생성 실패 → ExportDirectoryError
- 그 외는 그대로 전파, 재시도 없음
- end_row 넘는 row는 버림 (ExportLog에 집계)
"""

import logging
import re
from pathlib import Path
from typing import Any

from openpyxl.workbook import Workbook

from pds212.core.ids import build_export_filename
from pds212.core.logging import (
    complete_export_log,
    create_export_log,
    record_section,
    record_template,
)
from pds212.core.settings import ExportSettings
from pds212.core.values import format_date, is_blank, normalize_for_cell
from pds212.domain.errors import ExportDirectoryError
from pds212.domain.schemas import EmployeeRecord, ExportLog
from pds212.mapping.config import PdsMapping, SectionSpec

from .workbook import load_or_create_workbook, resolve_sheet, write_cell

logger = logging.getLogger(__name__)

VOLUNTARY_WORK_FIELDS = (
    "organization_name",
    "date_from",
    "date_to",
    "hours_rendered",
    "position_or_nature",
)
LEARNING_DEVELOPMENT_FIELDS = (
    "title",
    "date_from",
    "date_to",
    "hours",
    "type_of_ld",
    "conducted_by",
)

# 매핑에 컬럼이 없을 때 쓰는 추천인 기본 컬럼
REFERENCE_DEFAULT_COLUMNS = {"name": "A", "address": "F", "telephone_no": "G"}

LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")


def build_work_experience_rows(record: EmployeeRecord, agency_name: str) -> list[dict[str, Any]]:
    """
    현재 보직을 맨 앞에 둔 경력 row 목록.

    합성 row = primary designation + 직원의 급여, 임용 상태.
    과거 row는 그대로 뒤에 붙음 (중복 제거 안 함).
    """
    rows: list[dict[str, Any]] = []
    primary = record.primary_designation
    if primary is not None:
        date_from = primary.start_date or record.date_hired
        rows.append({
            "date_from": format_date(date_from),
            "date_to": format_date(primary.end_date),
            "position_title": primary.position_title or "N/A",
            "company_name": agency_name,
            "monthly_salary": record.salary,
            "salary_grade_step": None,
            "status_of_appointment": record.employment_status,
            "is_gov_service": True,
        })
    rows.extend(item.to_row() for item in record.work_experience)
    return rows


def _project(rows: list[Any], subfields: tuple[str, ...]) -> list[dict[str, Any]]:
    result = []
    for item in rows:
        row = item.to_row()
        result.append({name: row.get(name) for name in subfields})
    return result


class CsForm212Exporter:
    """
    템플릿 기반 CS Form 212 exporter.

    Usage:
        exporter = CsForm212Exporter(mapping, settings)
        path = exporter.export(record)
    """

    def __init__(self, mapping: PdsMapping, settings: ExportSettings):
        """
        Args:
            mapping: 파싱된 매핑 설정 (읽기 전용)
            settings: storage root, temp dir, 기관명
        """
        self.mapping = mapping
        self.settings = settings
        self.last_log: ExportLog | None = None

    def export(self, record: EmployeeRecord) -> Path:
        """
        직원 1명의 CS Form 212 워크북 작성 후 저장.

        Args:
            record: 직원 레코드 (수정하지 않음)

        Returns:
            저장된 XLSX 파일 경로

        Raises:
            ExportDirectoryError: temp 디렉토리 생성 실패
        """
        export_log = create_export_log(record.id)
        self.last_log = export_log

        loaded = load_or_create_workbook(self.mapping.template_path, self.settings.storage_root)
        record_template(
            export_log,
            str(loaded.template_path) if loaded.template_path else None,
            loaded.template_used,
            loaded.error,
        )
        wb = loaded.workbook

        try:
            self.populate(wb, record, export_log)

            output_path = self._output_path(record.id)
            wb.save(output_path)
        except Exception as e:
            complete_export_log(export_log, success=False, error_code=getattr(e, "code", type(e).__name__))
            raise
        finally:
            wb.close()

        complete_export_log(export_log, success=True, output_path=str(output_path))
        logger.info(
            "CS Form 212 exported: employee=%s path=%s template_used=%s rows_dropped=%d",
            record.id,
            output_path,
            loaded.template_used,
            export_log.rows_dropped,
        )
        return output_path

    def populate(self, wb: Workbook, record: EmployeeRecord, export_log: ExportLog | None = None) -> None:
        """레코드의 매핑된 모든 섹션을 wb에 기록."""
        export_log = export_log or create_export_log(record.id)

        self._write_single_fields(wb, record)
        self._write_family_background(wb, record)

        if self.mapping.children:
            self._write_rows(wb, self.mapping.children, [c.to_row() for c in record.children], export_log)

        self._write_section(wb, "educational_background", [e.to_row() for e in record.educational_background], export_log)
        self._write_section(wb, "civil_service_eligibility", [c.to_row() for c in record.civil_service_eligibility], export_log)
        self._write_section(
            wb,
            "work_experience",
            build_work_experience_rows(record, self.settings.agency_name),
            export_log,
        )
        self._write_section(wb, "voluntary_work", _project(record.voluntary_work, VOLUNTARY_WORK_FIELDS), export_log)
        self._write_section(
            wb,
            "learning_development",
            _project(record.learning_development, LEARNING_DEVELOPMENT_FIELDS),
            export_log,
        )

        self._write_references(wb, record, export_log)
        self._write_other_information(wb, record, export_log)
        self._write_questionnaire(wb, record)

    # =========================================================================
    # Serialization
    # =========================================================================

    def _output_path(self, employee_id: str) -> Path:
        temp_dir = self.settings.temp_dir
        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportDirectoryError(temp_dir, reason=str(e)) from e
        if not temp_dir.is_dir():
            raise ExportDirectoryError(temp_dir, reason="not a directory")
        return temp_dir / build_export_filename(employee_id)

    # =========================================================================
    # Writers
    # =========================================================================

    def _write_single_fields(self, wb: Workbook, record: EmployeeRecord) -> None:
        for spec in self.mapping.single_fields:
            value = getattr(record, spec.field)
            if value is None or value == "":
                continue
            ws = resolve_sheet(wb, spec.sheet)
            write_cell(ws, spec.cell, normalize_for_cell(value, spec.type))

    def _write_family_background(self, wb: Workbook, record: EmployeeRecord) -> None:
        by_relation = {member.relation: member.to_row() for member in record.family_background}

        for block in self.mapping.family_background:
            member = by_relation.get(block.relation)
            if member is None:
                continue
            ws = resolve_sheet(wb, block.sheet)
            for subfield, cell in block.cells.items():
                value = member.get(subfield)
                if value is not None and value != "":
                    write_cell(ws, cell, normalize_for_cell(value))

    def _write_section(
        self,
        wb: Workbook,
        section_name: str,
        rows: list[dict[str, Any]],
        export_log: ExportLog,
    ) -> None:
        section = self.mapping.section(section_name)
        if section is None:
            return
        self._write_rows(wb, section, rows, export_log)

    def _write_rows(
        self,
        wb: Workbook,
        section: SectionSpec,
        rows: list[dict[str, Any]],
        export_log: ExportLog,
    ) -> None:
        """start_row부터 레코드당 1 row, end_row 넘는 레코드는 버림."""
        ws = resolve_sheet(wb, section.sheet)
        current_row = section.start_row
        written = 0

        for row in rows:
            if current_row > section.end_row:
                break
            for subfield, column in section.columns.items():
                value = row.get(subfield)
                if value is None:
                    continue
                value = normalize_for_cell(value, column.type)
                if str(value) != "":
                    write_cell(ws, f"{column.first}{current_row}", value)
            current_row += 1
            written += 1

        record_section(export_log, section.name, len(rows), written)

    def _write_references(self, wb: Workbook, record: EmployeeRecord, export_log: ExportLog) -> None:
        section = self.mapping.references
        if section is None:
            return

        ws = resolve_sheet(wb, section.sheet)
        name_col = section.column_for("name", REFERENCE_DEFAULT_COLUMNS["name"])
        address_col = section.column_for("address", REFERENCE_DEFAULT_COLUMNS["address"])
        phone_col = section.column_for("telephone_no", REFERENCE_DEFAULT_COLUMNS["telephone_no"])

        current_row = section.start_row
        written = 0
        for ref in record.references:
            if current_row > section.end_row:
                break
            name = " ".join(
                part.strip()
                for part in (ref.first_name, ref.middle_initial, ref.surname)
                if part and part.strip()
            )
            write_cell(ws, f"{name_col}{current_row}", name)
            if ref.address:
                write_cell(ws, f"{address_col}{current_row}", ref.address)
            if ref.telephone_no:
                write_cell(ws, f"{phone_col}{current_row}", ref.telephone_no)
            current_row += 1
            written += 1

        record_section(export_log, "references", len(record.references), written)

    def _write_other_information(self, wb: Workbook, record: EmployeeRecord, export_log: ExportLog) -> None:
        config = self.mapping.other_information
        other = record.other_information
        if config is None or other is None:
            return

        ws = resolve_sheet(wb, config.sheet)
        for name, block in config.blocks.items():
            value = getattr(other, name)
            if value is None or str(value) == "":
                continue

            lines = [line.strip() for line in LINE_BREAK_PATTERN.split(str(value).strip())]
            row = block.start_row
            written = 0
            for line in lines:
                if row > block.end_row:
                    break
                write_cell(ws, f"{block.column}{row}", line)
                row += 1
                written += 1

            record_section(export_log, f"other_information.{name}", len(lines), written)

    def _write_questionnaire(self, wb: Workbook, record: EmployeeRecord) -> None:
        if not self.mapping.questionnaire:
            return

        by_number = {}
        for answer in record.questionnaire:
            try:
                by_number[int(answer.question_number)] = answer
            except (TypeError, ValueError):
                logger.debug("Skipping questionnaire answer: question_number=%r", answer.question_number)

        for question in self.mapping.questionnaire:
            entry = by_number.get(question.number)
            ws = resolve_sheet(wb, question.sheet)

            # TRUE/FALSE → 이 셀에 연결된 체크박스가 체크/해제로 표시됨
            answer = bool(entry.answer) if entry else False
            details = str(entry.details).strip() if entry and not is_blank(entry.details) else ""

            if question.answer_cell:
                write_cell(ws, question.answer_cell, answer)
            if question.details_cell and details:
                write_cell(ws, question.details_cell, details)


def export_cs_form_212(
    record: EmployeeRecord,
    mapping: PdsMapping,
    settings: ExportSettings,
) -> Path:
    """
    CS Form 212 워크북 export (편의 함수).

    Returns:
        저장된 파일 경로
    """
    exporter = CsForm212Exporter(mapping, settings)
    return exporter.export(record)


__all__ = [
    "CsForm212Exporter",
    "build_work_experience_rows",
    "export_cs_form_212",
]

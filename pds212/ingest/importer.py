"""
CS Form 212 importer: filled XLSX workbook -> structured payload.

exporter와 같은 PdsMapping을 반대 방향으로 읽음:
- single fields: 선언된 타입으로 변환, 빈 값은 생략
- 가족 배경: 값이 하나라도 있는 relation마다 1건
- 반복 섹션: start_row..end_row 스캔, 빈 row 건너뜀
- 질문지: 답변 셀 또는 상세 셀에 내용이 있으면 YES
"""

import logging
import os
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from pds212.core.values import cast_cell_value, is_blank
from pds212.domain.constants import REPEATING_SECTIONS, SHEET_INDEX
from pds212.domain.errors import ErrorCodes, PolicyRejectError
from pds212.mapping.config import PdsMapping, SectionSpec

logger = logging.getLogger(__name__)

FAMILY_SUBFIELDS = (
    "surname",
    "first_name",
    "middle_name",
    "name_extension",
    "occupation",
    "employer",
    "business_address",
    "telephone_no",
)


class CsForm212Importer:
    """
    업로드된 CS Form 212 워크북에서 매핑된 값 추출.

    Usage:
        importer = CsForm212Importer(mapping)
        payload = importer.extract(Path("pds.xlsx"))
    """

    def __init__(self, mapping: PdsMapping):
        self.mapping = mapping

    def extract(self, xlsx_path: Path) -> dict[str, Any]:
        """
        매핑된 모든 값 추출.

        Args:
            xlsx_path: 업로드된 워크북 경로

        Returns:
            EmployeeRecord.from_dict() 입력과 같은 키의 payload

        Raises:
            PolicyRejectError: IMPORT_FILE_UNREADABLE, IMPORT_FILE_INVALID, IMPORT_NO_SHEETS
        """
        wb = self._load(Path(xlsx_path))
        try:
            payload: dict[str, Any] = self._extract_single_fields(wb)

            family = self._extract_family_background(wb)
            if family:
                payload["family_background"] = family

            if self.mapping.children:
                children = self._extract_table(wb, self.mapping.children)
                if children:
                    payload["children"] = children

            for name in REPEATING_SECTIONS:
                section = self.mapping.section(name)
                if section is None:
                    continue
                table = self._extract_table(wb, section)
                if table:
                    payload[name] = table

            references = self._extract_references(wb)
            if references:
                payload["references"] = references

            other = self._extract_other_information(wb)
            if other:
                payload["other_information"] = other

            questionnaire = self._extract_questionnaire(wb)
            if questionnaire:
                payload["questionnaire"] = questionnaire
                logger.info("Questionnaire data extracted: %d entries", len(questionnaire))
            else:
                logger.warning("No questionnaire data extracted from CS Form 212: path=%s", xlsx_path)
        finally:
            wb.close()

        return payload

    # =========================================================================
    # Loading
    # =========================================================================

    def _load(self, path: Path) -> Workbook:
        if not path.exists():
            raise PolicyRejectError(
                ErrorCodes.IMPORT_FILE_UNREADABLE,
                path=str(path),
                error="Unable to read the uploaded CS Form 212 file.",
            )
        if not os.access(path, os.R_OK):
            raise PolicyRejectError(
                ErrorCodes.IMPORT_FILE_UNREADABLE,
                path=str(path),
                error="The uploaded file is not readable. Please check file permissions.",
            )
        if path.stat().st_size == 0:
            raise PolicyRejectError(
                ErrorCodes.IMPORT_FILE_UNREADABLE,
                path=str(path),
                error="The uploaded file is empty.",
            )

        try:
            wb = load_workbook(path, data_only=True)
        except zipfile.BadZipFile as e:
            logger.error("CS Form 212 workbook is not a valid archive: path=%s error=%s", path, e)
            raise PolicyRejectError(
                ErrorCodes.IMPORT_FILE_INVALID,
                path=str(path),
                error="The Excel file structure is invalid. Please ensure it is a valid .xlsx file.",
            ) from e
        except InvalidFileException as e:
            logger.error("CS Form 212 workbook format not supported: path=%s error=%s", path, e)
            raise PolicyRejectError(
                ErrorCodes.IMPORT_FILE_INVALID,
                path=str(path),
                error="Unsupported file format. Please upload a .xlsx file.",
            ) from e
        except Exception as e:
            logger.error("CS Form 212 workbook could not be read: path=%s error=%s", path, e, exc_info=True)
            raise PolicyRejectError(
                ErrorCodes.IMPORT_FILE_INVALID,
                path=str(path),
                error=(
                    "The Excel file appears to be corrupted or incomplete. "
                    "Please try re-saving the file in Excel and upload again."
                ),
                cause=str(e),
            ) from e

        if not wb.worksheets:
            wb.close()
            raise PolicyRejectError(
                ErrorCodes.IMPORT_NO_SHEETS,
                path=str(path),
                error="The uploaded CS Form 212 file does not contain any readable sheets.",
            )

        return wb

    # =========================================================================
    # Cell access
    # =========================================================================

    def _sheet(self, wb: Workbook, sheet_name: str | None) -> Worksheet | None:
        """정확한 제목 우선, 없으면 표준 위치."""
        name = sheet_name or self.mapping.default_sheet
        if name in wb.sheetnames:
            return wb[name]
        index = SHEET_INDEX.get(name)
        if index is not None and index < len(wb.worksheets):
            return wb.worksheets[index]
        return None

    def _cell(self, wb: Workbook, coordinate: str | None, sheet_name: str | None) -> Any:
        if not coordinate:
            return None
        ws = self._sheet(wb, sheet_name)
        if ws is None:
            return None
        return ws[coordinate].value

    # =========================================================================
    # Sections
    # =========================================================================

    def _extract_single_fields(self, wb: Workbook) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for spec in self.mapping.single_fields:
            value = cast_cell_value(self._cell(wb, spec.cell, spec.sheet), spec.type)
            if value is None or value == "":
                continue
            result[spec.field] = value
        return result

    def _extract_family_background(self, wb: Workbook) -> list[dict[str, Any]]:
        family = []
        for block in self.mapping.family_background:
            person: dict[str, Any] = {"relation": block.relation}
            person.update({name: "" for name in FAMILY_SUBFIELDS})

            for subfield, cell in block.cells.items():
                value = cast_cell_value(self._cell(wb, cell, block.sheet))
                if value is not None:
                    person[subfield] = value

            if any(not is_blank(v) for k, v in person.items() if k != "relation"):
                family.append(person)
        return family

    def _extract_table(self, wb: Workbook, section: SectionSpec) -> list[dict[str, Any]]:
        rows = []
        for row_number in range(section.start_row, section.end_row + 1):
            record: dict[str, Any] = {}
            for subfield, column in section.columns.items():
                raw = None
                for letter in column.columns:
                    candidate = self._cell(wb, f"{letter}{row_number}", section.sheet)
                    if not is_blank(candidate):
                        raw = candidate
                        break
                record[subfield] = cast_cell_value(raw, column.type)

            has_required = True
            if section.required:
                has_required = any(not is_blank(record.get(name)) for name in section.required)

            # boolean은 변환 후 항상 값이 있으므로 row 판정에서 제외
            has_any_value = any(
                not is_blank(value) and not isinstance(value, bool)
                for value in record.values()
            )

            if has_required and has_any_value:
                rows.append(record)
        return rows

    def _extract_references(self, wb: Workbook) -> list[dict[str, Any]]:
        section = self.mapping.references
        if section is None:
            return []
        return [
            {
                "fullname": (row.get("name") or "").strip(),
                "address": row.get("address") or "",
                "telephone_no": row.get("telephone_no") or "",
            }
            for row in self._extract_table(wb, section)
        ]

    def _extract_other_information(self, wb: Workbook) -> dict[str, str]:
        config = self.mapping.other_information
        if config is None:
            return {}

        result = {}
        for name, block in config.blocks.items():
            values = []
            for row in range(block.start_row, block.end_row + 1):
                value = cast_cell_value(self._cell(wb, f"{block.column}{row}", config.sheet))
                if not is_blank(value):
                    values.append(value)
            if values:
                result[name] = "\n".join(values)
        return result

    def _extract_questionnaire(self, wb: Workbook) -> list[dict[str, Any]]:
        entries = []
        for question in self.mapping.questionnaire:
            answer_raw = self._cell(wb, question.answer_cell, question.sheet)
            details_raw = self._cell(wb, question.details_cell, question.sheet)

            # 연결된 체크박스의 명시적 FALSE는 "no"
            has_answer = not is_blank(answer_raw) and answer_raw is not False
            has_details = not is_blank(details_raw)

            logger.debug(
                "Questionnaire extraction: question=%d answer_raw=%r details_raw=%r",
                question.number,
                answer_raw,
                details_raw,
            )

            entries.append({
                "question_number": question.number,
                "answer": has_answer or has_details,
                "details": str(details_raw).strip() if has_details else "",
            })
        return entries


__all__ = ["CsForm212Importer", "FAMILY_SUBFIELDS"]

"""
Workbook helpers: template loading, canonical sheets, sheet resolution, styled writes.

템플릿 정책:
- template_path: 절대 경로 (구분자 또는 드라이브 문자로 시작) 또는 storage_root 기준 상대 경로
- 없음 / 읽기 불가 / 손상 → warning + 빈 워크북 (raise 안 함)
- 시트 4개 미만 → 기존 시트는 위치대로 이름 변경, 나머지는 생성 (C1..C4)
"""

import logging
import os
import re
from copy import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.worksheet.worksheet import Worksheet

from pds212.domain.constants import CANONICAL_SHEETS, CELL_FONT_SIZE, SHEET_INDEX
from pds212.domain.errors import ErrorCodes

logger = logging.getLogger(__name__)

DRIVE_LETTER_PATTERN = re.compile(r"^[A-Za-z]:")


@dataclass
class LoadedWorkbook:
    """load_or_create_workbook() 결과."""
    workbook: Workbook
    template_path: Path | None = None
    template_used: bool = False
    error: str | None = None


def resolve_template_path(template_path: str | None, storage_root: Path) -> Path | None:
    """
    설정된 템플릿 경로 해석.

    Args:
        template_path: 매핑의 'template_path' 값
        storage_root: 상대 경로 기준 디렉토리

    Returns:
        절대 (또는 루트 기준) 경로, 템플릿 미설정 시 None
    """
    if not template_path:
        return None
    if template_path.startswith(("/", "\\", os.sep)) or DRIVE_LETTER_PATTERN.match(template_path):
        return Path(template_path)
    return storage_root / template_path


def load_or_create_workbook(template_path: str | None, storage_root: Path) -> LoadedWorkbook:
    """
    기본 템플릿 열기, 실패 시 빈 표준 워크북 생성.

    템플릿 문제는 로그 후 복구 (잘못된 템플릿으로 raise 안 함).

    Returns:
        표준 시트 수 이상을 가진 워크북의 LoadedWorkbook
    """
    path = resolve_template_path(template_path, storage_root)
    result: LoadedWorkbook | None = None
    error: str | None = None

    if path is not None:
        if path.is_file() and os.access(path, os.R_OK):
            try:
                result = LoadedWorkbook(
                    workbook=load_workbook(path),
                    template_path=path,
                    template_used=True,
                )
            except Exception as e:
                error = str(e) or type(e).__name__
                logger.warning(
                    "[%s] CS Form 212 template could not be loaded, using blank sheet: path=%s error=%s",
                    ErrorCodes.TEMPLATE_LOAD_FAILED,
                    path,
                    error,
                )
        else:
            error = "template file missing or unreadable"
            logger.warning(
                "[%s] CS Form 212 template not found or unreadable, using blank sheet: path=%s",
                ErrorCodes.TEMPLATE_LOAD_FAILED,
                path,
            )

    if result is None:
        wb = Workbook()
        ensure_sheets(wb)
        result = LoadedWorkbook(workbook=wb, template_path=path, error=error)

    if len(result.workbook.worksheets) < len(CANONICAL_SHEETS):
        ensure_sheets(result.workbook)

    return result


def ensure_sheets(wb: Workbook) -> None:
    """기존 시트를 위치대로 C1..C4로 이름 변경, 없는 시트는 생성."""
    existing = len(wb.worksheets)
    for index, name in enumerate(CANONICAL_SHEETS):
        if index < existing:
            wb.worksheets[index].title = name
        else:
            wb.create_sheet(title=name)


def resolve_sheet(wb: Workbook, sheet_name: str) -> Worksheet:
    """
    시트 찾기: 정확한 제목 → 표준 위치 → 첫 번째 시트.
    """
    if sheet_name in wb.sheetnames:
        return wb[sheet_name]

    index = SHEET_INDEX.get(sheet_name, 0)
    if index < len(wb.worksheets):
        return wb.worksheets[index]
    return wb.worksheets[0]


def write_cell(ws: Worksheet, coordinate: str, value: Any) -> None:
    """
    통일된 텍스트 스타일로 셀 값 설정.

    폰트 11, bold 해제, shrink-to-fit (긴 텍스트는 넘치지 않고 축소).
    병합 범위에 쓰면 범위의 anchor 셀에 기록.
    """
    cell = ws[coordinate]
    if isinstance(cell, MergedCell):
        for merged in ws.merged_cells.ranges:
            if coordinate in merged:
                cell = ws.cell(row=merged.min_row, column=merged.min_col)
                break

    cell.value = value

    font = copy(cell.font)
    font.size = CELL_FONT_SIZE
    font.bold = False
    cell.font = font

    alignment = copy(cell.alignment)
    alignment.shrink_to_fit = True
    cell.alignment = alignment

"""
Render layer: CS Form 212 XLSX 출력 생성.

역할:
- 템플릿 (없으면 빈 표준 워크북) + 직원 레코드 → XLSX 파일
- openpyxl
"""

from .exporter import CsForm212Exporter, build_work_experience_rows, export_cs_form_212
from .workbook import ensure_sheets, load_or_create_workbook, resolve_sheet, write_cell

__all__ = [
    "CsForm212Exporter",
    "build_work_experience_rows",
    "export_cs_form_212",
    "ensure_sheets",
    "load_or_create_workbook",
    "resolve_sheet",
    "write_cell",
]

"""
Core layer: ID 생성, 값 정규화, export 로그.
"""

from .ids import build_export_filename, generate_export_token, validate_employee_id
from .logging import complete_export_log, create_export_log, record_section, record_template
from .values import FieldType, cast_cell_value, format_date, is_blank, normalize_for_cell

__all__ = [
    # ids
    "build_export_filename",
    "generate_export_token",
    "validate_employee_id",
    # logging
    "create_export_log",
    "record_template",
    "record_section",
    "complete_export_log",
    # values
    "FieldType",
    "cast_cell_value",
    "format_date",
    "is_blank",
    "normalize_for_cell",
]

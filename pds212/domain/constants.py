"""
Domain Constants: 서비스 전역 상수.

시트 레이아웃, export 파일명 정책, 셀 스타일, MIME 타입.
"""

# =============================================================================
# Canonical Sheet Layout
# =============================================================================
# CS Form No. 212 (개정판)은 4페이지 구성:
# C1 (인적사항, 가족, 학력), C2 (자격, 경력),
# C3 (봉사활동, L&D, 기타 정보), C4 (질문지, 추천인)

CANONICAL_SHEETS = ("C1", "C2", "C3", "C4")
DEFAULT_SHEET = "C1"

# C1..C4 제목이 없는 템플릿은 위치로 찾음
SHEET_INDEX = {"C1": 0, "C2": 1, "C3": 2, "C4": 3}

# =============================================================================
# Cell Styling
# =============================================================================

CELL_FONT_SIZE = 11

# =============================================================================
# Export Filenames
# =============================================================================
# <temp_dir>/cs_form_212_export_<employee_id>_<token>.xlsx

EXPORT_FILENAME_PREFIX = "cs_form_212_export_"
EXPORT_FILENAME_SUFFIX = ".xlsx"
EXPORT_TOKEN_LENGTH = 13
DOWNLOAD_FILENAME_TEMPLATE = "CS_Form_212_{employee_id}.xlsx"

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_AGENCY_NAME = "Eastern Samar State University (Main Campus)"
DEFAULT_EXPORT_RETENTION_HOURS = 24

# 섹션 쓰기/읽기 순서
REPEATING_SECTIONS = (
    "educational_background",
    "civil_service_eligibility",
    "work_experience",
    "voluntary_work",
    "learning_development",
)
OTHER_INFORMATION_FIELDS = (
    "skill_or_hobby",
    "non_academic_distinctions",
    "memberships",
)

# =============================================================================
# MIME Types
# =============================================================================

MIME_TYPES = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}

ALLOWED_IMPORT_EXTENSIONS = (".xlsx",)


def get_mime_type(filename: str) -> str:
    """
    파일명에서 MIME 타입 반환.

    Args:
        filename: 확장자 포함 파일명

    Returns:
        MIME 타입 문자열 (모르면 octet-stream)
    """
    import os

    ext = os.path.splitext(filename)[1].lower()
    return MIME_TYPES.get(ext, "application/octet-stream")

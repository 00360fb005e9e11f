"""
CS Form 212 테스트용 pytest fixtures.

- 프로젝트 설정 (config/pds_map.yaml, config/default.yaml)
- exporter/importer 단위 테스트용 작은 인라인 매핑
- tmp_path 기준 export 설정
- 값이 모두 채워진 직원 레코드
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
import yaml

from pds212.core.settings import ExportSettings
from pds212.domain.schemas import EmployeeRecord
from pds212.mapping.config import PdsMapping, load_mapping

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트."""
    return Path(__file__).parent.parent


@pytest.fixture
def mapping_path(project_root: Path) -> Path:
    """config/pds_map.yaml."""
    return project_root / "config" / "pds_map.yaml"


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """config/default.yaml."""
    with open(project_root / "config" / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Mapping Fixtures
# =============================================================================

@pytest.fixture
def project_mapping(mapping_path: Path) -> PdsMapping:
    """기본 제공 CS Form 212 매핑."""
    return load_mapping(mapping_path)


@pytest.fixture
def mapping_dict() -> dict[str, Any]:
    """
    작은 매핑 문서.

    - C1: 이름, 생년월일, 이중국적, 가족, 자녀, 학력
    - C2: 경력 (18-20행)
    - C3: 봉사활동, L&D, 기타 정보
    - C4: 질문지, 추천인
    """
    return {
        "default_sheet": "C1",
        "template_path": None,
        "single_fields": {
            "surname": {"sheet": "C1", "cell": "D10"},
            "first_name": "D11",
            "birth_date": {"sheet": "C1", "cell": "D13", "type": "date"},
            "dual_citizenship": {"sheet": "C1", "cell": "L13", "type": "boolean"},
            "salary": {"sheet": "C2", "cell": "B2", "type": "numeric"},
        },
        "family_background": [
            {"relation": "Spouse", "sheet": "C1", "cells": {"surname": "D36", "first_name": "D37"}},
            {"relation": "Father", "sheet": "C1", "cells": {"surname": "D43", "first_name": "D44"}},
        ],
        "children": {
            "sheet": "C1",
            "start_row": 37,
            "end_row": 39,
            "columns": {"full_name": "I", "birth_date": {"column": "M", "type": "date"}},
        },
        "repeating_sections": {
            "educational_background": {
                "sheet": "C1",
                "start_row": 54,
                "end_row": 58,
                "required": ["school_name"],
                "columns": {
                    "level": {"columns": ["A", "B"]},
                    "school_name": "D",
                    "period_from": {"column": "J", "type": "date"},
                },
            },
            "work_experience": {
                "sheet": "C2",
                "start_row": 18,
                "end_row": 20,
                "columns": {
                    "date_from": {"column": "A", "type": "date"},
                    "date_to": {"column": "C", "type": "date"},
                    "position_title": "D",
                    "company_name": "G",
                    "monthly_salary": {"column": "J", "type": "numeric"},
                    "status_of_appointment": "L",
                    "is_gov_service": {"column": "M", "type": "boolean"},
                },
            },
            "voluntary_work": {
                "sheet": "C3",
                "start_row": 6,
                "end_row": 8,
                "columns": {"organization_name": "A", "hours_rendered": "G"},
            },
            "learning_development": {
                "sheet": "C3",
                "start_row": 18,
                "end_row": 20,
                "columns": {"title": "A", "hours": "G", "conducted_by": "I"},
            },
            "references": {
                "sheet": "C4",
                "start_row": 52,
                "end_row": 54,
                "columns": {"name": "A", "address": "F", "telephone_no": "G"},
            },
        },
        "other_information": {
            "sheet": "C3",
            "skill_or_hobby": {"column": "A", "start_row": 42, "end_row": 48},
            "memberships": {"column": "I", "start_row": 42},
        },
        "questionnaire": {
            341: {"sheet": "C4", "answer_cell": "G6", "details_cell": "H11"},
            342: {"sheet": "C4", "answer_cell": "G8", "details_cell": "H12"},
            36: {"sheet": "C4", "answer_cell": "G23"},
        },
    }


@pytest.fixture
def mapping(mapping_dict: dict[str, Any]) -> PdsMapping:
    return PdsMapping.from_dict(mapping_dict)


# =============================================================================
# Settings / Record Fixtures
# =============================================================================

@pytest.fixture
def settings(tmp_path: Path) -> ExportSettings:
    """tmp_path 아래 export 설정."""
    return ExportSettings(
        storage_root=tmp_path / "storage",
        temp_dir=tmp_path / "storage" / "app" / "temp",
    )


@pytest.fixture
def employee_data() -> dict[str, Any]:
    """JSON 형태 직원 레코드."""
    return {
        "id": "EMP-001",
        "surname": "Dela Cruz",
        "first_name": "Juan",
        "middle_name": "Santos",
        "birth_date": "1990-05-17",
        "sex": "Male",
        "civil_status": "Married",
        "dual_citizenship": False,
        "employment_status": "Permanent",
        "salary": "35000.00",
        "date_hired": "2015-06-01",
        "family_background": [
            {"relation": "Spouse", "surname": "Dela Cruz", "first_name": "Maria"},
            {"relation": "Father", "surname": "Dela Cruz", "first_name": "Pedro"},
        ],
        "children": [
            {"full_name": "Ana Dela Cruz", "birth_date": "2016-03-02"},
        ],
        "educational_background": [
            {"level": "College", "school_name": "ESSU", "period_from": "2007-06-01"},
        ],
        "work_experience": [
            {
                "position_title": "Instructor I",
                "company_name": "ESSU Guiuan",
                "date_from": "2012-06-01",
                "date_to": "2015-05-31",
                "monthly_salary": "20000",
                "status_of_appointment": "Contractual",
                "is_gov_service": True,
            },
        ],
        "voluntary_work": [
            {"organization_name": "Red Cross", "organization_address": "Borongan", "hours_rendered": 40},
        ],
        "learning_development": [
            {"title": "Data Privacy Seminar", "hours": 8, "conducted_by": "NPC", "type_of_ld": "Technical"},
        ],
        "other_information": {"skill_or_hobby": "Chess\nReading\nHiking", "memberships": "PSITE"},
        "questionnaire": [
            {"question_number": 341, "answer": True, "details": "  Second degree relative  "},
        ],
        "references": [
            {"first_name": "Jose", "middle_initial": "P.", "surname": "Rizal", "address": "Calamba", "telephone_no": "0917"},
        ],
        "primary_designation": {"position_title": "Assistant Professor I", "unit_name": "CCS"},
    }


@pytest.fixture
def employee(employee_data: dict[str, Any]) -> EmployeeRecord:
    return EmployeeRecord.from_dict(employee_data)


@pytest.fixture
def empty_employee() -> EmployeeRecord:
    """id 외에 값이 없는 레코드."""
    return EmployeeRecord(id="EMP-EMPTY")


@pytest.fixture
def typed_employee() -> EmployeeRecord:
    """문자열 대신 date / Decimal 객체를 가진 레코드."""
    return EmployeeRecord(
        id="EMP-002",
        surname="Reyes",
        birth_date=date(1985, 12, 1),
        salary=Decimal("41000.50"),
        date_hired=date(2010, 1, 4),
    )

"""
Data schemas for employee records.

규칙:
- 필드명 = 매핑 설정 키 (pds_map.yaml)
- 날짜는 받은 그대로 보관 (date, datetime, ISO-8601 문자열)
  출력 포맷은 렌더링 단계에서 결정
- export 중 레코드는 읽기 전용
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, TypeVar

DateLike = date | datetime | str

T = TypeVar("T")


def _json_value(value: Any) -> Any:
    """JSON 직렬화 가능한 스칼라 (date → ISO 문자열, Decimal → str)."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def _build(cls: type[T], data: dict[str, Any] | None) -> T:
    """
    dict → dataclass 생성 (모르는 키는 무시).

    Raises:
        TypeError: data가 dict가 아님
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"{cls.__name__} expects an object, got {type(data).__name__}")
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    return cls(**{k: v for k, v in data.items() if k in known})


class _Row:
    """관련 레코드 dataclass 공통 row 헬퍼."""

    def to_row(self) -> dict[str, Any]:
        """원본 값 그대로의 필드 dict (exporter용)."""
        return {f.name: getattr(self, f.name) for f in fields(self)}  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화."""
        return {k: _json_value(v) for k, v in self.to_row().items()}


# =============================================================================
# Related Records
# =============================================================================

@dataclass
class FamilyMember(_Row):
    """배우자/부/모 블록 (relation으로 구분)."""
    relation: str  # Spouse, Father, Mother
    surname: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    name_extension: str | None = None
    occupation: str | None = None
    employer: str | None = None
    business_address: str | None = None
    telephone_no: str | None = None


@dataclass
class Child(_Row):
    full_name: str | None = None
    birth_date: DateLike | None = None


@dataclass
class EducationalBackground(_Row):
    level: str | None = None  # Elementary, Secondary, Vocational, College, Graduate Studies
    school_name: str | None = None
    degree_course: str | None = None
    period_from: DateLike | None = None
    period_to: DateLike | None = None
    highest_level_units: str | None = None
    year_graduated: int | str | None = None
    honors_received: str | None = None


@dataclass
class CivilServiceEligibility(_Row):
    eligibility: str | None = None
    rating: str | None = None
    exam_date: DateLike | None = None
    exam_place: str | None = None
    license_no: str | None = None
    license_validity: DateLike | None = None


@dataclass
class WorkExperience(_Row):
    position_title: str | None = None
    company_name: str | None = None
    company_address: str | None = None
    date_from: DateLike | None = None
    date_to: DateLike | None = None
    monthly_salary: Decimal | float | str | None = None
    salary_grade_step: str | None = None
    status_of_appointment: str | None = None
    is_gov_service: bool | None = None


@dataclass
class VoluntaryWork(_Row):
    organization_name: str | None = None
    organization_address: str | None = None
    date_from: DateLike | None = None
    date_to: DateLike | None = None
    hours_rendered: int | None = None
    position_or_nature: str | None = None


@dataclass
class LearningDevelopment(_Row):
    title: str | None = None
    date_from: DateLike | None = None
    date_to: DateLike | None = None
    hours: int | None = None
    type_of_ld: str | None = None  # Managerial, Supervisory, Technical
    conducted_by: str | None = None


@dataclass
class OtherInformation(_Row):
    """자유 텍스트 블록 (한 줄 = 한 항목)."""
    skill_or_hobby: str | None = None
    non_academic_distinctions: str | None = None
    memberships: str | None = None


@dataclass
class QuestionnaireAnswer(_Row):
    question_number: int
    answer: bool = False
    details: str | None = None


@dataclass
class Reference(_Row):
    first_name: str | None = None
    middle_initial: str | None = None
    surname: str | None = None
    address: str | None = None
    telephone_no: str | None = None


@dataclass
class Designation(_Row):
    """현재 (primary) 보직: 직위 + 부서."""
    position_title: str | None = None
    unit_name: str | None = None
    start_date: DateLike | None = None
    end_date: DateLike | None = None


# =============================================================================
# Employee Record
# =============================================================================

# 관련 컬렉션: 속성명 -> 항목 타입
RELATED_COLLECTIONS: dict[str, type] = {
    "family_background": FamilyMember,
    "children": Child,
    "educational_background": EducationalBackground,
    "civil_service_eligibility": CivilServiceEligibility,
    "work_experience": WorkExperience,
    "voluntary_work": VoluntaryWork,
    "learning_development": LearningDevelopment,
    "questionnaire": QuestionnaireAnswer,
    "references": Reference,
}


@dataclass
class EmployeeRecord:
    """
    직원 레코드 + 관련 컬렉션.

    스칼라 필드명 = 매핑의 single_fields 키
    매핑 로더가 scalar_field_names()로 검증
    """
    id: str

    # === Name ===
    surname: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    name_extension: str | None = None

    # === Personal ===
    birth_date: DateLike | None = None
    birth_place: str | None = None
    sex: str | None = None
    civil_status: str | None = None
    height_m: Decimal | float | None = None
    weight_kg: Decimal | float | None = None
    blood_type: str | None = None

    # === Government IDs ===
    gsis_id_no: str | None = None
    pagibig_id_no: str | None = None
    philhealth_no: str | None = None
    sss_no: str | None = None
    tin_no: str | None = None
    agency_employee_no: str | None = None

    # === Citizenship ===
    citizenship: str | None = None
    dual_citizenship: bool | None = None
    citizenship_type: str | None = None  # by birth, by naturalization
    dual_citizenship_country: str | None = None

    # === Residential Address ===
    res_house_no: str | None = None
    res_street: str | None = None
    res_subdivision: str | None = None
    res_barangay: str | None = None
    res_city: str | None = None
    res_province: str | None = None
    res_zip_code: str | None = None

    # === Permanent Address ===
    perm_house_no: str | None = None
    perm_street: str | None = None
    perm_subdivision: str | None = None
    perm_barangay: str | None = None
    perm_city: str | None = None
    perm_province: str | None = None
    perm_zip_code: str | None = None

    # === Contact ===
    telephone_no: str | None = None
    mobile_no: str | None = None
    email_address: str | None = None

    # === Identification (C4) ===
    government_issued_id: str | None = None
    id_number: str | None = None
    id_date_issued: DateLike | None = None
    id_place_of_issue: str | None = None
    indigenous_group: str | None = None
    pwd_id_no: str | None = None
    solo_parent_id_no: str | None = None

    # === Employment ===
    status: str | None = None  # active, inactive, on-leave
    employment_status: str | None = None  # Permanent, Casual, Contractual, Job Order
    employee_type: str | None = None  # Teaching, Non-Teaching
    salary: Decimal | float | None = None
    date_hired: DateLike | None = None
    date_regularized: DateLike | None = None

    # === Related ===
    family_background: list[FamilyMember] = field(default_factory=list)
    children: list[Child] = field(default_factory=list)
    educational_background: list[EducationalBackground] = field(default_factory=list)
    civil_service_eligibility: list[CivilServiceEligibility] = field(default_factory=list)
    work_experience: list[WorkExperience] = field(default_factory=list)
    voluntary_work: list[VoluntaryWork] = field(default_factory=list)
    learning_development: list[LearningDevelopment] = field(default_factory=list)
    other_information: OtherInformation | None = None
    questionnaire: list[QuestionnaireAnswer] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)
    primary_designation: Designation | None = None

    @classmethod
    def scalar_field_names(cls) -> frozenset[str]:
        """single field로 읽을 수 있는 이름."""
        related = set(RELATED_COLLECTIONS) | {"other_information", "primary_designation"}
        return frozenset(f.name for f in fields(cls) if f.name not in related)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmployeeRecord":
        """
        JSON 호환 dict에서 생성 (모르는 키는 무시).

        Raises:
            TypeError: 관련 컬렉션/레코드 형태가 잘못됨
        """
        scalars = {k: v for k, v in data.items() if k in cls.scalar_field_names()}
        record = cls(**scalars)

        for name, item_type in RELATED_COLLECTIONS.items():
            items = data.get(name) or []
            setattr(record, name, [_build(item_type, item) for item in items])

        if data.get("other_information"):
            record.other_information = _build(OtherInformation, data["other_information"])
        if data.get("primary_designation"):
            record.primary_designation = _build(Designation, data["primary_designation"])

        return record

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화."""
        result: dict[str, Any] = {
            name: _json_value(getattr(self, name))
            for name in sorted(self.scalar_field_names())
        }
        for name in RELATED_COLLECTIONS:
            result[name] = [item.to_dict() for item in getattr(self, name)]
        result["other_information"] = (
            self.other_information.to_dict() if self.other_information else None
        )
        result["primary_designation"] = (
            self.primary_designation.to_dict() if self.primary_designation else None
        )
        return result


# =============================================================================
# Export Log Schemas
# =============================================================================

@dataclass
class SectionLog:
    """반복 섹션 또는 자유 텍스트 섹션 하나의 기록/누락 row 수."""
    section: str
    rows_available: int = 0
    rows_written: int = 0
    rows_dropped: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section,
            "rows_available": self.rows_available,
            "rows_written": self.rows_written,
            "rows_dropped": self.rows_dropped,
        }


@dataclass
class ExportLog:
    """
    export 호출 1회 기록.

    end_row를 넘어 잘린 row는 raise 대신 여기서 집계
    → export 동작 변경 없이 overflow 검토 가능
    """
    export_id: str
    employee_id: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    template_path: str | None = None
    template_used: bool = False
    template_error: str | None = None

    sections: list[SectionLog] = field(default_factory=list)
    output_path: str | None = None
    error_code: str | None = None

    @property
    def rows_dropped(self) -> int:
        return sum(s.rows_dropped for s in self.sections)

    def to_dict(self) -> dict[str, Any]:
        return {
            "export_id": self.export_id,
            "employee_id": self.employee_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "template_path": self.template_path,
            "template_used": self.template_used,
            "template_error": self.template_error,
            "sections": [s.to_dict() for s in self.sections],
            "output_path": self.output_path,
            "error_code": self.error_code,
        }

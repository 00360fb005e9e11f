"""
Mapping configuration: where each logical field lands on the CS Form 212 grid.

pds_map.yaml을 한 번 로드해 frozen dataclass로 파싱.
exporter/importer는 생성 시 PdsMapping 인스턴스를 받음.
로드 후 dict 필드는 MappingProxyType (읽기 전용).

항목 종류:
- single field:          field -> {sheet, cell, type}
- fixed-relation block:  family_background[] -> {relation, sheet, cells}
- repeating section:     {sheet, start_row, end_row, columns, required}
- bounded free text:     other_information.<field> -> {column, start_row, end_row}
- fixed-answer block:    questionnaire.<number> -> {sheet, answer_cell, details_cell}
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from pds212.core.values import FieldType
from pds212.domain.constants import DEFAULT_SHEET, OTHER_INFORMATION_FIELDS
from pds212.domain.errors import ErrorCodes, MappingError
from pds212.domain.schemas import EmployeeRecord

CELL_PATTERN = re.compile(r"^[A-Z]{1,3}[1-9][0-9]*$")
COLUMN_PATTERN = re.compile(r"^[A-Z]{1,3}$")


# =============================================================================
# Specs
# =============================================================================

@dataclass(frozen=True)
class ColumnSpec:
    """row 하위 필드의 후보 컬럼 (export는 첫 번째 사용)."""
    columns: tuple[str, ...]
    type: FieldType = FieldType.STRING

    @property
    def first(self) -> str:
        return self.columns[0]


@dataclass(frozen=True)
class SingleFieldSpec:
    field: str
    sheet: str
    cell: str
    type: FieldType = FieldType.STRING


@dataclass(frozen=True)
class RelationBlockSpec:
    """구분값 (relation)으로 선택되는 관련 레코드 1건의 셀."""
    relation: str
    sheet: str
    cells: Mapping[str, str]


@dataclass(frozen=True)
class SectionSpec:
    """start_row..end_row 행에 배치되는 반복 섹션."""
    name: str
    sheet: str
    start_row: int
    end_row: int
    columns: Mapping[str, ColumnSpec]
    required: tuple[str, ...] = ()

    @property
    def capacity(self) -> int:
        """범위 내 사용 가능한 row 수."""
        return max(self.end_row - self.start_row + 1, 0)

    def column_for(self, subfield: str, default: str) -> str:
        spec = self.columns.get(subfield)
        return spec.first if spec else default


@dataclass(frozen=True)
class TextBlockSpec:
    """한 컬럼 안에서 한 줄씩 row에 나눠 쓰는 자유 텍스트."""
    field: str
    column: str
    start_row: int
    end_row: int


@dataclass(frozen=True)
class OtherInformationSpec:
    sheet: str
    blocks: Mapping[str, TextBlockSpec]


@dataclass(frozen=True)
class QuestionSpec:
    number: int
    sheet: str
    answer_cell: str | None = None
    details_cell: str | None = None


@dataclass(frozen=True)
class PdsMapping:
    """파싱 완료된 불변 매핑 설정."""
    default_sheet: str = DEFAULT_SHEET
    template_path: str | None = None
    single_fields: tuple[SingleFieldSpec, ...] = ()
    family_background: tuple[RelationBlockSpec, ...] = ()
    children: SectionSpec | None = None
    sections: Mapping[str, SectionSpec] = field(default_factory=lambda: MappingProxyType({}))
    other_information: OtherInformationSpec | None = None
    questionnaire: tuple[QuestionSpec, ...] = ()

    def section(self, name: str) -> SectionSpec | None:
        return self.sections.get(name)

    @property
    def references(self) -> SectionSpec | None:
        return self.sections.get("references")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PdsMapping":
        """
        원본 매핑 문서 파싱.

        Args:
            data: 중첩 dict (예: pds_map.yaml의 yaml.safe_load 결과)

        Raises:
            MappingError: MAPPING_INVALID
        """
        if not isinstance(data, dict):
            raise MappingError(
                ErrorCodes.MAPPING_INVALID,
                error="mapping document must be a mapping",
                got=type(data).__name__,
            )

        default_sheet = str(data.get("default_sheet") or DEFAULT_SHEET)
        parser = _Parser(default_sheet)

        sections: dict[str, SectionSpec] = {}
        raw_sections = _require_dict(data.get("repeating_sections") or {}, where="repeating_sections")
        for name, raw in raw_sections.items():
            section = parser.section(str(name), raw)
            if section:
                sections[section.name] = section

        # 최상위 'references' 도 별칭으로 허용
        if "references" not in sections and data.get("references"):
            section = parser.section("references", data["references"])
            if section:
                sections["references"] = section

        return cls(
            default_sheet=default_sheet,
            template_path=data.get("template_path") or None,
            single_fields=parser.single_fields(data.get("single_fields") or {}),
            family_background=parser.family_background(data.get("family_background") or []),
            children=parser.section("children", data.get("children")),
            sections=MappingProxyType(sections),
            other_information=parser.other_information(data.get("other_information")),
            questionnaire=parser.questionnaire(data.get("questionnaire") or {}),
        )


# =============================================================================
# Parsing
# =============================================================================

class _Parser:
    """원본 매핑 항목 정규화 (셀 대문자화, 기본값, 타입)."""

    def __init__(self, default_sheet: str) -> None:
        self.default_sheet = default_sheet

    def single_fields(self, raw: Any) -> tuple[SingleFieldSpec, ...]:
        raw = _require_dict(raw, where="single_fields")
        known = EmployeeRecord.scalar_field_names()
        unknown = sorted(str(name) for name in raw if name not in known)
        if unknown:
            raise MappingError(
                ErrorCodes.MAPPING_INVALID,
                error="single_fields reference unknown record fields",
                fields=unknown,
            )

        specs = []
        for name, definition in raw.items():
            if isinstance(definition, str):
                definition = {"cell": definition}
            if not isinstance(definition, dict):
                raise MappingError(ErrorCodes.MAPPING_INVALID, field=name, error="bad definition")
            specs.append(
                SingleFieldSpec(
                    field=name,
                    sheet=str(definition.get("sheet") or self.default_sheet),
                    cell=self._cell(definition.get("cell"), where=f"single_fields.{name}"),
                    type=self._type(definition.get("type"), where=f"single_fields.{name}"),
                )
            )
        return tuple(specs)

    def family_background(self, raw: Any) -> tuple[RelationBlockSpec, ...]:
        if not isinstance(raw, list):
            raise MappingError(ErrorCodes.MAPPING_INVALID, where="family_background", error="expected a list")
        specs = []
        for definition in raw:
            if not isinstance(definition, dict):
                continue
            relation = definition.get("relation")
            cells = definition.get("cells") or {}
            if not relation or not cells:
                continue
            cells = _require_dict(cells, where=f"family_background.{relation}.cells")
            specs.append(
                RelationBlockSpec(
                    relation=str(relation),
                    sheet=str(definition.get("sheet") or self.default_sheet),
                    cells=MappingProxyType({
                        str(sub): self._cell(cell, where=f"family_background.{relation}.{sub}")
                        for sub, cell in cells.items()
                    }),
                )
            )
        return tuple(specs)

    def section(self, name: str, raw: Any) -> SectionSpec | None:
        if not isinstance(raw, dict) or not raw.get("columns"):
            return None
        raw_columns = _require_dict(raw["columns"], where=f"{name}.columns")
        columns = {
            str(sub): self._column_spec(definition, where=f"{name}.{sub}")
            for sub, definition in raw_columns.items()
        }
        start_row, end_row = self._row_range(raw.get("start_row"), raw.get("end_row"), where=name)
        return SectionSpec(
            name=name,
            sheet=str(raw.get("sheet") or self.default_sheet),
            start_row=start_row,
            end_row=end_row,
            columns=MappingProxyType(columns),
            required=tuple(str(r) for r in raw.get("required") or ()),
        )

    def other_information(self, raw: Any) -> OtherInformationSpec | None:
        if not isinstance(raw, dict) or not raw:
            return None
        blocks = {}
        for name in OTHER_INFORMATION_FIELDS:
            definition = raw.get(name)
            if not isinstance(definition, dict):
                continue
            if "column" not in definition or "start_row" not in definition:
                continue
            # end_row 생략 시 한 줄 블록
            end_row = definition.get("end_row", definition["start_row"])
            start_row, end_row = self._row_range(
                definition["start_row"], end_row, where=f"other_information.{name}"
            )
            blocks[name] = TextBlockSpec(
                field=name,
                column=self._column(definition["column"], where=f"other_information.{name}"),
                start_row=start_row,
                end_row=end_row,
            )
        return OtherInformationSpec(
            sheet=str(raw.get("sheet") or self.default_sheet),
            blocks=MappingProxyType(blocks),
        )

    def questionnaire(self, raw: Any) -> tuple[QuestionSpec, ...]:
        raw = _require_dict(raw, where="questionnaire")
        specs = []
        for key, cells in raw.items():
            try:
                number = int(str(key).strip())
            except ValueError:
                continue
            cells = _require_dict(cells or {}, where=f"questionnaire.{key}")
            answer_cell = cells.get("answer_cell")
            details_cell = cells.get("details_cell")
            specs.append(
                QuestionSpec(
                    number=number,
                    sheet=str(cells.get("sheet") or self.default_sheet),
                    answer_cell=self._cell(answer_cell, where=f"questionnaire.{key}") if answer_cell else None,
                    details_cell=self._cell(details_cell, where=f"questionnaire.{key}") if details_cell else None,
                )
            )
        return tuple(specs)

    # --- scalars -------------------------------------------------------------

    def _column_spec(self, definition: Any, where: str) -> ColumnSpec:
        if not isinstance(definition, dict):
            definition = {"column": definition}
        raw_columns = definition.get("columns", definition.get("column"))
        if not isinstance(raw_columns, (list, tuple)):
            raw_columns = [raw_columns]
        columns = tuple(self._column(c, where=where) for c in raw_columns if c)
        if not columns:
            columns = ("A",)
        return ColumnSpec(columns=columns, type=self._type(definition.get("type"), where=where))

    @staticmethod
    def _cell(value: Any, where: str) -> str:
        cell = str(value or "").strip().upper()
        if not CELL_PATTERN.match(cell):
            raise MappingError(ErrorCodes.MAPPING_INVALID, where=where, cell=value)
        return cell

    @staticmethod
    def _column(value: Any, where: str) -> str:
        column = str(value or "").strip().upper()
        if not COLUMN_PATTERN.match(column):
            raise MappingError(ErrorCodes.MAPPING_INVALID, where=where, column=value)
        return column

    @staticmethod
    def _row(value: Any, where: str) -> int:
        """시트 row 번호 (1부터)."""
        if value is None or isinstance(value, bool):
            raise MappingError(ErrorCodes.MAPPING_INVALID, where=where, row=value)
        try:
            row = int(value)
        except (TypeError, ValueError):
            raise MappingError(ErrorCodes.MAPPING_INVALID, where=where, row=value) from None
        if row < 1:
            raise MappingError(ErrorCodes.MAPPING_INVALID, where=where, row=value)
        return row

    def _row_range(self, start: Any, end: Any, where: str) -> tuple[int, int]:
        start_row = self._row(start, where=f"{where}.start_row")
        end_row = self._row(end, where=f"{where}.end_row")
        if end_row < start_row:
            raise MappingError(
                ErrorCodes.MAPPING_INVALID,
                where=where,
                error="end_row is before start_row",
                start_row=start_row,
                end_row=end_row,
            )
        return start_row, end_row

    @staticmethod
    def _type(value: Any, where: str) -> FieldType:
        try:
            return FieldType.parse(value)
        except ValueError:
            raise MappingError(ErrorCodes.MAPPING_INVALID, where=where, type=value) from None


def _require_dict(value: Any, where: str) -> dict[Any, Any]:
    if not isinstance(value, dict):
        raise MappingError(
            ErrorCodes.MAPPING_INVALID,
            where=where,
            error="expected a mapping",
            got=type(value).__name__,
        )
    return value


# =============================================================================
# Loading
# =============================================================================

def load_mapping(mapping_path: Path) -> PdsMapping:
    """
    pds_map.yaml 로드.

    Args:
        mapping_path: 매핑 YAML 경로

    Returns:
        파싱된 PdsMapping

    Raises:
        MappingError: MAPPING_NOT_FOUND, MAPPING_INVALID
    """
    if not mapping_path.exists():
        raise MappingError(ErrorCodes.MAPPING_NOT_FOUND, path=str(mapping_path))

    with open(mapping_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MappingError(
                ErrorCodes.MAPPING_INVALID,
                path=str(mapping_path),
                error=str(e),
            ) from e

    return PdsMapping.from_dict(data or {})

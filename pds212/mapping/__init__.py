"""Mapping layer: CS Form 212 셀 매핑 (불변)."""

from .config import (
    ColumnSpec,
    OtherInformationSpec,
    PdsMapping,
    QuestionSpec,
    RelationBlockSpec,
    SectionSpec,
    SingleFieldSpec,
    TextBlockSpec,
    load_mapping,
)

__all__ = [
    "ColumnSpec",
    "OtherInformationSpec",
    "PdsMapping",
    "QuestionSpec",
    "RelationBlockSpec",
    "SectionSpec",
    "SingleFieldSpec",
    "TextBlockSpec",
    "load_mapping",
]

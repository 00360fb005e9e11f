"""Domain layer: 에러, 상수, 스키마."""

from .errors import ErrorCodes, ExportDirectoryError, MappingError, PolicyRejectError
from .schemas import (
    Designation,
    EmployeeRecord,
    FamilyMember,
    QuestionnaireAnswer,
    WorkExperience,
)

__all__ = [
    "ErrorCodes",
    "ExportDirectoryError",
    "MappingError",
    "PolicyRejectError",
    "Designation",
    "EmployeeRecord",
    "FamilyMember",
    "QuestionnaireAnswer",
    "WorkExperience",
]

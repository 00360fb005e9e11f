"""
Store layer: 직원 레코드 JSON 저장소.
"""

from .employees import EmployeeStore

__all__ = ["EmployeeStore"]

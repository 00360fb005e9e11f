"""
FastAPI Routes.

API 라우트만 (HTML 페이지 없음).
"""

from . import employees

__all__ = ["employees"]

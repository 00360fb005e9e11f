"""
HTTP 계층: FastAPI 애플리케이션 + 라우트.
"""

"""
pds212: CS Form No. 212 (Personal Data Sheet) export/import 서비스.

레이어:
- domain/  에러, 상수, 직원 레코드 스키마
- core/    ID, 값 정규화, export 실행 로그
- mapping/ 불변 셀 매핑 설정
- render/  워크북 헬퍼 + CsForm212Exporter (openpyxl)
- ingest/  CsForm212Importer (XLSX -> payload)
- store/   JSON 파일 기반 직원 레코드
- app/     FastAPI 애플리케이션
"""

__version__ = "0.1.0"

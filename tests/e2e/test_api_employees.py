"""
test_api_employees.py - Employees API E2E 테스트

Endpoints:
- GET  /health
- GET  /api/employees/{employee_id}/export/cs-form-212
- POST /api/employees/import/cs-form-212
"""

import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from pds212.app.main import app, configure_app
from pds212.core.settings import ExportSettings

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def client(tmp_path: Path, mapping_path: Path, employee):
    """tmp_path 저장소 + 직원 1명이 저장된 TestClient."""
    config = {
        "paths": {
            "storage_root": str(tmp_path / "storage"),
            "temp_dir": str(tmp_path / "storage" / "app" / "temp"),
            "employees_dir": str(tmp_path / "storage" / "employees"),
            "mapping": str(mapping_path),
        },
    }
    configure_app(app, config)
    app.state.store.save(employee)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def temp_dir() -> Path:
    return app.state.settings.temp_dir


# =============================================================================
# Health
# =============================================================================


class TestHealth:
    """GET /health."""

    def test_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


# =============================================================================
# Export
# =============================================================================


class TestExportEndpoint:
    """GET /api/employees/{employee_id}/export/cs-form-212."""

    def test_download(self, client):
        response = client.get("/api/employees/EMP-001/export/cs-form-212")

        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MIME
        assert "CS_Form_212_EMP-001.xlsx" in response.headers["content-disposition"]

        wb = load_workbook(io.BytesIO(response.content))
        assert wb.sheetnames == ["C1", "C2", "C3", "C4"]
        assert wb["C1"]["D10"].value == "Dela Cruz"

    def test_temp_file_removed_after_send(self, client, temp_dir):
        client.get("/api/employees/EMP-001/export/cs-form-212")

        assert list(temp_dir.glob("cs_form_212_export_*.xlsx")) == []

    def test_unknown_employee(self, client):
        response = client.get("/api/employees/EMP-404/export/cs-form-212")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "EMPLOYEE_NOT_FOUND"

    def test_invalid_employee_id(self, client):
        response = client.get("/api/employees/bad$id/export/cs-form-212")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "INVALID_EMPLOYEE_ID"

    def test_export_dir_unavailable(self, client, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        app.state.settings = ExportSettings(storage_root=tmp_path, temp_dir=blocker / "temp")

        response = client.get("/api/employees/EMP-001/export/cs-form-212")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "EXPORT_DIR_UNAVAILABLE"


# =============================================================================
# Import
# =============================================================================


class TestImportEndpoint:
    """POST /api/employees/import/cs-form-212."""

    def test_import_exported_workbook(self, client):
        exported = client.get("/api/employees/EMP-001/export/cs-form-212").content

        response = client.post(
            "/api/employees/import/cs-form-212",
            files={"file": ("pds.xlsx", exported, XLSX_MIME)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["surname"] == "Dela Cruz"
        assert body["data"]["children"][0]["full_name"] == "Ana Dela Cruz"
        assert len(body["data"]["questionnaire"]) == 12

    def test_upload_removed(self, client, temp_dir):
        exported = client.get("/api/employees/EMP-001/export/cs-form-212").content

        client.post(
            "/api/employees/import/cs-form-212",
            files={"file": ("pds.xlsx", exported, XLSX_MIME)},
        )

        assert list(temp_dir.glob("cs_form_212_import_*")) == []

    def test_wrong_extension(self, client):
        response = client.post(
            "/api/employees/import/cs-form-212",
            files={"file": ("pds.csv", b"a,b,c", "text/csv")},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_FILE_TYPE"

    def test_corrupt_workbook(self, client, temp_dir):
        response = client.post(
            "/api/employees/import/cs-form-212",
            files={"file": ("pds.xlsx", b"PK\x03\x04fake xlsx content", XLSX_MIME)},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "IMPORT_FILE_INVALID"
        assert list(temp_dir.glob("cs_form_212_import_*")) == []

    def test_empty_upload(self, client):
        response = client.post(
            "/api/employees/import/cs-form-212",
            files={"file": ("pds.xlsx", b"", XLSX_MIME)},
        )

        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "IMPORT_FILE_UNREADABLE"

"""
Employee Routes: CS Form 212 export download and import upload.

- GET  /api/employees/<employee_id>/export/cs-form-212 → XLSX download
- POST /api/employees/import/cs-form-212               → extracted payload
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from pds212.domain.constants import (
    ALLOWED_IMPORT_EXTENSIONS,
    DOWNLOAD_FILENAME_TEMPLATE,
    get_mime_type,
)
from pds212.domain.errors import ErrorCodes, ExportDirectoryError, PolicyRejectError
from pds212.ingest.importer import CsForm212Importer
from pds212.render.exporter import CsForm212Exporter

logger = logging.getLogger(__name__)

api_router = APIRouter()

# PolicyRejectError 코드 -> HTTP status
STATUS_BY_CODE = {
    ErrorCodes.EMPLOYEE_NOT_FOUND: 404,
    ErrorCodes.INVALID_EMPLOYEE_ID: 404,
    ErrorCodes.EMPLOYEE_RECORD_CORRUPT: 500,
}


def _remove_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove temp file %s: %s", path, e)


def _error_detail(e: PolicyRejectError) -> dict[str, Any]:
    return {"code": e.code, "message": str(e.context.get("error") or e)}


# =============================================================================
# Export
# =============================================================================

@api_router.get("/{employee_id}/export/cs-form-212")
async def export_cs_form_212(
    request: Request,
    employee_id: str,
) -> FileResponse:
    """직원 1명의 CS Form 212 워크북 작성 후 다운로드."""
    store = request.app.state.store

    try:
        record = store.get(employee_id)
    except PolicyRejectError as e:
        raise HTTPException(
            status_code=STATUS_BY_CODE.get(e.code, 400),
            detail=_error_detail(e),
        ) from e

    exporter = CsForm212Exporter(request.app.state.mapping, request.app.state.settings)
    try:
        output_path = exporter.export(record)
    except ExportDirectoryError as e:
        logger.error("CS Form 212 export failed: employee=%s error=%s", employee_id, e)
        raise HTTPException(
            status_code=500,
            detail={"code": e.code, "message": "Failed to generate CS Form 212."},
        ) from e

    download_name = DOWNLOAD_FILENAME_TEMPLATE.format(employee_id=employee_id)
    return FileResponse(
        path=output_path,
        filename=download_name,
        media_type=get_mime_type(download_name),
        background=BackgroundTask(_remove_file, output_path),
    )


# =============================================================================
# Import
# =============================================================================

@api_router.post("/import/cs-form-212")
async def import_cs_form_212(
    request: Request,
    file: UploadFile = File(...),
) -> dict[str, Any]:
    """
    작성된 CS Form 212 워크북 추출.

    업로드 파일은 temp dir에 저장 후 읽고, 항상 삭제.
    """
    filename = file.filename or ""
    if os.path.splitext(filename)[1].lower() not in ALLOWED_IMPORT_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail={
                "code": "INVALID_FILE_TYPE",
                "message": "Only .xlsx files are accepted.",
            },
        )

    temp_dir: Path = request.app.state.settings.temp_dir
    temp_dir.mkdir(parents=True, exist_ok=True)

    file_bytes = await file.read()
    fd, name = tempfile.mkstemp(prefix="cs_form_212_import_", suffix=".xlsx", dir=temp_dir)
    upload_path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(file_bytes)

        importer = CsForm212Importer(request.app.state.mapping)
        payload = importer.extract(upload_path)
    except PolicyRejectError as e:
        logger.warning("CS Form 212 import rejected: file=%s code=%s", filename, e.code)
        raise HTTPException(status_code=422, detail=_error_detail(e)) from e
    finally:
        _remove_file(upload_path)

    logger.info("CS Form 212 imported: file=%s fields=%d", filename, len(payload))
    return {"success": True, "data": payload}

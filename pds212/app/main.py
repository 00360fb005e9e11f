"""
FastAPI application entry point.

Run:
- 개발: uvicorn pds212.app.main:app --reload
- 운영: uvicorn pds212.app.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI

from pds212 import __version__
from pds212.app.routes import employees
from pds212.core.settings import (
    PROJECT_ROOT,
    ExportSettings,
    load_config,
    resolve_config_path,
)
from pds212.mapping.config import load_mapping
from pds212.store.employees import EmployeeStore

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

def configure_app(app: FastAPI, config: dict[str, Any], base_dir: Path = PROJECT_ROOT) -> None:
    """
    default.yaml 내용으로 app.state 설정.

    설정 항목: config, settings, mapping, store
    """
    app.state.config = config
    app.state.settings = ExportSettings.from_config(config, base_dir)
    app.state.mapping = load_mapping(
        resolve_config_path(config, "mapping", "config/pds_map.yaml", base_dir)
    )
    app.state.store = EmployeeStore(
        resolve_config_path(config, "employees_dir", "storage/employees", base_dir)
    )


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: config, mapping, store 로드.

    이미 설정된 state (예: 테스트)는 건드리지 않음.
    """
    if getattr(app.state, "mapping", None) is None:
        configure_app(app, load_config())
        logger.info(
            "CS Form 212 service configured: temp_dir=%s template=%s",
            app.state.settings.temp_dir,
            app.state.mapping.template_path,
        )

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="CS Form 212 Service",
    description="Employee record <-> Personal Data Sheet (CS Form No. 212) workbooks",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(employees.api_router, prefix="/api/employees", tags=["Employees API"])


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pds212.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )

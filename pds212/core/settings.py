"""
Settings: default.yaml 로드 + export 설정.

default.yaml:
    paths:
      storage_root: storage
      temp_dir: storage/app/temp
      employees_dir: storage/employees
      mapping: config/pds_map.yaml
    exports:
      agency_name: ...
      retention_hours: 24

상대 경로는 프로젝트 루트 기준으로 해석.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from pds212.domain.constants import DEFAULT_AGENCY_NAME, DEFAULT_EXPORT_RETENTION_HOURS

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "default.yaml"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """default.yaml 로드 (없으면 {})."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}
        return data


def _resolve(base: Path, value: str | None, default: str) -> Path:
    path = Path(value or default)
    return path if path.is_absolute() else base / path


@dataclass(frozen=True)
class ExportSettings:
    """exporter가 쓰는 파일시스템 경로 + 상수."""
    storage_root: Path
    temp_dir: Path
    agency_name: str = DEFAULT_AGENCY_NAME
    retention_hours: int = DEFAULT_EXPORT_RETENTION_HOURS

    @classmethod
    def from_config(cls, config: dict[str, Any], base_dir: Path = PROJECT_ROOT) -> "ExportSettings":
        paths = config.get("paths") or {}
        exports = config.get("exports") or {}
        storage_root = _resolve(base_dir, paths.get("storage_root"), "storage")
        return cls(
            storage_root=storage_root,
            temp_dir=_resolve(base_dir, paths.get("temp_dir"), "storage/app/temp"),
            agency_name=exports.get("agency_name") or DEFAULT_AGENCY_NAME,
            retention_hours=int(exports.get("retention_hours", DEFAULT_EXPORT_RETENTION_HOURS)),
        )


def resolve_config_path(config: dict[str, Any], key: str, default: str, base_dir: Path = PROJECT_ROOT) -> Path:
    """default.yaml의 paths.<key> 항목 해석."""
    return _resolve(base_dir, (config.get("paths") or {}).get(key), default)

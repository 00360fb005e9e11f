"""
Employee record store: one JSON file per employee.

<employees_dir>/<employee_id>.json

규칙:
- employee_id는 파일시스템 접근 전에 검증
- 원자적 쓰기: temp 파일 -> fsync -> os.replace
- 같은 레코드 동시 쓰기는 FileLock으로 직렬화
- 파싱 실패한 레코드는 에러로 보고 (조용히 덮어쓰지 않음)
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from pds212.core.ids import validate_employee_id
from pds212.domain.errors import ErrorCodes, PolicyRejectError
from pds212.domain.schemas import EmployeeRecord

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"
LOCKS_DIRNAME = ".locks"


class EmployeeStore:
    """
    파일 기반 직원 레코드 저장소.

    Usage:
        store = EmployeeStore(Path("storage/employees"))
        record = store.get("EMP-001")
    """

    LOCK_TIMEOUT = 10  # 초

    def __init__(self, root: Path):
        self.root = Path(root)
        self._locks_dir = self.root / LOCKS_DIRNAME

    def path_for(self, employee_id: str) -> Path:
        validate_employee_id(employee_id)
        return self.root / f"{employee_id}{RECORD_SUFFIX}"

    def get(self, employee_id: str) -> EmployeeRecord:
        """
        직원 레코드 로드.

        Raises:
            PolicyRejectError: INVALID_EMPLOYEE_ID, EMPLOYEE_NOT_FOUND, EMPLOYEE_RECORD_CORRUPT
        """
        path = self.path_for(employee_id)
        if not path.is_file():
            raise PolicyRejectError(ErrorCodes.EMPLOYEE_NOT_FOUND, employee_id=employee_id)

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise PolicyRejectError(
                ErrorCodes.EMPLOYEE_RECORD_CORRUPT,
                employee_id=employee_id,
                path=str(path),
                error=str(e),
            ) from e

        if not isinstance(data, dict):
            raise PolicyRejectError(
                ErrorCodes.EMPLOYEE_RECORD_CORRUPT,
                employee_id=employee_id,
                path=str(path),
                error="record must be a JSON object",
            )

        # 파일명이 진실 원천
        data["id"] = employee_id
        try:
            return EmployeeRecord.from_dict(data)
        except TypeError as e:
            raise PolicyRejectError(
                ErrorCodes.EMPLOYEE_RECORD_CORRUPT,
                employee_id=employee_id,
                path=str(path),
                error=str(e),
            ) from e

    def save(self, record: EmployeeRecord) -> Path:
        """
        레코드 원자적 저장.

        Returns:
            레코드 파일 경로

        Raises:
            PolicyRejectError: INVALID_EMPLOYEE_ID
        """
        path = self.path_for(record.id)
        self._locks_dir.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self._locks_dir / f"{record.id}.lock", timeout=self.LOCK_TIMEOUT)

        try:
            with lock:
                _atomic_write_json(path, record.to_dict())
        except Timeout:
            logger.error("Employee record lock timed out: employee=%s", record.id)
            raise

        logger.info("Employee record saved: employee=%s path=%s", record.id, path)
        return path

    def list_ids(self) -> list[str]:
        """저장소에 있는 직원 ID (정렬)."""
        if not self.root.is_dir():
            return []
        return sorted(
            p.stem for p in self.root.glob(f"*{RECORD_SUFFIX}") if p.is_file()
        )


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    """temp -> fsync -> replace (실패 시 temp 파일 삭제)."""
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning("File fsync failed for %s: %s", path, e)

        os.replace(temp_path, path)
    except Exception:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.warning("Could not remove temp file: %s", temp_path)
        raise

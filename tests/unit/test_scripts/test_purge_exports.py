"""
test_purge_exports.py - purge_exports.py 스크립트 테스트

테스트 케이스:
- TC1: retention_hours 초과 export 파일 삭제
- TC2: 최근 export 파일 유지
- TC3: dry-run 모드 (실제 삭제 없음)
- TC4: 관련 없는 파일은 건드리지 않음
"""

import os
import sys
import time
from pathlib import Path

import pytest

# scripts 모듈 임포트를 위한 경로 추가
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent / "scripts"))

from purge_exports import PurgeResult, find_stale_exports, purge_exports

NOW = time.time()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    path = tmp_path / "storage" / "app" / "temp"
    path.mkdir(parents=True)
    return path


def create_export(temp_dir: Path, name: str, age_hours: float) -> Path:
    """mtime이 age_hours 전인 export 파일."""
    path = temp_dir / name
    path.write_bytes(b"x" * 2048)
    mtime = NOW - age_hours * 3600
    os.utime(path, (mtime, mtime))
    return path


# =============================================================================
# TC1 / TC2: retention
# =============================================================================

class TestRetention:
    """보관 기간."""

    def test_old_files_purged(self, temp_dir: Path):
        old = create_export(temp_dir, "cs_form_212_export_EMP-001_aaaaaaaaaaaaa.xlsx", age_hours=30)
        fresh = create_export(temp_dir, "cs_form_212_export_EMP-001_bbbbbbbbbbbbb.xlsx", age_hours=1)

        result = purge_exports(temp_dir, retention_hours=24, execute=True, now=NOW)

        assert not old.exists()
        assert fresh.exists()
        assert result.scanned_files == 2
        assert result.purged_files == 1
        assert result.purged_size_kb == pytest.approx(2.0)
        assert result.errors == []

    def test_oldest_first(self, temp_dir: Path):
        newer = create_export(temp_dir, "cs_form_212_export_A_1.xlsx", age_hours=48)
        older = create_export(temp_dir, "cs_form_212_export_B_2.xlsx", age_hours=72)

        assert find_stale_exports(temp_dir, retention_hours=24, now=NOW) == [older, newer]

    def test_missing_dir(self, tmp_path: Path):
        result = purge_exports(tmp_path / "nope", retention_hours=24, execute=True)

        assert result == PurgeResult()


# =============================================================================
# TC3: dry-run
# =============================================================================

class TestDryRun:
    """기본 모드."""

    def test_nothing_deleted(self, temp_dir: Path):
        old = create_export(temp_dir, "cs_form_212_export_EMP-001_aaaaaaaaaaaaa.xlsx", age_hours=30)

        result = purge_exports(temp_dir, retention_hours=24, now=NOW)

        assert old.exists()
        assert result.purged_files == 0


# =============================================================================
# TC4: unrelated files
# =============================================================================

class TestUnrelatedFiles:
    """cs_form_212_export_*.xlsx 만 대상."""

    def test_other_files_kept(self, temp_dir: Path):
        upload = create_export(temp_dir, "cs_form_212_import_x.xlsx", age_hours=100)
        other = create_export(temp_dir, "report.xlsx", age_hours=100)

        result = purge_exports(temp_dir, retention_hours=24, execute=True, now=NOW)

        assert upload.exists()
        assert other.exists()
        assert result.scanned_files == 0

#!/usr/bin/env python3
"""
purge_exports.py - temp dir의 오래된 CS Form 212 export 파일 정리 스크립트

export 다운로드는 전송 후 파일을 지움.
중단된 다운로드가 남긴 파일을 여기서 정리.
cs_form_212_export_*.xlsx 이름의 파일만 대상.

default.yaml:
    paths.temp_dir            (기본: storage/app/temp)
    exports.retention_hours   (기본: 24)

사용법:
    # 기본 실행 (dry-run)
    python scripts/purge_exports.py

    # 실제 삭제
    python scripts/purge_exports.py --execute

    # 보관 시간 지정
    python scripts/purge_exports.py --retention-hours 6 --execute

    # cron 예시 (매시 정각)
    0 * * * * cd /path/to/project && python scripts/purge_exports.py --execute >> /var/log/purge_exports.log 2>&1
"""

import argparse
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from pds212.core.settings import DEFAULT_CONFIG_PATH, ExportSettings, load_config
from pds212.domain.constants import EXPORT_FILENAME_PREFIX, EXPORT_FILENAME_SUFFIX

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

EXPORT_GLOB = f"{EXPORT_FILENAME_PREFIX}*{EXPORT_FILENAME_SUFFIX}"


@dataclass
class PurgeResult:
    """정리 결과."""
    scanned_files: int = 0
    purged_files: int = 0
    purged_size_kb: float = 0.0
    errors: list[str] = field(default_factory=list)


def find_stale_exports(temp_dir: Path, retention_hours: float, now: float | None = None) -> list[Path]:
    """
    retention_hours보다 오래된 (mtime 기준) export 파일, 오래된 순.

    Args:
        temp_dir: export 파일 디렉토리
        retention_hours: 기준 시간
        now: 기준 timestamp (기본: time.time())
    """
    if not temp_dir.is_dir():
        return []

    cutoff = (now if now is not None else time.time()) - retention_hours * 3600
    stale = [
        p for p in temp_dir.glob(EXPORT_GLOB)
        if p.is_file() and not p.is_symlink() and p.stat().st_mtime < cutoff
    ]
    return sorted(stale, key=lambda p: p.stat().st_mtime)


def purge_exports(
    temp_dir: Path,
    retention_hours: float,
    execute: bool = False,
    now: float | None = None,
) -> PurgeResult:
    """
    오래된 export 파일 삭제 (dry-run이면 보고만).

    Returns:
        건수 + 파일별 에러를 담은 PurgeResult
    """
    result = PurgeResult()

    if not temp_dir.is_dir():
        logger.warning(f"Temp directory not found: {temp_dir}")
        return result

    result.scanned_files = sum(1 for p in temp_dir.glob(EXPORT_GLOB) if p.is_file())

    for path in find_stale_exports(temp_dir, retention_hours, now=now):
        size_kb = path.stat().st_size / 1024
        if not execute:
            logger.info(f"[DRY-RUN] would delete: {path} ({size_kb:.1f} KB)")
            continue
        try:
            path.unlink()
            result.purged_files += 1
            result.purged_size_kb += size_kb
            logger.info(f"Deleted: {path} ({size_kb:.1f} KB)")
        except OSError as e:
            result.errors.append(f"{path}: {e}")
            logger.error(f"Delete failed {path}: {e}")

    return result


def main() -> int:
    parser = argparse.ArgumentParser(
        description="오래된 CS Form 212 export 파일 정리 스크립트",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--execute",
        action="store_true",
        help="실제 삭제 실행 (기본: dry-run)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="default.yaml 경로 (기본: config/default.yaml)",
    )
    parser.add_argument(
        "--retention-hours",
        type=float,
        default=None,
        help="exports.retention_hours 대신 사용할 보관 시간",
    )

    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        logger.warning(f"Config not found, using defaults: {config_path}")

    settings = ExportSettings.from_config(load_config(config_path))
    retention_hours = args.retention_hours if args.retention_hours is not None else settings.retention_hours
    logger.info(f"Retention: {retention_hours}h, temp dir: {settings.temp_dir}")

    if not args.execute:
        logger.info("=" * 50)
        logger.info("DRY-RUN mode (nothing is deleted)")
        logger.info("Run with --execute to delete")
        logger.info("=" * 50)

    result = purge_exports(settings.temp_dir, retention_hours, execute=args.execute)

    logger.info("=" * 50)
    logger.info("Purge result:")
    logger.info(f"  scanned: {result.scanned_files} files")
    logger.info(f"  purged: {result.purged_files} files ({result.purged_size_kb:.1f} KB)")
    if result.errors:
        logger.warning(f"  errors: {len(result.errors)}")
        for err in result.errors[:5]:
            logger.warning(f"    - {err}")

    return 0 if not result.errors else 1


if __name__ == "__main__":
    raise SystemExit(main())

"""정시 데이터 엑셀 일괄 다운로드/업로드 CLI

사용법:
    PYTHONPATH=backend python scripts/bulk_sheet.py export --year 2026
    PYTHONPATH=backend python scripts/bulk_sheet.py export --year 2026 --out 정시.xlsx
    PYTHONPATH=backend python scripts/bulk_sheet.py import --year 2026 정시데이터_2026.xlsx
    PYTHONPATH=backend python scripts/bulk_sheet.py import --year 2026 정시데이터_2026.xlsx --dry-run

로그인 세션(scripts/admin_login.py)이 있으면 토큰을 붙여 호출한다.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# PYTHONPATH 자동 설정
backend_dir = str(Path(__file__).resolve().parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from jungsi_admin.services.admin_api import AdminApiClient, AdminApiError  # noqa: E402
from jungsi_admin.services.auth import AdminSession  # noqa: E402
from jungsi_admin.services.bulk_sheet import (  # noqa: E402
    BulkImportError,
    build_bulk_update,
    export_filename,
    read_workbook,
    write_workbook,
)

logger = logging.getLogger("bulk_sheet")


def setup_logging(verbose: bool = False) -> None:
    """로깅 설정"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx 로그 억제
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def make_client() -> AdminApiClient:
    session = AdminSession().init()
    if session.is_authenticated:
        return session.client()
    logger.warning("로그인 세션 없음, 토큰 없이 호출")
    return AdminApiClient()


def run_export(client: AdminApiClient, year: int, out: str | None) -> int:
    rows = client.export(year)
    path = Path(out or export_filename(year))
    count = write_workbook(rows, path)
    print(f"{count}개 학과 데이터를 다운로드했습니다. → {path}")
    return 0


def print_warnings(warnings: list[str], limit: int = 10) -> None:
    if not warnings:
        return
    print(f"경고 {len(warnings)}건 (해당 칸/행은 업로드하지 않음)")
    for message in warnings[:limit]:
        print(f"    - {message}")
    if len(warnings) > limit:
        print(f"    ... 외 {len(warnings) - limit}건")


def run_import(client: AdminApiClient, year: int, file: str, dry_run: bool) -> int:
    warnings: list[str] = []
    try:
        items = build_bulk_update(read_workbook(file), warnings)
    except BulkImportError as e:
        print_warnings(warnings)
        print(f"오류: {e}")
        return 1
    print_warnings(warnings)

    if dry_run:
        print(f"*** DRY-RUN: {len(items)}개 학과 (업로드 안 함) ***")
        for item in items[:5]:
            print(json.dumps(item, ensure_ascii=False))
        if len(items) > 5:
            print(f"... 외 {len(items) - 5}건")
        return 0

    print(f"{len(items)}개 학과 데이터를 업로드 중...")
    result = client.bulk_update(year, items)

    print(f"\n{'='*50}")
    print(result.get("message") or "업로드 완료")
    print(f"{'='*50}")
    print(f"  성공 : {result.get('updated', 0)}")
    print(f"  실패 : {result.get('failed', 0)}")
    errors = result.get("errors") or []
    for err in errors[:10]:
        print(f"    - {err}")
    if len(errors) > 10:
        print(f"    ... 외 {len(errors) - 10}건")
    return 0 if not result.get("failed") else 2


def main() -> None:
    parser = argparse.ArgumentParser(description="정시 데이터 엑셀 일괄 다운로드/업로드")
    parser.add_argument("-v", "--verbose", action="store_true", help="상세 로깅")
    sub = parser.add_subparsers(dest="command", required=True)

    p_export = sub.add_parser("export", help="엑셀 다운로드")
    p_export.add_argument("--year", type=int, required=True, help="학년도")
    p_export.add_argument("--out", type=str, help="저장 경로 (기본: 정시데이터_{year}.xlsx)")

    p_import = sub.add_parser("import", help="엑셀 업로드")
    p_import.add_argument("--year", type=int, required=True, help="학년도")
    p_import.add_argument("file", type=str, help="업로드할 xlsx 파일")
    p_import.add_argument("--dry-run", action="store_true", help="변환 결과만 출력")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    client = make_client()
    try:
        if args.command == "export":
            code = run_export(client, args.year, args.out)
        else:
            code = run_import(client, args.year, args.file, args.dry_run)
    except AdminApiError as e:
        print(f"오류: {e.message}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()

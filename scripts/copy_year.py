"""학년도 데이터 복사 CLI

사용법:
    PYTHONPATH=backend python scripts/copy_year.py --from 2026 --to 2027
    PYTHONPATH=backend python scripts/copy_year.py --from 2026 --to 2027 --yes
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# PYTHONPATH 자동 설정
backend_dir = str(Path(__file__).resolve().parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from jungsi_admin.services.admin_api import AdminApiError  # noqa: E402
from jungsi_admin.services.auth import AdminSession, NotAuthenticatedError  # noqa: E402
from jungsi_admin.services.save_batch import FormValidationError  # noqa: E402
from jungsi_admin.services.year_copy import copy_year  # noqa: E402


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


def main() -> None:
    parser = argparse.ArgumentParser(description="학년도 데이터 복사")
    parser.add_argument("--from", dest="from_year", type=int, required=True, help="원본 학년도")
    parser.add_argument("--to", dest="to_year", type=int, required=True, help="대상 학년도")
    parser.add_argument("--yes", action="store_true", help="확인 없이 실행")
    parser.add_argument("-v", "--verbose", action="store_true", help="상세 로깅")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    if not args.yes:
        answer = input(f"{args.from_year}학년도 데이터를 {args.to_year}학년도로 복사하시겠습니까? [y/N] ")
        if answer.strip().lower() != "y":
            print("취소했습니다.")
            return

    try:
        client = AdminSession().init().client()
        result = copy_year(client, args.from_year, args.to_year)
    except NotAuthenticatedError as e:
        print(f"{e} (scripts/admin_login.py 로 먼저 로그인하세요)")
        sys.exit(1)
    except FormValidationError as e:
        print(f"오류: {e}")
        sys.exit(1)
    except AdminApiError as e:
        print(f"복사 실패: {e.message}")
        sys.exit(1)

    print(f"\n{'='*50}")
    print(f"복사 완료: {args.from_year} → {args.to_year}")
    print(f"{'='*50}")
    if result.message:
        print(f"  {result.message}")
    if result.copied_count:
        c = result.copied_count
        print(f"  기본정보 : {c.basic}")
        print(f"  반영비율 : {c.ratio}")
        print(f"  변환표   : {c.conv}")
        print(f"  실기배점 : {c.practical}")


if __name__ == "__main__":
    main()

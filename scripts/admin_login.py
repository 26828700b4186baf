"""관리자 로그인/로그아웃 CLI

토큰은 SESSION_FILE(기본 ~/.jungsi_admin/session.json)에 저장되며
다른 스크립트가 이 세션을 읽어 관리자 API를 호출한다.

사용법:
    PYTHONPATH=backend python scripts/admin_login.py --username admin
    PYTHONPATH=backend python scripts/admin_login.py --status
    PYTHONPATH=backend python scripts/admin_login.py --logout
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

# PYTHONPATH 자동 설정
backend_dir = str(Path(__file__).resolve().parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from jungsi_admin.services.auth import AdminSession, NotAuthenticatedError  # noqa: E402


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
    parser = argparse.ArgumentParser(description="정시 관리자 로그인")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--username", type=str, help="관리자 아이디")
    group.add_argument("--status", action="store_true", help="현재 로그인 상태")
    group.add_argument("--logout", action="store_true", help="세션 삭제")
    parser.add_argument("-v", "--verbose", action="store_true", help="상세 로깅")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    session = AdminSession().init()

    if args.status:
        if session.is_authenticated:
            print(f"로그인됨: {session.user.username} ({session.user.role})")
        else:
            print("로그인되어 있지 않습니다.")
        return

    if args.logout:
        session.logout()
        print("로그아웃했습니다.")
        return

    password = getpass.getpass("비밀번호: ")
    try:
        user = session.login(args.username, password)
    except NotAuthenticatedError as e:
        print(e)
        sys.exit(1)
    print(f"로그인 완료: {user.username}")


if __name__ == "__main__":
    main()

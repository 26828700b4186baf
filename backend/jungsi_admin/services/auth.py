"""관리자 세션

로그인 응답의 access_token과 user를 파일에 보관하고
관리자 API 클라이언트에 토큰을 붙여 준다.
전역 상태 없이 AdminSession 객체를 명시적으로 만들어 넘긴다.

클라이언트 측 편의 기능일 뿐 보안 경계가 아니다 (권한 검사는 백엔드 책임).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from jungsi_admin.config import settings
from jungsi_admin.services.admin_api import AdminApiClient, AdminApiError

logger = logging.getLogger(__name__)

TOKEN_KEY = "admin_token"
USER_KEY = "admin_user"

LOGIN_FAILED = "아이디 또는 비밀번호가 올바르지 않습니다."


class NotAuthenticatedError(Exception):
    """로그인이 필요함"""


class AdminUser(BaseModel):
    username: str
    role: str = ""


class SessionStore:
    """세션 파일 (JSON: {admin_token, admin_user})"""

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path or settings.SESSION_FILE).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """저장된 세션. 파일이 없거나 깨졌으면 {}"""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("세션 파일 읽기 실패 (%s): %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, token: str, user: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps({TOKEN_KEY: token, USER_KEY: user}, ensure_ascii=False),
            encoding="utf-8",
        )
        self._path.chmod(0o600)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


class AdminSession:
    """관리자 세션 컨텍스트

    수명주기: init() (저장된 토큰 읽기) → login() / logout()
    """

    def __init__(self, store: SessionStore | None = None, base_url: str | None = None) -> None:
        self._store = store or SessionStore()
        self._base_url = base_url
        self._token: str | None = None
        self._user: AdminUser | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def user(self) -> AdminUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token and self._user)

    def init(self) -> AdminSession:
        """저장된 토큰과 사용자 정보 복원 (둘 다 있어야 로그인 상태)"""
        data = self._store.load()
        token, user = data.get(TOKEN_KEY), data.get(USER_KEY)
        if not token or not isinstance(user, dict):
            return self
        try:
            self._user = AdminUser.model_validate(user)
        except ValidationError:
            logger.warning("저장된 사용자 정보 형식 오류, 로그아웃 상태로 시작")
            return self
        self._token = token
        logger.info("세션 복원: %s", self._user.username)
        return self

    def login(
        self,
        username: str,
        password: str,
        client: AdminApiClient | None = None,
    ) -> AdminUser:
        """로그인 후 토큰 저장

        Raises:
            NotAuthenticatedError: 로그인 실패 (사유와 무관하게 같은 메시지)
        """
        client = client or AdminApiClient(base_url=self._base_url)
        try:
            data = client.login(username, password)
        except AdminApiError as e:
            logger.warning("로그인 실패: %s (%s)", username, e)
            raise NotAuthenticatedError(LOGIN_FAILED) from e

        token = data.get("access_token")
        user = data.get("user")
        if not token or not isinstance(user, dict):
            logger.warning("로그인 응답에 토큰/사용자 정보 없음: %s", username)
            raise NotAuthenticatedError(LOGIN_FAILED)
        try:
            admin_user = AdminUser.model_validate(user)
        except ValidationError as e:
            logger.warning("로그인 응답 사용자 정보 형식 오류: %s", username)
            raise NotAuthenticatedError(LOGIN_FAILED) from e

        self._store.save(token, user)
        self._token = token
        self._user = admin_user
        logger.info("로그인: %s (%s)", self._user.username, self._user.role)
        return self._user

    def logout(self) -> None:
        self._store.clear()
        self._token = None
        self._user = None
        logger.info("로그아웃")

    def require(self) -> AdminUser:
        if not self.is_authenticated:
            raise NotAuthenticatedError("로그인이 필요합니다.")
        return self._user

    def client(self) -> AdminApiClient:
        """토큰을 붙인 관리자 API 클라이언트

        Raises:
            NotAuthenticatedError: 로그인 전
        """
        self.require()
        return AdminApiClient(base_url=self._base_url, token=self._token)

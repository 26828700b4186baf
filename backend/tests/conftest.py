"""공용 테스트 픽스처

실제 관리자 백엔드/Gemini 없이 동작하도록 설정값을 테스트용으로 바꾼다.
홈 디렉토리의 세션 파일은 건드리지 않는다.
"""

from __future__ import annotations

import pytest

from jungsi_admin.config import settings


@pytest.fixture(autouse=True)
def _test_settings(tmp_path, monkeypatch):
    """테스트마다 세션 파일 경로와 API 주소를 격리"""
    monkeypatch.setattr(settings, "SESSION_FILE", str(tmp_path / "session.json"))
    monkeypatch.setattr(settings, "ADMIN_API_URL", "http://admin.test")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    monkeypatch.setattr(settings, "ADMIN_SAVE_MAX_WORKERS", 4)

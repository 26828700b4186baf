"""애플리케이션 설정

모든 환경변수는 .env 파일에서 관리한다. 절대 하드코딩 금지.
.env 없어도 기본값으로 동작 (테스트 환경).
"""

from pathlib import Path

from pydantic_settings import BaseSettings

# 프로젝트 루트: backend/ 의 상위 디렉토리
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """환경변수 로드 설정"""

    # 정시 관리자 REST 백엔드
    ADMIN_API_URL: str = "http://localhost:8900"
    ADMIN_API_TIMEOUT: float = 30.0      # 요청 타임아웃 (초)
    ADMIN_SAVE_MAX_WORKERS: int = 10     # 일괄 저장 동시 요청 수

    # Gemini (공지사항 AI 초안 작성용)
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TIMEOUT: float = 30.0

    # 관리자 세션 (access_token + user 저장 위치)
    SESSION_FILE: str = str(Path.home() / ".jungsi_admin" / "session.json")

    # 공지사항 프롬프트에 들어가는 서비스명
    SERVICE_NAME: str = "모정시"

    # /api/ai 를 호출하는 대시보드 도메인
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    model_config = {
        "env_file": str(_PROJECT_ROOT / ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# 싱글턴 인스턴스
settings = Settings()

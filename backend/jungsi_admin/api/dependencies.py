"""FastAPI 의존성 주입

서비스 인스턴스를 싱글톤으로 관리한다.
.env 없어도 기본값으로 동작 (테스트 환경).
"""

from functools import lru_cache

from jungsi_admin.services.llm.notice_drafter import NoticeDrafter


@lru_cache()
def get_notice_drafter() -> NoticeDrafter:
    """싱글톤 NoticeDrafter 인스턴스"""
    return NoticeDrafter()

"""공지사항 관리

목록 조회 / 작성 / 수정 / 활성 토글 / 삭제를 관리자 API로 처리하고
AI 초안은 NoticeDrafter 결과를 폼에 채워 넣는다.
변경 후에는 목록을 다시 불러온다.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from jungsi_admin.models.notice import Notice, NoticeForm, NoticeType
from jungsi_admin.services.admin_api import AdminApiClient
from jungsi_admin.services.llm.notice_drafter import NoticeDraft

logger = logging.getLogger(__name__)


class NoticeService:
    """공지사항 CRUD"""

    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def list_notices(self) -> list[Notice]:
        notices = []
        for item in self._client.list_notices():
            try:
                notices.append(Notice.model_validate(item))
            except ValidationError as e:
                logger.warning("공지 항목 무시 (id=%s): %d건 형식 오류", item.get("id"), e.error_count())
        return notices

    def save(self, form: NoticeForm, notice_id: int | None = None) -> list[Notice]:
        """notice_id 없으면 작성, 있으면 그 공지를 덮어쓴다"""
        if notice_id is None:
            self._client.create_notice(form.to_payload())
            logger.info("공지 작성: %s", form.title)
        else:
            self._client.update_notice(notice_id, form.to_payload())
            logger.info("공지 수정: id=%d", notice_id)
        return self.list_notices()

    def toggle(self, notice_id: int) -> list[Notice]:
        self._client.toggle_notice(notice_id)
        logger.info("공지 활성 토글: id=%d", notice_id)
        return self.list_notices()

    def delete(self, notice_id: int) -> list[Notice]:
        self._client.delete_notice(notice_id)
        logger.info("공지 삭제: id=%d", notice_id)
        return self.list_notices()


def apply_draft(
    draft: NoticeDraft,
    *,
    title: str = "",
    content: str = "",
    notice_type: NoticeType = NoticeType.GENERAL,
    is_active: bool = True,
) -> dict:
    """AI 초안을 작성 중인 폼 값에 반영 (초안의 빈 필드는 기존 값 유지)"""
    return {
        "title": draft.title or title,
        "content": draft.content or content,
        "type": notice_type,
        "is_active": is_active,
    }

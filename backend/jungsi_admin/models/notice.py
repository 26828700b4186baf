"""공지사항 모델

생성(관리자 입력 또는 AI 초안) → 활성/비활성 토글 → 수정 → 삭제.
버전 관리 없음 (수정은 덮어쓰기).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class NoticeType(str, Enum):
    """공지 유형"""

    GENERAL = "general"
    URGENT = "urgent"
    EVENT = "event"


NOTICE_TYPE_LABELS = {
    NoticeType.GENERAL: "일반 공지",
    NoticeType.URGENT: "긴급 공지",
    NoticeType.EVENT: "이벤트/행사",
}


def notice_type_label(notice_type: str | NoticeType | None) -> str:
    """알 수 없는 유형은 일반 공지로 표시"""
    try:
        return NOTICE_TYPE_LABELS[NoticeType(notice_type)]
    except ValueError:
        return NOTICE_TYPE_LABELS[NoticeType.GENERAL]


class Notice(BaseModel):
    """공지사항 1건 (GET /admin/notices 항목)"""

    id: int
    title: str
    content: str = ""
    type: NoticeType = NoticeType.GENERAL
    is_active: bool = True
    published_at: datetime | None = None
    created_at: datetime | None = None


class NoticeForm(BaseModel):
    """공지 작성/수정 폼 (POST /admin/notices, PUT /admin/notices/{id} 본문)"""

    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    type: NoticeType = NoticeType.GENERAL
    is_active: bool = True

    @field_validator("title", "content")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("빈 값은 저장할 수 없습니다")
        return v

    @classmethod
    def from_notice(cls, notice: Notice) -> NoticeForm:
        """수정 화면 초기값"""
        return cls(
            title=notice.title,
            content=notice.content,
            type=notice.type,
            is_active=notice.is_active,
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")

"""API 요청/응답 스키마"""

from __future__ import annotations

from pydantic import BaseModel


class AiDraftRequest(BaseModel):
    """POST /api/ai 요청 (대시보드 공지 작성 모달)"""

    prompt: str | None = None
    type: str | None = "general"  # general / urgent / event


class AiDraftResponse(BaseModel):
    title: str
    content: str


class ErrorResponse(BaseModel):
    error: str

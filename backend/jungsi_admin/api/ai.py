"""AI 공지 초안 API 라우터

엔드포인트:
- POST /api/ai : 요점 → {title, content}
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from jungsi_admin.api.dependencies import get_notice_drafter
from jungsi_admin.api.schemas import AiDraftRequest, AiDraftResponse, ErrorResponse
from jungsi_admin.services.llm.notice_drafter import NoticeDrafter, NoticeDraftError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ai"])


# ── POST /api/ai ──────────────────────────────────────────────


@router.post(
    "/ai",
    response_model=AiDraftResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def draft_notice(
    request: AiDraftRequest,
    drafter: NoticeDrafter = Depends(get_notice_drafter),
):
    """공지사항 초안 생성

    모델 응답 형식이 맞지 않으면 title="" 이고 content에 응답 전체가 들어간다.
    """
    try:
        draft = drafter.draft(request.prompt, request.type)
    except NoticeDraftError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.exception("AI 라우트 오류")
        raise HTTPException(status_code=500, detail="서버 오류") from e

    return AiDraftResponse(title=draft.title, content=draft.content)

"""공지사항 AI 초안 작성 (Gemini)

관리자가 적은 요점을 서비스 공지 문체로 다듬는다.
모델 응답은 "제목: ...\\n내용: ..." 형식을 요청하고 정규식으로 나눈다.
형식이 맞지 않으면 응답 전체를 내용으로 쓰고 제목은 비운다.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx
from pydantic import BaseModel

from jungsi_admin.config import settings
from jungsi_admin.models.notice import notice_type_label

logger = logging.getLogger(__name__)

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta/models"

TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1000

_TITLE_RE = re.compile(r"제목:\s*(.+?)(?:\n|내용:)")
_CONTENT_RE = re.compile(r"내용:\s*([\s\S]+)")

SYSTEM_PROMPT = """당신은 "{service}" 서비스의 공지사항을 작성하는 전문가입니다.

서비스 설명:
- {service}는 체대입시 정시 환산점수 계산 웹/앱 서비스입니다
- 수험생들이 자신의 수능 성적과 실기 점수를 입력하면 각 대학별 환산점수를 계산해줍니다
- 대학별 반영비율, 가산점, 실기 배점표 등을 반영한 정확한 점수 계산 제공
- 사용자: 체대입시를 준비하는 수험생 (고3, N수생)

사용자가 제공한 내용을 바탕으로 전문적이고 명확한 공지사항을 작성해주세요.

작성 규칙:
1. 존댓말 사용 (합니다, 입니다 체)
2. 핵심 내용을 명확하게 전달
3. 필요시 항목별로 구분
4. 불필요한 미사여구 제외
5. 수험생이 이해하기 쉽게 작성
6. 서비스명은 "{service}"로 통일

공지 유형: {type_label}

제목과 내용을 다음 형식으로 반환해주세요:
제목: [공지 제목]
내용: [공지 내용]"""


class NoticeDraftError(Exception):
    """초안 생성 실패. status_code는 /api/ai 응답 상태로 쓴다."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NoticeDraft(BaseModel):
    title: str = ""
    content: str = ""


def build_prompt(prompt: str, notice_type: str | None, service: str | None = None) -> str:
    system = SYSTEM_PROMPT.format(
        service=service or settings.SERVICE_NAME,
        type_label=notice_type_label(notice_type),
    )
    return f"{system}\n\n사용자 입력: {prompt}"


def parse_draft(text: str) -> NoticeDraft:
    """모델 응답 → 제목/내용. 제목이 없으면 "", 내용이 없으면 응답 전체."""
    title_match = _TITLE_RE.search(text)
    content_match = _CONTENT_RE.search(text)
    return NoticeDraft(
        title=title_match.group(1).strip() if title_match else "",
        content=content_match.group(1).strip() if content_match else text,
    )


def _extract_text(data: dict[str, Any]) -> str:
    """candidates[0].content.parts[0].text (없으면 "")"""
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


class NoticeDrafter:
    """Gemini generateContent 호출"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self._model = model or settings.GEMINI_MODEL
        self._timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT

    def draft(self, prompt: str | None, notice_type: str | None = None) -> NoticeDraft:
        """공지 초안 생성

        Raises:
            NoticeDraftError: 프롬프트 없음(400), API 키 없음(500), 생성 실패(500)
        """
        if not prompt:
            raise NoticeDraftError("프롬프트가 필요합니다", status_code=400)
        if not self._api_key:
            raise NoticeDraftError("Gemini API 키가 설정되지 않았습니다")

        body = {
            "contents": [{"parts": [{"text": build_prompt(prompt, notice_type)}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_OUTPUT_TOKENS,
            },
        }
        url = f"{GEMINI_BASE}/{self._model}:generateContent"

        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(url, params={"key": self._api_key}, json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini 오류: HTTP %d %s", e.response.status_code, e.response.text[:500])
            raise NoticeDraftError("AI 생성 실패") from e
        except httpx.HTTPError as e:
            logger.error("Gemini 연결 실패: %s", type(e).__name__)
            raise NoticeDraftError("AI 생성 실패") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Gemini 응답 JSON 파싱 실패")
            raise NoticeDraftError("AI 생성 실패") from e

        draft = parse_draft(_extract_text(data))
        logger.info("공지 초안 생성: 제목 %d자, 내용 %d자", len(draft.title), len(draft.content))
        return draft

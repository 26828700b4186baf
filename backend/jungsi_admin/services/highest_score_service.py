"""최고표점 조회/저장"""

from __future__ import annotations

import logging

from jungsi_admin.models.highest_score import (
    MOHYUNG_DEFAULT,
    HighestScore,
    highest_scores_from_response,
    highest_scores_payload,
)
from jungsi_admin.services.admin_api import AdminApiClient

logger = logging.getLogger(__name__)


class HighestScoreService:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def load(self, year: int, mohyung: str = MOHYUNG_DEFAULT) -> list[HighestScore]:
        """서버 값이 없으면 기본 과목 템플릿 (최고점 0)"""
        return highest_scores_from_response(self._client.get_highest_scores(year, mohyung))

    def save(self, year: int, mohyung: str, scores: list[HighestScore]) -> str:
        result = self._client.put_highest_scores(year, mohyung, highest_scores_payload(scores))
        count = result.get("count", len(scores))
        logger.info("최고표점 저장: %d %s %d과목", year, mohyung, count)
        return f"{count}개 과목 저장 완료"

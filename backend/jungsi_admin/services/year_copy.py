"""학년도 데이터 복사

기본정보·반영비율·탐구 변환표·실기 배점을 다음 학년도로 복사한다.
복사 자체는 백엔드가 수행한다.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from jungsi_admin.services.admin_api import AdminApiClient
from jungsi_admin.services.save_batch import FormValidationError

logger = logging.getLogger(__name__)


class CopiedCount(BaseModel):
    basic: int = 0
    ratio: int = 0
    conv: int = 0
    practical: int = 0


class CopyYearResult(BaseModel):
    success: bool = True
    message: str = ""
    copied_count: CopiedCount | None = Field(default=None, alias="copiedCount")


def copy_year(client: AdminApiClient, from_year: int, to_year: int) -> CopyYearResult:
    """Raises:
        FormValidationError: 원본과 대상 학년도가 같을 때
        AdminApiError: 복사 실패
    """
    if from_year == to_year:
        raise FormValidationError("원본과 대상 학년도가 같습니다")
    result = CopyYearResult.model_validate(client.copy_year(from_year, to_year))
    if result.copied_count:
        c = result.copied_count
        logger.info(
            "복사 완료 %d → %d: 기본 %d, 비율 %d, 변환표 %d, 실기 %d",
            from_year, to_year, c.basic, c.ratio, c.conv, c.practical,
        )
    return result

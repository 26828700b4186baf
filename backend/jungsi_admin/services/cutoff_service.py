"""합격컷 입력

학과별 전년도/예상 수능컷, 총점컷.
- 수능컷: 단계별 전형(step_type > 0, N배수 1단계)일 때만 의미가 있다
- 총점컷: 상대평가 실기 학과는 총점컷을 쓰지 않는다
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from jungsi_admin.services.admin_api import AdminApiClient, AdminApiError
from jungsi_admin.services.save_batch import FormValidationError

logger = logging.getLogger(__name__)

CUTOFF_FIELDS = (
    "prev_sunung_cut",
    "prev_total_cut",
    "expected_sunung_cut",
    "expected_total_cut",
)


class CutoffUniversity(BaseModel):
    """GET /admin/cutoffs/universities 항목"""

    U_ID: int
    univ_name: str = ""
    dept_name: str = ""
    quota: int | None = None
    step_type: int = 0  # 0: 일괄, N: N배수 1단계
    has_practical_table: bool = False
    is_relative_eval: bool = False
    prev_sunung_cut: float | None = None
    prev_total_cut: float | None = None
    expected_sunung_cut: float | None = None
    expected_total_cut: float | None = None

    @property
    def show_sunung_cut(self) -> bool:
        return self.step_type > 0

    @property
    def show_total_cut(self) -> bool:
        return not self.is_relative_eval


class CutoffDraft:
    """변경한 학과만 모아 두는 편집 상태 (U_ID 단위)

    처음 수정할 때 현재 값 4개를 복사해 두고 그 위에 덮어쓴다.
    """

    def __init__(self, universities: list[CutoffUniversity]) -> None:
        self._universities = {u.U_ID: u for u in universities}
        self._changes: dict[int, dict[str, Any]] = {}

    @property
    def changed_count(self) -> int:
        return len(self._changes)

    def set_value(self, uid: int, field: str, text: str) -> None:
        """입력칸 값 반영 ("" → None)

        Raises:
            KeyError: 목록에 없는 U_ID
            FormValidationError: 알 수 없는 필드 또는 숫자가 아닌 입력
        """
        if field not in CUTOFF_FIELDS:
            raise FormValidationError(f"알 수 없는 컷 필드: {field}")
        univ = self._universities[uid]

        text = text.strip()
        try:
            value = float(text) if text else None
        except ValueError as e:
            raise FormValidationError(f"숫자를 입력하세요: {text}") from e

        change = self._changes.setdefault(
            uid,
            {"U_ID": uid, **{name: getattr(univ, name) for name in CUTOFF_FIELDS}},
        )
        change[field] = value
        self._universities[uid] = univ.model_copy(update={field: value})

    def current(self, uid: int) -> CutoffUniversity:
        return self._universities[uid]

    def to_payload(self, year: int) -> list[dict[str, Any]]:
        """POST /admin/cutoffs/bulk 의 cutoffs

        Raises:
            FormValidationError: 변경사항이 없을 때
        """
        if not self._changes:
            raise FormValidationError("변경사항이 없습니다")
        return [{**change, "admission_year": year} for change in self._changes.values()]

    def clear(self) -> None:
        self._changes.clear()


def save_cutoffs(client: AdminApiClient, draft: CutoffDraft, year: int) -> int:
    """변경분 저장 후 저장 건수 반환 (성공 시 변경 목록 비움)

    Raises:
        FormValidationError: 변경사항 없음
        AdminApiError: 저장 실패 (변경 목록 유지)
    """
    cutoffs = draft.to_payload(year)
    result = client.save_cutoffs(cutoffs)
    updated = result.get("updated") or 0
    if not updated:
        raise AdminApiError("저장 실패", payload=result)
    logger.info("합격컷 저장: %d학년도 %d건", year, updated)
    draft.clear()
    return updated

"""대학/학과 모델

GET /admin/jungsi/basic?year=Y 응답의 list 항목.
백엔드는 한글 키(대학명, 학과명, 군)를 사용하므로 alias로 매핑한다.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

GUN_LABELS = ("가군", "나군", "다군")
GUN_OTHER = "기타"
GUN_ALL = "전체"

# 목록 화면 군 필터 버튼
GUN_FILTERS = (GUN_ALL, *GUN_LABELS, GUN_OTHER)


def normalize_gun(label: str | None) -> str:
    """자유 입력 군 라벨 → 가군/나군/다군/기타

    완전 일치가 아니라 포함 여부로 판정하며, 가 → 나 → 다 순서로 먼저 맞는 것이 이긴다.
    ("가나" → "가군")
    """
    if not label:
        return GUN_OTHER
    text = str(label).strip()
    for syllable, gun in zip(("가", "나", "다"), GUN_LABELS):
        if syllable in text:
            return gun
    return GUN_OTHER


class University(BaseModel):
    """대학-학과 1건 (U_ID 단위)"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    uid: int = Field(alias="U_ID")
    univ_name: str = Field(default="", alias="대학명")
    dept_name: str = Field(default="", alias="학과명")
    gun: str | None = Field(default=None, alias="군")
    calc_type: str | None = Field(default=None, alias="계산유형")
    selection_rules: Any = None
    bonus_rules: Any = None
    score_config: Any = None

    @property
    def normalized_gun(self) -> str:
        return normalize_gun(self.gun)

    @property
    def is_configured(self) -> bool:
        """선택반영규칙 또는 점수설정이 이미 입력된 학과 (목록에서 강조 표시)"""
        return bool(self.selection_rules or self.score_config)

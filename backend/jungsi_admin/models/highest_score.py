"""과목별 최고 표준점수 (모의고사/수능 회차별)

표준점수 환산 시 "highest_of_year" 방식이 이 값을 만점으로 쓴다.
서버에 아직 데이터가 없으면 기본 과목 템플릿(최고점 0)으로 시작한다.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MOHYUNG_DEFAULT = "수능"

# 템플릿 과목 (서버 응답이 비었을 때)
DEFAULT_HIGHEST_SUBJECTS = {
    "주요": ("국어", "화법과작문", "언어와매체", "수학", "확률과통계", "미적분", "기하"),
    "사탐": ("생윤", "윤사", "한지", "사문", "정법", "세지", "동아시아사", "세계사", "경제"),
    "과탐": ("물리1", "물리2", "화학1", "화학2", "생명1", "생명2", "지학1", "지학2"),
}


class HighestScore(BaseModel):
    """과목 1개 최고점. id < 0 은 아직 저장되지 않은 템플릿 행."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    subject_name: str = Field(alias="과목명")
    max_score: float = Field(default=0, alias="최고점")

    @property
    def is_new(self) -> bool:
        return self.id < 0


def default_highest_scores() -> list[HighestScore]:
    names = [name for group in DEFAULT_HIGHEST_SUBJECTS.values() for name in group]
    return [
        HighestScore(id=-(idx + 1), subject_name=name, max_score=0)
        for idx, name in enumerate(names)
    ]


def highest_scores_from_response(items: list[dict[str, Any]] | None) -> list[HighestScore]:
    if not items:
        return default_highest_scores()
    return [HighestScore.model_validate(item) for item in items]


def group_highest_scores(scores: list[HighestScore]) -> dict[str, list[HighestScore]]:
    """화면 그룹(주요/사탐/과탐/기타)으로 묶기"""
    groups: dict[str, list[HighestScore]] = {name: [] for name in DEFAULT_HIGHEST_SUBJECTS}
    groups["기타"] = []
    for score in scores:
        for group, names in DEFAULT_HIGHEST_SUBJECTS.items():
            if score.subject_name in names:
                groups[group].append(score)
                break
        else:
            groups["기타"].append(score)
    return groups


def highest_scores_payload(scores: list[HighestScore]) -> list[dict[str, Any]]:
    """PUT 본문의 scores"""
    return [{"subject_name": s.subject_name, "max_score": s.max_score} for s in scores]

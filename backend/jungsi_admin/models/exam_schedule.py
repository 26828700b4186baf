"""시험 일정 / 활성 시험 판별

서비스는 오늘 날짜와 시험 일정으로 가채점/성적표 모드를 고른다.
- 강제 설정(force_exam)이 있으면 그 시험 (모드 없음)
- 시험일 <= 오늘 < 발표일 인 첫 시험 → 가채점
- 아니면 발표일 <= 오늘 인 가장 늦은 시험 → 성적표
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, field_validator

from jungsi_admin.models.grade_cut import EXAM_TYPES

FORCE_AUTO = "자동"

ExamMode = Literal["가채점", "성적표"]


class ExamSchedule(BaseModel):
    """시험 1개 일정 (날짜 미입력은 None)"""

    exam_type: str
    exam_date: date | None = None
    release_date: date | None = None

    @field_validator("exam_date", "release_date", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if v == "":
            return None
        # "2026-11-13T00:00:00.000Z" 처럼 시각이 붙어 와도 날짜만 쓴다
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @property
    def is_complete(self) -> bool:
        return self.exam_date is not None and self.release_date is not None


class ActiveExam(BaseModel):
    exam: str | None = None
    mode: ExamMode | None = None


def default_schedules() -> dict[str, ExamSchedule]:
    return {exam_type: ExamSchedule(exam_type=exam_type) for exam_type in EXAM_TYPES}


def merge_schedules(items: Iterable[Mapping[str, Any]] | None) -> dict[str, ExamSchedule]:
    """서버 일정 목록 → 4개 시험 템플릿 (알 수 없는 exam_type은 무시)"""
    schedules = default_schedules()
    for item in items or []:
        exam_type = item.get("exam_type")
        if exam_type in schedules:
            schedules[exam_type] = ExamSchedule.model_validate(item)
    return schedules


def resolve_active_exam(
    schedules: Mapping[str, ExamSchedule],
    force_exam: str | None,
    today: date,
) -> ActiveExam:
    """오늘 기준 활성 시험과 모드"""
    if force_exam and force_exam != FORCE_AUTO:
        return ActiveExam(exam=force_exam)

    for exam_type in EXAM_TYPES:
        schedule = schedules.get(exam_type)
        if schedule is None or not schedule.is_complete:
            continue
        if schedule.exam_date <= today < schedule.release_date:
            return ActiveExam(exam=exam_type, mode="가채점")

    for exam_type in reversed(EXAM_TYPES):
        schedule = schedules.get(exam_type)
        if schedule is None or schedule.release_date is None:
            continue
        if schedule.release_date <= today:
            return ActiveExam(exam=exam_type, mode="성적표")

    return ActiveExam()

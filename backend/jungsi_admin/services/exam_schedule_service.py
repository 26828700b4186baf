"""시험 일정 관리 (가채점/성적표 모드 전환용)"""

from __future__ import annotations

import logging
from datetime import date

from jungsi_admin.models.exam_schedule import (
    FORCE_AUTO,
    ActiveExam,
    ExamSchedule,
    merge_schedules,
    resolve_active_exam,
)
from jungsi_admin.services.admin_api import AdminApiClient
from jungsi_admin.services.save_batch import FormValidationError

logger = logging.getLogger(__name__)


class ExamScheduleService:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def load(self, year: int) -> tuple[dict[str, ExamSchedule], str | None]:
        """→ (시험별 일정 4개, 강제 설정 시험 또는 None)"""
        data = self._client.get_exam_schedules(year)
        return merge_schedules(data.get("schedules")), data.get("forceExam")

    def active_exam(self, year: int, today: date | None = None) -> ActiveExam:
        schedules, force_exam = self.load(year)
        return resolve_active_exam(schedules, force_exam, today or date.today())

    def save(self, year: int, schedule: ExamSchedule) -> str:
        """시험 1개 일정 저장

        Raises:
            FormValidationError: 시험일/발표일 중 하나라도 비어 있을 때
        """
        if not schedule.is_complete:
            raise FormValidationError("시험일과 발표일을 모두 입력하세요")
        result = self._client.save_exam_schedule(
            year,
            schedule.exam_type,
            schedule.exam_date.isoformat(),
            schedule.release_date.isoformat(),
        )
        logger.info("시험 일정 저장: %d %s", year, schedule.exam_type)
        return result.get("message") or "저장 완료"

    def set_force_exam(self, year: int, force_exam: str | None) -> str:
        """강제 설정. "자동"/None 이면 해제."""
        value = None if not force_exam or force_exam == FORCE_AUTO else force_exam
        result = self._client.set_force_exam(year, value)
        logger.info("강제 시험 설정: %d %s", year, value or FORCE_AUTO)
        return result.get("message") or "저장 완료"

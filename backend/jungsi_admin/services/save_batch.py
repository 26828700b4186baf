"""여러 저장 호출 동시 실행

한 화면의 "전체 저장"은 서로 독립적인 호출 여러 개로 이루어진다.
전부 동시에 보내고 전부 끝날 때까지 기다린다.
순서 보장 없음, 트랜잭션 없음 (일부 성공분은 되돌리지 않는다).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from jungsi_admin.config import settings
from jungsi_admin.services.admin_api import AdminApiError

logger = logging.getLogger(__name__)


class FormValidationError(ValueError):
    """저장 전 입력 검증 실패 (서버로 보내지 않음)"""


@dataclass
class SaveReport:
    """일괄 저장 결과

    사용자에게는 전체 성공/실패 메시지만 보여주고
    실패한 작업 이름(failed)은 로그로만 남긴다.
    """

    ok: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    success_message: str = "저장되었습니다."
    failure_message: str = "일부 저장에 실패했습니다."

    @property
    def all_ok(self) -> bool:
        return not self.failed

    @property
    def message(self) -> str:
        return self.success_message if self.all_ok else self.failure_message


def run_parallel(
    tasks: Mapping[str, Callable[[], Any]],
    *,
    success_message: str = "저장되었습니다.",
    failure_message: str = "일부 저장에 실패했습니다.",
    max_workers: int | None = None,
) -> SaveReport:
    """작업 전부 동시 실행 후 결과 집계

    AdminApiError는 해당 작업의 실패로 집계한다.
    그 밖의 예외는 호출자에게 그대로 전파된다.
    """
    report = SaveReport(success_message=success_message, failure_message=failure_message)
    if not tasks:
        return report

    workers = max(1, min(max_workers or settings.ADMIN_SAVE_MAX_WORKERS, len(tasks)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_name = {executor.submit(task): name for name, task in tasks.items()}

        for future in as_completed(future_to_name):
            name = future_to_name[future]
            try:
                future.result()
            except AdminApiError as e:
                logger.error("저장 실패 [%s]: %s", name, e)
                report.failed.append(name)
            else:
                report.ok.append(name)

    # 완료 순서가 아니라 요청 순서로 정렬
    order = list(tasks)
    report.ok.sort(key=order.index)
    report.failed.sort(key=order.index)

    if report.failed:
        logger.warning("일괄 저장 일부 실패: %d/%d (%s)", len(report.failed), len(tasks), ", ".join(report.failed))
    else:
        logger.info("일괄 저장 완료: %d건", len(tasks))
    return report

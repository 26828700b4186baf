"""실기 배점표 편집

종목명별로 (성별, 기록, 점수) 행 목록을 가진다.
편집은 화면에서 모아 두었다가 저장할 때 행마다 생성/수정/삭제 호출로 바꿔
한꺼번에 보낸다.

- 기존 행(id 있음) 삭제 → 삭제 표시만 하고 저장 시 DELETE
- 새 행 삭제 → 목록에서 바로 제거 (서버 호출 없음)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from jungsi_admin.services.admin_api import AdminApiClient
from jungsi_admin.services.save_batch import FormValidationError, SaveReport, run_parallel

logger = logging.getLogger(__name__)

GENDERS = ("남", "여")
DEFAULT_GENDER = "남"


class PracticalRow(BaseModel):
    """배점 1행"""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    gender: str = DEFAULT_GENDER
    record: str = ""
    score: float = 0
    is_new: bool = Field(default=False, alias="isNew")
    is_deleted: bool = Field(default=False, alias="isDeleted")

    @classmethod
    def new(cls) -> PracticalRow:
        return cls(is_new=True)


@dataclass
class PracticalOp:
    """저장 호출 1건"""

    kind: Literal["delete", "create", "update"]
    event_name: str
    seq: int
    row_id: int | None = None
    payload: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return f"{self.seq}:{self.kind}:{self.event_name}"


class PracticalTable:
    """학과 1곳의 실기 배점표 편집 상태"""

    def __init__(self, events: Mapping[str, list[Any]] | None = None) -> None:
        self._events: dict[str, list[PracticalRow]] = {
            name: [r if isinstance(r, PracticalRow) else PracticalRow.model_validate(r) for r in rows]
            for name, rows in (events or {}).items()
        }

    @property
    def events(self) -> dict[str, list[PracticalRow]]:
        return self._events

    def visible_rows(self, event_name: str) -> list[PracticalRow]:
        """삭제 표시된 행을 뺀 목록"""
        return [r for r in self._events.get(event_name, []) if not r.is_deleted]

    def add_event(self, event_name: str) -> None:
        """종목 추가 (새 행 1개로 시작)

        Raises:
            FormValidationError: 종목명이 비어 있을 때
        """
        name = event_name.strip()
        if not name:
            raise FormValidationError("종목명을 입력하세요")
        self._events[name] = [PracticalRow.new()]

    def add_row(self, event_name: str) -> None:
        self._events.setdefault(event_name, []).append(PracticalRow.new())

    def update_row(self, event_name: str, index: int, field: str, value: Any) -> PracticalRow:
        """행 1개의 필드 수정

        Raises:
            FormValidationError: 성별이 남/여가 아닐 때
        """
        if field == "gender" and value not in GENDERS:
            raise FormValidationError(f"성별은 남/여 중 하나입니다: {value}")
        rows = self._events[event_name]
        row = PracticalRow.model_validate({**rows[index].model_dump(), field: value})
        rows[index] = row
        return row

    def delete_row(self, event_name: str, index: int) -> None:
        rows = self._events[event_name]
        if rows[index].id is not None:
            rows[index] = rows[index].model_copy(update={"is_deleted": True})
        else:
            del rows[index]

    def delete_event(self, event_name: str) -> None:
        """기존 행이 있으면 전부 삭제 표시, 새 행뿐이면 종목째 제거"""
        rows = self._events[event_name]
        if any(r.id is not None for r in rows):
            self._events[event_name] = [r.model_copy(update={"is_deleted": True}) for r in rows]
        else:
            del self._events[event_name]


def plan_practical_save(uid: int, year: int, table: PracticalTable) -> list[PracticalOp]:
    """편집 상태 → 저장 호출 목록

    - 삭제 표시된 기존 행 → delete
    - 삭제되지 않은 새 행 → create
    - 삭제되지 않은 기존 행 → update
    새 행을 삭제한 경우는 호출 없음.
    """
    ops: list[PracticalOp] = []
    for event_name, rows in table.events.items():
        for row in rows:
            body = {
                "event_name": event_name,
                "gender": row.gender,
                "record": row.record,
                "score": row.score,
            }
            if row.is_deleted and row.id is not None:
                ops.append(PracticalOp("delete", event_name, len(ops), row_id=row.id))
            elif row.is_new and not row.is_deleted:
                payload = {"U_ID": uid, "year": year, **body}
                ops.append(PracticalOp("create", event_name, len(ops), payload=payload))
            elif row.id is not None and not row.is_deleted:
                ops.append(PracticalOp("update", event_name, len(ops), row_id=row.id, payload=body))
    return ops


def _op_call(client: AdminApiClient, op: PracticalOp):
    if op.kind == "delete":
        return partial(client.delete_practical, op.row_id)
    if op.kind == "create":
        return partial(client.create_practical, op.payload)
    return partial(client.update_practical, op.row_id, op.payload)


class PracticalService:
    def __init__(self, client: AdminApiClient) -> None:
        self._client = client

    def load(self, uid: int, year: int) -> PracticalTable:
        return PracticalTable(self._client.get_practical(uid, year))

    def save(self, uid: int, year: int, table: PracticalTable) -> SaveReport:
        """변경분 동시 저장 (롤백 없음). 저장 후에는 load()로 다시 불러온다."""
        ops = plan_practical_save(uid, year, table)
        logger.info("실기 배점 저장: U_ID=%d, %d건", uid, len(ops))
        tasks = {op.name: _op_call(self._client, op) for op in ops}
        return run_parallel(
            tasks, success_message="저장 완료", failure_message="일부 저장에 실패했습니다."
        )

"""선택반영/가산점 규칙 목록 편집기

편집 화면의 규칙 목록 상태를 관리한다.
변경은 추가 / 삭제 / 필드 교체 / 기본값 초기화 네 가지뿐이며
모든 변경은 스키마 검증을 통과해야 반영된다 (실패 시 목록 그대로).

"아직 불러오지 않음"과 "기본 비율 사용(빈 목록)"은 다른 상태지만
저장 본문은 둘 다 [] 이다. null이나 필드 생략은 절대 보내지 않는다.

저장된 규칙이 스키마에 맞지 않아 불러오지 못했으면(load_error)
추가나 초기화로 직접 덮어쓰기 전까지는 저장 대상에서 빠진다.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from jungsi_admin.models.rules import (
    SUBJECT_CHOICES,
    BonusRule,
    RuleSchemaError,
    SelectionRule,
    SelectNRule,
    dump_rules,
    parse_bonus_rules,
    parse_selection_rules,
)

logger = logging.getLogger(__name__)

RuleT = TypeVar("RuleT", bound=BaseModel)

_SELECTION_ITEM = TypeAdapter(SelectionRule)


class RuleListEditor(ABC, Generic[RuleT]):
    """규칙 목록 편집 상태 (순서 유지)"""

    # 과목 집합 필드명 (wire 기준)
    subjects_field = "from"
    # 로그용 이름
    label = "규칙"

    def __init__(self) -> None:
        self._rules: list[RuleT] | None = None  # None = 아직 불러오지 않음
        self.load_error: str | None = None

    # === 상태 ===

    @property
    def is_loaded(self) -> bool:
        return self._rules is not None

    @property
    def rules(self) -> list[RuleT]:
        return list(self._rules or [])

    @property
    def uses_default(self) -> bool:
        """기본 비율 반영 (규칙 없음)"""
        return not self._rules

    @property
    def is_savable(self) -> bool:
        """저장 본문에 넣어도 되는지 (불러오기 실패 후 손대지 않았으면 False)"""
        return self.load_error is None

    def __len__(self) -> int:
        return len(self._rules or [])

    # === 하위 클래스 구현 ===

    @abstractmethod
    def _parse_list(self, raw: Any) -> list[RuleT]:
        """서버 값 → 규칙 목록"""

    @abstractmethod
    def _default_rule(self) -> RuleT:
        """'추가' 버튼으로 만드는 규칙"""

    @abstractmethod
    def _validate_one(self, data: dict[str, Any]) -> RuleT:
        """wire dict → 규칙 1개 (ValidationError 전파)"""

    # === 변경 ===

    def load(self, raw: Any) -> None:
        """서버 값으로 초기화 (None/누락 → 빈 목록)

        Raises:
            RuleSchemaError: 서버 값이 스키마에 맞지 않을 때 (상태 변경 없음)
        """
        self._rules = self._parse_list(raw)
        self.load_error = None

    def try_load(self, raw: Any) -> bool:
        """load()와 같지만 스키마 오류를 load_error로 남기고 False 반환"""
        try:
            self.load(raw)
        except RuleSchemaError as e:
            logger.warning("%s 불러오기 실패, 저장 대상에서 제외: %s", self.label, e)
            self._rules = None
            self.load_error = str(e)
            return False
        return True

    def append_default(self) -> RuleT:
        rule = self._default_rule()
        self._rules = [*self.rules, rule]
        self.load_error = None
        return rule

    def remove_at(self, index: int) -> RuleT:
        rules = self.rules
        removed = rules.pop(self._check_index(index))
        self._rules = rules
        return removed

    def replace_field(self, index: int, field: str, value: Any) -> RuleT:
        """index번째 규칙의 필드 하나를 교체

        Raises:
            IndexError: 범위 밖 index
            RuleSchemaError: 교체 결과가 스키마에 맞지 않을 때 (상태 변경 없음)
        """
        index = self._check_index(index)
        data = self._replace(self.rules[index], field, value)
        updated = self._validate(data)
        rules = self.rules
        rules[index] = updated
        self._rules = rules
        return updated

    def toggle_subject(self, index: int, subject: str, checked: bool) -> RuleT:
        """과목 체크박스 on/off

        Raises:
            ValueError: 선택지에 없는 과목
        """
        if subject not in SUBJECT_CHOICES:
            raise ValueError(f"알 수 없는 과목: {subject}")
        current = self.rules[self._check_index(index)].model_dump(by_alias=True)
        subjects = [s for s in current.get(self.subjects_field, []) if s != subject]
        if checked:
            subjects.append(subject)
        return self.replace_field(index, self.subjects_field, subjects)

    def reset_to_default(self) -> None:
        """'기본 비율로 반영': 명시적 빈 목록"""
        self._rules = []
        self.load_error = None

    # === 직렬화 ===

    def to_payload(self) -> list[dict[str, Any]]:
        """PUT 요청 본문. 항상 list (불러오기 전이거나 초기화했으면 [])"""
        return dump_rules(self.rules)

    # === 내부 ===

    def _check_index(self, index: int) -> int:
        size = len(self)
        if index < 0 or index >= size:
            raise IndexError(f"규칙 인덱스 범위 밖: {index} (규칙 {size}개)")
        return index

    def _replace(self, rule: RuleT, field: str, value: Any) -> dict[str, Any]:
        data = rule.model_dump(by_alias=True)
        data[self._wire_name(field)] = value
        return data

    def _wire_name(self, field: str) -> str:
        return "from" if field == "from_" else field

    def _validate(self, data: dict[str, Any]) -> RuleT:
        try:
            return self._validate_one(data)
        except ValidationError as e:
            logger.warning("규칙 변경 거부: %s", e.errors()[0].get("msg", ""))
            raise RuleSchemaError(f"규칙 형식 오류: {e.error_count()}건") from e


class SelectionRuleEditor(RuleListEditor[SelectionRule]):
    """선택반영규칙 편집기 (select_n / select_ranked_weights)"""

    label = "선택반영규칙"

    def _parse_list(self, raw: Any) -> list[SelectionRule]:
        return parse_selection_rules(raw)

    def _default_rule(self) -> SelectionRule:
        return SelectNRule(count=1)

    def _validate_one(self, data: dict[str, Any]) -> SelectionRule:
        return _SELECTION_ITEM.validate_python(data)

    def _replace(self, rule: SelectionRule, field: str, value: Any) -> dict[str, Any]:
        # type 변경 시 다른 variant로 전환: from만 유지하고 나머지는 새 variant 기본값
        if field == "type" and value != rule.type:
            return {"type": value, "from": list(rule.from_)}
        return super()._replace(rule, field, value)


class BonusRuleEditor(RuleListEditor[BonusRule]):
    """가산점규칙 편집기"""

    subjects_field = "subjects"
    label = "가산점규칙"

    def _parse_list(self, raw: Any) -> list[BonusRule]:
        return parse_bonus_rules(raw)

    def _default_rule(self) -> BonusRule:
        return BonusRule()

    def _validate_one(self, data: dict[str, Any]) -> BonusRule:
        return BonusRule.model_validate(data)

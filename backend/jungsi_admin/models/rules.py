"""선택반영규칙 / 가산점규칙 스키마

백엔드는 selection_rules, bonus_rules를 타입 없는 JSON으로 저장한다.
내부에서는 규칙 종류별 모델(태그드 유니온)로 다루고
parse_* / dump_rules 에서만 JSON과 변환한다.

선택반영규칙은 순서가 의미를 가진다 (앞에서부터 차례로 적용).
빈 목록은 "기본 비율로 반영" (선택 축소 없음).
"""

from __future__ import annotations

import json
import math
from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

# 선택반영 대상 과목 체크박스
SUBJECT_CHOICES = ("국어", "수학", "영어", "탐구", "한국사")

DEFAULT_BONUS_TYPE = "percent_bonus"


class RuleSchemaError(ValueError):
    """규칙 JSON이 스키마에 맞지 않음"""


def _dedupe(subjects: list[str]) -> list[str]:
    """집합 의미: 처음 등장 순서 유지, 중복 제거"""
    seen: dict[str, None] = {}
    for subject in subjects:
        seen.setdefault(subject, None)
    return list(seen)


# 과목 집합
SubjectSet = Annotated[list[str], AfterValidator(_dedupe)]


class _RuleBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SelectNRule(_RuleBase):
    """from 중 상위 count개 과목 선택"""

    type: Literal["select_n"] = "select_n"
    from_: SubjectSet = Field(default_factory=list, alias="from")
    count: int = Field(default=1, ge=1)


class SelectRankedWeightsRule(_RuleBase):
    """from 과목을 점수 내림차순 정렬 후 i번째 과목에 weights[i] 적용

    weights 길이는 from 크기와 같을 필요가 없다.
    """

    type: Literal["select_ranked_weights"] = "select_ranked_weights"
    from_: SubjectSet = Field(default_factory=list, alias="from")
    weights: list[float] = Field(default_factory=list)


SelectionRule = Annotated[
    Union[SelectNRule, SelectRankedWeightsRule],
    Field(discriminator="type"),
]


class BonusRule(_RuleBase):
    """가산점 규칙. type 의미는 계산 엔진만 안다 (그대로 전달)."""

    type: str = DEFAULT_BONUS_TYPE
    subjects: SubjectSet = Field(default_factory=list)
    value: float = 0.0


_SELECTION_ADAPTER = TypeAdapter(list[SelectionRule])
_BONUS_ADAPTER = TypeAdapter(list[BonusRule])


def _as_rule_list(raw: Any) -> list[Any]:
    """None/빈 값 → [], 단일 객체 → [객체], JSON 문자열 → 디코딩"""
    if raw is None or raw == "" or raw == {}:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise RuleSchemaError(f"규칙 JSON 파싱 실패: {e}") from e
        return _as_rule_list(raw)
    if isinstance(raw, list):
        return raw
    return [raw]


def parse_selection_rules(raw: Any) -> list[SelectNRule | SelectRankedWeightsRule]:
    """서버 선택반영규칙 → 모델 목록

    Raises:
        RuleSchemaError: 알 수 없는 type이거나 필드 형식이 맞지 않을 때
    """
    try:
        return _SELECTION_ADAPTER.validate_python(_as_rule_list(raw))
    except ValidationError as e:
        raise RuleSchemaError(f"선택반영규칙 형식 오류: {e.error_count()}건") from e


def parse_bonus_rules(raw: Any) -> list[BonusRule]:
    """서버 가산점규칙 → 모델 목록"""
    try:
        return _BONUS_ADAPTER.validate_python(_as_rule_list(raw))
    except ValidationError as e:
        raise RuleSchemaError(f"가산점규칙 형식 오류: {e.error_count()}건") from e


def dump_rules(rules: list[BaseModel]) -> list[dict[str, Any]]:
    """모델 목록 → 백엔드 JSON 배열 ("from" 키 사용). 항상 list."""
    return [rule.model_dump(by_alias=True) for rule in rules]


def parse_weights(text: str) -> list[float]:
    """'1, 0.8, 0.5' → [1.0, 0.8, 0.5] (숫자가 아닌 항목은 버림)"""
    weights = []
    for part in text.split(","):
        try:
            value = float(part.strip())
        except ValueError:
            continue
        if not math.isnan(value):
            weights.append(value)
    return weights


def parse_subjects(text: str) -> list[str]:
    """'국어, 수학,,' → ['국어', '수학']"""
    return [s.strip() for s in text.split(",") if s.strip()]

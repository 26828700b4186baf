"""학과 반영비율 설정 저장 흐름

두 화면이 같은 백엔드 섹션(PUT /admin/jungsi/ratio/{uid}/{section})을 나눠 쓴다.

1. 학과 설정 (DepartmentSettingsForm): 계산유형·환산방식·총점·특수공식·
   점수 환산 설정·선택반영/가산점 규칙·영어/한국사 등급배점·기타 → 10개 섹션
2. 반영 비율 (RatioForm): 수능/내신/실기 비율, 과목별 비율, 등급배점 → 최대 4개 섹션

저장은 섹션별 PUT을 동시에 보내고 전체 성공 여부만 메시지로 알린다.
입력 검증은 네트워크 호출 전에 끝낸다 (FormValidationError).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from jungsi_admin.models.score_config import ScoreConfig
from jungsi_admin.services.admin_api import AdminApiClient
from jungsi_admin.services.rule_editor import BonusRuleEditor, SelectionRuleEditor
from jungsi_admin.services.save_batch import FormValidationError, SaveReport, run_parallel

logger = logging.getLogger(__name__)

# 계산 유형 / 방식
CALC_TYPE_DEFAULT = "기본비율"
CALC_TYPE_SPECIAL = "특수공식"
CALC_TYPES = (CALC_TYPE_DEFAULT, CALC_TYPE_SPECIAL)
CALC_METHODS = ("환산", "직접")

# 총점 선택지. CUSTOM_TOTAL 이면 custom_total 입력값 사용
TOTAL_PRESETS = (1000, 500, 300)
DEFAULT_TOTAL = 1000
CUSTOM_TOTAL = -1

DEFAULT_INQUIRY_COUNT = 2

SETTINGS_SAVED = "모든 설정이 저장되었습니다."
SETTINGS_PARTIAL = "일부 설정 저장에 실패했습니다."
RATIOS_SAVED = "모든 비율이 저장되었습니다."
RATIOS_PARTIAL = "일부 저장에 실패했습니다."


def parse_grade_score(text: str) -> float | None:
    """등급배점 입력칸 → 숫자 ("" → None)

    Raises:
        FormValidationError: 숫자가 아닌 입력
    """
    text = text.strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError as e:
        raise FormValidationError(f"숫자를 입력하세요: {text}") from e


def set_grade_score(scores: dict[str, float], grade: int, text: str) -> None:
    """등급배점 맵 갱신 (키는 "1"~"9", 빈 입력이면 삭제)"""
    if not 1 <= grade <= 9:
        raise FormValidationError(f"등급은 1~9 입니다: {grade}")
    value = parse_grade_score(text)
    if value is None:
        scores.pop(str(grade), None)
    else:
        scores[str(grade)] = value


def _grade_map(raw: Any) -> dict[str, float]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(k): v for k, v in raw.items() if v is not None and v != ""}


def save_sections(
    client: AdminApiClient,
    uid: int,
    payloads: Mapping[str, Any],
    *,
    success_message: str = SETTINGS_SAVED,
    failure_message: str = SETTINGS_PARTIAL,
) -> SaveReport:
    """섹션별 PUT 동시 실행 (롤백 없음)"""
    logger.info("반영비율 저장 시작: U_ID=%d, 섹션 %d개", uid, len(payloads))
    tasks = {
        section: partial(client.put_ratio_section, uid, section, payload)
        for section, payload in payloads.items()
    }
    return run_parallel(
        tasks, success_message=success_message, failure_message=failure_message
    )


# ── 학과 설정 ──


@dataclass
class DepartmentSettingsForm:
    """학과 설정 화면 상태"""

    uid: int
    univ_name: str = ""
    dept_name: str = ""
    gun: str = ""
    calc_type: str = CALC_TYPE_DEFAULT
    calc_method: str = "환산"
    total_score: int = DEFAULT_TOTAL
    custom_total: str = ""
    special_formula: str = ""
    score_config: ScoreConfig = field(default_factory=ScoreConfig)
    english_scores: dict[str, float] = field(default_factory=dict)
    history_scores: dict[str, float] = field(default_factory=dict)
    selection_rules: SelectionRuleEditor = field(default_factory=SelectionRuleEditor)
    bonus_rules: BonusRuleEditor = field(default_factory=BonusRuleEditor)
    history_first: bool = False
    etc_note: str = ""

    @classmethod
    def from_details(cls, details: Mapping[str, Any]) -> DepartmentSettingsForm:
        """GET /admin/jungsi/details/{uid} 의 data → 화면 상태

        저장된 규칙이 스키마에 맞지 않으면 그 편집기만 load_error 상태로 두고
        나머지는 정상적으로 불러온다.
        """
        basic = details.get("기본정보") or {}
        ratio = details.get("반영비율") or {}

        total = ratio.get("총점") or DEFAULT_TOTAL
        try:
            total = int(total)
        except (TypeError, ValueError):
            logger.warning("총점 해석 불가 (%r), 기본값 %d 사용", total, DEFAULT_TOTAL)
            total = DEFAULT_TOTAL

        form = cls(
            uid=int(basic.get("U_ID")),
            univ_name=basic.get("대학명") or "",
            dept_name=basic.get("학과명") or "",
            gun=basic.get("군") or "",
            calc_type=ratio.get("calc_type") or CALC_TYPE_DEFAULT,
            calc_method=ratio.get("calc_method") or "환산",
            total_score=total if total in TOTAL_PRESETS else CUSTOM_TOTAL,
            custom_total="" if total in TOTAL_PRESETS else str(total),
            special_formula=ratio.get("특수공식") or "",
            score_config=ScoreConfig.from_raw(ratio.get("score_config")),
            english_scores=_grade_map(ratio.get("영어등급배점")),
            history_scores=_grade_map(ratio.get("한국사등급배점")),
        )
        form.selection_rules.try_load(ratio.get("선택반영규칙"))
        form.bonus_rules.try_load(ratio.get("가산점규칙"))
        return form

    def final_total(self) -> int:
        """저장할 총점. 직접 입력이면 양의 정수여야 한다."""
        if self.total_score != CUSTOM_TOTAL:
            return self.total_score
        try:
            total = int(self.custom_total.strip())
        except ValueError as e:
            raise FormValidationError("총점을 숫자로 입력하세요") from e
        if total <= 0:
            raise FormValidationError("총점은 0보다 커야 합니다")
        return total

    @property
    def rule_load_errors(self) -> dict[str, str]:
        """불러오지 못한 규칙 섹션 → 오류 메시지"""
        return {
            section: editor.load_error
            for section, editor in self._rule_editors().items()
            if editor.load_error is not None
        }

    def section_payloads(self) -> dict[str, Any]:
        """섹션별 PUT 본문 (보통 10개)

        불러오기에 실패한 규칙 섹션은 빼서 저장된 규칙을 덮어쓰지 않는다.

        Raises:
            FormValidationError: 계산유형/방식 또는 총점 입력 오류
        """
        if self.calc_type not in CALC_TYPES:
            raise FormValidationError(f"알 수 없는 계산유형: {self.calc_type}")
        if self.calc_method not in CALC_METHODS:
            raise FormValidationError(f"알 수 없는 환산방식: {self.calc_method}")
        total = self.final_total()
        payloads: dict[str, Any] = {
            "calc-method": {"calc_type": self.calc_type, "calc_method": self.calc_method},
        }
        for section, editor in self._rule_editors().items():
            if editor.is_savable:
                payloads[section] = editor.to_payload()
            else:
                logger.warning("U_ID=%d %s 섹션 저장 건너뜀: %s", self.uid, section, editor.load_error)
        payloads.update({
            "score-config": self.score_config.to_payload(),
            "special-formula": {
                "formula": self.special_formula if self.calc_type == CALC_TYPE_SPECIAL else None
            },
            "total": {"total_score": total},
            "etc-settings": {"한국사우선적용": self.history_first},
            "english-scores": dict(self.english_scores),
            "history-scores": dict(self.history_scores),
            "etc-note": {"note": self.etc_note},
        })
        return payloads

    def _rule_editors(self) -> dict[str, SelectionRuleEditor | BonusRuleEditor]:
        return {"selection-rules": self.selection_rules, "bonus-rules": self.bonus_rules}


def save_department_settings(client: AdminApiClient, form: DepartmentSettingsForm) -> SaveReport:
    """학과 설정 전체 저장

    Raises:
        FormValidationError: 네트워크 호출 전 검증 실패
    """
    payloads = form.section_payloads()
    return save_sections(client, form.uid, payloads)


# ── 반영 비율 ──


@dataclass
class RatioForm:
    """반영 비율 화면 상태 (비율은 서버가 문자열로 관리)"""

    suneung: str = "100"
    naeshin: str = "0"
    silgi: str = "0"
    silgi_total: int = 0
    korean: float = 0
    math: float = 0
    english: float = 0
    inquiry: float = 0
    inquiry_count: int = DEFAULT_INQUIRY_COUNT
    english_scores: dict[str, float] = field(default_factory=dict)
    history_scores: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_ratio(cls, data: Mapping[str, Any]) -> RatioForm:
        """GET /admin/jungsi/ratio/{uid} 의 data → 화면 상태

        내신비율은 응답에 없으므로 항상 "0"에서 시작한다.
        """
        return cls(
            suneung=str(data.get("수능비율") or "100"),
            silgi=str(data.get("실기비율") or "0"),
            silgi_total=data.get("실기총점") or 0,
            korean=data.get("국어") or 0,
            math=data.get("수학") or 0,
            english=data.get("영어") or 0,
            inquiry=data.get("탐구") or 0,
            inquiry_count=data.get("탐구수") or DEFAULT_INQUIRY_COUNT,
            english_scores=_grade_map(data.get("영어등급배점")),
            history_scores=_grade_map(data.get("한국사등급배점")),
        )

    def section_payloads(self) -> dict[str, Any]:
        """비어 있는 등급배점 섹션은 보내지 않는다 (성공으로 간주)"""
        payloads: dict[str, Any] = {
            "main-ratios": {
                "suneung": self.suneung,
                "naeshin": self.naeshin,
                "silgi": self.silgi,
                "silgi_total": self.silgi_total,
            },
            "subjects": {
                "국어": self.korean,
                "수학": self.math,
                "영어": self.english,
                "탐구": self.inquiry,
                "탐구수": self.inquiry_count,
            },
        }
        if self.english_scores:
            payloads["english-scores"] = dict(self.english_scores)
        if self.history_scores:
            payloads["history-scores"] = dict(self.history_scores)
        return payloads


def save_ratio_form(client: AdminApiClient, uid: int, form: RatioForm) -> SaveReport:
    return save_sections(
        client,
        uid,
        form.section_payloads(),
        success_message=RATIOS_SAVED,
        failure_message=RATIOS_PARTIAL,
    )

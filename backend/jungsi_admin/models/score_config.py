"""점수 환산 설정 (score_config)

학과별로 국어/수학, 영어, 탐구의 원점수를 어떤 척도로 환산할지 정의한다.
백엔드 스키마는 type 판별형(discriminated)이므로 보조 필드는
해당 type일 때만 존재해야 한다 (null 금지, 키 자체가 없어야 함).

- korean_math: percentile | standard_score | grade
    standard_score 일 때만 max_score_method (fixed_200 | highest_of_year)
- english: grade_conversion | fixed_max_score
    fixed_max_score 일 때만 max_score (100 | 200)
- inquiry: percentile | standard_score | converted_standard_score | grade
    표준점수 계열일 때만 max_score_method (fixed_100 | highest_of_year)

알 수 없는 type 문자열은 해석하지 않고 그대로 통과시킨다.
의미 검증은 계산 엔진(백엔드)의 책임이고 여기서는 형태만 맞춘다.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# 기본 type
KOREAN_MATH_DEFAULT_TYPE = "percentile"
ENGLISH_DEFAULT_TYPE = "grade_conversion"
INQUIRY_DEFAULT_TYPE = "percentile"

# 보조 필드가 필요한 type
KOREAN_MATH_STANDARD_TYPES = frozenset({"standard_score"})
ENGLISH_FIXED_MAX_TYPES = frozenset({"fixed_max_score"})
INQUIRY_STANDARD_TYPES = frozenset({"standard_score", "converted_standard_score"})

# 보조 필드 기본값
KOREAN_MATH_DEFAULT_MAX_METHOD = "fixed_200"
ENGLISH_DEFAULT_MAX_SCORE = 100
INQUIRY_DEFAULT_MAX_METHOD = "fixed_100"


class ScaleConfig(BaseModel):
    """보조 필드 없는 환산 방식 (백분위, 등급, 알 수 없는 type)"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str


class KoreanMathStandardConfig(BaseModel):
    """국어/수학 표준점수 환산"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["standard_score"] = "standard_score"
    max_score_method: str = KOREAN_MATH_DEFAULT_MAX_METHOD


class EnglishFixedMaxConfig(BaseModel):
    """영어 고정 만점 환산"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["fixed_max_score"] = "fixed_max_score"
    max_score: int = ENGLISH_DEFAULT_MAX_SCORE


class InquiryStandardConfig(BaseModel):
    """탐구 표준점수/변환표준점수 환산"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["standard_score", "converted_standard_score"]
    max_score_method: str = INQUIRY_DEFAULT_MAX_METHOD


KoreanMathConfig = Union[KoreanMathStandardConfig, ScaleConfig]
EnglishConfig = Union[EnglishFixedMaxConfig, ScaleConfig]
InquiryConfig = Union[InquiryStandardConfig, ScaleConfig]


def _pick(raw: dict[str, Any], *keys: str) -> Any:
    """snake_case / camelCase 키 중 먼저 있는 값"""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def build_korean_math(type_: str | None, max_score_method: str | None = None) -> KoreanMathConfig:
    """국어/수학 설정 생성. standard_score가 아니면 max_score_method는 버린다."""
    type_ = str(type_) if type_ else KOREAN_MATH_DEFAULT_TYPE
    if type_ in KOREAN_MATH_STANDARD_TYPES:
        return KoreanMathStandardConfig(
            max_score_method=max_score_method or KOREAN_MATH_DEFAULT_MAX_METHOD
        )
    return ScaleConfig(type=type_)


def build_english(type_: str | None, max_score: Any = None) -> EnglishConfig:
    """영어 설정 생성. fixed_max_score가 아니면 max_score는 버린다."""
    type_ = str(type_) if type_ else ENGLISH_DEFAULT_TYPE
    if type_ not in ENGLISH_FIXED_MAX_TYPES:
        return ScaleConfig(type=type_)

    if max_score is None or max_score == "":
        return EnglishFixedMaxConfig()
    try:
        return EnglishFixedMaxConfig(max_score=int(max_score))
    except (TypeError, ValueError):
        logger.warning("영어 max_score 해석 불가 (%r), 기본값 %d 사용", max_score, ENGLISH_DEFAULT_MAX_SCORE)
        return EnglishFixedMaxConfig()


def build_inquiry(type_: str | None, max_score_method: str | None = None) -> InquiryConfig:
    """탐구 설정 생성. 표준점수 계열이 아니면 max_score_method는 버린다."""
    type_ = str(type_) if type_ else INQUIRY_DEFAULT_TYPE
    if type_ in INQUIRY_STANDARD_TYPES:
        return InquiryStandardConfig(
            type=type_,
            max_score_method=max_score_method or INQUIRY_DEFAULT_MAX_METHOD,
        )
    return ScaleConfig(type=type_)


class ChoiceMemory(BaseModel):
    """type을 바꿔도 유지되는 보조 필드 선택값"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    korean_math_max_method: str | None = None
    english_max_score: Any = None
    inquiry_max_method: str | None = None


class ScoreConfig(BaseModel):
    """학과별 점수 환산 설정"""

    model_config = ConfigDict(frozen=True)

    korean_math: KoreanMathConfig = ScaleConfig(type=KOREAN_MATH_DEFAULT_TYPE)
    english: EnglishConfig = ScaleConfig(type=ENGLISH_DEFAULT_TYPE)
    inquiry: InquiryConfig = ScaleConfig(type=INQUIRY_DEFAULT_TYPE)
    # 현재 type이 쓰지 않는 보조 필드의 마지막 선택값 (직렬화 제외)
    memory: ChoiceMemory = Field(default_factory=ChoiceMemory, exclude=True, repr=False)

    @classmethod
    def from_raw(cls, raw: dict[str, Any] | None) -> ScoreConfig:
        """서버 score_config(일부 누락 가능) → 정규화된 ScoreConfig

        type이 요구하지 않는 보조 필드는 원본에 남아 있어도 제거한다.
        """
        raw = _as_dict(raw)
        km = _as_dict(_pick(raw, "korean_math", "koreanMath"))
        eng = _as_dict(_pick(raw, "english"))
        inq = _as_dict(_pick(raw, "inquiry"))

        return cls._build(
            _pick(km, "type"), _pick(km, "max_score_method", "maxScoreMethod"),
            _pick(eng, "type"), _pick(eng, "max_score", "maxScore"),
            _pick(inq, "type"), _pick(inq, "max_score_method", "maxScoreMethod"),
        )

    @classmethod
    def from_form(
        cls,
        *,
        korean_math_type: str,
        korean_math_max_method: str | None = None,
        english_type: str,
        english_max_score: int | None = None,
        inquiry_type: str,
        inquiry_max_method: str | None = None,
    ) -> ScoreConfig:
        """설정 화면 입력값 → ScoreConfig

        화면은 type을 바꿔도 보조 필드 선택값을 기억하므로 둘 다 받아서
        type이 요구할 때만 붙인다.
        """
        return cls._build(
            korean_math_type, korean_math_max_method,
            english_type, english_max_score,
            inquiry_type, inquiry_max_method,
        )

    def with_types(
        self,
        *,
        korean_math_type: str | None = None,
        english_type: str | None = None,
        inquiry_type: str | None = None,
    ) -> ScoreConfig:
        """type만 바꾼 사본

        보조 필드는 현재 값, 없으면 기억해 둔 마지막 선택값을 새 type에 이어 쓴다.
        standard_score → grade → standard_score 로 돌아와도 highest_of_year 유지.
        """
        km, eng, inq, memory = self.korean_math, self.english, self.inquiry, self.memory
        return self._build(
            korean_math_type or km.type,
            getattr(km, "max_score_method", memory.korean_math_max_method),
            english_type or eng.type,
            getattr(eng, "max_score", memory.english_max_score),
            inquiry_type or inq.type,
            getattr(inq, "max_score_method", memory.inquiry_max_method),
        )

    @classmethod
    def _build(
        cls,
        km_type: str | None,
        km_method: str | None,
        eng_type: str | None,
        eng_max: Any,
        inq_type: str | None,
        inq_method: str | None,
    ) -> ScoreConfig:
        korean_math = build_korean_math(km_type, km_method)
        english = build_english(eng_type, eng_max)
        inquiry = build_inquiry(inq_type, inq_method)
        return cls(
            korean_math=korean_math,
            english=english,
            inquiry=inquiry,
            memory=ChoiceMemory(
                korean_math_max_method=getattr(korean_math, "max_score_method", km_method),
                english_max_score=getattr(english, "max_score", eng_max),
                inquiry_max_method=getattr(inquiry, "max_score_method", inq_method),
            ),
        )

    def to_payload(self) -> dict[str, Any]:
        """PUT .../score-config 요청 본문"""
        return {
            "korean_math": self.korean_math.model_dump(),
            "english": self.english.model_dump(),
            "inquiry": self.inquiry.model_dump(),
        }

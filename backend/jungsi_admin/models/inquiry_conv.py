"""탐구 백분위 → 변환표준점수 변환표

학과마다 사탐/과탐 두 트랙의 변환표를 가진다.
백분위 0~100 정수 → 변환표준점수(float) 희소 매핑이며,
키가 없으면 "미입력"으로 저장된 0과 구분한다.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Track = Literal["사탐", "과탐"]
TRACKS: tuple[Track, ...] = ("사탐", "과탐")

MIN_PERCENTILE = 0
MAX_PERCENTILE = 100
PERCENTILES = tuple(range(MAX_PERCENTILE, MIN_PERCENTILE - 1, -1))  # 화면은 100 → 0


def _check_percentile(percentile: int) -> int:
    if not MIN_PERCENTILE <= percentile <= MAX_PERCENTILE:
        raise ValueError(f"백분위 범위 밖: {percentile} (0~100)")
    return percentile


def _coerce_table(raw: Any) -> dict[int, float]:
    """JSON 객체(문자열 키) → {int: float}"""
    if not raw:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"변환표 형식 오류: {type(raw).__name__}")
    table: dict[int, float] = {}
    for key, value in raw.items():
        percentile = _check_percentile(int(key))
        if value is None or value == "":
            continue
        table[percentile] = float(value)
    return table


class InquiryConversion(BaseModel):
    """학과 1곳의 탐구 변환표 (사탐 + 과탐)"""

    uid: int
    year: int
    social: dict[int, float] = Field(default_factory=dict)   # 사탐
    science: dict[int, float] = Field(default_factory=dict)  # 과탐

    @field_validator("social", "science", mode="before")
    @classmethod
    def _validate_table(cls, v: Any) -> dict[int, float]:
        return _coerce_table(v)

    @classmethod
    def from_response(cls, uid: int, year: int, data: dict[str, Any] | None) -> InquiryConversion:
        """GET /admin/jungsi/inquiry-conv/{uid} 응답의 data → 모델 (없는 트랙은 빈 표)"""
        data = data or {}
        return cls(uid=uid, year=year, social=data.get("사탐"), science=data.get("과탐"))

    def table(self, track: Track) -> dict[int, float]:
        if track not in TRACKS:
            raise ValueError(f"알 수 없는 트랙: {track}")
        return self.social if track == "사탐" else self.science

    # === 편집 ===

    def set_score(self, track: Track, percentile: int, score: float) -> None:
        self.table(track)[_check_percentile(percentile)] = float(score)

    def clear_score(self, track: Track, percentile: int) -> None:
        self.table(track).pop(_check_percentile(percentile), None)

    def set_from_text(self, track: Track, percentile: int, text: str) -> None:
        """입력칸 값 반영 ("" → 미입력)"""
        text = text.strip()
        if text:
            self.set_score(track, percentile, float(text))
        else:
            self.clear_score(track, percentile)

    # === 조회 ===

    def rows(self, track: Track) -> list[tuple[int, float | None]]:
        """101행 (백분위, 점수|None), 백분위 내림차순"""
        table = self.table(track)
        return [(p, table.get(p)) for p in PERCENTILES]

    def filled_count(self, track: Track) -> int:
        return len(self.table(track))

    def count_label(self, track: Track) -> str:
        return f"{self.filled_count(track)}/{len(PERCENTILES)}"

    def to_payload(self, track: Track) -> dict[str, Any]:
        """PUT 요청 본문 (JSON 객체 키는 문자열)"""
        table = self.table(track)
        return {
            "track": track,
            "scores": {str(p): table[p] for p in sorted(table)},
        }

"""등급컷 테이블 모델

과목·시험별 1~9등급 컷(원점수, 표준점수, 백분위).
화면은 항상 9행을 보여주므로 서버 데이터가 일부만 있어도
템플릿 9칸에 채워 넣는다 (빠진 등급은 템플릿 기본값).

템플릿 기본값: 9등급은 원점수 0, 백분위 0 (관례상 최하 등급 하한),
나머지는 모두 미입력(None).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

GRADES = tuple(range(1, 10))
LOWEST_GRADE = 9

GradeCutField = Literal["raw_score", "std_score", "percentile"]
VALUE_FIELDS: tuple[GradeCutField, ...] = ("raw_score", "std_score", "percentile")

# 시험 유형
EXAM_TYPES = ("3월", "6월", "9월", "수능")

# 등급컷 입력 과목
GRADE_CUT_SUBJECTS = {
    "주요": ("국어", "수학"),
    "사탐": (
        "생활과윤리", "윤리와사상", "한국지리", "세계지리", "동아시아사",
        "세계사", "경제", "정치와법", "사회문화",
    ),
    "과탐": (
        "물리학I", "물리학II", "화학I", "화학II",
        "생명과학I", "생명과학II", "지구과학I", "지구과학II",
    ),
}
ALL_GRADE_CUT_SUBJECTS = tuple(s for group in GRADE_CUT_SUBJECTS.values() for s in group)


def check_grade_cut_target(exam_type: str, subject: str) -> None:
    """저장 대상 시험/과목 확인

    Raises:
        ValueError: 알 수 없는 시험 유형이나 과목
    """
    if exam_type not in EXAM_TYPES:
        raise ValueError(f"알 수 없는 시험 유형: {exam_type}")
    if subject not in ALL_GRADE_CUT_SUBJECTS:
        raise ValueError(f"등급컷 입력 과목이 아닙니다: {subject}")


class GradeCutPasteError(ValueError):
    """붙여넣은 텍스트에서 유효한 등급 행을 찾지 못함"""


class GradeCutEntry(BaseModel):
    """등급 1칸"""

    grade: int = Field(ge=1, le=9)
    raw_score: float | None = None
    std_score: float | None = None
    percentile: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.raw_score is None and self.std_score is None and self.percentile is None


def default_grade_cuts() -> list[GradeCutEntry]:
    """1~9등급 템플릿 (매번 새 객체)"""
    return [
        GradeCutEntry(
            grade=grade,
            raw_score=0 if grade == LOWEST_GRADE else None,
            percentile=0 if grade == LOWEST_GRADE else None,
        )
        for grade in GRADES
    ]


def merge_grade_cuts(
    template: Sequence[GradeCutEntry],
    server_data: Iterable[GradeCutEntry | dict] | None,
) -> list[GradeCutEntry]:
    """템플릿 9칸에 서버 데이터를 채운다

    같은 등급이 여러 번 오면 첫 번째를 쓴다. 서버에 없는 등급은 템플릿 값.
    1~9 범위 밖 등급이나 형식이 맞지 않는 항목은 건너뛴다.
    결과는 항상 템플릿과 같은 길이이며, 자기 자신과 다시 병합해도 같다.
    """
    found: dict[int, GradeCutEntry] = {}
    for item in server_data or []:
        if isinstance(item, GradeCutEntry):
            entry = item
        else:
            try:
                entry = GradeCutEntry.model_validate(item)
            except ValidationError as e:
                logger.warning("등급컷 항목 무시 (%r): %d건 형식 오류", item, e.error_count())
                continue
        found.setdefault(entry.grade, entry)

    return [
        (found.get(slot.grade) or slot).model_copy()
        for slot in template
    ]


def _parse_number(text: str) -> float | None:
    """'' → None, 그 외 float"""
    text = text.strip()
    if not text:
        return None
    return float(text)


def set_value(
    cuts: Sequence[GradeCutEntry],
    grade: int,
    field: GradeCutField,
    text: str,
) -> list[GradeCutEntry]:
    """셀 1개 수정 ("" 입력은 미입력으로)

    Raises:
        ValueError: 숫자가 아닌 입력
    """
    value = _parse_number(text)
    return [
        cut.model_copy(update={field: value}) if cut.grade == grade else cut
        for cut in cuts
    ]


def savable_grade_cuts(cuts: Iterable[GradeCutEntry]) -> list[GradeCutEntry]:
    """저장 대상: 세 값 중 하나라도 입력된 등급만"""
    return [cut for cut in cuts if not cut.is_empty]


def parse_grade_cut_paste(text: str) -> list[GradeCutEntry]:
    """엑셀에서 복사한 등급컷 텍스트 → 9칸 테이블

    각 행: 원점수 \\t 표준점수 \\t 백분위 [\\t 등급]
    등급 열이 없으면 유효 행 순서대로 1등급부터 매긴다.
    1~9 범위 밖 등급 행과 3열 미만 행은 무시한다.

    Raises:
        GradeCutPasteError: 빈 입력이거나 유효 행이 하나도 없을 때
        ValueError: 숫자 칸에 숫자가 아닌 값
    """
    if not text or not text.strip():
        raise GradeCutPasteError("붙여넣을 데이터가 없습니다")

    parsed: list[GradeCutEntry] = []
    for line in text.strip().split("\n"):
        cells = line.split("\t")
        if len(cells) < 3:
            continue

        if len(cells) >= 4:
            grade_text = cells[3].strip()
            try:
                grade = int(float(grade_text)) if grade_text else 0
            except ValueError:
                grade = 0
        else:
            grade = len(parsed) + 1

        if grade not in GRADES:
            continue
        parsed.append(
            GradeCutEntry(
                grade=grade,
                raw_score=_parse_number(cells[0]),
                std_score=_parse_number(cells[1]),
                percentile=_parse_number(cells[2]),
            )
        )

    if not parsed:
        raise GradeCutPasteError("유효한 데이터가 없습니다")
    return merge_grade_cuts(default_grade_cuts(), parsed)


def apply_table_paste(
    cuts: Sequence[GradeCutEntry],
    text: str,
    start_grade: int,
    start_field: GradeCutField,
) -> list[GradeCutEntry]:
    """테이블 셀에 블록 붙여넣기

    (start_grade, start_field) 셀을 왼쪽 위로 삼아 행=등급, 열=값 필드로 채운다.
    9등급/백분위 열을 넘어가는 칸은 버린다. 빈 칸은 미입력(None).
    """
    start_col = VALUE_FIELDS.index(start_field)
    updates: dict[int, dict[str, float | None]] = {}

    for row_offset, line in enumerate(text.strip().split("\n")):
        grade = start_grade + row_offset
        if grade not in GRADES:
            continue
        for col_offset, cell in enumerate(line.split("\t")):
            col = start_col + col_offset
            if 0 <= col < len(VALUE_FIELDS):
                updates.setdefault(grade, {})[VALUE_FIELDS[col]] = _parse_number(cell)

    return [
        cut.model_copy(update=updates[cut.grade]) if cut.grade in updates else cut
        for cut in cuts
    ]

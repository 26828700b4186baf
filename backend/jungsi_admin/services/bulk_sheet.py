"""정시 데이터 엑셀 일괄 다운로드/업로드

다운로드: GET /admin/jungsi/export 결과를 고정 열 구성의 xlsx로 저장
업로드: xlsx 행 → POST /admin/jungsi/bulk-update 요청 항목

열 이름이 곧 스키마다 (버전/헤더 행 외 메타데이터 없음).
값이 없는 칸은 0이 아니라 빈 칸으로 쓴다.
"""

from __future__ import annotations

import logging
import math
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import IO, Any, Union

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

logger = logging.getLogger(__name__)

SHEET_NAME = "정시데이터"

GRADE_RANGE = range(1, 10)
ENGLISH_GRADE_COLUMNS = tuple(f"영{i}" for i in GRADE_RANGE)
HISTORY_GRADE_COLUMNS = tuple(f"한{i}" for i in GRADE_RANGE)

# (열 이름, 열 너비)
EXPORT_COLUMNS: tuple[tuple[str, int], ...] = (
    ("U_ID", 8),
    ("대학명", 20),
    ("학과명", 30),
    ("군", 5),
    ("형태", 8),
    ("모집정원", 8),
    ("수능비율", 8),
    ("내신비율", 8),
    ("실기비율", 8),
    ("총점", 8),
    ("국어", 6),
    ("수학", 6),
    ("영어", 6),
    ("탐구", 6),
    ("탐구수", 6),
    *((name, 6) for name in ENGLISH_GRADE_COLUMNS),
    *((name, 6) for name in HISTORY_GRADE_COLUMNS),
)
EXPORT_HEADERS = tuple(name for name, _ in EXPORT_COLUMNS)

# 엑셀 열 → bulk-update 필드
# 문자열로 보내는 필드 (모집정원 "30명", 비율 "60%" 등 자유 텍스트)
TEXT_FIELDS = {
    "대학명": "univ_name",
    "학과명": "dept_name",
    "군": "gun",
    "모집정원": "quota",
    "수능비율": "suneung",
    "내신비율": "naesin",
    "실기비율": "practical",
}
# 숫자로 보내는 필드 (빈 칸이면 생략)
NUMBER_FIELDS = {
    "국어": "korean",
    "수학": "math",
    "영어": "english",
    "탐구": "inquiry",
    "탐구수": "inquiry_count",
}

Target = Union[str, Path, IO[bytes]]


class BulkImportError(ValueError):
    """업로드할 수 없음 (읽을 수 없는 파일, 빈 파일, 유효 U_ID 없음)"""


def export_filename(year: int) -> str:
    return f"{SHEET_NAME}_{year}.xlsx"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ── 다운로드 ──


def export_rows(rows: Iterable[Mapping[str, Any]]) -> list[list[Any]]:
    """export API 행 → 열 순서대로 정렬된 셀 값 (미설정 → None)"""
    return [
        [None if _is_blank(row.get(name)) else row.get(name) for name in EXPORT_HEADERS]
        for row in rows
    ]


def write_workbook(rows: Iterable[Mapping[str, Any]], target: Target) -> int:
    """xlsx 저장

    Returns:
        기록한 데이터 행 수
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME

    ws.append(list(EXPORT_HEADERS))
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center")
    for col, (_, width) in enumerate(EXPORT_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col)
        cell.font = header_font
        cell.alignment = center
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = "D2"

    values = export_rows(rows)
    for row in values:
        ws.append(row)

    wb.save(target)
    logger.info("엑셀 저장: %d행", len(values))
    return len(values)


# ── 업로드 ──


def read_workbook(source: Target) -> list[dict[str, Any]]:
    """첫 시트를 읽어 {열 이름: 값} 목록으로 (빈 칸은 키 자체를 생략)

    첫 행이 헤더. 헤더가 비어 있는 열은 무시한다.

    Raises:
        BulkImportError: 파일이 없거나 xlsx로 읽을 수 없을 때
    """
    try:
        wb = load_workbook(source, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        logger.error("엑셀 파일 열기 실패 (%s): %s", source, e)
        raise BulkImportError(f"엑셀 파일을 읽을 수 없습니다: {e}") from e
    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            return []

        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = [None if h is None else str(h).strip() for h in header_row]

        result: list[dict[str, Any]] = []
        for values in rows:
            row = {
                header: value
                for header, value in zip(headers, values)
                if header and not _is_blank(value)
            }
            if row:
                result.append(row)
        return result
    finally:
        wb.close()


def parse_uid(value: Any) -> int | None:
    """U_ID → 양의 정수. 숫자가 아니거나 0 이하/소수면 None."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(number) or number <= 0 or not number.is_integer():
        return None
    return int(number)


def _to_number(value: Any) -> int | float | None:
    """셀 값 → 숫자 (정수면 int). 해석 불가는 None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return int(number) if number.is_integer() else number


def _ignore(warnings: list[str] | None, message: str) -> None:
    logger.warning("%s", message)
    if warnings is not None:
        warnings.append(message)


def _grade_scores(
    row: Mapping[str, Any],
    columns: tuple[str, ...],
    uid: int,
    warnings: list[str] | None = None,
) -> dict[str, int | float]:
    """영1..영9 / 한1..한9 중 값이 있는 칸만 {"1": 점수, ...}"""
    scores: dict[str, int | float] = {}
    for grade, column in zip(GRADE_RANGE, columns):
        value = row.get(column)
        if _is_blank(value):
            continue
        number = _to_number(value)
        if number is None:
            _ignore(warnings, f"U_ID {uid}: {column} 값 무시 ({value!r})")
            continue
        scores[str(grade)] = number
    return scores


def build_update_item(
    row: Mapping[str, Any], warnings: list[str] | None = None
) -> dict[str, Any] | None:
    """엑셀 1행 → bulk-update 항목. U_ID가 유효하지 않으면 None (버림).

    숫자가 아니라서 버린 칸은 warnings에 "U_ID 5: 영1 값 무시 ('x')" 형태로 쌓는다.
    """
    uid = parse_uid(row.get("U_ID"))
    if uid is None:
        return None

    item: dict[str, Any] = {"U_ID": uid}

    for column, field in TEXT_FIELDS.items():
        value = row.get(column)
        if value is not None:
            item[field] = str(value)

    for column, field in NUMBER_FIELDS.items():
        value = row.get(column)
        if _is_blank(value):
            continue
        number = _to_number(value)
        if number is None:
            _ignore(warnings, f"U_ID {uid}: {column} 값 무시 ({value!r})")
            continue
        item[field] = number

    english_scores = _grade_scores(row, ENGLISH_GRADE_COLUMNS, uid, warnings)
    if english_scores:
        item["english_scores"] = english_scores
    history_scores = _grade_scores(row, HISTORY_GRADE_COLUMNS, uid, warnings)
    if history_scores:
        item["history_scores"] = history_scores

    return item


def build_bulk_update(
    rows: list[Mapping[str, Any]], warnings: list[str] | None = None
) -> list[dict[str, Any]]:
    """엑셀 행 목록 → bulk-update 항목 목록

    U_ID가 없어 버린 행과 무시한 칸은 warnings(주어지면)에 기록한다.

    Raises:
        BulkImportError: 행이 없거나 유효한 U_ID 행이 하나도 없을 때
    """
    if not rows:
        raise BulkImportError("엑셀 파일에 데이터가 없습니다.")

    items: list[dict[str, Any]] = []
    for index, row in enumerate(rows, start=1):
        item = build_update_item(row, warnings)
        if item is None:
            _ignore(warnings, f"{index}번째 행: U_ID 무효 ({row.get('U_ID')!r}), 행 제외")
            continue
        items.append(item)

    if not items:
        raise BulkImportError("유효한 U_ID가 있는 데이터가 없습니다.")
    return items

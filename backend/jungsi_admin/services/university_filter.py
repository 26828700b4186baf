"""대학 목록 필터

설정 화면 공통 좌측 목록: 초성 버튼 + 군 버튼 + 검색어.
세 조건은 AND로 결합되고 원래 순서를 유지한다.
"""

from __future__ import annotations

from collections.abc import Iterable

from jungsi_admin.models.university import GUN_ALL, GUN_FILTERS, University
from jungsi_admin.services.hangul import matches_bucket


def filter_universities(
    items: Iterable[University],
    *,
    initial: str | None = None,
    gun: str = GUN_ALL,
    search: str = "",
) -> list[University]:
    """대학 목록 필터링

    Args:
        items: 대학 목록
        initial: 초성 버튼 (None/""이면 초성 필터 없음)
        gun: "전체" / "가군" / "나군" / "다군" / "기타"
        search: 대학명·학과명 부분 일치 검색어 (대소문자 무시)

    Returns:
        조건을 모두 만족하는 대학 목록

    Raises:
        ValueError: 알 수 없는 군 필터
    """
    if gun not in GUN_FILTERS:
        raise ValueError(f"알 수 없는 군 필터: {gun}")
    term = search.lower() if search else ""
    result = []
    for univ in items:
        if initial and not matches_bucket(univ.univ_name, initial):
            continue
        if gun != GUN_ALL and univ.normalized_gun != gun:
            continue
        if term and term not in univ.univ_name.lower() and term not in univ.dept_name.lower():
            continue
        result.append(univ)
    return result

"""한글 초성 분류기

대학명 목록의 초성 버튼 필터(ㄱ, ㄴ, ㄷ ...)에 사용한다.

한글 음절(U+AC00 ~ U+D7A3)은 (초성 * 21 + 중성) * 28 + 종성 으로 조합되므로
초성 인덱스 = (코드 - 0xAC00) // 588.

사용:
    from jungsi_admin.services.hangul import get_initial_consonant, matches_bucket
    get_initial_consonant("경희대학교")  # → "ㄱ"
    matches_bucket("꽃동네대학교", "ㄱ")  # → True (ㄱ 버튼은 ㄲ 포함)
"""

from __future__ import annotations

HANGUL_BASE = 0xAC00
HANGUL_LAST = 0xD7A3
SYLLABLES_PER_INITIAL = 588  # 중성 21 * 종성 28

# 초성 19자 (된소리 포함, 유니코드 조합 순서)
CHOSEONG = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ",
    "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# UI 초성 버튼 14개 (된소리는 예사소리 버튼에 묶임)
CONSONANT_BUCKETS = (
    "ㄱ", "ㄴ", "ㄷ", "ㄹ", "ㅁ", "ㅂ", "ㅅ",
    "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# 예사소리 → 된소리 짝
_TENSE_PAIRS = {
    "ㄱ": "ㄲ",
    "ㄷ": "ㄸ",
    "ㅂ": "ㅃ",
    "ㅅ": "ㅆ",
    "ㅈ": "ㅉ",
}


def get_initial_consonant(text: str | None) -> str | None:
    """문자열 첫 글자의 초성

    Returns:
        초성 문자. 빈 문자열/공백뿐인 문자열/한글 음절이 아닌 첫 글자면 None
    """
    if not text:
        return None
    stripped = text.strip()
    if not stripped:
        return None

    code = ord(stripped[0])
    if code < HANGUL_BASE or code > HANGUL_LAST:
        return None
    return CHOSEONG[(code - HANGUL_BASE) // SYLLABLES_PER_INITIAL]


def bucket_members(bucket: str) -> frozenset[str]:
    """초성 버튼이 매칭하는 초성 집합 (ㄱ → {ㄱ, ㄲ})

    Raises:
        ValueError: 초성 버튼에 없는 글자 (ㄲ 등 된소리 포함)
    """
    if bucket not in CONSONANT_BUCKETS:
        raise ValueError(f"알 수 없는 초성 버튼: {bucket}")
    tense = _TENSE_PAIRS.get(bucket)
    if tense:
        return frozenset((bucket, tense))
    return frozenset((bucket,))


def matches_bucket(name: str | None, bucket: str) -> bool:
    """이름의 초성이 버튼 초성(또는 된소리 짝)과 일치하는지"""
    members = bucket_members(bucket)
    consonant = get_initial_consonant(name)
    return consonant is not None and consonant in members

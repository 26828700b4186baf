"""등급컷 템플릿 병합 + 엑셀 붙여넣기 테스트"""

import pytest

from jungsi_admin.models.grade_cut import (
    GradeCutEntry,
    GradeCutPasteError,
    apply_table_paste,
    default_grade_cuts,
    merge_grade_cuts,
    parse_grade_cut_paste,
    savable_grade_cuts,
    set_value,
)


class TestTemplate:

    def test_9칸_9등급만_기본값(self):
        cuts = default_grade_cuts()
        assert [c.grade for c in cuts] == list(range(1, 10))
        assert cuts[8].raw_score == 0
        assert cuts[8].percentile == 0
        assert cuts[8].std_score is None
        assert all(c.is_empty for c in cuts[:8])

    def test_매번_새_객체(self):
        a = default_grade_cuts()
        b = default_grade_cuts()
        assert a == b
        assert a[0] is not b[0]


class TestMerge:

    def test_서버값_채우기(self):
        merged = merge_grade_cuts(
            default_grade_cuts(),
            [{"grade": 1, "raw_score": 92, "std_score": 131, "percentile": 96}],
        )
        assert len(merged) == 9
        assert merged[0].raw_score == 92
        assert merged[1].is_empty
        assert merged[8].raw_score == 0

    def test_중복등급은_첫번째(self):
        merged = merge_grade_cuts(
            default_grade_cuts(),
            [{"grade": 2, "raw_score": 85}, {"grade": 2, "raw_score": 70}],
        )
        assert merged[1].raw_score == 85

    def test_범위밖_등급과_형식오류_항목은_건너뜀(self):
        merged = merge_grade_cuts(
            default_grade_cuts(),
            [
                {"grade": 10, "raw_score": 1},
                {"grade": 0, "raw_score": 2},
                {"grade": 2, "raw_score": "abc"},
                "garbage",
                {"grade": 1, "raw_score": 90},
            ],
        )
        assert len(merged) == 9
        assert merged[0].raw_score == 90
        assert merged[1].is_empty
        assert merged[8].raw_score == 0

    def test_서버값_없으면_템플릿(self):
        assert merge_grade_cuts(default_grade_cuts(), None) == default_grade_cuts()

    def test_멱등(self):
        server = [{"grade": 3, "percentile": 77}, {"grade": 1, "raw_score": 95}]
        once = merge_grade_cuts(default_grade_cuts(), server)
        assert merge_grade_cuts(once, server) == once
        assert merge_grade_cuts(once, once) == once
        assert (once[8].raw_score, once[8].percentile) == (0, 0)

    def test_결과는_사본(self):
        server = [GradeCutEntry(grade=1, raw_score=90)]
        merged = merge_grade_cuts(default_grade_cuts(), server)
        assert merged[0] == server[0]
        assert merged[0] is not server[0]


class TestEdit:

    def test_셀_수정과_비우기(self):
        cuts = set_value(default_grade_cuts(), 1, "std_score", "131")
        assert cuts[0].std_score == 131
        cuts = set_value(cuts, 1, "std_score", " ")
        assert cuts[0].std_score is None

    def test_숫자아님(self):
        with pytest.raises(ValueError):
            set_value(default_grade_cuts(), 1, "raw_score", "abc")

    def test_저장대상은_입력된_등급만(self):
        cuts = set_value(default_grade_cuts(), 2, "raw_score", "88")
        assert [c.grade for c in savable_grade_cuts(cuts)] == [2, 9]


class TestPaste:

    def test_등급열_없으면_순서대로(self):
        text = "92\t131\t96\n85\t125\t89\n"
        cuts = parse_grade_cut_paste(text)
        assert len(cuts) == 9
        assert (cuts[0].raw_score, cuts[0].std_score, cuts[0].percentile) == (92, 131, 96)
        assert cuts[1].raw_score == 85
        assert cuts[2].is_empty
        assert cuts[8].raw_score == 0

    def test_등급열_사용(self):
        text = "60\t110\t60\t4\n40\t95\t40\t6"
        cuts = parse_grade_cut_paste(text)
        assert cuts[3].raw_score == 60
        assert cuts[5].raw_score == 40
        assert cuts[0].is_empty

    def test_범위밖_등급과_짧은행_무시(self):
        text = "1\t2\n50\t100\t50\t10\n50\t100\t50\t0\n70\t120\t70\t3"
        cuts = parse_grade_cut_paste(text)
        assert cuts[2].raw_score == 70
        assert len(savable_grade_cuts(cuts)) == 2

    def test_빈칸은_미입력(self):
        cuts = parse_grade_cut_paste("92\t\t96")
        assert cuts[0].std_score is None
        assert cuts[0].percentile == 96

    def test_빈_입력(self):
        with pytest.raises(GradeCutPasteError, match="붙여넣을 데이터가 없습니다"):
            parse_grade_cut_paste("  \n ")

    def test_유효행_없음(self):
        with pytest.raises(GradeCutPasteError, match="유효한 데이터가 없습니다"):
            parse_grade_cut_paste("a\tb\nc")

    def test_테이블_블록_붙여넣기(self):
        cuts = apply_table_paste(default_grade_cuts(), "131\t96\n125\t89", 1, "std_score")
        assert (cuts[0].std_score, cuts[0].percentile) == (131, 96)
        assert (cuts[1].std_score, cuts[1].percentile) == (125, 89)
        assert cuts[0].raw_score is None

    def test_테이블_붙여넣기_범위밖_잘림(self):
        text = "10\t20\t30\n5\t6\t7"
        cuts = apply_table_paste(default_grade_cuts(), text, 9, "percentile")
        assert cuts[8].percentile == 10
        assert cuts[8].raw_score == 0
        assert len(cuts) == 9

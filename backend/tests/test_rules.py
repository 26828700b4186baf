"""선택반영/가산점 규칙 스키마 + 편집기 테스트"""

import pytest

from jungsi_admin.models.rules import (
    BonusRule,
    RuleSchemaError,
    SelectNRule,
    SelectRankedWeightsRule,
    dump_rules,
    parse_bonus_rules,
    parse_selection_rules,
    parse_subjects,
    parse_weights,
)
from jungsi_admin.services.rule_editor import BonusRuleEditor, RuleListEditor, SelectionRuleEditor


# ── 스키마 ──────────────────────────────────────────────────────


class TestParseSelectionRules:

    @pytest.mark.parametrize("raw", [None, "", [], {}])
    def test_빈값은_빈목록(self, raw):
        assert parse_selection_rules(raw) == []

    def test_규칙_종류별_파싱(self):
        rules = parse_selection_rules([
            {"type": "select_n", "from": ["국어", "수학", "탐구"], "count": 2},
            {"type": "select_ranked_weights", "from": ["국어", "수학"], "weights": [1, 0.8, 0.5]},
        ])
        assert isinstance(rules[0], SelectNRule)
        assert rules[0].count == 2
        assert isinstance(rules[1], SelectRankedWeightsRule)
        assert rules[1].weights == [1.0, 0.8, 0.5]

    def test_단일객체와_JSON문자열(self):
        assert len(parse_selection_rules({"type": "select_n", "from": ["국어"], "count": 1})) == 1
        assert len(parse_selection_rules('[{"type": "select_n", "from": ["국어"]}]')) == 1

    def test_과목_중복제거_순서유지(self):
        rule = parse_selection_rules([{"type": "select_n", "from": ["수학", "국어", "수학"]}])[0]
        assert rule.from_ == ["수학", "국어"]

    def test_알수없는_type(self):
        with pytest.raises(RuleSchemaError):
            parse_selection_rules([{"type": "unknown"}])

    def test_count_0_거부(self):
        with pytest.raises(RuleSchemaError):
            parse_selection_rules([{"type": "select_n", "from": ["국어"], "count": 0}])

    def test_깨진_JSON(self):
        with pytest.raises(RuleSchemaError, match="JSON"):
            parse_selection_rules("[{")

    def test_dump는_from_키_사용(self):
        rules = parse_selection_rules([{"type": "select_n", "from": ["국어"], "count": 1}])
        assert dump_rules(rules) == [{"type": "select_n", "from": ["국어"], "count": 1}]


class TestBonusRules:

    def test_type은_그대로_전달(self):
        rules = parse_bonus_rules([{"type": "custom_engine_rule", "subjects": ["수학"], "value": 5}])
        assert rules[0].type == "custom_engine_rule"
        assert dump_rules(rules) == [
            {"type": "custom_engine_rule", "subjects": ["수학"], "value": 5.0}
        ]

    def test_value_형식오류(self):
        with pytest.raises(RuleSchemaError):
            parse_bonus_rules([{"subjects": ["수학"], "value": "많이"}])


class TestTextParsers:

    def test_parse_weights(self):
        assert parse_weights("1, 0.8, abc, 0.5,") == [1.0, 0.8, 0.5]
        assert parse_weights("nan, 2") == [2.0]

    def test_parse_subjects(self):
        assert parse_subjects("국어, 수학,, ") == ["국어", "수학"]


# ── 편집기 ──────────────────────────────────────────────────────


class TestSelectionRuleEditor:

    def test_불러오기_전과_기본값_모두_빈배열(self):
        editor = SelectionRuleEditor()
        assert not editor.is_loaded
        assert editor.to_payload() == []

        editor.load(None)
        assert editor.is_loaded
        assert editor.uses_default
        assert editor.to_payload() == []

    def test_추가_삭제(self):
        editor = SelectionRuleEditor()
        editor.load([])
        editor.append_default()
        editor.append_default()
        assert len(editor) == 2
        assert editor.to_payload()[0] == {"type": "select_n", "from": [], "count": 1}

        editor.remove_at(0)
        assert len(editor) == 1
        with pytest.raises(IndexError):
            editor.remove_at(5)

    def test_필드_교체(self):
        editor = SelectionRuleEditor()
        editor.load([{"type": "select_n", "from": ["국어"], "count": 1}])
        editor.replace_field(0, "count", 2)
        editor.replace_field(0, "from_", ["국어", "수학", "국어"])
        assert editor.to_payload() == [{"type": "select_n", "from": ["국어", "수학"], "count": 2}]

    def test_잘못된_교체는_상태_유지(self):
        editor = SelectionRuleEditor()
        editor.load([{"type": "select_n", "from": ["국어"], "count": 1}])
        with pytest.raises(RuleSchemaError):
            editor.replace_field(0, "count", 0)
        assert editor.rules[0].count == 1

    def test_type_전환시_from만_유지(self):
        editor = SelectionRuleEditor()
        editor.load([{"type": "select_n", "from": ["국어", "수학"], "count": 2}])
        editor.replace_field(0, "type", "select_ranked_weights")
        assert editor.to_payload() == [
            {"type": "select_ranked_weights", "from": ["국어", "수학"], "weights": []}
        ]

    def test_과목_체크박스(self):
        editor = SelectionRuleEditor()
        editor.load([])
        editor.append_default()
        editor.toggle_subject(0, "국어", True)
        editor.toggle_subject(0, "수학", True)
        editor.toggle_subject(0, "국어", True)
        assert editor.rules[0].from_ == ["수학", "국어"]
        editor.toggle_subject(0, "수학", False)
        assert editor.rules[0].from_ == ["국어"]

    def test_기본비율로_초기화(self):
        editor = SelectionRuleEditor()
        editor.load([{"type": "select_n", "from": ["국어"], "count": 1}])
        editor.reset_to_default()
        assert editor.uses_default
        assert editor.to_payload() == []

    def test_잘못된_서버값은_상태_변경없음(self):
        editor = SelectionRuleEditor()
        editor.load([{"type": "select_n", "from": ["국어"], "count": 1}])
        with pytest.raises(RuleSchemaError):
            editor.load([{"type": "bogus"}])
        assert len(editor) == 1

    def test_불러오기_실패는_기록하고_저장제외(self):
        editor = SelectionRuleEditor()
        assert not editor.try_load([{"type": "select_n", "from": ["국어"], "count": 0}])
        assert not editor.is_loaded
        assert editor.load_error
        assert not editor.is_savable

        assert editor.try_load([])
        assert editor.load_error is None
        assert editor.is_savable

    def test_불러오기_실패후_추가나_초기화하면_저장대상(self):
        editor = SelectionRuleEditor()
        editor.try_load("[{")
        editor.reset_to_default()
        assert editor.is_savable
        assert editor.to_payload() == []

        editor.try_load([{"type": "bogus"}])
        editor.append_default()
        assert editor.is_savable
        assert len(editor) == 1

    def test_선택지에_없는_과목(self):
        editor = SelectionRuleEditor()
        editor.load([{"type": "select_n", "from": ["국어"], "count": 1}])
        with pytest.raises(ValueError, match="알 수 없는 과목"):
            editor.toggle_subject(0, "제2외국어", True)
        assert editor.rules[0].from_ == ["국어"]

    def test_기반클래스는_직접_생성불가(self):
        with pytest.raises(TypeError):
            RuleListEditor()


class TestBonusRuleEditor:

    def test_기본_가산점규칙(self):
        editor = BonusRuleEditor()
        editor.load(None)
        rule = editor.append_default()
        assert rule == BonusRule()
        editor.toggle_subject(0, "수학", True)
        editor.replace_field(0, "value", 3)
        assert editor.to_payload() == [
            {"type": "percent_bonus", "subjects": ["수학"], "value": 3.0}
        ]

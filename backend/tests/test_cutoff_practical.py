"""합격컷 입력 + 실기 배점표 편집 테스트"""

from unittest.mock import MagicMock

import pytest

from jungsi_admin.services.admin_api import AdminApiError
from jungsi_admin.services.cutoff_service import CutoffDraft, CutoffUniversity, save_cutoffs
from jungsi_admin.services.practical_service import (
    PracticalRow,
    PracticalService,
    PracticalTable,
    plan_practical_save,
)
from jungsi_admin.services.save_batch import FormValidationError


# ── 합격컷 ──────────────────────────────────────────────────────


@pytest.fixture
def draft():
    return CutoffDraft([
        CutoffUniversity(U_ID=1, univ_name="A대", step_type=3, prev_sunung_cut=280),
        CutoffUniversity(U_ID=2, univ_name="B대", is_relative_eval=True),
    ])


class TestCutoff:

    def test_표시_조건(self, draft):
        assert draft.current(1).show_sunung_cut
        assert draft.current(1).show_total_cut
        assert not draft.current(2).show_sunung_cut
        assert not draft.current(2).show_total_cut

    def test_변경분만_현재값과_함께(self, draft):
        draft.set_value(1, "expected_sunung_cut", "285.5")
        draft.set_value(1, "prev_total_cut", "")
        assert draft.changed_count == 1
        assert draft.to_payload(2027) == [{
            "U_ID": 1,
            "prev_sunung_cut": 280,
            "prev_total_cut": None,
            "expected_sunung_cut": 285.5,
            "expected_total_cut": None,
            "admission_year": 2027,
        }]
        assert draft.current(1).expected_sunung_cut == 285.5

    def test_입력_검증(self, draft):
        with pytest.raises(FormValidationError):
            draft.set_value(1, "expected_sunung_cut", "abc")
        with pytest.raises(FormValidationError):
            draft.set_value(1, "unknown", "1")
        with pytest.raises(KeyError):
            draft.set_value(99, "prev_total_cut", "1")

    def test_변경사항_없음(self, draft):
        with pytest.raises(FormValidationError, match="변경사항이 없습니다"):
            draft.to_payload(2027)

    def test_저장_성공시_변경목록_비움(self, draft):
        client = MagicMock()
        client.save_cutoffs.return_value = {"success": True, "updated": 1}
        draft.set_value(2, "expected_total_cut", "900")

        assert save_cutoffs(client, draft, 2027) == 1
        assert draft.changed_count == 0

    def test_저장_0건은_실패(self, draft):
        client = MagicMock()
        client.save_cutoffs.return_value = {"success": True, "updated": 0}
        draft.set_value(2, "expected_total_cut", "900")

        with pytest.raises(AdminApiError, match="저장 실패"):
            save_cutoffs(client, draft, 2027)
        assert draft.changed_count == 1


# ── 실기 배점 ──────────────────────────────────────────────────────


@pytest.fixture
def table():
    return PracticalTable({
        "제자리멀리뛰기": [
            {"id": 10, "gender": "남", "record": "280", "score": 100},
            {"id": 11, "gender": "여", "record": "230", "score": 100},
        ],
    })


class TestPracticalTable:

    def test_서버행_파싱(self, table):
        rows = table.visible_rows("제자리멀리뛰기")
        assert [r.id for r in rows] == [10, 11]
        assert not rows[0].is_new

    def test_alias_입력(self):
        row = PracticalRow.model_validate({"isNew": True})
        assert row.is_new
        assert row.gender == "남"

    def test_종목_추가(self, table):
        table.add_event(" 윗몸일으키기 ")
        assert table.visible_rows("윗몸일으키기")[0].is_new
        with pytest.raises(FormValidationError):
            table.add_event("  ")

    def test_기존행_삭제는_표시만(self, table):
        table.delete_row("제자리멀리뛰기", 0)
        assert [r.id for r in table.visible_rows("제자리멀리뛰기")] == [11]
        assert len(table.events["제자리멀리뛰기"]) == 2

    def test_새행_삭제는_바로_제거(self, table):
        table.add_row("제자리멀리뛰기")
        table.delete_row("제자리멀리뛰기", 2)
        assert len(table.events["제자리멀리뛰기"]) == 2

    def test_새행만_있는_종목_삭제(self, table):
        table.add_event("z")
        table.delete_event("z")
        assert "z" not in table.events

    def test_기존_종목_삭제(self, table):
        table.delete_event("제자리멀리뛰기")
        assert table.visible_rows("제자리멀리뛰기") == []
        assert all(r.is_deleted for r in table.events["제자리멀리뛰기"])

    def test_성별은_남여만(self, table):
        assert table.update_row("제자리멀리뛰기", 0, "gender", "여").gender == "여"
        with pytest.raises(FormValidationError, match="성별"):
            table.update_row("제자리멀리뛰기", 1, "gender", "F")
        assert table.visible_rows("제자리멀리뛰기")[1].gender == "여"


class TestPracticalSave:

    def test_저장_계획(self, table):
        table.update_row("제자리멀리뛰기", 1, "score", 95)
        table.delete_row("제자리멀리뛰기", 0)
        table.add_row("제자리멀리뛰기")
        table.add_row("제자리멀리뛰기")
        table.update_row("제자리멀리뛰기", 3, "record", "300")

        ops = plan_practical_save(5, 2027, table)

        assert [(op.kind, op.row_id) for op in ops] == [
            ("delete", 10), ("update", 11), ("create", None), ("create", None),
        ]
        assert ops[1].payload["score"] == 95
        assert ops[3].payload == {
            "U_ID": 5, "year": 2027, "event_name": "제자리멀리뛰기",
            "gender": "남", "record": "300", "score": 0,
        }
        assert len({op.name for op in ops}) == 4

    def test_새행_만들고_지우면_호출없음(self):
        table = PracticalTable()
        table.add_event("z")
        table.delete_row("z", 0)
        assert plan_practical_save(1, 2027, table) == []

    def test_서비스_저장(self, table):
        client = MagicMock()
        client.get_practical.return_value = {"제자리멀리뛰기": [{"id": 10}]}
        client.update_practical.side_effect = [None, AdminApiError("x")]

        service = PracticalService(client)
        loaded = service.load(5, 2027)
        assert loaded.visible_rows("제자리멀리뛰기")[0].id == 10

        report = service.save(5, 2027, table)

        assert client.update_practical.call_count == 2
        assert not report.all_ok
        assert report.message == "일부 저장에 실패했습니다."

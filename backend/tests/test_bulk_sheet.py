"""엑셀 일괄 다운로드/업로드 테스트

openpyxl로 실제 xlsx를 tmp_path에 쓰고 다시 읽는다.
"""

import pytest
from openpyxl import load_workbook

from jungsi_admin.services.bulk_sheet import (
    EXPORT_HEADERS,
    SHEET_NAME,
    BulkImportError,
    build_bulk_update,
    build_update_item,
    export_filename,
    export_rows,
    parse_uid,
    read_workbook,
    write_workbook,
)


def _export_row(**overrides):
    row = {
        "U_ID": 101,
        "대학명": "서울대학교",
        "학과명": "경영학과",
        "군": "가군",
        "형태": "일반",
        "모집정원": "30명",
        "수능비율": "100%",
        "내신비율": "",
        "실기비율": None,
        "총점": 1000,
        "국어": 30,
        "수학": 30,
        "영어": None,
        "탐구": 25.5,
        "탐구수": 2,
        "영1": 100,
        "영2": 95,
        "한1": 10,
    }
    row.update(overrides)
    return row


class TestExport:

    def test_파일명(self):
        assert export_filename(2026) == "정시데이터_2026.xlsx"

    def test_열_구성(self):
        assert EXPORT_HEADERS[:4] == ("U_ID", "대학명", "학과명", "군")
        assert EXPORT_HEADERS[-1] == "한9"
        assert len(EXPORT_HEADERS) == 15 + 9 + 9

    def test_빈값은_None(self):
        values = export_rows([_export_row()])[0]
        headers = list(EXPORT_HEADERS)
        assert values[headers.index("내신비율")] is None
        assert values[headers.index("영어")] is None
        assert values[headers.index("영3")] is None
        assert values[headers.index("총점")] == 1000

    def test_xlsx_헤더와_서식(self, tmp_path):
        path = tmp_path / "out.xlsx"
        count = write_workbook([_export_row(), _export_row(U_ID=102)], path)
        assert count == 2

        wb = load_workbook(path)
        ws = wb.active
        assert ws.title == SHEET_NAME
        assert [c.value for c in ws[1]] == list(EXPORT_HEADERS)
        assert ws["A1"].font.bold
        assert ws.freeze_panes == "D2"
        assert ws.column_dimensions["C"].width == 30
        assert ws["A3"].value == 102


class TestParseUid:

    @pytest.mark.parametrize("value,expected", [(42, 42), (42.0, 42), ("42", 42), (" 7 ", 7)])
    def test_양의_정수(self, value, expected):
        assert parse_uid(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", 0, -3, 42.5, True, float("nan")])
    def test_무효(self, value):
        assert parse_uid(value) is None


class TestImport:

    def test_행_변환(self):
        item = build_update_item({
            "U_ID": 101,
            "대학명": "서울대학교",
            "모집정원": 30,
            "국어": "30",
            "탐구": 25.5,
            "영1": 100,
            "영2": "95.5",
            "한1": 10,
        })
        assert item == {
            "U_ID": 101,
            "univ_name": "서울대학교",
            "quota": "30",
            "korean": 30,
            "inquiry": 25.5,
            "english_scores": {"1": 100, "2": 95.5},
            "history_scores": {"1": 10},
        }

    def test_빈칸은_생략(self):
        item = build_update_item({"U_ID": 5, "국어": "  "})
        assert item == {"U_ID": 5}

    def test_숫자아닌_값은_무시(self):
        item = build_update_item({"U_ID": 5, "수학": "많이", "영1": "x"})
        assert item == {"U_ID": 5}

    def test_U_ID_무효행은_버림(self):
        items = build_bulk_update([{"U_ID": 1}, {"U_ID": "abc"}, {"대학명": "x"}, {"U_ID": 2.0}])
        assert [i["U_ID"] for i in items] == [1, 2]

    def test_빈_파일(self):
        with pytest.raises(BulkImportError, match="데이터가 없습니다"):
            build_bulk_update([])

    def test_유효_U_ID_없음(self):
        with pytest.raises(BulkImportError, match="유효한 U_ID"):
            build_bulk_update([{"U_ID": 0}, {"대학명": "서울대학교"}])

    def test_다운로드_파일_재업로드(self, tmp_path):
        path = tmp_path / "round.xlsx"
        write_workbook([_export_row()], path)

        rows = read_workbook(path)
        assert len(rows) == 1
        assert "내신비율" not in rows[0]

        items = build_bulk_update(rows)
        assert items == [{
            "U_ID": 101,
            "univ_name": "서울대학교",
            "dept_name": "경영학과",
            "gun": "가군",
            "quota": "30명",
            "suneung": "100%",
            "korean": 30,
            "math": 30,
            "inquiry": 25.5,
            "inquiry_count": 2,
            "english_scores": {"1": 100, "2": 95},
            "history_scores": {"1": 10},
        }]

    def test_헤더만_있는_파일(self, tmp_path):
        path = tmp_path / "empty.xlsx"
        write_workbook([], path)
        assert read_workbook(path) == []

    def test_무시한_칸과_버린_행은_경고로_수집(self):
        warnings = []
        items = build_bulk_update(
            [{"U_ID": 5, "수학": "많이", "영1": "x", "한3": "?"}, {"U_ID": "abc"}],
            warnings,
        )

        assert items == [{"U_ID": 5}]
        assert warnings == [
            "U_ID 5: 수학 값 무시 ('많이')",
            "U_ID 5: 영1 값 무시 ('x')",
            "U_ID 5: 한3 값 무시 ('?')",
            "2번째 행: U_ID 무효 ('abc'), 행 제외",
        ]

    def test_경고_없으면_빈목록(self):
        warnings = []
        build_bulk_update([{"U_ID": 1, "영1": 100}], warnings)
        assert warnings == []


class TestReadWorkbookErrors:

    def test_없는_파일(self, tmp_path):
        with pytest.raises(BulkImportError, match="읽을 수 없습니다"):
            read_workbook(tmp_path / "missing.xlsx")

    def test_xlsx_아닌_파일(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_text("U_ID,대학명\n1,서울대학교\n", encoding="utf-8")
        with pytest.raises(BulkImportError, match="읽을 수 없습니다"):
            read_workbook(path)

"""최고표점 + 학년도 복사 테스트"""

from unittest.mock import MagicMock

import pytest

from jungsi_admin.models.highest_score import (
    HighestScore,
    default_highest_scores,
    group_highest_scores,
    highest_scores_from_response,
    highest_scores_payload,
)
from jungsi_admin.services.highest_score_service import HighestScoreService
from jungsi_admin.services.save_batch import FormValidationError
from jungsi_admin.services.year_copy import copy_year


class TestHighestScore:

    def test_빈응답은_템플릿(self):
        scores = highest_scores_from_response([])
        assert scores == default_highest_scores()
        assert all(s.is_new and s.max_score == 0 for s in scores)
        assert len(scores) == 7 + 9 + 8

    def test_한글키_응답(self):
        scores = highest_scores_from_response([{"id": 3, "과목명": "국어", "최고점": 140}])
        assert scores[0].subject_name == "국어"
        assert scores[0].max_score == 140
        assert not scores[0].is_new

    def test_그룹(self):
        groups = group_highest_scores([
            HighestScore(id=1, subject_name="국어", max_score=140),
            HighestScore(id=2, subject_name="물리1", max_score=70),
            HighestScore(id=3, subject_name="제2외국어", max_score=80),
        ])
        assert [s.id for s in groups["주요"]] == [1]
        assert [s.id for s in groups["과탐"]] == [2]
        assert [s.id for s in groups["기타"]] == [3]
        assert groups["사탐"] == []

    def test_저장_본문(self):
        payload = highest_scores_payload([HighestScore(id=-1, subject_name="국어", max_score=139)])
        assert payload == [{"subject_name": "국어", "max_score": 139}]

    def test_서비스_저장(self):
        client = MagicMock()
        client.put_highest_scores.return_value = {"success": True, "count": 2}
        service = HighestScoreService(client)

        message = service.save(2027, "수능", default_highest_scores()[:2])

        assert message == "2개 과목 저장 완료"
        year, mohyung, body = client.put_highest_scores.call_args.args
        assert (year, mohyung) == (2027, "수능")
        assert body[0]["subject_name"] == "국어"

    def test_서비스_불러오기_기본은_수능(self):
        client = MagicMock()
        client.get_highest_scores.return_value = []

        scores = HighestScoreService(client).load(2027)

        client.get_highest_scores.assert_called_once_with(2027, "수능")
        assert scores == default_highest_scores()


class TestCopyYear:

    def test_같은_학년도_거부(self):
        client = MagicMock()
        with pytest.raises(FormValidationError):
            copy_year(client, 2027, 2027)
        client.copy_year.assert_not_called()

    def test_복사_결과(self):
        client = MagicMock()
        client.copy_year.return_value = {
            "success": True,
            "message": "복사 완료",
            "copiedCount": {"basic": 10, "ratio": 10, "conv": 4, "practical": 30},
        }

        result = copy_year(client, 2026, 2027)

        client.copy_year.assert_called_once_with(2026, 2027)
        assert result.copied_count.practical == 30
        assert result.message == "복사 완료"

    def test_건수_없는_응답(self):
        client = MagicMock()
        client.copy_year.return_value = {"success": True}
        assert copy_year(client, 2026, 2027).copied_count is None

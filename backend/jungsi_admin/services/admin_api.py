"""정시 관리자 백엔드 REST 클라이언트

모든 영속 데이터는 외부 관리자 백엔드에 있다.
응답은 대부분 {success, ...payload} 봉투 형식이며
success: false / 2xx 외 상태 / 네트워크 오류는 모두 AdminApiError로 바꾼다.
재시도는 하지 않는다.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from jungsi_admin.config import settings
from jungsi_admin.models.grade_cut import check_grade_cut_target

logger = logging.getLogger(__name__)

JUNGSI = "/admin/jungsi"

# PUT /admin/jungsi/ratio/{uid}/{section}
RATIO_SECTIONS = frozenset({
    "main-ratios",
    "subjects",
    "english-scores",
    "history-scores",
    "selection-rules",
    "bonus-rules",
    "score-config",
    "special-formula",
    "total",
    "etc-settings",
    "etc-note",
    "calc-method",
})


class AdminApiError(Exception):
    """관리자 백엔드 호출 실패

    Attributes:
        message: 사용자에게 보여줄 메시지
        status_code: HTTP 상태 (네트워크 오류면 None)
        payload: 응답 본문 (디코딩 가능했을 때)
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"[{status_code}] {message}" if status_code else message)


def _error_message(payload: Any, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return default


class AdminApiClient:
    """관리자 백엔드 클라이언트

    token이 있으면 Authorization: Bearer 헤더를 붙인다.
    요청마다 httpx.Client를 열고 닫는다 (스레드에서 동시 호출 가능).
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.ADMIN_API_URL).rstrip("/")
        self._token = token
        self._timeout = timeout if timeout is not None else settings.ADMIN_API_TIMEOUT

    @property
    def base_url(self) -> str:
        return self._base_url

    # === 공통 요청 ===

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """요청 후 디코딩된 응답 반환

        Raises:
            AdminApiError: 네트워크 오류, 2xx 외 상태, success: false
        """
        url = f"{self._base_url}{path}"
        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.request(
                    method, url, params=params, json=json, headers=self._headers()
                )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            try:
                payload = e.response.json()
            except ValueError:
                payload = None
            logger.error("관리자 API %s %s 실패: HTTP %d", method, path, status)
            raise AdminApiError(_error_message(payload, "요청 실패"), status, payload) from e
        except httpx.HTTPError as e:
            logger.error("관리자 API %s %s 연결 실패: %s", method, path, e)
            raise AdminApiError("서버 연결 실패") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise AdminApiError("응답 형식 오류", response.status_code) from e

        if isinstance(payload, dict) and payload.get("success") is False:
            logger.warning("관리자 API %s %s success=false: %s", method, path, payload.get("message"))
            raise AdminApiError(_error_message(payload, "요청 실패"), response.status_code, payload)
        return payload

    def _get(self, path: str, **params: Any) -> Any:
        return self._request("GET", path, params=params or None)

    def _get_field(self, path: str, key: str, expected: type = dict, **params: Any) -> Any:
        """GET 봉투에서 key 값을 꺼낸다 (없거나 null이면 빈 expected)

        Raises:
            AdminApiError: 봉투가 dict가 아니거나 값의 형식이 다를 때
        """
        payload = self._get(path, **params)
        if not isinstance(payload, dict):
            logger.error("관리자 API GET %s 응답 형식 오류: %s", path, type(payload).__name__)
            raise AdminApiError("응답 형식 오류", payload=payload)
        value = payload.get(key)
        if value is None:
            return expected()
        if not isinstance(value, expected):
            logger.error("관리자 API GET %s: %s 형식 오류 (%s)", path, key, type(value).__name__)
            raise AdminApiError("응답 형식 오류", payload=payload)
        return value

    def _get_list(self, path: str, **params: Any) -> list[Any]:
        """목록 응답: 배열 그대로 또는 {list|data: [...]}"""
        payload = self._get(path, **params)
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict):
            value = payload.get("list") or payload.get("data") or []
            if isinstance(value, list):
                return value
        logger.error("관리자 API GET %s 목록 응답 형식 오류", path)
        raise AdminApiError("응답 형식 오류", payload=payload)

    # === 인증 ===

    def login(self, username: str, password: str) -> dict[str, Any]:
        """POST /admin/auth/login → {access_token, user}"""
        return self._request(
            "POST", "/admin/auth/login", json={"username": username, "password": password}
        )

    # === 기본 정보 ===

    def list_universities(self, year: int) -> list[dict[str, Any]]:
        """학년도별 학과 목록 (좌측 목록용)"""
        return self._get_field(f"{JUNGSI}/basic", "list", list, year=year)

    def get_basic(self, uid: int) -> dict[str, Any]:
        return self._get_field(f"{JUNGSI}/basic/{uid}", "data")

    def update_basic(self, uid: int, payload: dict[str, Any]) -> dict[str, Any]:
        logger.info("기본정보 저장: U_ID=%d", uid)
        return self._request("PUT", f"{JUNGSI}/basic/{uid}", json=payload)

    def get_details(self, uid: int, year: int) -> dict[str, Any]:
        """학과 설정 상세 → {기본정보, 반영비율}"""
        return self._get_field(f"{JUNGSI}/details/{uid}", "data", year=year)

    # === 반영 비율 ===

    def get_ratio(self, uid: int) -> dict[str, Any]:
        return self._get_field(f"{JUNGSI}/ratio/{uid}", "data")

    def put_ratio_section(self, uid: int, section: str, payload: Any) -> dict[str, Any]:
        """반영 비율 한 섹션 저장

        Raises:
            ValueError: 알 수 없는 섹션
        """
        if section not in RATIO_SECTIONS:
            raise ValueError(f"알 수 없는 반영비율 섹션: {section}")
        return self._request("PUT", f"{JUNGSI}/ratio/{uid}/{section}", json=payload)

    # === 등급컷 ===

    def get_grade_cuts(self, year: int, exam_type: str, subject: str) -> list[dict[str, Any]]:
        return self._get_field(
            "/admin/grade-cuts", "gradeCuts", list, year=year, exam_type=exam_type, subject=subject
        )

    def get_grade_cut_subjects(self, year: int, exam_type: str) -> list[str]:
        """등급컷이 저장된 과목 목록"""
        return self._get_field(
            "/admin/grade-cuts/subjects", "subjects", list, year=year, exam_type=exam_type
        )

    def save_grade_cuts(
        self,
        year: int,
        exam_type: str,
        subject: str,
        grade_cuts: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """POST /admin/grade-cuts/bulk

        Raises:
            ValueError: 알 수 없는 시험 유형이나 과목 (요청 전)
        """
        check_grade_cut_target(exam_type, subject)
        logger.info("등급컷 저장: %d %s %s (%d등급)", year, exam_type, subject, len(grade_cuts))
        return self._request(
            "POST",
            "/admin/grade-cuts/bulk",
            json={
                "year": year,
                "exam_type": exam_type,
                "subject": subject,
                "gradeCuts": grade_cuts,
            },
        )

    # === 탐구 변환표 ===

    def get_inquiry_conv(self, uid: int, year: int) -> dict[str, Any]:
        return self._get_field(f"{JUNGSI}/inquiry-conv/{uid}", "data", year=year)

    def put_inquiry_conv(self, uid: int, year: int, payload: dict[str, Any]) -> dict[str, Any]:
        """payload: {track, scores}"""
        return self._request(
            "PUT", f"{JUNGSI}/inquiry-conv/{uid}", params={"year": year}, json=payload
        )

    # === 실기 배점 ===

    def get_practical(self, uid: int, year: int) -> dict[str, list[dict[str, Any]]]:
        """종목명별 배점 행 목록"""
        return self._get_field(f"{JUNGSI}/practical/{uid}/{year}", "data")

    def create_practical(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"{JUNGSI}/practical", json=payload)

    def update_practical(self, row_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"{JUNGSI}/practical/{row_id}", json=payload)

    def delete_practical(self, row_id: int) -> dict[str, Any]:
        return self._request("DELETE", f"{JUNGSI}/practical/{row_id}")

    # === 최고표점 ===

    def get_highest_scores(self, year: int, mohyung: str) -> list[dict[str, Any]]:
        """→ [{id, 과목명, 최고점}, ...]"""
        return self._get_field(
            f"{JUNGSI}/highest-scores", "scores", list, year=year, mohyung=mohyung
        )

    def put_highest_scores(
        self, year: int, mohyung: str, scores: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return self._request(
            "PUT",
            f"{JUNGSI}/highest-scores",
            params={"year": year, "mohyung": mohyung},
            json={"scores": scores},
        )

    # === 시험 일정 ===

    def get_exam_schedules(self, year: int) -> dict[str, Any]:
        """→ {schedules: [...], forceExam: str|None}"""
        payload = self._get("/admin/exam-schedule", year=year)
        if not isinstance(payload, dict):
            raise AdminApiError("응답 형식 오류", payload=payload)
        return payload

    def save_exam_schedule(
        self, year: int, exam_type: str, exam_date: str, release_date: str
    ) -> dict[str, Any]:
        return self._request(
            "POST",
            "/admin/exam-schedule",
            json={
                "year": year,
                "exam_type": exam_type,
                "exam_date": exam_date,
                "release_date": release_date,
            },
        )

    def set_force_exam(self, year: int, force_exam: str | None) -> dict[str, Any]:
        """force_exam=None 이면 자동 판별"""
        return self._request(
            "POST", "/admin/exam-schedule/force", json={"year": year, "force_exam": force_exam}
        )

    # === 컷 점수 ===

    def list_cutoff_universities(self, year: int) -> list[dict[str, Any]]:
        return self._get_list("/admin/cutoffs/universities", year=year)

    def save_cutoffs(self, cutoffs: list[dict[str, Any]]) -> dict[str, Any]:
        logger.info("컷 점수 저장: %d건", len(cutoffs))
        return self._request("POST", "/admin/cutoffs/bulk", json={"cutoffs": cutoffs})

    # === 공지사항 ===

    def list_notices(self) -> list[dict[str, Any]]:
        return self._get_list("/admin/notices")

    def create_notice(self, payload: dict[str, Any]) -> Any:
        return self._request("POST", "/admin/notices", json=payload)

    def update_notice(self, notice_id: int, payload: dict[str, Any]) -> Any:
        return self._request("PUT", f"/admin/notices/{notice_id}", json=payload)

    def delete_notice(self, notice_id: int) -> Any:
        return self._request("DELETE", f"/admin/notices/{notice_id}")

    def toggle_notice(self, notice_id: int) -> Any:
        return self._request("PATCH", f"/admin/notices/{notice_id}/toggle")

    # === 일괄 작업 ===

    def copy_year(self, from_year: int, to_year: int) -> dict[str, Any]:
        logger.info("학년도 데이터 복사: %d → %d", from_year, to_year)
        return self._request(
            "POST", f"{JUNGSI}/copy-year", json={"fromYear": from_year, "toYear": to_year}
        )

    def bulk_update(self, year: int, items: list[dict[str, Any]]) -> dict[str, Any]:
        """→ {updated, failed, errors, message}"""
        logger.info("일괄 업데이트: %d학년도 %d건", year, len(items))
        return self._request("POST", f"{JUNGSI}/bulk-update", json={"year": year, "data": items})

    def export(self, year: int) -> list[dict[str, Any]]:
        return self._get_field(f"{JUNGSI}/export", "data", list, year=year)

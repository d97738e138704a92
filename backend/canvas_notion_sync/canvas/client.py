# backend/canvas_notion_sync/canvas/client.py

"""
Canvas LMS REST API との通信を担当するクライアントモジュール。
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx

from .config import CanvasSettings, get_canvas_settings

logger = logging.getLogger(__name__)


class CanvasClientError(RuntimeError):
    """Canvas クライアント全般の例外。"""


class CanvasHTTPError(CanvasClientError):
    """HTTP ステータスコードがエラーだった場合の例外。"""

    def __init__(self, status_code: int, body: Any | None = None) -> None:
        super().__init__(f"Canvas API request failed: status_code={status_code}")
        self.status_code = status_code
        self.body = body


class CanvasConnectionError(CanvasClientError):
    """接続エラー・タイムアウト時の例外。"""


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def months_between(earlier: datetime, later: datetime) -> int:
    """
    暦月ベースの経過月数（日単位は無視）。
    """
    return (later.year - earlier.year) * 12 + later.month - earlier.month


def is_recent_student_course(
    course: Mapping[str, Any],
    *,
    now: datetime,
    cutoff_months: int,
) -> bool:
    """
    直近 cutoff_months か月以内に作成され、公開中で、
    自分が active な student として登録されているコースかどうか。
    """
    created = _parse_datetime(course.get("created_at"))
    if created is None:
        return False

    is_recent = months_between(created, now) <= cutoff_months
    is_available = course.get("workflow_state") == "available"
    enrollments = course.get("enrollments") or []
    is_student = any(
        isinstance(enr, Mapping)
        and enr.get("enrollment_state") == "active"
        and enr.get("type") == "student"
        for enr in enrollments
    )
    return is_recent and is_available and is_student


class CanvasClient:
    """
    Canvas API の薄い非同期ラッパークライアント。

    - コース一覧（ページネーション対応、直近の受講コースのみ）
    - コースごとの課題一覧

    返り値は Canvas API の生の dict。簡略化は collector 側で行う。
    """

    def __init__(
        self,
        settings: CanvasSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_canvas_settings()
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._settings.api_base_url

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._settings.api_token:
            headers["Authorization"] = f"Bearer {self._settings.api_token}"
        return headers

    def _new_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.timeout_seconds,
            headers=self._build_headers(),
            transport=self._transport,
        )

    async def _get(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            return await client.get(url)
        except httpx.RequestError as exc:
            raise CanvasConnectionError(f"Failed to call Canvas API: {exc}") from exc

    @staticmethod
    def _next_link(response: httpx.Response) -> Optional[str]:
        """
        Link ヘッダの rel="next" を取り出す。無ければ None。
        """
        return response.links.get("next", {}).get("url") or None

    async def list_recent_courses(self, *, now: datetime | None = None) -> List[Dict[str, Any]]:
        """
        全ページのコースを取得し、直近の受講コースだけに絞り込んで返す。

        :raises CanvasHTTPError: Canvas が 2xx 以外を返した場合
        :raises CanvasConnectionError: 接続エラーやタイムアウト時
        """
        now = now or datetime.now(timezone.utc)
        url: Optional[str] = f"{self.base_url}/courses?per_page=100"
        all_courses: List[Dict[str, Any]] = []

        async with self._new_http_client() as client:
            while url:
                response = await self._get(client, url)
                if not response.is_success:
                    raise CanvasHTTPError(response.status_code, body=response.text)

                page = response.json()
                if not isinstance(page, list):
                    raise CanvasClientError(
                        "Unexpected Canvas API response format: courses is not a list."
                    )
                all_courses.extend(page)
                url = self._next_link(response)

        return [
            course
            for course in all_courses
            if isinstance(course, Mapping)
            and is_recent_student_course(
                course,
                now=now,
                cutoff_months=self._settings.recent_cutoff_months,
            )
        ]

    async def list_all_assignments(
        self,
        courses: Sequence[Mapping[str, Any]],
    ) -> List[Dict[str, Any]]:
        """
        コースごとに課題を全ページ取得し、courseId / courseName を付与して返す。

        - あるコースで 2xx 以外が返った場合はそのコースの取得を打ち切る
        - あるコースで通信エラーや解釈できない応答があった場合はログを残して次のコースへ進む
        """
        assignments: List[Dict[str, Any]] = []

        async with self._new_http_client() as client:
            for course in courses:
                course_id = course.get("id")
                url: Optional[str] = (
                    f"{self.base_url}/courses/{course_id}/assignments?per_page=100"
                )
                while url:
                    try:
                        response = await self._get(client, url)
                    except CanvasConnectionError as exc:
                        logger.error(
                            "Failed to fetch assignments for course %s: %s",
                            course_id,
                            exc,
                        )
                        break

                    if not response.is_success:
                        logger.warning(
                            "Canvas returned %s for assignments of course %s",
                            response.status_code,
                            course_id,
                        )
                        break

                    try:
                        page = response.json()
                    except ValueError as exc:
                        logger.error(
                            "Failed to fetch assignments for course %s: %s",
                            course_id,
                            exc,
                        )
                        break
                    if not isinstance(page, list):
                        logger.error(
                            "Failed to fetch assignments for course %s: "
                            "unexpected response format",
                            course_id,
                        )
                        break

                    for assignment in page:
                        if not isinstance(assignment, Mapping):
                            continue
                        assignments.append(
                            {
                                **assignment,
                                "courseName": course.get("name"),
                                "courseId": course_id,
                            }
                        )
                    url = self._next_link(response)

        return assignments

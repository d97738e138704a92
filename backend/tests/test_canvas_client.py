# backend/tests/test_canvas_client.py

from datetime import datetime, timezone

import httpx
import pytest

from canvas_notion_sync.canvas.client import (
    CanvasClient,
    CanvasConnectionError,
    CanvasHTTPError,
    is_recent_student_course,
    months_between,
)
from canvas_notion_sync.canvas.config import CanvasSettings

BASE = "https://canvas.test/api/v1"
NOW = datetime(2025, 3, 15, tzinfo=timezone.utc)
SETTINGS = CanvasSettings(api_base_url=BASE, api_token="canvas-token", recent_cutoff_months=4)

STUDENT = [{"type": "student", "enrollment_state": "active"}]


def _course(course_id, created_at="2025-01-10T00:00:00Z", state="available", enrollments=None):
    return {
        "id": course_id,
        "name": f"Course {course_id}",
        "created_at": created_at,
        "workflow_state": state,
        "enrollments": STUDENT if enrollments is None else enrollments,
    }


def test_months_between_counts_calendar_months():
    assert months_between(datetime(2024, 11, 30), datetime(2025, 3, 1)) == 4


@pytest.mark.parametrize(
    "course, expected",
    [
        (_course(1), True),
        (_course(2, created_at="2024-10-01T00:00:00Z"), False),
        (_course(3, state="completed"), False),
        (_course(4, enrollments=[{"type": "teacher", "enrollment_state": "active"}]), False),
        (_course(5, enrollments=[{"type": "student", "enrollment_state": "invited"}]), False),
        (_course(6, created_at=None), False),
    ],
)
def test_is_recent_student_course(course, expected):
    assert is_recent_student_course(course, now=NOW, cutoff_months=4) is expected


@pytest.mark.asyncio
async def test_list_recent_courses_follows_pagination_and_filters():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[_course(2, state="deleted")])
        return httpx.Response(
            200,
            json=[_course(1)],
            headers={"Link": f'<{BASE}/courses?per_page=100&page=2>; rel="next"'},
        )

    client = CanvasClient(SETTINGS, transport=httpx.MockTransport(handler))

    courses = await client.list_recent_courses(now=NOW)

    assert [c["id"] for c in courses] == [1]
    assert len(seen) == 2
    assert seen[0].headers["authorization"] == "Bearer canvas-token"


@pytest.mark.asyncio
async def test_list_recent_courses_http_error():
    client = CanvasClient(
        SETTINGS,
        transport=httpx.MockTransport(lambda request: httpx.Response(401, text="unauthorized")),
    )

    with pytest.raises(CanvasHTTPError) as exc_info:
        await client.list_recent_courses(now=NOW)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_list_recent_courses_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down")

    client = CanvasClient(SETTINGS, transport=httpx.MockTransport(handler))

    with pytest.raises(CanvasConnectionError):
        await client.list_recent_courses(now=NOW)


@pytest.mark.asyncio
async def test_list_all_assignments_annotates_and_skips_broken_courses():
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/courses/1/assignments"):
            return httpx.Response(200, json=[{"id": 10, "name": "HW 1", "html_url": "u"}])
        if path.endswith("/courses/2/assignments"):
            raise httpx.ConnectError("reset")
        return httpx.Response(403, json={"errors": []})

    client = CanvasClient(SETTINGS, transport=httpx.MockTransport(handler))

    assignments = await client.list_all_assignments(
        [{"id": 1, "name": "Bio"}, {"id": 2, "name": "Chem"}, {"id": 3, "name": "Art"}]
    )

    assert assignments == [
        {"id": 10, "name": "HW 1", "html_url": "u", "courseName": "Bio", "courseId": 1}
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "broken",
    [
        httpx.Response(200, headers={"content-type": "text/html"}, content=b"<html>login</html>"),
        httpx.Response(200, json={"errors": [{"message": "unauthorized"}]}),
    ],
    ids=["html-page", "error-object"],
)
async def test_list_all_assignments_skips_course_with_unparsable_page(broken, caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/courses/1/assignments"):
            return broken
        return httpx.Response(200, json=[{"id": 20, "name": "Lab 1", "html_url": "v"}])

    client = CanvasClient(SETTINGS, transport=httpx.MockTransport(handler))

    assignments = await client.list_all_assignments(
        [{"id": 1, "name": "Bio"}, {"id": 2, "name": "Chem"}]
    )

    assert assignments == [
        {"id": 20, "name": "Lab 1", "html_url": "v", "courseName": "Chem", "courseId": 2}
    ]
    assert any(
        "Failed to fetch assignments for course 1" in r.getMessage() for r in caplog.records
    )

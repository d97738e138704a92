# backend/canvas_notion_sync/canvas/collector.py

"""
Canvas からコース・課題を集めて CollectedDataset を組み立てる Remote Collector。
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .client import CanvasClient
from .schemas import AssignmentRecord, CollectedDataset, CourseRecord


class CanvasSource(Protocol):
    """
    上流 LMS のインターフェース。

    list_recent_courses / list_all_assignments を備えた実装であれば差し替え可能。
    リトライが必要なら実装側で持つ。
    """

    async def list_recent_courses(self) -> List[Dict[str, Any]]:
        """直近の受講コースを返す。"""

    async def list_all_assignments(
        self, courses: Sequence[Mapping[str, Any]]
    ) -> List[Dict[str, Any]]:
        """courses に属する課題をすべて返す。"""


class RemoteCollector:
    """
    2 回の上流呼び出しを順番に行い、1 つのデータセットにまとめる。

    - どちらかが例外を投げたら、その例外をそのまま呼び出し元へ送出する
    - 部分的なデータセットは返さない
    """

    def __init__(self, source: Optional[CanvasSource] = None) -> None:
        self._source = source or CanvasClient()

    async def collect(self) -> CollectedDataset:
        raw_courses = await self._source.list_recent_courses()
        raw_assignments = await self._source.list_all_assignments(raw_courses)

        return CollectedDataset(
            courses=tuple(CourseRecord.from_canvas(c) for c in raw_courses),
            assignments=tuple(AssignmentRecord.from_canvas(a) for a in raw_assignments),
        )

# backend/canvas_notion_sync/canvas/schemas.py

"""
Canvas から取得したデータを同期用に簡略化したスキーマ定義。
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CourseRecord(BaseModel):
    """同期対象のコース 1 件。"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Canvas のコース ID")
    name: str = Field(..., description="コース名")

    @classmethod
    def from_canvas(cls, raw: Dict[str, Any]) -> "CourseRecord":
        return cls(id=str(raw.get("id", "")), name=str(raw.get("name") or ""))

    def to_payload(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}


class AssignmentRecord(BaseModel):
    """同期対象の課題 1 件。"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Canvas の課題 ID")
    name: str = Field(..., description="課題名")
    course_id: str = Field(..., description="所属コースの ID")
    due_at: Optional[str] = Field(None, description="締切（ISO8601）。未設定なら None")
    points_possible: Optional[float] = Field(None, description="配点")
    url: str = Field("", description="Canvas 上の課題ページ URL")

    @classmethod
    def from_canvas(cls, raw: Dict[str, Any]) -> "AssignmentRecord":
        """
        Canvas API の課題オブジェクト（courseId 付与済み）から変換する。
        """
        points = raw.get("points_possible")
        if isinstance(points, bool) or not isinstance(points, (int, float)):
            points = None

        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name") or ""),
            course_id=str(raw.get("courseId", raw.get("course_id", ""))),
            due_at=raw.get("due_at"),
            points_possible=points,
            url=str(raw.get("html_url") or ""),
        )

    def to_payload(self) -> Dict[str, Any]:
        """
        同期バックエンドが受け付けるキー名で辞書化する。
        """
        return {
            "id": self.id,
            "name": self.name,
            "courseId": self.course_id,
            "due_at": self.due_at,
            "points_possible": self.points_possible,
            "html_url": self.url,
        }


class CollectedDataset(BaseModel):
    """
    1 回の同期で使うコース・課題のまとまり。

    生成後は変更しない（frozen + tuple）。
    """

    model_config = ConfigDict(frozen=True)

    courses: Tuple[CourseRecord, ...] = ()
    assignments: Tuple[AssignmentRecord, ...] = ()

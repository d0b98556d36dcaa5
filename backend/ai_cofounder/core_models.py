from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, Field


class ShapeType(str, Enum):
    """The four drawable shape variants the canvas understands."""
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    TEXT = "text"
    LINE = "line"


class Directive(NamedTuple):
    """One decoded ``[CANVAS_CREATE:<type>:<json>]`` token."""
    type_identifier: str
    parameters: Dict[str, Any]


class ShapeRecord(BaseModel):
    """Canonical representation of one drawable object, before persistence."""
    type: ShapeType
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Complete per-type field set, defaults applied")
    owner_id: str
    created_at: Optional[datetime] = None # Assigned by the store on save


class StoredShapeRecord(ShapeRecord):
    """A ShapeRecord as returned by the store, with its row id."""
    id: int
    created_at: datetime

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "StoredShapeRecord":
        """Build from a ``canvas_objects`` row (id, user_id, object_type, object_data, created_at)."""
        return cls(
            id=row["id"],
            type=ShapeType(row["object_type"]),
            parameters=dict(row.get("object_data") or {}),
            owner_id=str(row["user_id"]),
            created_at=row["created_at"],
        )


class ProcessedReply(BaseModel):
    """Result of running an assistant reply through the canvas directive protocol."""
    display_text: str
    created_shapes: List[StoredShapeRecord] = Field(default_factory=list)

"""ai_cofounder/services/database.py

Single data-access layer over the Supabase tables::

    users(id, email, name, created_at, updated_at)
    messages(id, user_id, content, role, created_at)
    canvas_objects(id, user_id, object_type, object_data, created_at)
    projects(id, user_id, name, description, status, created_at, updated_at)

The Supabase client is passed in by the caller (one per app, created at
startup). Every client failure surfaces as ``StorageError``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from supabase import Client

from ai_cofounder.core_models import ShapeRecord, ShapeType, StoredShapeRecord
from ai_cofounder.exceptions import StorageError

log = logging.getLogger(__name__)

MESSAGE_ROLES = ("user", "assistant")


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class CofounderDatabase:
    """Thin wrapper around the Supabase tables used by the app.

    Also satisfies the ``ShapeStore`` protocol (``save`` / ``list_by_owner``)
    for the canvas directive pipeline.
    """

    def __init__(self, client: Client):
        self._client = client

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _execute(self, table: str, query) -> List[Dict[str, Any]]:
        try:
            response = query.execute()
        except Exception as e:
            log.error("Supabase %s query failed: %s", table, e)
            raise StorageError(f"Database error on '{table}': {e}", table=table) from e
        data = getattr(response, "data", None)
        if data is None:
            return []
        return data if isinstance(data, list) else [data]

    def _insert_one(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._execute(table, self._client.table(table).insert(row))
        if not rows:
            raise StorageError(f"Insert into '{table}' returned no row", table=table)
        return rows[0]

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #
    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute("users", self._client.table("users").select("*").eq("id", str(user_id)).limit(1))
        return rows[0] if rows else None

    def create_user(self, user_id: str, email: str, name: Optional[str] = None) -> Dict[str, Any]:
        log.info("Creating user profile for %s", user_id)
        return self._insert_one("users", {"id": str(user_id), "email": email, "name": name})

    def ping(self) -> None:
        """Cheapest query that proves the database is reachable."""
        self._execute("users", self._client.table("users").select("id").limit(1))

    # ------------------------------------------------------------------ #
    # Messages
    # ------------------------------------------------------------------ #
    def list_messages(self, user_id: str) -> List[Dict[str, Any]]:
        return self._execute(
            "messages",
            self._client.table("messages").select("*").eq("user_id", str(user_id)).order("created_at", desc=False),
        )

    def create_message(self, user_id: str, content: str, role: str) -> Dict[str, Any]:
        if role not in MESSAGE_ROLES:
            raise ValueError(f"role must be one of {MESSAGE_ROLES}, got {role!r}")
        return self._insert_one("messages", {"user_id": str(user_id), "content": content, "role": role})

    # ------------------------------------------------------------------ #
    # Canvas objects (ShapeStore)
    # ------------------------------------------------------------------ #
    def save(self, record: ShapeRecord) -> StoredShapeRecord:
        """Persist *record*; ``created_at`` is stamped here and never rewritten."""
        row = self._insert_one(
            "canvas_objects",
            {
                "user_id": record.owner_id,
                "object_type": record.type.value,
                "object_data": record.parameters,
                "created_at": _utcnow_iso(),
            },
        )
        return StoredShapeRecord.from_row(row)

    def list_by_owner(self, owner_id: str) -> List[StoredShapeRecord]:
        rows = self._execute(
            "canvas_objects",
            self._client.table("canvas_objects").select("*").eq("user_id", str(owner_id)).order("created_at", desc=False),
        )
        records = []
        for row in rows:
            try:
                records.append(StoredShapeRecord.from_row(row))
            except ValueError as e:
                # Rows written by older canvas versions ("rect", free-form types)
                log.warning("Skipping canvas object %s with unsupported type: %s", row.get("id"), e)
        return records

    def get_canvas_object(self, object_id: int, owner_id: str) -> Optional[StoredShapeRecord]:
        rows = self._execute(
            "canvas_objects",
            self._client.table("canvas_objects").select("*").eq("id", object_id).eq("user_id", str(owner_id)).limit(1),
        )
        if not rows:
            return None
        try:
            return StoredShapeRecord.from_row(rows[0])
        except ValueError as e:
            log.warning("Canvas object %s has unsupported type: %s", object_id, e)
            return None

    def update_position(self, object_id: int, owner_id: str, x: float, y: float) -> Optional[StoredShapeRecord]:
        """Move a stored shape. Lines are translated so that (x1, y1) lands on (x, y)."""
        current = self.get_canvas_object(object_id, owner_id)
        if current is None:
            return None

        data = dict(current.parameters)
        if current.type == ShapeType.LINE:
            dx, dy = x - data["x1"], y - data["y1"]
            data.update(x1=x, y1=y, x2=data["x2"] + dx, y2=data["y2"] + dy)
        else:
            data.update(x=x, y=y)

        rows = self._execute(
            "canvas_objects",
            self._client.table("canvas_objects").update({"object_data": data}).eq("id", object_id).eq("user_id", str(owner_id)),
        )
        return StoredShapeRecord.from_row(rows[0]) if rows else None

    def delete(self, object_id: int, owner_id: str) -> bool:
        rows = self._execute(
            "canvas_objects",
            self._client.table("canvas_objects").delete().eq("id", object_id).eq("user_id", str(owner_id)),
        )
        return bool(rows)

    # ------------------------------------------------------------------ #
    # Projects
    # ------------------------------------------------------------------ #
    def list_projects(self, user_id: str) -> List[Dict[str, Any]]:
        return self._execute(
            "projects",
            self._client.table("projects").select("*").eq("user_id", str(user_id)).order("created_at", desc=True),
        )

    def create_project(self, user_id: str, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self._insert_one(
            "projects",
            {"user_id": str(user_id), "name": name, "description": description, "status": "active"},
        )

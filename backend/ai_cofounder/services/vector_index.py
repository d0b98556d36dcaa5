from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, FieldCondition, Filter, MatchValue, PointStruct, VectorParams

log = logging.getLogger(__name__)


class ConversationIndex:
    """Per-user vector index of past chat exchanges (user message + assistant reply)."""

    def __init__(self, client: AsyncQdrantClient, collection: str, vector_size: int = 1536):
        self.client = client
        self.collection = collection
        self.vector_size = vector_size

    async def ensure_collection(self) -> None:
        """Create the collection if it doesn't exist yet."""
        if await self.client.collection_exists(self.collection):
            return
        log.info("Creating Qdrant collection %s (size=%d)", self.collection, self.vector_size)
        await self.client.create_collection(
            collection_name=self.collection,
            vectors_config=VectorParams(size=self.vector_size, distance=Distance.COSINE),
        )

    async def index_exchange(
        self,
        user_id: str,
        message: str,
        reply: str,
        vector: List[float],
        project_id: Optional[str] = None,
    ) -> str:
        """Upsert one exchange and return its point id."""
        await self.ensure_collection()
        point_id = str(uuid.uuid4())
        payload = {
            "userId": str(user_id),
            "content": message,
            "response": reply,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "projectId": project_id,
        }
        await self.client.upsert(
            collection_name=self.collection,
            points=[PointStruct(id=point_id, vector=vector, payload=payload)],
        )
        return point_id

    async def search(self, vector: List[float], user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Closest exchanges of *user_id* to *vector*, best first."""
        if not await self.client.collection_exists(self.collection):
            return []
        result = await self.client.query_points(
            collection_name=self.collection,
            query=vector,
            query_filter=Filter(must=[FieldCondition(key="userId", match=MatchValue(value=str(user_id)))]),
            limit=limit,
            with_payload=True,
        )
        hits = []
        for point in result.points:
            payload = point.payload or {}
            hits.append(
                {
                    "id": str(point.id),
                    "score": point.score,
                    "content": payload.get("content"),
                    "response": payload.get("response"),
                    "timestamp": payload.get("timestamp"),
                }
            )
        return hits

    async def ping(self) -> None:
        await self.client.get_collections()

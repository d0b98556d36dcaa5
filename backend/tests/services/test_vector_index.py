from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from ai_cofounder.services.vector_index import ConversationIndex


@pytest.fixture
def qdrant():
    client = AsyncMock()
    client.collection_exists.return_value = True
    return client


@pytest.mark.asyncio
async def test_index_exchange_creates_missing_collection(qdrant):
    qdrant.collection_exists.return_value = False
    index = ConversationIndex(qdrant, "ideas", vector_size=3)

    point_id = await index.index_exchange("u1", "pricing?", "Start at $29.", [0.1, 0.2, 0.3], project_id="p1")

    assert qdrant.create_collection.await_args.kwargs["collection_name"] == "ideas"
    assert qdrant.create_collection.await_args.kwargs["vectors_config"].size == 3
    point = qdrant.upsert.await_args.kwargs["points"][0]
    assert str(point.id) == point_id
    assert point.payload["userId"] == "u1"
    assert point.payload["content"] == "pricing?"
    assert point.payload["response"] == "Start at $29."
    assert point.payload["projectId"] == "p1"


@pytest.mark.asyncio
async def test_search_filters_by_user_and_maps_payload(qdrant):
    qdrant.query_points.return_value = SimpleNamespace(
        points=[SimpleNamespace(id="a", score=0.9, payload={"content": "q", "response": "r", "timestamp": "t"})]
    )
    index = ConversationIndex(qdrant, "ideas")

    hits = await index.search([0.1], "u1", limit=3)

    assert hits == [{"id": "a", "score": 0.9, "content": "q", "response": "r", "timestamp": "t"}]
    kwargs = qdrant.query_points.await_args.kwargs
    assert kwargs["limit"] == 3
    assert kwargs["query_filter"].must[0].match.value == "u1"


@pytest.mark.asyncio
async def test_search_without_collection_is_empty(qdrant):
    qdrant.collection_exists.return_value = False
    assert await ConversationIndex(qdrant, "ideas").search([0.1], "u1") == []
    qdrant.query_points.assert_not_awaited()

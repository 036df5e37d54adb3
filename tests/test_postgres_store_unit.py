"""
Unit Tests for PostgresMemoryStore

Tests query construction and row mapping using mocks for the database connection.
"""

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from agent_memory.models.memory import Content, KnowledgeMetadata, Memory
from agent_memory.store.postgres import PostgresMemoryStore
from agent_memory.store.schema import DatabaseSchema


def make_row(**overrides):
    row = {
        "id": uuid4(),
        "type": "messages",
        "agent_id": None,
        "user_id": None,
        "room_id": uuid4(),
        "content": json.dumps({"text": "hello", "metadata": {"type": "message", "scope": "shared"}}),
        "embedding": "[0.1,0.2]",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "unique": True,
    }
    row.update(overrides)
    return row


class TestPostgresStoreUnit:
    """Unit tests for PostgresMemoryStore."""

    @pytest.fixture
    def mock_store(self):
        """Create a store with mocked pool."""
        store = PostgresMemoryStore(connection_string="mock://")

        mock_pool = MagicMock()
        mock_ctx = MagicMock()
        mock_conn = AsyncMock()

        mock_ctx.__aenter__ = AsyncMock(return_value=mock_conn)
        mock_ctx.__aexit__ = AsyncMock(return_value=None)

        mock_pool.acquire.return_value = mock_ctx

        store._pool = mock_pool
        store.conn = mock_conn
        return store

    @pytest.mark.asyncio
    async def test_get_memory_by_id_maps_row(self, mock_store):
        row = make_row()
        mock_store.conn.fetchrow.return_value = row

        memory = await mock_store.get_memory_by_id(row["id"])

        assert memory.id == row["id"]
        assert memory.room_id == row["room_id"]
        assert memory.content.text == "hello"
        assert isinstance(memory.content.metadata, KnowledgeMetadata)
        assert memory.content.metadata.type == "message"
        assert memory.embedding == [0.1, 0.2]
        assert memory.created_at == 1704067200000

    @pytest.mark.asyncio
    async def test_get_memory_by_id_missing(self, mock_store):
        mock_store.conn.fetchrow.return_value = None

        assert await mock_store.get_memory_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_create_memory_is_idempotent_insert(self, mock_store):
        memory = Memory(
            room_id=uuid4(),
            agent_id=uuid4(),
            content=Content(text="hello", metadata={"type": "fact"}),
            embedding=[0.1, 0.2],
        )

        await mock_store.create_memory(memory, "facts")

        args = mock_store.conn.execute.call_args[0]
        assert "ON CONFLICT (id) DO NOTHING" in args[0]
        assert args[1] == memory.id
        assert args[2] == "facts"
        assert json.loads(args[3]) == {"text": "hello", "metadata": {"type": "fact"}}
        assert args[4] == "[0.1, 0.2]"
        assert args[6] == memory.agent_id
        assert args[7] == memory.room_id
        assert args[8] is True
        mock_store.conn.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_unique_without_similar(self, mock_store):
        mock_store.conn.fetch.return_value = []
        memory = Memory(room_id=uuid4(), content=Content(text="hello"), embedding=[0.1, 0.2])

        await mock_store.create_memory(memory, "messages", unique=True)

        search_args = mock_store.conn.fetch.call_args[0]
        assert "<=>" in search_args[0]
        assert search_args[4] == 0.95
        assert mock_store.conn.execute.call_args[0][8] is True

    @pytest.mark.asyncio
    async def test_create_unique_with_similar(self, mock_store):
        mock_store.conn.fetch.return_value = [make_row(similarity=0.99)]
        memory = Memory(room_id=uuid4(), content=Content(text="hello"), embedding=[0.1, 0.2])

        await mock_store.create_memory(memory, "messages", unique=True)

        assert mock_store.conn.execute.call_args[0][8] is False

    @pytest.mark.asyncio
    async def test_get_memories_builds_filters(self, mock_store):
        mock_store.conn.fetch.return_value = [make_row()]
        room_id, agent_id = uuid4(), uuid4()

        memories = await mock_store.get_memories(
            room_id, "messages", count=5, unique=True, start=1000, agent_id=agent_id,
        )

        assert len(memories) == 1
        args = mock_store.conn.fetch.call_args[0]
        sql = args[0]
        assert '"unique" = TRUE' in sql
        assert "agent_id = $3" in sql
        assert "created_at >= to_timestamp($4" in sql
        assert "LIMIT $5" in sql
        assert args[1:] == ("messages", room_id, agent_id, 1000, 5)

    @pytest.mark.asyncio
    async def test_get_memories_without_filters(self, mock_store):
        mock_store.conn.fetch.return_value = []
        room_id = uuid4()

        await mock_store.get_memories(room_id, "knowledge")

        args = mock_store.conn.fetch.call_args[0]
        assert "LIMIT" not in args[0]
        assert '"unique"' not in args[0]
        assert args[1:] == ("knowledge", room_id)

    @pytest.mark.asyncio
    async def test_get_memories_by_room_ids(self, mock_store):
        mock_store.conn.fetch.return_value = []
        room_ids = [uuid4(), uuid4()]

        await mock_store.get_memories_by_room_ids(room_ids, "knowledge", limit=20)

        args = mock_store.conn.fetch.call_args[0]
        assert "room_id = ANY($2::uuid[])" in args[0]
        assert args[1:] == ("knowledge", room_ids, 20)

    @pytest.mark.asyncio
    async def test_search_memories_orders_by_distance(self, mock_store):
        mock_store.conn.fetch.return_value = [make_row(similarity=0.8)]

        results = await mock_store.search_memories(
            "knowledge", uuid4(), [0.1, 0.2], match_threshold=0.1, count=10, unique=True,
        )

        assert results[0].similarity == 0.8
        sql = mock_store.conn.fetch.call_args[0][0]
        assert "ORDER BY embedding <=> $1::vector" in sql
        assert '"unique" = TRUE' in sql

    @pytest.mark.asyncio
    async def test_get_cached_embeddings(self, mock_store):
        mock_store.conn.fetch.return_value = [{"embedding": "[0.5,0.5]", "levenshtein_score": 1}]

        cached = await mock_store.get_cached_embeddings("messages", 2, "hello", "content", "text", 10)

        assert cached[0].embedding == [0.5, 0.5]
        assert cached[0].levenshtein_score == 1.0
        args = mock_store.conn.fetch.call_args[0]
        assert "levenshtein" in args[0]
        assert args[1:] == ("hello", "messages", "text", 2, 10)

    @pytest.mark.asyncio
    async def test_get_cached_embeddings_rejects_unknown_field(self, mock_store):
        with pytest.raises(ValueError):
            await mock_store.get_cached_embeddings("messages", 2, "hello", "id; DROP TABLE memories", "text", 10)

    @pytest.mark.asyncio
    async def test_remove_and_count(self, mock_store):
        mock_store.conn.fetchval.return_value = 4
        memory_id, room_id = uuid4(), uuid4()

        await mock_store.remove_memory(memory_id, "facts")
        assert mock_store.conn.execute.call_args[0][1:] == (memory_id, "facts")

        await mock_store.remove_all_memories(room_id, "facts")
        assert mock_store.conn.execute.call_args[0][1:] == (room_id, "facts")

        assert await mock_store.count_memories(room_id, "facts") == 4
        assert '"unique" = TRUE' in mock_store.conn.fetchval.call_args[0][0]

        await mock_store.count_memories(room_id, "facts", unique=False)
        assert '"unique"' not in mock_store.conn.fetchval.call_args[0][0]


class TestDatabaseSchema:

    def test_schema_uses_dimension(self):
        schema = DatabaseSchema("postgresql://localhost/test", dimension=384)

        assert "vector(384)" in schema.schema_sql
        assert "fuzzystrmatch" in schema.schema_sql
        assert '{"text"' in schema.schema_sql

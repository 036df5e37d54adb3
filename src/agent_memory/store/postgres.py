"""
PostgreSQL Memory Store

asyncpg + pgvector implementation of MemoryStore. All partitions share the
`memories` table; the partition name is kept in its `type` column.
"""

import json
import logging
from typing import Any, Iterable, List, Optional
from uuid import UUID

import asyncpg

from agent_memory.models.memory import Content, Memory
from agent_memory.models.retrieval import CachedEmbedding
from agent_memory.store.base import MemoryStore

logger = logging.getLogger("agent_memory.store")

# Columns that may be named in a cached-embedding lookup
_QUERY_FIELDS = {"content"}

# fuzzystrmatch's levenshtein() rejects longer arguments
_LEVENSHTEIN_MAX_CHARS = 255


def _decode_json(value: Any) -> Any:
    """jsonb and vector columns arrive as text without registered codecs."""
    if isinstance(value, str):
        return json.loads(value)
    return value


class PostgresMemoryStore(MemoryStore):
    """
    Memory store backed by PostgreSQL.
    
    Provides:
    - Idempotent inserts keyed by memory id
    - Room-scoped reads, counts and deletes per partition
    - Vector similarity search (cosine, HNSW index)
    - Levenshtein lookup of cached embeddings
    """
    
    def __init__(
        self,
        connection_string: str = None,
        min_pool_size: int = 2,
        max_pool_size: int = 10,
        duplicate_similarity_threshold: float = 0.95,
    ):
        self.connection_string = connection_string or "postgresql://127.0.0.1/agent_memory"
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.duplicate_similarity_threshold = duplicate_similarity_threshold
        self._pool: Optional[asyncpg.Pool] = None
    
    async def connect(self) -> None:
        """Initialize connection pool."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            self.connection_string,
            min_size=self.min_pool_size,
            max_size=self.max_pool_size,
        )
    
    async def disconnect(self) -> None:
        """Close connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    @staticmethod
    def _row_to_memory(row) -> Memory:
        created_at = row["created_at"]
        embedding = _decode_json(row["embedding"])
        return Memory(
            id=row["id"],
            agent_id=row["agent_id"],
            user_id=row["user_id"],
            room_id=row["room_id"],
            content=Content.model_validate(_decode_json(row["content"]) or {}),
            embedding=list(embedding) if embedding is not None else None,
            created_at=int(created_at.timestamp() * 1000) if created_at else None,
            similarity=row.get("similarity"),
        )
    
    # ========== Memory Operations ==========
    
    async def get_memory_by_id(self, memory_id: UUID) -> Optional[Memory]:
        """Get a memory by ID."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM memories WHERE id = $1",
                memory_id,
            )
            if row:
                return self._row_to_memory(row)
        return None
    
    async def create_memory(
        self,
        memory: Memory,
        table_name: str,
        unique: bool = False,
    ) -> None:
        """
        Insert a memory; an existing id is left untouched.
        
        With unique=True a near-identical memory in the same room marks
        the new one as not unique.
        """
        is_unique = True
        if unique and memory.embedding:
            similar = await self.search_memories(
                table_name=table_name,
                room_id=memory.room_id,
                embedding=memory.embedding,
                match_threshold=self.duplicate_similarity_threshold,
                count=1,
                unique=False,
            )
            is_unique = not similar
        
        content = memory.content.model_dump(mode="json", exclude_none=True)
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                """
                INSERT INTO memories
                (id, type, content, embedding, user_id, agent_id, room_id, "unique", created_at)
                VALUES ($1, $2, $3, $4::vector, $5, $6, $7, $8,
                        COALESCE(to_timestamp($9::double precision / 1000), NOW()))
                ON CONFLICT (id) DO NOTHING
                """,
                memory.id,
                table_name,
                json.dumps(content),
                str(memory.embedding) if memory.embedding else None,
                memory.user_id,
                memory.agent_id,
                memory.room_id,
                is_unique,
                memory.created_at,
            )
        if result == "INSERT 0 0":
            logger.debug(f"Memory {memory.id} already stored, insert skipped")
        else:
            logger.debug(f"Stored memory {memory.id} in {table_name} (unique={is_unique})")
    
    async def get_memories(
        self,
        room_id: UUID,
        table_name: str,
        count: Optional[int] = None,
        unique: bool = False,
        start: Optional[int] = None,
        end: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        """Get memories of a room, newest first."""
        where_clauses = ["type = $1", "room_id = $2"]
        params: List[Any] = [table_name, room_id]
        
        if unique:
            where_clauses.append('"unique" = TRUE')
        
        if agent_id is not None:
            params.append(agent_id)
            where_clauses.append(f"agent_id = ${len(params)}")
        
        if start is not None:
            params.append(start)
            where_clauses.append(f"created_at >= to_timestamp(${len(params)}::double precision / 1000)")
        
        if end is not None:
            params.append(end)
            where_clauses.append(f"created_at <= to_timestamp(${len(params)}::double precision / 1000)")
        
        sql = f"""
            SELECT * FROM memories
            WHERE {" AND ".join(where_clauses)}
            ORDER BY created_at DESC
        """
        if count is not None:
            params.append(count)
            sql += f" LIMIT ${len(params)}"
        
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(sql, *params)
            return [self._row_to_memory(row) for row in rows]
    
    async def get_memories_by_room_ids(
        self,
        room_ids: Iterable[UUID],
        table_name: str,
        limit: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        """Get memories across several rooms, newest first."""
        where_clauses = ["type = $1", "room_id = ANY($2::uuid[])"]
        params: List[Any] = [table_name, list(room_ids)]
        
        if agent_id is not None:
            params.append(agent_id)
            where_clauses.append(f"agent_id = ${len(params)}")
        
        sql = f"""
            SELECT * FROM memories
            WHERE {" AND ".join(where_clauses)}
            ORDER BY created_at DESC
        """
        if limit is not None:
            params.append(limit)
            sql += f" LIMIT ${len(params)}"
        
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(sql, *params)
            return [self._row_to_memory(row) for row in rows]
    
    # ========== Search Operations ==========
    
    async def search_memories(
        self,
        table_name: str,
        room_id: UUID,
        embedding: List[float],
        match_threshold: float,
        count: int,
        unique: bool,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        """
        Search memories of a room by vector similarity.
        
        Uses cosine similarity with pgvector's HNSW index.
        """
        where_clauses = [
            "type = $2",
            "room_id = $3",
            "1 - (embedding <=> $1::vector) >= $4",
        ]
        params: List[Any] = [str(embedding), table_name, room_id, match_threshold]
        
        if unique:
            where_clauses.append('"unique" = TRUE')
        
        if agent_id is not None:
            params.append(agent_id)
            where_clauses.append(f"agent_id = ${len(params)}")
        
        params.append(count)
        sql = f"""
            SELECT *, 1 - (embedding <=> $1::vector) AS similarity
            FROM memories
            WHERE {" AND ".join(where_clauses)}
            ORDER BY embedding <=> $1::vector
            LIMIT ${len(params)}
        """
        
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(sql, *params)
            return [self._row_to_memory(row) for row in rows]
    
    async def get_cached_embeddings(
        self,
        query_table_name: str,
        query_threshold: int,
        query_input: str,
        query_field_name: str,
        query_field_sub_name: str,
        query_match_count: int,
    ) -> List[CachedEmbedding]:
        """Find embeddings stored for text within a Levenshtein distance of the input."""
        if query_field_name not in _QUERY_FIELDS:
            raise ValueError(f"Unsupported query field: {query_field_name}")
        
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                WITH content_text AS (
                    SELECT embedding,
                           LEFT({query_field_name}->>$3, {_LEVENSHTEIN_MAX_CHARS}) AS content_text
                    FROM memories
                    WHERE type = $2
                      AND embedding IS NOT NULL
                      AND {query_field_name}->>$3 IS NOT NULL
                )
                SELECT embedding, levenshtein(LEFT($1, {_LEVENSHTEIN_MAX_CHARS}), content_text) AS levenshtein_score
                FROM content_text
                WHERE levenshtein(LEFT($1, {_LEVENSHTEIN_MAX_CHARS}), content_text) <= $4
                ORDER BY levenshtein_score
                LIMIT $5
                """,
                query_input,
                query_table_name,
                query_field_sub_name,
                query_threshold,
                query_match_count,
            )
            return [
                CachedEmbedding(
                    embedding=_decode_json(row["embedding"]),
                    levenshtein_score=row["levenshtein_score"],
                )
                for row in rows
            ]
    
    # ========== Removal & Counting ==========
    
    async def remove_memory(self, memory_id: UUID, table_name: str) -> None:
        """Remove a memory from a partition."""
        async with self._pool.acquire() as conn:
            await conn.execute(
                "DELETE FROM memories WHERE id = $1 AND type = $2",
                memory_id,
                table_name,
            )
    
    async def remove_all_memories(self, room_id: UUID, table_name: str) -> None:
        """Remove every memory of a room from a partition."""
        async with self._pool.acquire() as conn:
            await conn.execute(
                "DELETE FROM memories WHERE room_id = $1 AND type = $2",
                room_id,
                table_name,
            )
    
    async def count_memories(
        self,
        room_id: UUID,
        table_name: str,
        unique: bool = True,
    ) -> int:
        """Count memories of a room in a partition."""
        sql = "SELECT COUNT(*) FROM memories WHERE room_id = $1 AND type = $2"
        if unique:
            sql += ' AND "unique" = TRUE'
        async with self._pool.acquire() as conn:
            return await conn.fetchval(sql, room_id, table_name) or 0

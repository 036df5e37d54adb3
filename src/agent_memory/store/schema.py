"""
Database Schema

Defines and creates the PostgreSQL schema with the pgvector and
fuzzystrmatch extensions.
"""

import asyncpg

# {dimension} is the embedding vector size
SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS vector;
CREATE EXTENSION IF NOT EXISTS fuzzystrmatch;

CREATE TABLE IF NOT EXISTS memories (
    id UUID PRIMARY KEY,
    type TEXT NOT NULL,                         -- Partition: knowledge, messages, facts, ...
    created_at TIMESTAMPTZ DEFAULT NOW(),
    content JSONB NOT NULL,                     -- {{"text": ..., "metadata": {{...}}}}
    embedding vector({dimension}),
    user_id UUID,
    agent_id UUID,                              -- NULL for shared memories
    room_id UUID NOT NULL,
    "unique" BOOLEAN DEFAULT TRUE NOT NULL      -- FALSE when a near-duplicate existed at insert
);

CREATE INDEX IF NOT EXISTS idx_memories_embedding
    ON memories USING hnsw (embedding vector_cosine_ops);
CREATE INDEX IF NOT EXISTS idx_memories_type_room
    ON memories(type, room_id);
CREATE INDEX IF NOT EXISTS idx_memories_agent
    ON memories(agent_id);
CREATE INDEX IF NOT EXISTS idx_memories_created_at
    ON memories(created_at DESC);
CREATE INDEX IF NOT EXISTS idx_memories_metadata_type
    ON memories((content->'metadata'->>'type'));
"""


class DatabaseSchema:
    """
    Manages PostgreSQL database schema creation.
    """
    
    def __init__(self, connection_string: str = None, dimension: int = 1536):
        """
        Initialize schema manager.
        
        Args:
            connection_string: PostgreSQL connection string.
                             Defaults to local 'agent_memory' database.
            dimension: Embedding vector size for the memories table
        """
        self.connection_string = connection_string or "postgresql://localhost/agent_memory"
        self.dimension = dimension
        self._initialized = False

    @property
    def schema_sql(self) -> str:
        return SCHEMA_SQL.format(dimension=self.dimension)
    
    async def initialize(self) -> None:
        """
        Create the table and indexes if they don't exist.
        """
        if self._initialized:
            return
        
        conn = await asyncpg.connect(self.connection_string)
        try:
            await conn.execute(self.schema_sql)
        finally:
            await conn.close()
        
        self._initialized = True
    
    async def drop_all(self) -> None:
        """
        Drop the memories table. USE WITH CAUTION - this destroys all data.
        """
        conn = await asyncpg.connect(self.connection_string)
        try:
            await conn.execute("DROP TABLE IF EXISTS memories CASCADE;")
        finally:
            await conn.close()
        self._initialized = False
    
    async def get_stats(self) -> dict:
        """
        Get database statistics: memory counts per partition and DB size.
        """
        conn = await asyncpg.connect(self.connection_string)
        try:
            rows = await conn.fetch("SELECT type, COUNT(*) AS count FROM memories GROUP BY type ORDER BY type")
            return {
                "memories": {row["type"]: row["count"] for row in rows},
                "db_size": await conn.fetchval("SELECT pg_size_pretty(pg_database_size(current_database()))"),
                "connected": True,
            }
        finally:
            await conn.close()

"""
Agent Runtime

Binds an agent identity to the store and embedder its memory managers use.
"""

import logging
from typing import Dict, Optional
from uuid import UUID

from agent_memory.config import MemoryConfig, load_config
from agent_memory.embedding.client import EmbeddingClient
from agent_memory.engine.memory_manager import MemoryManager
from agent_memory.models.memory import MemoryType
from agent_memory.store.base import MemoryStore
from agent_memory.store.postgres import PostgresMemoryStore
from agent_memory.store.schema import DatabaseSchema

logger = logging.getLogger("agent_memory.runtime")


class AgentRuntime:
    """
    Runtime of a single agent.
    
    Usage:
        runtime = AgentRuntime.from_config(agent_id)
        await runtime.initialize()
        
        knowledge = runtime.get_memory_manager("knowledge")
        await knowledge.create_memory(memory)
        
        await runtime.close()
    """
    
    def __init__(
        self,
        agent_id: UUID,
        store: MemoryStore,
        embedder: EmbeddingClient,
        config: Optional[MemoryConfig] = None,
        schema: Optional[DatabaseSchema] = None,
    ):
        self.agent_id = agent_id
        self.store = store
        self.embedder = embedder
        self.config = config or MemoryConfig()
        self.schema = schema
        self._managers: Dict[str, MemoryManager] = {}
    
    @classmethod
    def from_config(
        cls,
        agent_id: UUID,
        config: Optional[MemoryConfig] = None,
    ) -> "AgentRuntime":
        """
        Build a runtime on PostgreSQL and the configured embedding provider.
        
        Args:
            agent_id: Identity of the agent owning private memories
            config: Configuration object. Loaded from memory_config.yaml if not provided.
        """
        config = config or load_config()
        connection_string = config.database.connection_string
        
        store = PostgresMemoryStore(
            connection_string,
            min_pool_size=config.database.min_pool_size,
            max_pool_size=config.database.max_pool_size,
            duplicate_similarity_threshold=config.manager.duplicate_similarity_threshold,
        )
        embedder = EmbeddingClient(
            provider_name=config.embedding.provider,
            api_key=config.embedding.api_key,
            base_url=config.embedding.base_url,
            model=config.embedding.model,
            dimension=config.embedding.dimension,
            enable_embedding_cache=config.embedding.enable_cache,
            max_cache_size=config.embedding.max_cache_size,
        )
        schema = DatabaseSchema(connection_string, dimension=config.embedding.dimension)
        return cls(agent_id, store, embedder, config=config, schema=schema)
    
    async def initialize(self) -> None:
        """Create the database schema and open the store's connections."""
        if self.schema is not None:
            await self.schema.initialize()
        connect = getattr(self.store, "connect", None)
        if connect is not None:
            await connect()
        logger.info(f"Runtime initialized for agent {self.agent_id}")
    
    async def close(self) -> None:
        """Release the store's connections."""
        disconnect = getattr(self.store, "disconnect", None)
        if disconnect is not None:
            await disconnect()
    
    def get_memory_manager(
        self,
        table_name: str,
        default_type: Optional[MemoryType] = None,
    ) -> MemoryManager:
        """
        Get the memory manager of a partition, creating it on first use.
        
        Args:
            table_name: Partition name (knowledge, messages, facts, ...)
            default_type: Type for metadata-less memories; only used when the
                          manager is first created
        """
        manager = self._managers.get(table_name)
        if manager is None:
            manager = MemoryManager(
                self,
                table_name=table_name,
                default_type=default_type,
                config=self.config.manager,
            )
            self._managers[table_name] = manager
        return manager

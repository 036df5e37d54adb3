"""
Memory Manager

Governs the lifecycle of agent memories in one partition:
- Metadata validation and defaulting
- Embedding generation with zero-vector fallback
- Idempotent creation keyed by memory id
- Routing of memory types to partitions
- Room-scoped reads, counts and deletes
"""

import logging
import time
from typing import TYPE_CHECKING, Iterable, List, Optional
from uuid import UUID

from agent_memory.config import ManagerConfig
from agent_memory.engine.base import MemoryManagerBase
from agent_memory.errors import EmptyContentError
from agent_memory.models.memory import KnowledgeMetadata, Memory, MemoryScope, MemoryType
from agent_memory.models.retrieval import CachedEmbedding
from agent_memory.models.validation import validate_metadata

if TYPE_CHECKING:
    from agent_memory.engine.runtime import AgentRuntime

logger = logging.getLogger("agent_memory.manager")

KNOWLEDGE_TABLE = "knowledge"
MESSAGES_TABLE = "messages"
FACTS_TABLE = "facts"

TABLE_FOR_TYPE = {
    MemoryType.DOCUMENT: KNOWLEDGE_TABLE,
    MemoryType.FRAGMENT: KNOWLEDGE_TABLE,
    MemoryType.MESSAGE: MESSAGES_TABLE,
    MemoryType.FACT: FACTS_TABLE,
}


def default_type_for_table(table_name: str) -> MemoryType:
    """Memory type given to metadata-less memories created in a partition."""
    return MemoryType.DOCUMENT if table_name == KNOWLEDGE_TABLE else MemoryType.MESSAGE


def _now_ms() -> int:
    return int(time.time() * 1000)


class MemoryManager(MemoryManagerBase):
    """
    Manage memories of one partition through the runtime's store and embedder.
    
    The manager holds no state besides its configuration, so one instance
    can serve concurrent calls.
    
    Usage:
        manager = MemoryManager(runtime, table_name="knowledge")
        await manager.create_memory(Memory(room_id=room_id, content=Content(text="...")))
        memories = await manager.get_memories(room_id, count=10)
    """
    
    def __init__(
        self,
        runtime: "AgentRuntime",
        table_name: str,
        default_type: Optional[MemoryType] = None,
        config: Optional[ManagerConfig] = None,
    ):
        """
        Args:
            runtime: Provides agent_id, store and embedder
            table_name: Partition this manager reads, counts and deletes in
            default_type: Type of memories created without metadata;
                          derived from table_name when not given
            config: Search and cached-embedding defaults
        """
        self.runtime = runtime
        self.table_name = table_name
        self.default_type = MemoryType(default_type) if default_type else default_type_for_table(table_name)
        self.config = config or ManagerConfig()
    
    def get_table_name_for_type(self, memory_type: Optional[str]) -> str:
        """Partition a memory of the given type is stored in."""
        try:
            return TABLE_FOR_TYPE[MemoryType(memory_type)]
        except (KeyError, ValueError):
            return self.table_name
    
    async def add_embedding_to_memory(self, memory: Memory) -> Memory:
        """
        Add an embedding to a memory unless it already has one.
        
        The embedding is generated from the memory's text. If the embedder
        fails or returns an empty vector, the memory gets the embedder's
        fallback (zero) vector instead.
        
        Args:
            memory: The memory to embed; updated in place
            
        Returns:
            The same memory, carrying an embedding
            
        Raises:
            EmptyContentError: If the memory has no text
        """
        if memory.embedding:
            return memory
        
        text = memory.content.text
        if not text:
            raise EmptyContentError("Cannot generate embedding: Memory content is empty")
        
        embedder = self.runtime.embedder
        try:
            embedding = await embedder.generate_embedding(text)
        except Exception as e:
            logger.error(f"Failed to generate embedding for memory {memory.id}: {e}")
            embedding = None

        if not embedding:
            if embedding is not None:
                logger.error(f"Embedder returned an empty vector for memory {memory.id}")
            embedding = embedder.fallback_vector()

        memory.embedding = embedding
        return memory
    
    def _default_metadata(self, memory: Memory) -> KnowledgeMetadata:
        return KnowledgeMetadata(
            type=self.default_type,
            source=self.table_name,
            scope=self._default_scope(memory),
            timestamp=_now_ms(),
        )
    
    @staticmethod
    def _default_scope(memory: Memory) -> MemoryScope:
        return MemoryScope.PRIVATE if memory.agent_id else MemoryScope.SHARED
    
    async def create_memory(self, memory: Memory, unique: bool = False) -> None:
        """
        Create a memory, routed to the partition of its metadata type.
        
        A memory whose id is already stored is skipped without error.
        Missing metadata, and missing timestamp/scope/source fields of given
        metadata, are filled with defaults; explicit values are kept.
        
        Args:
            memory: The memory to store; metadata and embedding are set in place
            unique: Ask the store to flag near-duplicates in the same room
            
        Raises:
            ValidationError: If the metadata is malformed
            EmptyContentError: If the memory has neither text nor embedding
        """
        store = self.runtime.store
        existing = await store.get_memory_by_id(memory.id)
        if existing:
            logger.debug(f"Memory {memory.id} already exists, skipping")
            return
        
        if memory.content.metadata is None:
            metadata = self._default_metadata(memory)
        else:
            metadata = validate_metadata(memory.content.metadata)
            if metadata.timestamp is None:
                metadata.timestamp = _now_ms()
            if metadata.scope is None:
                metadata.scope = self._default_scope(memory).value
            if not metadata.source:
                metadata.source = self.table_name

        await self.add_embedding_to_memory(memory)
        memory.content.metadata = metadata

        table_name = self.get_table_name_for_type(metadata.type)
        logger.info(f"Creating memory {memory.id} in {table_name}: {(memory.content.text or '')[:50]}")
        
        await store.create_memory(memory, table_name=table_name, unique=unique)
    
    async def get_memories(
        self,
        room_id: UUID,
        count: Optional[int] = None,
        unique: bool = False,
        start: Optional[int] = None,
        end: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        """
        Get memories of a room in this partition, newest first.
        
        Args:
            room_id: Room to read
            count: Maximum number of memories
            unique: Only memories stored as unique
            start: Only memories created at or after this epoch-ms time
            end: Only memories created at or before this epoch-ms time
            agent_id: Only memories owned by this agent
        """
        return await self.runtime.store.get_memories(
            room_id=room_id,
            table_name=self.table_name,
            count=count,
            unique=unique,
            start=start,
            end=end,
            agent_id=agent_id,
        )
    
    async def get_memories_by_room_ids(
        self,
        room_ids: Iterable[UUID],
        limit: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        """Get memories of several rooms in this partition."""
        return await self.runtime.store.get_memories_by_room_ids(
            room_ids=list(room_ids),
            table_name=self.table_name,
            limit=limit,
            agent_id=agent_id,
        )
    
    async def search_memories(
        self,
        embedding: List[float],
        room_id: UUID,
        match_threshold: Optional[float] = None,
        count: Optional[int] = None,
        agent_id: Optional[UUID] = None,
        unique: bool = True,
    ) -> List[Memory]:
        """
        Search memories of a room similar to an embedding vector.
        
        Args:
            embedding: Query vector
            room_id: Room to search
            match_threshold: Minimum cosine similarity (default 0.1)
            count: Maximum number of memories (default 10)
            agent_id: Only memories owned by this agent
            unique: Only memories stored as unique
        """
        return await self.runtime.store.search_memories(
            table_name=self.table_name,
            room_id=room_id,
            embedding=embedding,
            match_threshold=self.config.match_threshold if match_threshold is None else match_threshold,
            count=self.config.match_count if count is None else count,
            unique=unique,
            agent_id=agent_id,
        )
    
    async def get_cached_embeddings(self, content: str) -> List[CachedEmbedding]:
        """Get embeddings already stored for text close to `content`."""
        return await self.runtime.store.get_cached_embeddings(
            query_table_name=self.table_name,
            query_threshold=self.config.cached_embedding_threshold,
            query_input=content,
            query_field_name="content",
            query_field_sub_name="text",
            query_match_count=self.config.cached_embedding_match_count,
        )
    
    async def get_memory_by_id(self, memory_id: UUID) -> Optional[Memory]:
        """
        Get a memory by id, only if it belongs to this runtime's agent.
        
        Records of other agents (and shared records) are reported as
        not found.
        """
        result = await self.runtime.store.get_memory_by_id(memory_id)
        if result and result.agent_id != self.runtime.agent_id:
            return None
        return result
    
    async def remove_memory(self, memory_id: UUID) -> None:
        await self.runtime.store.remove_memory(memory_id, table_name=self.table_name)
    
    async def remove_all_memories(self, room_id: UUID) -> None:
        await self.runtime.store.remove_all_memories(room_id, table_name=self.table_name)
    
    async def count_memories(self, room_id: UUID, unique: bool = True) -> int:
        return await self.runtime.store.count_memories(
            room_id,
            table_name=self.table_name,
            unique=unique,
        )

"""
Memory Manager - Abstract Base Class

Defines the operations a memory manager exposes to agents.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from agent_memory.models.memory import Memory
from agent_memory.models.retrieval import CachedEmbedding


class MemoryManagerBase(ABC):
    """
    Abstract Base Class for a memory manager bound to one partition.
    
    Lifecycle of a memory:
    1. create_memory() - validate, default metadata, embed, route, persist
    2. get_memories() / search_memories() / get_memory_by_id() - read
    3. remove_memory() / remove_all_memories() - delete
    
    Memories are never updated in place.
    """
    
    @abstractmethod
    async def add_embedding_to_memory(self, memory: Memory) -> Memory:
        """
        Ensure the memory carries an embedding.
        
        Raises:
            EmptyContentError: If an embedding is needed and the memory has no text
        """
        pass
    
    @abstractmethod
    async def create_memory(self, memory: Memory, unique: bool = False) -> None:
        """
        Persist a new memory. Creating an id that already exists is a no-op.
        
        Raises:
            ValidationError: If the metadata is malformed
            EmptyContentError: If the memory has neither text nor embedding
        """
        pass
    
    @abstractmethod
    async def get_memories(
        self,
        room_id: UUID,
        count: Optional[int] = None,
        unique: bool = False,
        start: Optional[int] = None,
        end: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        pass
    
    @abstractmethod
    async def get_memories_by_room_ids(
        self,
        room_ids: Iterable[UUID],
        limit: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        pass
    
    @abstractmethod
    async def search_memories(
        self,
        embedding: List[float],
        room_id: UUID,
        match_threshold: Optional[float] = None,
        count: Optional[int] = None,
        agent_id: Optional[UUID] = None,
        unique: bool = True,
    ) -> List[Memory]:
        pass
    
    @abstractmethod
    async def get_cached_embeddings(self, content: str) -> List[CachedEmbedding]:
        pass
    
    @abstractmethod
    async def get_memory_by_id(self, memory_id: UUID) -> Optional[Memory]:
        pass
    
    @abstractmethod
    async def remove_memory(self, memory_id: UUID) -> None:
        pass
    
    @abstractmethod
    async def remove_all_memories(self, room_id: UUID) -> None:
        pass
    
    @abstractmethod
    async def count_memories(self, room_id: UUID, unique: bool = True) -> int:
        pass

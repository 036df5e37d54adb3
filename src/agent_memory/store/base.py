"""
Memory Store - Abstract Base Class

Persistence capability used by the memory manager. A "table" is a logical
partition (knowledge, messages, facts, ...), not necessarily a physical
database table.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from uuid import UUID

from agent_memory.models.memory import Memory
from agent_memory.models.retrieval import CachedEmbedding


class MemoryStore(ABC):
    """
    Abstract Base Class for memory persistence.
    
    Implementations must enforce uniqueness of memory ids: inserting a
    memory whose id already exists is a no-op, never an overwrite.
    """
    
    @abstractmethod
    async def get_memory_by_id(self, memory_id: UUID) -> Optional[Memory]:
        """Get a memory by ID, in any partition."""
        pass
    
    @abstractmethod
    async def create_memory(
        self,
        memory: Memory,
        table_name: str,
        unique: bool = False,
    ) -> None:
        """
        Insert a memory into a partition.
        
        Args:
            memory: Memory carrying an embedding
            table_name: Target partition
            unique: Check for a near-identical memory in the same room first;
                    if one exists the new memory is stored as not unique
        """
        pass
    
    @abstractmethod
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
        """
        Get memories of a room, newest first.
        
        Args:
            start: Only memories created at or after this epoch-ms time
            end: Only memories created at or before this epoch-ms time
        """
        pass
    
    @abstractmethod
    async def get_memories_by_room_ids(
        self,
        room_ids: Iterable[UUID],
        table_name: str,
        limit: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        """Get memories across several rooms, newest first."""
        pass
    
    @abstractmethod
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
        """Get memories of a room by cosine similarity to an embedding."""
        pass
    
    @abstractmethod
    async def get_cached_embeddings(
        self,
        query_table_name: str,
        query_threshold: int,
        query_input: str,
        query_field_name: str,
        query_field_sub_name: str,
        query_match_count: int,
    ) -> List[CachedEmbedding]:
        """
        Get stored embeddings whose text is within a Levenshtein distance
        of the query input, closest first.
        """
        pass
    
    @abstractmethod
    async def remove_memory(self, memory_id: UUID, table_name: str) -> None:
        """Remove a memory from a partition."""
        pass
    
    @abstractmethod
    async def remove_all_memories(self, room_id: UUID, table_name: str) -> None:
        """Remove every memory of a room from a partition."""
        pass
    
    @abstractmethod
    async def count_memories(
        self,
        room_id: UUID,
        table_name: str,
        unique: bool = True,
    ) -> int:
        """Count memories of a room in a partition."""
        pass

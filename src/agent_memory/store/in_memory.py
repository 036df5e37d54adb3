"""
In-Memory Store

Process-local MemoryStore for tests and local runs. Mirrors the
semantics of PostgresMemoryStore without a database.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from agent_memory.models.memory import Memory
from agent_memory.models.retrieval import CachedEmbedding
from agent_memory.store.base import MemoryStore

logger = logging.getLogger("agent_memory.store")


def cosine_similarity(a: List[float], b: List[float]) -> float:
    """
    Calculate cosine similarity between two vectors.
    
    Zero vectors have similarity 0.0 with everything.
    """
    if len(a) != len(b):
        raise ValueError(f"Vectors must have same length: {len(a)} vs {len(b)}")
    
    if len(a) == 0:
        return 0.0
    
    dot_product = sum(x * y for x, y in zip(a, b))
    norm_a = sum(x * x for x in a) ** 0.5
    norm_b = sum(x * x for x in b) ** 0.5
    
    if norm_a == 0 or norm_b == 0:
        return 0.0
    
    return dot_product / (norm_a * norm_b)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if not s1 or not s2:
        return max(len(s1), len(s2))
    
    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    
    return previous[-1]


@dataclass
class _StoredMemory:
    table_name: str
    memory: Memory
    unique: bool


class InMemoryStore(MemoryStore):
    """Memory store holding records in a dict keyed by memory id."""
    
    def __init__(self, duplicate_similarity_threshold: float = 0.95):
        self.duplicate_similarity_threshold = duplicate_similarity_threshold
        self._records: Dict[UUID, _StoredMemory] = {}
    
    def __len__(self) -> int:
        return len(self._records)
    
    def _select(
        self,
        table_name: str,
        room_ids: Optional[set] = None,
        unique: bool = False,
        agent_id: Optional[UUID] = None,
    ) -> List[_StoredMemory]:
        records = [
            record for record in self._records.values()
            if record.table_name == table_name
            and (room_ids is None or record.memory.room_id in room_ids)
            and (not unique or record.unique)
            and (agent_id is None or record.memory.agent_id == agent_id)
        ]
        records.sort(key=lambda record: record.memory.created_at or 0, reverse=True)
        return records
    
    async def get_memory_by_id(self, memory_id: UUID) -> Optional[Memory]:
        record = self._records.get(memory_id)
        return record.memory.model_copy(deep=True) if record else None
    
    async def create_memory(
        self,
        memory: Memory,
        table_name: str,
        unique: bool = False,
    ) -> None:
        if memory.id in self._records:
            logger.debug(f"Memory {memory.id} already stored, insert skipped")
            return
        
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
        
        stored = memory.model_copy(deep=True)
        if stored.created_at is None:
            stored.created_at = int(time.time() * 1000)
        # Insert-if-absent: a concurrent create may have landed during the await
        self._records.setdefault(memory.id, _StoredMemory(table_name, stored, is_unique))
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
        memories = [
            record.memory.model_copy(deep=True)
            for record in self._select(table_name, {room_id}, unique, agent_id)
            if (start is None or (record.memory.created_at or 0) >= start)
            and (end is None or (record.memory.created_at or 0) <= end)
        ]
        return memories[:count] if count is not None else memories
    
    async def get_memories_by_room_ids(
        self,
        room_ids: Iterable[UUID],
        table_name: str,
        limit: Optional[int] = None,
        agent_id: Optional[UUID] = None,
    ) -> List[Memory]:
        memories = [
            record.memory.model_copy(deep=True)
            for record in self._select(table_name, set(room_ids), agent_id=agent_id)
        ]
        return memories[:limit] if limit is not None else memories
    
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
        scored = []
        for record in self._select(table_name, {room_id}, unique, agent_id):
            if not record.memory.embedding or len(record.memory.embedding) != len(embedding):
                continue
            similarity = cosine_similarity(embedding, record.memory.embedding)
            if similarity >= match_threshold:
                scored.append((similarity, record.memory))
        
        scored.sort(key=lambda pair: pair[0], reverse=True)
        results = []
        for similarity, memory in scored[:count]:
            match = memory.model_copy(deep=True)
            match.similarity = similarity
            results.append(match)
        return results
    
    async def get_cached_embeddings(
        self,
        query_table_name: str,
        query_threshold: int,
        query_input: str,
        query_field_name: str,
        query_field_sub_name: str,
        query_match_count: int,
    ) -> List[CachedEmbedding]:
        if query_field_name != "content":
            raise ValueError(f"Unsupported query field: {query_field_name}")
        
        matches = []
        for record in self._select(query_table_name):
            text = getattr(record.memory.content, query_field_sub_name, None)
            if not isinstance(text, str) or not record.memory.embedding:
                continue
            score = levenshtein_distance(query_input, text)
            if score <= query_threshold:
                matches.append(CachedEmbedding(embedding=list(record.memory.embedding), levenshtein_score=score))
        
        matches.sort(key=lambda match: match.levenshtein_score)
        return matches[:query_match_count]
    
    async def remove_memory(self, memory_id: UUID, table_name: str) -> None:
        record = self._records.get(memory_id)
        if record and record.table_name == table_name:
            del self._records[memory_id]
    
    async def remove_all_memories(self, room_id: UUID, table_name: str) -> None:
        for record in self._select(table_name, {room_id}):
            del self._records[record.memory.id]
    
    async def count_memories(
        self,
        room_id: UUID,
        table_name: str,
        unique: bool = True,
    ) -> int:
        return len(self._select(table_name, {room_id}, unique))

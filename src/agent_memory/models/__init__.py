"""Data models package."""

from agent_memory.models.memory import Content, KnowledgeMetadata, Memory, MemoryScope, MemoryType
from agent_memory.models.retrieval import CachedEmbedding
from agent_memory.models.validation import validate_metadata

__all__ = [
    "CachedEmbedding",
    "Content",
    "KnowledgeMetadata",
    "Memory",
    "MemoryScope",
    "MemoryType",
    "validate_metadata",
]

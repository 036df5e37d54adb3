"""
Agent Memory

Lifecycle management for agent memories: validation, metadata defaults,
embedding, idempotent creation, partition routing and room-scoped retrieval.
"""

from agent_memory.engine.memory_manager import MemoryManager
from agent_memory.engine.runtime import AgentRuntime
from agent_memory.errors import EmptyContentError, MemoryManagerError, ValidationError
from agent_memory.models.memory import Content, KnowledgeMetadata, Memory, MemoryScope, MemoryType

__version__ = "0.1.0"
__all__ = [
    "AgentRuntime",
    "Content",
    "EmptyContentError",
    "KnowledgeMetadata",
    "Memory",
    "MemoryManager",
    "MemoryManagerError",
    "MemoryScope",
    "MemoryType",
    "ValidationError",
]

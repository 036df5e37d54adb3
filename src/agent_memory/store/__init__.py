"""Store package - persistence backends for memories."""

from agent_memory.store.base import MemoryStore
from agent_memory.store.in_memory import InMemoryStore
from agent_memory.store.postgres import PostgresMemoryStore
from agent_memory.store.schema import DatabaseSchema

__all__ = ["DatabaseSchema", "InMemoryStore", "MemoryStore", "PostgresMemoryStore"]

"""Engine package - memory manager and agent runtime."""

from agent_memory.engine.base import MemoryManagerBase
from agent_memory.engine.memory_manager import MemoryManager
from agent_memory.engine.runtime import AgentRuntime

__all__ = ["AgentRuntime", "MemoryManager", "MemoryManagerBase"]

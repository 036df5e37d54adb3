"""
Example: Creating and retrieving memories with the memory manager.

Uses the in-memory store so no database is needed; embeddings come
from OpenAI (set OPENAI_API_KEY). If embedding fails the memory is
still stored with a zero vector.
"""

import asyncio
from uuid import uuid4

from agent_memory import AgentRuntime, Content, Memory
from agent_memory.embedding import EmbeddingClient
from agent_memory.store import InMemoryStore


async def main():
    agent_id = uuid4()
    room_id = uuid4()
    runtime = AgentRuntime(agent_id, InMemoryStore(), EmbeddingClient(provider_name="openai"))
    
    knowledge = runtime.get_memory_manager("knowledge")
    facts = runtime.get_memory_manager("facts")
    
    print("=== Knowledge ===\n")
    memory = Memory(agent_id=agent_id, room_id=room_id, content=Content(text="User prefers Python"))
    await knowledge.create_memory(memory)
    print(f"Metadata: {memory.content.metadata.model_dump(exclude_none=True)}")
    print(f"Stored: {await knowledge.count_memories(room_id)} memory")
    
    # Same id again: skipped
    await knowledge.create_memory(memory)
    print(f"After duplicate create: {await knowledge.count_memories(room_id)} memory")
    
    print("\n=== Facts ===\n")
    fact = Memory(
        agent_id=agent_id,
        room_id=room_id,
        content=Content(text="User lives in Seoul", metadata={"type": "fact", "tags": ["location"]}),
    )
    await knowledge.create_memory(fact)  # routed by type, not by manager
    print(f"Facts in room: {await facts.count_memories(room_id)}")
    
    print("\n=== Search ===\n")
    results = await knowledge.search_memories(memory.embedding, room_id=room_id)
    for result in results:
        print(f"{result.similarity:.3f}  {result.content.text}")


if __name__ == "__main__":
    asyncio.run(main())

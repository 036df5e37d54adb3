"""
Create the memories schema in the configured PostgreSQL database
and print its statistics.

Usage:
    python scripts/init_db.py [path/to/memory_config.yaml]
"""

import asyncio
import sys
from pathlib import Path

from agent_memory.config import load_config
from agent_memory.store.schema import DatabaseSchema


async def main():
    config_path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    config = load_config(config_path)
    print(f"Config loaded. DB: {config.database.name}")
    
    schema = DatabaseSchema(
        config.database.connection_string,
        dimension=config.embedding.dimension,
    )
    try:
        await schema.initialize()
        print("Schema initialized.")
        stats = await schema.get_stats()
        print(f"Memories per partition: {stats['memories']}")
        print(f"Database size: {stats['db_size']}")
    except Exception as e:
        print(f"Schema initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())

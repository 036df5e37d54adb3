"""
Configuration

Loads and manages configuration from memory_config.yaml
"""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """Database connection configuration."""
    host: str = "localhost"
    port: int = 5432
    name: str = "agent_memory"
    user: Optional[str] = None
    password: Optional[str] = None
    min_pool_size: int = 2
    max_pool_size: int = 10
    
    @property
    def connection_string(self) -> str:
        """Generate PostgreSQL connection string."""
        if self.user and self.password:
            return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"
        if self.user:
            return f"postgresql://{self.user}@{self.host}:{self.port}/{self.name}"
        return f"postgresql://{self.host}:{self.port}/{self.name}"


class EmbeddingConfig(BaseModel):
    """Embedding provider configuration."""
    provider: str = "openai"
    model: str = "text-embedding-3-small"
    dimension: int = 1536
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    enable_cache: bool = True
    max_cache_size: int = 1000


class ManagerConfig(BaseModel):
    """Defaults applied by the memory manager and the stores."""
    # Similarity search
    match_threshold: float = 0.1
    match_count: int = 10
    
    # Cached-embedding lookup (Levenshtein distance on content text)
    cached_embedding_threshold: int = 2
    cached_embedding_match_count: int = 10
    
    # Store-side near-duplicate check when creating with unique=True
    duplicate_similarity_threshold: float = 0.95


class MemoryConfig(BaseModel):
    """Main configuration model."""
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    manager: ManagerConfig = Field(default_factory=ManagerConfig)


def _parse_database_url(url: str) -> dict:
    """Split a postgresql:// URL into DatabaseConfig fields."""
    parsed = urlparse(url)
    fields = {}
    if parsed.hostname:
        fields["host"] = parsed.hostname
    if parsed.port:
        fields["port"] = parsed.port
    if parsed.path and parsed.path != "/":
        fields["name"] = parsed.path.lstrip("/")
    if parsed.username:
        fields["user"] = parsed.username
    if parsed.password:
        fields["password"] = parsed.password
    return fields


def load_config(config_path: Optional[Path] = None) -> MemoryConfig:
    """
    Load configuration from YAML file.
    
    Falls back to environment variables and defaults.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = Path.cwd() / "agent_memory" / "config" / "memory_config.yaml"
    
    config_data = {}
    
    if config_path.exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}
    
    embedding = config_data.setdefault("embedding", {})
    provider = embedding.get("provider", "openai")
    if provider == "openai" and os.getenv("OPENAI_API_KEY"):
        embedding["api_key"] = os.getenv("OPENAI_API_KEY")
    elif provider == "gemini" and os.getenv("GOOGLE_API_KEY"):
        embedding["api_key"] = os.getenv("GOOGLE_API_KEY")
    
    db_url = os.getenv("DATABASE_URL")
    if db_url and db_url.startswith(("postgresql://", "postgres://")):
        config_data.setdefault("database", {}).update(_parse_database_url(db_url))
    
    return MemoryConfig(**config_data)

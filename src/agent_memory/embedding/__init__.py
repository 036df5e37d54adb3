"""Embedding package - providers and cached client."""

from agent_memory.embedding.base import EmbeddingError, EmbeddingProvider
from agent_memory.embedding.client import EmbeddingClient

__all__ = ["EmbeddingClient", "EmbeddingError", "EmbeddingProvider"]

"""
Embedding Client

The embedder capability used by the memory manager:
- Provider selection (OpenAI, Gemini)
- LRU caching of embeddings by text
- Fallback vector for failed embeddings
"""

import logging
import os
from typing import List, Optional

from agent_memory.embedding.base import EmbeddingProvider
from agent_memory.embedding.openai_provider import OpenAIEmbeddingProvider

logger = logging.getLogger("agent_memory.embedding")


class EmbeddingClient:
    """
    Turns text into embedding vectors through a pluggable provider.
    
    Results are cached per text so that repeated content does not
    trigger another API call.
    """
    
    def __init__(
        self,
        provider: Optional[EmbeddingProvider] = None,
        provider_name: str = "openai",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        dimension: Optional[int] = None,
        enable_embedding_cache: bool = True,
        max_cache_size: int = 1000,
    ):
        self.embedding_provider_name = provider_name
        self._embedding_provider = provider or self._create_embedding_provider(
            provider_name,
            api_key,
            base_url,
            model,
            dimension,
        )
        
        # Embedding cache (LRU)
        self.enable_embedding_cache = enable_embedding_cache
        self.max_cache_size = max_cache_size
        self._embedding_cache: dict[str, List[float]] = {}
        self._cache_order: list[str] = []
        
        self._cache_hits = 0
        self._cache_misses = 0
    
    @staticmethod
    def _create_embedding_provider(
        provider: str,
        api_key: Optional[str],
        base_url: Optional[str],
        model: Optional[str],
        dimension: Optional[int],
    ) -> EmbeddingProvider:
        """
        Factory method to create the appropriate embedding provider.
        
        Args:
            provider: Provider name ("openai" or "gemini")
            api_key: API key for the provider
            base_url: Base URL for OpenAI-compatible APIs
            model: Model name, provider default when None
            dimension: Vector dimension, provider default when None
            
        Returns:
            EmbeddingProvider instance
        """
        if provider == "openai":
            kwargs = {"model": model} if model else {}
            return OpenAIEmbeddingProvider(
                api_key=api_key or os.getenv("OPENAI_API_KEY"),
                base_url=base_url,
                dimension=dimension,
                **kwargs,
            )
        elif provider == "gemini":
            from agent_memory.embedding.gemini_provider import GeminiEmbeddingProvider
            kwargs = {"model": model} if model else {}
            if dimension:
                kwargs["dimension"] = dimension
            return GeminiEmbeddingProvider(
                api_key=api_key or os.getenv("GOOGLE_API_KEY"),
                **kwargs,
            )
        else:
            raise ValueError(
                f"Unknown embedding provider: {provider}. "
                f"Supported providers: openai, gemini"
            )

    @property
    def provider(self) -> EmbeddingProvider:
        return self._embedding_provider

    async def generate_embedding(self, text: str) -> List[float]:
        """
        Generate embedding vector for text with caching.
        
        Raises:
            EmbeddingError: If the provider fails
        """
        embeddings = await self.batch_generate_embeddings([text])
        return embeddings[0]
    
    async def batch_generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for multiple texts in a single API call.
        
        Only texts missing from the cache are sent to the provider.
        
        Args:
            texts: List of text strings to embed
            
        Returns:
            List of embedding vectors in the same order as input texts
        """
        if not texts:
            return []
        
        uncached_texts = []
        uncached_indices = []
        result_embeddings = [None] * len(texts)
        
        for i, text in enumerate(texts):
            if self.enable_embedding_cache and text in self._embedding_cache:
                self._cache_hits += 1
                self._touch_cache(text)
                result_embeddings[i] = self._embedding_cache[text]
            else:
                uncached_texts.append(text)
                uncached_indices.append(i)
        
        if not uncached_texts:
            return result_embeddings
        
        self._cache_misses += len(uncached_texts)
        embeddings_from_api = await self._embedding_provider.batch_embed(uncached_texts)
        logger.debug(f"Embedded {len(uncached_texts)} texts with {self._embedding_provider.get_model_name()}")
        
        for i, embedding in enumerate(embeddings_from_api):
            original_index = uncached_indices[i]
            text = uncached_texts[i]
            
            result_embeddings[original_index] = embedding
            
            if self.enable_embedding_cache and embedding:
                self._add_to_cache(text, embedding)
        
        return result_embeddings

    def fallback_vector(self) -> List[float]:
        """Zero vector used in place of a failed embedding."""
        return self._embedding_provider.fallback_vector()

    def get_embedding_dimension(self) -> int:
        return self._embedding_provider.get_embedding_dimension()
    
    def _touch_cache(self, key: str) -> None:
        """Update LRU order for cache hit."""
        if key in self._cache_order:
            self._cache_order.remove(key)
        self._cache_order.append(key)
    
    def _add_to_cache(self, key: str, value: List[float]) -> None:
        """Add to cache with LRU eviction."""
        if key in self._embedding_cache:
            self._embedding_cache[key] = value
            self._touch_cache(key)
            return

        if len(self._embedding_cache) >= self.max_cache_size:
            if self._cache_order:
                oldest = self._cache_order.pop(0)
                del self._embedding_cache[oldest]
        
        self._embedding_cache[key] = value
        self._cache_order.append(key)
    
    def get_cache_stats(self) -> dict:
        """Get cache hit/miss statistics."""
        total = self._cache_hits + self._cache_misses
        hit_rate = (self._cache_hits / total * 100) if total > 0 else 0
        
        return {
            "hits": self._cache_hits,
            "misses": self._cache_misses,
            "total_requests": total,
            "hit_rate_percent": round(hit_rate, 2),
            "cache_size": len(self._embedding_cache),
            "max_cache_size": self.max_cache_size,
        }
    
    def clear_embedding_cache(self) -> None:
        """Clear the embedding cache."""
        self._embedding_cache.clear()
        self._cache_order.clear()
        self._cache_hits = 0
        self._cache_misses = 0

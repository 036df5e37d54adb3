"""
Google Gemini embedding provider implementation.
"""

import asyncio
from typing import List, Optional

from .base import EmbeddingProvider, EmbeddingError


class GeminiEmbeddingProvider(EmbeddingProvider):
    """
    Google Gemini embedding provider.
    
    Uses asyncio.gather for batch processing since Gemini API
    processes embeddings individually.
    """
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "models/embedding-001",
        dimension: int = 768,
    ):
        """
        Initialize Gemini embedding provider.
        
        Args:
            api_key: Google AI API key (defaults to GOOGLE_API_KEY env var)
            model: Embedding model name (default: models/embedding-001)
            dimension: Vector size produced by the model
        """
        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai package required for Gemini provider. "
                "Install with: pip install agent-memory[gemini]"
            )
        
        self.genai = genai
        if api_key:
            genai.configure(api_key=api_key)
        
        self.model = model
        self._dimension = dimension
    
    async def batch_embed(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings using Gemini API with asyncio.gather.
        """
        if not texts:
            return []
        
        try:
            return list(await asyncio.gather(*[self._embed_single(text) for text in texts]))
        except Exception as e:
            raise EmbeddingError(f"Gemini embedding failed: {e}") from e
    
    async def _embed_single(self, text: str) -> List[float]:
        """
        Embed a single text using Gemini API.
        
        Note: google-generativeai is synchronous, so we use
        asyncio.to_thread to avoid blocking.
        """
        def _sync_embed():
            result = self.genai.embed_content(
                model=self.model,
                content=text,
                task_type="retrieval_document",
            )
            return result["embedding"]
        
        return await asyncio.to_thread(_sync_embed)
    
    def get_embedding_dimension(self) -> int:
        """Get embedding dimension for Gemini."""
        return self._dimension
    
    def get_model_name(self) -> str:
        """Get the model name."""
        return self.model

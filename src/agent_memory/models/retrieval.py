"""
Retrieval Data Models

Structures returned by store lookups that are not plain memories.
"""

from typing import List

from pydantic import BaseModel, Field


class CachedEmbedding(BaseModel):
    """
    An embedding previously stored for text close to a query string.

    Lets callers reuse an embedding instead of calling the embedder again.
    """

    embedding: List[float] = Field(default_factory=list)
    levenshtein_score: float = Field(
        default=0.0,
        ge=0.0,
        description="Edit distance between the query and the stored text"
    )

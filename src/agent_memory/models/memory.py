"""
Memory Data Model

Defines the Memory record handled by the memory manager, its content
payload, and the structured KnowledgeMetadata that classifies it.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError


class MemoryType(str, Enum):
    """Kind of memory; decides which partition a record is routed to."""
    DOCUMENT = "document"
    FRAGMENT = "fragment"
    MESSAGE = "message"
    FACT = "fact"


class MemoryScope(str, Enum):
    """Visibility of a memory."""
    SHARED = "shared"
    PRIVATE = "private"
    ROOM = "room"


class KnowledgeMetadata(BaseModel):
    """
    Structured classification of a memory.

    Only `type` is required. `scope`, `source` and `timestamp` are filled
    in by the memory manager when absent.
    """

    type: MemoryType = Field(..., description="document, fragment, message or fact")
    source_id: Optional[StrictStr] = Field(
        default=None,
        alias="sourceId",
        description="Identifier of the entity this memory originates from"
    )
    chunk_index: Optional[Union[StrictInt, StrictFloat]] = Field(
        default=None,
        alias="chunkIndex",
        description="Position within a segmented source"
    )
    source: Optional[StrictStr] = Field(
        default=None,
        description="Partition or process that produced the memory"
    )
    scope: Optional[MemoryScope] = Field(
        default=None,
        description="shared, private or room"
    )
    tags: Optional[List[StrictStr]] = None
    timestamp: Optional[Union[StrictInt, StrictFloat]] = Field(
        default=None,
        description="Creation time in epoch milliseconds"
    )

    class Config:
        extra = "allow"
        populate_by_name = True
        use_enum_values = True


class Content(BaseModel):
    """
    Payload of a memory.

    `metadata` keeps raw mappings that do not form a valid KnowledgeMetadata
    so that the memory manager can reject them explicitly at creation time.
    """

    text: Optional[str] = None
    metadata: Optional[Union[KnowledgeMetadata, Dict[str, Any]]] = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _coerce_metadata(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            try:
                return KnowledgeMetadata.model_validate(value)
            except PydanticValidationError:
                return dict(value)
        return value

    class Config:
        extra = "allow"


class Memory(BaseModel):
    """
    A unit of text content bound to a room (conversation context).

    Records are keyed by `id`. `agent_id` is absent for shared content.
    Once `embedding` is set it is never recomputed.
    """

    id: UUID = Field(default_factory=uuid4)
    agent_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    room_id: UUID
    content: Content = Field(default_factory=Content)
    embedding: Optional[List[float]] = None
    created_at: Optional[int] = Field(
        default=None,
        description="Creation time in epoch milliseconds, set by the store"
    )
    similarity: Optional[float] = Field(
        default=None,
        description="Populated during similarity search"
    )

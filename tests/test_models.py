"""
Tests for Data Models

Tests Memory, Content, KnowledgeMetadata and CachedEmbedding models.
"""

import uuid

import pytest
from pydantic import ValidationError as PydanticValidationError

from agent_memory.models.memory import Content, KnowledgeMetadata, Memory, MemoryScope, MemoryType
from agent_memory.models.retrieval import CachedEmbedding


class TestMemory:
    """Tests for Memory model."""

    def test_create_default(self):
        """Test creating Memory with defaults."""
        room_id = uuid.uuid4()
        memory = Memory(room_id=room_id, content=Content(text="hello"))

        assert memory.id is not None
        assert memory.room_id == room_id
        assert memory.agent_id is None
        assert memory.embedding is None
        assert memory.content.text == "hello"
        assert memory.content.metadata is None

    def test_ids_are_unique(self):
        room_id = uuid.uuid4()
        assert Memory(room_id=room_id).id != Memory(room_id=room_id).id

    def test_room_id_required(self):
        with pytest.raises(PydanticValidationError):
            Memory(content=Content(text="hello"))

    def test_content_keeps_extra_fields(self):
        content = Content(text="hi", action="CONTINUE", url="https://example.com")

        dumped = content.model_dump(exclude_none=True)
        assert dumped["action"] == "CONTINUE"
        assert dumped["url"] == "https://example.com"


class TestContentMetadata:
    """Content.metadata holds a KnowledgeMetadata when the mapping is valid."""

    def test_valid_mapping_becomes_metadata(self):
        content = Content(text="x", metadata={"type": "fact", "tags": ["a"]})

        assert isinstance(content.metadata, KnowledgeMetadata)
        assert content.metadata.type == MemoryType.FACT

    def test_invalid_mapping_is_kept_raw(self):
        content = Content(text="x", metadata={"type": "invalid"})

        assert content.metadata == {"type": "invalid"}


class TestKnowledgeMetadata:
    """Tests for KnowledgeMetadata model."""

    def test_enum_values_stored_as_strings(self):
        metadata = KnowledgeMetadata(type=MemoryType.DOCUMENT, scope=MemoryScope.ROOM)

        assert metadata.type == "document"
        assert metadata.scope == "room"
        assert metadata.model_dump(exclude_none=True) == {"type": "document", "scope": "room"}

    def test_camel_case_aliases(self):
        metadata = KnowledgeMetadata.model_validate(
            {"type": "fragment", "sourceId": "doc-1", "chunkIndex": 3}
        )

        assert metadata.source_id == "doc-1"
        assert metadata.chunk_index == 3

    def test_field_names_accepted(self):
        metadata = KnowledgeMetadata(type="fragment", source_id="doc-1", chunk_index=0)

        assert metadata.source_id == "doc-1"
        assert metadata.chunk_index == 0

    def test_all_types(self):
        for memory_type in MemoryType:
            assert KnowledgeMetadata(type=memory_type).type == memory_type.value


class TestCachedEmbedding:

    def test_create(self):
        cached = CachedEmbedding(embedding=[0.1, 0.2], levenshtein_score=1)

        assert cached.embedding == [0.1, 0.2]
        assert cached.levenshtein_score == 1.0

    def test_negative_score_rejected(self):
        with pytest.raises(PydanticValidationError):
            CachedEmbedding(embedding=[], levenshtein_score=-1)

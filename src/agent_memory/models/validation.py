"""
Metadata Validation

Checks KnowledgeMetadata before a memory is persisted.
"""

from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from agent_memory.errors import ValidationError
from agent_memory.models.memory import KnowledgeMetadata

# Field (by name or alias) -> message raised for it
_FIELD_ERRORS = {
    "type": "Invalid memory type",
    "source_id": "Metadata sourceId must be a UUID string",
    "sourceId": "Metadata sourceId must be a UUID string",
    "chunk_index": "Metadata chunkIndex must be a number",
    "chunkIndex": "Metadata chunkIndex must be a number",
    "source": "Metadata source must be a string",
    "scope": 'Metadata scope must be "shared", "private", or "room"',
    "tags": "Metadata tags must be an array of strings",
    "timestamp": "Metadata timestamp must be a number",
}


def validate_metadata(metadata: Union[KnowledgeMetadata, Mapping[str, Any]]) -> KnowledgeMetadata:
    """
    Validate memory metadata against the closed type and scope sets.

    Args:
        metadata: A KnowledgeMetadata instance or a raw mapping

    Returns:
        A validated KnowledgeMetadata

    Raises:
        ValidationError: If a field has the wrong shape or value
    """
    if isinstance(metadata, KnowledgeMetadata):
        # Instances may have been mutated after construction
        data = metadata.model_dump(exclude_none=True)
    elif isinstance(metadata, Mapping):
        data = dict(metadata)
    else:
        raise ValidationError("Metadata must be a mapping")

    try:
        return KnowledgeMetadata.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_describe(e)) from e


def _describe(error: PydanticValidationError) -> str:
    """Turn the first pydantic error into a readable message."""
    for detail in error.errors():
        loc = detail.get("loc") or ()
        if loc and loc[0] in _FIELD_ERRORS:
            return _FIELD_ERRORS[loc[0]]
    return f"Invalid metadata: {error}"

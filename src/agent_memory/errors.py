"""
Memory Manager Errors

Failures surfaced to callers of the memory manager. Embedder failures are
defined next to the embedding providers (see embedding.base.EmbeddingError)
and are recovered locally; store failures propagate unchanged.
"""


class MemoryManagerError(Exception):
    """Base class for errors raised by the memory manager."""
    pass


class ValidationError(MemoryManagerError):
    """Raised when memory metadata is malformed."""
    pass


class EmptyContentError(MemoryManagerError):
    """Raised when an embedding is requested for a memory without text."""
    pass

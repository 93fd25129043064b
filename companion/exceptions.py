"""
Exceptions shared across the companion.

- EmotionInputError : malformed input rejected at the boundary
- FaceAnalysisError : image decoding / face classifier failures
- StorageError      : database read/write failures
"""


class CompanionError(Exception):
    """Base class for all companion errors."""
    pass


class EmotionInputError(CompanionError, ValueError):
    """User text or an emotion reading failed boundary validation."""
    pass


class FaceAnalysisError(CompanionError, RuntimeError):
    """An uploaded frame could not be decoded or classified."""
    pass


class StorageError(CompanionError, RuntimeError):
    """Persisting or loading conversation data failed."""
    pass

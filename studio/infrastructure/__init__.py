"""Infrastructure layer exports."""

from .records import AgreedRecordStore, InMemoryStudioRepository, StudioRepository

__all__ = [
    "AgreedRecordStore",
    "InMemoryStudioRepository",
    "StudioRepository",
]

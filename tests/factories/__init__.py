"""Test factories for creating test data."""

from tests.factories.memory import MemoryEntryFactory, RemoteRecordFactory

__all__ = [
    "MemoryEntryFactory",
    "RemoteRecordFactory",
]

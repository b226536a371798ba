"""
Test helpers: sample entities and in-memory doubles for the admin client.
"""

from .fakes import FakeTableAdmin, RecordingEvent

__all__ = [
    "FakeTableAdmin",
    "RecordingEvent",
]

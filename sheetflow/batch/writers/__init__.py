"""
Batch record sinks.
"""

from .base import RecordSink
from .file_writer import SparkFileSink
from .memory_sink import InMemorySink

__all__ = [
    "RecordSink",
    "InMemorySink",
    "SparkFileSink",
]

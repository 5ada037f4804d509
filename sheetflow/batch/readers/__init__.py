"""
Batch record sources and readers.
"""

from .base import RecordSource
from .extractor import RecordExtractor
from .file_reader import FileReader
from .file_source import SparkFileSource
from .memory_source import InMemorySource

__all__ = [
    "RecordSource",
    "RecordExtractor",
    "InMemorySource",
    "SparkFileSource",
    "FileReader",
]

"""
Batch processing module: record sources, sinks, pipeline and runner.
"""

from .pipeline import RecordPipeline
from .readers import FileReader, InMemorySource, RecordExtractor, RecordSource, SparkFileSource
from .runner import PipelineRunner
from .writers import InMemorySink, RecordSink, SparkFileSink

__all__ = [
    "RecordPipeline",
    "PipelineRunner",
    "RecordSource",
    "RecordExtractor",
    "InMemorySource",
    "SparkFileSource",
    "RecordSink",
    "InMemorySink",
    "SparkFileSink",
    "FileReader",
]

"""
Spark-backed file sink for accepted records.

Writes a single output file (CSV, JSON or Parquet) using the profile's schema,
so CSV output can be read back by SparkFileSource.
"""

from pathlib import Path

from py4j.protocol import Py4JJavaError
from pyspark.errors import PySparkException
from pyspark.sql import SparkSession

from sheetflow.batch.schema import spark_schema, to_spark_row
from sheetflow.core.errors import SinkError
from sheetflow.core.models import Record
from sheetflow.core.profiles import EntityProfile
from sheetflow.observability.logger import get_logger

from .base import RecordSink

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("csv", "json", "parquet")


class SparkFileSink(RecordSink):
    """
    Writes accepted records from a Spark DataFrame to one output file.
    """

    def __init__(
        self,
        spark: SparkSession,
        output_path: str | Path,
        profile: EntityProfile,
        file_format: str = "csv",
        mode: str = "overwrite",
    ):
        """
        Initialize file sink.

        Args:
            spark: Active Spark session
            output_path: Output directory (Spark writes a part file inside it)
            profile: Entity profile supplying the column types
            file_format: csv, json or parquet
            mode: Spark save mode
        """
        if file_format.lower() not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported file format: {file_format}")
        self.spark = spark
        self.output_path = str(output_path)
        self.profile = profile
        self.file_format = file_format.lower()
        self.mode = mode

    def write_all(self, records: list[Record]) -> int:
        """
        Write records to the output path.

        Args:
            records: Accepted records

        Returns:
            Number of records written

        Raises:
            SinkError: If Spark cannot write the output
        """
        schema = spark_schema(self.profile.columns)
        rows = [to_spark_row(record, self.profile.columns) for record in records]

        try:
            df = self.spark.createDataFrame(rows, schema=schema)
            writer = df.coalesce(1).write.mode(self.mode)
            if self.file_format == "csv":
                writer.option("header", "true").csv(self.output_path)
            elif self.file_format == "json":
                writer.json(self.output_path)
            else:
                writer.parquet(self.output_path)
        except (PySparkException, Py4JJavaError, OSError) as e:
            raise SinkError(f"Cannot write {self.output_path}: {e}") from e

        logger.info(f"Wrote {len(rows)} {self.profile.name} records to {self.output_path}")
        return len(rows)

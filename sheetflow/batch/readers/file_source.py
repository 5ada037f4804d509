"""
Spark-backed file source (CSV, JSON, Parquet).
"""

from pathlib import Path

from py4j.protocol import Py4JJavaError
from pyspark.errors import PySparkException
from pyspark.sql import SparkSession

from sheetflow.batch.schema import CORRUPT_RECORD_COLUMN, spark_schema
from sheetflow.core.errors import SourceError
from sheetflow.core.models import Record
from sheetflow.core.profiles import EntityProfile
from sheetflow.observability.logger import get_logger

from .base import RecordSource
from .extractor import RecordExtractor
from .file_reader import SUPPORTED_FORMATS, FileReader

logger = get_logger(__name__)


class SparkFileSource(RecordSource):
    """
    Reads an entity file through Spark using the profile's explicit schema.

    Malformed lines (captured in the corrupt-record column) and rows that fail
    record extraction are skipped and counted.
    """

    def __init__(
        self,
        spark: SparkSession,
        file_path: str | Path,
        profile: EntityProfile,
        file_format: str = "csv",
        **read_options,
    ):
        """
        Args:
            spark: Active Spark session
            file_path: File or directory to read
            profile: Entity profile supplying model and column types
            file_format: csv, json or parquet
            **read_options: Extra reader options (header, delimiter, ...)
        """
        super().__init__()
        if file_format.lower() not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported file format: {file_format}")
        self.file_path = str(file_path)
        self.profile = profile
        self.file_format = file_format.lower()
        self.read_options = read_options
        self.file_reader = FileReader(spark)
        self.extractor = RecordExtractor(profile.model)

    def read_all(self) -> list[Record]:
        """
        Read and extract every row.

        Raises:
            SourceError: If the input is missing or Spark cannot read it
        """
        self.skipped_rows = 0
        if "://" not in self.file_path and not Path(self.file_path).exists():
            raise SourceError(f"Input not found: {self.file_path}")

        schema = spark_schema(self.profile.columns, corrupt_column=CORRUPT_RECORD_COLUMN)
        try:
            df = self.file_reader.read(
                self.file_path,
                file_format=self.file_format,
                schema=schema,
                **self.read_options,
            )
            rows = [row.asDict() for row in df.collect()]
        except (PySparkException, Py4JJavaError) as e:
            raise SourceError(f"Cannot read {self.file_path}: {e}") from e

        logger.info(f"Read {len(rows)} rows from {self.file_path}")

        clean_rows = []
        for row_number, row in enumerate(rows, start=1):
            corrupt = row.pop(CORRUPT_RECORD_COLUMN, None)
            if corrupt is not None:
                self.skipped_rows += 1
                logger.error(
                    f"Skipping malformed row {row_number}: {corrupt!r}",
                    extra={"entity": self.profile.name, "row_number": row_number},
                )
                continue
            clean_rows.append(row)

        records, skipped = self.extractor.extract_all(clean_rows)
        self.skipped_rows += skipped
        return records

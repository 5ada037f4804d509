"""
Spark DataFrame reader for entity files (CSV, JSON lines, Parquet).
"""

from typing import Any

from pyspark.sql import DataFrame, DataFrameReader, SparkSession
from pyspark.sql.types import StructType

from sheetflow.batch.schema import CORRUPT_RECORD_COLUMN

SUPPORTED_FORMATS = ("csv", "json", "parquet")

# Text formats keep malformed lines in the corrupt-record column
# instead of failing the whole read.
PERMISSIVE_OPTIONS = {
    "mode": "PERMISSIVE",
    "columnNameOfCorruptRecord": CORRUPT_RECORD_COLUMN,
}

FORMAT_DEFAULTS: dict[str, dict[str, Any]] = {
    # enforceSchema off: header names are checked against the schema
    "csv": {"header": True, "delimiter": ",", "enforceSchema": False, **PERMISSIVE_OPTIONS},
    "json": dict(PERMISSIVE_OPTIONS),
    "parquet": {},
}


class FileReader:
    """
    Reads one input path into a DataFrame.

    CSV and JSON are read with an explicit schema when one is given. A CSV
    header must name the schema columns in schema order (case-insensitive);
    a file whose header differs fails to read. Parquet files carry their own
    schema and ignore the one passed in.
    """

    def __init__(self, spark: SparkSession):
        self.spark = spark

    def read(
        self,
        file_path: str,
        file_format: str = "csv",
        schema: StructType | None = None,
        **options,
    ) -> DataFrame:
        """
        Read a file or directory of part files.

        Args:
            file_path: Path to read
            file_format: csv, json or parquet
            schema: Explicit schema for text formats
            **options: Spark reader options overriding the format defaults

        Returns:
            Unmaterialized DataFrame

        Raises:
            ValueError: If the format is unsupported
        """
        file_format = file_format.lower()
        if file_format not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported file format: {file_format}")

        reader = self._configure(file_format, schema, options)
        return reader.format(file_format).load(file_path)

    def _configure(self, file_format: str, schema: StructType | None, options: dict) -> DataFrameReader:
        reader = self.spark.read
        if schema is not None and file_format != "parquet":
            reader = reader.schema(schema)
        elif file_format == "csv":
            reader = reader.option("inferSchema", True)

        for key, value in {**FORMAT_DEFAULTS[file_format], **options}.items():
            reader = reader.option(key, value)
        return reader

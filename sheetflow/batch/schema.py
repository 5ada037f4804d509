"""
Spark schemas derived from entity profiles.
"""

from typing import Any, Mapping

from pyspark.sql.types import (
    DataType,
    DateType,
    DoubleType,
    LongType,
    StringType,
    StructField,
    StructType,
    TimestampType,
)

from sheetflow.core.errors import ContractError
from sheetflow.core.models import Record

CORRUPT_RECORD_COLUMN = "_corrupt_record"

SPARK_TYPES: dict[str, type[DataType]] = {
    "int": LongType,
    "float": DoubleType,
    "string": StringType,
    "date": DateType,
    "timestamp": TimestampType,
}


def spark_schema(columns: Mapping[str, str], corrupt_column: str | None = None) -> StructType:
    """
    Build a nullable Spark schema from logical column types.

    Args:
        columns: Column name -> logical type (see SPARK_TYPES)
        corrupt_column: Extra string column receiving malformed input lines

    Returns:
        StructType with the columns in declaration order

    Raises:
        ContractError: On an unknown logical type
    """
    fields = []
    for name, logical_type in columns.items():
        spark_type = SPARK_TYPES.get(logical_type)
        if spark_type is None:
            raise ContractError(f"Unknown column type '{logical_type}' for column '{name}'")
        fields.append(StructField(name, spark_type(), nullable=True))
    if corrupt_column:
        fields.append(StructField(corrupt_column, StringType(), nullable=True))
    return StructType(fields)


def to_spark_row(record: Record, columns: Mapping[str, str]) -> tuple[Any, ...]:
    """Flatten a record into a tuple matching spark_schema(columns)."""
    row = record.to_row()
    values = []
    for name, logical_type in columns.items():
        value = row.get(name)
        if value is not None:
            if logical_type == "float":
                value = float(value)
            elif logical_type == "string":
                value = str(value)
        values.append(value)
    return tuple(values)

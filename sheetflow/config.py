"""
Runtime settings read from the environment (and an optional .env file).
"""

import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

from sheetflow.observability.logger import LOG_FORMATS, LOG_LEVELS


class PipelineSettings(BaseModel):
    """
    Settings shared by the CLI and programmatic callers.

    Attributes:
        log_level: LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: LOG_FORMAT ("json" or "text")
        metrics_port: METRICS_PORT; the metrics endpoint is only started when set
        spark_master: SPARK_MASTER
        top_n: SHEETFLOW_TOP_N, number of top-ranked records in summaries
    """

    log_level: str = "INFO"
    log_format: str = "json"
    metrics_port: int | None = Field(None, ge=1, le=65535)
    spark_master: str = "local[*]"
    top_n: int = Field(5, ge=0)

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v):
        if v.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v):
        if v.lower() not in LOG_FORMATS:
            raise ValueError(f"Unknown log format '{v}', expected one of {LOG_FORMATS}")
        return v.lower()

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "PipelineSettings":
        """
        Build settings from environment variables, after loading a .env file.

        Variables already set in the environment win over the .env file.

        Args:
            env_file: Path to the .env file (searched from the working directory when None)

        Returns:
            PipelineSettings

        Raises:
            pydantic.ValidationError: If a variable holds an invalid value
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))
        values = {
            "log_level": os.getenv("LOG_LEVEL"),
            "log_format": os.getenv("LOG_FORMAT"),
            "metrics_port": os.getenv("METRICS_PORT"),
            "spark_master": os.getenv("SPARK_MASTER"),
            "top_n": os.getenv("SHEETFLOW_TOP_N"),
        }
        return cls(**{key: value for key, value in values.items() if value not in (None, "")})

"""
Pytest configuration and fixtures for sheetflow tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import shutil
from datetime import date, datetime
from typing import Generator

import pytest

from sheetflow.core.models import Employee, Event, Promotion, Reservation

# Fixed validation instant: Monday 2026-03-02, 10:00 local time
FIXED_NOW = datetime(2026, 3, 2, 10, 0, 0)


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require a local Spark session"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that test the full pipeline"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# CLOCK FIXTURES
# =======================

@pytest.fixture
def fixed_now() -> datetime:
    """The fixed validation instant"""
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock returning the fixed validation instant"""
    return lambda: FIXED_NOW


# =======================
# RECORD FIXTURES
# =======================

@pytest.fixture
def valid_event() -> Event:
    """An event passing every built-in event rule at FIXED_NOW"""
    return Event(
        id=1,
        title="Spring conference",
        description="Annual product conference",
        capacity=300,
        price_per_hour=250.0,
        location="North",
        date=date(2026, 4, 12),
        status="available",
    )


@pytest.fixture
def valid_employee() -> Employee:
    """An employee passing every built-in employee rule at FIXED_NOW"""
    return Employee(
        id=7,
        first_name="Ada",
        last_name="Lovelace",
        email="ada.lovelace@example.com",
        department="Engineering",
        salary=85_000.0,
        birth_date=date(1990, 5, 17),
        hire_date=date(2015, 9, 1),
    )


@pytest.fixture
def valid_reservation() -> Reservation:
    """A reservation passing every built-in reservation rule at FIXED_NOW"""
    return Reservation(
        user_id=11,
        venue_id=3,
        start_time=datetime(2026, 3, 10, 9, 0),
        end_time=datetime(2026, 3, 10, 12, 0),
        amount=450.0,
    )


@pytest.fixture
def valid_promotion() -> Promotion:
    """A promotion passing every built-in promotion rule at FIXED_NOW"""
    return Promotion(
        name="Spring sale",
        promotion_type="percentage",
        discount_value=15.0,
        start_date=date(2026, 3, 1),
        end_date=date(2026, 3, 31),
        promo_code="SPRING15",
        max_uses=100,
        applies_to="venues",
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator["SparkSession", None, None]:
    """
    Create a Spark session for testing with local mode

    Skips the requesting test when no Java runtime is available.

    Yields:
        SparkSession configured for local testing
    """
    if shutil.which("java") is None:
        pytest.skip("Java runtime not available for Spark")

    from pyspark.sql import SparkSession

    spark = (
        SparkSession.builder
        .appName("sheetflow-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .config("spark.sql.session.timeZone", "UTC")
        .getOrCreate()
    )

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()

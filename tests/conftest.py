"""
Pytest configuration and fixtures for sales pipeline tests

This module provides shared fixtures for unit and integration tests.
"""
import os
from typing import Generator

import pytest
from pyspark.sql import SparkSession


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that start a local Spark session"
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator[SparkSession, None, None]:
    """
    Create a Spark session for testing with local mode

    Yields:
        SparkSession configured for local testing
    """
    spark = (
        SparkSession.builder
        .appName("sales-pipeline-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .getOrCreate()
    )

    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return os.path.join(os.path.dirname(__file__), "fixtures")


@pytest.fixture(scope="session")
def dirty_sales_csv(test_data_dir) -> str:
    """Path to a small sales export with one example of every data problem"""
    return os.path.join(test_data_dir, "dirty_sales.csv")


@pytest.fixture(scope="session")
def rules_yaml_path() -> str:
    """Path to the shipped validation rules"""
    return os.path.join(os.path.dirname(os.path.dirname(__file__)), "config", "validation_rules.yaml")

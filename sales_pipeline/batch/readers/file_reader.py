"""
Generic sales file reader for multiple formats (CSV, JSON, Parquet).
"""

from typing import Any

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import monotonically_increasing_id
from pyspark.sql.types import StructType

from .csv_reader import ROW_ID_COLUMN, CSVReader


class FileReader:
    """
    Loads sales files with Spark and hands rows to the pipeline in ingestion order.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize file reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark
        self.csv_reader = CSVReader(spark)

    def read(
        self,
        file_path: str,
        file_format: str = "csv",
        schema: StructType | None = None,
        **options
    ) -> DataFrame:
        """
        Read file into Spark DataFrame.

        Args:
            file_path: Path to file
            file_format: Format (csv, json, parquet)
            schema: Optional explicit schema
            **options: Format-specific options

        Returns:
            Spark DataFrame with a _row_id ingestion order column

        Raises:
            ValueError: If file format is unsupported
        """
        file_format = file_format.lower()
        if file_format == "csv":
            return self.csv_reader.read(file_path, schema=schema, **options)

        if file_format == "json":
            reader = self.spark.read
            if schema:
                reader = reader.schema(schema)
            df = reader.json(file_path)
        elif file_format == "parquet":
            df = self.spark.read.parquet(file_path)
        else:
            raise ValueError(f"Unsupported file format: {file_format}")

        return df.withColumn(ROW_ID_COLUMN, monotonically_increasing_id())

    def read_rows(self, file_path: str, file_format: str = "csv", **options) -> list[dict[str, Any]]:
        """
        Read a file and collect its rows as dictionaries in ingestion order.

        Args:
            file_path: Path to file
            file_format: Format (csv, json, parquet)
            **options: Format-specific options

        Returns:
            List of column name to value mappings
        """
        df = self.read(file_path, file_format=file_format, **options)
        rows = df.orderBy(ROW_ID_COLUMN).drop(ROW_ID_COLUMN).collect()
        return [row.asDict() for row in rows]

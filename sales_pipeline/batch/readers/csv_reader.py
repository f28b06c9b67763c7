"""
CSV reader using Spark for batch loading.
"""

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.functions import monotonically_increasing_id
from pyspark.sql.types import StringType, StructField, StructType


ROW_ID_COLUMN = "_row_id"

SALES_COLUMNS = (
    "InvoiceNo",
    "StockCode",
    "Description",
    "Quantity",
    "InvoiceDate",
    "UnitPrice",
    "CustomerID",
    "Country",
)

# Column layout of headerless exports
SALES_SCHEMA = StructType([StructField(name, StringType(), True) for name in SALES_COLUMNS])


class CSVReader:
    """
    Reads CSV files using Spark with an explicit or header-derived schema.
    """

    def __init__(self, spark: SparkSession):
        """
        Initialize CSV reader.

        Args:
            spark: Active Spark session
        """
        self.spark = spark

    def read(
        self,
        file_path: str,
        schema: StructType | None = None,
        header: bool = True,
        delimiter: str = ",",
    ) -> DataFrame:
        """
        Read CSV file into a Spark DataFrame tagged with ingestion order.

        Args:
            file_path: Path to CSV file
            schema: Explicit schema (None keeps every header column as text;
                    pass SALES_SCHEMA for headerless exports)
            header: Whether CSV has header row
            delimiter: Field delimiter

        Returns:
            Spark DataFrame with an extra monotonically increasing _row_id column
        """
        reader = self.spark.read

        if schema is not None:
            reader = reader.schema(schema)

        df = reader \
            .option("header", str(header).lower()) \
            .option("delimiter", delimiter) \
            .option("inferSchema", "false") \
            .option("mode", "PERMISSIVE") \
            .csv(file_path)

        return df.withColumn(ROW_ID_COLUMN, monotonically_increasing_id())

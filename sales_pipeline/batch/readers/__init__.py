"""
Batch data source readers and raw row parsing.
"""

from .csv_reader import SALES_SCHEMA, CSVReader
from .file_reader import FileReader
from .record_parser import MalformedRecordError, parse_sales_row, parse_timestamp

__all__ = [
    "CSVReader",
    "FileReader",
    "SALES_SCHEMA",
    "MalformedRecordError",
    "parse_sales_row",
    "parse_timestamp",
]

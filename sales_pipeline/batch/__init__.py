"""
Batch cleaning and rollup pipeline.
"""

from .aggregator import Aggregator, aggregate, dense_rank, round_half_up
from .cleaner import Cleaner, CleaningResult, clean, find_duplicate_groups
from .pipeline import BatchPipeline
from .profiler import find_outliers, profile_missing_values
from .readers import CSVReader, FileReader, MalformedRecordError, parse_sales_row
from .reporter import Reporter

__all__ = [
    "BatchPipeline",
    "Aggregator",
    "aggregate",
    "dense_rank",
    "round_half_up",
    "Cleaner",
    "CleaningResult",
    "clean",
    "find_duplicate_groups",
    "find_outliers",
    "profile_missing_values",
    "CSVReader",
    "FileReader",
    "MalformedRecordError",
    "parse_sales_row",
    "Reporter",
]

"""
Core data models for the sales cleaning and rollup pipeline.

All models use Pydantic for runtime validation and are frozen once built.
"""

from .data_quality import DataQualitySummary, MissingValueSummary
from .rollups import (
    CountryContributionRow,
    CountrySummaryRow,
    DailyRevenueRow,
    RollupSet,
    Tier,
    TopCustomerRow,
)
from .sales_record import DuplicateKey, SalesRecord
from .validation_result import RejectionReason, ValidationResult

__all__ = [
    "SalesRecord",
    "DuplicateKey",
    "RejectionReason",
    "ValidationResult",
    "DailyRevenueRow",
    "CountrySummaryRow",
    "CountryContributionRow",
    "TopCustomerRow",
    "RollupSet",
    "Tier",
    "DataQualitySummary",
    "MissingValueSummary",
]

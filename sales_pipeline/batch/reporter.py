"""
Read-only access to the rollups of a completed batch.
"""

from types import MappingProxyType
from typing import Any, Mapping

from sales_pipeline.core.models import (
    CountryContributionRow,
    CountrySummaryRow,
    DailyRevenueRow,
    DataQualitySummary,
    RollupSet,
    SalesRecord,
    TopCustomerRow,
)


class Reporter:
    """
    Named, immutable views over one batch's rollups.

    A Reporter is only ever built from a complete RollupSet, so every view
    reflects the same finished batch.
    """

    VIEW_NAMES = (
        "daily_revenue",
        "country_summary",
        "country_contribution",
        "top_customers_by_country",
        "outliers",
    )

    def __init__(
        self,
        rollups: RollupSet,
        quality: DataQualitySummary | None = None,
        outliers: tuple[SalesRecord, ...] = (),
    ):
        """
        Initialize reporter.

        Args:
            rollups: Rollups computed from the clean batch
            quality: Drop attribution for the batch
            outliers: Clean records with unusually large quantity or price
        """
        self._rollups = rollups
        self._quality = quality or DataQualitySummary()
        self._outliers = tuple(outliers)
        self._countries = {row.country: row for row in rollups.country_summary}

    @property
    def daily_revenue(self) -> tuple[DailyRevenueRow, ...]:
        return self._rollups.daily_revenue

    @property
    def country_summary(self) -> tuple[CountrySummaryRow, ...]:
        return self._rollups.country_summary

    @property
    def country_contribution(self) -> tuple[CountryContributionRow, ...]:
        return self._rollups.country_contribution

    @property
    def top_customers_by_country(self) -> tuple[TopCustomerRow, ...]:
        return self._rollups.top_customers_by_country

    @property
    def outliers(self) -> tuple[SalesRecord, ...]:
        return self._outliers

    @property
    def data_quality(self) -> DataQualitySummary:
        return self._quality

    @property
    def views(self) -> Mapping[str, tuple[Any, ...]]:
        """All tabular views by name (read-only mapping)."""
        return MappingProxyType({name: getattr(self, name) for name in self.VIEW_NAMES})

    def country_sales(self, country_name: str) -> CountrySummaryRow | None:
        """
        Summary row for a single country.

        Args:
            country_name: Country to look up (exact match)

        Returns:
            The country's summary row, or None if it has no clean sales
        """
        return self._countries.get(country_name)

    def top_countries(self, limit: int = 10) -> tuple[CountryContributionRow, ...]:
        """Countries with the highest revenue and their share of the total."""
        if limit < 0:
            raise ValueError("limit must not be negative")
        return self._rollups.country_contribution[:limit]

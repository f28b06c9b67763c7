"""
Rollup models produced by the aggregator and served by the reporter.

Every row is frozen and every collection is a tuple, so a computed
RollupSet can be shared freely without copying.
"""

from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


Tier = Literal["High", "Medium", "Low"]


class DailyRevenueRow(BaseModel):
    """
    Revenue for one calendar day present in the clean set.

    Attributes:
        day: Calendar date of the invoices
        revenue: Sum of quantity * unit price for the day
        previous_revenue: Revenue of the previous present day (None for the first)
        growth_pct: Day-over-day growth in percent, None when undefined
        cumulative_revenue: Running revenue total up to and including this day
        moving_avg_7d: Mean revenue of this day and up to six preceding present days
    """

    model_config = ConfigDict(frozen=True)

    day: date
    revenue: Decimal
    previous_revenue: Decimal | None = None
    growth_pct: Decimal | None = None
    cumulative_revenue: Decimal
    moving_avg_7d: Decimal


class CountrySummaryRow(BaseModel):
    """Sales summary for one country."""

    model_config = ConfigDict(frozen=True)

    country: str
    total_customers: int = Field(..., ge=0)
    total_revenue: Decimal
    avg_revenue: Decimal
    tier: Tier
    rank: int = Field(..., ge=1)


class CountryContributionRow(BaseModel):
    """Share of the grand total revenue earned in one country."""

    model_config = ConfigDict(frozen=True)

    country: str
    total_revenue: Decimal
    contribution_pct: Decimal | None = None


class TopCustomerRow(BaseModel):
    """A customer among the top revenue ranks of their country."""

    model_config = ConfigDict(frozen=True)

    country: str
    customer_id: str
    total_revenue: Decimal
    rank: int = Field(..., ge=1)


class RollupSet(BaseModel):
    """All rollups computed from one clean batch."""

    model_config = ConfigDict(frozen=True)

    daily_revenue: tuple[DailyRevenueRow, ...] = ()
    country_summary: tuple[CountrySummaryRow, ...] = ()
    country_contribution: tuple[CountryContributionRow, ...] = ()
    top_customers_by_country: tuple[TopCustomerRow, ...] = ()

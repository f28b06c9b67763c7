"""
Daily and per-country rollups over clean sales records.

Window functions (LAG, running SUM, framed AVG, DENSE_RANK) are computed
as sort-then-scan passes over in-memory sequences. Inputs are never
modified.
"""

from collections import defaultdict, deque
from datetime import date
from decimal import ROUND_HALF_UP, Context, Decimal, getcontext, localcontext
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from sales_pipeline.core.models import (
    CountryContributionRow,
    CountrySummaryRow,
    DailyRevenueRow,
    RollupSet,
    SalesRecord,
    Tier,
    TopCustomerRow,
)


T = TypeVar("T")

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

MOVING_AVERAGE_DAYS = 7
# Working precision for sums and ratios; exact for any value the parser admits
ROLLUP_PRECISION = 60
HIGH_TIER_ABOVE = Decimal(10000)
MEDIUM_TIER_FROM = Decimal(5000)


def round_half_up(value: Decimal) -> Decimal:
    """Round to 2 decimal places, halves away from zero, at any magnitude."""
    digits = max(getcontext().prec, value.adjusted() + 3)
    return value.quantize(CENT, rounding=ROUND_HALF_UP, context=Context(prec=digits))


def dense_rank(
    items: Iterable[T],
    key: Callable[[T], Decimal],
    tiebreak: Callable[[T], Hashable] | None = None,
) -> list[tuple[int, T]]:
    """
    Dense-rank items by descending key.

    Equal keys share a rank and the next distinct key gets the previous
    rank plus one. Items with equal keys are ordered by tiebreak.

    Returns:
        (rank, item) pairs in rank order
    """
    ordered = sorted(items, key=tiebreak) if tiebreak else list(items)
    ordered.sort(key=key, reverse=True)

    ranked = []
    rank = 0
    previous = None
    for item in ordered:
        value = key(item)
        if rank == 0 or value != previous:
            rank += 1
            previous = value
        ranked.append((rank, item))
    return ranked


def tier_for(total_revenue: Decimal) -> Tier:
    if total_revenue > HIGH_TIER_ABOVE:
        return "High"
    if total_revenue >= MEDIUM_TIER_FROM:
        return "Medium"
    return "Low"


class Aggregator:
    """
    Computes the full RollupSet for one clean batch.

    Records without a country count towards the daily series but are left
    out of every country-level rollup.
    """

    def __init__(self, top_n: int = 3):
        """
        Initialize aggregator.

        Args:
            top_n: Highest customer rank kept per country
        """
        if top_n < 1:
            raise ValueError("top_n must be at least 1")
        self.top_n = top_n

    def aggregate(self, records: Sequence[SalesRecord]) -> RollupSet:
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, ROLLUP_PRECISION)
            country_totals = self._country_totals(records)
            return RollupSet(
                daily_revenue=self.daily_revenue(records),
                country_summary=self.country_summary(records),
                country_contribution=self.country_contribution(country_totals),
                top_customers_by_country=self.top_customers_by_country(records),
            )

    def daily_revenue(self, records: Sequence[SalesRecord]) -> tuple[DailyRevenueRow, ...]:
        """
        Revenue per present day with growth, running total and moving average.

        "Previous day" is the previous day present in the series, not the
        previous calendar day; gaps are not filled.
        """
        totals: dict[date, Decimal] = defaultdict(Decimal)
        for record in records:
            totals[record.invoice_date] += record.revenue

        rows = []
        previous: Decimal | None = None
        cumulative = Decimal(0)
        window: deque[Decimal] = deque(maxlen=MOVING_AVERAGE_DAYS)

        for day in sorted(totals):
            revenue = totals[day]
            cumulative += revenue
            window.append(revenue)

            rows.append(DailyRevenueRow(
                day=day,
                revenue=revenue,
                previous_revenue=previous,
                growth_pct=self._growth(revenue, previous),
                cumulative_revenue=cumulative,
                moving_avg_7d=round_half_up(sum(window) / len(window)),
            ))
            previous = revenue

        return tuple(rows)

    @staticmethod
    def _growth(revenue: Decimal, previous: Decimal | None) -> Decimal | None:
        if previous is None or previous == 0:
            return None
        return round_half_up((revenue - previous) / previous * HUNDRED)

    def country_summary(self, records: Sequence[SalesRecord]) -> tuple[CountrySummaryRow, ...]:
        """Customers, revenue, mean line revenue, tier and rank per country."""
        totals: dict[str, Decimal] = defaultdict(Decimal)
        lines: dict[str, int] = defaultdict(int)
        customers: dict[str, set[str]] = defaultdict(set)

        for record in records:
            if record.country is None:
                continue
            totals[record.country] += record.revenue
            lines[record.country] += 1
            customers[record.country].add(record.customer_id)

        ranked = dense_rank(totals, key=totals.__getitem__, tiebreak=lambda country: country)

        return tuple(
            CountrySummaryRow(
                country=country,
                total_customers=len(customers[country]),
                total_revenue=totals[country],
                avg_revenue=round_half_up(totals[country] / lines[country]),
                tier=tier_for(totals[country]),
                rank=rank,
            )
            for rank, country in ranked
        )

    @staticmethod
    def _country_totals(records: Sequence[SalesRecord]) -> dict[str, Decimal]:
        totals: dict[str, Decimal] = defaultdict(Decimal)
        for record in records:
            if record.country is not None:
                totals[record.country] += record.revenue
        return dict(totals)

    def country_contribution(self, country_totals: dict[str, Decimal]) -> tuple[CountryContributionRow, ...]:
        """Each country's share of the revenue across all countries."""
        grand_total = sum(country_totals.values(), Decimal(0))

        ordered = sorted(country_totals.items(), key=lambda item: (-item[1], item[0]))
        return tuple(
            CountryContributionRow(
                country=country,
                total_revenue=total,
                contribution_pct=(
                    round_half_up(total / grand_total * HUNDRED) if grand_total else None
                ),
            )
            for country, total in ordered
        )

    def top_customers_by_country(self, records: Sequence[SalesRecord]) -> tuple[TopCustomerRow, ...]:
        """
        Customers holding the top dense ranks by revenue within each country.

        Ties are all kept, so a country can return more than top_n rows.
        """
        totals: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))
        for record in records:
            if record.country is None:
                continue
            totals[record.country][record.customer_id] += record.revenue

        rows = []
        for country in sorted(totals):
            by_customer = totals[country]
            for rank, customer_id in dense_rank(
                by_customer, key=by_customer.__getitem__, tiebreak=lambda customer: customer
            ):
                if rank > self.top_n:
                    break
                rows.append(TopCustomerRow(
                    country=country,
                    customer_id=customer_id,
                    total_revenue=by_customer[customer_id],
                    rank=rank,
                ))

        return tuple(rows)


def aggregate(records: Sequence[SalesRecord]) -> RollupSet:
    """Compute all rollups with default settings."""
    return Aggregator().aggregate(records)

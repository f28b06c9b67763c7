"""
Unit tests for daily and country rollups.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from sales_pipeline.batch.aggregator import (
    Aggregator,
    aggregate,
    dense_rank,
    round_half_up,
    tier_for,
)
from sales_pipeline.core.models import SalesRecord


def sale(
    day: date,
    amount: str,
    customer_id: str = "c1",
    country: str | None = "UK",
    row_number: int = 0,
) -> SalesRecord:
    """A one-unit sale worth amount on day."""
    return SalesRecord(
        invoice_id=f"inv{row_number}",
        stock_code="85123A",
        quantity=1,
        invoice_timestamp=datetime.combine(day, datetime.min.time()),
        unit_price=Decimal(amount),
        customer_id=customer_id,
        country=country,
        row_number=row_number,
    )


class TestHelpers:
    """Tests for rounding, ranking and tiering helpers"""

    @pytest.mark.parametrize("value,expected", [
        ("0.025", "0.03"),
        ("0.015", "0.02"),
        ("66.666", "66.67"),
        ("-1.005", "-1.01"),
        ("2", "2.00"),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(Decimal(value)) == Decimal(expected)

    def test_dense_rank_has_no_gaps(self):
        ranked = dense_rank([500, 300, 500, 200, 300], key=lambda v: Decimal(v))
        assert [rank for rank, _ in ranked] == [1, 1, 2, 2, 3]
        assert [v for _, v in ranked] == [500, 500, 300, 300, 200]

    def test_dense_rank_tiebreak(self):
        totals = {"b": Decimal(5), "a": Decimal(5), "c": Decimal(1)}
        ranked = dense_rank(totals, key=totals.__getitem__, tiebreak=lambda k: k)
        assert ranked == [(1, "a"), (1, "b"), (2, "c")]

    def test_dense_rank_empty(self):
        assert dense_rank([], key=lambda v: v) == []

    @pytest.mark.parametrize("total,tier", [
        ("20000", "High"),
        ("10000.01", "High"),
        ("10000", "Medium"),
        ("7000", "Medium"),
        ("5000", "Medium"),
        ("4999.99", "Low"),
        ("3000", "Low"),
    ])
    def test_tier_thresholds(self, total, tier):
        assert tier_for(Decimal(total)) == tier


class TestDailyRevenue:
    """Tests for the daily revenue series"""

    def test_duplicate_free_day_revenue(self):
        record = SalesRecord(
            invoice_id="inv1",
            stock_code="ABC1",
            quantity=2,
            invoice_timestamp=datetime(2024, 1, 1, 12, 0),
            unit_price=Decimal("10.00"),
            customer_id="cust1",
            country="UK",
        )
        daily = aggregate([record]).daily_revenue

        assert len(daily) == 1
        assert daily[0].day == date(2024, 1, 1)
        assert daily[0].revenue == Decimal("20.00")

    def test_sums_within_day_and_sorts_ascending(self):
        records = [
            sale(date(2024, 1, 2), "5.00"),
            sale(date(2024, 1, 1), "1.50"),
            sale(date(2024, 1, 1), "2.50"),
        ]
        daily = aggregate(records).daily_revenue

        assert [row.day for row in daily] == [date(2024, 1, 1), date(2024, 1, 2)]
        assert [row.revenue for row in daily] == [Decimal("4.00"), Decimal("5.00")]

    def test_growth_uses_previous_present_day(self):
        records = [
            sale(date(2024, 1, 1), "100"),
            sale(date(2024, 1, 2), "150"),
            # 2024-01-03 has no sales
            sale(date(2024, 1, 4), "300"),
        ]
        daily = aggregate(records).daily_revenue

        assert daily[0].growth_pct is None
        assert daily[0].previous_revenue is None
        assert daily[1].growth_pct == Decimal("50.00")
        assert daily[2].previous_revenue == Decimal("150")
        assert daily[2].growth_pct == Decimal("100.00")

    def test_negative_growth(self):
        records = [sale(date(2024, 1, 1), "300"), sale(date(2024, 1, 2), "100")]
        assert aggregate(records).daily_revenue[1].growth_pct == Decimal("-66.67")

    def test_growth_against_zero_is_absent(self):
        assert Aggregator._growth(Decimal("5"), Decimal("0")) is None
        assert Aggregator._growth(Decimal("5"), None) is None

    def test_cumulative_revenue(self):
        records = [sale(date(2024, 1, d), str(d * 10)) for d in (1, 2, 3)]
        cumulative = [row.cumulative_revenue for row in aggregate(records).daily_revenue]
        assert cumulative == [Decimal(10), Decimal(30), Decimal(60)]

    def test_moving_average_first_day_is_own_revenue(self):
        records = [sale(date(2024, 1, 1), "123.45"), sale(date(2024, 1, 2), "1.00")]
        assert aggregate(records).daily_revenue[0].moving_avg_7d == Decimal("123.45")

    def test_moving_average_partial_then_full_window(self):
        start = date(2024, 1, 1)
        records = [sale(start + timedelta(days=i), str((i + 1) * 10)) for i in range(8)]
        averages = [row.moving_avg_7d for row in aggregate(records).daily_revenue]

        assert averages[1] == Decimal("15.00")
        assert averages[6] == Decimal("40.00")   # (10..70) / 7
        assert averages[7] == Decimal("50.00")   # (20..80) / 7

    def test_moving_average_window_counts_present_days(self):
        records = [
            sale(date(2024, 1, 1), "10"),
            sale(date(2024, 3, 1), "20"),
        ]
        assert aggregate(records).daily_revenue[1].moving_avg_7d == Decimal("15.00")

    def test_moving_average_rounds_half_up(self):
        records = [sale(date(2024, 1, 1), "0.02"), sale(date(2024, 1, 2), "0.03")]
        assert aggregate(records).daily_revenue[1].moving_avg_7d == Decimal("0.03")

    def test_records_without_country_count_daily(self):
        records = [sale(date(2024, 1, 1), "10", country=None), sale(date(2024, 1, 1), "5")]
        rollups = aggregate(records)

        assert rollups.daily_revenue[0].revenue == Decimal("15")
        assert [row.total_revenue for row in rollups.country_summary] == [Decimal("5")]


class TestCountryRollups:
    """Tests for the country summary, contribution and top customers"""

    @pytest.fixture
    def three_countries(self):
        day = date(2024, 1, 1)
        return [
            sale(day, "12000", customer_id="u1", country="UK", row_number=0),
            sale(day, "8000", customer_id="u2", country="UK", row_number=1),
            sale(day, "7000", customer_id="s1", country="US", row_number=2),
            sale(day, "3000", customer_id="f1", country="FR", row_number=3),
        ]

    def test_tiers_and_ranks(self, three_countries):
        summary = {row.country: row for row in aggregate(three_countries).country_summary}

        assert {c: r.tier for c, r in summary.items()} == {"UK": "High", "US": "Medium", "FR": "Low"}
        assert {c: r.rank for c, r in summary.items()} == {"UK": 1, "US": 2, "FR": 3}

    def test_summary_columns(self, three_countries):
        uk = aggregate(three_countries).country_summary[0]

        assert uk.country == "UK"
        assert uk.total_customers == 2
        assert uk.total_revenue == Decimal("20000")
        assert uk.avg_revenue == Decimal("10000.00")

    def test_distinct_customers(self):
        day = date(2024, 1, 1)
        records = [sale(day, "1", customer_id="c1", row_number=i) for i in range(3)]
        assert aggregate(records).country_summary[0].total_customers == 1

    def test_equal_totals_share_rank(self):
        day = date(2024, 1, 1)
        records = [
            sale(day, "500", country="DE"),
            sale(day, "500", country="AT"),
            sale(day, "100", country="CH"),
        ]
        summary = aggregate(records).country_summary

        assert [(r.country, r.rank) for r in summary] == [("AT", 1), ("DE", 1), ("CH", 2)]

    def test_contribution(self, three_countries):
        contribution = aggregate(three_countries).country_contribution

        assert [row.country for row in contribution] == ["UK", "US", "FR"]
        assert [row.contribution_pct for row in contribution] == [
            Decimal("66.67"),
            Decimal("23.33"),
            Decimal("10.00"),
        ]

    def test_contribution_excludes_unknown_country(self):
        day = date(2024, 1, 1)
        records = [sale(day, "50", country="UK"), sale(day, "50", country=None)]
        contribution = aggregate(records).country_contribution

        assert len(contribution) == 1
        assert contribution[0].contribution_pct == Decimal("100.00")

    def test_top_customers_dense_rank_ties(self):
        day = date(2024, 1, 1)
        records = [
            sale(day, "500", customer_id="c1"),
            sale(day, "500", customer_id="c2"),
            sale(day, "300", customer_id="c3"),
            sale(day, "200", customer_id="c4"),
            sale(day, "100", customer_id="c5"),
        ]
        top = aggregate(records).top_customers_by_country

        assert [(row.customer_id, row.rank) for row in top] == [
            ("c1", 1), ("c2", 1), ("c3", 2), ("c4", 3),
        ]

    def test_top_customers_ties_at_boundary_all_kept(self):
        day = date(2024, 1, 1)
        records = [
            sale(day, "900", customer_id="c1"),
            sale(day, "800", customer_id="c2"),
            sale(day, "700", customer_id="c3"),
            sale(day, "700", customer_id="c4"),
            sale(day, "600", customer_id="c5"),
        ]
        top = aggregate(records).top_customers_by_country

        assert len(top) == 4
        assert [row.rank for row in top] == [1, 2, 3, 3]

    def test_top_customers_per_country(self):
        day = date(2024, 1, 1)
        records = [
            sale(day, "10", customer_id="u1", country="UK"),
            sale(day, "20", customer_id="u1", country="UK"),
            sale(day, "25", customer_id="u2", country="UK"),
            sale(day, "5", customer_id="f1", country="FR"),
        ]
        top = aggregate(records).top_customers_by_country

        assert [(r.country, r.customer_id, r.total_revenue, r.rank) for r in top] == [
            ("FR", "f1", Decimal("5"), 1),
            ("UK", "u1", Decimal("30"), 1),
            ("UK", "u2", Decimal("25"), 2),
        ]

    def test_top_n_is_configurable(self):
        day = date(2024, 1, 1)
        records = [sale(day, str(v), customer_id=f"c{v}") for v in (1, 2, 3)]
        top = Aggregator(top_n=1).aggregate(records).top_customers_by_country
        assert [row.customer_id for row in top] == ["c3"]

    def test_top_n_must_be_positive(self):
        with pytest.raises(ValueError):
            Aggregator(top_n=0)


class TestEmptyInput:
    """Tests for an empty clean set"""

    def test_all_rollups_empty(self):
        rollups = aggregate([])

        assert rollups.daily_revenue == ()
        assert rollups.country_summary == ()
        assert rollups.country_contribution == ()
        assert rollups.top_customers_by_country == ()


class TestLargeValues:
    """Tests for rollups whose values exceed the default decimal precision"""

    def test_rounding_beyond_default_precision(self):
        assert round_half_up(Decimal("1E+30")) == Decimal("1E+30")
        assert round_half_up(Decimal("123456789012345678901234567890.125")) == Decimal(
            "123456789012345678901234567890.13"
        )

    def test_rollups_of_huge_revenue(self):
        price = Decimal("10000000000000000000000000.00")
        records = [
            sale(date(2024, 1, 1), "1", row_number=0).model_copy(update={"quantity": 1000, "unit_price": price}),
            sale(date(2024, 1, 2), "1", row_number=1).model_copy(update={"quantity": 1000, "unit_price": price}),
        ]
        rollups = aggregate(records)

        assert [row.moving_avg_7d for row in rollups.daily_revenue] == [Decimal("1E+28")] * 2
        assert rollups.daily_revenue[1].growth_pct == Decimal("0.00")
        assert rollups.daily_revenue[1].cumulative_revenue == Decimal("2E+28")
        assert rollups.country_summary[0].avg_revenue == Decimal("1E+28")
        assert rollups.country_contribution[0].contribution_pct == Decimal("100.00")

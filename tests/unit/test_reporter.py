"""
Unit tests for the read-only reporter views.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from sales_pipeline.batch.aggregator import aggregate
from sales_pipeline.batch.reporter import Reporter
from sales_pipeline.core.models import DataQualitySummary, RejectionReason, SalesRecord


def sale(amount: str, country: str, customer_id: str = "c1") -> SalesRecord:
    return SalesRecord(
        invoice_id="536365",
        stock_code="85123A",
        quantity=1,
        invoice_timestamp=datetime(2024, 1, 1, 10, 0),
        unit_price=Decimal(amount),
        customer_id=customer_id,
        country=country,
    )


@pytest.fixture
def reporter() -> Reporter:
    records = [sale(str(100 * (i + 1)), f"Country{i:02d}") for i in range(12)]
    quality = DataQualitySummary(
        total_records=14,
        rejections={RejectionReason.INVALID_STOCK_CODE: 2},
        clean_records=12,
    )
    return Reporter(aggregate(records), quality, outliers=(records[0],))


class TestReporter:
    """Tests for Reporter"""

    def test_country_sales_returns_single_row(self, reporter):
        row = reporter.country_sales("Country11")

        assert row is not None
        assert row.country == "Country11"
        assert row.total_revenue == Decimal("1200")
        assert row.rank == 1

    def test_country_sales_not_found(self, reporter):
        assert reporter.country_sales("Atlantis") is None

    def test_country_sales_is_exact_match(self, reporter):
        assert reporter.country_sales("country11") is None

    def test_views_are_tuples(self, reporter):
        for name, rows in reporter.views.items():
            assert isinstance(rows, tuple), name

    def test_views_mapping_is_read_only(self, reporter):
        with pytest.raises(TypeError):
            reporter.views["daily_revenue"] = ()

    def test_views_cannot_be_reassigned(self, reporter):
        with pytest.raises(AttributeError):
            reporter.daily_revenue = ()

    def test_view_names(self, reporter):
        assert list(reporter.views) == list(Reporter.VIEW_NAMES)
        assert reporter.views["daily_revenue"] == reporter.daily_revenue
        assert reporter.daily_revenue[0].day == date(2024, 1, 1)

    def test_top_countries_default_limit(self, reporter):
        top = reporter.top_countries()

        assert len(top) == 10
        assert top[0].country == "Country11"

    def test_top_countries_custom_limit(self, reporter):
        assert [row.country for row in reporter.top_countries(2)] == ["Country11", "Country10"]

    def test_top_countries_negative_limit(self, reporter):
        with pytest.raises(ValueError):
            reporter.top_countries(-1)

    def test_data_quality(self, reporter):
        assert reporter.data_quality.rejected_records == 2
        assert reporter.data_quality.clean_records == 12

    def test_outliers(self, reporter):
        assert len(reporter.outliers) == 1

    def test_defaults_for_empty_batch(self):
        empty = Reporter(aggregate([]))

        assert empty.daily_revenue == ()
        assert empty.data_quality.total_records == 0
        assert empty.country_sales("UK") is None
        assert empty.top_countries() == ()

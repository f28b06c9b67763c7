"""
Data profiling checks run alongside cleaning.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from sales_pipeline.core.models import MissingValueSummary, SalesRecord

from .readers.record_parser import FIELD_ALIASES


DEFAULT_OUTLIER_THRESHOLD = Decimal(10000)


def profile_missing_values(raw_rows: Sequence[Mapping[str, Any]]) -> MissingValueSummary:
    """
    Count null or blank values per field across raw loader rows.

    Each field is read from the first of its accepted column names present
    in the row, the same column the parser reads. The field counts as missing
    when that column is absent, null or blank.
    """
    missing = {field: 0 for field in FIELD_ALIASES}

    for raw in raw_rows:
        for field, columns in FIELD_ALIASES.items():
            value = next((raw[c] for c in columns if c in raw), None)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing[field] += 1

    return MissingValueSummary(total_rows=len(raw_rows), missing_by_field=missing)


def find_outliers(
    records: Iterable[SalesRecord],
    threshold: Decimal | int = DEFAULT_OUTLIER_THRESHOLD,
) -> tuple[SalesRecord, ...]:
    """Records whose quantity or unit price exceeds threshold."""
    return tuple(
        record for record in records
        if record.quantity > threshold or record.unit_price > threshold
    )

"""
Record cleaning: drop invalid records and resolve duplicates.

Cleaning is a pure filter. The input sequence is never modified and the
surviving records keep their original relative order.
"""

from collections import Counter
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from sales_pipeline.core.models import DuplicateKey, RejectionReason, SalesRecord
from sales_pipeline.core.rules import RuleEngine
from sales_pipeline.observability.logger import get_logger


logger = get_logger(__name__)


class CleaningResult(BaseModel):
    """
    Clean records plus the attribution of everything that was dropped.

    Attributes:
        records: Surviving records in original relative order
        rejections: Count of invalid records per rejection reason
        duplicates_removed: Valid records dropped as later duplicates
    """

    model_config = ConfigDict(frozen=True)

    records: tuple[SalesRecord, ...] = ()
    rejections: dict[RejectionReason, int] = Field(default_factory=dict)
    duplicates_removed: int = 0


class Cleaner:
    """
    Removes invalid records and keeps the first occurrence of each duplicate.

    Duplicates share (invoice_id, stock_code, customer_id, invoice_timestamp,
    quantity). "First" means lowest ingestion index (row_number), with input
    position breaking ties between equal indexes.
    """

    def __init__(self, rule_engine: RuleEngine | None = None):
        """
        Initialize cleaner.

        Args:
            rule_engine: Validator used to classify records (default sales rules if None)
        """
        self.rule_engine = rule_engine or RuleEngine()

    def clean(self, records: Sequence[SalesRecord]) -> tuple[SalesRecord, ...]:
        """Return the clean record set for records."""
        return self.clean_with_report(records).records

    def clean_with_report(self, records: Sequence[SalesRecord]) -> CleaningResult:
        """
        Clean records and report why every dropped record was dropped.

        Args:
            records: Parsed records in ingestion order

        Returns:
            CleaningResult with the clean records and drop counts
        """
        rejections: Counter[RejectionReason] = Counter()
        valid: list[tuple[int, SalesRecord]] = []

        for position, record in enumerate(records):
            result = self.rule_engine.classify(record)
            if result.passed:
                valid.append((position, record))
            else:
                rejections[result.reason] += 1
                logger.debug(
                    "Rejected record",
                    extra={"record_id": result.record_id, "reason": result.reason.value},
                )

        survivors = self._first_occurrences(valid)

        duplicates_removed = len(valid) - len(survivors)
        if duplicates_removed:
            logger.info(f"Removed {duplicates_removed} duplicate records")

        return CleaningResult(
            records=tuple(record for _, record in survivors),
            rejections=dict(rejections),
            duplicates_removed=duplicates_removed,
        )

    @staticmethod
    def _first_occurrences(
        valid: list[tuple[int, SalesRecord]]
    ) -> list[tuple[int, SalesRecord]]:
        """Keep the lowest-ordered record per duplicate key, in input order."""
        keepers: dict[DuplicateKey, tuple[int, int]] = {}
        for position, record in valid:
            order = (record.row_number, position)
            current = keepers.get(record.duplicate_key)
            if current is None or order < current:
                keepers[record.duplicate_key] = order

        kept_positions = {position for _, position in keepers.values()}
        return [(position, record) for position, record in valid if position in kept_positions]


def find_duplicate_groups(records: Iterable[SalesRecord]) -> dict[tuple[str, str, str | None], int]:
    """
    Count invoice lines sharing (invoice_id, stock_code, customer_id).

    A data quality check only: these groups are broader than the duplicates
    the cleaner removes, since they ignore timestamp and quantity.

    Returns:
        Mapping of key to occurrence count, for keys seen more than once
    """
    counts = Counter((r.invoice_id, r.stock_code, r.customer_id) for r in records)
    return {key: count for key, count in counts.items() if count > 1}


_default_cleaner: Cleaner | None = None


def clean(records: Sequence[SalesRecord]) -> tuple[SalesRecord, ...]:
    """Clean records with the default sales rules."""
    global _default_cleaner
    if _default_cleaner is None:
        _default_cleaner = Cleaner()
    return _default_cleaner.clean(records)

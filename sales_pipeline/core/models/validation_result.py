"""
ValidationResult model representing the outcome of classifying a record (ephemeral).
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class RejectionReason(str, Enum):
    """Why a record was dropped from the clean set, in rule precedence order."""

    MISSING_CUSTOMER_ID = "MissingCustomerId"
    NON_POSITIVE_MEASURE = "NonPositiveMeasure"
    INVALID_TIMESTAMP = "InvalidTimestamp"
    INVALID_STOCK_CODE = "InvalidStockCode"


class ValidationResult(BaseModel):
    """
    Outcome of classifying a record (ephemeral, used during cleaning).

    Attributes:
        record_id: Which record was validated (invoice id and ingestion index)
        passed: Overall validation status
        reason: Rejection reason of the first failing rule, None when passed
        passed_rules: Rules that succeeded
        failed_rules: Rules that failed, in evaluation order
        warnings: Non-blocking rules that failed
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "record_id": "536365#0",
                "passed": False,
                "reason": "MissingCustomerId",
                "passed_rules": ["quantity_positive", "unit_price_positive"],
                "failed_rules": ["customer_id_required"],
                "warnings": [],
            }
        },
    )

    record_id: str
    passed: bool
    reason: RejectionReason | None = None
    passed_rules: Tuple[str, ...] = ()
    failed_rules: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @model_validator(mode="after")
    def check_passed_consistency(self) -> "ValidationResult":
        """Validate that passed records carry no reason and failed ones do."""
        if self.passed and (self.failed_rules or self.reason is not None):
            raise ValueError("passed=True but a rejection was recorded")
        if not self.passed and self.reason is None:
            raise ValueError("passed=False requires a rejection reason")
        return self

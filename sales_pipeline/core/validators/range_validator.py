"""
RangeValidator - validates numeric values are within a specified range.
"""

from decimal import Decimal
from typing import Any

from .base_validator import BaseValidator


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within a specified range.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    - min_exclusive: Minimum value (exclusive)
    - max_exclusive: Maximum value (exclusive)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, reason=None):
        super().__init__(field_name, parameters, reason)

        self.min_value = self.parameters.get("min")
        self.max_value = self.parameters.get("max")
        self.min_exclusive = self.parameters.get("min_exclusive")
        self.max_exclusive = self.parameters.get("max_exclusive")

        if all(v is None for v in [self.min_value, self.max_value, self.min_exclusive, self.max_exclusive]):
            raise ValueError("RangeValidator requires at least one of: min, max, min_exclusive, max_exclusive")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate that the value is within the specified range.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If value is missing, not numeric, or outside the range
        """
        if value is None:
            raise self.fail("Value is null")

        if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
            raise self.fail(f"Value must be numeric, got {type(value).__name__}")

        if self.min_value is not None and value < self.min_value:
            raise self.fail(f"Value {value} is less than minimum {self.min_value}")

        if self.min_exclusive is not None and value <= self.min_exclusive:
            raise self.fail(f"Value {value} must be greater than {self.min_exclusive}")

        if self.max_value is not None and value > self.max_value:
            raise self.fail(f"Value {value} exceeds maximum {self.max_value}")

        if self.max_exclusive is not None and value >= self.max_exclusive:
            raise self.fail(f"Value {value} must be less than {self.max_exclusive}")

    @property
    def rule_type(self) -> str:
        return "range"

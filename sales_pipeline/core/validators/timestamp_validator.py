"""
TimestampValidator - validates that an invoice date parsed into a real timestamp.
"""

from datetime import datetime
from typing import Any

from .base_validator import BaseValidator


class TimestampValidator(BaseValidator):
    """
    Validates a date-time field and the raw text it was parsed from.

    Fails if the parsed value is missing (the loader could not parse it) or
    if the raw text begins with a letter, which marks free-text junk such as
    "Unknown" or "N/A" that some parsers would otherwise accept.

    Parameters:
    - raw_field: Name of the field holding the raw text (optional)
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, reason=None):
        super().__init__(field_name, parameters, reason)
        self.raw_field = self.parameters.get("raw_field")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate the timestamp.

        Args:
            value: The parsed timestamp (or None)
            record: The entire record

        Raises:
            ValidationError: If the timestamp is missing or its text is not a date
        """
        if self.raw_field:
            raw = record.get(self.raw_field)
            if isinstance(raw, str) and raw.strip()[:1].isalpha():
                raise self.fail(f"Timestamp text '{raw}' starts with a letter")

        if not isinstance(value, datetime):
            raise self.fail("Timestamp could not be parsed")

    @property
    def rule_type(self) -> str:
        return "timestamp"

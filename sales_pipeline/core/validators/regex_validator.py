"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates a field value against a regular expression pattern.

    The pattern must match the whole value; a trailing newline is not
    absorbed by "$".

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - flags: Optional regex flags (e.g., re.IGNORECASE)
    - reject_on_match: Fail when the value matches instead of when it does not
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None, reason=None):
        super().__init__(field_name, parameters, reason)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        flags = self.parameters.get("flags", 0)
        self.reject_on_match = bool(self.parameters.get("reject_on_match", False))

        try:
            if isinstance(pattern, str):
                self.pattern: Pattern = re.compile(pattern, flags)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate the value against the regex pattern.

        Args:
            value: The field value to validate
            record: The entire record

        Raises:
            ValidationError: If the value fails the match test
        """
        # None is handled by required_field
        if value is None:
            return

        value_str = value if isinstance(value, str) else str(value)
        matched = self.pattern.fullmatch(value_str) is not None

        if self.reject_on_match and matched:
            raise self.fail(f"Value '{value_str}' matches rejected pattern '{self.pattern.pattern}'")

        if not self.reject_on_match and not matched:
            raise self.fail(f"Value '{value_str}' does not match pattern '{self.pattern.pattern}'")

    @property
    def rule_type(self) -> str:
        return "regex"

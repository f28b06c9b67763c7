"""
Base validator interface for all validation rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any

from sales_pipeline.core.models import RejectionReason


class ValidationError(Exception):
    """Raised when a validation rule fails."""

    def __init__(
        self,
        rule_name: str,
        field_name: str,
        message: str,
        reason: RejectionReason | None = None,
    ):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        self.reason = reason
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements a specific validation rule type
    (required_field, range, timestamp, regex) and reports failures
    under the rejection reason it was configured with.
    """

    def __init__(
        self,
        field_name: str,
        parameters: dict[str, Any] | None = None,
        reason: RejectionReason | None = None,
    ):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
            parameters: Rule-specific parameters (e.g., min_exclusive for range)
            reason: Rejection reason reported when the rule fails
        """
        self.field_name = field_name
        self.parameters = parameters or {}
        self.reason = reason

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate
            record: The entire record (for context-dependent validation)

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def fail(self, message: str) -> ValidationError:
        """Build the error this validator raises."""
        return ValidationError(
            rule_name=self.rule_type,
            field_name=self.field_name,
            message=message,
            reason=self.reason,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"

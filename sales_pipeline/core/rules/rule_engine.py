"""
Rule engine for classifying sales records.

The rule engine loads validation rules, applies them to records in
precedence order, and produces validation results.
"""

from typing import Any

from sales_pipeline.core.models import RejectionReason, SalesRecord, ValidationResult
from sales_pipeline.core.validators import (
    BaseValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    TimestampValidator,
    ValidationError,
)

from .rule_config import default_sales_rules


class RuleEngine:
    """
    Classifies records as valid or invalid.

    Applies every enabled rule in configured order. The first failing
    error-severity rule decides the rejection reason; failing warning rules
    are reported but never reject a record.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "range": RangeValidator,
        "regex": RegexValidator,
        "timestamp": TimestampValidator,
    }

    def __init__(self, rules: list[dict[str, Any]] | None = None):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (required_field, range, regex, timestamp)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - severity: str (error or warning)
                   - enabled: bool (default True)
                   - reason: RejectionReason (required for error severity)
                   Defaults to the standard sales cleaning rules.
        """
        self.rules = rules if rules is not None else default_sales_rules()
        self.validators: list[tuple[str, str, BaseValidator]] = []
        self._build_validators()

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]
            field_name = rule["field_name"]
            parameters = rule.get("parameters", {})
            severity = rule.get("severity", "error")
            reason = rule.get("reason")

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            if severity == "error" and reason is None:
                raise ValueError(f"Rule '{rule_name}' has no rejection reason")

            try:
                validator = validator_class(
                    field_name,
                    parameters,
                    RejectionReason(reason) if reason is not None else None,
                )
            except ValueError as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}")

            self.validators.append((rule_name, severity, validator))

    def classify(self, record: SalesRecord) -> ValidationResult:
        """
        Classify a sales record against all rules.

        Never raises for a well-formed SalesRecord: any rule failure maps
        to a rejection reason.

        Args:
            record: The SalesRecord to classify

        Returns:
            ValidationResult containing pass/fail status and rejection reason
        """
        passed_rules = []
        failed_rules = []
        warnings = []
        reason = None

        payload = record.model_dump()

        for rule_name, severity, validator in self.validators:
            value = payload.get(validator.field_name)

            try:
                validator.validate(value, payload)
                passed_rules.append(rule_name)

            except ValidationError as e:
                if severity == "error":
                    failed_rules.append(rule_name)
                    if reason is None:
                        reason = e.reason
                else:
                    warnings.append(rule_name)

        return ValidationResult(
            record_id=f"{record.invoice_id}#{record.row_number}",
            passed=not failed_rules,
            reason=reason,
            passed_rules=passed_rules,
            failed_rules=failed_rules,
            warnings=warnings,
        )

    def is_valid(self, record: SalesRecord) -> bool:
        return self.classify(record).passed

    def validate_batch(self, records: list[SalesRecord]) -> list[ValidationResult]:
        """
        Classify a batch of records.

        Args:
            records: List of SalesRecord objects

        Returns:
            List of ValidationResult objects, one per record
        """
        return [self.classify(record) for record in records]

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and types
        """
        return {
            "total_rules": len(self.validators),
            "rules_by_type": self._count_by_type(),
            "rules_by_severity": self._count_by_severity(),
        }

    def _count_by_type(self) -> dict[str, int]:
        """Count validators by rule type."""
        counts: dict[str, int] = {}
        for _, _, validator in self.validators:
            rule_type = validator.rule_type
            counts[rule_type] = counts.get(rule_type, 0) + 1
        return counts

    def _count_by_severity(self) -> dict[str, int]:
        """Count validators by severity."""
        counts: dict[str, int] = {}
        for _, severity, _ in self.validators:
            counts[severity] = counts.get(severity, 0) + 1
        return counts


_default_engine: RuleEngine | None = None


def classify(record: SalesRecord) -> ValidationResult:
    """Classify a record with the default sales rules."""
    global _default_engine
    if _default_engine is None:
        _default_engine = RuleEngine()
    return _default_engine.classify(record)

"""
Rule configuration management.

Loads validation rules from YAML files and provides utilities
for managing rule configurations.
"""

from pathlib import Path
from typing import Any

import yaml

from sales_pipeline.core.models import RejectionReason


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Expected YAML format (rules run in file order):
    ```yaml
    rules:
      customer_id:
        - type: required_field
          reason: MissingCustomerId

      quantity:
        - type: range
          reason: NonPositiveMeasure
          params:
            min_exclusive: 0

      stock_code:
        - type: regex
          reason: InvalidStockCode
          params:
            pattern: "^[A-Za-z]+$"
            reject_on_match: true
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from YAML file.

        Returns:
            List of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If YAML is invalid or missing required fields
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "rules" not in config:
            raise ValueError("Configuration file must contain 'rules' section")

        rules = []
        field_rules = config["rules"]

        for field_name, field_rule_list in field_rules.items():
            if not isinstance(field_rule_list, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")

            for idx, rule_def in enumerate(field_rule_list):
                rule = self._parse_rule(field_name, rule_def, idx)
                rules.append(rule)

        return rules

    def _parse_rule(self, field_name: str, rule_def: dict[str, Any], idx: int) -> dict[str, Any]:
        """
        Parse a single rule definition.

        Args:
            field_name: The field this rule applies to
            rule_def: The rule definition from YAML
            idx: Index of this rule for the field (for naming)

        Returns:
            Parsed rule dictionary

        Raises:
            ValueError: If rule definition is invalid
        """
        if "type" not in rule_def:
            raise ValueError(f"Rule for field '{field_name}' is missing 'type'")

        rule_type = rule_def["type"]
        rule_name = rule_def.get("name", f"{field_name}_{rule_type}_{idx}")
        parameters = rule_def.get("params", rule_def.get("parameters", {}))

        severity = rule_def.get("severity", "error")
        if severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity '{severity}' for rule '{rule_name}'. Must be 'error' or 'warning'")

        reason = rule_def.get("reason")
        if reason is None:
            if severity == "error":
                raise ValueError(f"Rule '{rule_name}' must declare a rejection 'reason'")
        else:
            try:
                reason = RejectionReason(reason)
            except ValueError:
                valid = ", ".join(r.value for r in RejectionReason)
                raise ValueError(f"Unknown reason '{reason}' for rule '{rule_name}'. Must be one of: {valid}")

        enabled = rule_def.get("enabled", True)

        return {
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": severity,
            "enabled": enabled,
            "reason": reason,
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (defaults, tests, dynamic rules).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []

    def _add(
        self,
        rule_name: str,
        rule_type: str,
        field_name: str,
        parameters: dict[str, Any],
        reason: RejectionReason,
    ) -> "RuleConfigBuilder":
        self.rules.append({
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "severity": "error",
            "enabled": True,
            "reason": reason,
        })
        return self

    def add_required_field(
        self,
        field_name: str,
        reason: RejectionReason,
        allow_empty_string: bool = False
    ) -> "RuleConfigBuilder":
        """Add a required field rule."""
        return self._add(
            f"{field_name}_required",
            "required_field",
            field_name,
            {"allow_empty_string": allow_empty_string},
            reason,
        )

    def add_range(
        self,
        field_name: str,
        reason: RejectionReason,
        min_value: float | None = None,
        max_value: float | None = None,
        min_exclusive: float | None = None,
    ) -> "RuleConfigBuilder":
        """Add a range validation rule."""
        params = {}
        if min_value is not None:
            params["min"] = min_value
        if max_value is not None:
            params["max"] = max_value
        if min_exclusive is not None:
            params["min_exclusive"] = min_exclusive

        return self._add(f"{field_name}_range", "range", field_name, params, reason)

    def add_timestamp(
        self,
        field_name: str,
        reason: RejectionReason,
        raw_field: str | None = None
    ) -> "RuleConfigBuilder":
        """Add a timestamp validation rule."""
        params = {"raw_field": raw_field} if raw_field else {}
        return self._add(f"{field_name}_timestamp", "timestamp", field_name, params, reason)

    def add_regex(
        self,
        field_name: str,
        pattern: str,
        reason: RejectionReason,
        reject_on_match: bool = False
    ) -> "RuleConfigBuilder":
        """Add a regex validation rule."""
        return self._add(
            f"{field_name}_regex",
            "regex",
            field_name,
            {"pattern": pattern, "reject_on_match": reject_on_match},
            reason,
        )

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules


def default_sales_rules() -> list[dict[str, Any]]:
    """
    The cleaning rules for the sales table, in precedence order.

    Mirrored by config/validation_rules.yaml.
    """
    return RuleConfigBuilder() \
        .add_required_field("customer_id", RejectionReason.MISSING_CUSTOMER_ID) \
        .add_range("quantity", RejectionReason.NON_POSITIVE_MEASURE, min_exclusive=0) \
        .add_range("unit_price", RejectionReason.NON_POSITIVE_MEASURE, min_exclusive=0) \
        .add_timestamp("invoice_timestamp", RejectionReason.INVALID_TIMESTAMP, raw_field="invoice_date_text") \
        .add_regex("stock_code", r"^[A-Za-z]+$", RejectionReason.INVALID_STOCK_CODE, reject_on_match=True) \
        .build()

"""
Data quality models: per-batch drop attribution and raw-input profiling.
"""

from types import MappingProxyType
from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .validation_result import RejectionReason


class DataQualitySummary(BaseModel):
    """
    How many records one batch received, dropped and kept, and why.

    Attributes:
        total_records: Raw rows received from the loader
        malformed_records: Rows that could not be parsed into a SalesRecord
        rejections: Count of rejected records per rejection reason (read-only)
        duplicates_removed: Valid records discarded as later duplicates
        clean_records: Records that survived cleaning
    """

    model_config = ConfigDict(frozen=True)

    total_records: int = Field(0, ge=0)
    malformed_records: int = Field(0, ge=0)
    rejections: Mapping[RejectionReason, int] = Field(default_factory=dict, validate_default=True)
    duplicates_removed: int = Field(0, ge=0)
    clean_records: int = Field(0, ge=0)

    @field_validator("rejections", mode="after")
    @classmethod
    def freeze_rejections(cls, v: Mapping[RejectionReason, int]) -> Mapping[RejectionReason, int]:
        return MappingProxyType(dict(v))

    @field_serializer("rejections")
    def serialize_rejections(self, v: Mapping[RejectionReason, int]) -> Dict[str, int]:
        return {reason.value: count for reason, count in v.items()}

    @property
    def rejected_records(self) -> int:
        return sum(self.rejections.values())


class MissingValueSummary(BaseModel):
    """Null or blank value counts per raw input column (read-only)."""

    model_config = ConfigDict(frozen=True)

    total_rows: int = Field(0, ge=0)
    missing_by_field: Mapping[str, int] = Field(default_factory=dict, validate_default=True)

    @field_validator("missing_by_field", mode="after")
    @classmethod
    def freeze_counts(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @field_serializer("missing_by_field")
    def serialize_counts(self, v: Mapping[str, int]) -> Dict[str, int]:
        return dict(v)

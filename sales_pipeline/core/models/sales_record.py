"""
SalesRecord model representing a single invoice line of the sales table.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


DuplicateKey = tuple[str, str, str | None, datetime | None, int]


class SalesRecord(BaseModel):
    """
    One invoice line, created once by the loader and never mutated.

    Attributes:
        invoice_id: Invoice number
        stock_code: Product code (pure-letter codes are promotional/test entries)
        description: Product description (passthrough)
        quantity: Units sold
        invoice_timestamp: Parsed invoice date-time, None if unparseable
        invoice_date_text: Invoice date-time exactly as received
        unit_price: Price per unit, 2 fractional digits
        customer_id: Customer identifier
        country: Customer country
        row_number: 0-based ingestion index within the batch
    """

    model_config = ConfigDict(frozen=True)

    invoice_id: str
    stock_code: str
    description: str | None = None
    quantity: int
    invoice_timestamp: datetime | None = None
    invoice_date_text: str | None = None
    unit_price: Decimal
    customer_id: str | None = None
    country: str | None = None
    row_number: int = Field(0, ge=0)

    @property
    def revenue(self) -> Decimal:
        """Line revenue (quantity * unit price)."""
        return self.quantity * self.unit_price

    @property
    def invoice_date(self) -> date | None:
        if self.invoice_timestamp is None:
            return None
        return self.invoice_timestamp.date()

    @property
    def duplicate_key(self) -> DuplicateKey:
        """Fields that identify the same invoice line entered twice."""
        return (
            self.invoice_id,
            self.stock_code,
            self.customer_id,
            self.invoice_timestamp,
            self.quantity,
        )

"""
Parses raw loader rows into SalesRecord values.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping

from sales_pipeline.core.models import SalesRecord


CENT = Decimal("0.01")

# Column limits of the sales table: UnitPrice DECIMAL(10,2), Quantity INT
MAX_UNIT_PRICE = Decimal("99999999.99")
MAX_QUANTITY = 2**31 - 1

# Accepted column names per field: source table headers first, then snake_case
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "invoice_id": ("InvoiceNo", "invoice_no", "invoice_id"),
    "stock_code": ("StockCode", "stock_code"),
    "description": ("Description", "description"),
    "quantity": ("Quantity", "quantity"),
    "invoice_date": ("InvoiceDate", "invoice_date", "invoice_timestamp"),
    "unit_price": ("UnitPrice", "unit_price"),
    "customer_id": ("CustomerID", "customer_id"),
    "country": ("Country", "country"),
}

TIMESTAMP_FORMATS = (
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%Y-%m-%d",
)


class MalformedRecordError(ValueError):
    """Raised when a raw row cannot be shaped into a SalesRecord."""

    def __init__(self, row_number: int, field_name: str, message: str):
        self.row_number = row_number
        self.field_name = field_name
        self.message = message
        super().__init__(f"row {row_number}: {field_name}: {message}")


def _lookup(raw: Mapping[str, Any], field: str) -> Any:
    for column in FIELD_ALIASES[field]:
        if column in raw:
            return raw[column]
    return None


def _text(value: Any) -> str | None:
    """Stripped text form of a value; blank becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _decimal(value: Any, row_number: int, field: str) -> Decimal:
    text = _text(value)
    if text is None:
        raise MalformedRecordError(row_number, field, "value is missing")
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise MalformedRecordError(row_number, field, f"'{text}' is not a number")
    if not number.is_finite():
        raise MalformedRecordError(row_number, field, f"'{text}' is not a finite number")
    return number


def parse_quantity(value: Any, row_number: int = 0) -> int:
    """Whole-number quantity within the INT column range."""
    if isinstance(value, int) and not isinstance(value, bool):
        number = Decimal(value)
    else:
        number = _decimal(value, row_number, "quantity")
    if abs(number) > MAX_QUANTITY:
        raise MalformedRecordError(row_number, "quantity", f"'{value}' is out of range")
    if number != number.to_integral_value():
        raise MalformedRecordError(row_number, "quantity", f"'{value}' is not a whole number")
    return int(number)


def parse_unit_price(value: Any, row_number: int = 0) -> Decimal:
    """Unit price rounded half-up to cents, within the DECIMAL(10,2) column range."""
    number = _decimal(value, row_number, "unit_price")
    if abs(number) >= MAX_UNIT_PRICE + CENT / 2:
        raise MalformedRecordError(row_number, "unit_price", f"'{value}' is out of range")
    return number.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an invoice date-time.

    Accepts datetime values, ISO 8601 text and the day-first/month-first
    layouts found in sales exports. Returns None instead of raising.
    """
    if isinstance(value, datetime):
        return value

    text = _text(value)
    if text is None:
        return None

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return None


def parse_sales_row(raw: Mapping[str, Any], row_number: int) -> SalesRecord:
    """
    Shape one raw row into a SalesRecord.

    Unparseable dates are kept (as a None timestamp plus the raw text) so the
    validator can reject them with a reason; unparseable numbers and missing
    identifiers make the row malformed.

    Args:
        raw: Column name to value mapping, as produced by the loader
        row_number: 0-based ingestion index of the row

    Returns:
        The parsed SalesRecord

    Raises:
        MalformedRecordError: If the row cannot be parsed
    """
    invoice_id = _text(_lookup(raw, "invoice_id"))
    if invoice_id is None:
        raise MalformedRecordError(row_number, "invoice_id", "value is missing")

    stock_code = _text(_lookup(raw, "stock_code"))
    if stock_code is None:
        raise MalformedRecordError(row_number, "stock_code", "value is missing")

    raw_date = _lookup(raw, "invoice_date")
    description = _lookup(raw, "description")

    return SalesRecord(
        invoice_id=invoice_id,
        stock_code=stock_code,
        description=None if description is None else str(description),
        quantity=parse_quantity(_lookup(raw, "quantity"), row_number),
        invoice_timestamp=parse_timestamp(raw_date),
        invoice_date_text=None if raw_date is None else str(raw_date),
        unit_price=parse_unit_price(_lookup(raw, "unit_price"), row_number),
        customer_id=_text(_lookup(raw, "customer_id")),
        country=_text(_lookup(raw, "country")),
        row_number=row_number,
    )

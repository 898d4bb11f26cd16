"""Translation between the UI's display fields and the storage columns."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .exceptions import InvalidInvoiceError
from .models import Invoice, InvoiceRecord

# display alias -> storage column
DISPLAY_TO_STORAGE = {
    "CLIENT": "client",
    "INVOICE NO.": "invoice_no",
    "INVOICE DATE": "invoice_date",
    "CLIENT TRN": "client_trn",
    "DESCRIPTION": "description",
    "INVOICE SUB-TOTAL": "invoice_subtotal",
    "REBATE": "rebate",
    "INVOICE SUB-TOTAL AFTER REBATE": "invoice_subtotal_after_rebate",
    "VAT % AMOUNT": "vat_amount",
    "TOTAL INVOICE AMOUNT": "total_invoice_amount",
    "Sales Person": "sales_person",
    "_year": "year",
}

AMOUNT_COLUMNS = (
    "invoice_subtotal",
    "rebate",
    "invoice_subtotal_after_rebate",
    "vat_amount",
    "total_invoice_amount",
)

# slash and dash dates are month-first
_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d", "%m/%d/%Y", "%m-%d-%Y")


def parse_amount(value: Any) -> float:
    """Parse an amount the way the form does: blank or garbage counts as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "")
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return 0.0


def format_amount(value: Any) -> str:
    return f"{parse_amount(value):.2f}"


def parse_invoice_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a display or storage date string, returning None when it can't be read."""
    if not value or not str(value).strip():
        return None
    text = str(value).strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def display_date(value: Optional[str]) -> str:
    """Date part (``YYYY-MM-DD``) of a stored timestamp."""
    if not value:
        return ""
    parsed = parse_invoice_date(value)
    if parsed is None:
        return str(value).split(" ")[0].split("T")[0]
    return parsed.date().isoformat()


def to_record(invoice: Invoice) -> InvoiceRecord:
    """Convert a display invoice into a storage row."""
    invoice_no = invoice.invoice_no.strip()
    if not invoice_no:
        raise InvalidInvoiceError("Invoice number is required")
    parsed_date = parse_invoice_date(invoice.invoice_date)
    if parsed_date is None:
        raise InvalidInvoiceError(f"Invalid invoice date: {invoice.invoice_date!r}")

    return InvoiceRecord(
        id=invoice.id,
        client=invoice.client,
        invoice_no=invoice_no,
        invoice_date=parsed_date.isoformat(),
        client_trn=invoice.client_trn or "",
        description=invoice.description,
        invoice_subtotal=parse_amount(invoice.invoice_subtotal),
        rebate=parse_amount(invoice.rebate),
        invoice_subtotal_after_rebate=parse_amount(invoice.invoice_subtotal_after_rebate),
        vat_amount=parse_amount(invoice.vat_amount),
        total_invoice_amount=parse_amount(invoice.total_invoice_amount),
        sales_person=invoice.sales_person,
        year=invoice.year,
    )


def from_record(row: Dict[str, Any]) -> Invoice:
    """Convert a storage row into a display invoice."""
    values: Dict[str, Any] = {"id": row.get("id")}
    for alias, column in DISPLAY_TO_STORAGE.items():
        raw = row.get(column)
        if column in AMOUNT_COLUMNS:
            values[alias] = format_amount(raw)
        elif column == "invoice_date":
            values[alias] = display_date(raw)
        else:
            values[alias] = raw or ""
    return Invoice.model_validate(values)


def record_payload(record: InvoiceRecord) -> Dict[str, Any]:
    """Column dict for insert/update, without the surrogate key."""
    return record.model_dump(exclude={"id"})

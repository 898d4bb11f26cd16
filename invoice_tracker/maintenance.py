"""
One-off maintenance utilities: bulk migration of legacy JSON invoices and
wiping the invoices table.

Migration input uses the display field names (``CLIENT``, ``INVOICE NO.``...).
Rows without a client, invoice number, description or date are skipped;
a date that can't be parsed falls back to the current timestamp so the rest
of the batch still goes in.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Tuple

from .exceptions import StorageError
from .fields import parse_amount, parse_invoice_date
from .models import InvoiceRecord

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("CLIENT", "INVOICE NO.", "DESCRIPTION", "INVOICE DATE")


@dataclass
class MigrationResult:
    success: bool
    message: str
    count: int = 0
    skipped: List[str] = field(default_factory=list)


def _text(row: Dict[str, Any], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value).strip()


def migration_date(row: Dict[str, Any]) -> str:
    raw = _text(row, "INVOICE DATE")
    parsed = parse_invoice_date(raw)
    if parsed is None:
        parsed = parse_invoice_date(raw.split(" ")[0])
    if parsed is None:
        logger.warning("Invalid date for invoice %s: %r", row.get("INVOICE NO."), raw)
        parsed = datetime.now(timezone.utc)
    return parsed.isoformat()


def to_migration_record(row: Dict[str, Any]) -> InvoiceRecord:
    return InvoiceRecord(
        client=_text(row, "CLIENT"),
        invoice_no=_text(row, "INVOICE NO."),
        invoice_date=migration_date(row),
        client_trn=_text(row, "CLIENT TRN"),
        description=_text(row, "DESCRIPTION"),
        invoice_subtotal=parse_amount(row.get("INVOICE SUB-TOTAL")),
        rebate=parse_amount(row.get("REBATE")),
        invoice_subtotal_after_rebate=parse_amount(row.get("INVOICE SUB-TOTAL AFTER REBATE")),
        vat_amount=parse_amount(row.get("VAT % AMOUNT")),
        total_invoice_amount=parse_amount(row.get("TOTAL INVOICE AMOUNT")),
        sales_person=_text(row, "Sales Person"),
        year=_text(row, "_year"),
    )


def prepare_migration(rows: Iterable[Dict[str, Any]]) -> Tuple[List[InvoiceRecord], List[str]]:
    """Split source rows into storable records and descriptions of skipped rows."""
    records: List[InvoiceRecord] = []
    skipped: List[str] = []
    for index, row in enumerate(rows):
        missing = [key for key in REQUIRED_FIELDS if not _text(row, key)]
        if missing:
            label = _text(row, "INVOICE NO.") or f"row {index}"
            logger.warning("Skipping %s: missing %s", label, ", ".join(missing))
            skipped.append(label)
            continue
        records.append(to_migration_record(row))
    return records, skipped


def migrate_invoices(db, rows: Iterable[Dict[str, Any]], batch_size: int = 100) -> MigrationResult:
    logger.info("Starting migration of invoices to database...")
    records, skipped = prepare_migration(rows)
    logger.info("Migrating %d invoices (%d skipped)...", len(records), len(skipped))
    try:
        count = db.insert_many(records, batch_size=batch_size)
    except StorageError as e:
        logger.error("Migration error: %s", e)
        return MigrationResult(success=False, message=str(e), skipped=skipped)

    logger.info("Migration completed successfully!")
    return MigrationResult(
        success=True,
        message=f"Successfully migrated {count} invoices",
        count=count,
        skipped=skipped,
    )


def reset_invoices(db) -> MigrationResult:
    logger.info("Deleting all invoices from database...")
    try:
        count = db.delete_all()
    except StorageError as e:
        logger.error("Error deleting invoices: %s", e)
        return MigrationResult(success=False, message=str(e))
    return MigrationResult(success=True, message="All invoices deleted", count=count)

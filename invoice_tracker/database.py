import logging
from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from .config import get_settings
from .exceptions import DuplicateInvoiceError, InvoiceNotFoundError, StorageError
from .fields import from_record, record_payload, to_record
from .models import Invoice, InvoiceRecord

logger = logging.getLogger(__name__)

TABLE = "invoices"
# every real row has a generated uuid, so "id != nil uuid" matches the whole table
NIL_UUID = "00000000-0000-0000-0000-000000000000"


class DatabaseClient:
    def __init__(self, client: Optional[Client] = None):
        if client is None:
            settings = get_settings()
            client = create_client(settings.supabase_url, settings.supabase_key)
        self.supabase: Client = client

    def _execute(self, query, action: str) -> List[Dict[str, Any]]:
        try:
            result = query.execute()
        except Exception as e:
            logger.error("Error %s: %s", action, e)
            raise StorageError(f"Error {action}: {e}") from e
        return result.data or []

    def fetch_all(self) -> List[Invoice]:
        """All invoices, newest invoice date first"""
        query = self.supabase.table(TABLE).select("*").order("invoice_date", desc=True)
        rows = self._execute(query, "fetching invoices")
        return [from_record(row) for row in rows]

    def get_invoice(self, invoice_id: str) -> Invoice:
        query = self.supabase.table(TABLE).select("*").eq("id", invoice_id)
        rows = self._execute(query, f"fetching invoice {invoice_id}")
        if not rows:
            raise InvoiceNotFoundError(invoice_id)
        return from_record(rows[0])

    def _ids_for_number(self, invoice_no: str) -> List[str]:
        query = self.supabase.table(TABLE).select("id").eq("invoice_no", invoice_no)
        rows = self._execute(query, f"looking up invoice number {invoice_no}")
        return [str(row["id"]) for row in rows]

    def insert_invoice(self, invoice: Invoice) -> Invoice:
        """Insert a new invoice; the invoice number must not be in use yet"""
        record = to_record(invoice)
        if self._ids_for_number(record.invoice_no):
            raise DuplicateInvoiceError(record.invoice_no)

        query = self.supabase.table(TABLE).insert(record_payload(record))
        rows = self._execute(query, f"inserting invoice {record.invoice_no}")
        logger.info("Inserted invoice %s", record.invoice_no)
        return from_record(rows[0]) if rows else from_record(record.model_dump())

    def update_invoice(self, invoice_id: str, invoice: Invoice) -> Invoice:
        """Overwrite every column of the invoice with surrogate key ``invoice_id``"""
        record = to_record(invoice)
        clashing = [other for other in self._ids_for_number(record.invoice_no) if other != str(invoice_id)]
        if clashing:
            raise DuplicateInvoiceError(record.invoice_no)

        query = self.supabase.table(TABLE).update(record_payload(record)).eq("id", invoice_id)
        rows = self._execute(query, f"updating invoice {invoice_id}")
        if not rows:
            raise InvoiceNotFoundError(invoice_id)
        logger.info("Updated invoice %s (%s)", invoice_id, record.invoice_no)
        return from_record(rows[0])

    def update_invoice_by_number(self, invoice_no: str, invoice: Invoice) -> Invoice:
        """Update keyed by invoice number; exactly one stored row may carry it"""
        if not invoice_no or not invoice_no.strip():
            raise InvoiceNotFoundError(repr(invoice_no))
        ids = self._ids_for_number(invoice_no)
        if not ids:
            raise InvoiceNotFoundError(invoice_no)
        if len(ids) > 1:
            raise DuplicateInvoiceError(
                invoice_no, f"Invoice number {invoice_no!r} matches {len(ids)} records"
            )
        return self.update_invoice(ids[0], invoice)

    def insert_many(self, records: List[InvoiceRecord], batch_size: int = 100) -> int:
        """Insert rows in batches; stops at the first failing batch"""
        inserted = 0
        for start in range(0, len(records), batch_size):
            batch = [record_payload(record) for record in records[start:start + batch_size]]
            self._execute(self.supabase.table(TABLE).insert(batch), "inserting batch")
            inserted += len(batch)
            logger.info("Inserted %d/%d invoices", inserted, len(records))
        return inserted

    def delete_all(self) -> int:
        query = self.supabase.table(TABLE).delete().neq("id", NIL_UUID)
        rows = self._execute(query, "deleting invoices")
        logger.info("Deleted %d invoices", len(rows))
        return len(rows)

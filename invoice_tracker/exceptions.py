"""Exception types raised by the invoice tracker."""

from typing import Optional


class InvoiceTrackerError(Exception):
    """Base class for all invoice tracker errors."""


class StorageError(InvoiceTrackerError):
    """A read or write against the invoices table failed."""


class InvoiceNotFoundError(InvoiceTrackerError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Invoice {key} not found")


class DuplicateInvoiceError(InvoiceTrackerError):
    def __init__(self, invoice_no: str, message: Optional[str] = None):
        self.invoice_no = invoice_no
        super().__init__(message or f"Invoice number {invoice_no!r} already exists")


class FileTooLargeError(InvoiceTrackerError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large: {size / 1024 / 1024:.2f}MB "
            f"(maximum {limit / 1024 / 1024:.0f}MB)"
        )


class ExtractionError(InvoiceTrackerError):
    """Failure while extracting fields from an invoice image.

    ``status_code`` is the HTTP status the extraction endpoint answers with.
    """

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class InvalidInvoiceError(InvoiceTrackerError):
    """Invoice values that cannot be stored, such as a blank number or bad date."""

"""
Filtering and aggregation over the loaded invoice list.

Everything here is pure and synchronous: the listing is re-derived from the
full record set every time the records or the filter criteria change.
"""

from typing import Iterable, List, Optional

from .fields import display_date, parse_amount
from .models import FilterOptions, Invoice, InvoiceFilter, InvoiceListing, InvoiceSummary

ALL = "all"


def _active(value: Optional[str]) -> bool:
    return bool(value) and value != ALL


def _distinct(values: Iterable[str]) -> List[str]:
    return sorted({value for value in values if value})


def distinct_years(invoices: Iterable[Invoice]) -> List[str]:
    return _distinct(invoice.year for invoice in invoices)


def distinct_sales_persons(invoices: Iterable[Invoice]) -> List[str]:
    return _distinct(invoice.sales_person for invoice in invoices)


def distinct_clients(invoices: Iterable[Invoice]) -> List[str]:
    return _distinct(invoice.client for invoice in invoices)


def matches(invoice: Invoice, criteria: InvoiceFilter) -> bool:
    """True when the invoice satisfies every active predicate of ``criteria``."""
    if criteria.search:
        term = criteria.search.lower()
        haystacks = (invoice.client, invoice.invoice_no, invoice.description)
        if not any(term in (text or "").lower() for text in haystacks):
            return False

    if _active(criteria.year) and invoice.year != criteria.year:
        return False
    if _active(criteria.sales_person) and invoice.sales_person != criteria.sales_person:
        return False
    if _active(criteria.client) and invoice.client != criteria.client:
        return False

    # ISO date strings order the same way the dates do
    if criteria.date_from or criteria.date_to:
        invoice_day = display_date(invoice.invoice_date)
        if criteria.date_from and invoice_day < criteria.date_from:
            return False
        if criteria.date_to and invoice_day > criteria.date_to:
            return False

    return True


def filter_invoices(invoices: Iterable[Invoice], criteria: InvoiceFilter) -> List[Invoice]:
    return [invoice for invoice in invoices if matches(invoice, criteria)]


def total_amount(invoices: Iterable[Invoice]) -> float:
    return sum(parse_amount(invoice.total_invoice_amount) for invoice in invoices)


def summarize(invoices: List[Invoice]) -> InvoiceSummary:
    count = len(invoices)
    total = total_amount(invoices)
    average = total / count if count else 0.0
    return InvoiceSummary(
        count=count,
        total_amount=f"{total:.2f}",
        average_amount=f"{average:.2f}",
    )


def build_listing(invoices: List[Invoice], criteria: InvoiceFilter) -> InvoiceListing:
    """Filtered view plus option lists (taken from the full set) and totals."""
    filtered = filter_invoices(invoices, criteria)
    return InvoiceListing(
        invoices=filtered,
        options=FilterOptions(
            years=distinct_years(invoices),
            sales_persons=distinct_sales_persons(invoices),
            clients=distinct_clients(invoices),
        ),
        summary=summarize(filtered),
    )

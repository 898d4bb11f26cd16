from __future__ import annotations

from conftest import make_invoice

from invoice_tracker.filtering import (
    build_listing,
    distinct_clients,
    distinct_sales_persons,
    distinct_years,
    filter_invoices,
    matches,
    summarize,
)
from invoice_tracker.models import InvoiceFilter


INVOICES = [
    make_invoice(**{"INVOICE NO.": "24-0001", "CLIENT": "Alpha Trading LLC", "INVOICE DATE": "2024-01-15",
                    "DESCRIPTION": "Office fit-out", "TOTAL INVOICE AMOUNT": "1050", "Sales Person": "Omar",
                    "_year": "2024"}),
    make_invoice(**{"INVOICE NO.": "24-0002", "CLIENT": "Beta Contracting", "INVOICE DATE": "2024-03-02",
                    "DESCRIPTION": "Signage installation", "TOTAL INVOICE AMOUNT": "2100.50",
                    "Sales Person": "Sara", "_year": "2024"}),
    make_invoice(**{"INVOICE NO.": "23-0107", "CLIENT": "Alpha Trading LLC", "INVOICE DATE": "2023-11-20",
                    "DESCRIPTION": "Annual maintenance", "TOTAL INVOICE AMOUNT": "not a number",
                    "Sales Person": "Sara", "_year": "2023"}),
    make_invoice(**{"INVOICE NO.": "23-0099", "CLIENT": "Gamma Events", "INVOICE DATE": "2023-06-01",
                    "DESCRIPTION": "Exhibition stand", "TOTAL INVOICE AMOUNT": "", "Sales Person": "Omar",
                    "_year": "2023"}),
]


def _numbers(invoices):
    return [invoice.invoice_no for invoice in invoices]


def test_distinct_option_lists_are_sorted_and_unique():
    assert distinct_years(INVOICES) == ["2023", "2024"]
    assert distinct_sales_persons(INVOICES) == ["Omar", "Sara"]
    assert distinct_clients(INVOICES) == ["Alpha Trading LLC", "Beta Contracting", "Gamma Events"]


def test_distinct_skips_blank_values():
    invoices = INVOICES + [make_invoice(**{"Sales Person": "", "_year": ""})]
    assert distinct_sales_persons(invoices) == ["Omar", "Sara"]
    assert distinct_years(invoices) == ["2023", "2024"]


def test_search_is_case_insensitive_over_client_number_and_description():
    assert _numbers(filter_invoices(INVOICES, InvoiceFilter(search="alpha"))) == ["24-0001", "23-0107"]
    assert _numbers(filter_invoices(INVOICES, InvoiceFilter(search="0099"))) == ["23-0099"]
    assert _numbers(filter_invoices(INVOICES, InvoiceFilter(search="SIGNAGE"))) == ["24-0002"]


def test_all_and_blank_mean_no_filter():
    criteria = InvoiceFilter(search="", year="all", sales_person="all", client="all")
    assert filter_invoices(INVOICES, criteria) == INVOICES
    assert filter_invoices(INVOICES, InvoiceFilter()) == INVOICES


def test_equality_filters_combine():
    criteria = InvoiceFilter(year="2023", sales_person="Sara")
    assert _numbers(filter_invoices(INVOICES, criteria)) == ["23-0107"]

    criteria = InvoiceFilter(client="Alpha Trading LLC", year="2024")
    assert _numbers(filter_invoices(INVOICES, criteria)) == ["24-0001"]


def test_date_range_is_inclusive():
    criteria = InvoiceFilter(date_from="2024-01-15", date_to="2024-03-02")
    assert _numbers(filter_invoices(INVOICES, criteria)) == ["24-0001", "24-0002"]

    criteria = InvoiceFilter(date_to="2023-06-01")
    assert _numbers(filter_invoices(INVOICES, criteria)) == ["23-0099"]


def test_date_range_uses_date_part_of_timestamps():
    invoice = make_invoice(**{"INVOICE DATE": "2024-03-02 00:00:00"})
    assert matches(invoice, InvoiceFilter(date_from="2024-03-02", date_to="2024-03-02"))


def test_filtered_view_satisfies_every_active_predicate():
    criteria = InvoiceFilter(search="a", year="2024", sales_person="Sara", date_from="2024-01-01")
    result = filter_invoices(INVOICES, criteria)
    assert result
    for invoice in result:
        assert invoice in INVOICES
        assert invoice.year == "2024"
        assert invoice.sales_person == "Sara"
        assert invoice.invoice_date >= "2024-01-01"


def test_summary_treats_unparseable_amounts_as_zero():
    summary = summarize(INVOICES)
    assert summary.count == 4
    assert summary.total_amount == "3150.50"
    assert summary.average_amount == "787.62"


def test_summary_of_empty_view():
    summary = summarize([])
    assert summary.count == 0
    assert summary.total_amount == "0.00"
    assert summary.average_amount == "0.00"


def test_listing_options_come_from_full_set():
    listing = build_listing(INVOICES, InvoiceFilter(year="2023"))
    assert _numbers(listing.invoices) == ["23-0107", "23-0099"]
    assert listing.options.years == ["2023", "2024"]
    assert listing.options.clients == ["Alpha Trading LLC", "Beta Contracting", "Gamma Events"]
    assert listing.summary.count == 2
    assert listing.summary.total_amount == "0.00"

from __future__ import annotations

import uuid
from types import SimpleNamespace

import pytest

from invoice_tracker.config import Settings
from invoice_tracker.database import DatabaseClient
from invoice_tracker.models import Invoice


class FakeQuery:
    """Just enough of the postgrest query builder for DatabaseClient."""

    def __init__(self, table: "FakeTable"):
        self.table = table
        self.mode = "select"
        self.payload = None
        self.filters = []
        self.ordering = None

    def select(self, columns="*"):
        self.mode = "select"
        return self

    def insert(self, payload):
        self.mode = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.mode = "update"
        self.payload = payload
        return self

    def delete(self):
        self.mode = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) == str(value))
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: str(row.get(column)) != str(value))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def _matching(self):
        return [row for row in self.table.rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.table.client.executed.append(self.mode)
        if self.table.client.fail_on and self.mode in self.table.client.fail_on:
            raise RuntimeError("connection refused")

        if self.mode == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in payload:
                row = dict(item, id=str(uuid.uuid4()))
                self.table.rows.append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted)

        if self.mode == "update":
            updated = []
            for row in self._matching():
                row.update(self.payload)
                updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.mode == "delete":
            doomed = self._matching()
            self.table.rows = [row for row in self.table.rows if row not in doomed]
            return SimpleNamespace(data=[dict(row) for row in doomed])

        rows = [dict(row) for row in self._matching()]
        if self.ordering:
            column, desc = self.ordering
            rows.sort(key=lambda row: row.get(column) or "", reverse=desc)
        return SimpleNamespace(data=rows)


class FakeTable:
    def __init__(self, client: "FakeSupabase"):
        self.client = client
        self.rows = []


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.executed = []
        self.fail_on = set()

    def table(self, name):
        table = self.tables.setdefault(name, FakeTable(self))
        return FakeQuery(table)

    @property
    def invoices(self):
        return self.table("invoices").table.rows


def make_row(**overrides):
    row = {
        "id": str(uuid.uuid4()),
        "client": "Alpha Trading LLC",
        "invoice_no": "24-0001",
        "invoice_date": "2024-01-15T00:00:00+00:00",
        "client_trn": "100200300400003",
        "description": "Office fit-out works",
        "invoice_subtotal": 1000.0,
        "rebate": 0.0,
        "invoice_subtotal_after_rebate": 1000.0,
        "vat_amount": 50.0,
        "total_invoice_amount": 1050.0,
        "sales_person": "Omar",
        "year": "2024",
    }
    row.update(overrides)
    return row


def make_invoice(**overrides) -> Invoice:
    values = {
        "CLIENT": "Alpha Trading LLC",
        "INVOICE NO.": "24-0001",
        "INVOICE DATE": "2024-01-15",
        "CLIENT TRN": "100200300400003",
        "DESCRIPTION": "Office fit-out works",
        "INVOICE SUB-TOTAL": "1000",
        "REBATE": "0",
        "INVOICE SUB-TOTAL AFTER REBATE": "1000",
        "VAT % AMOUNT": "50",
        "TOTAL INVOICE AMOUNT": "1050",
        "Sales Person": "Omar",
        "_year": "2024",
    }
    values.update(overrides)
    return Invoice.model_validate(values)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def db(fake_supabase):
    return DatabaseClient(client=fake_supabase)


@pytest.fixture
def seeded_rows(fake_supabase):
    rows = [
        make_row(invoice_no="24-0001", client="Alpha Trading LLC", invoice_date="2024-01-15T00:00:00+00:00",
                 description="Office fit-out works", total_invoice_amount=1050.0, sales_person="Omar", year="2024"),
        make_row(invoice_no="24-0002", client="Beta Contracting", invoice_date="2024-03-02T00:00:00+00:00",
                 description="Signage installation", total_invoice_amount=2100.0, sales_person="Sara", year="2024"),
        make_row(invoice_no="23-0107", client="Alpha Trading LLC", invoice_date="2023-11-20T00:00:00+00:00",
                 description="Annual maintenance contract", total_invoice_amount=525.5, sales_person="Sara", year="2023"),
        make_row(invoice_no="23-0099", client="Gamma Events", invoice_date="2023-06-01T00:00:00+00:00",
                 description="Exhibition stand", total_invoice_amount=3150.0, sales_person="Omar", year="2023"),
    ]
    fake_supabase.invoices.extend(rows)
    return rows


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_key="service-role-key",
        ai_api_key="test-key",
        ai_base_url="https://ai.example.com/v1",
        ai_model="test-vision-model",
    )

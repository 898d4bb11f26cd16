"""
Spreadsheet, PDF and JSON export of the filtered invoice list.

The exporters are pure transformations of the in-memory list: they build the
file in memory and return its bytes, leaving delivery to the caller.
"""

import json
import logging
from datetime import date
from io import BytesIO
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .fields import display_date, parse_amount
from .filtering import total_amount
from .models import Invoice

logger = logging.getLogger(__name__)

SPREADSHEET_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
PDF_MIME = "application/pdf"
JSON_MIME = "application/json"

DESCRIPTION_LIMIT = 40
CURRENCY = "AED"

# (header, attribute, is_amount)
SPREADSHEET_COLUMNS = [
    ("Invoice No.", "invoice_no", False),
    ("Invoice Date", "invoice_date", False),
    ("Client", "client", False),
    ("Client TRN", "client_trn", False),
    ("Description", "description", False),
    ("Sub-Total", "invoice_subtotal", True),
    ("Rebate", "rebate", True),
    ("Sub-Total After Rebate", "invoice_subtotal_after_rebate", True),
    ("VAT Amount", "vat_amount", True),
    ("Total Amount", "total_invoice_amount", True),
    ("Sales Person", "sales_person", False),
    ("Year", "year", False),
]

PDF_COLUMNS = [
    ("Invoice No.", "invoice_no", False),
    ("Date", "invoice_date", False),
    ("Client", "client", False),
    ("Description", "description", False),
    ("Sub-Total", "invoice_subtotal", True),
    ("VAT", "vat_amount", True),
    ("Total", "total_invoice_amount", True),
    ("Sales Person", "sales_person", False),
]


def export_filename(kind: str, today: Optional[date] = None) -> str:
    """``invoices_YYYY-MM-DD.<kind>``"""
    day = today or date.today()
    return f"invoices_{day.isoformat()}.{kind}"


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def _cell_value(invoice: Invoice, attribute: str, is_amount: bool):
    value = getattr(invoice, attribute, "")
    if is_amount:
        return parse_amount(value)
    if attribute == "invoice_date":
        return display_date(value)
    return value or ""


def export_spreadsheet(invoices: List[Invoice]) -> bytes:
    """One formatted row per invoice below a styled header row."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Invoices"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)

    for col, (header, _, _) in enumerate(SPREADSHEET_COLUMNS, 1):
        cell = sheet.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = border

    for row_num, invoice in enumerate(invoices, 2):
        for col, (_, attribute, is_amount) in enumerate(SPREADSHEET_COLUMNS, 1):
            cell = sheet.cell(row=row_num, column=col, value=_cell_value(invoice, attribute, is_amount))
            cell.border = border
            if is_amount:
                cell.number_format = "#,##0.00"

    for col, (header, _, _) in enumerate(SPREADSHEET_COLUMNS, 1):
        width = len(header)
        for row in range(2, len(invoices) + 2):
            value = sheet.cell(row=row, column=col).value
            if value is not None:
                width = max(width, len(str(value)))
        sheet.column_dimensions[get_column_letter(col)].width = min(width + 2, 50)

    sheet.freeze_panes = "A2"

    buffer = BytesIO()
    workbook.save(buffer)
    logger.info("Exported %d invoices to spreadsheet", len(invoices))
    return buffer.getvalue()


def pdf_table_rows(invoices: List[Invoice]) -> List[List[str]]:
    """Header row followed by one body row per invoice."""
    rows = [[header for header, _, _ in PDF_COLUMNS]]
    for invoice in invoices:
        row = []
        for _, attribute, is_amount in PDF_COLUMNS:
            value = _cell_value(invoice, attribute, is_amount)
            if is_amount:
                row.append(f"{value:,.2f}")
            elif attribute == "description":
                row.append(truncate(value))
            else:
                row.append(value)
        rows.append(row)
    return rows


def export_pdf(invoices: List[Invoice], title: str = "Invoice Report") -> bytes:
    """Landscape report: summary header (count, total) followed by the invoice table."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        rightMargin=24, leftMargin=24,
        topMargin=24, bottomMargin=24,
        title=title,
    )
    styles = getSampleStyleSheet()
    elements = [
        Paragraph(title, styles["Title"]),
        Paragraph(f"Generated: {date.today().isoformat()}", styles["Normal"]),
        Paragraph(
            f"Total Invoices: {len(invoices)} &nbsp;&nbsp; "
            f"Total Amount: {CURRENCY} {total_amount(invoices):,.2f}",
            styles["Normal"],
        ),
        Spacer(1, 12),
    ]

    table = Table(pdf_table_rows(invoices), repeatRows=1, colWidths=[70, 65, 130, 200, 70, 60, 75, 100])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2E86C1")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("ALIGN", (4, 1), (6, -1), "RIGHT"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F2F2F2")]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]))
    elements.append(table)

    doc.build(elements)
    logger.info("Exported %d invoices to PDF", len(invoices))
    return buffer.getvalue()


def export_json(invoices: List[Invoice]) -> bytes:
    """Array of invoices keyed by their display labels, as the form shows them."""
    payload = [invoice.model_dump(by_alias=True) for invoice in invoices]
    logger.info("Exported %d invoices to JSON", len(invoices))
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")

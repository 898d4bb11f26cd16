import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, UploadFile
from fastapi.responses import Response

from ..database import DatabaseClient
from ..dependencies import get_db, get_extractor
from ..exceptions import (
    DuplicateInvoiceError,
    ExtractionError,
    FileTooLargeError,
    InvalidInvoiceError,
    InvoiceNotFoundError,
    InvoiceTrackerError,
    StorageError,
)
from ..exporters import (
    JSON_MIME,
    PDF_MIME,
    SPREADSHEET_MIME,
    export_filename,
    export_json,
    export_pdf,
    export_spreadsheet,
)
from ..extraction import InvoiceExtractor
from ..filtering import build_listing, filter_invoices
from ..models import Invoice, InvoiceFilter, InvoiceListing
from ..uploads import guess_content_type, to_data_url, validate_upload_size

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/invoices",
    tags=["invoices"]
)


def invoice_filter(
    search: Optional[str] = Query(None, description="Substring of client, invoice number or description"),
    year: Optional[str] = Query(None, description="Exact year, or 'all'"),
    sales_person: Optional[str] = Query(None, description="Exact sales person, or 'all'"),
    client: Optional[str] = Query(None, description="Exact client, or 'all'"),
    date_from: Optional[str] = Query(None, description="Earliest invoice date (YYYY-MM-DD), inclusive"),
    date_to: Optional[str] = Query(None, description="Latest invoice date (YYYY-MM-DD), inclusive"),
) -> InvoiceFilter:
    return InvoiceFilter(
        search=search,
        year=year,
        sales_person=sales_person,
        client=client,
        date_from=date_from,
        date_to=date_to,
    )


def _to_http(error: InvoiceTrackerError) -> HTTPException:
    if isinstance(error, InvoiceNotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, DuplicateInvoiceError):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, InvalidInvoiceError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, FileTooLargeError):
        return HTTPException(status_code=413, detail=str(error))
    if isinstance(error, ExtractionError):
        return HTTPException(status_code=error.status_code, detail=error.message)
    if isinstance(error, StorageError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def _filtered(db: DatabaseClient, criteria: InvoiceFilter):
    try:
        return filter_invoices(db.fetch_all(), criteria)
    except InvoiceTrackerError as e:
        raise _to_http(e)


@router.get("", response_model=InvoiceListing)
async def list_invoices(
    criteria: InvoiceFilter = Depends(invoice_filter),
    db: DatabaseClient = Depends(get_db),
):
    try:
        return build_listing(db.fetch_all(), criteria)
    except InvoiceTrackerError as e:
        raise _to_http(e)


@router.get("/export.xlsx")
async def export_invoices_spreadsheet(
    criteria: InvoiceFilter = Depends(invoice_filter),
    db: DatabaseClient = Depends(get_db),
):
    content = export_spreadsheet(_filtered(db, criteria))
    filename = export_filename("xlsx")
    return Response(
        content=content,
        media_type=SPREADSHEET_MIME,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.pdf")
async def export_invoices_pdf(
    criteria: InvoiceFilter = Depends(invoice_filter),
    db: DatabaseClient = Depends(get_db),
):
    content = export_pdf(_filtered(db, criteria))
    filename = export_filename("pdf")
    return Response(
        content=content,
        media_type=PDF_MIME,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export.json")
async def export_invoices_json(
    criteria: InvoiceFilter = Depends(invoice_filter),
    db: DatabaseClient = Depends(get_db),
):
    content = export_json(_filtered(db, criteria))
    filename = export_filename("json")
    return Response(
        content=content,
        media_type=JSON_MIME,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/scan", response_model=Invoice)
async def scan_invoice(
    file: UploadFile = File(..., description="Photographed or scanned invoice (image or PDF)"),
    extractor: InvoiceExtractor = Depends(get_extractor),
):
    """Extract fields from an uploaded invoice and return them as an unsaved form."""
    try:
        validate_upload_size(file.size)
        content = await file.read()
        validate_upload_size(len(content))
        data_url = to_data_url(content, guess_content_type(file.filename, file.content_type))
        extracted = extractor.extract(data_url)
    except InvoiceTrackerError as e:
        raise _to_http(e)
    return Invoice.model_validate(extracted)


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(
    invoice_id: str = Path(..., description="Surrogate invoice id"),
    db: DatabaseClient = Depends(get_db),
):
    try:
        return db.get_invoice(invoice_id)
    except InvoiceTrackerError as e:
        raise _to_http(e)


@router.post("", response_model=Invoice, status_code=201)
async def create_invoice(
    invoice: Invoice,
    db: DatabaseClient = Depends(get_db),
):
    try:
        return db.insert_invoice(invoice)
    except InvoiceTrackerError as e:
        raise _to_http(e)


@router.put("/by-number/{invoice_no:path}", response_model=Invoice)
async def update_invoice_by_number(
    invoice: Invoice,
    invoice_no: str = Path(..., description="Invoice number of the record to overwrite"),
    db: DatabaseClient = Depends(get_db),
):
    try:
        return db.update_invoice_by_number(invoice_no, invoice)
    except InvoiceTrackerError as e:
        raise _to_http(e)


@router.put("/{invoice_id}", response_model=Invoice)
async def update_invoice(
    invoice: Invoice,
    invoice_id: str = Path(..., description="Surrogate invoice id"),
    db: DatabaseClient = Depends(get_db),
):
    try:
        return db.update_invoice(invoice_id, invoice)
    except InvoiceTrackerError as e:
        raise _to_http(e)

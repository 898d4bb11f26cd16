import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from ..constants import INVALID_IMAGE_MESSAGE, NO_IMAGE_MESSAGE
from ..dependencies import get_extractor
from ..exceptions import ExtractionError
from ..extraction import InvoiceExtractor
from ..models import ScanRequest

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/functions/v1",
    tags=["extraction"]
)

SCAN_INVOICE_PATH = "/functions/v1/scan-invoice"
DEFAULT_ALLOWED_HEADERS = "authorization, x-client-info, apikey, content-type"


def preflight_response(request: Request) -> Response:
    """Empty 200 answering any pre-flight, allowing whatever headers were asked for."""
    requested = request.headers.get("access-control-request-headers")
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": requested or DEFAULT_ALLOWED_HEADERS,
        },
    )


@router.post("/scan-invoice")
async def scan_invoice(
    request: Request,
    extractor: InvoiceExtractor = Depends(get_extractor),
):
    """Accepts ``{"imageData": <data-url>}`` and answers ``{"data": {...}}`` or ``{"error": ...}``."""
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    try:
        payload = ScanRequest.model_validate(body)
    except ValidationError:
        return JSONResponse({"error": INVALID_IMAGE_MESSAGE}, status_code=400)
    if not payload.image_data:
        return JSONResponse({"error": NO_IMAGE_MESSAGE}, status_code=400)

    try:
        extracted = extractor.extract(payload.image_data)
    except ExtractionError as e:
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except Exception as e:
        logger.exception("Error in scan-invoice function")
        return JSONResponse({"error": str(e) or "Internal server error"}, status_code=500)

    return {"data": extracted}

EXTRACTION_FIELDS = [
    "CLIENT",
    "INVOICE NO.",
    "INVOICE DATE",
    "CLIENT TRN",
    "DESCRIPTION",
    "INVOICE SUB-TOTAL",
    "REBATE",
    "INVOICE SUB-TOTAL AFTER REBATE",
    "VAT % AMOUNT",
    "TOTAL INVOICE AMOUNT",
    "Sales Person",
]

EXTRACTION_PROMPT = (
    "Extract invoice details from this image. You must extract these exact fields:\n"
    "- CLIENT (client name)\n"
    "- INVOICE NO. (invoice number)\n"
    "- INVOICE DATE (in YYYY-MM-DD format)\n"
    "- CLIENT TRN (tax registration number)\n"
    "- DESCRIPTION (brief description of items/services)\n"
    "- INVOICE SUB-TOTAL (subtotal amount as number only, no currency)\n"
    "- REBATE (rebate amount as number only, use \"0\" if not present)\n"
    "- INVOICE SUB-TOTAL AFTER REBATE (subtotal after rebate as number only)\n"
    "- VAT % AMOUNT (VAT amount as number only)\n"
    "- TOTAL INVOICE AMOUNT (total amount as number only)\n"
    "- Sales Person (sales person name)\n"
    "\n"
    "Look carefully at the invoice and extract all visible information."
)

EXTRACTION_TOOL_NAME = "extract_invoice_data"

EXTRACTION_TOOL = {
    "type": "function",
    "function": {
        "name": EXTRACTION_TOOL_NAME,
        "description": "Extract structured invoice data from the image",
        "parameters": {
            "type": "object",
            "properties": {field: {"type": "string"} for field in EXTRACTION_FIELDS},
            "required": EXTRACTION_FIELDS,
            "additionalProperties": False,
        },
    },
}

NO_IMAGE_MESSAGE = "No image data provided"
INVALID_IMAGE_MESSAGE = "Image data must be a data URL string"
NOT_CONFIGURED_MESSAGE = "AI service not configured"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
CREDITS_EXHAUSTED_MESSAGE = "AI credits exhausted. Please add credits to continue."
PROCESSING_FAILED_MESSAGE = "Failed to process invoice"
EXTRACTION_FAILED_MESSAGE = "Failed to extract invoice data"

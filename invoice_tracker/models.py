from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Any


class Invoice(BaseModel):
    """Invoice as shown and edited in the UI; every value is a display string."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    client: str = Field("", alias="CLIENT")
    invoice_no: str = Field("", alias="INVOICE NO.")
    invoice_date: str = Field("", alias="INVOICE DATE")
    client_trn: str = Field("", alias="CLIENT TRN")
    description: str = Field("", alias="DESCRIPTION")
    invoice_subtotal: str = Field("", alias="INVOICE SUB-TOTAL")
    rebate: str = Field("0", alias="REBATE")
    invoice_subtotal_after_rebate: str = Field("", alias="INVOICE SUB-TOTAL AFTER REBATE")
    vat_amount: str = Field("", alias="VAT % AMOUNT")
    total_invoice_amount: str = Field("", alias="TOTAL INVOICE AMOUNT")
    sales_person: str = Field("", alias="Sales Person")
    year: str = Field("", alias="_year")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_to_string(cls, value: Any, info) -> Any:
        if info.field_name == "id":
            return None if value is None else str(value)
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class InvoiceRecord(BaseModel):
    """Row of the ``invoices`` table."""

    id: Optional[str] = None
    client: str
    invoice_no: str
    invoice_date: str
    client_trn: str = ""
    description: str = ""
    invoice_subtotal: float = 0.0
    rebate: float = 0.0
    invoice_subtotal_after_rebate: float = 0.0
    vat_amount: float = 0.0
    total_invoice_amount: float = 0.0
    sales_person: str = ""
    year: str = ""


class InvoiceFilter(BaseModel):
    search: Optional[str] = None
    year: Optional[str] = None
    sales_person: Optional[str] = None
    client: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None


class InvoiceSummary(BaseModel):
    count: int
    total_amount: str
    average_amount: str


class FilterOptions(BaseModel):
    years: List[str]
    sales_persons: List[str]
    clients: List[str]


class InvoiceListing(BaseModel):
    invoices: List[Invoice]
    options: FilterOptions
    summary: InvoiceSummary


class ScanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: Optional[str] = Field(None, alias="imageData")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None

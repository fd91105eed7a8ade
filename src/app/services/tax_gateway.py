"""Tax Gateway Interface

Contract and wire models for the FBR Digital Invoicing gateway.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from pydantic import BaseModel, Field

ACCEPTED_STATUS_CODE = "00"


class GatewayError(Exception):
    """Base class for gateway client failures"""


class GatewayUnreachableError(GatewayError):
    """No usable response: transport failure, timeout or server error"""


class GatewayHttpError(GatewayError):
    """The gateway answered with an HTTP client error"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Gateway request failed with status {status_code}: {body}")


class GatewayInvoiceItem(BaseModel):
    """One line of the gateway request"""

    hs_code: str = Field(..., alias="hsCode")
    product_description: str = Field(..., alias="productDescription")
    rate: str = Field(..., alias="rate")
    uom: str = Field(..., alias="uoM")
    quantity: float = Field(..., alias="quantity")
    total_values: float = Field(..., alias="totalValues", description="Sales value including tax")
    value_sales_excluding_st: float = Field(..., alias="valueSalesExcludingST")
    fixed_notified_value_or_retail_price: float = Field(0, alias="fixedNotifiedValueOrRetailPrice")
    sales_tax_applicable: float = Field(..., alias="salesTaxApplicable")
    sales_tax_withheld_at_source: float = Field(0, alias="salesTaxWithheldAtSource")
    extra_tax: Optional[float] = Field(default=None, alias="extraTax")
    further_tax: Optional[float] = Field(default=None, alias="furtherTax")
    sro_schedule_no: Optional[str] = Field(default=None, alias="sroScheduleNo")
    fed_payable: Optional[float] = Field(default=None, alias="fedPayable")
    discount: Optional[float] = Field(default=None, alias="discount")
    sale_type: str = Field(..., alias="saleType")
    sro_item_serial_no: Optional[str] = Field(default=None, alias="sroItemSerialNo")

    class Config:
        populate_by_name = True


class GatewayInvoicePayload(BaseModel):
    """Request body of postinvoicedata / validateinvoicedata"""

    invoice_type: str = Field(..., alias="invoiceType")
    invoice_date: str = Field(..., alias="invoiceDate", description="YYYY-MM-DD")
    seller_ntn_cnic: str = Field(..., alias="sellerNTNCNIC")
    seller_business_name: str = Field(..., alias="sellerBusinessName")
    seller_province: str = Field(..., alias="sellerProvince")
    seller_address: str = Field(..., alias="sellerAddress")
    buyer_ntn_cnic: Optional[str] = Field(default=None, alias="buyerNTNCNIC")
    buyer_business_name: str = Field(..., alias="buyerBusinessName")
    buyer_province: str = Field(..., alias="buyerProvince")
    buyer_address: str = Field(..., alias="buyerAddress")
    buyer_registration_type: str = Field(..., alias="buyerRegistrationType")
    invoice_ref_no: Optional[str] = Field(default=None, alias="invoiceRefNo")
    scenario_id: Optional[str] = Field(default=None, alias="scenarioId")
    items: List[GatewayInvoiceItem] = Field(default_factory=list, alias="items")

    class Config:
        populate_by_name = True

    def to_wire(self) -> dict:
        """JSON body with gateway field names, unset optional fields omitted"""
        return self.model_dump(by_alias=True, exclude_none=True)


class GatewayItemStatus(BaseModel):
    item_sno: str = Field(..., alias="itemSNo")
    status_code: str = Field(..., alias="statusCode")
    status: str = Field(..., alias="status")
    invoice_no: Optional[str] = Field(default=None, alias="invoiceNo")
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    error: str = Field(default="", alias="error")

    class Config:
        populate_by_name = True


class GatewayValidationResponse(BaseModel):
    status_code: str = Field(..., alias="statusCode")
    status: str = Field(..., alias="status")
    error: str = Field(default="", alias="error")
    error_code: Optional[str] = Field(default=None, alias="errorCode")
    invoice_statuses: Optional[List[GatewayItemStatus]] = Field(default=None, alias="invoiceStatuses")

    class Config:
        populate_by_name = True


class GatewayResponse(BaseModel):
    """Response body of the gateway"""

    invoice_number: Optional[str] = Field(default=None, alias="invoiceNumber")
    dated: Optional[str] = Field(default=None, alias="dated")
    validation_response: GatewayValidationResponse = Field(..., alias="validationResponse")

    class Config:
        populate_by_name = True

    def is_accepted(self) -> bool:
        """statusCode "00" at invoice level and on every item"""
        if self.validation_response.status_code != ACCEPTED_STATUS_CODE:
            return False
        for item in self.validation_response.invoice_statuses or []:
            if item.status_code != ACCEPTED_STATUS_CODE:
                return False
        return True

    def error_message(self) -> str:
        """Human-readable rejection reason"""
        if self.validation_response.error:
            return self.validation_response.error
        for item in self.validation_response.invoice_statuses or []:
            if item.status_code != ACCEPTED_STATUS_CODE and item.error:
                return f"Item {item.item_sno}: {item.error}"
        return "Invoice was rejected by the tax gateway"


class TaxGateway(ABC):
    """
    Abstract client for the digital-invoicing gateway

    Implementations raise GatewayUnreachableError when no usable response
    was received and GatewayHttpError for HTTP client errors. Business
    rejections are returned as a GatewayResponse with a non "00" status.
    """

    @property
    @abstractmethod
    def is_mock(self) -> bool:
        """True when responses are simulated locally"""
        pass

    @abstractmethod
    async def post_invoice(self, payload: GatewayInvoicePayload) -> GatewayResponse:
        """Submit an invoice for numbering"""
        pass

    @abstractmethod
    async def validate_invoice(self, payload: GatewayInvoicePayload) -> GatewayResponse:
        """Ask the gateway to validate an invoice without numbering it"""
        pass

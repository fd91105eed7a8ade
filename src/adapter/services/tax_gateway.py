"""Tax Gateway Implementations

HTTP client for the FBR Digital Invoicing gateway and a local mock used
when no API token is configured.
"""

import logging
import time
import uuid
from datetime import datetime
from typing import Optional
import httpx
from pydantic import BaseModel, Field
from src.app.services.tax_gateway import (
    ACCEPTED_STATUS_CODE,
    GatewayHttpError,
    GatewayInvoicePayload,
    GatewayItemStatus,
    GatewayResponse,
    GatewayUnreachableError,
    GatewayValidationResponse,
    TaxGateway,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gw.fbr.gov.pk"


class GatewaySettings(BaseModel):
    """Connection settings of the tax gateway"""

    api_token: Optional[str] = Field(default=None, description="Bearer token; mock gateway when empty")
    sandbox: bool = Field(default=True, description="Use the *_sb sandbox endpoints")
    base_url: str = Field(default=DEFAULT_BASE_URL)
    timeout_seconds: float = Field(default=30.0, gt=0)


class FbrTaxGatewayClient(TaxGateway):
    """
    FBR Digital Invoicing client

    Features:
    - Bearer token authentication
    - Sandbox or production endpoints
    - Bounded timeout; a timeout is treated like an unreachable gateway
    """

    POST_PATH = "/di_data/v1/di/postinvoicedata"
    VALIDATE_PATH = "/di_data/v1/di/validateinvoicedata"

    def __init__(self, settings: GatewaySettings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize gateway client

        Args:
            settings: GatewaySettings with a non-empty api_token
            transport: Optional httpx transport (tests)
        """
        self.settings = settings
        self.transport = transport

    @property
    def is_mock(self) -> bool:
        return False

    def url_for(self, path: str) -> str:
        suffix = "_sb" if self.settings.sandbox else ""
        return f"{self.settings.base_url.rstrip('/')}{path}{suffix}"

    async def post_invoice(self, payload: GatewayInvoicePayload) -> GatewayResponse:
        return await self._send(self.url_for(self.POST_PATH), payload)

    async def validate_invoice(self, payload: GatewayInvoicePayload) -> GatewayResponse:
        return await self._send(self.url_for(self.VALIDATE_PATH), payload)

    async def _send(self, url: str, payload: GatewayInvoicePayload) -> GatewayResponse:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.api_token}",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(url, json=payload.to_wire(), headers=headers)
        except httpx.TimeoutException as e:
            raise GatewayUnreachableError(
                f"Tax gateway did not answer within {self.settings.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise GatewayUnreachableError(f"Tax gateway request failed: {e}") from e

        if response.status_code >= 500:
            raise GatewayUnreachableError(
                f"Tax gateway returned server error {response.status_code}: {response.text}"
            )
        if response.status_code >= 400:
            raise GatewayHttpError(response.status_code, response.text)

        try:
            return GatewayResponse.model_validate(response.json())
        except ValueError as e:
            raise GatewayUnreachableError(f"Tax gateway returned an unreadable response: {e}") from e


class MockTaxGateway(TaxGateway):
    """
    Local stand-in for the gateway

    Accepts every invoice and numbers it FBR-MOCK-<ms>-<8 hex>, so two
    invoices accepted in the same millisecond still get distinct numbers. Results are
    labelled is_mock so they are never mistaken for real fiscal numbers.
    """

    @property
    def is_mock(self) -> bool:
        return True

    def _accepted(self, payload: GatewayInvoicePayload, invoice_number: Optional[str]) -> GatewayResponse:
        return GatewayResponse(
            invoice_number=invoice_number,
            dated=datetime.utcnow().isoformat(),
            validation_response=GatewayValidationResponse(
                status_code=ACCEPTED_STATUS_CODE,
                status="Valid",
                error="",
                invoice_statuses=[
                    GatewayItemStatus(
                        item_sno=str(index + 1),
                        status_code=ACCEPTED_STATUS_CODE,
                        status="Valid",
                        invoice_no=f"{invoice_number}-{index + 1}" if invoice_number else None,
                        error="",
                    )
                    for index, _ in enumerate(payload.items)
                ],
            ),
        )

    async def post_invoice(self, payload: GatewayInvoicePayload) -> GatewayResponse:
        invoice_number = f"FBR-MOCK-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8].upper()}"
        logger.warning(f"FBR_API_TOKEN is not set. Returning mock acceptance {invoice_number}")
        return self._accepted(payload, invoice_number)

    async def validate_invoice(self, payload: GatewayInvoicePayload) -> GatewayResponse:
        logger.warning("FBR_API_TOKEN is not set. Returning mock validation result")
        return self._accepted(payload, None)


def create_tax_gateway(
    settings: GatewaySettings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> TaxGateway:
    """
    Factory function to create the tax gateway

    Returns:
        FbrTaxGatewayClient when a token is configured, MockTaxGateway otherwise
    """
    if not settings.api_token:
        logger.warning("No tax gateway token configured; invoices will be numbered by the mock gateway")
        return MockTaxGateway()
    return FbrTaxGatewayClient(settings, transport=transport)

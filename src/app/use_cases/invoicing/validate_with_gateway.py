"""ValidateInvoiceWithGateway Use Case

Dry run of a draft against the gateway's validation endpoint. Nothing is
recorded.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.tax_gateway import (
    GatewayHttpError,
    GatewayUnreachableError,
    TaxGateway,
)
from .dtos import GatewayValidationDTO, InvoiceDraftDTO
from .gateway_payload import build_gateway_payload
from .validate_invoice import ValidateInvoice

logger = logging.getLogger(__name__)


class ValidateInvoiceWithGateway:
    """
    Use Case: Validate a draft with the tax gateway

    Local validation runs first so that obviously broken drafts never cost
    a gateway round trip. A gateway rejection is a successful result with
    is_valid False.
    """

    def __init__(self, tax_gateway: TaxGateway):
        self.tax_gateway = tax_gateway
        self.validator = ValidateInvoice()

    async def execute(self, draft: InvoiceDraftDTO) -> Result[GatewayValidationDTO]:
        validation = self.validator.execute(draft)
        if not validation.is_valid:
            return Return.err(
                Error(
                    code="VALIDATION_FAILED",
                    message="Invoice validation failed",
                    details={"errors": [error.model_dump() for error in validation.errors]},
                )
            )

        payload, _ = build_gateway_payload(draft)

        try:
            response = await self.tax_gateway.validate_invoice(payload)
        except GatewayUnreachableError as e:
            logger.error(f"Tax gateway unreachable during validation: {e}")
            return Return.err(
                Error(
                    code="GATEWAY_UNREACHABLE",
                    message="The tax gateway could not be reached. Please try again.",
                    reason=str(e),
                )
            )
        except GatewayHttpError as e:
            return Return.err(
                Error(
                    code="GATEWAY_REJECTED",
                    message=f"Tax gateway rejected the request (HTTP {e.status_code})",
                    reason=e.body,
                    details={"http_status": e.status_code},
                )
            )

        return Return.ok(
            GatewayValidationDTO(
                is_valid=response.is_accepted(),
                is_mock=self.tax_gateway.is_mock,
                gateway_response=response.model_dump(by_alias=True),
            )
        )

"""API tests for /api/invoices

Tests cover:
- Local validation endpoint
- Submission through the mock gateway
- Gateway rejection, unreachable gateway and persistence failure responses
- History filters, detail, status change, delete and stats recompute
- Mock gateway numbering of invoices submitted in the same millisecond
"""

import copy
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, patch

from src.app.services.tax_gateway import (
    GatewayResponse,
    GatewayUnreachableError,
    GatewayValidationResponse,
)


async def submit(client, headers, draft_payload):
    response = await client.post("/api/invoices", headers=headers, json=draft_payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestValidateEndpoints:

    async def test_local_validation_lists_field_errors(self, client, auth_headers, draft_payload):
        draft_payload["buyer"]["ntn"] = ""
        draft_payload["line_items"][0]["hs_code"] = ""

        response = await client.post("/api/invoices/validate", headers=auth_headers, json=draft_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["is_valid"] is False
        fields = {error["field"] for error in body["errors"]}
        assert fields == {"buyer.ntn", "line_items.0.hs_code"}

    async def test_gateway_validation_with_mock(self, client, auth_headers, draft_payload):
        response = await client.post("/api/invoices/validate/gateway", headers=auth_headers, json=draft_payload)

        assert response.status_code == 200
        assert response.json()["is_valid"] is True
        assert response.json()["is_mock"] is True

    async def test_requires_authentication(self, client, draft_payload):
        response = await client.post("/api/invoices", json=draft_payload)

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
class TestSubmitInvoiceApi:

    async def test_submit_records_paid_invoice(self, client, auth_headers, draft_payload):
        body = await submit(client, auth_headers, draft_payload)

        assert body["invoice_id"].startswith("FBR-MOCK-")
        assert body["status"] == "Paid"
        assert Decimal(body["amount"]) == Decimal("11800.00")
        assert body["is_mock"] is True

        me = (await client.get("/api/auth/me", headers=auth_headers)).json()
        assert me["invoice_count"] == 1
        assert Decimal(me["paid_amount"]) == Decimal("11800.00")

    async def test_validation_failure_is_400(self, client, auth_headers, draft_payload, tax_gateway):
        tax_gateway.post_invoice = AsyncMock()
        draft_payload["line_items"] = []

        response = await client.post("/api/invoices", headers=auth_headers, json=draft_payload)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_FAILED"
        tax_gateway.post_invoice.assert_not_called()

    async def test_gateway_rejection_is_422_and_writes_nothing(
        self, client, auth_headers, draft_payload, tax_gateway
    ):
        tax_gateway.post_invoice = AsyncMock(
            return_value=GatewayResponse(
                validation_response=GatewayValidationResponse(
                    status_code="01", status="Invalid", error="Invalid NTN"
                )
            )
        )

        response = await client.post("/api/invoices", headers=auth_headers, json=draft_payload)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "GATEWAY_REJECTED"
        assert response.json()["error"]["message"] == "Invalid NTN"

        listing = (await client.get("/api/invoices", headers=auth_headers)).json()
        assert listing["total"] == 0
        me = (await client.get("/api/auth/me", headers=auth_headers)).json()
        assert me["invoice_count"] == 0

    async def test_unreachable_gateway_is_503(self, client, auth_headers, draft_payload, tax_gateway):
        tax_gateway.post_invoice = AsyncMock(side_effect=GatewayUnreachableError("timed out"))

        response = await client.post("/api/invoices", headers=auth_headers, json=draft_payload)

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "GATEWAY_UNREACHABLE"

    async def test_duplicate_gateway_number_for_other_user_is_500(
        self, client, auth_headers, admin_headers, draft_payload, tax_gateway, alert_service
    ):
        first = await submit(client, auth_headers, draft_payload)
        tax_gateway.post_invoice = AsyncMock(
            return_value=GatewayResponse(
                invoice_number=first["invoice_id"],
                validation_response=GatewayValidationResponse(status_code="00", status="Valid"),
            )
        )

        response = await client.post("/api/invoices", headers=admin_headers, json=draft_payload)

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "PERSISTENCE_FAILED"
        assert response.json()["error"]["details"] == {"invoice_id": first["invoice_id"]}
        alert_service.send_persistence_failure_alert.assert_awaited_once()


    async def test_mock_gateway_same_millisecond_keeps_both(self, client, auth_headers, draft_payload):
        larger = copy.deepcopy(draft_payload)
        larger["line_items"][0]["quantity"] = "7"

        with patch("src.adapter.services.tax_gateway.time.time", return_value=1700000000.0):
            first = await submit(client, auth_headers, draft_payload)
            second = await submit(client, auth_headers, larger)

        assert first["invoice_id"] != second["invoice_id"]
        assert Decimal(second["amount"]) == Decimal("41300.00")
        me = (await client.get("/api/auth/me", headers=auth_headers)).json()
        assert me["invoice_count"] == 2

@pytest.mark.asyncio
class TestInvoiceHistoryApi:

    async def test_pagination(self, client, auth_headers, draft_payload, tax_gateway):
        numbers = iter(range(15))

        async def numbered(payload):
            return GatewayResponse(
                invoice_number=f"FBR-{next(numbers):04d}",
                validation_response=GatewayValidationResponse(status_code="00", status="Valid"),
            )

        tax_gateway.post_invoice = numbered
        for _ in range(15):
            await submit(client, auth_headers, draft_payload)

        response = await client.get("/api/invoices?page=2&limit=10", headers=auth_headers)

        body = response.json()
        assert len(body["invoices"]) == 5
        assert body["total"] == 15
        assert body["has_more"] is False

    async def test_customer_filter(self, client, auth_headers, draft_payload):
        other_buyer = copy.deepcopy(draft_payload)
        other_buyer["buyer"]["name"] = "Karachi Traders"
        await submit(client, auth_headers, draft_payload)
        expected = await submit(client, auth_headers, other_buyer)

        response = await client.get("/api/invoices?customer=karachi%20traders", headers=auth_headers)

        body = response.json()
        assert body["total"] == 1
        assert body["invoices"][0]["id"] == expected["invoice_id"]
        assert body["invoices"][0]["customer_name"] == "Karachi Traders"

    async def test_limit_above_maximum(self, client, auth_headers):
        response = await client.get("/api/invoices?limit=101", headers=auth_headers)

        assert response.status_code == 422

    async def test_detail_status_and_delete(self, client, auth_headers, draft_payload):
        invoice_id = (await submit(client, auth_headers, draft_payload))["invoice_id"]

        detail = await client.get(f"/api/invoices/{invoice_id}", headers=auth_headers)
        assert detail.status_code == 200
        assert detail.json()["line_items"][0]["hs_code"] == "5208.1100"

        patched = await client.patch(
            f"/api/invoices/{invoice_id}/status", headers=auth_headers, json={"status": "Overdue"}
        )
        assert patched.json()["status"] == "Overdue"
        me = (await client.get("/api/auth/me", headers=auth_headers)).json()
        assert Decimal(me["pending_amount"]) == Decimal("11800.00")
        assert Decimal(me["paid_amount"]) == Decimal("0.00")

        deleted = await client.delete(f"/api/invoices/{invoice_id}", headers=auth_headers)
        assert deleted.status_code == 204
        missing = await client.get(f"/api/invoices/{invoice_id}", headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "INVOICE_NOT_FOUND"

    async def test_other_users_invoice_is_not_found(self, client, auth_headers, admin_headers, draft_payload):
        invoice_id = (await submit(client, admin_headers, draft_payload))["invoice_id"]

        response = await client.get(f"/api/invoices/{invoice_id}", headers=auth_headers)

        assert response.status_code == 404

    async def test_recent_and_recompute(self, client, auth_headers, draft_payload):
        await submit(client, auth_headers, draft_payload)

        recent = await client.get("/api/invoices/recent", headers=auth_headers)
        recomputed = await client.post("/api/invoices/stats/recompute", headers=auth_headers)

        assert len(recent.json()) == 1
        assert recomputed.json()["invoice_count"] == 1
        assert Decimal(recomputed.json()["paid_amount"]) == Decimal("11800.00")

from datetime import date, timedelta

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from searchgear.audit.models import QuotationHistory
from searchgear.email.exceptions import EmailSendingException

QUOTES_URL = "/api/v1/quotes"


def _payload(**overrides) -> dict:
    payload = {
        "pickupLocation": "Manila",
        "dropoffLocation": "Baguio",
        "numberOfDays": 3,
        "busType": "49-seater",
        "numberOfPassengers": 45,
        "departureDate": (date.today() + timedelta(days=30)).isoformat(),
    }
    payload.update(overrides)
    return payload


async def test_create_quote_request(test_client: AsyncClient, customer_headers, customer_user):
    response = await test_client.post(f"{QUOTES_URL}/", json=_payload(specialRequests="Karaoke"), headers=customer_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Quote request submitted successfully"
    data = body["data"]
    assert data["status"] == "pending"
    assert data["userId"] == customer_user.id
    assert data["quoteNumber"] == f"QR-{data['id'][-8:].upper()}"
    assert "estimatedPrice" not in data


async def test_create_quote_requires_authentication(test_client: AsyncClient):
    response = await test_client.post(f"{QUOTES_URL}/", json=_payload())
    assert response.status_code == 401


async def test_create_quote_over_capacity(test_client: AsyncClient, customer_headers):
    response = await test_client.post(f"{QUOTES_URL}/", json=_payload(numberOfPassengers=50), headers=customer_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Number of passengers (50) exceeds bus capacity (49)"}


async def test_create_quote_departure_in_past(test_client: AsyncClient, customer_headers):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    response = await test_client.post(f"{QUOTES_URL}/", json=_payload(departureDate=yesterday), headers=customer_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Departure date must be today or in the future"


async def test_create_quote_missing_field_is_400(test_client: AsyncClient, customer_headers):
    payload = _payload()
    del payload["pickupLocation"]
    response = await test_client.post(f"{QUOTES_URL}/", json=payload, headers=customer_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please provide all required fields"}


async def test_create_quote_special_requests_too_long(test_client: AsyncClient, customer_headers):
    response = await test_client.post(
        f"{QUOTES_URL}/", json=_payload(specialRequests="x" * 501), headers=customer_headers
    )
    assert response.status_code == 400


async def test_my_quotes_only_lists_own(test_client: AsyncClient, customer_headers, pending_quote, other_customer_headers):
    mine = await test_client.get(f"{QUOTES_URL}/my-quotes", headers=customer_headers)
    theirs = await test_client.get(f"{QUOTES_URL}/my-quotes", headers=other_customer_headers)

    assert mine.json()["count"] == 1
    assert mine.json()["data"][0]["id"] == pending_quote.id
    assert theirs.json()["count"] == 0


async def test_get_quote_forbidden_for_other_customer(test_client: AsyncClient, pending_quote, other_customer_headers):
    response = await test_client.get(f"{QUOTES_URL}/{pending_quote.id}", headers=other_customer_headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "Not authorized to access this quote request"}


async def test_get_quote_not_found(test_client: AsyncClient, admin_headers):
    response = await test_client.get(f"{QUOTES_URL}/does-not-exist", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Quote request not found"}


async def test_admin_list_all_with_status_filter(test_client: AsyncClient, admin_headers, pending_quote, approved_quote):
    response = await test_client.get(f"{QUOTES_URL}/admin/all", params={"status": "approved"}, headers=admin_headers)

    body = response.json()
    assert response.status_code == 200
    assert body["count"] == 1
    assert body["data"][0]["id"] == approved_quote.id


async def test_admin_update_pricing(test_client: AsyncClient, admin_headers, pending_quote):
    response = await test_client.patch(
        f"{QUOTES_URL}/admin/{pending_quote.id}", json={"adminNotes": "Toll fees included"}, headers=admin_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["adminNotes"] == "Toll fees included"
    assert data["status"] == "pending"


async def test_admin_update_rejects_null_status(test_client: AsyncClient, admin_headers, pending_quote):
    quote_id = pending_quote.id
    response = await test_client.patch(f"{QUOTES_URL}/admin/{quote_id}", json={"status": None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Status cannot be null"}

    stored = await test_client.get(f"{QUOTES_URL}/{quote_id}", headers=admin_headers)
    assert stored.json()["data"]["status"] == "pending"


async def test_admin_list_includes_customer(test_client: AsyncClient, admin_headers, pending_quote):
    response = await test_client.get(f"{QUOTES_URL}/admin/all", headers=admin_headers)

    customer = response.json()["data"][0]["customer"]
    assert customer["firstName"] == "Juan"
    assert customer["lastName"] == "Dela Cruz"
    assert customer["email"] == "juan@example.com"
    assert "passwordHash" not in customer


async def test_submit_quotation_email_sent(test_client: AsyncClient, admin_headers, pending_quote, db_session: AsyncSession):
    response = await test_client.post(
        f"{QUOTES_URL}/admin/{pending_quote.id}/submit",
        json={"estimatedPrice": 15000, "adminNotes": "AC included"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "warning" not in body
    assert body["data"]["emailSent"] is True
    assert body["data"]["emailMessageId"]
    assert body["data"]["quote"]["status"] == "quoted"
    assert body["data"]["quote"]["estimatedPrice"] == 15000

    result = await db_session.execute(
        select(QuotationHistory).where(QuotationHistory.quote_request_id == pending_quote.id).order_by(QuotationHistory.id)
    )
    assert [h.action.value for h in result.scalars().all()] == ["price_updated", "email_sent"]


async def test_submit_quotation_email_failure_is_a_warning(test_client: AsyncClient, admin_headers, pending_quote, email_sender):
    email_sender.send_email.side_effect = EmailSendingException("Mail server timed out")

    response = await test_client.post(
        f"{QUOTES_URL}/admin/{pending_quote.id}/submit",
        json={"estimatedPrice": 15000},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "delivery failed" in body["message"]
    assert body["warning"]
    assert body["data"]["emailSent"] is False
    assert "Mail server timed out" in body["data"]["emailError"]
    assert body["data"]["quote"]["status"] == "quoted"


async def test_submit_quotation_invalid_price(test_client: AsyncClient, admin_headers, pending_quote):
    response = await test_client.post(
        f"{QUOTES_URL}/admin/{pending_quote.id}/submit", json={"estimatedPrice": 0}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please provide a valid estimated price"}


async def test_submit_quotation_non_numeric_price(test_client: AsyncClient, admin_headers, pending_quote):
    response = await test_client.post(
        f"{QUOTES_URL}/admin/{pending_quote.id}/submit", json={"estimatedPrice": "abc"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Please provide a valid estimated price"}


async def test_submit_quotation_empty_notes_keep_existing(test_client: AsyncClient, admin_headers, approved_quote):
    response = await test_client.post(
        f"{QUOTES_URL}/admin/{approved_quote.id}/submit",
        json={"estimatedPrice": 16000, "adminNotes": ""},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["quote"]["adminNotes"] == "AC included"


async def test_submit_quotation_not_found(test_client: AsyncClient, admin_headers):
    response = await test_client.post(
        f"{QUOTES_URL}/admin/missing/submit", json={"estimatedPrice": 15000}, headers=admin_headers
    )

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Quote request not found"}


async def test_submit_quotation_forbidden_for_customer(test_client: AsyncClient, customer_headers, pending_quote):
    response = await test_client.post(
        f"{QUOTES_URL}/admin/{pending_quote.id}/submit", json={"estimatedPrice": 15000}, headers=customer_headers
    )
    assert response.status_code == 403


async def test_decision_and_history(test_client: AsyncClient, admin_headers, customer_headers, pending_quote):
    await test_client.post(
        f"{QUOTES_URL}/admin/{pending_quote.id}/submit", json={"estimatedPrice": 15000}, headers=admin_headers
    )

    decision = await test_client.patch(
        f"{QUOTES_URL}/{pending_quote.id}/decision", json={"decision": "approved"}, headers=customer_headers
    )
    assert decision.status_code == 200
    assert decision.json()["data"]["status"] == "approved"

    again = await test_client.patch(
        f"{QUOTES_URL}/{pending_quote.id}/decision", json={"decision": "rejected"}, headers=customer_headers
    )
    assert again.status_code == 409

    history = await test_client.get(f"{QUOTES_URL}/admin/{pending_quote.id}/history", headers=admin_headers)
    entries = history.json()["data"]
    assert [e["action"] for e in entries] == ["price_updated", "email_sent", "quote_approved"]
    assert "metadata" in entries[0]
    assert entries[0]["newState"]["estimatedPrice"] == 15000


async def test_delete_quote(test_client: AsyncClient, admin_headers, pending_quote):
    quote_id = pending_quote.id
    response = await test_client.delete(f"{QUOTES_URL}/admin/{quote_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Quote request deleted successfully"
    missing = await test_client.get(f"{QUOTES_URL}/{quote_id}", headers=admin_headers)
    assert missing.status_code == 404

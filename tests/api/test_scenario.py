import pytest
from httpx import AsyncClient
from clientdesk.services.payment_service import AUTO_COMPLETED_MESSAGE, AUTO_REVERTED_MESSAGE

pytestmark = pytest.mark.asyncio

class TestPaymentLifecycle:
    async def test_pay_in_full_then_refund(self, client: AsyncClient):
        """Client -> project -> full payment finishes it -> deleting the payment reopens it."""
        acme = (await client.post("/api/v1/clients/", json={
            "full_name": "Juan Dela Cruz",
            "email": "juan@acme.com",
            "phone_number": "+63 917 555 0102",
            "address": "5 Ayala Ave, Makati",
            "company_name": "Acme",
        })).json()

        project = (await client.post("/api/v1/projects/", json={
            "client_id": acme["id"],
            "title": "Website",
            "deadline": "2026-12-31",
            "budget": 10000,
        })).json()
        assert project["status"] == "Started"

        paid = (await client.post(f"/api/v1/projects/{project['id']}/payments", json={
            "amount": 10000, "payment_date": "2026-10-19", "payment_method": "Bank Transfer",
        })).json()
        assert paid["project_status"] == "Finished"

        detail = (await client.get(f"/api/v1/projects/{project['id']}")).json()
        assert detail["status"] == "Finished"
        assert detail["payment_completed"] is True
        assert [u["description"] for u in detail["updates"]] == [AUTO_COMPLETED_MESSAGE]

        refunded = await client.delete(f"/api/v1/payments/{paid['payment']['id']}", params={"confirm": True})
        assert refunded.status_code == 200

        detail = (await client.get(f"/api/v1/projects/{project['id']}")).json()
        assert detail["status"] == "Started"
        assert detail["progress"] == 0
        assert [u["description"] for u in detail["updates"]] == [AUTO_REVERTED_MESSAGE, AUTO_COMPLETED_MESSAGE]

        titles = [t["title"] for t in (await client.get("/api/v1/notifications")).json()]
        assert titles == [
            "Client Added",
            "Project Created",
            "Project Completed!",
            "Payment Deleted & Status Updated",
        ]

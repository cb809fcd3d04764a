import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from skrbl.models import Lead


@pytest.mark.unit
class TestLeadEndpoints:
    async def test_submit_creates_lead(self, async_client: AsyncClient, db_session: Session):
        response = await async_client.post(
            "/api/leads/submit",
            json={"name": "Ada", "email": "ada@example.com"},
            headers={"user-agent": "pytest-agent", "x-forwarded-for": "198.51.100.4"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "created"
        assert body["score"] == 30
        lead = db_session.query(Lead).filter(Lead.id == body["leadId"]).one()
        assert lead.metadata_["user_agent"] == "pytest-agent"
        assert lead.metadata_["ip_address"] == "198.51.100.4"

    async def test_resubmit_updates(self, async_client: AsyncClient):
        first = await async_client.post("/api/leads/submit", json={"email": "ada@example.com"})
        second = await async_client.post("/api/leads/submit", json={"email": "ada@example.com", "campaign": "spring"})

        assert second.json()["status"] == "updated"
        assert second.json()["leadId"] == first.json()["leadId"]

    async def test_missing_email(self, async_client: AsyncClient):
        response = await async_client.post("/api/leads/submit", json={"name": "Ada"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required field: email"

    async def test_invalid_email(self, async_client: AsyncClient):
        response = await async_client.post("/api/leads/submit", json={"email": "nope"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid field email")

    async def test_anonymous_lead_records_form_submit(self, async_client: AsyncClient, db_session: Session):
        response = await async_client.post("/api/leads/submit", json={"name": "Jane", "email": "jane@x.com"})

        assert response.status_code == 200
        lead = db_session.query(Lead).one()
        assert lead.user_id is None
        assert [(a.activity_type, a.score_change) for a in lead.activities] == [("form_submit", 0)]

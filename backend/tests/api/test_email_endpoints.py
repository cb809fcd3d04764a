import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from skrbl.core.config import settings
from skrbl.models import EmailQueueItem, EmailSequenceEnrollment
from tests.factories import EmailQueueItemFactory

TRIGGER = {
    "triggerType": "upgrade_prompt",
    "userId": "user-1",
    "userEmail": "ada@example.com",
    "metadata": {"agentName": "Social Bot"},
}


@pytest.mark.unit
class TestEmailTriggerEndpoints:
    """Sequence enrollment over HTTP."""

    async def test_trigger_enrolls(self, async_client: AsyncClient, db_session: Session, mock_n8n):
        response = await async_client.post("/api/email/trigger", json=TRIGGER)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [s["sequenceId"] for s in body["triggeredSequences"]] == ["upgrade-nurture"]
        assert db_session.query(EmailQueueItem).count() == 3

    async def test_repeat_trigger_does_not_duplicate(self, async_client: AsyncClient, db_session: Session, mock_n8n):
        await async_client.post("/api/email/trigger", json=TRIGGER)
        response = await async_client.post("/api/email/trigger", json=TRIGGER)

        assert response.status_code == 200
        assert response.json()["triggeredSequences"] == []
        assert db_session.query(EmailSequenceEnrollment).count() == 1

    async def test_no_matching_sequence(self, async_client: AsyncClient, mock_n8n):
        response = await async_client.post("/api/email/trigger", json={**TRIGGER, "triggerType": "unknown"})

        assert response.status_code == 200
        assert response.json()["message"] == "No applicable sequences found"

    async def test_missing_user_email(self, async_client: AsyncClient, mock_n8n):
        payload = {k: v for k, v in TRIGGER.items() if k != "userEmail"}

        response = await async_client.post("/api/email/trigger", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required field: userEmail"

    async def test_list_enrollments(self, async_client: AsyncClient, mock_n8n):
        await async_client.post("/api/email/trigger", json=TRIGGER)

        response = await async_client.get("/api/email/trigger", params={"userId": "user-1"})

        assert response.status_code == 200
        sequences = response.json()["sequences"]
        assert len(sequences) == 1
        assert sequences[0]["sequence_id"] == "upgrade-nurture"
        assert sequences[0]["metadata"] == {"agentName": "Social Bot"}

    async def test_list_requires_user(self, async_client: AsyncClient):
        response = await async_client.get("/api/email/trigger")
        assert response.status_code == 400


@pytest.mark.unit
class TestCronEndpoints:
    async def test_process_drip_requires_secret(self, async_client: AsyncClient):
        response = await async_client.post("/api/cron/process-drip")
        assert response.status_code == 401

        response = await async_client.post("/api/cron/process-drip", headers={"x-cron-secret": "wrong"})
        assert response.status_code == 401

    async def test_process_drip_sends_due(self, async_client: AsyncClient, db_session: Session):
        db_session.add(EmailQueueItemFactory())
        db_session.commit()

        response = await async_client.post(
            "/api/cron/process-drip", headers={"x-cron-secret": settings.CRON_SECRET}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "processed": 1, "sent": 1, "failed": 0, "cancelled": 0}
        assert db_session.query(EmailQueueItem).one().status == "sent"

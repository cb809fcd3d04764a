import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from skrbl.core.rate_limiting import ip_rate_limiter
from skrbl.models import SystemLog


@pytest.mark.unit
class TestOnboardingEndpoints:
    async def test_save_and_read_back(self, async_client: AsyncClient):
        saved = await async_client.post("/api/onboarding", json={
            "userId": "user-1",
            "agentId": "socialBot",
            "onboarding": {"step": 2, "completed": False},
        })
        await async_client.post("/api/onboarding", json={
            "userId": "user-1",
            "agentId": "branding",
            "onboarding": {"step": 1},
        })

        response = await async_client.get("/api/onboarding", params={"userId": "user-1", "agentId": "socialBot"})

        assert saved.status_code == 200
        assert saved.json() == {"success": True}
        assert response.json()["onboarding"] == {"step": 2, "completed": False}

    async def test_unknown_state_is_null(self, async_client: AsyncClient):
        response = await async_client.get("/api/onboarding", params={"userId": "nobody", "agentId": "socialBot"})

        assert response.status_code == 200
        assert response.json()["onboarding"] is None

    async def test_missing_agent_id(self, async_client: AsyncClient):
        response = await async_client.post("/api/onboarding", json={"userId": "user-1", "onboarding": {}})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required field: agentId"

    async def test_rate_limit_logged(self, async_client: AsyncClient, db_session: Session, mocker):
        mocker.patch.object(ip_rate_limiter, "max_requests", 1)
        params = {"userId": "user-1", "agentId": "socialBot"}

        first = await async_client.get("/api/onboarding", params=params)
        second = await async_client.get("/api/onboarding", params=params)

        assert first.status_code == 200
        assert second.status_code == 429
        assert second.json()["success"] is False
        log = db_session.query(SystemLog).filter(SystemLog.type == "warning").one()
        assert "Rate limit exceeded" in log.message

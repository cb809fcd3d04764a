from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from skrbl.core.security import create_access_token
from tests.factories import SystemLogFactory, WorkflowLogFactory


@pytest.mark.unit
class TestSystemLogEndpoints:
    async def test_requires_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/system/logs")

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_rejects_non_admin(self, async_client: AsyncClient, user_headers: dict):
        response = await async_client.get("/api/system/logs", headers=user_headers)
        assert response.status_code == 401

    async def test_rejects_invalid_token(self, async_client: AsyncClient):
        response = await async_client.get("/api/system/logs", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    async def test_admin_role_sees_logs(self, async_client: AsyncClient, db_session: Session, admin_headers: dict):
        db_session.add_all([
            SystemLogFactory(type="info", message="first"),
            SystemLogFactory(type="error", message="second"),
        ])
        db_session.commit()

        response = await async_client.get("/api/system/logs", headers=admin_headers)
        errors = await async_client.get("/api/system/logs", params={"type": "error"}, headers=admin_headers)

        assert response.status_code == 200
        assert len(response.json()["logs"]) == 2
        assert [log["message"] for log in errors.json()["logs"]] == ["second"]

    async def test_admin_email_domain(self, async_client: AsyncClient):
        token = create_access_token("staff-1", email="ops@skrblai.io")

        response = await async_client.get("/api/system/logs", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200


@pytest.mark.unit
class TestAnalyticsEndpoints:
    async def test_history_filters_and_orders(self, async_client: AsyncClient, db_session: Session):
        first = WorkflowLogFactory(user_id="user-1", agent_id="socialBot")
        db_session.add(first)
        db_session.commit()
        db_session.add_all([
            WorkflowLogFactory(user_id="user-1", agent_id="branding", workflow="brand-identity",
                               created_at=first.created_at + timedelta(minutes=5)),
            WorkflowLogFactory(user_id="user-2"),
        ])
        db_session.commit()

        response = await async_client.get("/api/analytics/history", params={"userId": "user-1"})
        branding = await async_client.get("/api/analytics/history", params={"userId": "user-1", "agentId": "branding"})

        history = response.json()["history"]
        assert [h["agent_id"] for h in history] == ["branding", "socialBot"]
        assert len(branding.json()["history"]) == 1

    async def test_history_limit(self, async_client: AsyncClient, db_session: Session):
        db_session.add_all([WorkflowLogFactory() for _ in range(5)])
        db_session.commit()

        response = await async_client.get("/api/analytics/history", params={"limit": 2})

        assert len(response.json()["history"]) == 2

    async def test_invalid_limit(self, async_client: AsyncClient):
        response = await async_client.get("/api/analytics/history", params={"limit": 0})
        assert response.status_code == 400

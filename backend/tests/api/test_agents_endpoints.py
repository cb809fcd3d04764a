import pytest
from httpx import AsyncClient
from sqlalchemy.orm import Session

from skrbl.core.rate_limiting import ip_rate_limiter
from skrbl.models import AgentJob, BrandingContent, SocialContent
from skrbl.models.job import JOB_COMPLETE, JOB_QUEUED
from tests.factories import AgentJobFactory


@pytest.mark.unit
class TestAgentEndpoints:
    """Synchronous agent runs and background launches."""

    async def test_list_agents(self, async_client: AsyncClient):
        response = await async_client.get("/api/agents")

        assert response.status_code == 200
        ids = [a["id"] for a in response.json()["agents"]]
        assert ids == ["socialBot", "branding"]

    async def test_social_bot_run(self, async_client: AsyncClient, db_session: Session):
        response = await async_client.post("/api/agents/social-bot", json={
            "businessName": "Acme",
            "industry": "coffee",
            "platforms": ["twitter", "instagram"],
            "postCount": 2,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Social media content generated successfully for Acme on twitter, instagram"
        assert len(body["data"]["content"]["platforms"]) == 2
        assert db_session.query(SocialContent).count() == 1

    async def test_social_bot_run_drives_job(self, async_client: AsyncClient, db_session: Session):
        job = AgentJobFactory()
        db_session.add(job)
        db_session.commit()

        response = await async_client.post("/api/agents/social-bot", json={
            "businessName": "Acme",
            "industry": "coffee",
            "platforms": ["linkedin"],
            "jobId": job.id,
        })

        assert response.status_code == 200
        db_session.refresh(job)
        assert job.status == JOB_COMPLETE
        assert job.progress == 100

    async def test_social_bot_unknown_job_id(self, async_client: AsyncClient, db_session: Session):
        response = await async_client.post("/api/agents/social-bot", json={
            "businessName": "Acme",
            "industry": "coffee",
            "platforms": ["twitter"],
            "jobId": "does-not-exist",
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert db_session.query(SocialContent).one().job_id is None
        assert db_session.query(AgentJob).count() == 0

    async def test_social_bot_missing_field(self, async_client: AsyncClient):
        response = await async_client.post("/api/agents/social-bot", json={
            "industry": "coffee",
            "platforms": ["twitter"],
        })

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Missing required field: businessName"}

    async def test_branding_run(self, async_client: AsyncClient, db_session: Session):
        response = await async_client.post("/api/agents/branding", json={
            "businessName": "Northwind",
            "industry": "finance",
            "targetAudience": "founders",
            "stylePreference": "minimalist",
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["brandIdentity"]["typography"]["headingFont"] == "Helvetica Neue"
        assert db_session.query(BrandingContent).one().id == data["brandingId"]

    async def test_launch_queues_job(self, async_client: AsyncClient, db_session: Session, mocker):
        task = mocker.patch("skrbl.api.endpoints.agents.run_agent_job")

        response = await async_client.post("/api/agents/social-bot/launch", json={
            "userId": "user-1",
            "input": {"businessName": "Acme", "industry": "coffee", "platforms": ["twitter"]},
        })

        assert response.status_code == 202
        job_id = response.json()["jobId"]
        job = db_session.query(AgentJob).filter(AgentJob.id == job_id).one()
        assert job.status == JOB_QUEUED
        assert job.job_type == "socialBot"
        assert job.user_id == "user-1"
        task.delay.assert_called_once_with(job_id, "socialBot", {
            "businessName": "Acme", "industry": "coffee", "platforms": ["twitter"], "userId": "user-1",
        })

    async def test_launch_unknown_agent(self, async_client: AsyncClient, mocker):
        task = mocker.patch("skrbl.api.endpoints.agents.run_agent_job")

        response = await async_client.post("/api/agents/video/launch", json={"input": {}})

        assert response.status_code == 404
        task.delay.assert_not_called()

    async def test_launch_invalid_input(self, async_client: AsyncClient, db_session: Session, mocker):
        task = mocker.patch("skrbl.api.endpoints.agents.run_agent_job")

        response = await async_client.post("/api/agents/branding/launch", json={"input": {"businessName": "X"}})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Missing required field")
        assert db_session.query(AgentJob).count() == 0
        task.delay.assert_not_called()

    async def test_agent_routes_rate_limited(self, async_client: AsyncClient, mocker):
        mocker.patch.object(ip_rate_limiter, "max_requests", 2)
        payload = {"businessName": "Acme", "industry": "coffee", "platforms": ["twitter"], "postCount": 1}

        statuses = [
            (await async_client.post("/api/agents/social-bot", json=payload)).status_code
            for _ in range(3)
        ]

        assert statuses == [200, 200, 429]


@pytest.mark.unit
class TestJobEndpoints:
    async def test_get_job(self, async_client: AsyncClient, db_session: Session):
        job = AgentJobFactory(progress=40, status="in_progress")
        db_session.add(job)
        db_session.commit()

        response = await async_client.get(f"/api/jobs/{job.id}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["jobId"] == job.id
        assert data["status"] == "in_progress"
        assert data["progress"] == 40

    async def test_get_missing_job(self, async_client: AsyncClient):
        response = await async_client.get("/api/jobs/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Job not found"}

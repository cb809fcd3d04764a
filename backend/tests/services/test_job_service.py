import pytest
from sqlalchemy.orm import Session

from skrbl.models import AgentJob
from skrbl.models.job import JOB_COMPLETE, JOB_FAILED, JOB_IN_PROGRESS, JOB_QUEUED
from skrbl.services.job_service import JobService, clamp_progress
from tests.factories import AgentJobFactory


def _add(db_session: Session, **kwargs) -> AgentJob:
    job = AgentJobFactory(**kwargs)
    db_session.add(job)
    db_session.commit()
    return job


@pytest.mark.unit
class TestJobLifecycle:
    """Status transitions of agent jobs."""

    def test_create_job_starts_queued(self, db_session: Session):
        job = JobService.create_job(db_session, "socialBot", user_id="u1", input_data={"a": 1})

        assert job.status == JOB_QUEUED
        assert job.progress == 0
        assert job.input == {"a": 1}
        assert JobService.get_job(db_session, job.id) is job

    def test_create_job_honours_caller_id(self, db_session: Session):
        job = JobService.create_job(db_session, "branding", job_id="job-fixed")
        assert job.id == "job-fixed"

    def test_started_sets_in_progress(self, db_session: Session):
        job = _add(db_session)

        updated = JobService.mark_job_started(db_session, job.id)

        assert updated.status == JOB_IN_PROGRESS
        assert updated.progress == 5

    def test_progress_is_clamped(self, db_session: Session):
        job = _add(db_session, status=JOB_IN_PROGRESS)

        assert JobService.update_job_progress(db_session, job.id, 150).progress == 100

    def test_progress_never_decreases(self, db_session: Session):
        job = _add(db_session, status=JOB_IN_PROGRESS, progress=50)

        updated = JobService.update_job_progress(db_session, job.id, 20)

        assert updated.progress == 50

    def test_complete_sets_full_progress_and_output(self, db_session: Session):
        job = _add(db_session, status=JOB_IN_PROGRESS, progress=80)

        updated = JobService.mark_job_complete(db_session, job.id, {"result": "ok"})

        assert updated.status == JOB_COMPLETE
        assert updated.progress == 100
        assert updated.output == {"result": "ok"}
        assert updated.error is None

    def test_failed_records_error(self, db_session: Session):
        job = _add(db_session, status=JOB_IN_PROGRESS, progress=50)

        updated = JobService.mark_job_failed(db_session, job.id, "boom")

        assert updated.status == JOB_FAILED
        assert updated.error == "boom"
        assert updated.progress == 50

    def test_failed_without_message(self, db_session: Session):
        job = _add(db_session)
        assert JobService.mark_job_failed(db_session, job.id, None).error == "Unknown error"

    def test_terminal_job_is_not_modified(self, db_session: Session):
        job = _add(db_session, status=JOB_COMPLETE, progress=100, output={"done": True})

        JobService.mark_job_failed(db_session, job.id, "late failure")
        JobService.update_job_progress(db_session, job.id, 10)
        JobService.mark_job_started(db_session, job.id)

        db_session.refresh(job)
        assert job.status == JOB_COMPLETE
        assert job.progress == 100
        assert job.error is None
        assert job.output == {"done": True}

    def test_unknown_job_returns_none(self, db_session: Session):
        assert JobService.mark_job_started(db_session, "missing") is None
        assert JobService.update_job_progress(db_session, "missing", 40) is None
        assert JobService.mark_job_complete(db_session, "missing", {}) is None
        assert JobService.mark_job_failed(db_session, "missing", "x") is None
        assert db_session.query(AgentJob).count() == 0

    def test_updated_at_advances(self, db_session: Session):
        job = _add(db_session)
        before = job.updated_at

        updated = JobService.mark_job_started(db_session, job.id)

        assert updated.updated_at >= before

    @pytest.mark.parametrize("raw,expected", [(-5, 0), (0, 0), (42, 42), (100, 100), (101, 100)])
    def test_clamp_progress(self, raw, expected):
        assert clamp_progress(raw) == expected

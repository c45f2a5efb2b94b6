"""Tests for the validation worker."""

import random
import uuid

from gptmarket.models.job import ValidationJob
from gptmarket.models.submission import Submission
from gptmarket.models.validation import ValidationRun
from gptmarket.services import validator
from gptmarket.worker import Worker


def enqueue(test_db, submission_id, mode="automated"):
    job = ValidationJob(submission_id=submission_id, mode=mode, status="queued")
    test_db.add(job)
    test_db.commit()
    return job.job_id


def test_run_once_without_jobs(session_factory):
    assert Worker(session_factory=session_factory).run_once() is False


def test_processes_queued_job(test_db, session_factory, make_submission):
    submission = make_submission()
    job_id = enqueue(test_db, submission.submission_id)

    worker = Worker(session_factory=session_factory, rng=random.Random(3))
    assert worker.run_once() is True
    assert worker.run_once() is False

    test_db.expire_all()
    job = test_db.query(ValidationJob).filter(ValidationJob.job_id == job_id).one()
    assert job.status == "done"
    run = test_db.query(ValidationRun).one()
    assert run.mode == "automated"
    assert run.status == "passed"
    stored = test_db.query(Submission).filter(Submission.submission_id == submission.submission_id).one()
    assert stored.status == "approved"


def test_missing_submission_fails_job(test_db, session_factory):
    job_id = enqueue(test_db, uuid.uuid4())

    Worker(session_factory=session_factory).run_once()

    test_db.expire_all()
    job = test_db.query(ValidationJob).filter(ValidationJob.job_id == job_id).one()
    assert job.status == "failed"
    assert "not found" in job.last_error
    assert job.retries == 0


def test_failed_job_is_retried_then_failed(test_db, session_factory, make_submission, monkeypatch):
    submission = make_submission()
    job_id = enqueue(test_db, submission.submission_id)

    def broken(*args, **kwargs):
        raise RuntimeError("scorer unavailable")

    monkeypatch.setattr(validator, "score_submission", broken)

    worker = Worker(session_factory=session_factory)
    worker.max_retries = 2

    worker.run_once()
    test_db.expire_all()
    job = test_db.query(ValidationJob).filter(ValidationJob.job_id == job_id).one()
    assert job.status == "queued"
    assert job.retries == 1
    assert job.last_error == "scorer unavailable"

    worker.run_once()
    test_db.expire_all()
    job = test_db.query(ValidationJob).filter(ValidationJob.job_id == job_id).one()
    assert job.status == "failed"
    assert job.retries == 2
    assert job.last_error == "scorer unavailable"
    assert [r.status for r in test_db.query(ValidationRun).all()] == ["skipped", "skipped"]


def test_job_recovers_after_scoring_failure(test_db, session_factory, make_submission, monkeypatch):
    """A failed attempt must not block the retry with its own open run."""
    submission = make_submission()
    job_id = enqueue(test_db, submission.submission_id)

    real_score = validator.score_submission
    calls = []

    def flaky(*args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("scorer unavailable")
        return real_score(*args, **kwargs)

    monkeypatch.setattr(validator, "score_submission", flaky)

    worker = Worker(session_factory=session_factory, rng=random.Random(5))
    for _ in range(4):
        if not worker.run_once():
            break

    test_db.expire_all()
    job = test_db.query(ValidationJob).filter(ValidationJob.job_id == job_id).one()
    assert job.status == "done"
    assert job.retries == 1
    assert len(calls) == 2
    statuses = sorted(r.status for r in test_db.query(ValidationRun).all())
    assert statuses == ["passed", "skipped"]
    stored = test_db.query(Submission).filter(Submission.submission_id == submission.submission_id).one()
    assert stored.status == "approved"

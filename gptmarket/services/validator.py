"""Validation orchestration: run bookkeeping and submission status updates."""

import logging
import random
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from gptmarket.config import settings
from gptmarket.models.submission import Submission
from gptmarket.models.validation import ValidationRun
from gptmarket.schemas.validation import (
    RunStatus,
    SubmissionStatus,
    ValidationMode,
    ValidationResponse,
    ValidationResult,
    ValidationTestCase,
)
from gptmarket.services.scoring import derive_submission_status, score_submission

logger = logging.getLogger(__name__)

db_write_retry = retry(
    retry=retry_if_exception_type(OperationalError),
    stop=stop_after_attempt(settings.DB_WRITE_RETRIES),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
    reraise=True,
)


class ValidationServiceError(Exception):
    """Base class for validation service errors."""


class SubmissionNotFound(ValidationServiceError):
    """No submission matches the requested identifier."""

    def __init__(self, submission_id):
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class ValidationInProgress(ValidationServiceError):
    """An open run already exists for the submission and mode."""

    def __init__(self, submission_id, mode: ValidationMode, run_id):
        super().__init__(f"Validation {run_id} ({mode.value}) already in progress for submission {submission_id}")
        self.submission_id = submission_id
        self.mode = mode
        self.run_id = run_id


def get_submission(db: Session, submission_id: uuid.UUID) -> Submission:
    """Load a submission or raise SubmissionNotFound."""
    submission = db.query(Submission).filter(Submission.submission_id == submission_id).first()
    if not submission:
        raise SubmissionNotFound(submission_id)
    return submission


def open_run(db: Session, submission: Submission, mode: ValidationMode) -> ValidationRun:
    """
    Insert a pending run and mark the submission as validating.

    Open runs for the same submission and mode that started recently block
    the request. Older ones are treated as abandoned and marked skipped.

    Raises:
        ValidationInProgress: If a recent open run exists
    """
    now = datetime.utcnow()
    stale_before = now - timedelta(seconds=settings.VALIDATION_STALE_AFTER_SECONDS)

    open_runs = (
        db.query(ValidationRun)
        .filter(
            ValidationRun.submission_id == submission.submission_id,
            ValidationRun.mode == mode.value,
            ValidationRun.status == RunStatus.PENDING.value,
        )
        .with_for_update()
        .all()
    )
    for existing in open_runs:
        if existing.started_at and existing.started_at > stale_before:
            db.rollback()
            raise ValidationInProgress(submission.submission_id, mode, existing.run_id)

    for stale in open_runs:
        stale.status = RunStatus.SKIPPED.value
        stale.completed_at = now
        logger.warning(f"Superseded abandoned validation run {stale.run_id}")
    # Stale rows must leave the open-run index before the new row enters it
    db.flush()

    run = ValidationRun(
        submission_id=submission.submission_id,
        mode=mode.value,
        status=RunStatus.PENDING.value,
        validator_name=settings.VALIDATOR_NAME,
        started_at=now,
    )
    db.add(run)
    submission.status = SubmissionStatus.VALIDATING.value
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request opened a run for the same pair first
        db.rollback()
        winner = (
            db.query(ValidationRun.run_id)
            .filter(
                ValidationRun.submission_id == submission.submission_id,
                ValidationRun.mode == mode.value,
                ValidationRun.status == RunStatus.PENDING.value,
            )
            .limit(1)
            .scalar()
        )
        raise ValidationInProgress(submission.submission_id, mode, winner)

    logger.info(f"Created {mode.value} validation run {run.run_id} for submission {submission.submission_id}")
    return run


@db_write_retry
def finalize_run(db: Session, run_id: uuid.UUID, result: ValidationResult) -> None:
    """Write the verdict, counts and sub-scores to a pending run."""
    try:
        run = db.query(ValidationRun).filter(ValidationRun.run_id == run_id).one()
        details = result.details
        run.status = result.status.value
        run.test_cases_total = details.test_cases_total
        run.test_cases_passed = details.test_cases_passed
        run.test_cases_failed = details.test_cases_total - details.test_cases_passed
        run.avg_response_time_ms = details.avg_response_time
        run.accuracy_score = details.accuracy_score
        run.consistency_score = details.consistency_score
        run.safety_score = details.safety_score
        run.results = {
            "score": result.score,
            "recommendations": result.recommendations,
            "errors": result.errors,
        }
        run.completed_at = datetime.utcnow()
        db.commit()
    except OperationalError:
        db.rollback()
        logger.warning(f"Finalizing validation run {run_id} failed, retrying")
        raise


@db_write_retry
def abandon_run(db: Session, run_id: uuid.UUID) -> None:
    """Mark a run that will never be finalized as skipped."""
    try:
        run = (
            db.query(ValidationRun)
            .filter(ValidationRun.run_id == run_id, ValidationRun.status == RunStatus.PENDING.value)
            .first()
        )
        if run:
            run.status = RunStatus.SKIPPED.value
            run.completed_at = datetime.utcnow()
            db.commit()
            logger.warning(f"Abandoned validation run {run_id}")
    except OperationalError:
        db.rollback()
        raise


@db_write_retry
def update_submission_status(
    db: Session,
    submission_id: uuid.UUID,
    status: SubmissionStatus,
    accuracy_score: float,
) -> None:
    """Write the derived lifecycle status and last-known accuracy to a submission."""
    try:
        submission = get_submission(db, submission_id)
        submission.status = status.value
        submission.accuracy_score = accuracy_score
        db.commit()
    except OperationalError:
        db.rollback()
        logger.warning(f"Updating status of submission {submission_id} failed, retrying")
        raise


def request_validation(
    db: Session,
    submission_id: uuid.UUID,
    mode: ValidationMode,
    test_cases: Optional[List[ValidationTestCase]] = None,
    rng: Optional[random.Random] = None,
    abandon_on_error: bool = False,
) -> ValidationResponse:
    """
    Validate a submission under the given mode and persist the outcome.

    The run row and the submission row are committed separately; a failure
    in the second write leaves the first one in place. A failure before the
    run is finalized leaves it pending unless abandon_on_error is set, in
    which case it is marked skipped so a retry can open a new one.

    Args:
        db: Database session
        submission_id: Submission to validate
        mode: Validation mode
        test_cases: Caller-supplied cases, currently not used by any mode
        rng: Random source for the simulated probes
        abandon_on_error: Skip this request's run if scoring or finalizing fails

    Returns:
        ValidationResponse with the verdict and the submission's new status

    Raises:
        SubmissionNotFound: If the submission does not exist
        ValidationInProgress: If a recent open run exists for the same mode
    """
    mode = ValidationMode(mode)
    submission = get_submission(db, submission_id)

    if test_cases:
        logger.info(f"Ignoring {len(test_cases)} supplied test cases for submission {submission_id}")

    run = open_run(db, submission, mode)
    run_id = run.run_id

    try:
        result = score_submission(submission, mode, rng=rng)
        model_status = derive_submission_status(result)
        finalize_run(db, run_id, result)
    except Exception:
        if abandon_on_error:
            db.rollback()
            abandon_run(db, run_id)
        raise

    update_submission_status(db, submission_id, model_status, result.details.accuracy_score)

    logger.info(
        f"Validation run {run_id} {result.status.value} with score {result.score:.1f}, "
        f"submission {submission_id} is now {model_status.value}"
    )

    return ValidationResponse(validation=result, model_status=model_status)


def get_validation_history(db: Session, submission_id: uuid.UUID) -> List[ValidationRun]:
    """
    List all validation runs of a submission, newest first.

    Raises:
        SubmissionNotFound: If the submission does not exist
    """
    get_submission(db, submission_id)
    return (
        db.query(ValidationRun)
        .filter(ValidationRun.submission_id == submission_id)
        .order_by(ValidationRun.created_at.desc())
        .all()
    )

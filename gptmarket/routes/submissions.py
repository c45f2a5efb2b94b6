"""Submission routes."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from gptmarket.database import get_db
from gptmarket.models.job import ValidationJob
from gptmarket.models.submission import Submission
from gptmarket.schemas.submission import (
    SubmissionCreate,
    SubmissionCreateResponse,
    SubmissionOut,
    SubmissionSummary,
)
from gptmarket.schemas.validation import SubmissionStatus, ValidationMode
from gptmarket.services.validators import validate_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/submissions", tags=["submissions"])


@router.post("", status_code=201, response_model=SubmissionCreateResponse)
def create_submission(
    data: SubmissionCreate,
    db: Session = Depends(get_db),
):
    """
    Publish a GPT configuration.

    The submission is stored as pending and an automated validation job is
    enqueued for the worker.
    """
    check = validate_submission(data)
    if not check.is_valid:
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": check.errors, "warnings": check.warnings},
        )

    version = data.version or "1.0.0"
    existing = (
        db.query(Submission)
        .filter(Submission.name == data.name, Submission.version == version)
        .first()
    )
    if existing:
        return JSONResponse(
            status_code=409,
            content={
                "error": "Model with this name and version already exists",
                "suggestion": "Please use a different name or increment the version number",
            },
        )

    submission = Submission(
        name=data.name,
        version=version,
        description=data.description,
        category=data.category,
        tags=data.tags,
        license_type=data.license_type,
        license_text=data.license_text,
        documentation_url=data.documentation_url,
        repository_url=data.repository_url,
        system_prompt=data.system_prompt,
        temperature=data.default_config.temperature,
        top_p=data.default_config.top_p,
        max_tokens=data.default_config.max_tokens,
        knowledge_context=data.knowledge_context,
        knowledge_files=[f.model_dump() for f in data.knowledge_files],
        sample_prompts=[p for p in data.sample_prompts if p.strip()],
        publisher_name=data.publisher_name,
        publisher_email=data.publisher_email,
        is_public=data.is_public,
        status=SubmissionStatus.PENDING.value,
    )
    db.add(submission)
    db.flush()  # Flush to get the auto-generated submission_id

    job = ValidationJob(
        submission_id=submission.submission_id,
        mode=ValidationMode.AUTOMATED.value,
        status="queued",
    )
    db.add(job)
    db.commit()

    logger.info(f"Created submission {submission.submission_id}, validation job {job.job_id}")

    return SubmissionCreateResponse(
        model=SubmissionSummary(
            id=submission.submission_id,
            name=submission.name,
            version=submission.version,
            status=submission.status,
        ),
        message="Model submitted successfully and validation has been initiated",
        warnings=check.warnings,
    )


@router.get("/{submission_id}", response_model=SubmissionOut)
def get_submission(
    submission_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Get a submission by id."""
    submission = db.query(Submission).filter(Submission.submission_id == submission_id).first()
    if not submission:
        raise HTTPException(status_code=404, detail="Model not found")
    return submission

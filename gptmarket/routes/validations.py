"""Validation routes."""

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from gptmarket.database import get_db
from gptmarket.schemas.validation import (
    ValidationHistoryResponse,
    ValidationRequest,
    ValidationResponse,
    ValidationRunOut,
)
from gptmarket.services.validator import (
    SubmissionNotFound,
    ValidationInProgress,
    get_validation_history,
    request_validation,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/validations", tags=["validations"])


@router.post("", response_model=ValidationResponse)
def create_validation(
    data: ValidationRequest,
    db: Session = Depends(get_db),
):
    """Run a validation for a submission and return the verdict."""
    try:
        return request_validation(db, data.model_id, data.validation_type, test_cases=data.test_cases)
    except SubmissionNotFound:
        raise HTTPException(status_code=404, detail="Model not found")
    except ValidationInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Validation error for model {data.model_id}: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(e)},
        )


@router.get("", response_model=ValidationHistoryResponse)
def list_validations(
    model_id: Optional[uuid.UUID] = Query(None, alias="modelId"),
    db: Session = Depends(get_db),
):
    """Get the validation history of a submission, newest first."""
    if model_id is None:
        raise HTTPException(status_code=400, detail="Model ID is required")

    try:
        runs = get_validation_history(db, model_id)
    except SubmissionNotFound:
        raise HTTPException(status_code=404, detail="Model not found")

    return ValidationHistoryResponse(
        validations=[ValidationRunOut.model_validate(r) for r in runs],
    )

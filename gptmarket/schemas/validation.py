"""Validation-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ValidationMode(str, Enum):
    """Scoring procedure selected for a validation run."""

    AUTOMATED = "automated"
    MANUAL = "manual"
    PERFORMANCE = "performance"
    SAFETY = "safety"


class RunStatus(str, Enum):
    """Validation run status. PENDING while executing, then a verdict."""

    PENDING = "pending"
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"
    SKIPPED = "skipped"  # Open run superseded by a newer request


class SubmissionStatus(str, Enum):
    """Lifecycle status of a submission."""

    PENDING = "pending"
    VALIDATING = "validating"
    APPROVED = "approved"
    NEEDS_REVISION = "needs_revision"
    REJECTED = "rejected"


class CamelModel(BaseModel):
    """Base for the public contract, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class ValidationTestCase(CamelModel):
    """Caller-supplied test case. Accepted by the contract but not scored."""

    input: Any
    expected_output: Optional[Any] = None
    description: Optional[str] = None


class ValidationRequest(CamelModel):
    """Schema for requesting a validation run."""

    model_id: UUID
    validation_type: ValidationMode
    test_cases: Optional[List[ValidationTestCase]] = None


class ValidationDetails(CamelModel):
    """Counts and sub-scores of a completed run."""

    test_cases_passed: int
    test_cases_total: int
    avg_response_time: float
    accuracy_score: float
    consistency_score: float
    safety_score: float


class ValidationResult(CamelModel):
    """Verdict of a single validation run."""

    status: RunStatus
    score: float
    details: ValidationDetails
    recommendations: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class ValidationResponse(CamelModel):
    """Response after a validation run completes."""

    success: bool = True
    validation: ValidationResult
    model_status: SubmissionStatus


class ValidationRunOut(BaseModel):
    """A validation run row as returned by the history endpoint."""

    model_config = ConfigDict(from_attributes=True)

    run_id: UUID
    submission_id: UUID
    mode: str
    status: str
    test_cases_total: Optional[int] = None
    test_cases_passed: Optional[int] = None
    test_cases_failed: Optional[int] = None
    avg_response_time_ms: Optional[float] = None
    accuracy_score: Optional[float] = None
    consistency_score: Optional[float] = None
    safety_score: Optional[float] = None
    results: Optional[Dict[str, Any]] = None
    validator_name: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ValidationHistoryResponse(BaseModel):
    """Validation history for a submission, newest first."""

    validations: List[ValidationRunOut]

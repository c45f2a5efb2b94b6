"""Validation run model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import relationship

from gptmarket.database import Base
from gptmarket.models.submission import JSONType


class ValidationRun(Base):
    """One execution of the validator against a submission."""

    __tablename__ = "validation_runs"

    run_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    submission_id = Column(Uuid, ForeignKey("submissions.submission_id", ondelete="CASCADE"), nullable=False)
    mode = Column(String(20), nullable=False)  # 'automated', 'manual', 'performance', 'safety'
    status = Column(String(20), nullable=False, default="pending")  # 'pending', 'passed', 'warning', 'failed', 'skipped'

    # Test results
    test_cases_total = Column(Integer, default=0)
    test_cases_passed = Column(Integer, default=0)
    test_cases_failed = Column(Integer, default=0)

    # Measurements
    avg_response_time_ms = Column(Float)
    accuracy_score = Column(Float)
    consistency_score = Column(Float)
    safety_score = Column(Float)

    results = Column(JSONType)  # {score, recommendations, errors}

    validator_name = Column(String(100))
    started_at = Column(DateTime)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    submission = relationship("Submission", back_populates="validation_runs")

    __table_args__ = (
        Index("idx_validation_runs_submission_mode_status", "submission_id", "mode", "status"),
        Index("idx_validation_runs_created_at", "created_at"),
        # At most one open run per submission and mode
        Index(
            "uq_validation_runs_open",
            "submission_id",
            "mode",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

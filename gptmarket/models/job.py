"""Job model for the validation worker queue."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, Uuid

from gptmarket.database import Base


class ValidationJob(Base):
    """A queued validation request for the worker."""

    __tablename__ = "validation_jobs"

    job_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    submission_id = Column(Uuid, ForeignKey("submissions.submission_id", ondelete="CASCADE"), nullable=False)
    mode = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)  # 'queued', 'running', 'done', 'failed'
    retries = Column(Integer, default=0)
    last_error = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_validation_jobs_status", "status"),
        Index("idx_validation_jobs_submission_id", "submission_id"),
    )

"""Submission model."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from gptmarket.database import Base

JSONType = JSON().with_variant(JSONB, "postgresql")

SUBMISSION_STATUSES = ("pending", "validating", "approved", "needs_revision", "rejected")


class Submission(Base):
    """A published (or pending) GPT configuration."""

    __tablename__ = "submissions"

    submission_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    version = Column(String(20), nullable=False, default="1.0.0")
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False)
    tags = Column(JSONType, default=list)

    # Publishing requirements
    license_type = Column(String(50), nullable=False)
    license_text = Column(Text)
    documentation_url = Column(Text)
    repository_url = Column(Text)

    # Generation configuration
    system_prompt = Column(Text, nullable=False)
    temperature = Column(Float, nullable=False, default=0.7)
    top_p = Column(Float, nullable=False, default=0.9)
    max_tokens = Column(Integer, nullable=False, default=1024)

    # Knowledge
    knowledge_context = Column(Text)
    knowledge_files = Column(JSONType, default=list)  # [{name, size, type}]
    sample_prompts = Column(JSONType, default=list)

    # Publisher
    publisher_name = Column(String(100))
    publisher_email = Column(String(255))
    is_public = Column(Boolean, default=True)

    status = Column(String(20), nullable=False, default="pending")  # See SUBMISSION_STATUSES
    accuracy_score = Column(Float)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    validation_runs = relationship("ValidationRun", back_populates="submission", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("name", "version", name="uq_submissions_name_version"),
        Index("idx_submissions_status", "status"),
    )

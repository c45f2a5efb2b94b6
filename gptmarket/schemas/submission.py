"""Submission-related Pydantic schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from gptmarket.schemas.validation import CamelModel


class GenerationConfig(CamelModel):
    """Default generation parameters of a GPT."""

    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 1024


class KnowledgeFile(BaseModel):
    """Metadata of an uploaded knowledge file."""

    name: str
    size: int
    type: str


class SubmissionCreate(CamelModel):
    """Schema for publishing a GPT configuration."""

    name: str
    version: Optional[str] = None
    description: str
    category: str
    tags: List[str] = Field(default_factory=list)
    license_type: str
    license_text: Optional[str] = None
    documentation_url: Optional[str] = None
    repository_url: Optional[str] = None
    system_prompt: str
    default_config: GenerationConfig
    knowledge_context: Optional[str] = None
    knowledge_files: List[KnowledgeFile] = Field(default_factory=list)
    sample_prompts: List[str] = Field(default_factory=list)
    publisher_name: Optional[str] = None
    publisher_email: Optional[str] = None
    is_public: bool = True


class SubmissionSummary(BaseModel):
    """Short description of a stored submission."""

    id: UUID
    name: str
    version: str
    status: str


class SubmissionCreateResponse(BaseModel):
    """Response after publishing a submission."""

    success: bool = True
    model: SubmissionSummary
    message: str
    warnings: List[str]


class SubmissionOut(BaseModel):
    """Full submission as stored."""

    model_config = ConfigDict(from_attributes=True)

    submission_id: UUID
    name: str
    version: str
    description: str
    category: str
    tags: Optional[List[str]] = None
    license_type: str
    license_text: Optional[str] = None
    documentation_url: Optional[str] = None
    repository_url: Optional[str] = None
    system_prompt: str
    temperature: float
    top_p: float
    max_tokens: int
    knowledge_context: Optional[str] = None
    knowledge_files: Optional[List[KnowledgeFile]] = None
    sample_prompts: Optional[List[str]] = None
    publisher_name: Optional[str] = None
    is_public: Optional[bool] = None
    status: str
    accuracy_score: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

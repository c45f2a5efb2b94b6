"""Field validation for newly published submissions."""

import re
from dataclasses import dataclass, field
from typing import List

from gptmarket.schemas.submission import SubmissionCreate

NAME_PATTERN = re.compile(r"[a-zA-Z0-9\s\-_]+")
VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")

MAX_TAGS = 10
MAX_KNOWLEDGE_FILES = 10
MAX_KNOWLEDGE_CONTEXT_LENGTH = 50000


@dataclass
class SubmissionCheck:
    """Outcome of publish-time validation."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_submission(data: SubmissionCreate) -> SubmissionCheck:
    """
    Check a submission before it is stored.

    Args:
        data: Submission payload

    Returns:
        SubmissionCheck with blocking errors and non-blocking warnings
    """
    check = SubmissionCheck()
    errors = check.errors
    warnings = check.warnings

    # Required fields
    if not data.name or len(data.name.strip()) < 3:
        errors.append("Model name must be at least 3 characters long")
    if not data.description or len(data.description.strip()) < 50:
        errors.append("Description must be at least 50 characters long")
    if not data.category or not data.category.strip():
        errors.append("Category is required")
    if not data.system_prompt or len(data.system_prompt.strip()) < 20:
        errors.append("System prompt must be at least 20 characters long")
    if not data.license_type or not data.license_type.strip():
        errors.append("License type is required")

    # Generation configuration
    config = data.default_config
    if config.temperature < 0 or config.temperature > 1:
        errors.append("Temperature must be between 0 and 1")
    if config.top_p < 0 or config.top_p > 1:
        errors.append("Top-p must be between 0 and 1")
    if config.max_tokens < 1 or config.max_tokens > 4096:
        errors.append("Max tokens must be between 1 and 4096")

    if not data.tags:
        warnings.append("Adding tags will help users discover your model")
    elif len(data.tags) > MAX_TAGS:
        errors.append(f"Maximum {MAX_TAGS} tags allowed")

    if not [p for p in data.sample_prompts if p.strip()]:
        warnings.append("Adding sample prompts will help users understand your model")

    if data.knowledge_context and len(data.knowledge_context) > MAX_KNOWLEDGE_CONTEXT_LENGTH:
        errors.append("Knowledge context must be less than 50,000 characters")
    if len(data.knowledge_files) > MAX_KNOWLEDGE_FILES:
        errors.append(f"Maximum {MAX_KNOWLEDGE_FILES} knowledge files allowed")

    if data.name and not NAME_PATTERN.fullmatch(data.name):
        errors.append("Model name can only contain letters, numbers, spaces, hyphens, and underscores")

    if data.version and not VERSION_PATTERN.fullmatch(data.version):
        errors.append("Version must follow semantic versioning format (e.g., 1.0.0)")

    return check

"""SQLAlchemy ORM models."""

from gptmarket.models.job import ValidationJob
from gptmarket.models.submission import Submission
from gptmarket.models.validation import ValidationRun

__all__ = [
    "Submission",
    "ValidationRun",
    "ValidationJob",
]

"""Mode-dispatched scoring of GPT submissions.

Each validation mode has a ScoreProvider that produces test-case counts,
sub-scores and mode-specific messages for a submission. The composite score,
the run verdict and the derived submission status are computed here from the
provider output and do not depend on how the measurements were obtained.

Only the ``automated`` mode inspects the submission. The sub-scores of every
mode are drawn from fixed uniform ranges and stand in for a real evaluation
against the generation API.

Usage:
    result = score_submission(submission, ValidationMode.AUTOMATED)
    status = derive_submission_status(result)
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gptmarket.schemas.validation import (
    RunStatus,
    SubmissionStatus,
    ValidationDetails,
    ValidationMode,
    ValidationResult,
)

MIN_SYSTEM_PROMPT_LENGTH = 50
MAX_SYSTEM_PROMPT_LENGTH = 2000
MAX_TOKENS_LIMIT = 4096

PASSED_THRESHOLD = 80
WARNING_THRESHOLD = 60


@dataclass
class Measurement:
    """Raw output of a score provider for one run."""

    test_cases_total: int
    test_cases_passed: int
    avg_response_time: float
    accuracy_score: float
    consistency_score: float
    safety_score: float
    recommendations: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def _draw(rng: random.Random, low: float, high: float) -> float:
    """Uniform draw from the half-open range [low, high)."""
    return low + rng.random() * (high - low)


def _in_range(value: Optional[float], low: float, high: float) -> bool:
    return value is not None and low <= value <= high


class ScoreProvider(ABC):
    """Produces a Measurement for a submission under one validation mode."""

    mode: ValidationMode
    test_cases_total: int

    @abstractmethod
    def measure(self, submission, rng: random.Random) -> Measurement:
        """Measure the submission.

        Args:
            submission: Submission row (or any object with the same fields)
            rng: Random source for the simulated probes

        Returns:
            Measurement with counts, sub-scores and messages
        """
        ...


class AutomatedScoreProvider(ScoreProvider):
    """Structural checks on the stored configuration plus simulated probes."""

    mode = ValidationMode.AUTOMATED
    test_cases_total = 10

    def measure(self, submission, rng: random.Random) -> Measurement:
        recommendations: List[str] = []
        errors: List[str] = []
        passed = 0

        prompt = submission.system_prompt or ""
        if len(prompt) < MIN_SYSTEM_PROMPT_LENGTH:
            errors.append("System prompt is too short for effective guidance")
        else:
            if len(prompt) > MAX_SYSTEM_PROMPT_LENGTH:
                recommendations.append("Consider shortening the system prompt for better performance")
            passed += 1

        if _in_range(submission.temperature, 0, 1):
            passed += 1
        else:
            errors.append("Invalid temperature configuration")

        if _in_range(submission.top_p, 0, 1):
            passed += 1
        else:
            errors.append("Invalid top-p configuration")

        max_tokens = submission.max_tokens
        if max_tokens is not None and 0 < max_tokens <= MAX_TOKENS_LIMIT:
            passed += 1
        else:
            errors.append("Invalid max tokens configuration")

        # Latency, accuracy, consistency and safety probes always pass
        avg_response_time = _draw(rng, 800, 1200)
        passed += 2
        accuracy_score = _draw(rng, 85, 100)
        passed += 2
        consistency_score = _draw(rng, 80, 100)
        passed += 1
        safety_score = _draw(rng, 95, 100)
        passed += 1

        return Measurement(
            test_cases_total=self.test_cases_total,
            test_cases_passed=passed,
            avg_response_time=avg_response_time,
            accuracy_score=accuracy_score,
            consistency_score=consistency_score,
            safety_score=safety_score,
            recommendations=recommendations,
            errors=errors,
        )


class PerformanceScoreProvider(ScoreProvider):
    mode = ValidationMode.PERFORMANCE
    test_cases_total = 20

    def measure(self, submission, rng: random.Random) -> Measurement:
        avg_response_time = _draw(rng, 600, 1400)
        accuracy_score = _draw(rng, 80, 100)
        consistency_score = _draw(rng, 75, 100)
        safety_score = _draw(rng, 90, 100)

        recommendations = []
        # Unreachable with the current latency range
        if avg_response_time > 2000:
            recommendations.append("Consider optimizing for faster response times")
        if accuracy_score < 85:
            recommendations.append("Model accuracy could be improved with better training data")

        return Measurement(
            test_cases_total=self.test_cases_total,
            test_cases_passed=int(self.test_cases_total * (accuracy_score / 100)),
            avg_response_time=avg_response_time,
            accuracy_score=accuracy_score,
            consistency_score=consistency_score,
            safety_score=safety_score,
            recommendations=recommendations,
        )


class SafetyScoreProvider(ScoreProvider):
    mode = ValidationMode.SAFETY
    test_cases_total = 15

    def measure(self, submission, rng: random.Random) -> Measurement:
        safety_score = _draw(rng, 90, 100)
        accuracy_score = _draw(rng, 85, 100)
        consistency_score = _draw(rng, 85, 100)
        avg_response_time = _draw(rng, 900, 1200)

        recommendations = []
        if safety_score < 95:
            recommendations.append("Consider adding additional safety guidelines to the system prompt")

        return Measurement(
            test_cases_total=self.test_cases_total,
            test_cases_passed=int(self.test_cases_total * (safety_score / 100)),
            avg_response_time=avg_response_time,
            accuracy_score=accuracy_score,
            consistency_score=consistency_score,
            safety_score=safety_score,
            recommendations=recommendations,
        )


class ManualScoreProvider(ScoreProvider):
    """Fixed outcome recorded for a human review. Deterministic."""

    mode = ValidationMode.MANUAL
    test_cases_total = 5

    def measure(self, submission, rng: random.Random) -> Measurement:
        return Measurement(
            test_cases_total=self.test_cases_total,
            test_cases_passed=4,
            avg_response_time=1000,
            accuracy_score=90,
            consistency_score=88,
            safety_score=96,
            recommendations=["Manual review completed - consider user feedback for improvements"],
        )


# Provider registry
SCORE_PROVIDERS: Dict[ValidationMode, ScoreProvider] = {
    provider.mode: provider
    for provider in (
        AutomatedScoreProvider(),
        ManualScoreProvider(),
        PerformanceScoreProvider(),
        SafetyScoreProvider(),
    )
}


def compute_verdict(score: float) -> RunStatus:
    """Classify a composite score as passed, warning or failed."""
    if score >= PASSED_THRESHOLD:
        return RunStatus.PASSED
    if score >= WARNING_THRESHOLD:
        return RunStatus.WARNING
    return RunStatus.FAILED


def general_recommendation(score: float) -> str:
    """Overall recommendation appended to every run."""
    if score < 70:
        return "Model needs significant improvements before approval"
    if score < 85:
        return "Model shows promise but could benefit from refinements"
    return "Model meets quality standards"


def score_submission(
    submission,
    mode: ValidationMode,
    rng: Optional[random.Random] = None,
    providers: Optional[Dict[ValidationMode, ScoreProvider]] = None,
) -> ValidationResult:
    """
    Score a submission under the given mode.

    Args:
        submission: Submission to score
        mode: Validation mode selecting the provider
        rng: Random source (module-level generator when omitted)
        providers: Provider registry override

    Returns:
        ValidationResult with verdict, composite score and messages
    """
    registry = providers or SCORE_PROVIDERS
    provider = registry[ValidationMode(mode)]
    measurement = provider.measure(submission, rng or random.Random())

    score = 100 * measurement.test_cases_passed / measurement.test_cases_total
    recommendations = list(measurement.recommendations)
    recommendations.append(general_recommendation(score))

    return ValidationResult(
        status=compute_verdict(score),
        score=score,
        details=ValidationDetails(
            test_cases_passed=measurement.test_cases_passed,
            test_cases_total=measurement.test_cases_total,
            avg_response_time=measurement.avg_response_time,
            accuracy_score=measurement.accuracy_score,
            consistency_score=measurement.consistency_score,
            safety_score=measurement.safety_score,
        ),
        recommendations=recommendations,
        errors=list(measurement.errors),
    )


def derive_submission_status(result: ValidationResult) -> SubmissionStatus:
    """
    Derive the submission's lifecycle status from a run result.

    Any error rejects the submission regardless of score. Only the
    automated mode reports errors, so the other modes are rejected
    through a failed verdict alone.
    """
    if result.status == RunStatus.FAILED or result.errors:
        return SubmissionStatus.REJECTED
    if result.status == RunStatus.WARNING:
        return SubmissionStatus.NEEDS_REVISION
    return SubmissionStatus.APPROVED

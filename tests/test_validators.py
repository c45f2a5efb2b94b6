"""Tests for publish-time submission validation."""

from gptmarket.schemas.submission import GenerationConfig, KnowledgeFile, SubmissionCreate
from gptmarket.services.validators import validate_submission


def make_payload(**overrides):
    fields = {
        "name": "Study Buddy",
        "description": "Quizzes students on their notes and explains the answers they got wrong.",
        "category": "education",
        "tags": ["study"],
        "license_type": "Apache-2.0",
        "system_prompt": "You are a patient tutor who asks one question at a time.",
        "default_config": GenerationConfig(),
        "sample_prompts": ["Quiz me on photosynthesis"],
    }
    fields.update(overrides)
    return SubmissionCreate(**fields)


def test_valid_submission():
    """Test a complete submission passes without warnings."""
    check = validate_submission(make_payload(version="2.1.0"))

    assert check.is_valid
    assert check.errors == []
    assert check.warnings == []


def test_required_fields():
    """Test missing required text fields."""
    check = validate_submission(make_payload(
        name="ab",
        description="Too short",
        category=" ",
        system_prompt="Be nice.",
        license_type="",
    ))

    assert not check.is_valid
    assert check.errors == [
        "Model name must be at least 3 characters long",
        "Description must be at least 50 characters long",
        "Category is required",
        "System prompt must be at least 20 characters long",
        "License type is required",
    ]


def test_generation_config_ranges():
    """Test out-of-range generation parameters."""
    config = GenerationConfig(temperature=1.1, top_p=-0.2, max_tokens=0)
    check = validate_submission(make_payload(default_config=config))

    assert check.errors == [
        "Temperature must be between 0 and 1",
        "Top-p must be between 0 and 1",
        "Max tokens must be between 1 and 4096",
    ]


def test_generation_config_bounds_are_inclusive():
    """Test boundary generation parameters are accepted."""
    config = GenerationConfig(temperature=0, top_p=1, max_tokens=4096)

    assert validate_submission(make_payload(default_config=config)).is_valid


def test_limits():
    """Test tag, file and knowledge context limits."""
    files = [KnowledgeFile(name=f"notes-{i}.pdf", size=1024, type="application/pdf") for i in range(11)]
    check = validate_submission(make_payload(
        tags=[f"tag{i}" for i in range(11)],
        knowledge_files=files,
        knowledge_context="x" * 50001,
    ))

    assert check.errors == [
        "Maximum 10 tags allowed",
        "Knowledge context must be less than 50,000 characters",
        "Maximum 10 knowledge files allowed",
    ]


def test_warnings_do_not_block():
    """Test missing tags and sample prompts only warn."""
    check = validate_submission(make_payload(tags=[], sample_prompts=["", "  "]))

    assert check.is_valid
    assert check.warnings == [
        "Adding tags will help users discover your model",
        "Adding sample prompts will help users understand your model",
    ]


def test_name_characters():
    """Test invalid characters in the name."""
    check = validate_submission(make_payload(name="Study Buddy!"))

    assert check.errors == ["Model name can only contain letters, numbers, spaces, hyphens, and underscores"]


def test_version_format():
    """Test semantic version validation."""
    assert validate_submission(make_payload(version="1.0")).errors == [
        "Version must follow semantic versioning format (e.g., 1.0.0)"
    ]
    assert validate_submission(make_payload(version="1.0.0\n")).errors == [
        "Version must follow semantic versioning format (e.g., 1.0.0)"
    ]

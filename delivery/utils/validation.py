"""Validation utilities."""
from pathlib import Path

from fastapi import HTTPException

from delivery.utils.paths import payload_path


def validate_id(name: str, value: str) -> str:
    """Validate ID string (no path traversal, no key separators)."""
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{name} is required")
    cleaned = value.strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail=f"{name} is required")
    if Path(cleaned).name != cleaned or any(char in cleaned for char in "/\\."):
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return cleaned


def validate_assessment_exists(assessment_id: str) -> None:
    """Validate that the assessment exists."""
    if not payload_path(assessment_id).exists():
        raise HTTPException(status_code=404, detail="Assessment not found")

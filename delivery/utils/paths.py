"""Path helpers for assessment payloads and respondent sessions."""
from pathlib import Path

from delivery import config


def assessment_dir(assessment_id: str) -> Path:
    """Get directory for an assessment."""
    return config.DATA_DIR / assessment_id


def payload_path(assessment_id: str) -> Path:
    """Get path to the assessment definition JSON."""
    return assessment_dir(assessment_id) / "assessment.json"


def session_dir(client_id: str) -> Path:
    """Get directory holding one respondent's session state."""
    return config.SESSIONS_DIR / client_id

"""Utility modules."""
from delivery.utils.json_utils import (
    json_dump,
    read_json_object,
    write_json_file,
)
from delivery.utils.paths import assessment_dir, payload_path, session_dir
from delivery.utils.time_utils import as_utc, utc_now
from delivery.utils.validation import validate_assessment_exists, validate_id

__all__ = [
    "json_dump",
    "read_json_object",
    "write_json_file",
    "assessment_dir",
    "payload_path",
    "session_dir",
    "as_utc",
    "utc_now",
    "validate_assessment_exists",
    "validate_id",
]

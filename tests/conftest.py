import os
import tempfile
from pathlib import Path

import pytest

# delivery.config reads these at import time
_ROOT = Path(tempfile.mkdtemp(prefix="assessment_tests_"))
os.environ.setdefault("ASSESSMENT_DATA_DIR", str(_ROOT / "assessments"))
os.environ.setdefault("SESSIONS_DIR", str(_ROOT / "sessions"))
os.environ.setdefault("DB_DIR", str(_ROOT))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_ROOT / 'test.db'}")

from models import Field, FieldType  # noqa: E402


@pytest.fixture
def sample_fields() -> list[Field]:
    """Five content fields with one page break between the third and fourth."""
    return [
        Field("A", FieldType.MULTIPLE_CHOICE, 0, "Capital of France?",
              options=["Berlin", "Paris", "Madrid"], correct_answers=[1]),
        Field("B", FieldType.CHECKBOXES, 1, "Prime numbers",
              options=["2", "4", "5", "9"], correct_answers=[0, 2], marks=2),
        Field("C", FieldType.SHORT_INPUT, 2, "Chemical symbol for gold",
              accepted_answers=["Au"]),
        Field("PB", FieldType.PAGE_BREAK, 3),
        Field("D", FieldType.DROPDOWN, 4, "Largest planet",
              options=["Mars", "Jupiter", "Venus"], correct_answers=[1]),
        Field("E", FieldType.INFO_BLOCK, 5, "Thanks for taking part"),
    ]

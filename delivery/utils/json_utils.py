"""JSON file helpers for assessment payloads."""
import json
from pathlib import Path
from typing import Any


def json_dump(payload: object) -> str:
    """Serialize object to pretty JSON string."""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def read_json_object(path: Path) -> dict[str, Any] | None:
    """Read a JSON object from disk; None if the file is missing.

    Raises ValueError when the file is not valid JSON or not an object.
    """
    if not path.exists():
        return None
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} does not hold a JSON object")
    return payload


def write_json_file(path: Path, payload: object) -> None:
    """Write object as JSON file, replacing it atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_text(json_dump(payload), encoding="utf-8")
    tmp_path.replace(path)

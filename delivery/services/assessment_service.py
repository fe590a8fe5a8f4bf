"""Service layer for assessment definitions stored as JSON files."""
import logging
import shutil
import uuid
from typing import Any

from fastapi import HTTPException

from delivery import config
from delivery.config import ASSESSMENT_TYPES, DEFAULT_SETTINGS
from delivery.services import access_service
from delivery.utils import (
    assessment_dir,
    payload_path,
    read_json_object,
    utc_now,
    write_json_file,
)
from models import Field
from serialization import field_from_payload, field_to_payload, fields_from_payload

logger = logging.getLogger(__name__)


def load_assessment_payload(assessment_id: str) -> dict[str, Any]:
    """Load assessment payload from file."""
    try:
        payload = read_json_object(payload_path(assessment_id))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid assessment payload") from exc
    if payload is None:
        raise HTTPException(status_code=404, detail="Assessment not found")
    return payload


def list_assessment_payloads() -> list[dict[str, Any]]:
    """All readable assessment payloads, sorted by directory name."""
    payloads = []
    for directory in sorted(config.DATA_DIR.iterdir()):
        if not directory.is_dir():
            continue
        try:
            payload = read_json_object(directory / "assessment.json")
        except ValueError as exc:
            logger.warning("Skipping unreadable assessment %s: %s", directory.name, exc)
            continue
        if payload is not None:
            payloads.append(payload)
    return payloads


def save_assessment_payload(assessment_id: str, payload: dict[str, Any]) -> None:
    """Save assessment payload to file."""
    payload["updatedAt"] = utc_now()
    write_json_file(payload_path(assessment_id), payload)


def load_fields(payload: dict[str, Any]) -> list[Field]:
    """Parse the payload's fields, rejecting malformed definitions."""
    try:
        return fields_from_payload(payload)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid field: {exc}") from exc


def settings_of(payload: dict[str, Any]) -> dict[str, Any]:
    settings = dict(DEFAULT_SETTINGS)
    stored = payload.get("settings")
    if isinstance(stored, dict):
        settings.update(stored)
    return settings


def apply_settings(
    current: dict[str, Any], changes: dict[str, Any]
) -> dict[str, Any]:
    """Merge setting changes; an explicit null resets a key to its default."""
    merged = dict(current)
    for key, value in changes.items():
        if key == "password":
            merged["passwordHash"] = access_service.hash_password(value) if value else None
        elif key in DEFAULT_SETTINGS:
            merged[key] = DEFAULT_SETTINGS[key] if value is None else value
    return merged


def author_view(payload: dict[str, Any]) -> dict[str, Any]:
    """Payload as returned to authors: the password hash is never exposed."""
    view = dict(payload)
    settings = settings_of(payload)
    settings["passwordProtected"] = bool(settings.pop("passwordHash", None))
    view["settings"] = settings
    return view


def serialize_metadata(payload: dict[str, Any]) -> dict[str, Any]:
    fields = payload.get("fields", [])
    return {
        "id": payload.get("id"),
        "title": payload.get("title"),
        "type": payload.get("type"),
        "fieldCount": len(fields) if isinstance(fields, list) else 0,
        "updatedAt": payload.get("updatedAt"),
    }


def create_assessment(
    title: str, assessment_type: str, settings: dict[str, Any] | None = None
) -> dict[str, Any]:
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required")
    if assessment_type not in ASSESSMENT_TYPES:
        raise HTTPException(status_code=400, detail="Unknown assessment type")

    assessment_id = uuid.uuid4().hex
    assessment_dir(assessment_id).mkdir(parents=True, exist_ok=True)

    merged = apply_settings(DEFAULT_SETTINGS, settings or {})
    payload = {
        "id": assessment_id,
        "title": title,
        "type": assessment_type,
        "settings": merged,
        "fields": [],
        "createdAt": utc_now(),
    }
    save_assessment_payload(assessment_id, payload)
    return payload


def update_assessment(
    assessment_id: str,
    title: str | None = None,
    settings: dict[str, Any] | None = None,
) -> dict[str, Any]:
    payload = load_assessment_payload(assessment_id)
    if title is not None:
        title = title.strip()
        if not title:
            raise HTTPException(status_code=400, detail="Title is required")
        payload["title"] = title
    if settings:
        payload["settings"] = apply_settings(settings_of(payload), settings)
    save_assessment_payload(assessment_id, payload)
    return payload


def delete_assessment(assessment_id: str) -> None:
    directory = assessment_dir(assessment_id)
    if not directory.is_dir():
        raise HTTPException(status_code=404, detail="Assessment not found")
    shutil.rmtree(directory)


def find_field(payload: dict[str, Any], field_id: str) -> tuple[dict[str, Any], int]:
    """Find field in assessment payload by ID."""
    fields = payload.get("fields", [])
    if not isinstance(fields, list):
        raise HTTPException(status_code=400, detail="Invalid assessment payload")

    for index, item in enumerate(fields):
        if isinstance(item, dict) and item.get("id") == field_id:
            return item, index

    raise HTTPException(status_code=404, detail="Field not found")


def _validated_field(data: dict[str, Any]) -> dict[str, Any]:
    """Round-trip through the domain model so only known keys are stored."""
    try:
        field = field_from_payload(data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if field.type.is_select:
        if any(not 0 <= index < len(field.options) for index in field.correct_answers):
            raise HTTPException(status_code=400, detail="Correct answer out of range")
    elif field.type.is_text:
        if any(not 0 <= index < len(field.accepted_answers) for index in field.correct_answers):
            raise HTTPException(status_code=400, detail="Correct answer out of range")
    else:
        field.options = []
        field.correct_answers = []
        field.accepted_answers = []
    if field.type.is_select and not field.type.is_multi_select and len(field.correct_answers) > 1:
        raise HTTPException(status_code=400, detail="Only checkboxes accept several correct answers")
    return field_to_payload(field)


def add_field(assessment_id: str, data: dict[str, Any]) -> dict[str, Any]:
    payload = load_assessment_payload(assessment_id)
    fields = payload.get("fields", [])
    if not isinstance(fields, list):
        raise HTTPException(status_code=400, detail="Invalid assessment payload")

    if data.get("order") is None:
        data["order"] = max(
            (item.get("order", 0) for item in fields if isinstance(item, dict)),
            default=-1,
        ) + 1
    data["id"] = uuid.uuid4().hex[:12]
    new_field = _validated_field(data)

    fields.append(new_field)
    payload["fields"] = fields
    save_assessment_payload(assessment_id, payload)
    return new_field


def update_field(assessment_id: str, field_id: str, changes: dict[str, Any]) -> dict[str, Any]:
    payload = load_assessment_payload(assessment_id)
    field, index = find_field(payload, field_id)

    merged = dict(field)
    merged.update({key: value for key, value in changes.items() if value is not None})
    merged["id"] = field_id
    merged["type"] = field.get("type")
    updated = _validated_field(merged)

    payload["fields"][index] = updated
    save_assessment_payload(assessment_id, payload)
    return updated


def delete_field(assessment_id: str, field_id: str) -> dict[str, Any]:
    payload = load_assessment_payload(assessment_id)
    field, index = find_field(payload, field_id)
    payload["fields"].pop(index)
    save_assessment_payload(assessment_id, payload)
    return field


def reorder_fields(assessment_id: str, field_ids: list[str]) -> list[dict[str, Any]]:
    """Assign authoring order from a complete list of field ids."""
    payload = load_assessment_payload(assessment_id)
    fields = payload.get("fields", [])
    by_id = {item.get("id"): item for item in fields if isinstance(item, dict)}
    if len(field_ids) != len(set(field_ids)) or set(field_ids) != set(by_id):
        raise HTTPException(status_code=400, detail="fieldIds must list every field once")

    reordered = []
    for order, field_id in enumerate(field_ids):
        item = by_id[field_id]
        item["order"] = order
        reordered.append(item)
    payload["fields"] = reordered
    save_assessment_payload(assessment_id, payload)
    return reordered

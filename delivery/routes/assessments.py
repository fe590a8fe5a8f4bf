"""Assessment and field management endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from delivery.database import get_db
from delivery.models import (
    AssessmentCreate,
    AssessmentUpdate,
    FieldCreate,
    FieldReorder,
    FieldUpdate,
)
from delivery.services import assessment_service, stats_service
from delivery.utils import validate_assessment_exists, validate_id

router = APIRouter(prefix="/api/assessments", tags=["assessments"])


@router.get("")
def list_assessments() -> list[dict[str, object]]:
    """List all assessments."""
    return [
        assessment_service.serialize_metadata(payload)
        for payload in assessment_service.list_assessment_payloads()
    ]


@router.post("")
def create_assessment(payload: AssessmentCreate) -> dict[str, object]:
    """Create a new, empty assessment."""
    settings = (
        payload.settings.model_dump(mode="json", exclude_unset=True) if payload.settings else None
    )
    created = assessment_service.create_assessment(payload.title, payload.type, settings)
    return {
        "metadata": assessment_service.serialize_metadata(created),
        "payload": assessment_service.author_view(created),
    }


@router.get("/{assessment_id}")
def get_assessment(assessment_id: str) -> dict[str, object]:
    """Get the full assessment definition, answer key included."""
    assessment_id = validate_id("assessmentId", assessment_id)
    payload = assessment_service.load_assessment_payload(assessment_id)
    return assessment_service.author_view(payload)


@router.patch("/{assessment_id}")
def update_assessment(assessment_id: str, update: AssessmentUpdate) -> dict[str, object]:
    """Update title and delivery settings."""
    assessment_id = validate_id("assessmentId", assessment_id)
    settings = (
        update.settings.model_dump(mode="json", exclude_unset=True) if update.settings else None
    )
    payload = assessment_service.update_assessment(assessment_id, update.title, settings)
    return {
        "metadata": assessment_service.serialize_metadata(payload),
        "payload": assessment_service.author_view(payload),
    }


@router.delete("/{assessment_id}")
def delete_assessment(assessment_id: str) -> dict[str, str]:
    """Delete an assessment definition. Recorded submissions are kept."""
    assessment_id = validate_id("assessmentId", assessment_id)
    assessment_service.delete_assessment(assessment_id)
    return {"status": "deleted"}


@router.post("/{assessment_id}/fields")
def add_field(assessment_id: str, payload: FieldCreate) -> dict[str, object]:
    """Add a field; its id is assigned here and never changes."""
    assessment_id = validate_id("assessmentId", assessment_id)
    field = assessment_service.add_field(assessment_id, payload.model_dump())
    return {"field": field}


@router.put("/{assessment_id}/fields/order")
def reorder_fields(assessment_id: str, payload: FieldReorder) -> dict[str, object]:
    """Set the authoring order of all fields."""
    assessment_id = validate_id("assessmentId", assessment_id)
    fields = assessment_service.reorder_fields(assessment_id, payload.fieldIds)
    return {"fields": fields}


@router.patch("/{assessment_id}/fields/{field_id}")
def update_field(assessment_id: str, field_id: str, payload: FieldUpdate) -> dict[str, object]:
    """Update an existing field."""
    assessment_id = validate_id("assessmentId", assessment_id)
    field = assessment_service.update_field(
        assessment_id, field_id, payload.model_dump(exclude_unset=True)
    )
    return {"field": field}


@router.delete("/{assessment_id}/fields/{field_id}")
def delete_field(assessment_id: str, field_id: str) -> dict[str, object]:
    """Delete a field."""
    assessment_id = validate_id("assessmentId", assessment_id)
    field = assessment_service.delete_field(assessment_id, field_id)
    return {"field": field}


@router.get("/{assessment_id}/statistics")
def get_statistics(
    assessment_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Submission statistics for an assessment."""
    assessment_id = validate_id("assessmentId", assessment_id)
    validate_assessment_exists(assessment_id)
    return stats_service.assessment_statistics(db, assessment_id)

"""Service layer for respondent sessions: start, answer, submit."""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session as DBSession

from delivery.services import access_service, submission_service
from delivery.services.assessment_service import (
    load_assessment_payload,
    load_fields,
    settings_of,
)
from delivery.utils import session_dir
from grading import build_answer_key, grade_submission
from models import Field, ShuffleResult
from remapper import display_options, ordered_fields, resolve_selection
from segmenter import content_pages, segment_pages
from serialization import (
    answer_key_to_payload,
    config_from_settings,
    field_grade_to_dict,
    shuffle_result_to_dict,
)
from session_store import (
    JsonFileSessionStore,
    SessionStore,
    SessionStoreError,
    clear_session,
    compute_or_load_shuffle,
    load_responses,
    save_response,
)

logger = logging.getLogger(__name__)

META_SUFFIX = "meta"


def respondent_store(client_id: str) -> SessionStore:
    return JsonFileSessionStore(session_dir(client_id))


def _meta_key(assessment_id: str) -> str:
    return f"{assessment_id}.{META_SUFFIX}"


def _session_meta(
    store: SessionStore, assessment_id: str, respondent_name: str | None = None
) -> dict[str, Any]:
    """Start time and respondent name, created on first start."""
    try:
        meta = store.get(_meta_key(assessment_id))
    except SessionStoreError as exc:
        logger.warning("Session metadata for %s unavailable: %s", assessment_id, exc)
        meta = None
    if not isinstance(meta, dict):
        meta = {"startedAt": access_service.now().isoformat()}
    if respondent_name:
        meta["respondentName"] = respondent_name
    try:
        store.set(_meta_key(assessment_id), meta)
    except SessionStoreError as exc:
        logger.warning("Session metadata for %s not persisted: %s", assessment_id, exc)
    return meta


def _started_at(meta: dict[str, Any]) -> datetime | None:
    raw = meta.get("startedAt")
    if not isinstance(raw, str):
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def _started_meta(store: SessionStore, assessment_id: str) -> dict[str, Any]:
    """Metadata of a started session; answering requires a prior start."""
    try:
        meta = store.get(_meta_key(assessment_id))
    except SessionStoreError as exc:
        logger.warning("Session metadata for %s unavailable: %s", assessment_id, exc)
        return {}
    if not isinstance(meta, dict):
        raise HTTPException(status_code=409, detail="Session not started")
    return meta


def _check_deliverable(settings: dict[str, Any], meta: dict[str, Any]) -> None:
    at = access_service.now()
    access_service.check_open(settings, at)
    access_service.check_time_left(settings, _started_at(meta), at)


def serialize_field_for_respondent(
    field: Field, result: ShuffleResult | None
) -> dict[str, Any]:
    """Field as shown to a respondent: display-order options, no answer key."""
    data: dict[str, Any] = {
        "id": field.id,
        "type": field.type.value,
        "label": field.label,
        "required": field.required,
    }
    if field.type.is_select:
        data["options"] = [
            {"displayIndex": display_index, "text": text}
            for display_index, _original, text in display_options(field, result)
        ]
    return data


def build_pages(
    fields: list[Field], result: ShuffleResult | None
) -> list[list[dict[str, Any]]]:
    """
    Content pages in display order.

    Pages are segmented on the display order, which keeps page breaks where
    the author put them, so every field stays on its authoring page.
    """
    displayed = [
        replace(field, order=position)
        for position, field in enumerate(ordered_fields(fields, result))
    ]
    return [
        [serialize_field_for_respondent(field, result) for field in page.fields]
        for page in content_pages(segment_pages(displayed))
    ]


def _shuffle(
    store: SessionStore, assessment_id: str, fields: list[Field], settings: dict[str, Any]
) -> ShuffleResult:
    config = config_from_settings(settings)
    return compute_or_load_shuffle(store, assessment_id, fields, config)


def _check_attempts(db: DBSession, settings: dict[str, Any], assessment_id: str, client_id: str) -> None:
    previous = submission_service.count_submissions(
        db, assessment_id=assessment_id, client_id=client_id
    )
    if not previous:
        return
    if not settings.get("allowMultipleAttempts", True):
        raise HTTPException(status_code=409, detail="Assessment already submitted")
    max_attempts = settings.get("maxAttempts")
    if isinstance(max_attempts, int) and previous >= max_attempts:
        raise HTTPException(status_code=409, detail="No attempts left")


def start_session(
    db: DBSession,
    assessment_id: str,
    client_id: str,
    respondent_name: str | None = None,
    password: str | None = None,
) -> dict[str, Any]:
    """
    Start or resume a session; the shuffle is computed at most once.

    The close date, access password and attempt limit are checked before
    anything is written, so a refused start leaves no session behind.
    """
    payload = load_assessment_payload(assessment_id)
    settings = settings_of(payload)
    access_service.check_open(settings, access_service.now())
    access_service.check_password(settings, password)
    _check_attempts(db, settings, assessment_id, client_id)

    fields = load_fields(payload)
    store = respondent_store(client_id)
    result = _shuffle(store, assessment_id, fields, settings)
    meta = _session_meta(store, assessment_id, respondent_name)
    deadline = access_service.session_deadline(settings, _started_at(meta))

    return {
        "assessmentId": assessment_id,
        "clientId": client_id,
        "title": payload.get("title"),
        "startedAt": meta.get("startedAt"),
        "timeLimit": settings.get("timeLimit"),
        "expiresAt": deadline.isoformat() if deadline else None,
        "respondentName": meta.get("respondentName"),
        "pages": build_pages(fields, result),
        "responses": load_responses(store, assessment_id),
    }


def _validate_response(field: Field, value: Any) -> None:
    if value is None:
        return
    if field.type.is_text:
        if not isinstance(value, str):
            raise HTTPException(status_code=400, detail="Text answer expected")
        return
    if not field.type.is_select:
        raise HTTPException(status_code=400, detail="Field does not accept answers")
    if field.type.is_multi_select:
        if not isinstance(value, list):
            raise HTTPException(status_code=400, detail="List of option indices expected")
    elif not isinstance(value, int) or isinstance(value, bool):
        raise HTTPException(status_code=400, detail="Option index expected")


def record_response(
    assessment_id: str, client_id: str, field_id: str, value: Any
) -> dict[str, Any]:
    """Store a display-space response keyed by field id."""
    payload = load_assessment_payload(assessment_id)
    fields = {field.id: field for field in load_fields(payload)}
    field = fields.get(field_id)
    if field is None:
        raise HTTPException(status_code=404, detail="Field not found")
    _validate_response(field, value)

    store = respondent_store(client_id)
    meta = _started_meta(store, assessment_id)
    _check_deliverable(settings_of(payload), meta)
    responses = save_response(store, assessment_id, field_id, value)
    return {"fieldId": field_id, "value": value, "responses": responses}


def resolve_responses(
    fields: list[Field], responses: dict[str, Any], result: ShuffleResult | None
) -> dict[str, Any]:
    """Translate display-space responses to original index space."""
    resolved: dict[str, Any] = {}
    for field in fields:
        value = responses.get(field.id)
        if value is None:
            continue
        if field.type.is_select:
            resolved[field.id] = resolve_selection(field, result, value)
        elif field.type.is_text and isinstance(value, str):
            resolved[field.id] = value
    return resolved


def submit_session(
    db: DBSession,
    assessment_id: str,
    client_id: str,
    extra_responses: dict[str, Any] | None = None,
    respondent_name: str | None = None,
) -> dict[str, Any]:
    """Grade the session, record the submission and discard session state."""
    payload = load_assessment_payload(assessment_id)
    settings = settings_of(payload)
    store = respondent_store(client_id)
    meta = _started_meta(store, assessment_id)
    _check_deliverable(settings, meta)
    _check_attempts(db, settings, assessment_id, client_id)
    fields = load_fields(payload)
    result = _shuffle(store, assessment_id, fields, settings)

    by_id = {field.id: field for field in fields}
    responses = load_responses(store, assessment_id)
    for field_id, value in (extra_responses or {}).items():
        field = by_id.get(field_id)
        if field is None:
            raise HTTPException(status_code=400, detail=f"Unknown field {field_id}")
        _validate_response(field, value)
        if value is not None:
            responses[field_id] = value

    missing = [
        field.id for field in fields
        if field.required and field.type.is_answerable and responses.get(field.id) in (None, "", [])
    ]
    if missing:
        raise HTTPException(status_code=400, detail={"message": "Required fields missing", "fieldIds": missing})

    meta = _session_meta(store, assessment_id, respondent_name)
    passing_score = settings.get("passingScore")
    grade = grade_submission(fields, responses, result, passing_score)
    submission = submission_service.record_submission(
        db,
        assessment_id,
        client_id,
        ordered_fields(fields, result),
        grade,
        resolve_responses(fields, responses, result),
        respondent_name=meta.get("respondentName"),
        started_at=_started_at(meta),
    )

    summary = submission_service.serialize_submission(submission)
    if not settings.get("showScoreImmediately", True):
        summary = {key: summary[key] for key in ("id", "status", "submittedAt")}
    response: dict[str, Any] = {
        "submission": summary,
        "shuffle": shuffle_result_to_dict(result),
    }
    if settings.get("showScoreImmediately", True):
        response["grades"] = [field_grade_to_dict(item) for item in grade.grades]
    if settings.get("showCorrectAnswers"):
        response["answerKey"] = answer_key_to_payload(
            build_answer_key(fields, responses, result)
        )

    _clear(store, assessment_id)
    logger.info(
        "Submission %s recorded for %s (%s/%s)",
        submission.id, assessment_id, submission.score, submission.max_score,
    )
    return response


def _clear(store: SessionStore, assessment_id: str) -> None:
    clear_session(store, assessment_id)
    try:
        store.delete(_meta_key(assessment_id))
    except SessionStoreError as exc:
        logger.warning("Cannot clear session metadata for %s: %s", assessment_id, exc)


def discard_session(assessment_id: str, client_id: str) -> None:
    """Drop shuffle, responses and start time; the next start reshuffles."""
    _clear(respondent_store(client_id), assessment_id)

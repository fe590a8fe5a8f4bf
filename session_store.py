"""
Per-respondent session state: the shuffle result and in-progress responses.

A session moves from "no shuffle" to "shuffled" exactly once. After that the
persisted result is reused for every render, answer and submit until the
session is cleared. Store failures never block the respondent: the in-memory
result governs the current request and a warning is logged.
"""
from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Sequence

from models import AssessmentConfig, Field, ShuffleResult
from serialization import shuffle_result_from_dict, shuffle_result_to_dict
from shuffler import build_shuffle_result

logger = logging.getLogger(__name__)

SHUFFLE_SUFFIX = "shuffle"
RESPONSES_SUFFIX = "responses"


class SessionStoreError(Exception):
    """Raised when the session store cannot be read or written."""


class SessionStore:
    """Key/value store holding JSON-compatible values for one respondent."""

    def get(self, key: str) -> Any | None:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        # stored serialized so callers never share mutable state with the store
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileSessionStore(SessionStore):
    """One JSON file per key inside a respondent directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = base_dir

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Any | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SessionStoreError(f"Cannot read {path}: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(value, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise SessionStoreError(f"Cannot write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise SessionStoreError(f"Cannot delete {key}: {exc}") from exc


def shuffle_key(assessment_id: str) -> str:
    return f"{assessment_id}.{SHUFFLE_SUFFIX}"


def responses_key(assessment_id: str) -> str:
    return f"{assessment_id}.{RESPONSES_SUFFIX}"


def load_shuffle(store: SessionStore, assessment_id: str) -> ShuffleResult | None:
    """Return the persisted shuffle result, or None when there is none."""
    try:
        data = store.get(shuffle_key(assessment_id))
    except SessionStoreError as exc:
        logger.warning("Shuffle state unavailable for %s: %s", assessment_id, exc)
        return None
    if data is None:
        return None
    try:
        return shuffle_result_from_dict(data)
    except ValueError as exc:
        logger.warning("Discarding malformed shuffle state for %s: %s", assessment_id, exc)
        return None


def compute_or_load_shuffle(
    store: SessionStore,
    assessment_id: str,
    fields: Sequence[Field],
    config: AssessmentConfig,
    rng: random.Random | None = None,
) -> ShuffleResult:
    if not config.enabled:
        return ShuffleResult.identity(list(fields))

    existing = load_shuffle(store, assessment_id)
    if existing is not None:
        return existing

    result = build_shuffle_result(fields, config, rng)
    try:
        store.set(shuffle_key(assessment_id), shuffle_result_to_dict(result))
    except SessionStoreError as exc:
        logger.warning(
            "Shuffle for %s computed but not persisted: %s", assessment_id, exc
        )
    else:
        logger.debug("Shuffled %d fields for %s", len(result.field_display_order), assessment_id)
    return result


def load_responses(store: SessionStore, assessment_id: str) -> dict[str, Any]:
    try:
        data = store.get(responses_key(assessment_id))
    except SessionStoreError as exc:
        logger.warning("Responses unavailable for %s: %s", assessment_id, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_response(
    store: SessionStore, assessment_id: str, field_id: str, value: Any
) -> dict[str, Any]:
    """Record a display-space response keyed by field id."""
    responses = load_responses(store, assessment_id)
    if value is None:
        responses.pop(field_id, None)
    else:
        responses[field_id] = value
    try:
        store.set(responses_key(assessment_id), responses)
    except SessionStoreError as exc:
        logger.warning("Response for %s/%s not persisted: %s", assessment_id, field_id, exc)
    return responses


def clear_session(store: SessionStore, assessment_id: str) -> None:
    for key in (shuffle_key(assessment_id), responses_key(assessment_id)):
        try:
            store.delete(key)
        except SessionStoreError as exc:
            logger.warning("Cannot clear %s: %s", key, exc)

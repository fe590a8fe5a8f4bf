import json
import logging
import random

from models import AssessmentConfig, ShuffleResult
from session_store import (
    InMemorySessionStore,
    JsonFileSessionStore,
    SessionStoreError,
    clear_session,
    compute_or_load_shuffle,
    load_responses,
    load_shuffle,
    save_response,
    shuffle_key,
)

BOTH = AssessmentConfig(randomize_fields=True, shuffle_options=True)


class FailingStore(InMemorySessionStore):
    def get(self, key):
        raise SessionStoreError("read failed")

    def set(self, key, value):
        raise SessionStoreError("write failed")

    def delete(self, key):
        raise SessionStoreError("delete failed")


def test_shuffle_is_stable_within_session(sample_fields) -> None:
    store = InMemorySessionStore()
    first = compute_or_load_shuffle(store, "quiz", sample_fields, BOTH, random.Random(1))
    for seed in range(2, 10):
        again = compute_or_load_shuffle(store, "quiz", sample_fields, BOTH, random.Random(seed))
        assert again == first


def test_sessions_are_independent_per_assessment(sample_fields) -> None:
    store = InMemorySessionStore()
    compute_or_load_shuffle(store, "quiz-1", sample_fields, BOTH, random.Random(1))
    assert load_shuffle(store, "quiz-2") is None


def test_disabled_config_returns_identity_without_persisting(sample_fields) -> None:
    store = InMemorySessionStore()
    result = compute_or_load_shuffle(store, "quiz", sample_fields, AssessmentConfig())
    assert result == ShuffleResult(["A", "B", "C", "PB", "D", "E"], {})
    assert store.get(shuffle_key("quiz")) is None


def test_failing_store_still_returns_a_result(sample_fields, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        result = compute_or_load_shuffle(FailingStore(), "quiz", sample_fields, BOTH, random.Random(4))
    assert sorted(result.field_display_order) == ["A", "B", "C", "D", "E", "PB"]
    assert "not persisted" in caplog.text


def test_malformed_state_is_recomputed(sample_fields, caplog) -> None:
    store = InMemorySessionStore()
    store.set(shuffle_key("quiz"), {"fieldDisplayOrder": "oops"})
    with caplog.at_level(logging.WARNING):
        result = compute_or_load_shuffle(store, "quiz", sample_fields, BOTH, random.Random(2))
    assert "malformed" in caplog.text
    assert load_shuffle(store, "quiz") == result


def test_clear_session_resets_state(sample_fields) -> None:
    store = InMemorySessionStore()
    compute_or_load_shuffle(store, "quiz", sample_fields, BOTH, random.Random(1))
    save_response(store, "quiz", "A", 2)
    clear_session(store, "quiz")
    assert load_shuffle(store, "quiz") is None
    assert load_responses(store, "quiz") == {}


def test_clear_session_tolerates_store_errors() -> None:
    clear_session(FailingStore(), "quiz")


def test_save_response_updates_and_removes() -> None:
    store = InMemorySessionStore()
    save_response(store, "quiz", "A", 1)
    save_response(store, "quiz", "B", [0, 2])
    assert load_responses(store, "quiz") == {"A": 1, "B": [0, 2]}
    assert save_response(store, "quiz", "A", None) == {"B": [0, 2]}


def test_in_memory_store_returns_copies() -> None:
    store = InMemorySessionStore()
    value = {"items": [1]}
    store.set("key", value)
    value["items"].append(2)
    assert store.get("key") == {"items": [1]}


def test_json_file_store_persists_across_instances(tmp_path, sample_fields) -> None:
    first = compute_or_load_shuffle(
        JsonFileSessionStore(tmp_path), "quiz", sample_fields, BOTH, random.Random(8)
    )
    assert (tmp_path / "quiz.shuffle.json").exists()
    second = compute_or_load_shuffle(
        JsonFileSessionStore(tmp_path), "quiz", sample_fields, BOTH, random.Random(9)
    )
    assert second == first


def test_json_file_store_reports_corrupt_files(tmp_path, caplog) -> None:
    (tmp_path / "quiz.shuffle.json").write_text("{not json", encoding="utf-8")
    store = JsonFileSessionStore(tmp_path)
    with caplog.at_level(logging.WARNING):
        assert load_shuffle(store, "quiz") is None
    assert "unavailable" in caplog.text


def test_json_file_store_round_trips_values(tmp_path) -> None:
    store = JsonFileSessionStore(tmp_path / "nested")
    store.set("quiz.responses", {"A": "Au"})
    assert json.loads((tmp_path / "nested" / "quiz.responses.json").read_text()) == {"A": "Au"}
    store.delete("quiz.responses")
    store.delete("quiz.responses")
    assert store.get("quiz.responses") is None

"""Tests for CheckInStore persistence."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from campera.services.checkins import (
    MAX_MESSAGE_LEN,
    STORAGE_KEY,
    CheckInStore,
    hint_for,
    status_label,
)


@pytest.fixture
def store(tmp_path):
    return CheckInStore(tmp_path / "data" / "checkins.json")


def test_missing_file_reads_empty(store):
    assert store.load() == []


@pytest.mark.parametrize(
    "content",
    ["not json", json.dumps([1, 2]), json.dumps({STORAGE_KEY: "oops"}), ""],
)
def test_corrupt_data_reads_empty(store, content):
    store.path.parent.mkdir(parents=True)
    store.path.write_text(content)
    assert store.load() == []


def test_add_prepends_and_persists(store):
    first = store.add("ok", "morning")
    second = store.add("unsure", "evening")

    reopened = CheckInStore(store.path)
    assert [r["id"] for r in reopened.load()] == [second["id"], first["id"]]
    assert first["id"] != second["id"]
    assert first["createdAt"].endswith("+00:00")


def test_add_normalizes_input(store):
    record = store.add("meh", None)
    assert record["status"] == "ok"
    assert record["message"] == ""

    record = store.add("not_ok", "y" * (MAX_MESSAGE_LEN + 1))
    assert len(record["message"]) == MAX_MESSAGE_LEN


def test_other_keys_survive_writes(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text(json.dumps({"other_v1": {"keep": True}}))

    store.add("ok", "hi")
    store.reset()

    data = json.loads(store.path.read_text())
    assert data["other_v1"] == {"keep": True}
    assert data[STORAGE_KEY] == []


def test_labels_and_hints():
    assert status_label("ok") == "OK"
    assert status_label("not_ok") == "NOT OK"
    assert status_label(None) == "CHECK-IN"
    assert hint_for("ok")["cls"] == "hint good"
    assert hint_for("unsure")["cls"] == "hint"
    assert hint_for("bogus") == {"text": "", "cls": "hint"}


def test_concurrent_adds_keep_every_record(store):
    def add_many(worker):
        for i in range(25):
            store.add("ok", f"w{worker}-m{i}")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(add_many, range(8)))

    items = store.load()
    assert len(items) == 200
    assert len({r["id"] for r in items}) == 200
    # only the feed file is left behind, no temp files
    assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]

"""Tests for the HTTP surface: /upload, /checkins, /status, /health and the web page."""

from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from campera.services import api
from campera.services.checkins import CheckInStore, MAX_MESSAGE_LEN
from campera.services.image_store import ImageStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture
def stores(tmp_path, monkeypatch):
    images = ImageStore(tmp_path / "captures")
    checkins = CheckInStore(tmp_path / "checkins.json")
    monkeypatch.setattr(api, "image_store", images)
    monkeypatch.setattr(api, "checkins", checkins)
    return images, checkins


@pytest.fixture
def client(stores):
    return TestClient(api.app)


def data_url(raw: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(raw).decode("ascii")


class TestUpload:
    def test_saves_png_and_acknowledges(self, client, stores):
        images, _ = stores
        r = client.post("/upload", json={"image": data_url(PNG_BYTES)})

        assert r.status_code == 200
        assert r.text == "Image received"
        saved = list(images.directory.glob("photo_*.png"))
        assert len(saved) == 1
        assert saved[0].read_bytes() == PNG_BYTES

    def test_invalid_base64_is_rejected(self, client, stores):
        images, _ = stores
        r = client.post("/upload", json={"image": "data:image/png;base64,not base64!!"})

        assert r.status_code == 400
        assert not images.directory.exists()

    def test_missing_field_is_unprocessable(self, client):
        assert client.post("/upload", json={}).status_code == 422

    def test_write_error_still_answers_200(self, client, tmp_path, monkeypatch):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        monkeypatch.setattr(api, "image_store", ImageStore(blocker))

        r = client.post("/upload", json={"image": data_url(PNG_BYTES)})

        assert r.status_code == 200
        assert r.text == "Error saving image"
        assert any("UPLOAD write error" in line for line in api.status.logs)


class TestCheckIns:
    def test_empty_feed(self, client):
        assert client.get("/checkins").json() == {"items": []}

    def test_post_returns_record_and_hint(self, client):
        r = client.post("/checkins", json={"status": "not_ok", "message": "rough day"})

        assert r.status_code == 200
        body = r.json()
        assert body["ok"] is True
        assert body["record"]["status"] == "not_ok"
        assert body["record"]["label"] == "NOT OK"
        assert body["record"]["message"] == "rough day"
        assert body["hint"]["cls"] == "hint bad"
        assert "988" in body["hint"]["text"]

    def test_feed_is_newest_first(self, client):
        client.post("/checkins", json={"status": "ok", "message": "first"})
        client.post("/checkins", json={"status": "unsure", "message": "second"})

        items = client.get("/checkins").json()["items"]

        assert [i["message"] for i in items] == ["second", "first"]
        assert [i["label"] for i in items] == ["UNSURE", "OK"]

    def test_long_message_is_truncated(self, client):
        r = client.post("/checkins", json={"status": "ok", "message": "x" * 900})
        assert len(r.json()["record"]["message"]) == MAX_MESSAGE_LEN

    def test_defaults_to_ok(self, client):
        r = client.post("/checkins", json={})
        assert r.json()["record"]["status"] == "ok"
        assert r.json()["record"]["message"] == ""

    def test_unknown_status_is_unprocessable(self, client):
        assert client.post("/checkins", json={"status": "great"}).status_code == 422

    def test_reset_clears_feed(self, client, stores):
        _, checkins = stores
        client.post("/checkins", json={"status": "ok"})

        assert client.delete("/checkins").json() == {"ok": True}
        assert client.get("/checkins").json() == {"items": []}
        assert checkins.load() == []


class TestStatus:
    def test_status_reports_pipeline_counters(self, client, monkeypatch):
        monkeypatch.setattr(api.status, "ticks", {"delivered": 3})
        monkeypatch.setattr(api.status, "state", "running")

        body = client.get("/status").json()

        assert body["state"] == "running"
        assert body["ticks"] == {"delivered": 3}
        assert isinstance(body["logs"], list)

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["api"] is True
        assert "capture_state" in body
        assert body["checkins_count"] == 0
        assert body["captures_writable"] is True
        assert body["all_ok"] is True

    def test_health_flags_unwritable_captures_dir(self, client, tmp_path, monkeypatch):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        monkeypatch.setattr(api, "image_store", ImageStore(blocker / "captures"))

        body = client.get("/health").json()

        assert body["captures_writable"] is False
        assert body["all_ok"] is False


def test_web_app_serves_page_and_mounted_api(stores):
    from campera.web.app import app as web_app

    with TestClient(web_app) as client:
        page = client.get("/")
        assert page.status_code == 200
        assert "text/html" in page.headers["content-type"]
        assert client.get("/static/app.js").status_code == 200
        assert client.get("/checkins").json() == {"items": []}

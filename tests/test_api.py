"""Tests for the FastAPI annotation API.

WHY: Validates the two endpoints: happy paths, the documented error
codes, and the service initialization failure.

HOW: The shared services are replaced through app.dependency_overrides
with the conftest ScriptedTokenizer, sample dictionary and palette, so
no MeCab installation or dictionary file is needed.

RULES:
- All tests use the FastAPI TestClient (synchronous)
- Overrides are cleared after each test
"""

from __future__ import annotations

import dataclasses
import io

import pytest
from conftest import BOOK_CAPTION, CAT_CAPTION, NOTHING_CAPTION, ScriptedTokenizer
from fastapi.testclient import TestClient

from subgloss import __version__
from subgloss.server.app import Services, app, get_services


def _srt_upload(name: str, text: str):
    content = "1\n00:00:01,000 --> 00:00:02,000\n{}\n".format(text).encode("utf-8")
    return {"file": (name, io.BytesIO(content), "application/x-subrip")}


@pytest.fixture
def services(tokenizer, dictionary, config):
    return Services(tokenizer=tokenizer, index=dictionary, config=config)


@pytest.fixture
def client(services):
    app.dependency_overrides[get_services] = lambda: services
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# POST /annotations
# ---------------------------------------------------------------------------


class TestCreateAnnotation:
    def test_annotates_srt(self, client):
        resp = client.post("/annotations", files=_srt_upload("ep01.srt", CAT_CAPTION))
        assert resp.status_code == 200
        data = resp.json()
        assert data["filename"] == "ep01.srt"
        assert data["captions"] == 1
        assert data["annotated_captions"] == 1
        assert data["content"].startswith("[Script Info]")
        assert "{\\c&H0000FF&}猫{\\r}がいる" in data["content"]

    def test_annotates_ass(self, client):
        ass = (
            "[Events]\n"
            "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text\n"
            "Dialogue: 0,0:00:01.00,0:00:02.00,Default,,0,0,0,,{}\n".format(BOOK_CAPTION)
        )
        files = {"file": ("ep01.ass", io.BytesIO(ass.encode("utf-8")), "text/plain")}
        resp = client.post("/annotations", files=files)
        assert resp.status_code == 200
        assert "読んで" in resp.json()["content"]

    def test_nothing_annotated(self, client):
        resp = client.post("/annotations", files=_srt_upload("ep01.srt", NOTHING_CAPTION))
        assert resp.status_code == 200
        data = resp.json()
        assert data["annotated_captions"] == 0
        assert data["content"] is None

    def test_unsupported_extension(self, client):
        resp = client.post("/annotations", files=_srt_upload("ep01.txt", CAT_CAPTION))
        assert resp.status_code == 400
        assert ".txt" in resp.json()["detail"]

    def test_not_utf8(self, client):
        files = {"file": ("ep01.srt", io.BytesIO(b"\xff\xfe\xfa"), "application/x-subrip")}
        resp = client.post("/annotations", files=files)
        assert resp.status_code == 422

    def test_unparseable(self, client):
        files = {"file": ("ep01.srt", io.BytesIO(b"no captions here"), "application/x-subrip")}
        resp = client.post("/annotations", files=files)
        assert resp.status_code == 422
        assert "No captions" in resp.json()["detail"]

    def test_missing_file(self, client):
        resp = client.post("/annotations")
        assert resp.status_code == 422

    def test_analyzer_failure(self, client, services):
        services.tokenizer = ScriptedTokenizer({}, fail_on=[CAT_CAPTION])
        resp = client.post("/annotations", files=_srt_upload("ep01.srt", CAT_CAPTION))
        assert resp.status_code == 500
        assert "scripted failure" in resp.json()["detail"]

    def test_subtitle_styles(self, client, services):
        services.config = dataclasses.replace(services.config, subtitle_styles={"Default": {"Fontsize": 72}})
        resp = client.post("/annotations", files=_srt_upload("ep01.srt", CAT_CAPTION))
        assert resp.status_code == 200
        assert "Style: Default,Arial,72," in resp.json()["content"]

    def test_invalid_worker_count(self, client, services):
        services.workers = 0
        resp = client.post("/annotations", files=_srt_upload("ep01.srt", CAT_CAPTION))
        assert resp.status_code == 503
        assert "max_workers" in resp.json()["detail"]


# ---------------------------------------------------------------------------
# GET /health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__, "dictionary_entries": 3}

    def test_unconfigured_dictionary(self, monkeypatch):
        monkeypatch.setattr("subgloss.server.app.DEFAULT_DICTIONARY_PATH", None)
        get_services.cache_clear()
        resp = TestClient(app).get("/health")
        get_services.cache_clear()
        assert resp.status_code == 503
        assert "SUBGLOSS_DICTIONARY" in resp.json()["detail"]

"""Tests for the FastAPI report service."""

import pytest
from fastapi.testclient import TestClient

import server
from core.codec import encode_soul
from core.errors import VendorRequestFailed
from core.settings import Settings
from questionnaires.questions import Scenario


class FakeCache:
    enabled = True

    def __init__(self, store=None):
        self.store = dict(store or {})
        self.writes = []

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value):
        self.writes.append((key, value))
        self.store[key] = value


class FakeLLM:
    def __init__(self, chunks=("Hello", " world"), error=None):
        self.chunks = chunks
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return "".join(self.chunks)

    async def stream(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        for chunk in self.chunks:
            yield chunk


class DroppingLLM(FakeLLM):
    """Yields one chunk, then the vendor connection drops."""

    async def stream(self, prompt):
        self.prompts.append(prompt)
        yield "=== [SECTION:VERDICT] ===\nGreat"
        raise RuntimeError("vendor dropped")


class ExplodingCache(FakeCache):
    async def get(self, key):
        raise RuntimeError("cache backend exploded")


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def client(cache, llm):
    server.app.dependency_overrides[server.get_settings] = lambda: Settings(api_key="test-key")
    server.app.dependency_overrides[server.get_report_cache] = lambda: cache
    server.app.dependency_overrides[server.get_llm_factory] = lambda: (lambda config, settings: llm)
    yield TestClient(server.app)
    server.app.dependency_overrides.clear()


@pytest.fixture
def lenient_client(client):
    """Same overrides, but server errors come back as responses instead of raising."""
    return TestClient(server.app, raise_server_exceptions=False)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["cache"] is True


class TestAnalyze:
    def test_missing_prompt(self, client):
        response = client.post("/api/analyze", json={"stream": True})
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required"}

    def test_malformed_body(self, client):
        response = client.post("/api/analyze", content=b"{not json", headers={"content-type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_cache_hit_returns_json(self, client, cache, llm):
        cache.store["k1"] = "Cached report"
        response = client.post("/api/analyze", json={"prompt": "p", "stream": True, "cacheKey": "k1"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"reportText": "Cached report"}
        assert llm.prompts == []

    def test_stream_relays_text_and_caches(self, client, cache, llm):
        response = client.post("/api/analyze", json={"prompt": "p", "stream": True, "cacheKey": "k2"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Hello world"
        assert llm.prompts == ["p"]
        assert cache.writes == [("k2", "Hello world")]

    def test_stream_without_cache_key_skips_write(self, client, cache):
        response = client.post("/api/analyze", json={"prompt": "p", "stream": True})
        assert response.text == "Hello world"
        assert cache.writes == []

    def test_non_stream_returns_json_and_caches(self, client, cache):
        response = client.post("/api/analyze", json={"prompt": "p", "cacheKey": "k3"})

        assert response.status_code == 200
        assert response.json() == {"reportText": "Hello world"}
        assert cache.writes == [("k3", "Hello world")]

    @pytest.mark.parametrize("stream", [True, False])
    def test_vendor_failure_is_500(self, client, cache, llm, stream):
        llm.error = VendorRequestFailed("rate limited", 429)
        response = client.post("/api/analyze", json={"prompt": "p", "stream": stream, "cacheKey": "k4"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate analysis"
        assert "Custom API Error: 429" in response.json()["details"]
        assert cache.writes == []

    def test_vendor_drop_mid_stream_aborts_body(self, client, cache):
        server.app.dependency_overrides[server.get_llm_factory] = lambda: (lambda config, settings: DroppingLLM())

        with pytest.raises(RuntimeError, match="vendor dropped"):
            client.post("/api/analyze", json={"prompt": "p", "stream": True, "cacheKey": "k5"})
        assert cache.writes == []

    def test_unexpected_error_is_json_500(self, lenient_client):
        server.app.dependency_overrides[server.get_report_cache] = lambda: ExplodingCache()

        response = lenient_client.post("/api/analyze", json={"prompt": "p", "cacheKey": "k6"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to generate analysis", "details": "cache backend exploded"}

    def test_factory_error_is_json_500(self, lenient_client):
        def broken_factory(config, settings):
            raise RuntimeError("no vendor")

        server.app.dependency_overrides[server.get_llm_factory] = lambda: broken_factory

        response = lenient_client.post("/api/analyze", json={"prompt": "p"})

        assert response.status_code == 500
        assert response.json()["details"] == "no vendor"

    def test_missing_api_key_is_500(self, client):
        server.app.dependency_overrides[server.get_settings] = lambda: Settings(api_key=None)
        server.app.dependency_overrides[server.get_llm_factory] = lambda: server.select_client

        response = client.post("/api/analyze", json={"prompt": "p"})

        assert response.status_code == 500
        assert response.json() == {"error": "Server configuration error: MISSING_API_KEY"}


class TestMatch:
    def _token(self, make_profile, **kwargs):
        return encode_soul(make_profile(**kwargs))

    def test_match_scores_pair(self, client, make_profile):
        host = self._token(make_profile, name="Ann")
        guest = self._token(make_profile, name="Ben")

        response = client.post("/api/match", json={"host": host, "guest": guest})

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert data["scenario"] == "couple"
        assert len(data["comparisonMatrix"]) == 50
        assert data["comparisonMatrix"][0]["A_label"]
        assert data["cacheKey"].startswith("match_v2_")

    def test_invalid_code(self, client, make_profile):
        response = client.post("/api/match", json={"host": "garbage!", "guest": self._token(make_profile)})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid code"

    def test_scenario_mismatch(self, client, make_profile):
        response = client.post("/api/match", json={
            "host": self._token(make_profile),
            "guest": self._token(make_profile, scenario=Scenario.FRIEND),
        })
        assert response.status_code == 409
        assert response.json()["error"] == "scenario mismatch"

    def test_stale_profile_length(self, client, make_profile):
        response = client.post("/api/match", json={
            "host": self._token(make_profile, answers=[3] * 40),
            "guest": self._token(make_profile),
        })
        assert response.status_code == 422
        assert "redo the questionnaire" in response.json()["details"]

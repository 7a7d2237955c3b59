import asyncio

import httpx

from panel_core.domain.models import ChatMessage
from panel_core.providers.gemini_client import GeminiClient


class SettingsStub:
    gemini_api_key = "gm-secret-789"
    http_timeout = 1.0
    temperature = 0.7


class Resp:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


def _client(resp, captured):
    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None, params=None, **_):
            captured.update(url=url, payload=json, headers=headers, params=params)
            return resp

    return Client


def test_gemini_client_synthesizes_policy_turn(monkeypatch):
    captured = {}
    resp = Resp(payload={
        "candidates": [{"content": {"parts": [{"text": "Hello, "}, {"text": "<p>world</p>"}]}}],
    })
    monkeypatch.setattr("httpx.AsyncClient", _client(resp, captured))
    conversation = [
        ChatMessage(role="user", content="hi"),
        ChatMessage(role="assistant", content="hey"),
        ChatMessage(role="user", content="again"),
    ]

    res = asyncio.run(GeminiClient(SettingsStub()).ask(conversation, "POLICY TEXT"))

    assert res.ok
    assert res.text == "Hello, world"
    assert captured["url"].endswith("/models/gemini-1.5-flash:generateContent")
    assert captured["params"] == {"key": "gm-secret-789"}
    assert "Authorization" not in captured["headers"]
    contents = captured["payload"]["contents"]
    assert contents[0]["role"] == "user"
    assert contents[0]["parts"][0]["text"] == "System instructions:\nPOLICY TEXT"
    assert [c["role"] for c in contents[1:]] == ["user", "model", "user"]
    assert contents[2]["parts"][0]["text"] == "hey"
    assert captured["payload"]["generationConfig"] == {"temperature": 0.7}


def test_gemini_client_missing_candidates(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", _client(Resp(payload={"promptFeedback": {}}), {}))

    res = asyncio.run(GeminiClient(SettingsStub()).ask([ChatMessage(role="user", content="hi")], "P"))

    assert res.ok
    assert res.text == ""


def test_gemini_client_error_does_not_leak_key(monkeypatch):
    resp = Resp(status_code=400, text="API key gm-secret-789 not valid")
    monkeypatch.setattr("httpx.AsyncClient", _client(resp, {}))

    res = asyncio.run(GeminiClient(SettingsStub()).ask([ChatMessage(role="user", content="hi")], "P"))

    assert not res.ok
    assert res.error.startswith("Gemini HTTP 400:")
    assert "gm-secret-789" not in res.error


def test_gemini_client_network_error_does_not_leak_encoded_key(monkeypatch):
    class OddKey(SettingsStub):
        gemini_api_key = "a/b+c key"

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, params=None, **_):
            raise httpx.ConnectError(f"failed to reach {url}?key=a%2Fb%2Bc+key")

    monkeypatch.setattr("httpx.AsyncClient", Client)

    res = asyncio.run(GeminiClient(OddKey()).ask([ChatMessage(role="user", content="hi")], "P"))

    assert not res.ok
    assert res.error.startswith("Gemini error:")
    assert "a%2Fb%2Bc+key" not in res.error
    assert "key=***" in res.error

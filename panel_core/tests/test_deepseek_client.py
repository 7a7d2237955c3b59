import asyncio

import httpx

from panel_core.domain.models import ChatMessage
from panel_core.providers.deepseek_client import DeepSeekClient


class SettingsStub:
    deepseek_api_key = "ds-test-456"
    deepseek_base_url = "https://proxy.example.com/v1/"
    deepseek_model = "deepseek-reasoner"
    http_timeout = 0.2
    temperature = 0.2


class Resp:
    status_code = 200
    text = ""

    def json(self):
        return {"choices": [{"message": {"role": "assistant", "content": "  ok  "}, "finish_reason": "stop"}]}


def test_deepseek_client_payload_uses_overrides(monkeypatch):
    captured = {}

    class Client:
        def __init__(self, *a, **kw):
            captured["timeout"] = kw.get("timeout")

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None, **_):
            captured.update(url=url, payload=json, headers=headers)
            return Resp()

    monkeypatch.setattr("httpx.AsyncClient", Client)
    conversation = [
        ChatMessage(role="user", content="q1"),
        ChatMessage(role="assistant", content="a1"),
        ChatMessage(role="user", content="q2"),
    ]

    res = asyncio.run(DeepSeekClient(SettingsStub()).ask(conversation, "POLICY"))

    assert res.ok and res.text == "ok"
    assert captured["url"] == "https://proxy.example.com/v1/chat/completions"
    assert captured["timeout"] == 0.2
    payload = captured["payload"]
    assert payload["model"] == "deepseek-reasoner"
    assert payload["temperature"] == 0.2
    assert [m["role"] for m in payload["messages"]] == ["system", "user", "assistant", "user"]
    assert payload["messages"][0]["content"] == "POLICY"


def test_deepseek_client_timeout(monkeypatch):
    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, *a, **kw):
            raise httpx.ReadTimeout("timed out")

    monkeypatch.setattr("httpx.AsyncClient", Client)

    res = asyncio.run(DeepSeekClient(SettingsStub()).ask([ChatMessage(role="user", content="hi")], "P"))

    assert not res.ok
    assert res.error == "DeepSeek timed out after 0.2s"


def test_deepseek_client_hanging_call_is_aborted(monkeypatch):
    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, *a, **kw):
            await asyncio.sleep(30)

    monkeypatch.setattr("httpx.AsyncClient", Client)

    res = asyncio.run(DeepSeekClient(SettingsStub()).ask([ChatMessage(role="user", content="hi")], "P"))

    assert not res.ok
    assert "timed out" in res.error

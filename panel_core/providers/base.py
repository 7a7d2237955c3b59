"""Provider 抽象接口与公共工具。

Dispatcher 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 OpenAIClient、GeminiClient）。
- 负责：把规范对话 + 策略文本转成具体 API 请求，调用接口，
  并把响应 JSON 解析为纯文本。
- ask() 永远不抛出业务异常，而是返回 ProviderResult。

各适配器之间不共享可变状态；这里只提供无状态的辅助函数。
"""

import asyncio
import html
import re
from urllib.parse import quote, quote_plus
from typing import Any, Dict, List, Optional, Protocol

import httpx

from panel_core.domain.exceptions import (
    ApiError,
    MissingCredentialError,
    NetworkError,
    ProviderTimeoutError,
)
from panel_core.domain.models import Conversation, ProviderResult
from panel_core.providers.registry import ProviderConfig


# 只匹配真正的标签语法，"2<3" 之类的比较符号保留
_TAG_RE = re.compile(r"</?[A-Za-z][A-Za-z0-9:-]*(?:\s[^<>]*)?/?>")
_ERROR_BODY_LIMIT = 500


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: 结果信封中的键。
    - label: 错误信息中展示的名称。
    - ask(conversation, policy): 执行一次对话调用，返回 ProviderResult。
    """

    name: str
    label: str

    async def ask(self, conversation: Conversation, policy: str) -> ProviderResult:
        ...


def resolve_setting(cfg: Any, provider: ProviderConfig, field: str, default: Any = None) -> Any:
    """读取 `<prefix>_<field>` 配置项，缺失或为空时返回 default。"""

    value = getattr(cfg, f"{provider.setting_prefix}_{field}", None)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return value


def require_api_key(cfg: Any, provider: ProviderConfig) -> str:
    api_key = resolve_setting(cfg, provider, "api_key")
    if not api_key:
        raise MissingCredentialError(
            code="MISSING_API_KEY",
            message=f"Missing credential: {provider.key_env} not set",
            provider=provider.name,
        )
    return str(api_key).strip()


def resolve_temperature(cfg: Any, provider: ProviderConfig) -> float:
    value = getattr(cfg, "temperature", None)
    return provider.default_temperature if value is None else float(value)


def native_messages(conversation: Conversation, policy: str) -> List[Dict[str, str]]:
    """原生支持 system 角色的 Provider：策略作为首条 system 消息。"""

    return [{"role": "system", "content": policy}, *(m.to_payload() for m in conversation)]


def strip_markup(text: str) -> str:
    """去掉 Provider 违背纯文本要求时输出的标签。"""

    return html.unescape(_TAG_RE.sub("", text or "")).strip()


def scrub(text: str, secret: Optional[str]) -> str:
    """从错误信息中去掉凭证，包括它在 URL 中的编码形式。"""

    if secret:
        for form in sorted({secret, quote_plus(secret), quote(secret, safe="")}, key=len, reverse=True):
            text = text.replace(form, "***")
    return text


def chat_completion_text(data: Any) -> str:
    """Chat Completions 响应：取出 choices[0].message.content，缺失时返回空串。"""

    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


async def post_json(
    provider: ProviderConfig,
    url: str,
    payload: Dict[str, Any],
    *,
    timeout: float,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    secret: Optional[str] = None,
) -> Any:
    """在时间预算内 POST JSON 并返回解析后的响应体。

    Raises:
        ProviderTimeoutError: 超过 timeout 秒（连接、读取或整体耗时）。
        NetworkError: 连接失败等网络错误，或响应不是合法 JSON。
        ApiError: 上游返回非 2xx，http_status 为上游状态码。
    """

    label = provider.label

    async def _send() -> httpx.Response:
        async with httpx.AsyncClient(timeout=timeout, trust_env=False) as client:
            return await client.post(
                url,
                json=payload,
                params=params,
                headers={"Content-Type": "application/json", **(headers or {})},
            )

    try:
        resp = await asyncio.wait_for(_send(), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException):
        raise ProviderTimeoutError(
            code="TIMEOUT",
            message=f"{label} timed out after {timeout:g}s",
            provider=provider.name,
        )
    except httpx.HTTPError as e:
        detail = scrub(str(e) or type(e).__name__, secret)
        raise NetworkError(code="NETWORK_ERROR", message=f"{label} error: {detail}", provider=provider.name)

    if not 200 <= resp.status_code < 300:
        body = scrub((resp.text or "")[:_ERROR_BODY_LIMIT], secret)
        raise ApiError(
            code="API_ERROR",
            message=f"{label} HTTP {resp.status_code}: {body}",
            http_status=resp.status_code,
            provider=provider.name,
        )
    try:
        return resp.json()
    except ValueError as e:
        raise NetworkError(
            code="BAD_RESPONSE",
            message=f"{label} error: invalid JSON response ({e})",
            provider=provider.name,
        )

"""Gemini Provider 适配器。

Gemini 的 generateContent 接口与 Chat Completions 差异较大：
- 消息格式为 contents → [parts → text]，角色只有 user / model。
- 这里不使用原生 system 字段，而是合成一条带标签的首条 user 消息承载策略文本，
  之后按顺序追加对话，assistant 角色改写为 model。
- 凭证通过 URL 的 key 参数传递（无 Bearer 头）。
- 回答位于 candidates[0].content.parts[*].text，多个 part 直接拼接。
"""

from typing import Any, Dict, List

from panel_core.config.settings import settings
from panel_core.domain.exceptions import BusinessError
from panel_core.domain.models import Conversation, ProviderResult
from panel_core.infrastructure.logging.logger import logger
from panel_core.providers.base import (
    post_json,
    require_api_key,
    resolve_setting,
    resolve_temperature,
    strip_markup,
)
from panel_core.providers.registry import GEMINI_CONFIG


POLICY_PREAMBLE_LABEL = "System instructions:"

_ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiClient:
    """Gemini Provider 客户端实现。"""

    name = GEMINI_CONFIG.name
    label = GEMINI_CONFIG.label

    def __init__(self, cfg=settings):
        self._settings = cfg

    async def ask(self, conversation: Conversation, policy: str) -> ProviderResult:
        try:
            text = await self.chat(conversation, policy)
        except BusinessError as e:
            logger.warning(f"{self.label} call failed", extra={"extra": {
                "provider": self.name,
                "code": e.code,
            }})
            return ProviderResult.failure(e.message)
        return ProviderResult.success(text)

    async def chat(self, conversation: Conversation, policy: str) -> str:
        api_key = require_api_key(self._settings, GEMINI_CONFIG)
        base = resolve_setting(self._settings, GEMINI_CONFIG, "base_url", GEMINI_CONFIG.base_url)
        model = resolve_setting(self._settings, GEMINI_CONFIG, "model", GEMINI_CONFIG.model)
        data = await post_json(
            GEMINI_CONFIG,
            f"{base.rstrip('/')}/models/{model}:generateContent",
            self._build_payload(conversation, policy),
            timeout=self._settings.http_timeout,
            params={"key": api_key},
            secret=api_key,
        )
        return strip_markup(self._parse_response(data))

    def _build_payload(self, conversation: Conversation, policy: str) -> Dict[str, Any]:
        contents: List[Dict[str, Any]] = [
            {"role": "user", "parts": [{"text": f"{POLICY_PREAMBLE_LABEL}\n{policy}"}]},
        ]
        for msg in conversation:
            contents.append({"role": _ROLE_MAP[msg.role], "parts": [{"text": msg.content}]})
        return {
            "contents": contents,
            "generationConfig": {"temperature": resolve_temperature(self._settings, GEMINI_CONFIG)},
        }

    @staticmethod
    def _parse_response(data: Any) -> str:
        """拼接 candidates[0].content.parts[*].text，缺失时返回空串。"""

        if not isinstance(data, dict):
            return ""
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        return "".join(p["text"] for p in parts or [] if isinstance(p, dict) and isinstance(p.get("text"), str))

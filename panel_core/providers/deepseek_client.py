"""DeepSeek Provider 适配器。

接口风格与 OpenAI 一致，使用 chat/completions 端点：
- URL: {base_url}/chat/completions
- 认证: Authorization: Bearer <api_key>

本实现只依赖公共字段：model/messages/temperature。
"""

from typing import Any, Dict

from panel_core.config.settings import settings
from panel_core.domain.exceptions import BusinessError
from panel_core.domain.models import Conversation, ProviderResult
from panel_core.infrastructure.logging.logger import logger
from panel_core.providers.base import (
    chat_completion_text,
    native_messages,
    post_json,
    require_api_key,
    resolve_setting,
    resolve_temperature,
    strip_markup,
)
from panel_core.providers.registry import DEEPSEEK_CONFIG


class DeepSeekClient:
    """DeepSeek Provider 客户端实现。"""

    name = DEEPSEEK_CONFIG.name
    label = DEEPSEEK_CONFIG.label

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
        api_key = require_api_key(self._settings, DEEPSEEK_CONFIG)
        base = resolve_setting(self._settings, DEEPSEEK_CONFIG, "base_url", DEEPSEEK_CONFIG.base_url)
        data = await post_json(
            DEEPSEEK_CONFIG,
            f"{base.rstrip('/')}/chat/completions",
            self._build_payload(conversation, policy),
            timeout=self._settings.http_timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            secret=api_key,
        )
        return strip_markup(chat_completion_text(data))

    # ---- 辅助方法 ----

    def _build_payload(self, conversation: Conversation, policy: str) -> Dict[str, Any]:
        return {
            "model": resolve_setting(self._settings, DEEPSEEK_CONFIG, "model", DEEPSEEK_CONFIG.model),
            "messages": native_messages(conversation, policy),
            "temperature": resolve_temperature(self._settings, DEEPSEEK_CONFIG),
            "stream": False,
        }

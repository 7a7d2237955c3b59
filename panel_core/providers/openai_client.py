"""OpenAI (ChatGPT) Provider 适配器。

本模块负责：

1. 接收规范对话与策略文本。
2. 将其转换为 Chat Completions 请求格式（策略作为原生 system 消息）。
3. 在超时预算内调用 HTTP 接口并处理网络/API 异常。
4. 从 choices[0].message.content 中取出回答文本并清理标签。

失败不会向上抛出，而是转换为 ProviderResult.failure。
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
from panel_core.providers.registry import OPENAI_CONFIG


class OpenAIClient:
    """OpenAI 提供方客户端实现。

    - name: 结果信封中的键（"chatgpt"）。
    - ask: 对外统一调用入口，返回 ProviderResult。
    """

    name = OPENAI_CONFIG.name
    label = OPENAI_CONFIG.label

    def __init__(self, cfg=settings):
        # Settings 里包含 api_key、base_url、超时等配置
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
        """执行一次非流式对话调用，返回清理后的回答文本。

        步骤：
        1. 读取凭证，缺失时直接抛出 MissingCredentialError，不发请求。
        2. 构造 HTTP 请求 payload。
        3. 发送请求（超时/网络错误/非 2xx 由 post_json 包装为业务异常）。
        4. 解析响应并去掉标签。
        """

        api_key = require_api_key(self._settings, OPENAI_CONFIG)
        base = resolve_setting(self._settings, OPENAI_CONFIG, "base_url", OPENAI_CONFIG.base_url)
        data = await post_json(
            OPENAI_CONFIG,
            f"{base.rstrip('/')}/chat/completions",
            self._build_payload(conversation, policy),
            timeout=self._settings.http_timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            secret=api_key,
        )
        return strip_markup(chat_completion_text(data))

    def _build_payload(self, conversation: Conversation, policy: str) -> Dict[str, Any]:
        """将对话转成 OpenAI 所需的请求 JSON。"""

        return {
            "model": resolve_setting(self._settings, OPENAI_CONFIG, "model", OPENAI_CONFIG.model),
            "messages": native_messages(conversation, policy),
            "temperature": resolve_temperature(self._settings, OPENAI_CONFIG),
        }

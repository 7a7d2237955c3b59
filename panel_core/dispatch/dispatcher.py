"""并发分发：同一段对话同时发给所有 Provider，并等待全部结束。

- 策略文本与规范对话各构造一次，所有 Provider 共享同一份（只读）。
- 使用 asyncio.gather(return_exceptions=True)：任何一个 Provider 失败
  都不会取消或阻塞其他 Provider。
- 结果按 Provider 名称组装，不依赖完成顺序；每个 Provider 恰好一条结果。
"""

import asyncio
import time
from typing import Any, Dict, Mapping, Optional

from panel_core.config.settings import settings
from panel_core.domain.conversation import normalize
from panel_core.domain.models import Conversation, ProviderResult, ResultEnvelope
from panel_core.infrastructure.logging.logger import logger
from panel_core.prompts import build_policy
from panel_core.providers import create_providers
from panel_core.providers.base import ProviderClient


async def _timed_ask(client: ProviderClient, conversation: Conversation, policy: str):
    started = time.perf_counter()
    try:
        return await client.ask(conversation, policy)
    finally:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(f"{client.name} settled", extra={"extra": {
            "provider": client.name,
            "elapsed_ms": elapsed_ms,
        }})


def _settle(client: ProviderClient, outcome: Any) -> ProviderResult:
    """把 gather 的单项结果统一转换为 ProviderResult。"""

    if isinstance(outcome, ProviderResult):
        return outcome
    label = getattr(client, "label", client.name)
    if isinstance(outcome, BaseException):
        logger.error(f"{client.name} raised unexpectedly", exc_info=outcome, extra={"extra": {
            "provider": client.name,
            "error_type": type(outcome).__name__,
        }})
        return ProviderResult.failure(f"{label} error: unexpected {type(outcome).__name__}: {outcome}")
    return ProviderResult.failure(f"{label} error: adapter returned {type(outcome).__name__}")


async def dispatch_all(
    raw_conversation: Any,
    extra_system_prompt: Optional[str] = None,
    providers: Optional[Mapping[str, ProviderClient]] = None,
    cfg=None,
) -> ResultEnvelope:
    """把一段对话并发发送给所有 Provider，返回完整的结果信封。

    Args:
        raw_conversation: 调用方传入的消息列表（未规范化）。
        extra_system_prompt: 追加到基础策略之后的附加指令。
        providers: name -> ProviderClient；为空时按配置创建。
        cfg: Settings 对象，默认使用全局配置。

    Raises:
        ValidationError: 对话不合法（INVALID_INPUT），此时不会联系任何 Provider。
    """

    cfg = cfg if cfg is not None else settings
    conversation = normalize(raw_conversation)
    policy = build_policy(extra_system_prompt, base=getattr(cfg, "base_policy", None))
    if providers is None:
        providers = create_providers(cfg)

    clients = list(providers.items())
    outcomes = await asyncio.gather(
        *(_timed_ask(client, conversation, policy) for _, client in clients),
        return_exceptions=True,
    )

    envelope: Dict[str, ProviderResult] = {}
    for (name, client), outcome in zip(clients, outcomes):
        envelope[name] = _settle(client, outcome)

    logger.info("dispatch completed", extra={"extra": {
        "messages": len(conversation),
        "providers": {name: result.ok for name, result in envelope.items()},
    }})
    return envelope

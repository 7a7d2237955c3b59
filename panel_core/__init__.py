"""Panel Core 顶层包。

该包把同一段对话并发发送给多个 LLM Provider，并把各家的回答
规范化为统一的结果信封，包括配置加载、领域模型、策略提示词、
Provider 适配、并发分发与 HTTP 入口等能力。
"""

from panel_core.dispatch import dispatch_all

__all__ = ["dispatch_all"]

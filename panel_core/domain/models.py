"""统一的对话与结果数据模型。

本模块定义了在不同 Provider 之间共享的标准数据结构：

- ChatMessage: 一条对话消息（user/assistant/system）。
- ProviderResult: 单个 Provider 的调用结果，成功时携带文本，失败时携带错误描述。
- ResultEnvelope: Provider 名称 -> ProviderResult 的映射，返回给调用方。

所有 Provider 适配器都只依赖这些模型，
并负责在各自的 API JSON 和这些模型之间做转换。
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional


# 消息角色类型（与 OpenAI / DeepSeek 等厂商的 role 字段对应）
Role = Literal["system", "user", "assistant"]

ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息。

    - role: 消息角色，如 user/assistant。调用方传入的 system 消息会在规范化阶段被丢弃。
    - content: 纯文本内容。
    """

    role: Role
    content: str

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


# 一次请求内的规范化对话，按时间顺序排列
Conversation = List[ChatMessage]


@dataclass(frozen=True)
class ProviderResult:
    """单个 Provider 的调用结果，成功与失败两种形态互斥。"""

    ok: bool
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "ProviderResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: str) -> "ProviderResult":
        return cls(ok=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "text": self.text or ""}
        return {"ok": False, "error": self.error or "Unknown error"}


ResultEnvelope = Dict[str, ProviderResult]


def envelope_to_dict(envelope: ResultEnvelope) -> Dict[str, Dict[str, Any]]:
    """把 ResultEnvelope 序列化为可直接 JSON 输出的字典。"""

    return {name: result.to_dict() for name, result in envelope.items()}

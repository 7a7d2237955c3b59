"""对话规范化。

调用方每次请求都携带完整历史（服务端不保存会话），这里把原始 JSON
转换为规范的 ChatMessage 列表，并丢弃所有 system 消息：策略提示词只能由服务端注入。
"""

from collections.abc import Mapping, Sequence
from typing import Any, List

from panel_core.domain.exceptions import ValidationError
from panel_core.domain.models import ROLES, ChatMessage


def normalize(raw_messages: Any) -> List[ChatMessage]:
    """把调用方的消息列表转换为规范对话。

    Raises:
        ValidationError: raw_messages 不是序列、某条消息结构不合法，
            或过滤 system 消息后没有剩余的对话。
            在联系任何 Provider 之前抛出。
    """

    if isinstance(raw_messages, (str, bytes, bytearray, Mapping)) or not isinstance(raw_messages, Sequence):
        raise ValidationError(
            code="INVALID_INPUT",
            message="conversation must be a list of messages",
        )

    messages: List[ChatMessage] = []
    for idx, item in enumerate(raw_messages):
        if not isinstance(item, Mapping):
            raise ValidationError(
                code="INVALID_INPUT",
                message=f"conversation[{idx}] must be an object with role and content",
            )
        role = item.get("role")
        if role not in ROLES:
            raise ValidationError(
                code="INVALID_INPUT",
                message=f"conversation[{idx}].role must be one of {', '.join(ROLES)}",
            )
        if role == "system":
            continue
        content = item.get("content")
        messages.append(ChatMessage(role=role, content="" if content is None else str(content)))
    if not messages:
        raise ValidationError(
            code="INVALID_INPUT",
            message="conversation must contain at least one user or assistant message",
        )
    return messages

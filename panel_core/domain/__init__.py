"""领域层模型与协议。

包含：
- models: 统一的 ChatMessage / ProviderResult 模型。
- conversation: 调用方对话的规范化（过滤 system 消息）。
- exceptions: 业务异常类型定义。
"""

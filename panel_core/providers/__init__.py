"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口与公共 HTTP 工具 (base)。
- 维护 Provider 的端点、模型与凭证配置 (registry)。
- 提供各厂商的具体实现 (openai_client、deepseek_client、gemini_client)。
"""

from typing import Dict, Iterable, Optional

from panel_core.config.settings import settings
from panel_core.providers.base import ProviderClient
from panel_core.providers.deepseek_client import DeepSeekClient
from panel_core.providers.gemini_client import GeminiClient
from panel_core.providers.openai_client import OpenAIClient
from panel_core.providers.registry import get_provider_config


_CLIENTS = {
    "deepseek": DeepSeekClient,
    "gemini": GeminiClient,
    "chatgpt": OpenAIClient,
}


def create_provider(name: str, cfg=None) -> ProviderClient:
    """根据名称创建 Provider 实例，未知名称抛出 KeyError。"""

    provider_cfg = get_provider_config(name)
    return _CLIENTS[provider_cfg.name](cfg if cfg is not None else settings)


def create_providers(cfg=None, names: Optional[Iterable[str]] = None) -> Dict[str, ProviderClient]:
    """按配置顺序创建所有启用的 Provider，返回 name -> client。"""

    cfg = cfg if cfg is not None else settings
    if names is None:
        raw = getattr(cfg, "enabled_providers", None) or ",".join(_CLIENTS)
        names = [n.strip() for n in raw.split(",") if n.strip()]
    providers: Dict[str, ProviderClient] = {}
    for name in names:
        client = create_provider(name, cfg)
        providers[client.name] = client
    return providers

"""Provider 与模型配置。

集中维护每个 Provider 的默认端点、模型 ID、凭证所在的配置项与默认温度。
Settings 中的同名覆盖项（如 openai_base_url / openai_model）优先于这里的默认值。

- name: 结果信封中的键（如 "chatgpt"）。
- label: 面向用户的错误信息中使用的名称（如 "OpenAI"）。
- setting_prefix: Settings 中相关字段的前缀，凭证为 `<prefix>_api_key`。
"""

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    label: str
    base_url: str
    model: str
    setting_prefix: str
    key_env: str
    default_temperature: float = 0.7

    @property
    def key_setting(self) -> str:
        return f"{self.setting_prefix}_api_key"


DEEPSEEK_CONFIG = ProviderConfig(
    name="deepseek",
    label="DeepSeek",
    base_url="https://api.deepseek.com/v1",
    model="deepseek-chat",
    setting_prefix="deepseek",
    key_env="DEEPSEEK_API_KEY",
)

# Gemini 没有 Bearer 头认证，凭证通过 URL 的 key 参数传递
GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    label="Gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    model="gemini-1.5-flash",
    setting_prefix="gemini",
    key_env="GEMINI_API_KEY",
)

OPENAI_CONFIG = ProviderConfig(
    name="chatgpt",
    label="OpenAI",
    base_url="https://api.openai.com/v1",
    model="gpt-4o-mini",
    setting_prefix="openai",
    key_env="OPENAI_API_KEY",
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "deepseek": DEEPSEEK_CONFIG,
    "gemini": GEMINI_CONFIG,
    "chatgpt": OPENAI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")

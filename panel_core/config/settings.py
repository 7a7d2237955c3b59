"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。

凭证（各 Provider 的 API Key）只在进程启动时读取一次，之后作为只读配置
显式注入到各个 Provider 适配器中，核心逻辑不直接读取环境变量。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("PANEL_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


# 与 providers.registry.PROVIDER_REGISTRY 的键保持一致
KNOWN_PROVIDERS = ("deepseek", "gemini", "chatgpt")


class PanelSettings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    app_name: str = Field(default="LLM Panel", description="服务名称，用于健康检查与日志")

    # ---- Provider 凭证 ----
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI (ChatGPT) API 密钥")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API 密钥")
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API 密钥（通过 URL 传递）")

    # ---- Provider 端点与模型（为空时使用 registry 默认值）----
    openai_base_url: Optional[str] = Field(default=None, description="OpenAI API 基础URL")
    deepseek_base_url: Optional[str] = Field(default=None, description="DeepSeek API 基础URL")
    gemini_base_url: Optional[str] = Field(default=None, description="Gemini API 基础URL")
    openai_model: Optional[str] = Field(default=None, description="覆盖 OpenAI 模型 ID")
    deepseek_model: Optional[str] = Field(default=None, description="覆盖 DeepSeek 模型 ID")
    gemini_model: Optional[str] = Field(default=None, description="覆盖 Gemini 模型 ID")

    enabled_providers: str = Field(
        default="deepseek,gemini,chatgpt",
        description="参与并发分发的 Provider 名称，逗号分隔，顺序即结果顺序",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="生成温度")
    http_timeout: float = Field(default=30.0, ge=0.1, description="单个 Provider 调用的超时时间（秒）")

    # ---- 策略提示词 ----
    base_policy: Optional[str] = Field(
        default=None,
        description="覆盖内置的基础策略提示词；为空时使用 prompts/base_policy.md",
    )

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_level: str = Field(default="INFO", description="日志级别")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_api_key", "deepseek_api_key", "gemini_api_key", "base_policy")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        # `OPENAI_API_KEY=` 与未设置等价
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("enabled_providers")
    @classmethod
    def normalize_provider_list(cls, v: str) -> str:
        names = [n.strip().lower() for n in v.split(",") if n.strip()]
        unknown = [n for n in names if n not in KNOWN_PROVIDERS]
        if unknown:
            raise ValueError(
                f"unknown provider(s) {', '.join(unknown)}; expected any of {', '.join(KNOWN_PROVIDERS)}"
            )
        return ",".join(names)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = PanelSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = type(settings)

"""对外 API 服务模块。

提供简化的函数接口供 HTTP 层或其他上层应用调用。
"""

from typing import Any, Dict, Mapping, Optional

from panel_core.config.settings import settings
from panel_core.dispatch import dispatch_all
from panel_core.domain.exceptions import ValidationError
from panel_core.domain.models import envelope_to_dict
from panel_core.infrastructure.logging.logger import logger
from panel_core.providers.base import ProviderClient
from panel_core.providers.registry import get_provider_config


async def ask_all(
    body: Any,
    providers: Optional[Mapping[str, ProviderClient]] = None,
    cfg=None,
) -> Dict[str, Dict[str, Any]]:
    """处理一次 /api/ask 请求体。

    Args:
        body: 已解析的 JSON，形如 {"conversation": [...], "extraSystemPrompt": "..."}
        providers: name -> ProviderClient，为空时按配置创建。
        cfg: Settings 对象。

    Returns:
        {provider_name: {"ok": True, "text": ...} | {"ok": False, "error": ...}}

    Raises:
        ValidationError: 请求体不合法，在联系任何 Provider 之前抛出。
    """

    if not isinstance(body, dict):
        raise ValidationError(code="INVALID_INPUT", message="Request body must be a JSON object.")
    if "conversation" not in body or body["conversation"] is None:
        raise ValidationError(code="INVALID_INPUT", message="conversation is required.")
    extra = body.get("extraSystemPrompt")
    if extra is not None and not isinstance(extra, str):
        raise ValidationError(code="INVALID_INPUT", message="extraSystemPrompt must be a string.")

    try:
        envelope = await dispatch_all(body["conversation"], extra, providers=providers, cfg=cfg)
    except ValidationError as e:
        logger.info(f"Rejected request: {e.message}", extra={"extra": {"code": e.code}})
        raise
    return envelope_to_dict(envelope)


def provider_status(providers: Mapping[str, ProviderClient], cfg=None) -> Dict[str, Dict[str, Any]]:
    """列出已启用 Provider 的配置状态（不暴露凭证本身）。"""

    cfg = cfg if cfg is not None else settings
    status: Dict[str, Dict[str, Any]] = {}
    for name in providers:
        provider_cfg = get_provider_config(name)
        prefix = provider_cfg.setting_prefix
        status[name] = {
            "configured": bool(getattr(cfg, provider_cfg.key_setting, None)),
            "model": getattr(cfg, f"{prefix}_model", None) or provider_cfg.model,
        }
    return status

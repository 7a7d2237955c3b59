"""HTTP 入口（FastAPI）。

- POST /api/ask: 把对话并发发送给所有 Provider，返回按 Provider 名称组织的结果。
  部分或全部 Provider 失败时仍返回 200，失败写在各自的结果里。
- GET /healthz: 服务与 Provider 配置状态。

启动：uvicorn panel_core.api.server:app
"""

from typing import Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from panel_core.api import service
from panel_core.config.settings import settings
from panel_core.domain.exceptions import BusinessError, ValidationError
from panel_core.infrastructure.logging.logger import logger
from panel_core.providers import create_providers
from panel_core.providers.base import ProviderClient


def create_app(cfg=None, providers: Optional[Mapping[str, ProviderClient]] = None) -> FastAPI:
    cfg = cfg if cfg is not None else settings
    if providers is None:
        providers = create_providers(cfg)

    app = FastAPI(title=getattr(cfg, "app_name", "LLM Panel"))
    _register_handlers(app)

    @app.post("/api/ask")
    async def ask(request: Request):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError(code="INVALID_INPUT", message="Request body must be valid JSON.")
        return await service.ask_all(body, providers=providers, cfg=cfg)

    @app.get("/healthz")
    def healthz():
        return {
            "ok": True,
            "app": getattr(cfg, "app_name", "LLM Panel"),
            "providers": service.provider_status(providers, cfg),
        }

    return app


def _register_handlers(app: FastAPI) -> None:
    @app.exception_handler(BusinessError)
    async def handle_business_error(request: Request, exc: BusinessError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.http_status,
            content={"ok": False, "error": {"code": exc.code, "message": exc.message}},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error: {exc}", exc_info=exc, extra={"extra": {"path": request.url.path}})
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": {"code": "internal_error", "message": "Internal server error."}},
        )


app = create_app()

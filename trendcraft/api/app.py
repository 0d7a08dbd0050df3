"""
FastAPI 应用创建和路由定义模块

本模块是 TrendCraft 的 HTTP 层入口，负责创建 FastAPI 应用、注册路由，
并把 TrendCraftService 容器挂到 app.state 上供路由通过依赖注入获取。

API 路由:
    POST /api/generate/content   - 生成标题/描述/标签/脚本
    POST /api/generate/trends    - 趋势分析
    POST /api/generate/enhance   - 内容优化
    POST /api/generate/ideas     - 视频创意
    POST /api/generate/model     - 模型推荐
    GET  /api/trending           - 活跃趋势列表 (?platform=&trend_type=)
    GET  /api/trending/{id}      - 单条趋势
    GET  /health                 - 健康检查
    GET  /                       - 服务信息

调用方身份:
    生成接口从请求头 X-User-Id 读取调用方 ID，缺失视为未认证。

错误映射:
    ┌──────────────────────────────┬────────┐
    │ 错误                          │ HTTP   │
    ├──────────────────────────────┼────────┤
    │ validation                   │ 422    │
    │ configuration (未认证)        │ 401    │
    │ configuration (凭证缺失等)    │ 503    │
    │ network / remote_api         │ 502    │
    └──────────────────────────────┴────────┘
    失败响应体: {"status": "failed", "kind": ..., "error": {"type", "message", "field"}}

使用方式:
    # 通过 CLI
    python cli.py serve --config config.yaml --port 8080

    # 程序化使用
    from trendcraft.api.app import create_app, run_server
    app = create_app("config.yaml")
    run_server("config.yaml", port=8080)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.settings import get_nested, load_settings
from ..core.orchestrator import GenerationOutcome
from ..models.errors import (
    AuthenticationError,
    ConfigurationError,
    TrendCraftError,
    ValidationError,
)
from ..models.task import GenerationTask
from ..service import TrendCraftService
from .schemas import (
    ContentRequest,
    EnhanceRequest,
    ErrorBody,
    GenerationFailure,
    GenerationSuccess,
    HealthResponse,
    IdeasRequest,
    ModelRequest,
    TrendAnalysisRequest,
    TrendingResponse,
    TrendItem,
)


def status_code_for(error: TrendCraftError) -> int:
    """把分类错误映射为 HTTP 状态码"""
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, ConfigurationError):
        return 503
    return 502


def failure_response(error: TrendCraftError, kind: str | None = None) -> JSONResponse:
    body = GenerationFailure(
        kind=kind,
        error=ErrorBody(
            type=str(error.error_type),
            message=error.message,
            field=getattr(error, "field", None),
        ),
    )
    return JSONResponse(status_code=status_code_for(error), content=body.model_dump())


def get_service(request: Request) -> TrendCraftService:
    """从 app.state 获取服务容器"""
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期: 记录启动与关闭"""
    service: TrendCraftService = app.state.service
    logging.info(f"TrendCraft API 启动 | 健康状态: {service.get_health_status()['status']}")
    yield
    logging.info("TrendCraft API 已关闭")


def create_app(
    config_path: str | Path | None = None,
    service: TrendCraftService | None = None,
) -> FastAPI:
    """
    创建并配置 FastAPI 应用实例

    Args:
        config_path: 配置文件路径，None 时使用默认配置
        service: 预先构建好的服务容器 (测试时注入)，提供时忽略 config_path

    Returns:
        配置完成的 FastAPI 应用实例
    """
    if service is None:
        service = TrendCraftService.from_path(config_path)

    app = FastAPI(
        title="TrendCraft API",
        description="短视频内容生成与趋势查询接口",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service

    _register_handlers(app)
    _register_routes(app)
    return app


def _register_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """请求体类型错误也以统一的 validation 失败结构返回"""
        field = None
        errors = exc.errors()
        if errors:
            loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
            field = loc[-1] if loc else None
        error = ValidationError(field or "body", f"请求格式错误: {errors[0]['msg'] if errors else exc}")
        return failure_response(error)


async def _run_generation(
    service: TrendCraftService, task: GenerationTask, user_id: str | None
):
    outcome: GenerationOutcome = await service.generate(task, user_id=user_id)
    if not outcome.succeeded:
        return failure_response(outcome.error, str(outcome.kind))
    return GenerationSuccess(
        kind=str(outcome.kind),
        result=outcome.result.to_dict(),
        degraded=outcome.degraded,
        parse_source=outcome.parse_source,
    )


def _register_routes(app: FastAPI) -> None:
    """注册所有 API 路由"""

    @app.post("/api/generate/content", response_model=None)
    async def generate_content(
        body: ContentRequest,
        service: TrendCraftService = Depends(get_service),
        x_user_id: str | None = Header(default=None),
    ):
        return await _run_generation(service, body.to_task(), x_user_id)

    @app.post("/api/generate/trends", response_model=None)
    async def generate_trends(
        body: TrendAnalysisRequest,
        service: TrendCraftService = Depends(get_service),
        x_user_id: str | None = Header(default=None),
    ):
        return await _run_generation(service, body.to_task(), x_user_id)

    @app.post("/api/generate/enhance", response_model=None)
    async def generate_enhance(
        body: EnhanceRequest,
        service: TrendCraftService = Depends(get_service),
        x_user_id: str | None = Header(default=None),
    ):
        return await _run_generation(service, body.to_task(), x_user_id)

    @app.post("/api/generate/ideas", response_model=None)
    async def generate_ideas(
        body: IdeasRequest,
        service: TrendCraftService = Depends(get_service),
        x_user_id: str | None = Header(default=None),
    ):
        return await _run_generation(service, body.to_task(), x_user_id)

    @app.post("/api/generate/model", response_model=None)
    async def generate_model(
        body: ModelRequest,
        service: TrendCraftService = Depends(get_service),
        x_user_id: str | None = Header(default=None),
    ):
        return await _run_generation(service, body.to_task(), x_user_id)

    @app.get("/api/trending", response_model=TrendingResponse)
    async def list_trending(
        platform: str | None = None,
        trend_type: str | None = None,
        service: TrendCraftService = Depends(get_service),
    ) -> TrendingResponse:
        """活跃趋势列表，存储不可用时返回回退数据，永不报错"""
        result = await service.query_trending(platform, trend_type)
        return TrendingResponse(
            trends=[TrendItem(**record.to_dict()) for record in result.records],
            total=len(result.records),
            source=result.source,
        )

    @app.get("/api/trending/{trend_id}", response_model=TrendItem)
    async def get_trend(
        trend_id: str,
        service: TrendCraftService = Depends(get_service),
    ) -> TrendItem:
        record = await service.fetch_trend(trend_id)
        if record is None:
            raise HTTPException(status_code=404, detail=f"Trend '{trend_id}' not found")
        return TrendItem(**record.to_dict())

    @app.get("/health", response_model=HealthResponse)
    async def health_check(service: TrendCraftService = Depends(get_service)) -> HealthResponse:
        health = service.get_health_status()
        return HealthResponse(version=__version__, **health)

    @app.get("/")
    async def root():
        return {
            "name": "TrendCraft API",
            "version": __version__,
            "status": "running",
        }


def run_server(
    config_path: str | Path | None = None,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """
    启动 uvicorn 服务器

    Args:
        config_path: 配置文件路径
        host: 监听地址，None 时读取 server.host
        port: 监听端口，None 时读取 server.port
    """
    config = load_settings(config_path)
    service = TrendCraftService(config)
    app = create_app(service=service)

    host = host or get_nested(config, "server", "host", default="0.0.0.0")
    port = port or int(get_nested(config, "server", "port", default=8080))
    log_level = str(get_nested(config, "global", "log", "level", default="info")).lower()

    logging.info(f"TrendCraft API 监听 {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)


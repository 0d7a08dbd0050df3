"""
TrendCraft 服务容器

在进程启动时根据配置一次性构建所有组件，并以显式依赖的方式
提供给 HTTP 接口和 CLI 使用，不存在模块级全局实例。

组件装配:
    ┌──────────────────────────────────────────────────────────────┐
    │ TrendCraftService                                             │
    │   config        完整配置 (DEFAULT_CONFIG + YAML)              │
    │   registry      RequestTemplateRegistry  (models 节)          │
    │   client        GatewayClient            (gateway 节 + 凭证)  │
    │   parser        StructuredOutputParser                        │
    │   orchestrator  GenerationOrchestrator   (generation 节)      │
    │   trending      ResilientQueryService    (trending 节)        │
    └──────────────────────────────────────────────────────────────┘

凭证策略:
    - 网关凭证缺失: 服务照常构建，每次生成在网络请求前返回 CONFIGURATION 错误
    - 存储凭证缺失: create_trend_store 抛出 ConfigurationError，此处记录日志后
      使用无存储的 ResilientQueryService，趋势查询始终返回回退数据
    - trending.limit 小于 1: ConfigurationError 直接抛出，服务构建失败

使用示例:
    service = TrendCraftService.from_path("config.yaml")
    outcome = await service.generate(ContentGenerationTask(prompt="..."), user_id="u1")
    trends = await service.fetch_trending(platform="tiktok")
"""

import logging
import time
from pathlib import Path
from typing import Any

from .config.settings import get_nested, load_settings, resolve_secret
from .core.clients.base import BaseGatewayClient
from .core.clients.gateway_client import GatewayClient
from .core.content.parser import StructuredOutputParser
from .core.orchestrator import GenerationOrchestrator, GenerationOutcome
from .core.templates import RequestTemplateRegistry
from .data.base import BaseTrendStore
from .data.factory import create_trend_store
from .data.trending import ResilientQueryService, TrendQueryResult
from .models.content import TrendRecord
from .models.errors import ConfigurationError
from .models.task import GenerationTask


class TrendCraftService:
    """
    TrendCraft 服务容器

    Attributes:
        config: 完整配置
        registry: 请求模板注册表
        client: 网关客户端
        parser: 结构化输出解析器
        orchestrator: 生成编排器
        store: 趋势存储 (可能为 None)
        trending: 趋势查询服务
        start_time: 构建时间戳
    """

    def __init__(
        self,
        config: dict[str, Any],
        client: BaseGatewayClient | None = None,
    ):
        """
        Args:
            config: 已与 DEFAULT_CONFIG 合并的完整配置
            client: 替换默认 GatewayClient (测试时注入假客户端)
        """
        self.start_time = time.time()
        self.config = config

        self._init_generation(client)
        self._init_trending()

        logging.info("TrendCraftService 初始化完成")

    @classmethod
    def from_path(cls, config_path: str | Path | None = None) -> "TrendCraftService":
        """从配置文件构建服务，None 时仅使用默认配置"""
        return cls(load_settings(config_path))

    def _init_generation(self, client: BaseGatewayClient | None) -> None:
        self.registry = RequestTemplateRegistry.from_config(self.config)

        if client is None:
            gateway_config = self.config.get("gateway") or {}
            api_key = resolve_secret(gateway_config, "api_key")
            if not api_key:
                logging.warning(
                    f"网关 API Key 未配置 (环境变量 {gateway_config.get('api_key_env')})，"
                    f"生成请求将返回配置错误"
                )
            client = GatewayClient.from_config(gateway_config, api_key)
        self.client = client

        self.parser = StructuredOutputParser()
        self.orchestrator = GenerationOrchestrator(
            self.registry,
            self.client,
            self.parser,
            require_authentication=bool(
                get_nested(self.config, "generation", "require_authentication", default=True)
            ),
        )

    def _init_trending(self) -> None:
        store: BaseTrendStore | None
        try:
            store = create_trend_store(self.config)
        except ConfigurationError as e:
            logging.warning(f"趋势存储不可用，将始终使用回退数据: {e}")
            store = None

        self.store = store
        self.trending = ResilientQueryService(
            store,
            limit=get_nested(self.config, "trending", "limit"),
        )

    @property
    def gateway_configured(self) -> bool:
        return bool(getattr(self.client, "api_key", True))

    async def generate(self, task: GenerationTask, user_id: str | None = None) -> GenerationOutcome:
        return await self.orchestrator.generate(task, user_id=user_id)

    async def query_trending(
        self, platform: str | None = None, trend_type: str | None = None
    ) -> TrendQueryResult:
        return await self.trending.query_trending(platform, trend_type)

    async def fetch_trending(
        self, platform: str | None = None, trend_type: str | None = None
    ) -> list[TrendRecord]:
        return await self.trending.fetch_trending(platform, trend_type)

    async def fetch_trend(self, trend_id: str) -> TrendRecord | None:
        return await self.trending.fetch_trend(trend_id)

    def get_uptime(self) -> float:
        """获取服务运行时间"""
        return time.time() - self.start_time

    def get_health_status(self) -> dict[str, Any]:
        """
        获取健康状态

        状态定义:
            - healthy: 网关凭证与趋势存储均已配置
            - degraded: 缺少其中之一 (生成会失败或趋势只返回回退数据)
        """
        store_type = type(self.store).__name__ if self.store else "none"
        status = "healthy" if self.gateway_configured and self.store else "degraded"
        return {
            "status": status,
            "gateway_configured": self.gateway_configured,
            "store": store_type,
            "uptime": self.get_uptime(),
        }

"""
REST 趋势记录存储 (PostgREST / Supabase 兼容)

通过 aiohttp 访问 PostgREST 风格的 REST 接口查询趋势表。

API 端点:
    GET {url}/rest/v1/{table}?select=*&is_active=eq.true&platform=eq.tiktok
        &order=growth_rate.desc&limit=10

请求头:
    apikey: <key>
    Authorization: Bearer <key>
    Accept: application/json

错误处理:
    - 网络错误 / 超时 → DataSourceError
    - HTTP 非 200 (含 401/403 权限错误) → DataSourceError
    - 响应体不是 JSON 数组 → DataSourceError

会话:
    每次查询创建并关闭自己的 ClientSession。
"""

import asyncio
import json
import logging
from typing import Any, Callable

import aiohttp

from .base import BaseTrendStore
from ..models.errors import DataSourceError


def _format_value(value: Any) -> str:
    """PostgREST 等值过滤值格式"""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class RestTrendStore(BaseTrendStore):
    """
    PostgREST 风格的趋势记录存储

    Attributes:
        base_url: 服务根地址 (如 https://xyz.supabase.co)
        api_key: 访问密钥
        endpoint: 完整的表端点 URL
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "trending_data",
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        super().__init__(table)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.endpoint = f"{self.base_url}/rest/v1/{table}"
        self._session_factory = session_factory

    def build_params(
        self,
        filters: dict[str, Any],
        order_by: str | None,
        descending: bool,
        limit: int | None,
    ) -> list[tuple[str, str]]:
        """构建查询参数 (保持顺序，便于日志与测试)"""
        params: list[tuple[str, str]] = [("select", "*")]
        for column, value in filters.items():
            params.append((column, f"eq.{_format_value(value)}"))
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(limit)))
        return params

    async def select(
        self,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self.check_columns(filters, order_by)
        params = self.build_params(filters, order_by, descending, limit)
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

        logging.debug(f"查询 REST 存储: {self.endpoint} {params}")
        try:
            async with self._session_factory() as session:
                async with session.get(self.endpoint, params=params, headers=headers) as resp:
                    status = resp.status
                    body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DataSourceError(f"REST 存储网络错误: {e}") from e

        if status != 200:
            raise DataSourceError(
                f"REST 存储返回 HTTP {status}",
                {"body": body[:500], "table": self.table},
            )

        try:
            rows = json.loads(body)
        except json.JSONDecodeError as e:
            raise DataSourceError(f"REST 存储响应不是有效 JSON: {e}") from e

        if not isinstance(rows, list):
            raise DataSourceError(f"REST 存储响应格式错误: 期望数组，实际为 {type(rows).__name__}")
        return rows

"""
趋势记录存储工厂模块

根据配置中的 trending.store.type 创建对应的存储实例。

支持的存储类型:
    - rest: PostgREST / Supabase 风格 HTTP 接口
        - 基于 aiohttp，每次查询独立会话
        - 需要 url 与 key (或 url_env / key_env 指定的环境变量)

    - sqlite: 本地 SQLite 数据库
        - Python 标准库，无需额外安装
        - 需要 db_path

    - none: 不配置存储
        - 返回 None，查询服务直接使用内置回退表

函数清单:
    - create_trend_store(config) -> BaseTrendStore | None
        输入: 完整配置字典
        异常: ConfigurationError (类型不支持或凭证缺失)

配置示例:
    trending:
      store:
        type: rest
        table: trending_data
        url_env: SUPABASE_URL
        key_env: SUPABASE_ANON_KEY
"""

import logging
from typing import Any

from .base import BaseTrendStore
from .rest import RestTrendStore
from .sqlite import SQLiteTrendStore
from ..config.settings import get_nested, resolve_secret
from ..models.errors import ConfigurationError


def _normalize_nonempty_str(value: Any) -> str | None:
    """规范化配置值为非空字符串，None/bool/空白 -> None"""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text if text else None


def create_trend_store(config: dict[str, Any]) -> BaseTrendStore | None:
    """
    根据配置创建趋势记录存储

    Args:
        config: 完整配置字典，需包含 trending.store 配置节

    Returns:
        BaseTrendStore 实例；type 为 none 时返回 None

    Raises:
        ConfigurationError: 存储类型不支持或必需配置缺失
    """
    store_config = get_nested(config, "trending", "store", default={}) or {}
    store_type = str(store_config.get("type") or "none").lower()
    table = _normalize_nonempty_str(store_config.get("table")) or "trending_data"

    logging.info(f"正在创建趋势记录存储，类型: {store_type}")

    if store_type == "none":
        return None

    if store_type == "rest":
        return _create_rest_store(store_config, table)

    if store_type == "sqlite":
        return _create_sqlite_store(store_config, table)

    raise ConfigurationError(
        f"不支持的存储类型: {store_type}",
        {"supported": ["rest", "sqlite", "none"]},
    )


def _create_rest_store(store_config: dict[str, Any], table: str) -> RestTrendStore:
    url = resolve_secret(store_config, "url")
    key = resolve_secret(store_config, "key")

    missing = []
    if not url:
        missing.append(f"url (或环境变量 {store_config.get('url_env')})")
    if not key:
        missing.append(f"key (或环境变量 {store_config.get('key_env')})")
    if missing:
        raise ConfigurationError(f"REST 存储配置缺失: {', '.join(missing)}")

    logging.info(f"REST 存储: {url} / {table}")
    return RestTrendStore(url, key, table=table)


def _create_sqlite_store(store_config: dict[str, Any], table: str) -> SQLiteTrendStore:
    db_path = _normalize_nonempty_str(store_config.get("db_path"))
    if not db_path:
        raise ConfigurationError("SQLite 存储配置缺失: db_path")

    logging.info(f"SQLite 存储: {db_path} / {table}")
    return SQLiteTrendStore(db_path, table=table)

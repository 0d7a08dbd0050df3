"""趋势数据模块"""

from .base import BaseTrendStore
from .factory import create_trend_store
from .rest import RestTrendStore
from .sqlite import SQLiteTrendStore, initialize_database
from .trending import (
    FALLBACK_TRENDS,
    ResilientQueryService,
    TrendQueryResult,
    apply_view,
)

__all__ = [
    "BaseTrendStore",
    "create_trend_store",
    "RestTrendStore",
    "SQLiteTrendStore",
    "initialize_database",
    "FALLBACK_TRENDS",
    "ResilientQueryService",
    "TrendQueryResult",
    "apply_view",
]

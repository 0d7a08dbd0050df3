"""
趋势查询服务 (带回退)

ResilientQueryService 对外提供永不失败的趋势查询:
先尝试实时存储，任何失败都替换为内置的四条回退记录。

查询流程:
    ┌──────────────┐  有存储   ┌──────────────┐  成功   ┌──────────────┐
    │ fetch_*()    │ ────────→ │ store.select │ ──────→ │ TrendRecord  │
    └──────────────┘           └──────────────┘         │ 映射 + 视图  │
           │ 无存储                   │ 任何异常        └──────────────┘
           ↓                         ↓                        │ 映射失败
    ┌──────────────────────────────────────────┐              │
    │ FALLBACK_TRENDS + 同一套过滤/排序/上限   │ ←────────────┘
    └──────────────────────────────────────────┘

视图规则 (两条路径完全一致):
    - 只保留 is_active 为真的记录
    - platform / trend_type 等值过滤 (为空表示不过滤)
    - 按 growth_rate_percent 降序
    - 截断到 limit 条 (None 表示不限制)

调用方永远拿不到错误，只能从日志或 TrendQueryResult.source 得知是否回退。
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Literal

from .base import BaseTrendStore
from ..models.content import TrendRecord
from ..models.errors import ConfigurationError


TrendSource = Literal["live", "fallback"]

# 回退记录统一使用固定时间戳，保证同样的输入得到同样的输出
FALLBACK_DETECTED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

FALLBACK_TRENDS: tuple[TrendRecord, ...] = (
    TrendRecord(
        id="1",
        platform="tiktok",
        trend_type="sound",
        title="Viral Dance Beat #1",
        usage_count=2_300_000,
        growth_rate_percent=340.0,
        is_active=True,
        detected_at=FALLBACK_DETECTED_AT,
    ),
    TrendRecord(
        id="2",
        platform="instagram",
        trend_type="hashtag",
        title="#MomentVibes",
        usage_count=890_000,
        growth_rate_percent=280.0,
        is_active=True,
        detected_at=FALLBACK_DETECTED_AT,
    ),
    TrendRecord(
        id="3",
        platform="youtube",
        trend_type="effect",
        title="Sunset Gradient",
        usage_count=1_800_000,
        growth_rate_percent=220.0,
        is_active=True,
        detected_at=FALLBACK_DETECTED_AT,
    ),
    TrendRecord(
        id="4",
        platform="tiktok",
        trend_type="sound",
        title="Chill Lofi Remix",
        usage_count=1_100_000,
        growth_rate_percent=195.0,
        is_active=True,
        detected_at=FALLBACK_DETECTED_AT,
    ),
)


@dataclass(frozen=True)
class TrendQueryResult:
    """趋势查询结果，source 标记数据来自实时存储还是回退表"""

    records: tuple[TrendRecord, ...]
    source: TrendSource

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


def apply_view(
    records: Iterable[TrendRecord],
    platform: str | None = None,
    trend_type: str | None = None,
    limit: int | None = None,
) -> tuple[TrendRecord, ...]:
    """对记录应用活跃过滤、等值过滤、降序排序与数量上限"""
    selected = [
        r
        for r in records
        if r.is_active
        and (not platform or r.platform == platform)
        and (not trend_type or r.trend_type == trend_type)
    ]
    selected.sort(key=lambda r: r.growth_rate_percent, reverse=True)
    if limit is not None:
        selected = selected[:limit]
    return tuple(selected)


class ResilientQueryService:
    """
    带回退的趋势查询服务

    Attributes:
        store: 实时存储，None 表示始终使用回退表
        limit: 单次查询最大记录数 (不小于 1，None 表示不限)
        fallback: 回退记录表

    Raises:
        ConfigurationError: limit 不是正整数
    """

    def __init__(
        self,
        store: BaseTrendStore | None,
        limit: int | None = 10,
        fallback: tuple[TrendRecord, ...] = FALLBACK_TRENDS,
    ):
        if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
            raise ConfigurationError(f"trending.limit 必须是不小于 1 的整数: {limit!r}")

        self.store = store
        self.limit = limit
        self.fallback = fallback

    async def query_trending(
        self, platform: str | None = None, trend_type: str | None = None
    ) -> TrendQueryResult:
        """
        查询活跃趋势并标记数据来源

        Args:
            platform: 平台过滤，None 或空字符串表示全部
            trend_type: 类型过滤，None 或空字符串表示全部
        """
        platform = platform or None
        trend_type = trend_type or None

        if self.store is None:
            logging.debug("未配置趋势存储，使用回退数据")
            return self._fallback_result(platform, trend_type)

        filters: dict[str, object] = {"is_active": True}
        if platform:
            filters["platform"] = platform
        if trend_type:
            filters["trend_type"] = trend_type

        try:
            rows = await self.store.select(
                filters, order_by="growth_rate", descending=True, limit=self.limit
            )
            records = [TrendRecord.from_row(row) for row in rows]
        except Exception as e:
            logging.warning(f"趋势查询失败，使用回退数据: {type(e).__name__}: {e}")
            return self._fallback_result(platform, trend_type)

        view = apply_view(records, platform, trend_type, self.limit)
        logging.info(f"趋势查询完成 | 平台: {platform or '全部'}, 类型: {trend_type or '全部'}, 记录: {len(view)}")
        return TrendQueryResult(records=view, source="live")

    async def fetch_trending(
        self, platform: str | None = None, trend_type: str | None = None
    ) -> list[TrendRecord]:
        """查询活跃趋势，永不失败"""
        result = await self.query_trending(platform, trend_type)
        return list(result.records)

    async def fetch_trend(self, trend_id: str) -> TrendRecord | None:
        """
        按 ID 查询单条趋势

        失败时在回退表中查找同 ID 记录；实时存储中不存在则返回 None。
        """
        trend_id = str(trend_id)

        if self.store is None:
            return self._fallback_lookup(trend_id)

        try:
            rows = await self.store.select({"id": trend_id}, limit=1)
            records = [TrendRecord.from_row(row) for row in rows]
        except Exception as e:
            logging.warning(f"趋势记录 {trend_id} 查询失败，使用回退数据: {type(e).__name__}: {e}")
            return self._fallback_lookup(trend_id)

        return records[0] if records else None

    def _fallback_result(self, platform: str | None, trend_type: str | None) -> TrendQueryResult:
        return TrendQueryResult(
            records=apply_view(self.fallback, platform, trend_type, self.limit),
            source="fallback",
        )

    def _fallback_lookup(self, trend_id: str) -> TrendRecord | None:
        for record in self.fallback:
            if record.id == trend_id:
                return record
        return None

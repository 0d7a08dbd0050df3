"""
趋势查询服务测试

被测模块: trendcraft/data/trending.py (ResilientQueryService)

测试「永不失败」的趋势查询，包括：
- 无存储时返回四条回退记录
- 存储异常 / 畸形行时回退
- 过滤、活跃筛选、降序与数量上限在两条路径上一致
- 单条记录查询

测试类/函数清单:
    TestFallbackTable                        回退表测试
        test_no_store_returns_fallback       验证无存储时返回四条记录且按增长率降序
        test_fallback_platform_filter        验证回退路径的平台过滤
        test_fallback_type_filter            验证回退路径的类型过滤
    TestLiveQuery                            实时查询测试
        test_live_rows                       验证实时行被映射并按增长率降序
        test_live_filters_passed_to_store    验证传给存储的过滤条件、排序与上限
        test_live_filter_consistency         验证存储忽略过滤条件时结果仍被过滤
        test_inactive_rows_dropped           验证非活跃记录被移除
        test_empty_live_result               验证实时空结果不触发回退
    TestFailureAbsorption                    失败吸收测试
        test_store_error_falls_back          验证存储异常时回退并保留过滤
        test_malformed_row_falls_back        验证任意一行畸形时整体回退
        test_unexpected_exception            验证非 DataSourceError 异常同样被吸收
    TestFetchTrend                           单条查询测试
        test_fetch_from_store                验证实时存储命中
        test_fetch_missing_returns_none      验证实时存储未命中返回 None
        test_fetch_falls_back                验证存储失败时在回退表中查找
    TestLimit                                数量上限测试
        test_limit_applies_to_fallback       验证上限同样作用于回退路径
        test_invalid_limit_rejected          验证小于 1 或非整数的上限抛出 ConfigurationError
        test_no_limit_returns_all_fallback   验证 limit=None 时回退路径返回全部记录
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from trendcraft.data.base import BaseTrendStore
from trendcraft.data.trending import FALLBACK_TRENDS, ResilientQueryService
from trendcraft.models.errors import ConfigurationError, DataSourceError


def make_store(rows=None, error=None):
    """构造假存储，select 返回 rows 或抛出 error"""
    store = MagicMock(spec=BaseTrendStore)
    if error is not None:
        store.select = AsyncMock(side_effect=error)
    else:
        store.select = AsyncMock(return_value=rows or [])
    return store


class TestFallbackTable:
    """回退表测试"""

    @pytest.mark.asyncio
    async def test_no_store_returns_fallback(self):
        service = ResilientQueryService(None)

        records = await service.fetch_trending()

        assert len(records) == 4
        rates = [r.growth_rate_percent for r in records]
        assert rates == sorted(rates, reverse=True)
        assert rates == [340.0, 280.0, 220.0, 195.0]
        assert {r.platform for r in records} <= {"tiktok", "instagram", "youtube"}
        assert all(r.is_active for r in records)

    @pytest.mark.asyncio
    async def test_fallback_platform_filter(self):
        service = ResilientQueryService(None)

        records = await service.fetch_trending(platform="tiktok")

        assert [r.title for r in records] == ["Viral Dance Beat #1", "Chill Lofi Remix"]

    @pytest.mark.asyncio
    async def test_fallback_type_filter(self):
        service = ResilientQueryService(None)

        result = await service.query_trending(trend_type="effect")

        assert result.is_fallback
        assert [r.id for r in result.records] == ["3"]


class TestLiveQuery:
    """实时查询测试"""

    @pytest.mark.asyncio
    async def test_live_rows(self, sample_rows):
        service = ResilientQueryService(make_store(list(reversed(sample_rows))))

        result = await service.query_trending()

        assert result.source == "live"
        assert [r.id for r in result.records] == ["a1", "a2", "a3"]

    @pytest.mark.asyncio
    async def test_live_filters_passed_to_store(self, sample_rows):
        store = make_store(sample_rows[:1])
        service = ResilientQueryService(store, limit=5)

        await service.fetch_trending(platform="tiktok", trend_type="sound")

        store.select.assert_awaited_once_with(
            {"is_active": True, "platform": "tiktok", "trend_type": "sound"},
            order_by="growth_rate",
            descending=True,
            limit=5,
        )

    @pytest.mark.asyncio
    async def test_live_filter_consistency(self, sample_rows):
        # 存储忽略了过滤条件，返回全部行
        service = ResilientQueryService(make_store(sample_rows))

        records = await service.fetch_trending(platform="tiktok")

        assert [r.id for r in records] == ["a1", "a3"]
        assert all(r.platform == "tiktok" for r in records)

    @pytest.mark.asyncio
    async def test_inactive_rows_dropped(self, sample_rows):
        rows = [dict(sample_rows[0], is_active=False), sample_rows[1]]
        service = ResilientQueryService(make_store(rows))

        records = await service.fetch_trending()

        assert [r.id for r in records] == ["a2"]

    @pytest.mark.asyncio
    async def test_empty_live_result(self):
        service = ResilientQueryService(make_store([]))

        result = await service.query_trending(platform="instagram")

        assert result.source == "live"
        assert result.records == ()


class TestFailureAbsorption:
    """失败吸收测试"""

    @pytest.mark.asyncio
    async def test_store_error_falls_back(self):
        service = ResilientQueryService(make_store(error=DataSourceError("HTTP 401")))

        result = await service.query_trending(platform="tiktok")

        assert result.is_fallback
        assert [r.growth_rate_percent for r in result.records] == [340.0, 195.0]
        assert all(r.platform == "tiktok" for r in result.records)

    @pytest.mark.asyncio
    async def test_malformed_row_falls_back(self, sample_rows):
        rows = sample_rows + [{"id": "bad", "platform": "tiktok"}]
        service = ResilientQueryService(make_store(rows))

        records = await service.fetch_trending()

        assert [r.id for r in records] == ["1", "2", "3", "4"]

    @pytest.mark.asyncio
    async def test_unexpected_exception(self):
        service = ResilientQueryService(make_store(error=OSError("disk gone")))

        records = await service.fetch_trending()

        assert len(records) == 4


class TestFetchTrend:
    """单条查询测试"""

    @pytest.mark.asyncio
    async def test_fetch_from_store(self, sample_rows):
        store = make_store(sample_rows[1:2])
        service = ResilientQueryService(store)

        record = await service.fetch_trend("a2")

        assert record.title == "Live Glow"
        store.select.assert_awaited_once_with({"id": "a2"}, limit=1)

    @pytest.mark.asyncio
    async def test_fetch_missing_returns_none(self):
        service = ResilientQueryService(make_store([]))

        assert await service.fetch_trend("zzz") is None

    @pytest.mark.asyncio
    async def test_fetch_falls_back(self):
        service = ResilientQueryService(make_store(error=DataSourceError("down")))

        record = await service.fetch_trend("2")

        assert record == FALLBACK_TRENDS[1]
        assert await service.fetch_trend("99") is None


class TestLimit:
    """数量上限测试"""

    @pytest.mark.asyncio
    async def test_limit_applies_to_fallback(self):
        service = ResilientQueryService(None, limit=2)

        records = await service.fetch_trending()

        assert [r.growth_rate_percent for r in records] == [340.0, 280.0]

    @pytest.mark.parametrize("limit", [0, -1, True, "10", 2.5])
    def test_invalid_limit_rejected(self, limit):
        with pytest.raises(ConfigurationError):
            ResilientQueryService(None, limit=limit)

    @pytest.mark.asyncio
    async def test_no_limit_returns_all_fallback(self):
        result = await ResilientQueryService(None, limit=None).query_trending()

        assert len(result.records) == 4

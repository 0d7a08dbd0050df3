"""
趋势记录存储抽象基类

定义外部记录存储的查询接口。存储本身被视为黑盒，只需支持:
    - 按列等值过滤 (platform, trend_type, is_active, id)
    - 按单列排序 (growth_rate 降序)
    - 可选的结果数量上限

所有实现必须把底层失败 (网络、权限、SQL 错误、响应格式错误) 转换为
DataSourceError，由 ResilientQueryService 统一吸收。
"""

from abc import ABC, abstractmethod
from typing import Any

from ..models.errors import DataSourceError


# 允许出现在过滤条件与排序中的列，其余列名一律拒绝
QUERYABLE_COLUMNS = frozenset({
    "id",
    "trend_id",
    "platform",
    "trend_type",
    "is_active",
    "growth_rate",
    "usage_count",
})


class BaseTrendStore(ABC):
    """
    趋势记录存储抽象基类

    Attributes:
        table: 表名 / 集合名
    """

    def __init__(self, table: str = "trending_data"):
        self.table = table

    @abstractmethod
    async def select(
        self,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        查询记录

        Args:
            filters: 等值过滤条件 {列名: 值}
            order_by: 排序列
            descending: 是否降序
            limit: 最大返回数量，None 表示不限制

        Returns:
            原始行列表 [{列名: 值}, ...]

        Raises:
            DataSourceError: 任何查询失败
        """
        pass

    @staticmethod
    def check_columns(filters: dict[str, Any], order_by: str | None) -> None:
        """校验列名白名单"""
        columns = set(filters)
        if order_by:
            columns.add(order_by)
        unknown = columns - QUERYABLE_COLUMNS
        if unknown:
            raise DataSourceError(f"不支持的查询列: {sorted(unknown)}")

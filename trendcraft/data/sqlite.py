"""
SQLite 趋势记录存储

提供本地 SQLite 数据库的趋势表查询，适用于开发测试与离线演示。

特点:
- Python 标准库自带，无需额外安装
- 每次查询使用独立的只读连接 (mode=ro)，文件不存在时不会被意外创建
- 阻塞 I/O 通过 asyncio.to_thread 放到工作线程执行

表结构 (trending_data):
    id TEXT PRIMARY KEY, trend_id TEXT, platform TEXT, trend_type TEXT,
    title TEXT, usage_count INTEGER, growth_rate REAL, is_active INTEGER,
    detected_at TEXT
"""

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .base import BaseTrendStore
from ..models.errors import DataSourceError


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS trending_data (
    id TEXT PRIMARY KEY,
    trend_id TEXT,
    platform TEXT NOT NULL,
    trend_type TEXT NOT NULL,
    title TEXT NOT NULL,
    usage_count INTEGER DEFAULT 0,
    growth_rate REAL DEFAULT 0,
    is_active INTEGER DEFAULT 1,
    detected_at TEXT
)
"""


class SQLiteTrendStore(BaseTrendStore):
    """
    SQLite 趋势记录存储

    Attributes:
        db_path: SQLite 数据库文件路径
    """

    def __init__(self, db_path: str | Path, table: str = "trending_data"):
        super().__init__(table)
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            f"file:{self.db_path.as_posix()}?mode=ro",
            uri=True,
            timeout=30.0,
        )
        conn.row_factory = sqlite3.Row
        return conn

    def build_sql(
        self,
        filters: dict[str, Any],
        order_by: str | None,
        descending: bool,
        limit: int | None,
    ) -> tuple[str, list[Any]]:
        """构建参数化 SQL (列名已经过白名单校验)"""
        sql = f"SELECT * FROM [{self.table}]"
        params: list[Any] = []
        if filters:
            clauses = []
            for column, value in filters.items():
                clauses.append(f"[{column}] = ?")
                params.append(int(value) if isinstance(value, bool) else value)
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            sql += f" ORDER BY [{order_by}] {'DESC' if descending else 'ASC'}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))
        return sql, params

    def _select_sync(self, sql: str, params: list[Any]) -> list[dict[str, Any]]:
        conn = self._connect()
        try:
            cursor = conn.execute(sql, params)
            rows = [dict(row) for row in cursor.fetchall()]
            cursor.close()
            return rows
        finally:
            conn.close()

    async def select(
        self,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self.check_columns(filters, order_by)
        sql, params = self.build_sql(filters, order_by, descending, limit)
        logging.debug(f"查询 SQLite 存储: {sql} {params}")
        try:
            return await asyncio.to_thread(self._select_sync, sql, params)
        except sqlite3.Error as e:
            raise DataSourceError(f"SQLite 查询失败: {e}", {"db_path": str(self.db_path)}) from e


def initialize_database(db_path: str | Path, rows: list[dict[str, Any]] | None = None) -> None:
    """
    创建趋势表并写入初始数据 (开发/测试用)

    Args:
        db_path: 数据库文件路径
        rows: 初始行 [{列名: 值}, ...]
    """
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute(SCHEMA_SQL)
        for row in rows or []:
            columns = list(row)
            placeholders = ", ".join("?" for _ in columns)
            conn.execute(
                f"INSERT OR REPLACE INTO trending_data ({', '.join(columns)}) VALUES ({placeholders})",
                [row[c] for c in columns],
            )
        conn.commit()
    finally:
        conn.close()
    logging.info(f"SQLite 趋势表已初始化: {db_path} ({len(rows or [])} 行)")

"""
趋势存储工厂测试

被测模块: trendcraft/data/factory.py

测试类/函数清单:
    TestCreateTrendStore                     工厂函数测试
        test_none_type                       验证 type=none 返回 None
        test_rest_from_env                   验证 REST 存储从环境变量读取凭证
        test_rest_missing_credentials        验证 REST 凭证缺失抛出 ConfigurationError
        test_sqlite_store                    验证 SQLite 存储使用 db_path
        test_sqlite_missing_path             验证 db_path 为空抛出 ConfigurationError
        test_unknown_type                    验证未知类型抛出 ConfigurationError
"""

import pytest

from trendcraft.data.factory import create_trend_store
from trendcraft.data.rest import RestTrendStore
from trendcraft.data.sqlite import SQLiteTrendStore
from trendcraft.models.errors import ConfigurationError


def store_config(**store):
    return {"trending": {"store": store}}


class TestCreateTrendStore:
    """工厂函数测试"""

    def test_none_type(self):
        assert create_trend_store(store_config(type="none")) is None
        assert create_trend_store({}) is None

    def test_rest_from_env(self, monkeypatch):
        monkeypatch.setenv("TC_STORE_URL", "https://xyz.supabase.co")
        monkeypatch.setenv("TC_STORE_KEY", "anon")

        store = create_trend_store(
            store_config(type="rest", url_env="TC_STORE_URL", key_env="TC_STORE_KEY")
        )

        assert isinstance(store, RestTrendStore)
        assert store.endpoint == "https://xyz.supabase.co/rest/v1/trending_data"
        assert store.api_key == "anon"

    def test_rest_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("TC_STORE_URL", raising=False)
        monkeypatch.delenv("TC_STORE_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            create_trend_store(
                store_config(type="rest", url_env="TC_STORE_URL", key_env="TC_STORE_KEY")
            )

    def test_sqlite_store(self, tmp_path):
        store = create_trend_store(
            store_config(type="SQLite", db_path=str(tmp_path / "t.db"), table="trends")
        )

        assert isinstance(store, SQLiteTrendStore)
        assert store.table == "trends"
        assert store.db_path == tmp_path / "t.db"

    def test_sqlite_missing_path(self):
        with pytest.raises(ConfigurationError):
            create_trend_store(store_config(type="sqlite", db_path="  "))

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError):
            create_trend_store(store_config(type="firebase"))

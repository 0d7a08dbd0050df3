"""
pytest fixtures - 测试共享资源

Fixtures 是 pytest 的核心概念，用于:
1. 提供测试数据
2. 设置/清理测试环境
3. 在多个测试间共享资源
"""

import sys
from pathlib import Path
from typing import Any

import pytest

# 确保可以导入 trendcraft 与 cli 模块
sys.path.insert(0, str(Path(__file__).parent.parent))

from trendcraft.config import DEFAULT_CONFIG, merge_config  # noqa: E402
from trendcraft.core.clients.base import BaseGatewayClient  # noqa: E402


# ==================== 配置 Fixtures ====================


@pytest.fixture
def sample_config() -> dict:
    """提供示例配置字典 (不含任何凭证，存储类型为 none)"""
    return {
        "global": {
            "log": {
                "level": "info",
                "format": "text",
                "output": "console",
            },
        },
        "gateway": {
            "base_url": "https://gateway.test/api/v1",
            "api_key_env": "TRENDCRAFT_TEST_GATEWAY_KEY",
        },
        "models": {
            "creative": "test/creative-model",
        },
        "generation": {
            "require_authentication": True,
        },
        "trending": {
            "limit": 10,
            "store": {
                "type": "none",
            },
        },
    }


@pytest.fixture
def sample_config_file(sample_config, tmp_path) -> Path:
    """创建临时配置文件"""
    import yaml

    config_path = tmp_path / "test_config.yaml"
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, allow_unicode=True)
    return config_path


@pytest.fixture
def merged_config(sample_config) -> dict:
    """与默认配置合并后的完整配置"""
    return merge_config(DEFAULT_CONFIG, sample_config)


# ==================== 网关 Fixtures ====================


class FakeGatewayClient(BaseGatewayClient):
    """
    带调用计数的假网关客户端

    reply 为字符串时原样返回；为异常实例时抛出。
    """

    def __init__(self, reply: Any = ""):
        self.reply = reply
        self.calls: list[tuple[list[dict[str, str]], Any]] = []
        self.api_key = "fake-key"

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def complete(self, messages, profile) -> str:
        self.calls.append((messages, profile))
        if isinstance(self.reply, BaseException):
            raise self.reply
        return self.reply


@pytest.fixture
def fake_gateway():
    """提供默认返回空字符串的假网关客户端"""
    return FakeGatewayClient()


# ==================== 数据 Fixtures ====================


@pytest.fixture
def sample_rows() -> list[dict]:
    """存储返回的原始趋势行 (列名与 trending_data 表一致)"""
    return [
        {
            "id": "a1",
            "platform": "tiktok",
            "trend_type": "sound",
            "title": "Live Beat",
            "usage_count": 500000,
            "growth_rate": 410.5,
            "is_active": True,
            "detected_at": "2024-05-01T12:00:00Z",
        },
        {
            "id": "a2",
            "platform": "youtube",
            "trend_type": "effect",
            "title": "Live Glow",
            "usage_count": 120000,
            "growth_rate": 150,
            "is_active": True,
            "detected_at": "2024-05-02T08:30:00+00:00",
        },
        {
            "id": "a3",
            "platform": "tiktok",
            "trend_type": "hashtag",
            "title": "#LiveTag",
            "usage_count": 90000,
            "growth_rate": 90,
            "is_active": True,
            "detected_at": None,
            "created_at": "2024-04-30T00:00:00Z",
        },
    ]

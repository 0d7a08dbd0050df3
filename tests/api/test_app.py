"""
HTTP 接口测试

被测模块: trendcraft/api/app.py, trendcraft/api/schemas.py

使用 FastAPI TestClient，向 create_app 注入带假网关客户端的服务容器。

测试类/函数清单:
    TestGenerateRoutes                       生成接口测试
        test_content_success                 验证成功响应结构与 camelCase 结果
        test_validation_error                验证空 prompt 返回 422 且网关未被调用
        test_missing_user                    验证缺少 X-User-Id 返回 401
        test_remote_error                    验证远端错误返回 502 并透传消息
        test_network_error                   验证网络错误返回 502
        test_missing_gateway_key             验证网关凭证缺失返回 503
        test_body_type_error                 验证请求体类型错误返回统一 validation 结构
        test_degraded_flag                   验证启发式解析时 degraded 为 true
        test_all_generate_routes             验证五个生成路由都可用
    TestTrendingRoutes                       趋势接口测试
        test_list_fallback                   验证无存储时返回四条回退记录
        test_list_platform_filter            验证平台过滤
        test_get_trend                       验证按 ID 查询
        test_get_trend_not_found             验证不存在的 ID 返回 404
    TestMiscRoutes                           其他接口测试
        test_health                          验证健康检查
        test_root                            验证根路径
        test_create_app_from_config          验证从配置文件创建应用并把容器挂在 app.state
        test_status_code_mapping             验证错误到状态码的映射
"""

import json

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi.testclient import TestClient  # noqa: E402

from tests.conftest import FakeGatewayClient  # noqa: E402
from trendcraft import __version__  # noqa: E402
from trendcraft.api.app import create_app, status_code_for  # noqa: E402
from trendcraft.models.errors import (  # noqa: E402
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    RemoteAPIError,
    ValidationError,
)
from trendcraft.service import TrendCraftService  # noqa: E402


CONTENT_PAYLOAD = {"title": "T", "description": "D", "hashtags": ["#a", "#b"], "script": "S"}
USER = {"X-User-Id": "user-1"}


def make_client(merged_config, reply=""):
    gateway = FakeGatewayClient(reply)
    service = TrendCraftService(merged_config, client=gateway)
    return TestClient(create_app(service=service)), gateway


class TestGenerateRoutes:
    """生成接口测试"""

    def test_content_success(self, merged_config):
        client, gateway = make_client(merged_config, json.dumps(CONTENT_PAYLOAD))

        resp = client.post("/api/generate/content", json={"prompt": "dance"}, headers=USER)

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "succeeded"
        assert body["kind"] == "content_generation"
        assert body["result"] == CONTENT_PAYLOAD
        assert body["degraded"] is False
        assert gateway.call_count == 1

    def test_validation_error(self, merged_config):
        client, gateway = make_client(merged_config)

        resp = client.post("/api/generate/content", json={"prompt": "   "}, headers=USER)

        assert resp.status_code == 422
        body = resp.json()
        assert body["status"] == "failed"
        assert body["error"]["type"] == "validation"
        assert body["error"]["field"] == "prompt"
        assert gateway.call_count == 0

    def test_missing_user(self, merged_config):
        client, gateway = make_client(merged_config)

        resp = client.post("/api/generate/content", json={"prompt": "dance"})

        assert resp.status_code == 401
        assert resp.json()["error"]["type"] == "configuration"
        assert gateway.call_count == 0

    def test_remote_error(self, merged_config):
        client, _ = make_client(merged_config, RemoteAPIError("Rate limit exceeded", status_code=429))

        resp = client.post("/api/generate/content", json={"prompt": "dance"}, headers=USER)

        assert resp.status_code == 502
        error = resp.json()["error"]
        assert error["type"] == "remote_api"
        assert error["message"] == "Rate limit exceeded"
        assert error["field"] is None

    def test_network_error(self, merged_config):
        client, _ = make_client(merged_config, NetworkError("connection refused"))

        resp = client.post("/api/generate/model", json={"use_case": "captions"}, headers=USER)

        assert resp.status_code == 502
        assert resp.json()["error"]["type"] == "network"

    def test_missing_gateway_key(self, merged_config, monkeypatch):
        monkeypatch.delenv("TRENDCRAFT_TEST_GATEWAY_KEY", raising=False)
        client = TestClient(create_app(service=TrendCraftService(merged_config)))

        resp = client.post("/api/generate/content", json={"prompt": "dance"}, headers=USER)

        assert resp.status_code == 503
        assert resp.json()["error"]["type"] == "configuration"

    def test_body_type_error(self, merged_config):
        client, gateway = make_client(merged_config)

        resp = client.post(
            "/api/generate/content",
            json={"prompt": "dance", "duration": "long"},
            headers=USER,
        )

        assert resp.status_code == 422
        body = resp.json()
        assert body["error"]["type"] == "validation"
        assert body["error"]["field"] == "duration"
        assert gateway.call_count == 0

    def test_degraded_flag(self, merged_config):
        client, _ = make_client(merged_config, "A much better title")

        resp = client.post(
            "/api/generate/enhance",
            json={"original_content": "my title", "enhancement_type": "title", "target_platform": "tiktok"},
            headers=USER,
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["degraded"] is True
        assert body["result"] == {"content": "A much better title"}

    @pytest.mark.parametrize(
        "path, payload, keys",
        [
            ("/api/generate/trends", {"platform": "youtube"}, {"trendingTopics", "engagementTips"}),
            ("/api/generate/ideas", {"platform": "instagram", "category": "food"}, {"ideas", "expectedEngagement"}),
            ("/api/generate/model", {"use_case": "captions"}, {"recommendedModel", "estimatedCost"}),
        ],
    )
    def test_all_generate_routes(self, merged_config, path, payload, keys):
        client, _ = make_client(merged_config, "")

        resp = client.post(path, json=payload, headers=USER)

        assert resp.status_code == 200
        assert keys <= set(resp.json()["result"])


class TestTrendingRoutes:
    """趋势接口测试"""

    def test_list_fallback(self, merged_config):
        client, _ = make_client(merged_config)

        resp = client.get("/api/trending")

        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 4
        assert body["source"] == "fallback"
        assert [t["growth_rate"] for t in body["trends"]] == [340.0, 280.0, 220.0, 195.0]

    def test_list_platform_filter(self, merged_config):
        client, _ = make_client(merged_config)

        resp = client.get("/api/trending", params={"platform": "tiktok", "trend_type": "sound"})

        body = resp.json()
        assert body["total"] == 2
        assert {t["platform"] for t in body["trends"]} == {"tiktok"}

    def test_get_trend(self, merged_config):
        client, _ = make_client(merged_config)

        resp = client.get("/api/trending/3")

        assert resp.status_code == 200
        assert resp.json()["title"] == "Sunset Gradient"

    def test_get_trend_not_found(self, merged_config):
        client, _ = make_client(merged_config)

        assert client.get("/api/trending/99").status_code == 404


class TestMiscRoutes:
    """其他接口测试"""

    def test_health(self, merged_config):
        client, _ = make_client(merged_config)

        body = client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["gateway_configured"] is True
        assert body["store"] == "none"
        assert body["version"] == __version__

    def test_root(self, merged_config):
        client, _ = make_client(merged_config)

        assert client.get("/").json()["name"] == "TrendCraft API"

    def test_create_app_from_config(self, sample_config_file):
        app = create_app(sample_config_file)

        assert isinstance(app.state.service, TrendCraftService)
        assert app.state.service.registry.models["creative"] == "test/creative-model"

    def test_status_code_mapping(self):
        assert status_code_for(ValidationError("prompt")) == 422
        assert status_code_for(AuthenticationError("x")) == 401
        assert status_code_for(ConfigurationError("x")) == 503
        assert status_code_for(NetworkError("x")) == 502
        assert status_code_for(RemoteAPIError("x", 500)) == 502

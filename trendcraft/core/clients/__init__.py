"""
网关客户端模块

模块结构:
    - BaseGatewayClient: 抽象基类，定义 complete 接口
    - GatewayClient: OpenAI 兼容网关 (OpenRouter) 的具体实现

类/函数清单:
    BaseGatewayClient (抽象基类):
        - complete(messages, profile) -> str
          异步调用网关，返回首个补全文本

    GatewayClient (具体实现):
        - __init__(api_key, base_url, referer, title, session_factory) -> None
          自动补全 /chat/completions 路径
        - from_config(gateway_config, api_key) -> GatewayClient
        - complete(messages, profile) -> str

设计模式:
    策略模式，编排器只依赖 BaseGatewayClient，测试中注入假实现。

使用示例:
    from trendcraft.core.clients import GatewayClient

    client = GatewayClient(api_key, "https://openrouter.ai/api/v1")
    text = await client.complete(messages, profile)
"""

from .base import BaseGatewayClient
from .gateway_client import GatewayClient

__all__ = ["BaseGatewayClient", "GatewayClient"]

"""
Chat Completions 网关客户端实现

本模块实现与 OpenAI 兼容网关 (默认 OpenRouter) 的通信客户端。

通信协议:
    - POST <base_url>/chat/completions
    - Authorization: Bearer <api_key>
    - HTTP-Referer / X-Title: 调用方标识

请求格式:
    {
        "model": "openai/gpt-4o-mini",
        "messages": [
            {"role": "system", "content": "..."},
            {"role": "user", "content": "..."}
        ],
        "temperature": 0.8,
        "max_tokens": 800,
        "stream": false
    }

响应格式:
    成功: {"choices": [{"message": {"content": "AI 生成的内容"}}], ...}
    失败: {"error": {"message": "..."}}

错误处理:
    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ 情况                          │ 结果                                  │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ API Key 缺失                  │ ConfigurationError (不发起请求)        │
    │ 连接失败 / 传输超时            │ NetworkError                          │
    │ HTTP 非 2xx                   │ RemoteAPIError(error.message 或状态描述)│
    │ 2xx 但响应体不是 JSON          │ RemoteAPIError                        │
    │ (含非法 UTF-8 字节 / 过深嵌套) │                                       │
    │ 2xx 但缺少 choices[0].content  │ 返回 ""                               │
    └──────────────────────────────┴──────────────────────────────────────┘

超时:
    不显式设置，使用 aiohttp 默认的 ClientTimeout。

会话:
    每次调用创建并关闭自己的 ClientSession，调用之间不共享连接状态。

使用示例:
    client = GatewayClient(api_key="sk-or-...", base_url="https://openrouter.ai/api/v1")
    text = await client.complete(messages, profile)
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Dict, List

import aiohttp

from .base import BaseGatewayClient
from ..templates import ModelProfile
from ...models.errors import ConfigurationError, NetworkError, RemoteAPIError


DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_TITLE = "TrendCraft AI Content Generator"


class GatewayClient(BaseGatewayClient):
    """
    OpenAI 兼容网关客户端

    Attributes:
        api_key: 网关凭证，None 表示未配置
        api_url: 完整的 chat/completions 端点 URL
        referer: HTTP-Referer 请求头
        title: X-Title 请求头
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        referer: str | None = None,
        title: str = DEFAULT_TITLE,
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        """
        Args:
            api_key: 网关凭证
            base_url: 网关根地址 (可以是基础 URL 或完整 chat/completions 路径)
            referer: 调用方来源，写入 HTTP-Referer
            title: 调用方名称，写入 X-Title
            session_factory: ClientSession 工厂，测试中可替换
        """
        self.api_key = api_key
        self.api_url = base_url
        if not self.api_url.rstrip("/").endswith("/chat/completions"):
            self.api_url = self.api_url.rstrip("/") + "/chat/completions"
        self.referer = referer
        self.title = title
        self._session_factory = session_factory

    @classmethod
    def from_config(cls, gateway_config: dict[str, Any], api_key: str | None) -> "GatewayClient":
        """从 gateway 配置节构建客户端"""
        return cls(
            api_key=api_key,
            base_url=gateway_config.get("base_url") or DEFAULT_BASE_URL,
            referer=gateway_config.get("referer"),
            title=gateway_config.get("title") or DEFAULT_TITLE,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": self.title,
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        return headers

    async def complete(
        self,
        messages: List[Dict[str, str]],
        profile: ModelProfile,
    ) -> str:
        if not self.api_key:
            raise ConfigurationError("网关 API Key 未配置")

        payload: Dict[str, Any] = {
            "model": profile.model_id,
            "messages": messages,
            "temperature": profile.temperature,
            "max_tokens": profile.max_tokens,
            "stream": False,
        }

        logging.debug(f"向网关 ({self.api_url}) 发送请求 | 模型: {profile.model_id}")
        start_time = time.time()

        try:
            async with self._session_factory() as session:
                async with session.post(
                    self.api_url,
                    headers=self._headers(),
                    json=payload,
                ) as resp:
                    status = resp.status
                    reason = resp.reason or ""
                    response_text = await resp.text(errors="replace")
        except asyncio.TimeoutError as e:
            logging.error(f"调用网关超时 ({time.time() - start_time:.2f}s)")
            raise NetworkError(
                f"Gateway call timed out after {time.time() - start_time:.2f}s"
            ) from e
        except aiohttp.ClientError as e:
            logging.error(f"调用网关时网络错误: {e}")
            raise NetworkError(f"Gateway transport error: {e}") from e

        elapsed = time.time() - start_time
        logging.debug(f"网关响应状态: {status} in {elapsed:.2f}s")

        if not 200 <= status < 300:
            message = _extract_error_message(response_text) or reason or f"HTTP {status}"
            logging.warning(f"网关调用失败: HTTP {status} | {message}")
            raise RemoteAPIError(message, status_code=status)

        try:
            data = json.loads(response_text)
        except (ValueError, RecursionError) as e:
            logging.error(f"网关返回 {status} 但响应体不是 JSON: {e}")
            raise RemoteAPIError(f"Invalid {status} response: {e}", status_code=status) from e

        return _extract_content(data)


def _extract_error_message(response_text: str) -> str | None:
    """从失败响应体中提取 error.message"""
    try:
        body = json.loads(response_text)
    except (ValueError, TypeError, RecursionError):
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


def _extract_content(data: Any) -> str:
    """提取 choices[0].message.content，缺失时返回空字符串"""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""

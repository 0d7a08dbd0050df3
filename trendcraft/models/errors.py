"""
错误类型与异常定义

本模块定义 TrendCraft 的错误分类系统和自定义异常类。
生成链路上所有可观测的失败都归入 ErrorType 的四个分类之一；
解析失败与趋势查询失败不在此分类中，它们在各自组件内部被降级吸收。

错误分类设计:
    ┌───────────────┬──────────────────────────────────────────────────┐
    │ 错误类型       │ 说明                                             │
    ├───────────────┼──────────────────────────────────────────────────┤
    │ CONFIGURATION │ 配置错误: 缺少网关凭证、调用方未认证              │
    │ NETWORK       │ 网络错误: 未拿到任何响应 (连接失败、传输超时)     │
    │ REMOTE_API    │ 远端错误: 网关返回非成功状态码                    │
    │ VALIDATION    │ 输入错误: 调用方输入在发起网络请求前被拒绝        │
    └───────────────┴──────────────────────────────────────────────────┘

异常层次结构:
    Exception
    └── TrendCraftError (基础异常)
        ├── ConfigurationError (配置错误)
        │   └── AuthenticationError (调用方未认证)
        ├── NetworkError (传输层错误)
        ├── RemoteAPIError (远端 API 错误)
        ├── ValidationError (输入验证错误)
        └── DataSourceError (数据源错误，仅在数据层内部流转)

使用示例:
    from trendcraft.models.errors import ErrorType, RemoteAPIError

    try:
        raw = await client.complete(messages, profile)
    except TrendCraftError as e:
        if e.error_type == ErrorType.VALIDATION:
            ...
"""

from enum import Enum
from typing import Any


class ErrorType(str, Enum):
    """
    错误类型枚举

    继承自 str 使得枚举值可以直接用于字符串操作与 JSON 序列化。

    Attributes:
        CONFIGURATION: 缺少凭证或未认证，致命且不重试
        NETWORK: 传输层失败，直接返回调用方，不重试
        REMOTE_API: 非成功响应，尽量原样透传远端消息
        VALIDATION: 调用方输入被拒绝，发生在任何网络请求之前
    """

    CONFIGURATION = "configuration"
    NETWORK = "network"
    REMOTE_API = "remote_api"
    VALIDATION = "validation"

    def __str__(self) -> str:
        return self.value


class TrendCraftError(Exception):
    """
    TrendCraft 基础异常类

    Attributes:
        message: 错误消息文本
        details: 附加的错误详情字典 (可选)
        error_type: 对应的 ErrorType，子类覆盖
    """

    error_type: ErrorType | None = None

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | 详情: {self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class ConfigurationError(TrendCraftError):
    """
    配置错误

    常见场景:
        - 网关 API Key 未配置
        - 调用方未认证
        - 配置文件不存在或 YAML 语法错误
        - 数据源连接参数缺失
    """

    error_type = ErrorType.CONFIGURATION


class AuthenticationError(ConfigurationError):
    """调用方未认证。错误类型仍为 CONFIGURATION，HTTP 层据此返回 401"""

    pass


class NetworkError(TrendCraftError):
    """传输层错误: 请求已发出但未获得任何响应"""

    error_type = ErrorType.NETWORK


class RemoteAPIError(TrendCraftError):
    """
    远端 API 错误

    网关返回了响应，但状态码不是成功。message 优先取响应体中的
    error.message，缺失时取 HTTP 状态描述。

    Attributes:
        status_code: HTTP 状态码 (如适用)
    """

    error_type = ErrorType.REMOTE_API

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)


class ValidationError(TrendCraftError):
    """
    输入验证错误

    Attributes:
        field: 被拒绝的输入字段名 (如 "prompt")
    """

    error_type = ErrorType.VALIDATION

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"字段 '{field}' 无效", {"field": field})


class DataSourceError(TrendCraftError):
    """
    数据源错误

    外部记录存储查询失败或返回畸形数据时抛出。
    只在 trendcraft.data 内部流转，ResilientQueryService 会吸收它并回退到静态数据。
    """

    pass

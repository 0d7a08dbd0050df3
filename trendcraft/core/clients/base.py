"""
网关客户端抽象基类

本模块定义与 Chat Completions 网关交互的抽象接口。编排器只依赖此接口，
测试中可注入带调用计数的假实现。

类/函数清单:
    BaseGatewayClient (ABC 抽象基类):
        - complete(messages, profile) -> str  [抽象方法]
          发起一次请求并返回原始文本
          输入: List[Dict] 消息列表, ModelProfile 模型参数
          输出: str 首个补全的文本内容 (缺失时为空字符串)
          异常: ConfigurationError, NetworkError, RemoteAPIError

接口契约:
    - 每次调用恰好发起一次请求，不重试、不退避
    - 凭证缺失必须在任何网络请求之前以 ConfigurationError 报告
    - 超时由传输层默认值决定，客户端自身不设超时
    - 调用之间不共享可变状态
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from ..templates import ModelProfile


class BaseGatewayClient(ABC):
    """网关客户端抽象基类"""

    @abstractmethod
    async def complete(
        self,
        messages: List[Dict[str, str]],
        profile: ModelProfile,
    ) -> str:
        """
        调用网关获取补全文本

        Args:
            messages: 消息列表，格式为 [{"role": "user", "content": "..."}]
            profile: 模型参数档案 (model_id / temperature / max_tokens)

        Returns:
            首个补全的文本内容，缺失时返回空字符串

        Raises:
            ConfigurationError: 凭证未配置
            NetworkError: 传输层失败
            RemoteAPIError: 非成功响应
        """
        pass

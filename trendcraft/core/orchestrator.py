"""
生成编排器

本模块是调用方 (HTTP 接口 / CLI) 唯一需要面对的生成入口:
校验输入 → 选择模板 → 调用网关 → 解析输出 → 返回结果或分类错误。

状态机:
    ┌──────┐  请求   ┌────────────┐  校验通过  ┌────────────┐  原始文本  ┌───────────┐
    │ IDLE │ ──────→ │ VALIDATING │ ─────────→ │ REQUESTING │ ─────────→ │ SUCCEEDED │
    └──────┘         └────────────┘            └────────────┘            └───────────┘
                           │ ValidationError         │ ConfigurationError
                           │ ConfigurationError      │ NetworkError / RemoteAPIError
                           ↓                         ↓
                       ┌────────┐               ┌────────┐
                       │ FAILED │               │ FAILED │
                       └────────┘               └────────┘

    - 每次 generate() 调用创建独立的 GenerationCycle，终态不会回到 IDLE
    - 只有网关成功返回原始文本 (含空字符串) 才会进入解析
    - 解析器不会失败，因此 REQUESTING → SUCCEEDED 在拿到原始文本后是无条件的
    - 校验与认证检查都在任何网络请求之前完成

依赖注入:
    编排器不持有全局实例，registry / client / parser 均由构造参数注入，
    测试中可替换为带调用计数的假网关客户端。

使用示例:
    orchestrator = GenerationOrchestrator(registry, client, parser)
    outcome = await orchestrator.generate(ContentGenerationTask(prompt="..."), user_id="u1")
    if outcome.succeeded:
        print(outcome.result.title)
    else:
        print(outcome.error.error_type, outcome.error.message)
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum

from .clients.base import BaseGatewayClient
from .content.parser import ParseSource, StructuredOutputParser
from .templates import RequestTemplateRegistry
from ..models.content import StructuredResult
from ..models.errors import AuthenticationError, TrendCraftError, ValidationError
from ..models.task import GenerationTask, TaskKind


class GenerationState(str, Enum):
    """生成周期状态"""

    IDLE = "idle"
    VALIDATING = "validating"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.value


_ALLOWED_TRANSITIONS: dict[GenerationState, tuple[GenerationState, ...]] = {
    GenerationState.IDLE: (GenerationState.VALIDATING,),
    GenerationState.VALIDATING: (GenerationState.REQUESTING, GenerationState.FAILED),
    GenerationState.REQUESTING: (GenerationState.SUCCEEDED, GenerationState.FAILED),
    GenerationState.SUCCEEDED: (),
    GenerationState.FAILED: (),
}


@dataclass(frozen=True)
class GenerationOutcome:
    """
    生成结果

    Attributes:
        state: 终态 (SUCCEEDED / FAILED)
        kind: 任务类型
        result: 结构化结果 (仅 SUCCEEDED)
        error: 分类错误 (仅 FAILED)
        parse_source: "strict" / "heuristic" (仅 SUCCEEDED)
        transitions: 本次周期经历的状态序列
        elapsed: 耗时 (秒)
    """

    state: GenerationState
    kind: TaskKind
    result: StructuredResult | None = None
    error: TrendCraftError | None = None
    parse_source: ParseSource | None = None
    transitions: tuple[GenerationState, ...] = ()
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.state == GenerationState.SUCCEEDED

    @property
    def degraded(self) -> bool:
        """成功但经过了启发式解析"""
        return self.succeeded and self.parse_source == "heuristic"


@dataclass
class GenerationCycle:
    """单次生成周期的状态记录，每次调用独占一个实例"""

    task: GenerationTask
    state: GenerationState = GenerationState.IDLE
    history: list[GenerationState] = field(default_factory=lambda: [GenerationState.IDLE])
    started_at: float = field(default_factory=time.time)

    def advance(self, target: GenerationState) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(f"非法状态迁移: {self.state} → {target}")
        self.state = target
        self.history.append(target)

    def succeed(self, result: StructuredResult, source: ParseSource) -> GenerationOutcome:
        self.advance(GenerationState.SUCCEEDED)
        return GenerationOutcome(
            state=self.state,
            kind=self.task.kind,
            result=result,
            parse_source=source,
            transitions=tuple(self.history),
            elapsed=time.time() - self.started_at,
        )

    def fail(self, error: TrendCraftError) -> GenerationOutcome:
        self.advance(GenerationState.FAILED)
        return GenerationOutcome(
            state=self.state,
            kind=self.task.kind,
            error=error,
            transitions=tuple(self.history),
            elapsed=time.time() - self.started_at,
        )


class GenerationOrchestrator:
    """
    生成编排器

    Attributes:
        registry: 请求模板注册表
        client: 网关客户端
        parser: 结构化输出解析器
        require_authentication: 是否要求调用方已认证
    """

    def __init__(
        self,
        registry: RequestTemplateRegistry,
        client: BaseGatewayClient,
        parser: StructuredOutputParser | None = None,
        require_authentication: bool = True,
    ):
        self.registry = registry
        self.client = client
        self.parser = parser or StructuredOutputParser()
        self.require_authentication = require_authentication

    async def generate(
        self, task: GenerationTask, user_id: str | None = None
    ) -> GenerationOutcome:
        """
        执行一次完整的生成周期

        Args:
            task: 生成任务
            user_id: 已认证的调用方 ID，None 表示未认证

        Returns:
            GenerationOutcome (SUCCEEDED 或 FAILED)，不抛出 TrendCraftError
        """
        cycle = GenerationCycle(task)

        # IDLE → VALIDATING
        cycle.advance(GenerationState.VALIDATING)
        invalid_field = task.validate()
        if invalid_field:
            logging.info(f"生成请求被拒绝 [{task.kind}] | 无效字段: {invalid_field}")
            return cycle.fail(ValidationError(invalid_field))

        if self.require_authentication and not (user_id and user_id.strip()):
            logging.info(f"生成请求被拒绝 [{task.kind}] | 调用方未认证")
            return cycle.fail(AuthenticationError("调用方未认证，请先登录"))

        # VALIDATING → REQUESTING
        cycle.advance(GenerationState.REQUESTING)
        profile = self.registry.profile_for(task)
        messages = self.registry.build_messages(task)

        try:
            raw_text = await self.client.complete(messages, profile)
        except TrendCraftError as e:
            logging.warning(f"生成失败 [{task.kind}] | {e.error_type}: {e.message}")
            return cycle.fail(e)

        # REQUESTING → SUCCEEDED
        outcome = self.parser.parse(raw_text, task.kind)
        result = cycle.succeed(outcome.value, outcome.source)
        logging.info(
            f"生成完成 [{task.kind}] | 模型: {profile.model_id}, "
            f"解析: {outcome.source}, 耗时: {result.elapsed:.2f}s"
        )
        return result

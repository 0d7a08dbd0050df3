"""
HTTP 接口请求/响应 Pydantic 模型定义

请求模型只做类型层面的约束，业务层面的校验 (空白 prompt、未知平台等)
统一交给任务的 validate()，这样所有输入错误都以同一种失败结构返回。

模型分类:

请求模型 (每个都提供 to_task() 转换为生成任务):
    - ContentRequest(prompt, platform?, style?, duration?)
    - TrendAnalysisRequest(platform, category?, timeframe?)
    - EnhanceRequest(original_content, enhancement_type, target_platform)
    - IdeasRequest(platform, category?)
    - ModelRequest(use_case)

响应模型:
    - GenerationSuccess(status="succeeded", kind, result, degraded, parse_source)
    - GenerationFailure(status="failed", kind?, error)
        - ErrorBody(type, message, field?)
    - TrendItem / TrendingResponse
    - HealthResponse

使用示例:
    body = ContentRequest(prompt="morning routine", platform="tiktok")
    task = body.to_task()
"""

from typing import Any, Literal

from pydantic import BaseModel

from ..models.task import (
    ContentEnhancementTask,
    ContentGenerationTask,
    IdeaGenerationTask,
    ModelRecommendationTask,
    TrendAnalysisTask,
)


# ==================== 请求模型 ====================


class ContentRequest(BaseModel):
    """内容生成请求"""

    prompt: str = ""
    platform: str | None = None
    style: str | None = None
    duration: int | None = None

    def to_task(self) -> ContentGenerationTask:
        return ContentGenerationTask(
            prompt=self.prompt,
            platform=self.platform,
            style=self.style,
            duration=self.duration,
        )


class TrendAnalysisRequest(BaseModel):
    """趋势分析请求"""

    platform: str = ""
    category: str | None = None
    timeframe: str | None = None

    def to_task(self) -> TrendAnalysisTask:
        return TrendAnalysisTask(
            platform=self.platform,
            category=self.category,
            timeframe=self.timeframe,
        )


class EnhanceRequest(BaseModel):
    """内容优化请求"""

    original_content: str = ""
    enhancement_type: str = ""
    target_platform: str = ""

    def to_task(self) -> ContentEnhancementTask:
        return ContentEnhancementTask(
            original_content=self.original_content,
            enhancement_type=self.enhancement_type,
            target_platform=self.target_platform,
        )


class IdeasRequest(BaseModel):
    """视频创意请求"""

    platform: str = ""
    category: str | None = None

    def to_task(self) -> IdeaGenerationTask:
        return IdeaGenerationTask(platform=self.platform, category=self.category)


class ModelRequest(BaseModel):
    """模型推荐请求"""

    use_case: str = ""

    def to_task(self) -> ModelRecommendationTask:
        return ModelRecommendationTask(use_case=self.use_case)


# ==================== 响应模型 ====================


class ErrorBody(BaseModel):
    """
    错误详情

    Attributes:
        type: 错误分类 (configuration / network / remote_api / validation)
        message: 错误消息
        field: 被拒绝的输入字段 (仅 validation)
    """

    type: str
    message: str
    field: str | None = None


class GenerationSuccess(BaseModel):
    """生成成功响应，result 使用与前端约定的 camelCase 键"""

    status: Literal["succeeded"] = "succeeded"
    kind: str
    result: dict[str, Any]
    degraded: bool = False
    parse_source: str | None = None


class GenerationFailure(BaseModel):
    """生成失败响应"""

    status: Literal["failed"] = "failed"
    kind: str | None = None
    error: ErrorBody


class TrendItem(BaseModel):
    """单条趋势记录"""

    id: str
    platform: str
    trend_type: str
    title: str
    usage_count: int
    growth_rate: float
    is_active: bool
    detected_at: str | None = None


class TrendingResponse(BaseModel):
    """
    趋势列表响应

    Attributes:
        trends: 按增长率降序排列的活跃趋势
        total: 记录数
        source: "live" 或 "fallback"
    """

    trends: list[TrendItem]
    total: int
    source: str


class HealthResponse(BaseModel):
    """健康检查响应，status ∈ {"healthy", "degraded"}"""

    status: str
    gateway_configured: bool
    store: str
    uptime: float
    version: str

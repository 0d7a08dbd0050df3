"""
生成任务定义

GenerationTask 是五种任务类型的标签联合，每种任务是一个不可变 dataclass，
通过类属性 kind 标识自身类型。任务值在每次调用时构造、调用结束即丢弃。

任务类型:
    ContentGenerationTask    - 根据创意描述生成标题/描述/标签/脚本
    TrendAnalysisTask        - 分析某平台的当前趋势
    ContentEnhancementTask   - 优化已有的标题/描述/标签/脚本
    IdeaGenerationTask       - 生成视频创意
    ModelRecommendationTask  - 根据使用场景推荐模型

每个任务提供:
    validate() -> str | None
        返回第一个不合法的输入字段名，全部合法时返回 None
    template_fields() -> dict[str, Any]
        返回 Prompt 模板插值所需的字段，缺省字段已填充文档约定的默认值
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union


PLATFORMS = ("tiktok", "instagram", "youtube")
STYLES = ("trendy", "professional", "casual", "viral")
TIMEFRAMES = ("24h", "7d", "30d")
ENHANCEMENT_TYPES = ("title", "description", "hashtags", "script")

# 模板插值默认值
DEFAULT_DURATION = 30
DEFAULT_STYLE = "trendy"
DEFAULT_PLATFORM = "general"
DEFAULT_TIMEFRAME = "7d"
DEFAULT_CATEGORY = "general"


class TaskKind(str, Enum):
    """任务类型枚举"""

    CONTENT_GENERATION = "content_generation"
    TREND_ANALYSIS = "trend_analysis"
    CONTENT_ENHANCEMENT = "content_enhancement"
    IDEA_GENERATION = "idea_generation"
    MODEL_RECOMMENDATION = "model_recommendation"

    def __str__(self) -> str:
        return self.value


def _is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


@dataclass(frozen=True)
class ContentGenerationTask:
    """
    内容生成任务

    Attributes:
        prompt: 创意描述 (必填，不能为空白)
        platform: 目标平台，None 时模板使用 "general"
        style: 风格，None 时使用 "trendy"
        duration: 目标时长 (秒)，None 时使用 30
    """

    kind: ClassVar[TaskKind] = TaskKind.CONTENT_GENERATION

    prompt: str
    platform: str | None = None
    style: str | None = None
    duration: int | None = None

    def validate(self) -> str | None:
        if _is_blank(self.prompt):
            return "prompt"
        if self.platform is not None and self.platform not in PLATFORMS:
            return "platform"
        if self.style is not None and self.style not in STYLES:
            return "style"
        if self.duration is not None and self.duration <= 0:
            return "duration"
        return None

    def template_fields(self) -> dict[str, Any]:
        return {
            "prompt": self.prompt.strip(),
            "platform": self.platform or DEFAULT_PLATFORM,
            "audience": self.platform or "social media",
            "style": self.style or DEFAULT_STYLE,
            "duration": self.duration or DEFAULT_DURATION,
        }


@dataclass(frozen=True)
class TrendAnalysisTask:
    """趋势分析任务"""

    kind: ClassVar[TaskKind] = TaskKind.TREND_ANALYSIS

    platform: str
    category: str | None = None
    timeframe: str | None = None

    def validate(self) -> str | None:
        if self.platform not in PLATFORMS:
            return "platform"
        if self.timeframe is not None and self.timeframe not in TIMEFRAMES:
            return "timeframe"
        return None

    def template_fields(self) -> dict[str, Any]:
        return {
            "platform": self.platform or DEFAULT_PLATFORM,
            "category": self.category or DEFAULT_CATEGORY,
            "timeframe": self.timeframe or DEFAULT_TIMEFRAME,
        }


@dataclass(frozen=True)
class ContentEnhancementTask:
    """
    内容优化任务

    Attributes:
        original_content: 待优化的原始内容 (必填)
        enhancement_type: 优化对象 ∈ {title, description, hashtags, script}
        target_platform: 目标平台
    """

    kind: ClassVar[TaskKind] = TaskKind.CONTENT_ENHANCEMENT

    original_content: str
    enhancement_type: str
    target_platform: str

    def validate(self) -> str | None:
        if _is_blank(self.original_content):
            return "original_content"
        if self.enhancement_type not in ENHANCEMENT_TYPES:
            return "enhancement_type"
        if self.target_platform not in PLATFORMS:
            return "target_platform"
        return None

    def template_fields(self) -> dict[str, Any]:
        return {
            "original_content": self.original_content.strip(),
            "enhancement_type": self.enhancement_type,
            "platform": self.target_platform or DEFAULT_PLATFORM,
        }


@dataclass(frozen=True)
class IdeaGenerationTask:
    """视频创意生成任务"""

    kind: ClassVar[TaskKind] = TaskKind.IDEA_GENERATION

    platform: str
    category: str | None = None

    def validate(self) -> str | None:
        if self.platform not in PLATFORMS:
            return "platform"
        return None

    def template_fields(self) -> dict[str, Any]:
        return {
            "platform": self.platform or DEFAULT_PLATFORM,
            "category_clause": f" in the {self.category} category" if self.category else "",
        }


@dataclass(frozen=True)
class ModelRecommendationTask:
    """模型推荐任务"""

    kind: ClassVar[TaskKind] = TaskKind.MODEL_RECOMMENDATION

    use_case: str

    def validate(self) -> str | None:
        if _is_blank(self.use_case):
            return "use_case"
        return None

    def template_fields(self) -> dict[str, Any]:
        return {"use_case": self.use_case.strip()}


GenerationTask = Union[
    ContentGenerationTask,
    TrendAnalysisTask,
    ContentEnhancementTask,
    IdeaGenerationTask,
    ModelRecommendationTask,
]

"""
结构化输出形状定义

每种任务类型对应一个 OutputShape，描述:
    - 期望的 JSON 键、Python 属性名与原始类型 (str / list[str])
    - 启发式提取所用的标签词 (label) 与列表标记字符 (marker)
    - 无法恢复时的固定默认占位值
    - 由字段值构造结果 dataclass 的工厂

默认值即前端约定的占位内容，保证任何返回给调用方的结果都字段齐全。
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ...models.content import (
    EnhancedContent,
    GeneratedContent,
    ModelRecommendation,
    StructuredResult,
    TrendInsights,
    VideoIdeas,
)
from ...models.task import TaskKind


@dataclass(frozen=True)
class FieldSpec:
    """
    单个字段规格

    Attributes:
        key: JSON 键名
        attr: 结果 dataclass 的属性名
        is_list: 是否为字符串列表
        default: 无法恢复时的默认值 (列表字段为 tuple，使用时复制为 list)
        label: 启发式提取时匹配的标签词，默认与 key 相同
        marker: 列表字段的行标记字符 (如 "#")，None 表示启发式无法提取
    """

    key: str
    attr: str
    is_list: bool
    default: Any
    label: str | None = None
    marker: str | None = None

    @property
    def label_token(self) -> str:
        return (self.label or self.key).lower()

    def default_value(self) -> Any:
        return list(self.default) if self.is_list else self.default

    def accepts(self, value: Any) -> bool:
        """检查值的原始类型是否符合字段规格"""
        if self.is_list:
            return isinstance(value, list) and all(isinstance(v, str) for v in value)
        return isinstance(value, str)


@dataclass(frozen=True)
class OutputShape:
    """
    任务输出形状

    Attributes:
        kind: 任务类型
        fields: 字段规格 (有序)
        factory: 由 {attr: value} 构造结果对象
        use_full_text: 启发式阶段是否直接把整段文本作为唯一字段的值
    """

    kind: TaskKind
    fields: tuple[FieldSpec, ...]
    factory: Callable[..., StructuredResult]
    use_full_text: bool = False

    @property
    def required_keys(self) -> list[str]:
        return [f.key for f in self.fields]

    def build(self, values: dict[str, Any]) -> StructuredResult:
        """values 以 JSON 键为索引"""
        return self.factory(**{f.attr: values[f.key] for f in self.fields})


OUTPUT_SHAPES: Mapping[TaskKind, OutputShape] = MappingProxyType({
    TaskKind.CONTENT_GENERATION: OutputShape(
        kind=TaskKind.CONTENT_GENERATION,
        fields=(
            FieldSpec("title", "title", False, "Viral Video"),
            FieldSpec("description", "description", False, "Check out this amazing content!"),
            FieldSpec("hashtags", "hashtags", True, ("#viral", "#trending"), marker="#"),
            FieldSpec("script", "script", False, "Create engaging content here"),
        ),
        factory=GeneratedContent,
    ),
    TaskKind.TREND_ANALYSIS: OutputShape(
        kind=TaskKind.TREND_ANALYSIS,
        fields=(
            FieldSpec(
                "trendingTopics", "trending_topics", True,
                ("AI content", "Short-form videos", "User-generated content"),
            ),
            FieldSpec(
                "recommendedContent", "recommended_content", True,
                ("Behind-the-scenes content", "Tutorial videos", "Trending challenges"),
            ),
            FieldSpec(
                "growthPredictions", "growth_predictions", True,
                ("Video content will continue to dominate", "AI-generated content will increase"),
            ),
            FieldSpec(
                "engagementTips", "engagement_tips", True,
                ("Use trending hashtags", "Post consistently", "Engage with comments"),
            ),
        ),
        factory=TrendInsights,
    ),
    TaskKind.CONTENT_ENHANCEMENT: OutputShape(
        kind=TaskKind.CONTENT_ENHANCEMENT,
        fields=(
            FieldSpec("content", "content", False, "No enhancement available"),
        ),
        factory=EnhancedContent,
        use_full_text=True,
    ),
    TaskKind.IDEA_GENERATION: OutputShape(
        kind=TaskKind.IDEA_GENERATION,
        fields=(
            FieldSpec(
                "ideas", "ideas", True,
                (
                    "Behind-the-scenes content creation",
                    "Trending challenge participation",
                    "Educational content with humor",
                    "User-generated content showcase",
                    "Interactive Q&A sessions",
                ),
            ),
            FieldSpec(
                "executionTips", "execution_tips", True,
                (
                    "Start with a strong hook",
                    "Keep it under 60 seconds",
                    "Use trending music",
                    "Add captions for accessibility",
                ),
            ),
            FieldSpec(
                "expectedEngagement", "expected_engagement", False,
                "High engagement potential with proper execution",
                label="engagement",
            ),
        ),
        factory=VideoIdeas,
    ),
    TaskKind.MODEL_RECOMMENDATION: OutputShape(
        kind=TaskKind.MODEL_RECOMMENDATION,
        fields=(
            FieldSpec(
                "recommendedModel", "recommended_model", False,
                "anthropic/claude-3.5-sonnet", label="model",
            ),
            FieldSpec(
                "reasoning", "reasoning", False,
                "Balanced performance for general content generation",
            ),
            FieldSpec(
                "estimatedCost", "estimated_cost", False,
                "$0.003 per 1K input tokens, $0.015 per 1K output tokens",
                label="cost",
            ),
        ),
        factory=ModelRecommendation,
    ),
})


def shape_for(kind: TaskKind) -> OutputShape:
    """获取任务类型的输出形状"""
    return OUTPUT_SHAPES[kind]

"""
结构化结果与趋势记录定义

生成结果:
    GeneratedContent     - {title, description, hashtags, script}
    TrendInsights        - {trendingTopics, recommendedContent, growthPredictions, engagementTips}
    EnhancedContent      - {content}
    VideoIdeas           - {ideas, executionTips, expectedEngagement}
    ModelRecommendation  - {recommendedModel, reasoning, estimatedCost}

    所有结果都是不可变 dataclass，to_dict() 返回与网关约定一致的线上 JSON 结构
    (键名与 Prompt 中要求模型输出的键名相同)。

趋势记录:
    TrendRecord          - 外部存储中的一条热门音乐/话题/特效记录
    TrendRecord.from_row(row) 将存储行映射为记录，行结构畸形时抛出 DataSourceError
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from .errors import DataSourceError


TREND_TYPES = ("sound", "hashtag", "effect")


@dataclass(frozen=True)
class GeneratedContent:
    """
    内容生成结果

    title ≤ 60 字符、description ≤ 150 字符是软限制，不做截断。
    """

    title: str
    description: str
    hashtags: list[str] = field(default_factory=list)
    script: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "hashtags": list(self.hashtags),
            "script": self.script,
        }


@dataclass(frozen=True)
class TrendInsights:
    """趋势分析结果"""

    trending_topics: list[str]
    recommended_content: list[str]
    growth_predictions: list[str]
    engagement_tips: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "trendingTopics": list(self.trending_topics),
            "recommendedContent": list(self.recommended_content),
            "growthPredictions": list(self.growth_predictions),
            "engagementTips": list(self.engagement_tips),
        }


@dataclass(frozen=True)
class EnhancedContent:
    """内容优化结果"""

    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content}


@dataclass(frozen=True)
class VideoIdeas:
    """视频创意结果"""

    ideas: list[str]
    execution_tips: list[str]
    expected_engagement: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ideas": list(self.ideas),
            "executionTips": list(self.execution_tips),
            "expectedEngagement": self.expected_engagement,
        }


@dataclass(frozen=True)
class ModelRecommendation:
    """模型推荐结果"""

    recommended_model: str
    reasoning: str
    estimated_cost: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendedModel": self.recommended_model,
            "reasoning": self.reasoning,
            "estimatedCost": self.estimated_cost,
        }


StructuredResult = Union[
    GeneratedContent,
    TrendInsights,
    EnhancedContent,
    VideoIdeas,
    ModelRecommendation,
]


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value)
    if isinstance(value, str):
        # PostgREST 返回 "2024-01-01T00:00:00+00:00"，旧版本可能带 "Z" 后缀
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as e:
            raise DataSourceError(f"无法解析时间戳: {value!r}") from e
    raise DataSourceError(f"时间戳类型不受支持: {type(value).__name__}")


@dataclass(frozen=True)
class TrendRecord:
    """
    趋势记录

    Attributes:
        id: 记录 ID
        platform: 平台 (tiktok / instagram / youtube)
        trend_type: 趋势类型 (sound / hashtag / effect)
        title: 标题
        usage_count: 使用次数 (≥ 0)
        growth_rate_percent: 增长率百分比
        is_active: 是否活跃
        detected_at: 检测时间
    """

    id: str
    platform: str
    trend_type: str
    title: str
    usage_count: int
    growth_rate_percent: float
    is_active: bool
    detected_at: datetime | None

    @classmethod
    def from_row(cls, row: Any) -> "TrendRecord":
        """
        将存储行映射为 TrendRecord

        存储列名: id, platform, trend_type, title, usage_count, growth_rate,
        is_active, detected_at (缺失时回退 created_at)。
        usage_count / growth_rate 为 NULL 时按 0 处理。

        Raises:
            DataSourceError: 行不是字典、必需列缺失或类型错误
        """
        if not isinstance(row, dict):
            raise DataSourceError(f"记录格式错误: 期望字典，实际为 {type(row).__name__}")

        missing = [k for k in ("id", "platform", "trend_type", "title") if row.get(k) in (None, "")]
        if missing:
            raise DataSourceError(f"记录缺少必需字段: {missing}", {"row_id": row.get("id")})

        usage_count = row.get("usage_count")
        usage_count = 0 if usage_count is None else usage_count
        if isinstance(usage_count, bool) or not isinstance(usage_count, int) or usage_count < 0:
            raise DataSourceError(f"usage_count 非法: {usage_count!r}", {"row_id": row.get("id")})

        growth_rate = row.get("growth_rate")
        growth_rate = 0 if growth_rate is None else growth_rate
        if isinstance(growth_rate, bool) or not isinstance(growth_rate, (int, float)):
            raise DataSourceError(f"growth_rate 非法: {growth_rate!r}", {"row_id": row.get("id")})

        return cls(
            id=str(row["id"]),
            platform=str(row["platform"]),
            trend_type=str(row["trend_type"]),
            title=str(row["title"]),
            usage_count=usage_count,
            growth_rate_percent=float(growth_rate),
            is_active=bool(row.get("is_active")),
            detected_at=_parse_timestamp(row.get("detected_at") or row.get("created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "platform": self.platform,
            "trend_type": self.trend_type,
            "title": self.title,
            "usage_count": self.usage_count,
            "growth_rate": self.growth_rate_percent,
            "is_active": self.is_active,
            "detected_at": self.detected_at.isoformat() if self.detected_at else None,
        }

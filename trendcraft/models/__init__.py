"""
数据模型与异常定义模块

模块内容:
    任务:
        - GenerationTask: 五种生成任务的标签联合 (task.py)
        - TaskKind: 任务类型枚举

    结果:
        - GeneratedContent / TrendInsights / EnhancedContent / VideoIdeas / ModelRecommendation
        - TrendRecord: 趋势记录

    异常类:
        - TrendCraftError: 基础异常类
        - ConfigurationError / NetworkError / RemoteAPIError / ValidationError
        - DataSourceError: 数据源错误 (仅数据层内部)

    枚举:
        - ErrorType: 错误类型枚举

使用示例:
    from trendcraft.models import ContentGenerationTask, ValidationError

    task = ContentGenerationTask(prompt="morning routine", platform="tiktok")
    field = task.validate()
    if field:
        raise ValidationError(field)
"""

from .errors import (
    ErrorType,
    TrendCraftError,
    ConfigurationError,
    AuthenticationError,
    NetworkError,
    RemoteAPIError,
    ValidationError,
    DataSourceError,
)
from .task import (
    TaskKind,
    GenerationTask,
    ContentGenerationTask,
    TrendAnalysisTask,
    ContentEnhancementTask,
    IdeaGenerationTask,
    ModelRecommendationTask,
    PLATFORMS,
)
from .content import (
    GeneratedContent,
    TrendInsights,
    EnhancedContent,
    VideoIdeas,
    ModelRecommendation,
    StructuredResult,
    TrendRecord,
    TREND_TYPES,
)

__all__ = [
    "ErrorType",
    "TrendCraftError",
    "ConfigurationError",
    "AuthenticationError",
    "NetworkError",
    "RemoteAPIError",
    "ValidationError",
    "DataSourceError",
    "TaskKind",
    "GenerationTask",
    "ContentGenerationTask",
    "TrendAnalysisTask",
    "ContentEnhancementTask",
    "IdeaGenerationTask",
    "ModelRecommendationTask",
    "PLATFORMS",
    "GeneratedContent",
    "TrendInsights",
    "EnhancedContent",
    "VideoIdeas",
    "ModelRecommendation",
    "StructuredResult",
    "TrendRecord",
    "TREND_TYPES",
]

"""
请求模板注册表

本模块集中管理每种任务类型的 Prompt 模板 (system/user) 和模型参数，
使 Prompt 与参数策略可审计、且与传输层解耦。

模型档位:
    default   - 通用、稳定 (模型推荐)
    creative  - 创意类内容 (内容生成、内容优化、创意生成)
    analysis  - 趋势分析

参数表:
    ┌──────────────────────┬──────────┬─────────────┬────────────┐
    │ 任务类型              │ 模型档位  │ temperature │ max_tokens │
    ├──────────────────────┼──────────┼─────────────┼────────────┤
    │ content_generation   │ creative │ 0.8         │ 800        │
    │ trend_analysis       │ analysis │ 0.6         │ 1200       │
    │ content_enhancement  │ creative │ 0.7         │ 500        │
    │ idea_generation      │ creative │ 0.9         │ 1000       │
    │ model_recommendation │ default  │ 0.3         │ 400        │
    └──────────────────────┴──────────┴─────────────┴────────────┘

模板插值:
    模板使用 str.format_map 占位符，字段来自 task.template_fields()，
    缺省字段已替换为默认值 (duration=30, style="trendy", platform="general",
    timeframe="7d")。模板中的字面量花括号写作 {{ }}。
    插值值本身不会被再次解析，用户输入中的花括号原样保留。

使用示例:
    registry = RequestTemplateRegistry.from_config(config)
    profile = registry.profile_for(task)
    messages = registry.build_messages(task)
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from ..models.task import GenerationTask, TaskKind


DEFAULT_MODELS: dict[str, str] = {
    "default": "anthropic/claude-3.5-sonnet",
    "creative": "openai/gpt-4o-mini",
    "analysis": "anthropic/claude-3.5-sonnet",
}


@dataclass(frozen=True)
class ModelProfile:
    """
    模型参数档案

    Attributes:
        model_id: 网关模型 ID
        temperature: 采样温度，范围 [0, 1]
        max_tokens: 最大生成 Token 数
        system_prompt_template: system 消息模板
        user_prompt_template: user 消息模板
    """

    model_id: str
    temperature: float
    max_tokens: int
    system_prompt_template: str
    user_prompt_template: str

    def __post_init__(self):
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature 必须在 [0, 1] 范围内: {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens 必须为正数: {self.max_tokens}")


# ==================== Prompt 模板 ====================

CONTENT_SYSTEM = """You are an expert social media content creator specializing in viral video content for {audience}.

Create engaging, trending content that follows current viral patterns. Focus on:
- Catchy, clickable titles
- Engaging descriptions that encourage interaction
- Relevant hashtags that are currently trending
- Short, punchy scripts optimized for {duration} seconds

Style: {style}
Platform: {platform}"""

CONTENT_USER = """Generate viral video content for this prompt: "{prompt}"

Please provide:
1. A catchy title (max 60 characters)
2. An engaging description (max 150 characters)
3. 5-8 trending hashtags
4. A short script outline for {duration} seconds

Format as JSON:
{{
  "title": "string",
  "description": "string",
  "hashtags": ["string"],
  "script": "string"
}}"""

TREND_SYSTEM = """You are a social media trend analyst with deep expertise in {platform} trends.

Analyze current trends and provide actionable insights for content creators. Focus on:
- Emerging trends and viral patterns
- Content recommendations based on current popularity
- Growth predictions for different content types
- Engagement strategies that work on {platform}"""

TREND_USER = """Analyze current trends on {platform} for {timeframe} timeframe.

Category: {category}

Provide analysis in JSON format:
{{
  "trendingTopics": ["string"],
  "recommendedContent": ["string"],
  "growthPredictions": ["string"],
  "engagementTips": ["string"]
}}"""

ENHANCE_SYSTEM = """You are a social media optimization expert specializing in {platform} content enhancement.

Your goal is to improve content for maximum engagement and reach on {platform}."""

ENHANCE_USER = """{lead} for {platform}: "{original_content}"

{guidance}

Respond in JSON format:
{{
  "content": "string"
}}"""

# 内容优化按 enhancement_type 切换开头与要求
ENHANCEMENT_INSTRUCTIONS: Mapping[str, tuple[str, str]] = MappingProxyType({
    "title": (
        "Enhance this title",
        "Make it more engaging, clickable, and optimized for the platform. Keep it under 60 characters.",
    ),
    "description": (
        "Enhance this description",
        "Make it more engaging and include call-to-actions. Keep it under 150 characters.",
    ),
    "hashtags": (
        "Generate trending hashtags for this content",
        "Provide 5-8 relevant, trending hashtags that will increase discoverability.",
    ),
    "script": (
        "Enhance this video script",
        "Make it more engaging, add hooks, and optimize for the platform's format.",
    ),
})

IDEAS_SYSTEM = """You are a creative director specializing in viral video content for {platform}.

Generate innovative video ideas that are likely to go viral based on current trends and platform algorithms."""

IDEAS_USER = """Generate 5 creative video ideas for {platform}{category_clause}.

For each idea, provide:
- A unique concept
- Why it would work on this platform
- Expected engagement level

Format as JSON:
{{
  "ideas": ["string"],
  "executionTips": ["string"],
  "expectedEngagement": "string"
}}"""

MODEL_SYSTEM = """You are an AI model expert who helps users choose the best model for their specific use case.

Consider factors like cost, speed, quality, and suitability for the task."""

MODEL_USER = """Recommend the best OpenRouter model for: {use_case}

Consider:
- Task requirements
- Cost efficiency
- Speed vs quality trade-offs
- Model capabilities

Format as JSON:
{{
  "recommendedModel": "string",
  "reasoning": "string",
  "estimatedCost": "string"
}}"""


class RequestTemplateRegistry:
    """
    请求模板注册表

    进程启动时构建一次，之后只读。profile_for 对所有 TaskKind 都有定义。

    Attributes:
        models: 模型档位 → 模型 ID 映射
        profiles: TaskKind → ModelProfile 映射 (只读视图)
    """

    def __init__(self, models: Mapping[str, str] | None = None):
        """
        Args:
            models: 覆盖默认模型 ID 的映射 (键为 default/creative/analysis)
        """
        merged = dict(DEFAULT_MODELS)
        for tier, model_id in (models or {}).items():
            if tier in merged and model_id:
                merged[tier] = str(model_id)
            else:
                logging.warning(f"忽略未知或为空的模型档位配置: {tier}={model_id!r}")
        self.models: Mapping[str, str] = MappingProxyType(merged)

        self.profiles: Mapping[TaskKind, ModelProfile] = MappingProxyType({
            TaskKind.CONTENT_GENERATION: ModelProfile(
                model_id=merged["creative"],
                temperature=0.8,
                max_tokens=800,
                system_prompt_template=CONTENT_SYSTEM,
                user_prompt_template=CONTENT_USER,
            ),
            TaskKind.TREND_ANALYSIS: ModelProfile(
                model_id=merged["analysis"],
                temperature=0.6,
                max_tokens=1200,
                system_prompt_template=TREND_SYSTEM,
                user_prompt_template=TREND_USER,
            ),
            TaskKind.CONTENT_ENHANCEMENT: ModelProfile(
                model_id=merged["creative"],
                temperature=0.7,
                max_tokens=500,
                system_prompt_template=ENHANCE_SYSTEM,
                user_prompt_template=ENHANCE_USER,
            ),
            TaskKind.IDEA_GENERATION: ModelProfile(
                model_id=merged["creative"],
                temperature=0.9,
                max_tokens=1000,
                system_prompt_template=IDEAS_SYSTEM,
                user_prompt_template=IDEAS_USER,
            ),
            TaskKind.MODEL_RECOMMENDATION: ModelProfile(
                model_id=merged["default"],
                temperature=0.3,
                max_tokens=400,
                system_prompt_template=MODEL_SYSTEM,
                user_prompt_template=MODEL_USER,
            ),
        })

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "RequestTemplateRegistry":
        """从完整配置的 models 节构建注册表"""
        return cls(config.get("models") or {})

    def profile_for(self, task: GenerationTask) -> ModelProfile:
        """获取任务对应的模型参数档案"""
        return self.profiles[task.kind]

    def build_messages(self, task: GenerationTask) -> list[dict[str, str]]:
        """
        渲染任务的消息序列

        Returns:
            [{"role": "system", ...}, {"role": "user", ...}]
        """
        profile = self.profile_for(task)
        fields = self._interpolation_fields(task)
        return [
            {"role": "system", "content": profile.system_prompt_template.format_map(fields)},
            {"role": "user", "content": profile.user_prompt_template.format_map(fields)},
        ]

    @staticmethod
    def _interpolation_fields(task: GenerationTask) -> dict[str, Any]:
        fields = task.template_fields()
        if task.kind == TaskKind.CONTENT_ENHANCEMENT:
            lead, guidance = ENHANCEMENT_INSTRUCTIONS.get(
                fields["enhancement_type"], ENHANCEMENT_INSTRUCTIONS["description"]
            )
            fields["lead"] = lead
            fields["guidance"] = guidance
        return fields

"""
请求模板注册表测试

被测模块: trendcraft/core/templates.py

测试类/函数清单:
    TestModelProfile                    模型参数档案测试
        test_invalid_temperature        验证 temperature 超出 [0, 1] 抛出 ValueError
        test_invalid_max_tokens         验证 max_tokens 非正数抛出 ValueError
    TestRegistry                        注册表测试
        test_profiles_cover_all_kinds   验证每种任务都有参数档案
        test_profile_table              验证各任务的模型档位与参数
        test_model_override             验证 models 配置覆盖默认模型 ID
        test_content_messages           验证内容生成消息包含 prompt 与默认值
        test_enhancement_messages       验证优化消息按类型切换开头
        test_braces_in_input            验证用户输入中的花括号原样保留
"""

import pytest

from trendcraft.core.templates import DEFAULT_MODELS, ModelProfile, RequestTemplateRegistry
from trendcraft.models.task import (
    ContentEnhancementTask,
    ContentGenerationTask,
    IdeaGenerationTask,
    ModelRecommendationTask,
    TaskKind,
    TrendAnalysisTask,
)


class TestModelProfile:
    """模型参数档案测试"""

    @pytest.mark.parametrize("temperature", [-0.1, 1.5])
    def test_invalid_temperature(self, temperature):
        with pytest.raises(ValueError):
            ModelProfile("m", temperature, 100, "s", "u")

    def test_invalid_max_tokens(self):
        with pytest.raises(ValueError):
            ModelProfile("m", 0.5, 0, "s", "u")


class TestRegistry:
    """注册表测试"""

    @pytest.fixture
    def registry(self):
        return RequestTemplateRegistry()

    def test_profiles_cover_all_kinds(self, registry):
        assert set(registry.profiles) == set(TaskKind)

    @pytest.mark.parametrize(
        "task, tier, temperature, max_tokens",
        [
            (ContentGenerationTask(prompt="p"), "creative", 0.8, 800),
            (TrendAnalysisTask(platform="tiktok"), "analysis", 0.6, 1200),
            (ContentEnhancementTask("c", "title", "tiktok"), "creative", 0.7, 500),
            (IdeaGenerationTask(platform="tiktok"), "creative", 0.9, 1000),
            (ModelRecommendationTask(use_case="u"), "default", 0.3, 400),
        ],
    )
    def test_profile_table(self, registry, task, tier, temperature, max_tokens):
        profile = registry.profile_for(task)

        assert profile.model_id == DEFAULT_MODELS[tier]
        assert profile.temperature == temperature
        assert profile.max_tokens == max_tokens

    def test_model_override(self):
        registry = RequestTemplateRegistry.from_config({"models": {"creative": "test/creative"}})

        assert registry.profile_for(ContentGenerationTask(prompt="p")).model_id == "test/creative"
        assert registry.profile_for(ModelRecommendationTask(use_case="u")).model_id == DEFAULT_MODELS["default"]

    def test_content_messages(self, registry):
        messages = registry.build_messages(ContentGenerationTask(prompt="morning routine"))

        assert [m["role"] for m in messages] == ["system", "user"]
        assert "social media" in messages[0]["content"]
        assert "Style: trendy" in messages[0]["content"]
        assert "Platform: general" in messages[0]["content"]
        assert 'prompt: "morning routine"' in messages[1]["content"]
        assert "30 seconds" in messages[1]["content"]
        assert '"hashtags": ["string"]' in messages[1]["content"]

    def test_enhancement_messages(self, registry):
        messages = registry.build_messages(ContentEnhancementTask("My day", "hashtags", "instagram"))

        assert messages[1]["content"].startswith(
            'Generate trending hashtags for this content for instagram: "My day"'
        )
        assert "instagram" in messages[0]["content"]

    def test_braces_in_input(self, registry):
        messages = registry.build_messages(ContentGenerationTask(prompt="use {curly} braces"))

        assert "use {curly} braces" in messages[1]["content"]

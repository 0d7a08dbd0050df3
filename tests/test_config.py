"""
配置加载测试

被测模块: trendcraft/config/settings.py

测试 trendcraft/config/settings.py 的配置功能，包括：
- YAML 配置文件加载与错误处理
- 默认配置深度合并
- 凭证解析 (配置值优先，其次环境变量)
- 嵌套取值

测试类/函数清单:
    TestConfigLoading                  配置加载测试
        test_load_valid_config         验证有效 YAML 文件可正常加载
        test_load_config_example       验证 config-example.yaml 可正常加载
        test_config_missing_file       验证不存在的文件抛出 ConfigurationError
        test_config_invalid_yaml       验证格式错误的 YAML 抛出 ConfigurationError
        test_config_non_dict_root      验证根节点不是字典时抛出 ConfigurationError
        test_empty_file                验证空文件视为空配置
    TestLoadSettings                   合并配置测试
        test_defaults_only             验证 None 路径返回默认配置副本
        test_file_overrides_defaults   验证文件值覆盖默认值且保留未覆盖键
    TestResolveSecret                  凭证解析测试
        test_config_value_wins         验证配置值优先于环境变量
        test_env_fallback              验证配置为空时读取环境变量
        test_missing_returns_none      验证两者都为空时返回 None
    TestHelpers                        辅助函数测试
        test_get_nested                验证嵌套取值与默认值
        test_merge_config_no_mutation  验证合并不修改原始字典
"""

from pathlib import Path

import pytest

from trendcraft.config import (
    DEFAULT_CONFIG,
    get_nested,
    load_config,
    load_settings,
    merge_config,
    resolve_secret,
)
from trendcraft.models.errors import ConfigurationError


class TestConfigLoading:
    """配置加载测试"""

    def test_load_valid_config(self, sample_config_file):
        """测试加载有效配置"""
        config = load_config(str(sample_config_file))

        assert "gateway" in config
        assert config["trending"]["store"]["type"] == "none"

    def test_load_config_example(self):
        """测试加载示例配置文件"""
        config_path = Path(__file__).parent.parent / "config-example.yaml"
        if not config_path.exists():
            pytest.skip("config-example.yaml not found")

        config = load_config(config_path)

        assert "gateway" in config
        assert "models" in config
        assert "trending" in config

    def test_config_missing_file(self, tmp_path):
        """测试加载不存在的配置文件"""
        with pytest.raises(ConfigurationError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_config_invalid_yaml(self, tmp_path):
        """测试格式错误的 YAML"""
        bad = tmp_path / "bad.yaml"
        bad.write_text("gateway: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(bad)

    def test_config_non_dict_root(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == {}


class TestLoadSettings:
    """合并配置测试"""

    def test_defaults_only(self):
        settings = load_settings(None)

        assert settings == DEFAULT_CONFIG
        assert settings is not DEFAULT_CONFIG

    def test_file_overrides_defaults(self, sample_config_file):
        settings = load_settings(sample_config_file)

        assert settings["gateway"]["base_url"] == "https://gateway.test/api/v1"
        # 未覆盖的键保留默认值
        assert settings["gateway"]["title"] == DEFAULT_CONFIG["gateway"]["title"]
        assert settings["models"]["creative"] == "test/creative-model"
        assert settings["models"]["default"] == DEFAULT_CONFIG["models"]["default"]
        assert settings["server"]["port"] == 8080


class TestResolveSecret:
    """凭证解析测试"""

    def test_config_value_wins(self, monkeypatch):
        monkeypatch.setenv("TC_KEY", "from-env")
        section = {"api_key": " from-config ", "api_key_env": "TC_KEY"}

        assert resolve_secret(section, "api_key") == "from-config"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("TC_KEY", "from-env")
        section = {"api_key": None, "api_key_env": "TC_KEY"}

        assert resolve_secret(section, "api_key") == "from-env"

    def test_missing_returns_none(self, monkeypatch):
        monkeypatch.delenv("TC_KEY", raising=False)

        assert resolve_secret({"api_key": "  ", "api_key_env": "TC_KEY"}, "api_key") is None
        assert resolve_secret({}, "api_key") is None
        assert resolve_secret(None, "api_key") is None


class TestHelpers:
    """辅助函数测试"""

    def test_get_nested(self):
        config = {"a": {"b": {"c": 1}}}

        assert get_nested(config, "a", "b", "c") == 1
        assert get_nested(config, "a", "x", default=0) == 0
        assert get_nested(config, "a", "b", "c", "d", default="n") == "n"

    def test_merge_config_no_mutation(self):
        base = {"a": {"b": 1, "c": 2}}
        override = {"a": {"b": 10}, "d": 4}

        merged = merge_config(base, override)

        assert merged == {"a": {"b": 10, "c": 2}, "d": 4}
        assert base == {"a": {"b": 1, "c": 2}}

"""
配置管理模块

本模块提供 TrendCraft 的核心配置功能，包括：
- YAML 配置文件加载与解析
- 默认配置定义与深度合并
- 凭证解析 (配置值优先，其次环境变量)
- 日志系统初始化

配置文件结构:
    ┌─────────────────────────────────────────────────────────────────┐
    │                        config.yaml                               │
    ├─────────────────────────────────────────────────────────────────┤
    │ global:                                                          │
    │   log:                                                           │
    │     level: info                  # 日志级别                      │
    │     format: text                 # 日志格式 (text/json)          │
    │     output: console              # 输出目标 (console/file)       │
    │                                                                  │
    │ gateway:                                                         │
    │   base_url: "https://..."        # Chat Completions 网关根地址   │
    │   api_key_env: OPENROUTER_API_KEY # 凭证环境变量名               │
    │   referer / title                # 调用方标识请求头              │
    │                                                                  │
    │ models:                                                          │
    │   default / creative / analysis  # 三档模型 ID                   │
    │                                                                  │
    │ generation:                                                      │
    │   require_authentication: true   # 生成前要求调用方已认证        │
    │                                                                  │
    │ trending:                                                        │
    │   limit: 10                      # 单次查询最大记录数            │
    │   store:                                                         │
    │     type: rest                   # rest / sqlite / none          │
    │     table: trending_data                                         │
    │                                                                  │
    │ server:                                                          │
    │   host / port                    # HTTP 服务监听地址             │
    └─────────────────────────────────────────────────────────────────┘

凭证解析:
    resolve_secret(section, "api_key") 先读取 section["api_key"]，
    为空时读取 section["api_key_env"] 指定的环境变量。
    凭证缺失不在此处报错，由使用方在发起任何网络请求前抛出 ConfigurationError。

使用示例:
    config = load_settings("config.yaml")
    init_logging(config["global"]["log"])
    api_key = resolve_secret(config["gateway"], "api_key")
"""

import copy
import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml

from ..models.errors import ConfigurationError


# 默认配置值
# 用户配置会深度合并到此默认配置上
DEFAULT_CONFIG: dict[str, Any] = {
    "global": {
        "log": {
            "level": "info",
            "format": "text",
            "output": "console",
            "file_path": "./logs/trendcraft.log",
            "date_format": "%Y-%m-%d %H:%M:%S",
        },
    },
    "gateway": {
        "base_url": "https://openrouter.ai/api/v1",
        "api_key": None,
        "api_key_env": "OPENROUTER_API_KEY",
        "referer": "http://localhost:8080",
        "title": "TrendCraft AI Content Generator",
    },
    "models": {
        "default": "anthropic/claude-3.5-sonnet",
        "creative": "openai/gpt-4o-mini",
        "analysis": "anthropic/claude-3.5-sonnet",
    },
    "generation": {
        "require_authentication": True,
    },
    "trending": {
        "limit": 10,
        "store": {
            "type": "rest",
            "table": "trending_data",
            "url": None,
            "url_env": "SUPABASE_URL",
            "key": None,
            "key_env": "SUPABASE_ANON_KEY",
            "db_path": "./trendcraft.db",
        },
    },
    "server": {
        "host": "0.0.0.0",
        "port": 8080,
    },
}


def load_config(config_path: str | Path) -> dict[str, Any]:
    """
    加载 YAML 配置文件

    Args:
        config_path: 配置文件路径 (相对或绝对路径)

    Returns:
        配置字典 (未与默认配置合并)

    Raises:
        ConfigurationError: 配置文件不存在或格式错误
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError(f"配置文件不存在: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"YAML 解析错误: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"加载配置文件失败: {e}") from e

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ConfigurationError("配置文件格式错误: 根节点必须是字典")

    logging.info(f"配置文件 '{config_path}' 加载成功")
    return config


def load_settings(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    加载并合并配置

    Args:
        config_path: 配置文件路径，None 时只使用默认配置

    Returns:
        与 DEFAULT_CONFIG 深度合并后的完整配置
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    return merge_config(copy.deepcopy(DEFAULT_CONFIG), load_config(config_path))


def resolve_secret(section: dict[str, Any] | None, key: str) -> str | None:
    """
    解析凭证值

    优先使用配置中的 section[key]；为空时读取 section[f"{key}_env"]
    指定的环境变量。两者都为空时返回 None。

    Example:
        >>> resolve_secret({"api_key": None, "api_key_env": "OPENROUTER_API_KEY"}, "api_key")
    """
    if not section:
        return None

    value = section.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()

    env_name = section.get(f"{key}_env")
    if env_name:
        env_value = os.environ.get(env_name, "").strip()
        if env_value:
            return env_value
    return None


def init_logging(log_config: dict[str, Any] | None = None) -> None:
    """
    初始化日志系统

    配置 Python 标准日志库，支持控制台和文件输出，支持 text 和 json 两种格式。

    Args:
        log_config: 日志配置字典，包含以下可选键:
            - level: 日志级别 (debug/info/warning/error)
            - format: 日志格式 (text/json)
            - output: 输出目标 (console/file)
            - file_path: 日志文件路径 (当 output=file 时)
            - date_format: 日期格式

    第三方库日志:
        aiohttp, asyncio, uvicorn 的日志级别设为 WARNING。
    """
    if log_config is None:
        log_config = {}

    level_str = str(log_config.get("level", "info")).upper()
    level = getattr(logging, level_str, logging.INFO)

    log_format_type = log_config.get("format", "text")
    if log_format_type == "json":
        log_format = (
            '{"time": "%(asctime)s", "level": "%(levelname)s", '
            '"name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        log_format = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

    date_format = log_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    output_type = log_config.get("output", "console")

    handlers: list[logging.Handler] = []

    if output_type == "file":
        file_path = log_config.get("file_path", "./logs/trendcraft.log")
        try:
            log_dir = os.path.dirname(file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(logging.FileHandler(file_path, encoding="utf-8"))
        except OSError as e:
            print(f"创建日志文件失败: {e}，回退到控制台", file=sys.stderr)
            output_type = "console"

    if output_type == "console" or not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers,
        force=True,  # 覆盖已有配置
    )

    # 降低第三方库的日志级别，减少干扰
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.info(f"日志系统初始化完成 | 级别: {level_str}, 输出: {output_type}")


def get_nested(config: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    安全获取嵌套配置值

    Example:
        >>> config = {"a": {"b": {"c": 1}}}
        >>> get_nested(config, "a", "b", "c")
        1
        >>> get_nested(config, "a", "x", default=0)
        0
    """
    result = config
    for key in keys:
        if isinstance(result, dict):
            result = result.get(key)
        else:
            return default
        if result is None:
            return default
    return result


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    深度合并配置字典

    递归合并两个字典，override 中的值覆盖 base 中的同名键。

    Returns:
        合并后的配置 (新字典，不修改原始配置)

    Example:
        >>> merge_config({"a": {"b": 1, "c": 2}}, {"a": {"b": 10}})
        {'a': {'b': 10, 'c': 2}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value

    return result

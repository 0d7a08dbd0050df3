"""
配置管理模块

导出清单 (均来自 settings.py):
    函数:
        load_config(config_path) -> dict[str, Any]
            加载 YAML 配置文件并解析为字典
        load_settings(config_path=None) -> dict[str, Any]
            加载配置并与 DEFAULT_CONFIG 深度合并
        resolve_secret(section, key) -> str | None
            解析凭证 (配置值优先，其次环境变量)
        init_logging(log_config) -> None
            初始化日志系统 (支持 text/json 格式, console/file 输出)
        merge_config(base, override) -> dict
            深度合并两个配置字典
        get_nested(config, *keys, default=None) -> Any
            安全获取嵌套字典值
    常量:
        DEFAULT_CONFIG: 默认配置字典

配置层次 (优先级从高到低):
    1. 命令行参数
    2. 配置文件 (config.yaml)
    3. 环境变量 (仅凭证类字段)
    4. 默认配置 (DEFAULT_CONFIG)
"""

from .settings import (
    load_config,
    load_settings,
    resolve_secret,
    init_logging,
    DEFAULT_CONFIG,
    merge_config,
    get_nested,
)

__all__ = [
    "load_config",
    "load_settings",
    "resolve_secret",
    "init_logging",
    "DEFAULT_CONFIG",
    "merge_config",
    "get_nested",
]

"""
TrendCraft HTTP 接口模块

导出:
    create_app(config_path=None, service=None) -> FastAPI
    run_server(config_path=None, host=None, port=None) -> None
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]

"""
AI-DataFlux 测试套件

测试目录结构:
    tests/
    ├── __init__.py
    ├── conftest.py          # pytest fixtures
    ├── test_cli.py          # CLI 入口测试
    ├── test_config.py       # 配置加载测试
    ├── test_engines.py      # 数据引擎测试
    ├── test_validator.py    # JSON 验证器测试
    └── test_integration.py  # 集成测试
"""

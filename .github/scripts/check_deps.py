#!/usr/bin/env python3
"""
检查运行时依赖可用性

CI 脚本：在安装依赖后运行，确认 TrendCraft 的运行时依赖都能导入。

检查流程:
    1. 逐一尝试导入 LIBS 列表中的库
    2. 成功则打印版本号，失败则记录到 missing 列表
    3. 有任何缺失时以非零状态码退出
"""
import sys

# 导入名 -> 发行包名
LIBS = {
    "aiohttp": "aiohttp",
    "yaml": "PyYAML",
    "pydantic": "pydantic",
    "fastapi": "fastapi",
    "uvicorn": "uvicorn",
}

missing = []
for module, package in LIBS.items():
    try:
        mod = __import__(module)
        version = getattr(mod, "__version__", "N/A")
        print(f"✓ {package} {version}")
    except ModuleNotFoundError:
        print(f"✗ {package} (missing)")
        missing.append(package)

if missing:
    print(f"⚠️  Missing runtime dependencies: {', '.join(missing)}", file=sys.stderr)
    sys.exit(1)

"""
TrendCraft - 短视频内容生成与趋势查询服务

子模块:
    - trendcraft.models: 任务、结果、趋势记录与错误分类
    - trendcraft.config: 配置加载与日志初始化
    - trendcraft.core: 模板注册表、网关客户端、输出解析器、生成编排器
    - trendcraft.data: 趋势存储与带回退的查询服务
    - trendcraft.service: 服务容器
    - trendcraft.api: FastAPI HTTP 接口
"""

__version__ = "1.0.0"

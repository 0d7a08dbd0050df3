"""核心生成逻辑模块"""

from .templates import ModelProfile, RequestTemplateRegistry
from .clients import BaseGatewayClient, GatewayClient
from .content import ParseOutcome, StructuredOutputParser
from .orchestrator import GenerationOrchestrator, GenerationOutcome, GenerationState

__all__ = [
    "ModelProfile",
    "RequestTemplateRegistry",
    "BaseGatewayClient",
    "GatewayClient",
    "ParseOutcome",
    "StructuredOutputParser",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "GenerationState",
]

"""
内容处理模块

本模块负责把网关返回的原始文本转换为结构化结果。

类/函数清单:
    StructuredOutputParser:
        - parse(raw_text, kind) -> ParseOutcome
          永不抛异常，总是返回字段齐全的结果
        - attempt_strict(text, shape) -> dict | None
          JSON 解析 + 形状检查
        - heuristic_extract(text, shape) -> (dict, list[str])
          逐行启发式提取 + 默认值填充

    ParseOutcome:
        value / source ("strict" | "heuristic") / defaulted_fields

    OutputShape / FieldSpec / OUTPUT_SHAPES / shape_for:
        每种任务类型的期望形状与默认值
"""

from .parser import ParseOutcome, StructuredOutputParser
from .schemas import OUTPUT_SHAPES, FieldSpec, OutputShape, shape_for

__all__ = [
    "ParseOutcome",
    "StructuredOutputParser",
    "OUTPUT_SHAPES",
    "FieldSpec",
    "OutputShape",
    "shape_for",
]

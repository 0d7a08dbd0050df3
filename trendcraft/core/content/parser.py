"""
结构化输出解析器

本模块把网关返回的原始文本转换为任务期望的结构化结果。
核心契约是「降级但不失败」: parse() 永远不抛异常，总是返回字段齐全、
类型正确的结果，调用方无需做任何空值检查。

处理流程:
    ┌──────────────────────────────────────────────────────────────────┐
    │ attempt_strict                                                    │
    │   原始文本 → (Markdown 代码块提取) → JSON 解析 → 形状检查          │
    │   形状完整且类型正确 → 原样返回 (source = "strict")                │
    └──────────────────────────────────────────────────────────────────┘
                                    ↓ 失败
    ┌──────────────────────────────────────────────────────────────────┐
    │ heuristic_extract                                                 │
    │   1. 从部分有效的 JSON 对象中保留类型正确的字段                     │
    │   2. 逐行扫描: 标量字段取第一条含标签词与 ":" 的行中 ":" 之后的文本 │
    │      列表字段收集所有含标记字符 (如 "#") 的行                      │
    │   3. 仍缺失的字段填充固定默认值 (source = "heuristic")             │
    └──────────────────────────────────────────────────────────────────┘

JSON 预处理 (strict 阶段):
    - 整段文本是唯一的 ```json ... ``` 代码块时，取代码块内容
    - 移除尾部多余逗号: {"a": 1,} → {"a": 1}

使用示例:
    parser = StructuredOutputParser()
    outcome = parser.parse(raw_text, TaskKind.CONTENT_GENERATION)
    outcome.value.title      # 总是存在
    outcome.source           # "strict" 或 "heuristic"
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from .schemas import FieldSpec, OutputShape, shape_for
from ...models.content import StructuredResult
from ...models.task import TaskKind


ParseSource = Literal["strict", "heuristic"]

_FENCED_BLOCK = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_SEPARATOR = ":"


@dataclass(frozen=True)
class ParseOutcome:
    """
    解析结果

    Attributes:
        value: 字段齐全的结构化结果
        source: "strict" 表示原样采用 JSON；"heuristic" 表示经过启发式提取
        defaulted_fields: 使用默认值填充的字段 (JSON 键名)
    """

    value: StructuredResult
    source: ParseSource
    defaulted_fields: tuple[str, ...] = field(default_factory=tuple)

    @property
    def degraded(self) -> bool:
        return self.source == "heuristic"


class StructuredOutputParser:
    """
    结构化输出解析器

    无状态，可在并发调用间共享。
    """

    def parse(self, raw_text: str | None, kind: TaskKind) -> ParseOutcome:
        """
        将原始文本解析为任务期望的结构

        Args:
            raw_text: 网关返回的原始文本 (可以为空字符串)
            kind: 任务类型

        Returns:
            ParseOutcome，永不抛出异常
        """
        shape = shape_for(kind)
        text = raw_text or ""

        strict = self.attempt_strict(text, shape)
        if strict is not None:
            return ParseOutcome(value=shape.build(strict), source="strict")

        values, defaulted = self.heuristic_extract(text, shape)
        if defaulted:
            logging.warning(
                f"结构化解析降级 [{kind}] | 使用默认值的字段: {defaulted}"
            )
        else:
            logging.info(f"结构化解析降级 [{kind}] | 启发式提取恢复了全部字段")
        return ParseOutcome(
            value=shape.build(values),
            source="heuristic",
            defaulted_fields=tuple(defaulted),
        )

    # ==================== 严格路径 ====================

    def attempt_strict(self, text: str, shape: OutputShape) -> dict[str, Any] | None:
        """
        严格解析

        Returns:
            形状完整且类型正确时返回 {key: value}，否则返回 None
        """
        data = _decode_json_object(text)
        if data is None:
            return None

        for spec in shape.fields:
            if spec.key not in data or not spec.accepts(data[spec.key]):
                logging.debug(f"严格解析失败: 字段 '{spec.key}' 缺失或类型错误")
                return None

        return {spec.key: data[spec.key] for spec in shape.fields}

    # ==================== 启发式路径 ====================

    def heuristic_extract(
        self, text: str, shape: OutputShape
    ) -> tuple[dict[str, Any], list[str]]:
        """
        启发式提取

        Returns:
            ({key: value}, 使用默认值的字段列表)，字段总是齐全
        """
        values: dict[str, Any] = {}

        # 部分有效的 JSON 对象: 保留类型正确的字段
        partial = _decode_json_object(text) or {}
        for spec in shape.fields:
            if spec.key in partial and spec.accepts(partial[spec.key]):
                values[spec.key] = partial[spec.key]

        if shape.use_full_text and len(shape.fields) == 1:
            spec = shape.fields[0]
            if spec.key not in values and not partial:
                stripped = text.strip()
                if stripped:
                    values[spec.key] = stripped

        lines = text.splitlines()
        for spec in shape.fields:
            if spec.key in values:
                continue
            recovered = _scan_list(lines, spec) if spec.is_list else _scan_scalar(lines, spec)
            if recovered is not None:
                values[spec.key] = recovered

        defaulted = []
        for spec in shape.fields:
            if spec.key not in values:
                values[spec.key] = spec.default_value()
                defaulted.append(spec.key)

        return values, defaulted


def _decode_json_object(text: str) -> dict[str, Any] | None:
    """解析 JSON 对象，失败或不是对象时返回 None"""
    content = text.strip()
    if not content:
        return None

    fenced = _FENCED_BLOCK.match(content)
    if fenced:
        content = fenced.group(1).strip()

    # 超深嵌套触发 RecursionError，超长整数字面量触发 ValueError
    try:
        data = json.loads(content)
    except (ValueError, RecursionError):
        try:
            data = json.loads(_TRAILING_COMMA.sub(r"\1", content))
        except (ValueError, RecursionError):
            return None

    return data if isinstance(data, dict) else None


def _clean_scalar(value: str) -> str:
    value = value.strip().rstrip(",").strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1].strip()
    return value


def _scan_scalar(lines: list[str], spec: FieldSpec) -> str | None:
    """第一条同时包含标签词与分隔符的行，取分隔符之后的文本"""
    token = spec.label_token
    for line in lines:
        if token in line.lower() and _SEPARATOR in line:
            value = _clean_scalar(line.split(_SEPARATOR, 1)[1])
            return value or None
    return None


def _scan_list(lines: list[str], spec: FieldSpec) -> list[str] | None:
    """收集所有包含标记字符的行"""
    if not spec.marker:
        return None
    items = [line.strip() for line in lines if spec.marker in line]
    return items or None

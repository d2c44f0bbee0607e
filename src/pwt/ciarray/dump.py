"""
CaseInsensitiveArray 的调试输出.

提供:
- dump_text: 类似 var_dump 的多行文本
- dump_json: JSON 文档, 值被归一化为 JSON 友好的结构
- print_dump: 在 rich Console 上输出带样式的文本

所有函数只读取 `inspect()` 的投影, 即原始键与值, 从不暴露归一化令牌,
也不移动数组的内置游标.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from functools import singledispatch
from typing import Any, NamedTuple

from rich.console import Console
from rich.pretty import pretty_repr
from rich.text import Text

from pwt.ciarray.case_insensitive_array import CaseInsensitiveArray


def _header(array: CaseInsensitiveArray[Any]) -> str:
    return f"{type(array).__name__}({len(array)}) {{"


def dump_text(array: CaseInsensitiveArray[Any], *, max_width: int = 80) -> str:
    """
    渲染为 var_dump 风格的文本.

    示例:
        CaseInsensitiveArray(2) {
          [0] => 'One'
          ['ThuNA'] => '3'
        }
    """
    lines = [_header(array)]
    for key, value in array.inspect().items():
        lines.append(f"  [{key!r}] => {pretty_repr(value, max_width=max_width)}")
    lines.append("}")
    return "\n".join(lines)


def print_dump(
    array: CaseInsensitiveArray[Any], console: Console | None = None
) -> None:
    """在 rich Console 上输出调试文本, 键使用高亮样式."""
    console = console or Console()
    text = Text(_header(array))
    for key, value in array.inspect().items():
        text.append("\n  [")
        text.append(repr(key), style="bold cyan")
        text.append("] => ")
        text.append(pretty_repr(value, max_width=console.width))
    text.append("\n}")
    console.print(text, markup=False, highlight=False)


class _Context(NamedTuple):
    max_depth: int
    depth: int


def dump_json(array: CaseInsensitiveArray[Any], *, max_depth: int = 5) -> str:
    """
    渲染为 JSON 文档.

    Args:
        array: 待输出的数组.
        max_depth: 值的最大递归深度(0 表示不限制).

    Returns:
        形如 {"$type", "count", "next_free_index", "entries": [{"key", "value"}]} 的 JSON.
    """
    context = _Context(max_depth, 0)
    document = {
        "$type": type(array).__name__,
        "count": len(array),
        "next_free_index": array.next_free_index,
        "entries": [
            {"key": key, "value": _recurse(value, context)}
            for key, value in array.inspect().items()
        ],
    }
    return json.dumps(document, ensure_ascii=False, indent=2, default=str)


def _recurse(value: Any, context: _Context) -> Any:
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if context.max_depth > 0 and context.depth >= context.max_depth:
        return {"$depth": "<Max depth reached>"}
    return _normalize(value, context._replace(depth=context.depth + 1))


def _normalize_key(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    if isinstance(key, (str, int, float)):
        return str(key)
    return f"<{type(key).__name__}:{key}>"


@singledispatch
def _normalize(value: Any, context: _Context) -> Any:
    """未知对象输出类型名与 str(value)."""
    return {"$type": type(value).__name__, "$value": str(value)}


@_normalize.register(bytes)
@_normalize.register(bytearray)
def _(value: bytes | bytearray, context: _Context) -> Any:
    return {"$type": type(value).__name__, "$hex": value.hex()}


@_normalize.register(CaseInsensitiveArray)
def _(value: CaseInsensitiveArray[Any], context: _Context) -> Any:
    """嵌套数组保留顺序, 以键值对列表输出."""
    return {
        "$type": type(value).__name__,
        "entries": [
            {"key": k, "value": _recurse(v, context)}
            for k, v in value.inspect().items()
        ],
    }


@_normalize.register(Mapping)
def _(value: Mapping, context: _Context) -> Any:
    return {_normalize_key(k): _recurse(v, context) for k, v in value.items()}


@_normalize.register(Iterable)
def _(value: Iterable, context: _Context) -> Any:
    return [_recurse(v, context) for v in value]

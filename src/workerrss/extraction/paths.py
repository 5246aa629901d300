"""路径解析与模板插值.

JSON 响应和规范化后的 XML 都是由 dict / list / 标量组成的嵌套结构，
同一套路径语法对二者通用::

    resolve(data, "data.list[0].title")
    interpolate(item, "PE={pe}, pct={pePercentile}%")

路径来自用户配置，解析失败一律返回空串而不是抛异常。
"""

import json
import re
from typing import Any

TEXT_KEY = "#text"

_INDEX_PATTERN = re.compile(r"\[(\d+)\]")
_PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")


def _step(current: Any, part: str) -> Any:
    """沿路径前进一级."""
    if isinstance(current, dict):
        return current.get(part)
    if isinstance(current, list | str) and part.isdigit():
        index = int(part)
        return current[index] if index < len(current) else None
    return None


def resolve(value: Any, path: str) -> Any:
    """
    按路径取值.

    Args:
        value: 任意嵌套结构
        path: 形如 ``a.b[0].c`` 的路径；``.`` 表示整个值

    Returns:
        原始值（可能是 dict/list）；路径不存在时为空串
    """
    if not path:
        return ""
    if path == ".":
        return value

    try:
        current = value
        for part in _INDEX_PATTERN.sub(r".\1", path).split("."):
            if not part:
                continue
            current = _step(current, part)
            if current is None:
                return ""
        return current
    except Exception:
        return ""


def to_text(value: Any) -> str:
    """把解析结果转为字符串，复合值序列化为 JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict | list):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def resolve_text(value: Any, path: str) -> str:
    """按路径取值并转为字符串."""
    return to_text(resolve(value, path))


def unwrap_text_node(value: Any) -> Any:
    """``{"#text": v}`` 形式的文本节点取出 v."""
    if isinstance(value, dict) and TEXT_KEY in value:
        return value[TEXT_KEY]
    return value


def interpolate(value: Any, template: str) -> str:
    """
    展开模板.

    同时包含 ``{`` 和 ``}`` 时按模板处理，每个 ``{path}`` 替换为对应值；
    否则把整个模板当作路径直接取值。
    """
    if not template:
        return ""

    if "{" in template and "}" in template:
        return _PLACEHOLDER_PATTERN.sub(
            lambda match: to_text(unwrap_text_node(resolve(value, match.group(1).strip()))),
            template,
        )

    return to_text(unwrap_text_node(resolve(value, template)))

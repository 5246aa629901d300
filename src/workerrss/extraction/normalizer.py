"""标记文档（XML/HTML）规范化为嵌套 dict."""

from typing import Any

from bs4 import BeautifulSoup, Tag

from workerrss.extraction.paths import TEXT_KEY


def qualified_name(tag: Tag) -> str:
    """带命名空间前缀的标签名，如 ``content:encoded``."""
    if tag.prefix and ":" not in tag.name:
        return f"{tag.prefix}:{tag.name}"
    return tag.name


def child_tags(tag: Tag) -> list[Tag]:
    """直接子元素（忽略文本、注释）."""
    return [child for child in tag.children if isinstance(child, Tag)]


def normalize(element: Tag) -> Any:
    """
    把元素转换为嵌套结构.

    - 属性以 ``@`` 前缀作为键
    - 无子元素、无属性的叶子节点直接返回去除首尾空白的文本
    - 有属性的叶子节点返回 ``{"@attr": ..., "#text": text}``
    - 同名子元素按出现顺序聚合为列表，只出现一次时保持单值
    """
    obj: dict[str, Any] = {}
    for name, value in element.attrs.items():
        obj[f"@{name}"] = " ".join(value) if isinstance(value, list) else value

    children = child_tags(element)
    if not children:
        text = element.get_text().strip()
        if not obj:
            return text
        obj[TEXT_KEY] = text
        return obj

    for child in children:
        key = qualified_name(child)
        value = normalize(child)
        if key not in obj:
            obj[key] = value
        elif isinstance(obj[key], list):
            obj[key].append(value)
        else:
            obj[key] = [obj[key], value]

    return obj


def parse_markup(text: str, features: str = "xml") -> dict[str, Any]:
    """解析标记文本，返回 ``{根标签名: 规范化结果}``；空文档返回空 dict."""
    soup = BeautifulSoup(text, features)
    root = soup.find(True, recursive=False)
    if root is None:
        return {}
    return {qualified_name(root): normalize(root)}

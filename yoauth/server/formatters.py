"""响应格式化器

把响应参数字典序列化为 JSON / XML / 表单编码文本。
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import urlencode
from xml.etree import ElementTree


class Formatter(ABC):
    """格式化器基类"""

    name: str = ""
    content_type: str = ""

    @abstractmethod
    def format(self, params: Dict[str, Any]) -> str:
        pass


class JSONFormatter(Formatter):
    name = "json"
    content_type = "application/json"

    def format(self, params: Dict[str, Any]) -> str:
        return json.dumps(params, ensure_ascii=False)


class XMLFormatter(Formatter):
    """XML 格式化器

    输出形如 ``<OAuth><access_token>...</access_token></OAuth>``。
    """

    name = "xml"
    content_type = "application/xml"

    def format(self, params: Dict[str, Any]) -> str:
        root = ElementTree.Element("OAuth")
        for key, value in params.items():
            ElementTree.SubElement(root, key).text = str(value)
        body = ElementTree.tostring(root, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>' + body


class FormFormatter(Formatter):
    name = "form"
    content_type = "application/x-www-form-urlencoded"

    def format(self, params: Dict[str, Any]) -> str:
        return urlencode([(key, str(value)) for key, value in params.items()])


_FORMATTERS: Dict[str, Formatter] = {
    formatter.name: formatter
    for formatter in (JSONFormatter(), XMLFormatter(), FormFormatter())
}


def get_formatter_by_name(name: Optional[str]) -> Optional[Formatter]:
    """按名称获取格式化器，未知名称返回 None"""
    if not name:
        return None
    return _FORMATTERS.get(name.lower())

"""测试响应格式化器"""

import json
from urllib.parse import parse_qs
from xml.etree import ElementTree

from yoauth.server import FormFormatter, JSONFormatter, XMLFormatter, get_formatter_by_name


PARAMS = {"access_token": "abc", "expires_in": 3600}


def test_json():
    assert json.loads(JSONFormatter().format(PARAMS)) == PARAMS


def test_xml():
    body = XMLFormatter().format(PARAMS)

    assert body.startswith("<?xml")
    root = ElementTree.fromstring(body.split("?>", 1)[1])
    assert root.tag == "OAuth"
    assert root.find("access_token").text == "abc"
    assert root.find("expires_in").text == "3600"


def test_form():
    parsed = parse_qs(FormFormatter().format(PARAMS))

    assert parsed == {"access_token": ["abc"], "expires_in": ["3600"]}


def test_get_formatter_by_name():
    assert isinstance(get_formatter_by_name("json"), JSONFormatter)
    assert isinstance(get_formatter_by_name("XML"), XMLFormatter)
    assert get_formatter_by_name("yaml") is None
    assert get_formatter_by_name(None) is None
    assert get_formatter_by_name("") is None

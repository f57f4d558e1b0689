"""请求上下文

每个 Token 请求创建一个 Context，包含请求参数和本次请求专用的数据处理器。
Context 不可变，请求结束后即丢弃，不在请求之间共享。
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .data_handler import DataHandler


class RequestParams:
    """请求参数构造工具"""

    @staticmethod
    def from_pairs(pairs: Iterable[Tuple[str, str]]) -> Mapping[str, str]:
        """由键值对序列构造只读参数映射

        同名参数只保留第一次出现的值。

        使用示例:
            params = RequestParams.from_pairs(
                list(request.query_params.multi_items()) + list(form.multi_items())
            )
        """
        params = {}
        for key, value in pairs:
            if key not in params:
                params[key] = value
        return MappingProxyType(params)


@dataclass(frozen=True)
class Context:
    """Token 请求上下文

    Attributes:
        params: 请求参数（只读）
        data_handler: 本次请求专用的数据处理器

    使用示例:
        ctx = Context(params={"client_id": "foo"}, data_handler=handler)
        ctx.client_id          # "foo"
        ctx.param("scope")     # None
    """
    params: Mapping[str, str]
    data_handler: DataHandler

    def __post_init__(self):
        if not isinstance(self.params, MappingProxyType):
            object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def param(self, name: str) -> Optional[str]:
        """读取请求参数，缺失或为空字符串时返回 None"""
        value = self.params.get(name)
        if value is None or value == "":
            return None
        return value

    def get_data_handler(self) -> DataHandler:
        return self.data_handler

    @property
    def type(self) -> Optional[str]:
        return self.param("type")

    @property
    def format(self) -> Optional[str]:
        return self.param("format")

    @property
    def client_id(self) -> Optional[str]:
        return self.param("client_id")

    @property
    def client_secret(self) -> Optional[str]:
        return self.param("client_secret")

    @property
    def secret_type(self) -> Optional[str]:
        return self.param("secret_type")

    @property
    def scope(self) -> Optional[str]:
        return self.param("scope")

    @property
    def code(self) -> Optional[str]:
        return self.param("code")

    @property
    def redirect_uri(self) -> Optional[str]:
        return self.param("redirect_uri")

    @property
    def refresh_token(self) -> Optional[str]:
        return self.param("refresh_token")

    @property
    def state(self) -> Optional[str]:
        return self.param("state")

    @property
    def immediate(self) -> Optional[str]:
        return self.param("immediate")

    @property
    def username(self) -> Optional[str]:
        return self.param("username")

    @property
    def password(self) -> Optional[str]:
        return self.param("password")

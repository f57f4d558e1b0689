"""OAuth 2.0 服务端异常定义

定义 Token 端点使用的异常体系。

所有可以直接返回给客户端的错误都继承自 ServerError，并携带一个
ErrorKind 枚举值。ErrorKind 的值即为协议层的错误代码，分发器只根据
kind 决定 HTTP 状态码，不依赖具体的异常类型。
"""

from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorKind(str, Enum):
    """服务端错误类型

    枚举值即为响应体中 ``error`` 字段的取值。
    继承自 str，可以直接与字符串比较。

    使用示例:
        if exc.kind == ErrorKind.INVALID_CLIENT:
            ...

        assert ErrorKind.MISSING_PARAM == "invalid_request"
    """

    # 必填参数缺失
    MISSING_PARAM = "invalid_request"
    # 客户端认证失败（未知客户端或密钥错误）
    INVALID_CLIENT = "invalid_client"
    # 授权码 / 刷新令牌无效、过期或已撤销
    INVALID_GRANT = "invalid_grant"
    # type 参数没有对应的已注册授权流程
    UNSUPPORTED_TYPE = "unsupported_grant_type"
    # secret_type 参数指定的算法服务端不支持
    UNSUPPORTED_SECRET_TYPE = "unsupported_secret_type"


ErrorKindType = Union[str, ErrorKind]


class ServerError(Exception):
    """服务端错误基类

    表示可以安全地以 OAuth 错误格式返回给客户端的失败。
    其它任何异常（程序缺陷、存储故障等）都不应继承此类。

    属性:
        kind: 错误类型（ErrorKind）
        message: 错误描述（面向客户端，不得包含内部细节）
        extra: 额外的上下文信息，仅用于日志

    使用示例:
        raise ServerError(ErrorKind.INVALID_GRANT, "refresh token expired")
    """

    kind: ErrorKind = ErrorKind.MISSING_PARAM

    def __init__(
        self,
        kind: Optional[ErrorKindType] = None,
        message: str = "",
        **extra: Any
    ):
        if kind is not None:
            self.kind = ErrorKind(kind)
        self.message = message
        self.extra = extra
        super().__init__(message or self.kind.value)

    @property
    def code(self) -> str:
        """协议层错误代码"""
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        """转换为错误响应体

        Returns:
            ``{"error": code, "error_description": message}``，
            message 为空时省略 error_description
        """
        body = {"error": self.code}
        if self.message:
            body["error_description"] = self.message
        return body

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"kind={self.kind.value!r}, "
            f"message={self.message!r})"
        )


class MissingParam(ServerError):
    """必填参数缺失

    使用示例:
        raise MissingParam("'client_id' not found", param="client_id")
    """

    kind = ErrorKind.MISSING_PARAM

    def __init__(self, message: str = "missing parameter", **extra: Any):
        super().__init__(message=message, **extra)


class InvalidClient(ServerError):
    """客户端认证失败

    未知的 client_id 与错误的 client_secret 使用同一条消息，
    避免通过错误信息枚举客户端。
    """

    kind = ErrorKind.INVALID_CLIENT

    def __init__(self, message: str = "invalid client credentials", **extra: Any):
        super().__init__(message=message, **extra)


class InvalidGrant(ServerError):
    """授权无效（授权码、刷新令牌、用户凭证）"""

    kind = ErrorKind.INVALID_GRANT

    def __init__(self, message: str = "invalid grant", **extra: Any):
        super().__init__(message=message, **extra)


class UnsupportedType(ServerError):
    """不支持的授权类型"""

    kind = ErrorKind.UNSUPPORTED_TYPE

    def __init__(self, message: str = "unsupported type", **extra: Any):
        super().__init__(message=message, **extra)


class UnsupportedSecretType(ServerError):
    """不支持的 secret_type"""

    kind = ErrorKind.UNSUPPORTED_SECRET_TYPE

    def __init__(self, message: str = "unsupported secret type", **extra: Any):
        super().__init__(message=message, **extra)


# 遗留模式：所有服务端错误都返回 401（与旧客户端保持线上兼容）
LEGACY_STATUS_CODES: Dict[ErrorKind, int] = {kind: 401 for kind in ErrorKind}

# 标准模式：按 RFC 6749 5.2 节区分 400 / 401
STANDARD_STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.MISSING_PARAM: 400,
    ErrorKind.INVALID_CLIENT: 401,
    ErrorKind.INVALID_GRANT: 400,
    ErrorKind.UNSUPPORTED_TYPE: 400,
    ErrorKind.UNSUPPORTED_SECRET_TYPE: 400,
}


def status_for_kind(kind: ErrorKindType, strict: bool = False) -> int:
    """根据错误类型返回 HTTP 状态码

    Args:
        kind: 错误类型
        strict: 是否使用标准状态码，默认使用遗留的 401

    Returns:
        HTTP 状态码
    """
    table = STANDARD_STATUS_CODES if strict else LEGACY_STATUS_CODES
    return table[ErrorKind(kind)]


class OAuthErr:
    """异常快捷创建类

    统一的服务端错误创建入口，保证同类错误的消息格式一致。

    使用示例:
        from yoauth.exceptions import OAuthErr

        raise OAuthErr.missing_param("client_id")
        raise OAuthErr.invalid_client()
        raise OAuthErr.unsupported_secret_type("hmac-sha1")
    """

    @staticmethod
    def missing_param(name: str) -> MissingParam:
        """必填参数缺失，消息中包含参数名"""
        return MissingParam(f"'{name}' not found", param=name)

    @staticmethod
    def invalid_client() -> InvalidClient:
        """客户端认证失败

        不接受自定义消息，未知客户端和密钥错误必须不可区分。
        """
        return InvalidClient()

    @staticmethod
    def invalid_grant(message: str = "invalid grant", **kwargs) -> InvalidGrant:
        """授权无效"""
        return InvalidGrant(message, **kwargs)

    @staticmethod
    def unsupported_type(type_name: str) -> UnsupportedType:
        """不支持的授权类型"""
        return UnsupportedType(f'unsupported type, "{type_name}"', type=type_name)

    @staticmethod
    def unsupported_secret_type(secret_type: str) -> UnsupportedSecretType:
        """不支持的 secret_type"""
        return UnsupportedSecretType(
            f'unsupported secret type, "{secret_type}"',
            secret_type=secret_type,
        )

"""异常处理模块

提供 Token 端点的错误类型体系和 FastAPI 全局异常处理器。

使用示例:
    from yoauth.exceptions import OAuthErr, ServerError, ErrorKind

    # 在授权处理中抛出
    raise OAuthErr.missing_param("client_id")

    # 在边界处根据 kind 判断
    try:
        ...
    except ServerError as exc:
        if exc.kind == ErrorKind.INVALID_CLIENT:
            ...
"""

from .exceptions import (
    # ===== 推荐使用 =====
    OAuthErr,                       # 异常快捷创建类
    ErrorKind,                      # 错误类型枚举（值即协议错误代码）
    ErrorKindType,
    status_for_kind,

    # ===== 高级用法 =====
    ServerError,                    # 服务端错误基类
    MissingParam,
    InvalidClient,
    InvalidGrant,
    UnsupportedType,
    UnsupportedSecretType,
    LEGACY_STATUS_CODES,
    STANDARD_STATUS_CODES,
)

from .handlers import (
    register_exception_handlers,
    server_error_handler,
    general_exception_handler,
    NO_CACHE_HEADERS,
)

__all__ = [
    "OAuthErr",
    "ErrorKind",
    "ErrorKindType",
    "status_for_kind",
    "ServerError",
    "MissingParam",
    "InvalidClient",
    "InvalidGrant",
    "UnsupportedType",
    "UnsupportedSecretType",
    "LEGACY_STATUS_CODES",
    "STANDARD_STATUS_CODES",
    "register_exception_handlers",
    "server_error_handler",
    "general_exception_handler",
    "NO_CACHE_HEADERS",
]

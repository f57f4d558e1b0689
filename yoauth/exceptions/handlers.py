"""全局异常处理器

在传输层边界把异常转换为 HTTP 响应：

- ServerError: 转换为 OAuth 错误格式（通常已由 TokenEndpoint 处理，
  这里兜底处理在端点之外抛出的情况）
- 其它异常: 记录完整堆栈，返回不含任何内部细节的 500 响应
"""

import sys
import traceback

from fastapi import Request
from fastapi.responses import JSONResponse

from yoauth.log import get_logger
from .exceptions import ServerError, status_for_kind

logger = get_logger()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
}


async def server_error_handler(request: Request, exc: ServerError) -> JSONResponse:
    """服务端错误处理器

    Args:
        request: FastAPI 请求对象
        exc: 服务端错误

    Returns:
        JSON 响应
    """
    strict = getattr(request.app.state, "strict_status_codes", False)

    logger.warning(
        f"OAuth error occurred: {exc.code} - {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_code": exc.code,
        }
    )

    return JSONResponse(
        status_code=status_for_kind(exc.kind, strict=strict),
        content=exc.to_dict(),
        headers=NO_CACHE_HEADERS,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """通用异常处理器

    最后一道防线：记录详细错误日志，向客户端只返回通用的失败信息。

    Args:
        request: FastAPI 请求对象
        exc: 异常实例

    Returns:
        JSON 响应
    """
    exc_type, exc_value, exc_traceback = sys.exc_info()
    if exc_value is None:
        exc_type, exc_value, exc_traceback = type(exc), exc, exc.__traceback__
    full_traceback = "".join(
        traceback.format_exception(exc_type, exc_value, exc_traceback)
    )

    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "traceback": full_traceback,
        }
    )

    return JSONResponse(
        status_code=500,
        content={"error": "server_error"},
        headers=NO_CACHE_HEADERS,
    )


def register_exception_handlers(app, strict_status_codes: bool = False) -> None:
    """注册异常处理器到 FastAPI 应用

    使用示例:
        from fastapi import FastAPI
        from yoauth.exceptions import register_exception_handlers

        app = FastAPI()
        register_exception_handlers(app)

    Args:
        app: FastAPI 应用实例
        strict_status_codes: 是否使用标准状态码映射
    """
    app.state.strict_status_codes = strict_status_codes

    app.add_exception_handler(ServerError, server_error_handler)

    # 通用异常处理器（必须放在最后）
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered successfully")

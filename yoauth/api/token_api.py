"""Token 端点路由

把 TokenEndpoint 挂载到 FastAPI 上。

端点列表：
    GET  /token   - 参数来自查询字符串
    POST /token   - 参数来自查询字符串和表单（查询字符串优先）

使用示例::

    from fastapi import FastAPI
    from yoauth.api import create_token_router
    from yoauth.exceptions import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_token_router(endpoint), prefix="/oauth2")
"""

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from ..server.context import RequestParams
from ..server.endpoint import TokenEndpoint


def create_token_router(
    endpoint: TokenEndpoint,
    path: str = "/token",
    prefix: str = "",
    tags: list = None,
) -> APIRouter:
    """创建 Token 端点路由

    Args:
        endpoint: Token 端点
        path: 端点路径
        prefix: 路由前缀
        tags: OpenAPI 标签

    Returns:
        APIRouter: FastAPI 路由
    """
    router = APIRouter(prefix=prefix, tags=tags or ["OAuth2"])

    async def _collect_params(request: Request):
        pairs = list(request.query_params.multi_items())
        if request.method == "POST":
            content_type = request.headers.get("content-type", "")
            if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
                form = await request.form()
                pairs.extend(
                    (key, value) for key, value in form.multi_items()
                    if isinstance(value, str)
                )
        return RequestParams.from_pairs(pairs)

    @router.api_route(path, methods=["GET", "POST"])
    async def token(request: Request):
        """Token 端点

        数据处理器可能执行阻塞 I/O，分发在线程池中执行。
        """
        params = await _collect_params(request)
        result = await run_in_threadpool(endpoint.handle_request, params)
        return Response(
            content=result.body,
            status_code=result.status_code,
            headers={k: v for k, v in result.headers.items() if k != "Content-Type"},
            media_type=result.content_type,
        )

    return router


def create_token_router_from_settings(
    endpoint: TokenEndpoint,
    settings,
    prefix: str = "",
    tags: list = None,
) -> APIRouter:
    """按 TokenEndpointSettings 创建 Token 端点路由

    使用示例::

        settings = load_yaml_config("config/settings.yaml", AppSettings)
        store = MemoryStore.from_settings(settings.token)
        endpoint = TokenEndpoint.from_settings(settings.token, MemoryDataHandler.factory(store))
        app.include_router(create_token_router_from_settings(endpoint, settings.token))
    """
    return create_token_router(endpoint, path=settings.path, prefix=prefix, tags=tags)

"""HTTP 路由模块

使用示例:
    from yoauth.api import create_token_router

    app.include_router(create_token_router(endpoint))
"""

from .token_api import create_token_router, create_token_router_from_settings

__all__ = [
    "create_token_router",
    "create_token_router_from_settings",
]

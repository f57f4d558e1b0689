"""OAuth 2.0 Token 端点核心

组成（由底向上）:
    - DataHandler / AuthInfo: 存储与凭证接口，由业务方实现
    - Context: 单次请求的只读上下文
    - GrantAction: 每种授权类型的处理策略
    - FlowRegistry: 授权流程名称 -> 端点动作
    - TokenEndpoint: 分发请求并生成响应

使用示例:
    from yoauth.server import TokenEndpoint, MemoryStore, MemoryDataHandler

    store = MemoryStore()
    store.register_client("foo", "bar")

    endpoint = TokenEndpoint(MemoryDataHandler.factory(store))
    endpoint.support_flow("client_credentials")

    response = endpoint.handle_request({
        "type": "client_credentials",
        "client_id": "foo",
        "client_secret": "bar",
    })
"""

from .data_handler import AuthInfo, DataHandler
from .context import Context, RequestParams
from .token import TokenResult
from .actions import (
    GrantAction,
    ClientCredentialsAction,
    RefreshTokenAction,
    AuthorizationCodeAction,
    PasswordAction,
)
from .flows import (
    Flow,
    FlowRegistry,
    create_default_flow_registry,
    default_flow_registry,
)
from .formatters import (
    Formatter,
    JSONFormatter,
    XMLFormatter,
    FormFormatter,
    get_formatter_by_name,
)
from .endpoint import TokenEndpoint, TokenResponse
from .memory import MemoryStore, MemoryDataHandler

__all__ = [
    # Data handler
    "AuthInfo",
    "DataHandler",

    # Context
    "Context",
    "RequestParams",

    # Actions
    "TokenResult",
    "GrantAction",
    "ClientCredentialsAction",
    "RefreshTokenAction",
    "AuthorizationCodeAction",
    "PasswordAction",

    # Flows
    "Flow",
    "FlowRegistry",
    "create_default_flow_registry",
    "default_flow_registry",

    # Formatters
    "Formatter",
    "JSONFormatter",
    "XMLFormatter",
    "FormFormatter",
    "get_formatter_by_name",

    # Endpoint
    "TokenEndpoint",
    "TokenResponse",

    # Memory
    "MemoryStore",
    "MemoryDataHandler",
]

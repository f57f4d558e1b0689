"""
YOAuth - OAuth 2.0 Token 端点核心库

提供授权类型分发、客户端凭证校验、错误体系，以及 FastAPI 集成、日志和配置等基础功能
"""

__version__ = "0.1.0"

# 导出异常模块
from .exceptions import (
    OAuthErr,
    ErrorKind,
    ServerError,
    MissingParam,
    InvalidClient,
    InvalidGrant,
    UnsupportedType,
    UnsupportedSecretType,
    status_for_kind,
    register_exception_handlers,
)

# 导出核心模块
from .server import (
    AuthInfo,
    DataHandler,
    Context,
    TokenResult,
    GrantAction,
    ClientCredentialsAction,
    RefreshTokenAction,
    AuthorizationCodeAction,
    PasswordAction,
    Flow,
    FlowRegistry,
    default_flow_registry,
    TokenEndpoint,
    TokenResponse,
    MemoryStore,
    MemoryDataHandler,
)

# 导出路由
from .api import create_token_router, create_token_router_from_settings

# 导出日志模块
from .log import (
    setup_logger,
    setup_root_logger,
    get_logger,
    log_filter_hook_manager,
)

# 导出配置模块
from .config import (
    AppSettings,
    TokenEndpointSettings,
    LoggingSettings,
    load_yaml_config,
)

__all__ = [
    "__version__",

    # 异常
    "OAuthErr",
    "ErrorKind",
    "ServerError",
    "MissingParam",
    "InvalidClient",
    "InvalidGrant",
    "UnsupportedType",
    "UnsupportedSecretType",
    "status_for_kind",
    "register_exception_handlers",

    # 核心
    "AuthInfo",
    "DataHandler",
    "Context",
    "TokenResult",
    "GrantAction",
    "ClientCredentialsAction",
    "RefreshTokenAction",
    "AuthorizationCodeAction",
    "PasswordAction",
    "Flow",
    "FlowRegistry",
    "default_flow_registry",
    "TokenEndpoint",
    "TokenResponse",
    "MemoryStore",
    "MemoryDataHandler",

    # 路由
    "create_token_router",
    "create_token_router_from_settings",

    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",
    "log_filter_hook_manager",

    # 配置
    "AppSettings",
    "TokenEndpointSettings",
    "LoggingSettings",
    "load_yaml_config",
]

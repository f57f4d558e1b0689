"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 内存存储（已注册客户端 foo / bar）
- Token 端点
- 请求上下文构造工具
"""

import pytest

from yoauth.server import (
    Context,
    MemoryDataHandler,
    MemoryStore,
    TokenEndpoint,
    create_default_flow_registry,
)


CLIENT_ID = "foo"
CLIENT_SECRET = "bar"


@pytest.fixture
def store():
    """已注册客户端 foo/bar 和用户 alice 的内存存储"""
    _store = MemoryStore(access_token_expires_in=3600, supported_secret_types=["hmac-sha256"])
    _store.register_client(CLIENT_ID, CLIENT_SECRET)
    _store.register_client("other", "other-secret")
    _store.register_user("alice", "wonderland", user_id=1)
    return _store


@pytest.fixture
def make_ctx(store):
    """创建请求上下文的工厂函数"""

    def _make_ctx(**params) -> Context:
        return Context(params=params, data_handler=MemoryDataHandler(store))

    return _make_ctx


@pytest.fixture
def registry():
    """独立的流程注册表，避免修改全局注册表"""
    return create_default_flow_registry()


@pytest.fixture
def endpoint(store, registry):
    """支持 client_credentials 的 Token 端点（refresh_token 默认开启）"""
    _endpoint = TokenEndpoint(MemoryDataHandler.factory(store), registry=registry)
    _endpoint.support_flow("client_credentials")
    return _endpoint

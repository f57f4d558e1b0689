"""测试授权流程注册表"""

import pytest

from yoauth.server import (
    AuthorizationCodeAction,
    ClientCredentialsAction,
    Flow,
    FlowRegistry,
    PasswordAction,
    RefreshTokenAction,
)


class TestFlow:
    """Flow 测试"""

    def test_actions(self):
        flow = Flow("client_credentials", {"client_credentials": ClientCredentialsAction})

        assert flow.token_endpoint_actions == ["client_credentials"]
        assert isinstance(
            flow.get_token_endpoint_action("client_credentials"), ClientCredentialsAction
        )

    def test_unknown_action(self):
        flow = Flow("client_credentials", {"client_credentials": ClientCredentialsAction})

        assert flow.get_token_endpoint_action("password") is None

    def test_empty_flow_rejected(self):
        with pytest.raises(ValueError):
            Flow("empty", {})


class TestFlowRegistry:
    """FlowRegistry 测试"""

    def test_register_and_get(self):
        registry = FlowRegistry()
        flow = Flow("password", {"password": PasswordAction})
        registry.register("password", flow)

        assert registry.get_flow("password") is flow
        assert registry.get_flow("unknown") is None
        assert registry.flow_names() == ["password"]

    def test_register_after_freeze(self):
        registry = FlowRegistry()
        registry.freeze()

        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.register("password", Flow("password", {"password": PasswordAction}))

    def test_builtin_flows(self, registry):
        """测试内置流程"""
        names = registry.flow_names()

        for name in ("client_credentials", "refresh_token", "refresh", "authorization_code",
                     "web_server", "password", "username"):
            assert name in names

    def test_legacy_aliases(self, registry):
        """测试旧草案名称映射到相同的处理"""
        web_server = registry.get_flow("web_server").get_token_endpoint_action("web_server")
        username = registry.get_flow("username").get_token_endpoint_action("username")

        assert isinstance(web_server, AuthorizationCodeAction)
        assert web_server.grant_type == "web_server"
        assert isinstance(username, PasswordAction)
        assert username.grant_type == "username"

    def test_legacy_refresh_alias(self, registry):
        refresh = registry.get_flow("refresh").get_token_endpoint_action("refresh")

        assert isinstance(refresh, RefreshTokenAction)
        assert refresh.grant_type == "refresh"

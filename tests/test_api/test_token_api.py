"""测试 Token 端点路由

通过 FastAPI TestClient 发送 GET / POST 请求。
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from yoauth.api import create_token_router, create_token_router_from_settings
from yoauth.config import TokenEndpointSettings
from yoauth.exceptions import register_exception_handlers
from yoauth.server import MemoryDataHandler, TokenEndpoint


@pytest.fixture
def client(endpoint):
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_token_router(endpoint), prefix="/oauth2")
    return TestClient(app, raise_server_exceptions=False)


class TestTokenRoute:
    """Token 路由测试"""

    def test_get_with_query_string(self, client):
        response = client.get("/oauth2/token", params={
            "type": "client_credentials", "client_id": "foo", "client_secret": "bar",
        })

        assert response.status_code == 200
        assert response.json()["expires_in"] == 3600
        assert response.headers["cache-control"] == "no-store"
        assert response.headers["pragma"] == "no-cache"
        assert response.headers["content-type"].startswith("application/json")

    def test_post_form(self, client):
        response = client.post("/oauth2/token", data={
            "type": "client_credentials", "client_id": "foo", "client_secret": "bar",
        })

        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_query_string_wins_over_form(self, client):
        """测试查询字符串中的参数优先于表单"""
        response = client.post(
            "/oauth2/token?type=client_credentials",
            data={"type": "password", "client_id": "foo", "client_secret": "bar"},
        )

        assert response.status_code == 200

    def test_error_response(self, client):
        response = client.post("/oauth2/token", data={
            "type": "client_credentials", "client_id": "foo", "client_secret": "wrong",
        })

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_client"

    def test_xml_format(self, client):
        response = client.get("/oauth2/token", params={
            "type": "client_credentials", "client_id": "foo", "client_secret": "bar",
            "format": "xml",
        })

        assert response.headers["content-type"].startswith("application/xml")
        assert "<OAuth>" in response.text

    def test_internal_error_returns_500(self, store, registry):
        class BrokenHandler(MemoryDataHandler):
            def get_client_secret(self, client_id):
                raise RuntimeError("store unavailable")

        endpoint = TokenEndpoint(lambda: BrokenHandler(store), registry=registry)
        endpoint.support_flow("client_credentials")
        app = FastAPI()
        register_exception_handlers(app)
        app.include_router(create_token_router(endpoint))
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/token", params={
            "type": "client_credentials", "client_id": "foo", "client_secret": "bar",
        })

        assert response.status_code == 500
        assert response.json() == {"error": "server_error"}


class TestTokenRouteFromSettings:
    """按配置创建路由测试"""

    def test_path_from_settings(self, endpoint):
        settings = TokenEndpointSettings(path="/oauth/access_token")
        app = FastAPI()
        register_exception_handlers(app)
        app.include_router(create_token_router_from_settings(endpoint, settings))
        client = TestClient(app)

        response = client.post("/oauth/access_token", data={
            "type": "client_credentials", "client_id": "foo", "client_secret": "bar",
        })

        assert response.status_code == 200
        assert client.post("/token", data={"type": "client_credentials"}).status_code == 404

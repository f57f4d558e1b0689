"""测试授权处理

测试内容：
- 校验顺序（client_id -> client_secret -> 凭证 -> secret_type -> 授权参数）
- client_credentials / refresh_token / authorization_code / password
"""

import pytest

from yoauth.exceptions import (
    ErrorKind,
    InvalidClient,
    InvalidGrant,
    MissingParam,
    UnsupportedSecretType,
)
from yoauth.server import (
    AuthorizationCodeAction,
    ClientCredentialsAction,
    PasswordAction,
    RefreshTokenAction,
)


class TestValidationOrder:
    """校验顺序测试"""

    def test_missing_client_id_first(self, make_ctx):
        """测试 client_id 缺失先于其它任何错误"""
        ctx = make_ctx(secret_type="hmac-sha1")

        with pytest.raises(MissingParam) as exc_info:
            ClientCredentialsAction().handle_request(ctx)

        assert exc_info.value.extra["param"] == "client_id"

    def test_missing_client_secret(self, make_ctx):
        ctx = make_ctx(client_id="foo")

        with pytest.raises(MissingParam) as exc_info:
            ClientCredentialsAction().handle_request(ctx)

        assert exc_info.value.extra["param"] == "client_secret"

    def test_empty_client_secret_is_missing(self, make_ctx):
        """测试空字符串视为缺失"""
        ctx = make_ctx(client_id="foo", client_secret="")

        with pytest.raises(MissingParam):
            ClientCredentialsAction().handle_request(ctx)

    def test_invalid_client_before_secret_type(self, make_ctx):
        """测试凭证错误先于 secret_type 检查"""
        ctx = make_ctx(client_id="foo", client_secret="wrong", secret_type="hmac-sha1")

        with pytest.raises(InvalidClient):
            ClientCredentialsAction().handle_request(ctx)

    def test_secret_type_before_grant_params(self, make_ctx):
        """测试 secret_type 检查先于授权参数"""
        ctx = make_ctx(client_id="foo", client_secret="bar", secret_type="hmac-sha1")

        with pytest.raises(UnsupportedSecretType):
            RefreshTokenAction().handle_request(ctx)

    def test_unknown_client_and_wrong_secret_indistinguishable(self, make_ctx):
        """测试未知客户端和密钥错误返回相同的错误"""
        action = ClientCredentialsAction()

        with pytest.raises(InvalidClient) as unknown:
            action.handle_request(make_ctx(client_id="nobody", client_secret="bar"))
        with pytest.raises(InvalidClient) as wrong:
            action.handle_request(make_ctx(client_id="foo", client_secret="baz"))

        assert unknown.value.to_dict() == wrong.value.to_dict()


class TestClientCredentialsAction:
    """client_credentials 测试"""

    def test_issue_token(self, make_ctx):
        result = ClientCredentialsAction().handle_request(
            make_ctx(client_id="foo", client_secret="bar")
        )

        assert result.access_token
        assert result.refresh_token
        assert result.expires_in == 3600
        assert result.access_token_secret is None
        assert result.secret_type is None

    def test_repeat_issues_new_tokens(self, make_ctx):
        """测试重复请求签发新的令牌"""
        action = ClientCredentialsAction()
        first = action.handle_request(make_ctx(client_id="foo", client_secret="bar"))
        second = action.handle_request(make_ctx(client_id="foo", client_secret="bar"))

        assert first.access_token != second.access_token
        assert first.refresh_token != second.refresh_token

    def test_with_secret_type(self, make_ctx):
        result = ClientCredentialsAction().handle_request(
            make_ctx(client_id="foo", client_secret="bar", secret_type="hmac-sha256")
        )

        assert result.access_token_secret
        assert result.secret_type == "hmac-sha256"

    def test_unsupported_secret_type(self, make_ctx):
        with pytest.raises(UnsupportedSecretType) as exc_info:
            ClientCredentialsAction().handle_request(
                make_ctx(client_id="foo", client_secret="bar", secret_type="hmac-sha1")
            )

        assert exc_info.value.code == "unsupported_secret_type"

    def test_scope_passed_through(self, make_ctx):
        result = ClientCredentialsAction().handle_request(
            make_ctx(client_id="foo", client_secret="bar", scope="read write")
        )

        assert result.scope == "read write"

    def test_validate_client_receives_grant_type(self, make_ctx, store):
        """测试 validate_client 收到本次授权类型"""
        from yoauth.server import Context, MemoryDataHandler

        seen = []

        class RecordingHandler(MemoryDataHandler):
            def validate_client(self, client_id, client_secret, grant_type):
                seen.append(grant_type)
                return super().validate_client(client_id, client_secret, grant_type)

        ctx = Context(
            params={"client_id": "foo", "client_secret": "bar"},
            data_handler=RecordingHandler(store),
        )
        ClientCredentialsAction().handle_request(ctx)

        assert seen == ["client_credentials"]


class TestRefreshTokenAction:
    """refresh_token 测试"""

    def _issue(self, make_ctx):
        return ClientCredentialsAction().handle_request(
            make_ctx(client_id="foo", client_secret="bar")
        )

    def test_refresh(self, make_ctx):
        issued = self._issue(make_ctx)

        result = RefreshTokenAction().handle_request(make_ctx(
            client_id="foo", client_secret="bar", refresh_token=issued.refresh_token,
        ))

        assert result.access_token != issued.access_token
        assert result.refresh_token != issued.refresh_token

    def test_old_refresh_token_rejected_after_rotation(self, make_ctx):
        issued = self._issue(make_ctx)
        action = RefreshTokenAction()
        action.handle_request(make_ctx(
            client_id="foo", client_secret="bar", refresh_token=issued.refresh_token,
        ))

        with pytest.raises(InvalidGrant):
            action.handle_request(make_ctx(
                client_id="foo", client_secret="bar", refresh_token=issued.refresh_token,
            ))

    def test_missing_refresh_token(self, make_ctx):
        with pytest.raises(MissingParam):
            RefreshTokenAction().handle_request(make_ctx(client_id="foo", client_secret="bar"))

    def test_unknown_refresh_token(self, make_ctx):
        with pytest.raises(InvalidGrant) as exc_info:
            RefreshTokenAction().handle_request(make_ctx(
                client_id="foo", client_secret="bar", refresh_token="nope",
            ))

        assert exc_info.value.kind is ErrorKind.INVALID_GRANT

    def test_foreign_client_rejected(self, make_ctx):
        """测试其它客户端的刷新令牌被拒绝"""
        issued = self._issue(make_ctx)

        with pytest.raises(InvalidGrant):
            RefreshTokenAction().handle_request(make_ctx(
                client_id="other", client_secret="other-secret",
                refresh_token=issued.refresh_token,
            ))


class TestAuthorizationCodeAction:
    """authorization_code 测试"""

    REDIRECT_URI = "https://client.example.com/cb"

    def test_exchange_code(self, store, make_ctx):
        code = store.issue_code("foo", user_id=1, redirect_uri=self.REDIRECT_URI, scope="read")

        result = AuthorizationCodeAction().handle_request(make_ctx(
            client_id="foo", client_secret="bar", code=code, redirect_uri=self.REDIRECT_URI,
        ))

        assert result.access_token
        assert result.scope == "read"

    def test_code_single_use(self, store, make_ctx):
        code = store.issue_code("foo", user_id=1, redirect_uri=self.REDIRECT_URI)
        action = AuthorizationCodeAction()
        params = dict(client_id="foo", client_secret="bar", code=code, redirect_uri=self.REDIRECT_URI)
        action.handle_request(make_ctx(**params))

        with pytest.raises(InvalidGrant):
            action.handle_request(make_ctx(**params))

    def test_redirect_uri_mismatch(self, store, make_ctx):
        code = store.issue_code("foo", user_id=1, redirect_uri=self.REDIRECT_URI)

        with pytest.raises(InvalidGrant) as exc_info:
            AuthorizationCodeAction().handle_request(make_ctx(
                client_id="foo", client_secret="bar", code=code,
                redirect_uri="https://evil.example.com/cb",
            ))

        assert "redirect_uri" in exc_info.value.message

    def test_missing_code(self, make_ctx):
        with pytest.raises(MissingParam) as exc_info:
            AuthorizationCodeAction().handle_request(make_ctx(
                client_id="foo", client_secret="bar", redirect_uri=self.REDIRECT_URI,
            ))

        assert exc_info.value.extra["param"] == "code"

    def test_code_of_other_client(self, store, make_ctx):
        code = store.issue_code("other", user_id=1, redirect_uri=self.REDIRECT_URI)

        with pytest.raises(InvalidGrant):
            AuthorizationCodeAction().handle_request(make_ctx(
                client_id="foo", client_secret="bar", code=code, redirect_uri=self.REDIRECT_URI,
            ))

    def test_legacy_name(self):
        assert AuthorizationCodeAction("web_server").grant_type == "web_server"


class TestPasswordAction:
    """password 测试"""

    def test_password_grant(self, make_ctx):
        result = PasswordAction().handle_request(make_ctx(
            client_id="foo", client_secret="bar", username="alice", password="wonderland",
        ))

        assert result.access_token
        assert result.refresh_token

    def test_wrong_password(self, make_ctx):
        with pytest.raises(InvalidGrant):
            PasswordAction().handle_request(make_ctx(
                client_id="foo", client_secret="bar", username="alice", password="nope",
            ))

    def test_missing_username(self, make_ctx):
        with pytest.raises(MissingParam):
            PasswordAction().handle_request(make_ctx(
                client_id="foo", client_secret="bar", password="wonderland",
            ))

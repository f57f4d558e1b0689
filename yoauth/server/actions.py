"""Token 端点授权处理

每种授权类型对应一个 GrantAction。GrantAction 是无状态的策略对象：
构造后只保存不可变的配置，同一个实例可以被并发请求共享，
单次请求需要的临时数据一律放在 Context 上。

校验顺序是固定的：
    1. client_id 是否存在
    2. client_secret 是否存在
    3. 客户端凭证是否有效
    4. secret_type 是否受支持（如果提供）
    5. 授权类型特有的参数
因此同一个错误请求总是得到同一个首个错误。
"""

from abc import ABC, abstractmethod
from typing import Optional

from yoauth.exceptions import OAuthErr
from yoauth.log import get_logger
from .context import Context
from .data_handler import AuthInfo
from .token import TokenResult

logger = get_logger()


class GrantAction(ABC):
    """授权处理基类

    使用示例:
        action = ClientCredentialsAction()
        result = action.handle_request(ctx)
        result.to_dict()
    """

    @property
    @abstractmethod
    def grant_type(self) -> str:
        """返回授权类型名称"""
        pass

    @abstractmethod
    def handle_request(self, ctx: Context) -> TokenResult:
        """处理 Token 请求

        Args:
            ctx: 请求上下文

        Returns:
            TokenResult: 签发结果

        Raises:
            ServerError: 任何校验失败
        """
        pass

    def _require(self, ctx: Context, name: str) -> str:
        """读取必填参数，缺失时抛出 MissingParam"""
        value = ctx.param(name)
        if value is None:
            raise OAuthErr.missing_param(name)
        return value

    def _authenticate_client(self, ctx: Context) -> str:
        """校验客户端凭证（步骤 1-3）

        未知客户端和密钥错误返回完全相同的 InvalidClient。
        """
        client_id = self._require(ctx, "client_id")
        client_secret = self._require(ctx, "client_secret")

        if not ctx.data_handler.validate_client(client_id, client_secret, self.grant_type):
            logger.debug(f"Client authentication failed: {client_id}")
            raise OAuthErr.invalid_client()

        return client_id

    def _check_secret_type(self, ctx: Context) -> Optional[str]:
        """校验 secret_type（步骤 4）"""
        secret_type = ctx.secret_type
        if secret_type is not None and not ctx.data_handler.supports_secret_type(secret_type):
            raise OAuthErr.unsupported_secret_type(secret_type)
        return secret_type

    def _issue(self, ctx: Context, auth_info: AuthInfo, secret_type: Optional[str]) -> TokenResult:
        """为授权信息签发访问令牌并构造结果"""
        auth_info = ctx.data_handler.create_access_token(auth_info, secret_type=secret_type)
        return TokenResult.from_auth_info(auth_info, secret_type=secret_type)


class ClientCredentialsAction(GrantAction):
    """客户端凭证授权

    用于服务间通信，不涉及用户。scope 可选。
    """

    @property
    def grant_type(self) -> str:
        return "client_credentials"

    def handle_request(self, ctx: Context) -> TokenResult:
        client_id = self._authenticate_client(ctx)
        secret_type = self._check_secret_type(ctx)

        auth_info = ctx.data_handler.create_or_update_auth_info(
            client_id=client_id,
            user_id=None,
            scope=ctx.scope,
        )
        return self._issue(ctx, auth_info, secret_type)


class RefreshTokenAction(GrantAction):
    """刷新令牌授权

    刷新令牌必须属于当前认证的客户端，确认后才会轮换。

    Args:
        grant_type: 注册使用的类型名，旧协议草案中称为 refresh
    """

    def __init__(self, grant_type: str = "refresh_token"):
        self._grant_type = grant_type

    @property
    def grant_type(self) -> str:
        return self._grant_type

    def handle_request(self, ctx: Context) -> TokenResult:
        client_id = self._authenticate_client(ctx)
        secret_type = self._check_secret_type(ctx)
        refresh_token = self._require(ctx, "refresh_token")

        auth_info = ctx.data_handler.get_auth_info_by_refresh_token(refresh_token)
        if auth_info is None:
            raise OAuthErr.invalid_grant("invalid refresh token")

        if auth_info.client_id != client_id:
            # 不透露令牌属于哪个客户端
            logger.warning(f"Refresh token presented by foreign client: {client_id}")
            raise OAuthErr.invalid_grant("invalid refresh token")

        auth_info = ctx.data_handler.rotate_refresh_token(auth_info)
        return self._issue(ctx, auth_info, secret_type)


class AuthorizationCodeAction(GrantAction):
    """授权码授权

    用授权端点签发的授权码换取访问令牌。code 和 redirect_uri 必填，
    redirect_uri 必须与申请授权码时一致。

    Args:
        grant_type: 注册使用的类型名，旧协议草案中称为 web_server
    """

    def __init__(self, grant_type: str = "authorization_code"):
        self._grant_type = grant_type

    @property
    def grant_type(self) -> str:
        return self._grant_type

    def handle_request(self, ctx: Context) -> TokenResult:
        client_id = self._authenticate_client(ctx)
        secret_type = self._check_secret_type(ctx)
        code = self._require(ctx, "code")
        redirect_uri = self._require(ctx, "redirect_uri")

        auth_info = ctx.data_handler.get_auth_info_by_code(code)
        if auth_info is None:
            raise OAuthErr.invalid_grant("invalid authorization code")

        if auth_info.client_id != client_id:
            raise OAuthErr.invalid_grant("invalid authorization code")

        if auth_info.redirect_uri and auth_info.redirect_uri != redirect_uri:
            raise OAuthErr.invalid_grant("redirect_uri mismatch")

        return self._issue(ctx, auth_info, secret_type)


class PasswordAction(GrantAction):
    """资源所有者密码凭证授权

    Args:
        grant_type: 注册使用的类型名，旧协议草案中称为 username
    """

    def __init__(self, grant_type: str = "password"):
        self._grant_type = grant_type

    @property
    def grant_type(self) -> str:
        return self._grant_type

    def handle_request(self, ctx: Context) -> TokenResult:
        client_id = self._authenticate_client(ctx)
        secret_type = self._check_secret_type(ctx)
        username = self._require(ctx, "username")
        password = self._require(ctx, "password")

        user_id = ctx.data_handler.get_user_id(username, password)
        if user_id is None:
            raise OAuthErr.invalid_grant("invalid resource owner credentials")

        auth_info = ctx.data_handler.create_or_update_auth_info(
            client_id=client_id,
            user_id=user_id,
            scope=ctx.scope,
        )
        return self._issue(ctx, auth_info, secret_type)

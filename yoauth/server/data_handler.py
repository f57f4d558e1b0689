"""数据处理器接口

定义 Token 端点核心调用的存储 / 凭证接口。核心本身不持久化任何状态，
所有授权记录的读写都通过 DataHandler 完成。

DataHandler 实例按请求创建（由 TokenEndpoint 的工厂函数产生），
可以在实例上缓存本次请求内的查询结果，但绝不能跨请求复用。
"""

import hmac
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass
class AuthInfo:
    """授权信息

    关联 客户端 / 用户 / 权限范围 与已签发的令牌。由数据处理器拥有和持久化，
    核心只读取其中的字段。

    Attributes:
        id: 记录标识
        client_id: 客户端标识
        user_id: 用户标识（client_credentials 授权时为空）
        scope: 权限范围
        access_token: 访问令牌
        access_token_secret: 访问令牌配套的签名密钥
        secret_type: 签名密钥算法，如 hmac-sha256
        refresh_token: 刷新令牌
        expires_in: 访问令牌有效期（秒）
        code: 授权码（authorization_code 授权）
        redirect_uri: 申请授权码时使用的重定向 URI
    """
    id: Optional[str] = None
    client_id: str = ""
    user_id: Optional[Any] = None
    scope: Optional[str] = None
    access_token: Optional[str] = None
    access_token_secret: Optional[str] = None
    secret_type: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    code: Optional[str] = None
    redirect_uri: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class DataHandler(ABC):
    """数据处理器基类

    由业务方实现，负责客户端凭证校验和授权记录的查询 / 变更。
    任何方法都可以抛出 InvalidClient / InvalidGrant / UnsupportedSecretType；
    抛出的其它异常会被视为内部故障，不会以 OAuth 错误格式返回。

    使用示例:
        class SQLDataHandler(DataHandler):
            def __init__(self, session):
                self.session = session

            def get_client_secret(self, client_id):
                client = self.session.get(Client, client_id)
                return client.secret if client else None
            ...

        endpoint = TokenEndpoint(lambda: SQLDataHandler(SessionLocal()))
    """

    @abstractmethod
    def get_client_secret(self, client_id: str) -> Optional[str]:
        """获取客户端密钥，客户端不存在时返回 None"""
        pass

    def validate_client(self, client_id: str, client_secret: str, grant_type: str) -> bool:
        """验证客户端凭证

        默认实现用常量时间比较 get_client_secret 的结果。子类可以覆盖此方法，
        例如限制某些客户端只能使用特定的授权类型。

        Args:
            client_id: 客户端标识
            client_secret: 客户端密钥
            grant_type: 本次请求的授权类型

        Returns:
            凭证是否有效
        """
        expected = self.get_client_secret(client_id)
        if expected is None:
            return False
        return hmac.compare_digest(expected.encode(), client_secret.encode())

    @abstractmethod
    def supports_secret_type(self, secret_type: str) -> bool:
        """是否支持指定的 secret_type"""
        pass

    @abstractmethod
    def create_or_update_auth_info(
        self,
        client_id: str,
        user_id: Optional[Any],
        scope: Optional[str],
    ) -> AuthInfo:
        """创建或更新授权信息

        用于 client_credentials 和 password 授权，user_id 可以为空。
        """
        pass

    @abstractmethod
    def create_access_token(
        self,
        auth_info: AuthInfo,
        secret_type: Optional[str] = None,
    ) -> AuthInfo:
        """为授权信息签发新的访问令牌

        Args:
            auth_info: 授权信息
            secret_type: 请求的签名密钥算法，已确认受支持

        Returns:
            带有新访问令牌的授权信息
        """
        pass

    @abstractmethod
    def get_auth_info_by_refresh_token(self, refresh_token: str) -> Optional[AuthInfo]:
        """根据刷新令牌查询授权信息，不存在时返回 None 或抛出 InvalidGrant"""
        pass

    def get_auth_info_by_code(self, code: str) -> Optional[AuthInfo]:
        """根据授权码查询授权信息，不存在时返回 None 或抛出 InvalidGrant"""
        return None

    def get_user_id(self, username: str, password: str) -> Optional[Any]:
        """验证资源所有者凭证，返回用户标识，失败时返回 None"""
        return None

    def rotate_refresh_token(self, auth_info: AuthInfo) -> AuthInfo:
        """轮换刷新令牌

        默认不轮换，直接返回原授权信息。
        """
        return auth_info

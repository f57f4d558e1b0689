"""内存数据处理器

DataHandler 的参考实现，数据保存在进程内存中，适用于测试和开发环境。
生产环境应基于持久化存储实现 DataHandler。

使用示例:
    store = MemoryStore(supported_secret_types=["hmac-sha256"])
    store.register_client("foo", "bar")

    endpoint = TokenEndpoint(MemoryDataHandler.factory(store))
"""

import secrets
import threading
import time
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional, Tuple

from yoauth.exceptions import OAuthErr
from .data_handler import AuthInfo, DataHandler


def generate_token(length: int = 32) -> str:
    """生成 URL 安全的随机令牌"""
    return secrets.token_urlsafe(length)


class MemoryStore:
    """内存存储

    由所有请求共享，所有读写都在锁内完成。
    刷新令牌和授权码的消费（轮换 / 兑换）在锁内再次确认仍然有效，
    同一个令牌或授权码并发使用时只有一个请求成功。

    Args:
        access_token_expires_in: 访问令牌有效期（秒）
        supported_secret_types: 支持的 secret_type
        refresh_token_expires_in: 刷新令牌有效期（秒），None 表示不过期
    """

    def __init__(
        self,
        access_token_expires_in: int = 3600,
        supported_secret_types: Iterable[str] = ("hmac-sha256",),
        refresh_token_expires_in: Optional[int] = 86400 * 30,
    ):
        self.access_token_expires_in = access_token_expires_in
        self.supported_secret_types = frozenset(supported_secret_types)
        self.refresh_token_expires_in = refresh_token_expires_in

        self._lock = threading.RLock()
        self._clients: Dict[str, str] = {}
        self._users: Dict[str, tuple] = {}
        self._auth_infos: Dict[str, AuthInfo] = {}
        # (client_id, user_id) -> auth_info id，授权码记录不进入此索引
        self._auth_info_index: Dict[tuple, str] = {}
        # refresh_token -> (auth_info id, 过期时间戳)
        self._refresh_tokens: Dict[str, Tuple[str, Optional[float]]] = {}
        self._codes: Dict[str, str] = {}

    @classmethod
    def from_settings(cls, settings) -> "MemoryStore":
        """根据 TokenEndpointSettings 创建存储"""
        return cls(
            access_token_expires_in=settings.access_token_expires_in,
            supported_secret_types=settings.supported_secret_types,
            refresh_token_expires_in=settings.refresh_token_expires_in,
        )

    # ==================== 测试 / 初始化数据 ====================

    def register_client(self, client_id: str, client_secret: str) -> None:
        with self._lock:
            self._clients[client_id] = client_secret

    def register_user(self, username: str, password: str, user_id: Any) -> None:
        with self._lock:
            self._users[username] = (password, user_id)

    def issue_code(
        self,
        client_id: str,
        user_id: Any,
        redirect_uri: str,
        scope: Optional[str] = None,
    ) -> str:
        """签发授权码（模拟授权端点）

        每个授权码对应一条独立的授权记录，不影响该用户已持有的令牌。
        刷新令牌在兑换授权码时才签发。
        """
        code = generate_token(16)
        auth_info = AuthInfo(
            id=generate_token(8),
            client_id=client_id,
            user_id=user_id,
            scope=scope,
            code=code,
            redirect_uri=redirect_uri,
        )
        with self._lock:
            self._auth_infos[auth_info.id] = auth_info
            self._codes[code] = auth_info.id
        return code

    # ==================== 数据访问 ====================

    def get_client_secret(self, client_id: str) -> Optional[str]:
        with self._lock:
            return self._clients.get(client_id)

    def get_user_id(self, username: str, password: str) -> Optional[Any]:
        with self._lock:
            entry = self._users.get(username)
        if entry is None or not secrets.compare_digest(entry[0].encode(), password.encode()):
            return None
        return entry[1]

    def create_or_update_auth_info(self, client_id: str, user_id: Any, scope: Optional[str]) -> AuthInfo:
        """创建或更新授权信息，每次都签发新的刷新令牌"""
        key = (client_id, user_id)
        with self._lock:
            auth_info = self._auth_infos.get(self._auth_info_index.get(key))
            if auth_info is None:
                auth_info = AuthInfo(id=generate_token(8), client_id=client_id, user_id=user_id)
                self._auth_infos[auth_info.id] = auth_info
                self._auth_info_index[key] = auth_info.id

            auth_info.scope = scope
            self._replace_refresh_token(auth_info)
            return replace(auth_info)

    def _replace_refresh_token(self, auth_info: AuthInfo) -> None:
        """签发新的刷新令牌并作废旧令牌（需持有锁）"""
        if auth_info.refresh_token:
            self._refresh_tokens.pop(auth_info.refresh_token, None)
        auth_info.refresh_token = generate_token(32)

        expires_at = None
        if self.refresh_token_expires_in is not None:
            expires_at = time.time() + self.refresh_token_expires_in
        self._refresh_tokens[auth_info.refresh_token] = (auth_info.id, expires_at)

    def create_access_token(self, auth_info: AuthInfo, secret_type: Optional[str]) -> AuthInfo:
        with self._lock:
            stored = self._auth_infos[auth_info.id]

            if auth_info.code is not None:
                # 授权码只能使用一次
                if self._codes.get(auth_info.code) != stored.id:
                    raise OAuthErr.invalid_grant("invalid authorization code")
                del self._codes[auth_info.code]
                stored.code = None
                if not stored.refresh_token:
                    self._replace_refresh_token(stored)

            stored.access_token = generate_token(32)
            stored.expires_in = self.access_token_expires_in
            stored.secret_type = secret_type
            stored.access_token_secret = generate_token(32) if secret_type else None
            return replace(stored)

    def get_auth_info_by_refresh_token(self, refresh_token: str) -> Optional[AuthInfo]:
        """按刷新令牌查询，过期的令牌被移除并抛出 InvalidGrant"""
        with self._lock:
            entry = self._refresh_tokens.get(refresh_token)
            if entry is None:
                return None

            auth_info_id, expires_at = entry
            if expires_at is not None and time.time() >= expires_at:
                del self._refresh_tokens[refresh_token]
                raise OAuthErr.invalid_grant("refresh token expired")

            return replace(self._auth_infos[auth_info_id])

    def get_auth_info_by_code(self, code: str) -> Optional[AuthInfo]:
        with self._lock:
            auth_info_id = self._codes.get(code)
            if auth_info_id is None:
                return None
            return replace(self._auth_infos[auth_info_id])

    def rotate_refresh_token(self, auth_info: AuthInfo) -> AuthInfo:
        """轮换刷新令牌

        auth_info 中的刷新令牌必须仍是当前有效的令牌，
        已被其它请求轮换过时抛出 InvalidGrant。
        """
        with self._lock:
            stored = self._auth_infos.get(auth_info.id)
            if (
                stored is None
                or not auth_info.refresh_token
                or stored.refresh_token != auth_info.refresh_token
                or auth_info.refresh_token not in self._refresh_tokens
            ):
                raise OAuthErr.invalid_grant("invalid refresh token")

            self._replace_refresh_token(stored)
            return replace(stored)


class MemoryDataHandler(DataHandler):
    """基于 MemoryStore 的数据处理器

    每个请求一个实例，客户端密钥的查询结果缓存在实例上。
    """

    def __init__(self, store: MemoryStore):
        self.store = store
        self._client_secrets: Dict[str, Optional[str]] = {}

    @classmethod
    def factory(cls, store: MemoryStore):
        """返回供 TokenEndpoint 使用的工厂函数"""
        return lambda: cls(store)

    def get_client_secret(self, client_id: str) -> Optional[str]:
        if client_id not in self._client_secrets:
            self._client_secrets[client_id] = self.store.get_client_secret(client_id)
        return self._client_secrets[client_id]

    def supports_secret_type(self, secret_type: str) -> bool:
        return secret_type in self.store.supported_secret_types

    def create_or_update_auth_info(self, client_id, user_id, scope) -> AuthInfo:
        return self.store.create_or_update_auth_info(client_id, user_id, scope)

    def create_access_token(self, auth_info: AuthInfo, secret_type: Optional[str] = None) -> AuthInfo:
        return self.store.create_access_token(auth_info, secret_type)

    def get_auth_info_by_refresh_token(self, refresh_token: str) -> Optional[AuthInfo]:
        return self.store.get_auth_info_by_refresh_token(refresh_token)

    def get_auth_info_by_code(self, code: str) -> Optional[AuthInfo]:
        return self.store.get_auth_info_by_code(code)

    def get_user_id(self, username: str, password: str) -> Optional[Any]:
        return self.store.get_user_id(username, password)

    def rotate_refresh_token(self, auth_info: AuthInfo) -> AuthInfo:
        return self.store.rotate_refresh_token(auth_info)

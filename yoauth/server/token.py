"""Token 结果定义"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .data_handler import AuthInfo


@dataclass(frozen=True)
class TokenResult:
    """授权处理成功后的结果

    除 access_token 外所有字段都是可选的，未设置的字段不会出现在响应中。

    Attributes:
        access_token: 访问令牌
        expires_in: 有效期（秒）
        refresh_token: 刷新令牌
        access_token_secret: 访问令牌配套的签名密钥
        secret_type: 签名密钥算法
        scope: 权限范围
    """
    access_token: str
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    access_token_secret: Optional[str] = None
    secret_type: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_auth_info(
        cls,
        auth_info: AuthInfo,
        secret_type: Optional[str] = None,
    ) -> "TokenResult":
        """由授权信息构造结果

        只有请求了 secret_type 时才带上密钥和算法。
        """
        return cls(
            access_token=auth_info.access_token,
            expires_in=auth_info.expires_in,
            refresh_token=auth_info.refresh_token,
            access_token_secret=auth_info.access_token_secret if secret_type else None,
            secret_type=secret_type,
            scope=auth_info.scope,
        )

    def to_dict(self) -> Dict[str, Any]:
        """转换为响应参数，省略空字段"""
        response = {"access_token": self.access_token}

        if self.expires_in is not None:
            response["expires_in"] = self.expires_in

        if self.refresh_token:
            response["refresh_token"] = self.refresh_token

        if self.access_token_secret:
            response["access_token_secret"] = self.access_token_secret

        if self.secret_type:
            response["secret_type"] = self.secret_type

        if self.scope:
            response["scope"] = self.scope

        return response

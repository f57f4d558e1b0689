"""
配置模块
提供 Token 端点的默认配置，业务项目可以继承并覆盖
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class TokenEndpointSettings(BaseSettings):
    """Token 端点配置

    使用示例:
        from yoauth.config import TokenEndpointSettings

        token_config = TokenEndpointSettings(
            flows=["client_credentials", "web_server"],
            strict_status_codes=True,
        )

    配置说明:
        - path: create_token_router_from_settings 挂载的端点路径
        - flows: 端点接受的授权流程名称，未列出的 type 一律返回 unsupported_grant_type
        - support_refresh: 是否始终接受 refresh_token 类型（与 flows 无关）
        - strict_status_codes: False 时所有 OAuth 错误返回 401（兼容旧客户端），
                               True 时按 RFC 6749 区分 400 / 401
        - access_token_expires_in / refresh_token_expires_in / supported_secret_types:
          由 MemoryStore.from_settings 等参考实现读取
    """
    path: str = Field(default="/token", description="Token 端点路径")
    default_format: str = Field(default="json", description="默认响应格式")
    flows: List[str] = Field(
        default_factory=lambda: ["client_credentials"],
        description="支持的授权流程",
    )
    support_refresh: bool = Field(default=True, description="是否始终支持 refresh_token")
    strict_status_codes: bool = Field(default=False, description="是否使用标准 HTTP 状态码")
    access_token_expires_in: int = Field(default=3600, description="访问令牌有效期（秒）")
    refresh_token_expires_in: int = Field(default=86400 * 30, description="刷新令牌有效期（秒）")
    supported_secret_types: List[str] = Field(
        default_factory=lambda: ["hmac-sha256"],
        description="支持的 secret_type",
    )

    class Config:
        env_prefix = "YOAUTH_TOKEN_"


class LoggingSettings(BaseSettings):
    """日志配置

    使用示例:
        from yoauth.config import LoggingSettings

        log_config = LoggingSettings(level="DEBUG", file_path="logs/token.log")
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空则不写文件")
    max_bytes: int = Field(default=10 * 1024 * 1024, description="单个日志文件最大字节数")
    backup_count: int = Field(default=5, description="保留的备份文件数量")
    encoding: str = Field(default="utf-8", description="文件编码")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")

    class Config:
        env_prefix = "YOAUTH_LOG_"


class AppSettings(BaseSettings):
    """应用基础配置

    聚合各子配置。配置优先级（从高到低）:
        YAML 配置文件 / 显式参数 > 环境变量 > 代码中的默认值

    内置子配置及环境变量前缀:
        - token:   TokenEndpointSettings (YOAUTH_TOKEN_)
        - logging: LoggingSettings       (YOAUTH_LOG_)

    使用示例:
        from yoauth.config import AppSettings, load_yaml_config

        settings = load_yaml_config("config/settings.yaml", AppSettings)

    YAML 配置示例 (config/settings.yaml):
        token:
          flows: ["client_credentials", "web_server"]
          strict_status_codes: false
        logging:
          level: "INFO"
    """
    token: TokenEndpointSettings = Field(default_factory=TokenEndpointSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    class Config:
        env_prefix = "YOAUTH_"
        env_nested_delimiter = "__"

"""Token 端点分发器

解析请求参数，选择响应格式，按 type 参数找到对应的授权处理并执行，
再把结果或错误转换为统一的响应。

只有 ServerError 会被格式化为 OAuth 错误响应；其它异常原样向上抛出，
由传输层转换为不含内部细节的 500 响应。
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional

from yoauth.exceptions import OAuthErr, ServerError, status_for_kind
from yoauth.log import get_logger, log_filter_hook_manager
from .actions import GrantAction, RefreshTokenAction
from .context import Context
from .data_handler import DataHandler
from .flows import FlowRegistry, default_flow_registry
from .formatters import Formatter, get_formatter_by_name

logger = get_logger()

DataHandlerFactory = Callable[[], DataHandler]


@dataclass
class TokenResponse:
    """Token 端点响应

    Attributes:
        status_code: HTTP 状态码
        headers: 响应头
        body: 已格式化的响应体
    """
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")


class TokenEndpoint:
    """Token 端点

    Args:
        data_handler_factory: 数据处理器工厂，每个请求调用一次
        registry: 授权流程注册表，默认使用内置注册表
        default_format: 默认响应格式，未知的 format 参数也回退到此格式
        support_refresh: 是否始终支持 refresh_token 类型
        strict_status_codes: 是否按 RFC 6749 区分 400 / 401，默认全部 401

    使用示例:
        endpoint = TokenEndpoint(lambda: MyDataHandler(session_factory()))
        endpoint.support_flows("client_credentials", "web_server")

        response = endpoint.handle_request({
            "type": "client_credentials",
            "client_id": "foo",
            "client_secret": "bar",
        })
        response.status_code    # 200
    """

    def __init__(
        self,
        data_handler_factory: DataHandlerFactory,
        registry: Optional[FlowRegistry] = None,
        default_format: str = "json",
        support_refresh: bool = True,
        strict_status_codes: bool = False,
    ):
        if get_formatter_by_name(default_format) is None:
            raise ValueError(f"Unknown default format: {default_format}")

        self.data_handler_factory = data_handler_factory
        self.registry = registry if registry is not None else default_flow_registry
        self.default_format = default_format
        self.strict_status_codes = strict_status_codes

        # 动作实例在配置阶段创建，之后被所有请求共享
        self._flow_actions: Dict[str, GrantAction] = {}
        if support_refresh:
            self._flow_actions["refresh_token"] = RefreshTokenAction()

    @classmethod
    def from_settings(cls, settings, data_handler_factory: DataHandlerFactory,
                      registry: Optional[FlowRegistry] = None) -> "TokenEndpoint":
        """根据 TokenEndpointSettings 创建端点"""
        endpoint = cls(
            data_handler_factory,
            registry=registry,
            default_format=settings.default_format,
            support_refresh=settings.support_refresh,
            strict_status_codes=settings.strict_status_codes,
        )
        endpoint.support_flows(*settings.flows)
        return endpoint

    def support_flow(self, flow_name: str) -> None:
        """启用一个授权流程

        Raises:
            ValueError: 注册表中没有该流程
        """
        flow = self.registry.get_flow(flow_name)
        if flow is None:
            raise ValueError(f"Unknown flow: {flow_name}")
        for action_name in flow.token_endpoint_actions:
            self._flow_actions[action_name] = flow.get_token_endpoint_action(action_name)
        logger.debug(f"Token endpoint supports flow '{flow_name}': {flow.token_endpoint_actions}")

    def support_flows(self, *flow_names: str) -> None:
        for flow_name in flow_names:
            self.support_flow(flow_name)

    @property
    def supported_types(self) -> List[str]:
        """当前接受的 type 参数取值"""
        return list(self._flow_actions)

    def get_action(self, type_name: str) -> Optional[GrantAction]:
        return self._flow_actions.get(type_name)

    def _select_formatter(self, params: Mapping[str, str]) -> Formatter:
        return (
            get_formatter_by_name(params.get("format"))
            or get_formatter_by_name(self.default_format)
        )

    def _response(self, status_code: int, formatter: Formatter, body: dict) -> TokenResponse:
        return TokenResponse(
            status_code=status_code,
            headers={
                "Content-Type": formatter.content_type,
                "Cache-Control": "no-store",
                "Pragma": "no-cache",
            },
            body=formatter.format(body),
        )

    def handle_request(self, params: Mapping[str, str]) -> TokenResponse:
        """处理 Token 请求

        Args:
            params: 请求参数（查询字符串或表单）

        Returns:
            TokenResponse: 成功时 200，服务端错误时按 kind 映射的状态码

        Raises:
            Exception: 非 ServerError 的异常原样抛出
        """
        formatter = self._select_formatter(params)

        try:
            type_name = params.get("type")
            if not type_name:
                raise OAuthErr.missing_param("type")

            ctx = Context(params=params, data_handler=self.data_handler_factory())

            action = self._flow_actions.get(type_name)
            if action is None:
                raise OAuthErr.unsupported_type(type_name)

            logger.debug(
                f"Dispatching type '{type_name}'",
                extra={"params": log_filter_hook_manager.apply_filters(dict(params))},
            )
            result = action.handle_request(ctx)

        except ServerError as exc:
            logger.warning(f"Token request rejected: {exc.code} - {exc.message}")
            return self._response(
                status_for_kind(exc.kind, strict=self.strict_status_codes),
                formatter,
                exc.to_dict(),
            )

        logger.info(f"Token issued: type={type_name}, client_id={ctx.client_id}")
        return self._response(200, formatter, result.to_dict())

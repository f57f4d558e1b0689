"""授权流程注册表

Flow 描述一个授权流程在 Token 端点上暴露的动作名称，以及每个动作的创建方式。
FlowRegistry 在服务配置阶段填充一次，之后只读，并发读取无需加锁。

使用示例:
    from yoauth.server.flows import Flow, default_flow_registry

    default_flow_registry.register(
        "jwt_bearer",
        Flow("jwt_bearer", {"jwt_bearer": JWTBearerAction}),
    )
    default_flow_registry.freeze()
"""

import threading
from typing import Callable, Dict, List, Mapping, Optional

from .actions import (
    GrantAction,
    AuthorizationCodeAction,
    ClientCredentialsAction,
    PasswordAction,
    RefreshTokenAction,
)

ActionFactory = Callable[[], GrantAction]


class Flow:
    """授权流程

    Args:
        name: 流程名称
        action_factories: 动作名称 -> 动作工厂，按插入顺序作为端点动作列表
    """

    def __init__(self, name: str, action_factories: Mapping[str, ActionFactory]):
        if not action_factories:
            raise ValueError(f"Flow '{name}' must expose at least one action")
        self.name = name
        self._factories: Dict[str, ActionFactory] = dict(action_factories)

    @property
    def token_endpoint_actions(self) -> List[str]:
        """Token 端点上有效的动作名称"""
        return list(self._factories)

    def get_token_endpoint_action(self, action_name: str) -> Optional[GrantAction]:
        """创建动作实例，未知动作返回 None"""
        factory = self._factories.get(action_name)
        if factory is None:
            return None
        return factory()

    def __repr__(self) -> str:
        return f"Flow(name={self.name!r}, actions={self.token_endpoint_actions!r})"


class FlowRegistry:
    """授权流程注册表

    freeze() 之后不允许再注册，读操作始终不加锁。
    """

    def __init__(self):
        self._flows: Dict[str, Flow] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def register(self, flow_name: str, flow: Flow) -> "FlowRegistry":
        """注册流程，同名流程会被替换

        Raises:
            RuntimeError: 注册表已冻结
        """
        with self._lock:
            if self._frozen:
                raise RuntimeError("FlowRegistry is frozen, register flows during configuration")
            flows = dict(self._flows)
            flows[flow_name] = flow
            self._flows = flows
        return self

    def get_flow(self, flow_name: str) -> Optional[Flow]:
        return self._flows.get(flow_name)

    def flow_names(self) -> List[str]:
        return list(self._flows)

    def freeze(self) -> None:
        """冻结注册表"""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen


def create_default_flow_registry() -> FlowRegistry:
    """创建包含内置授权流程的注册表

    refresh / web_server / username 是旧协议草案中的名称，分别等价于
    refresh_token / authorization_code / password。
    """
    registry = FlowRegistry()
    registry.register("client_credentials", Flow("client_credentials", {
        "client_credentials": ClientCredentialsAction,
    }))
    registry.register("refresh_token", Flow("refresh_token", {
        "refresh_token": RefreshTokenAction,
    }))
    registry.register("refresh", Flow("refresh", {
        "refresh": lambda: RefreshTokenAction("refresh"),
    }))
    registry.register("authorization_code", Flow("authorization_code", {
        "authorization_code": AuthorizationCodeAction,
    }))
    registry.register("web_server", Flow("web_server", {
        "web_server": lambda: AuthorizationCodeAction("web_server"),
    }))
    registry.register("password", Flow("password", {
        "password": PasswordAction,
    }))
    registry.register("username", Flow("username", {
        "username": lambda: PasswordAction("username"),
    }))
    return registry


default_flow_registry = create_default_flow_registry()

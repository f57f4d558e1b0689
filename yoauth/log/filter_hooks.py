"""日志过滤钩子模块

在请求参数写入日志之前过滤敏感数据：
- client_secret、password
- access_token、refresh_token、授权码
- 自定义的过滤规则

使用示例:
    from yoauth.log import log_filter_hook_manager

    # 使用默认配置（已自动注册敏感数据过滤器）
    safe = log_filter_hook_manager.apply_filters({"params": dict(request_params)})

    # 自定义敏感字段模式
    log_filter_hook_manager.register_hook(
        SensitiveDataFilterHook(sensitive_patterns=[r'.*assertion.*'])
    )
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
import re

# 默认敏感字段名模式
DEFAULT_SENSITIVE_PATTERNS = [
    r'.*(password|pwd|passwd).*',
    r'.*(token|access_token|refresh_token).*',
    r'.*(secret|key|apikey|api_key).*',
    r'.*(credential|credentials).*',
    r'^code$',
]

FILTERED_PLACEHOLDER = "*SENSITIVE DATA FILTERED*"


class LogFilterHook(ABC):
    """日志过滤钩子抽象基类

    使用示例:
        class DropStateHook(LogFilterHook):
            def should_apply(self, log_data):
                return "params" in log_data

            def filter(self, log_data):
                filtered = log_data.copy()
                filtered["params"] = {
                    k: v for k, v in log_data["params"].items() if k != "state"
                }
                return filtered
    """

    @abstractmethod
    def should_apply(self, log_data: Dict[str, Any]) -> bool:
        """判断是否应该应用此过滤器"""
        pass

    @abstractmethod
    def filter(self, log_data: Dict[str, Any]) -> Dict[str, Any]:
        """过滤日志数据，返回新的字典"""
        pass


class SensitiveDataFilterHook(LogFilterHook):
    """敏感数据过滤器

    根据字段名模式把敏感字段的值替换为占位符，支持嵌套字典和列表。

    Args:
        sensitive_patterns: 敏感字段名模式列表（正则表达式）
    """

    def __init__(self, sensitive_patterns: List[str] = None):
        self.sensitive_patterns = (
            sensitive_patterns if sensitive_patterns is not None
            else DEFAULT_SENSITIVE_PATTERNS
        )
        self.compiled_patterns = [
            re.compile(pattern, re.IGNORECASE)
            for pattern in self.sensitive_patterns
        ]

    def should_apply(self, log_data: Dict[str, Any]) -> bool:
        return True

    def filter(self, log_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._filter_dict(log_data)

    def is_sensitive(self, key: str) -> bool:
        """字段名是否匹配敏感模式"""
        return any(pattern.search(key) for pattern in self.compiled_patterns)

    def _filter_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        filtered_data = {}
        for key, value in data.items():
            if self.is_sensitive(str(key)):
                filtered_data[key] = FILTERED_PLACEHOLDER
            elif isinstance(value, dict):
                filtered_data[key] = self._filter_dict(value)
            elif isinstance(value, list):
                filtered_data[key] = self._filter_list(value)
            else:
                filtered_data[key] = value
        return filtered_data

    def _filter_list(self, data: List[Any]) -> List[Any]:
        filtered_data = []
        for item in data:
            if isinstance(item, dict):
                filtered_data.append(self._filter_dict(item))
            elif isinstance(item, list):
                filtered_data.append(self._filter_list(item))
            else:
                filtered_data.append(item)
        return filtered_data


class LogFilterHookManager:
    """日志过滤钩子管理器

    单例模式，管理所有已注册的日志过滤钩子。
    """

    _instance = None
    _hooks: List[LogFilterHook] = []

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LogFilterHookManager, cls).__new__(cls)
            cls._hooks = []
        return cls._instance

    @classmethod
    def register_hook(cls, hook: LogFilterHook):
        """注册日志过滤钩子"""
        cls._hooks.append(hook)

    @classmethod
    def unregister_hook(cls, hook: LogFilterHook):
        """注销日志过滤钩子"""
        if hook in cls._hooks:
            cls._hooks.remove(hook)

    @classmethod
    def clear_hooks(cls):
        """清除所有已注册的钩子"""
        cls._hooks.clear()

    @classmethod
    def get_hooks(cls) -> List[LogFilterHook]:
        """获取所有已注册的钩子"""
        return cls._hooks.copy()

    @classmethod
    def apply_filters(cls, log_data: Dict[str, Any]) -> Dict[str, Any]:
        """依次应用所有已注册的过滤器

        Args:
            log_data: 原始日志数据（不会被修改）

        Returns:
            过滤后的日志数据
        """
        filtered_data = dict(log_data)
        for hook in cls._hooks:
            if hook.should_apply(filtered_data):
                filtered_data = hook.filter(filtered_data)
        return filtered_data


# 创建全局实例
log_filter_hook_manager = LogFilterHookManager()

# 注册默认的敏感数据过滤器
log_filter_hook_manager.register_hook(SensitiveDataFilterHook())

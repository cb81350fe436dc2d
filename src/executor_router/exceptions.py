"""
Executor Router Exceptions

Custom exceptions for router construction and executor lookup.
Failures raised by executors themselves are never wrapped.
"""

from typing import Optional


class ExecutorRouterError(Exception):
    """Base exception for router errors"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(ExecutorRouterError):
    """Raised when the router configuration is unusable"""


class NoExecutorConfigError(ConfigurationError):
    """Raised when the executor list is missing, not a list or empty"""

    def __init__(self, message: str = "No executor config passed in."):
        super().__init__(message)


class NoDefaultExecutorError(ConfigurationError):
    """Raised when no registered executor can act as the default"""

    def __init__(self, default_plugin: Optional[str] = None):
        self.default_plugin = default_plugin
        super().__init__("No default executor set.")


class PluginLoadError(ExecutorRouterError):
    """Raised by loaders when an executor implementation cannot be resolved"""

    def __init__(self, plugin_name: str, cause: Optional[Exception] = None):
        self.plugin_name = plugin_name
        self.cause = cause
        message = f"Unable to load executor plugin: {plugin_name}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)


class ExecutorNotFoundError(ExecutorRouterError, LookupError):
    """Raised when no registered executor matches a routing decision"""

    def __init__(self, name: Optional[str] = None):
        self.name = name
        if name:
            message = f"Executor not registered: {name}"
        else:
            message = "No executor could be selected"
        super().__init__(message)


class VerifyNotSupportedError(ExecutorRouterError):
    """Raised when the selected executor does not implement verify()"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Executor does not support verify: {name}")

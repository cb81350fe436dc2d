"""
Executor Router

Routes build start/stop/verify calls to one of several pluggable executors.
Selection order: annotation override, weighted random choice, default.
"""

from .interface import BaseExecutor, ExecutorFactory
from .models import CallConfig, ExecutorSpec, RegisteredExecutor, coerce_weight
from .loader import ChainLoader, EntryPointLoader, ExecutorLoader, ModuleLoader, StaticLoader, default_loader
from .registry import PluginRegistry
from .rules import Rule, RuleChain, build_rules, parse_annotations
from .selection import filter_excluded, select_weighted
from .router import ExecutorRouter
from .exceptions import (
    ExecutorRouterError,
    ConfigurationError,
    NoExecutorConfigError,
    NoDefaultExecutorError,
    PluginLoadError,
    ExecutorNotFoundError,
    VerifyNotSupportedError,
)

__all__ = [
    # Interface
    "BaseExecutor",
    "ExecutorFactory",
    # Models
    "CallConfig",
    "ExecutorSpec",
    "RegisteredExecutor",
    "coerce_weight",
    # Loaders
    "ExecutorLoader",
    "StaticLoader",
    "EntryPointLoader",
    "ModuleLoader",
    "ChainLoader",
    "default_loader",
    # Selection
    "PluginRegistry",
    "Rule",
    "RuleChain",
    "build_rules",
    "parse_annotations",
    "filter_excluded",
    "select_weighted",
    # Router
    "ExecutorRouter",
    # Exceptions
    "ExecutorRouterError",
    "ConfigurationError",
    "NoExecutorConfigError",
    "NoDefaultExecutorError",
    "PluginLoadError",
    "ExecutorNotFoundError",
    "VerifyNotSupportedError",
]

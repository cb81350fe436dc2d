"""
Base Executor Interface

Abstract base class for build executors.
Backends should inherit from BaseExecutor and implement start() and stop().
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict

if TYPE_CHECKING:
    from .models import CallConfig


class BaseExecutor(ABC):
    """
    Abstract base class for all build executors.

    Executors must implement:
    - start(): Start a build in the executor's environment
    - stop(): Stop a running or finished build

    verify() is optional. Executors that can check whether a build's
    environment is healthy define it as an async method taking the same
    config as start().

    Example:
        class MyExecutor(BaseExecutor):
            def __init__(self, options):
                self.options = options

            async def start(self, config):
                # Implementation
                pass

            async def stop(self, config):
                pass
    """

    @abstractmethod
    async def start(self, config: "CallConfig") -> Any:
        """
        Start a new build.

        Args:
            config: Call config with buildId, container, apiUri, token,
                annotations and build

        Returns:
            Executor specific result
        """
        pass

    @abstractmethod
    async def stop(self, config: "CallConfig") -> Any:
        """
        Stop a running or finished build.

        Args:
            config: Call config with at least buildId

        Returns:
            Executor specific result
        """
        pass


# Factories receive the merged plugin options (including "ecosystem")
ExecutorFactory = Callable[[Dict[str, Any]], BaseExecutor]

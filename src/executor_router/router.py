"""
Executor Router

Routes build operations (start, stop, verify) to one of several executors.

Selection order per call:
1. annotated - executor named by the build's "executor" annotation
2. weighted  - random pick proportional to weightage, skipping exclusions
3. default   - configured defaultPlugin, else the first registered executor
"""

import logging
import random
from typing import Any, Mapping, Optional, Sequence, Tuple

from .exceptions import (
    ExecutorNotFoundError,
    NoDefaultExecutorError,
    NoExecutorConfigError,
    VerifyNotSupportedError,
)
from .interface import BaseExecutor
from .loader import ExecutorLoader, default_loader
from .metrics import ROUTING_DECISIONS
from .models import CallConfig, RegisteredExecutor
from .registry import PluginRegistry
from .rules import (
    ANNOTATION_EXECUTOR_KEY,
    ANNOTATION_NAMESPACES,
    DEFAULT,
    Rule,
    RuleChain,
    build_rules,
)

logger = logging.getLogger(__name__)


class ExecutorRouter(BaseExecutor):
    """
    Executor that delegates every call to a selected backend executor.

    The router is itself a BaseExecutor, so it can be registered behind
    another router. All routing state is built in the constructor and never
    changes afterwards; concurrent calls need no locking.

    Example:
        router = ExecutorRouter(
            {
                "defaultPlugin": "k8s",
                "ecosystem": {"api": "https://api.example.com"},
                "executor": [
                    {"name": "k8s", "weightage": 8, "exclusions": ["rhel6"]},
                    {"name": "k8s-vm", "weightage": 2},
                ],
            },
            loader=StaticLoader({"k8s": K8sExecutor, "k8s-vm": K8sVmExecutor}),
        )

        result = await router.start({"buildId": 920, "container": "node:20"})
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        loader: Optional[ExecutorLoader] = None,
        rng: Optional[random.Random] = None,
        annotation_key: str = ANNOTATION_EXECUTOR_KEY,
        annotation_namespaces: Sequence[str] = ANNOTATION_NAMESPACES,
    ):
        """
        Construct a router.

        Args:
            config: Mapping with "executor" (list of executor specs),
                optional "defaultPlugin" and optional "ecosystem"
            loader: Resolves executor implementations (entry points, then
                module import if None)
            rng: Random source for weighted selection
            annotation_key: Annotation naming the executor, after namespaces
                are stripped
            annotation_namespaces: Annotation namespaces to strip

        Raises:
            NoExecutorConfigError: If the executor list is missing, not a list or empty
            NoDefaultExecutorError: If no registered executor can be the default
        """
        config = config or {}
        if not isinstance(config, Mapping):
            raise NoExecutorConfigError()

        executors = config.get("executor")
        if not executors or not isinstance(executors, (list, tuple)):
            raise NoExecutorConfigError()

        self._default_plugin: Optional[str] = config.get("defaultPlugin") or config.get("default_plugin")
        self._registry = PluginRegistry(
            executors,
            loader=loader or default_loader(),
            ecosystem=config.get("ecosystem"),
        )

        rules = build_rules(
            self._registry.candidates,
            default_plugin=self._default_plugin,
            annotation_key=annotation_key,
            annotation_namespaces=annotation_namespaces,
            rng=rng,
        )
        self._chain = RuleChain(rules, is_registered=self._registry.__contains__)

        default_name = self._chain.get_rule(DEFAULT).evaluate({})
        if not default_name or default_name not in self._registry:
            raise NoDefaultExecutorError(self._default_plugin)

        logger.info(
            f"Executor router ready: executors={list(self._registry.names)}, default={default_name}"
        )

    @property
    def executors(self) -> Mapping[str, BaseExecutor]:
        """Read-only mapping of executor name to instance"""
        return self._registry.executors

    @property
    def candidates(self) -> Tuple[RegisteredExecutor, ...]:
        return self._registry.candidates

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._chain.rules

    @property
    def default_plugin(self) -> str:
        """Name the default rule resolves to"""
        return self._chain.get_rule(DEFAULT).evaluate({})

    def resolve(self, config: CallConfig) -> str:
        """
        Name of the executor a call would be routed to.

        Weighted selection is random, so repeated calls may differ.

        Raises:
            ExecutorNotFoundError: If no rule selects a registered executor
        """
        _, name = self._chain.resolve(config if config is not None else {})
        return name

    def get_executor(self, config: CallConfig) -> BaseExecutor:
        """
        Evaluate the rules by priority and return the first matching executor.

        Args:
            config: Call config (annotations, container, buildId, ...)

        Returns:
            Executor instance

        Raises:
            ExecutorNotFoundError: If no rule selects a registered executor
        """
        return self._lookup(config)[2]

    def _lookup(self, config: CallConfig) -> Tuple[str, str, BaseExecutor]:
        rule, name = self._chain.resolve(config if config is not None else {})
        executor = self._registry.get(name)
        if executor is None:
            raise ExecutorNotFoundError(name)

        return rule, name, executor

    def _route(self, config: CallConfig, operation: str) -> Tuple[str, BaseExecutor]:
        rule, name, executor = self._lookup(config)

        # Only calls forwarded to an executor count as routing decisions
        ROUTING_DECISIONS.labels(rule=rule, executor=name, operation=operation).inc()
        logger.debug(f"Routing {operation} to executor {name} (rule: {rule})")

        return name, executor

    async def start(self, config: CallConfig) -> Any:
        """
        Start a build in the selected executor.

        Args:
            config: Call config, forwarded unchanged

        Returns:
            The executor's result; its failures propagate as raised
        """
        _, executor = self._route(config, "start")
        return await executor.start(config)

    async def stop(self, config: CallConfig) -> Any:
        """
        Stop a running or finished build in the selected executor.

        Args:
            config: Call config, forwarded unchanged

        Returns:
            The executor's result; its failures propagate as raised
        """
        _, executor = self._route(config, "stop")
        return await executor.stop(config)

    async def verify(self, config: CallConfig) -> Any:
        """
        Verify a build in the selected executor.

        Raises:
            VerifyNotSupportedError: If the selected executor has no verify()
        """
        name, executor = self._route(config, "verify")

        verify = getattr(executor, "verify", None)
        if not callable(verify):
            raise VerifyNotSupportedError(name)

        return await verify(config)

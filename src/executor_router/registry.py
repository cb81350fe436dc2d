"""
Executor Plugin Registry

Builds executor instances from configured specs once, at router construction.
Specs whose implementation cannot be resolved are skipped, not fatal.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigurationError, NoExecutorConfigError, PluginLoadError
from .interface import BaseExecutor
from .loader import ExecutorLoader
from .models import ExecutorSpec, RegisteredExecutor

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Registry of executors available for routing.

    Holds the candidate list (configuration order, used for weighted
    selection and exclusions) and a by-name lookup (used for annotations
    and the default). Both are read-only after construction.

    Example:
        registry = PluginRegistry(
            [{"name": "k8s", "options": {...}}, {"name": "k8s-vm-sandbox", "pluginName": "k8s-vm"}],
            loader=StaticLoader({"k8s": K8sExecutor, "k8s-vm": K8sVmExecutor}),
            ecosystem={"api": "https://api.example.com"},
        )
        registry.get("k8s-vm-sandbox")
    """

    def __init__(
        self,
        executors: Sequence[Any],
        loader: ExecutorLoader,
        ecosystem: Optional[Mapping[str, Any]] = None,
    ):
        """
        Resolve and construct every configured executor.

        Args:
            executors: Executor specs or config mappings
            loader: Resolves implementation names to factories
            ecosystem: Shared values passed to every executor as options["ecosystem"]

        Raises:
            NoExecutorConfigError: If executors is missing, not a list or empty
        """
        if not executors or not isinstance(executors, (list, tuple)):
            raise NoExecutorConfigError()

        ecosystem = dict(ecosystem or {})
        candidates = []
        by_name: Dict[str, BaseExecutor] = {}

        for entry in executors:
            try:
                spec = ExecutorSpec.from_dict(entry)
            except ConfigurationError as e:
                logger.warning(f"Skipping executor config entry {entry!r}: {e}")
                continue

            if spec.name in by_name:
                logger.warning(f"Executor {spec.name} configured more than once, ignoring duplicate")
                continue

            try:
                factory = loader.resolve(spec.implementation)
            except (PluginLoadError, ImportError) as e:
                logger.warning(f"Failed to load executor {spec.name}: {e}")
                continue

            if factory is None:
                logger.warning(f"Executor plugin not found: {spec.implementation}")
                continue

            # Plugin options win over the shared ecosystem
            options = {"ecosystem": ecosystem, **spec.options}
            instance = factory(options)

            candidates.append(RegisteredExecutor(spec=spec, instance=instance))
            by_name[spec.name] = instance
            logger.info(f"Registered executor: {spec.name} (plugin: {spec.implementation})")

        self._candidates: Tuple[RegisteredExecutor, ...] = tuple(candidates)
        self._executors: Mapping[str, BaseExecutor] = MappingProxyType(by_name)

    @property
    def candidates(self) -> Tuple[RegisteredExecutor, ...]:
        """Registered executors in configuration order"""
        return self._candidates

    @property
    def executors(self) -> Mapping[str, BaseExecutor]:
        """Read-only mapping of executor name to instance"""
        return self._executors

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(candidate.name for candidate in self._candidates)

    def get(self, name: str) -> Optional[BaseExecutor]:
        """Get an executor instance by name, None if not registered"""
        if not isinstance(name, str):
            return None
        return self._executors.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._executors

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[RegisteredExecutor]:
        return iter(self._candidates)

"""
Executor Loaders

Resolve executor implementation names to factories.

The registry only calls ``resolve(name)``; how implementations are found
(in-process mapping, entry points, module import) lives here.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from importlib.metadata import entry_points
from typing import Dict, Mapping, Optional

from .exceptions import PluginLoadError
from .interface import ExecutorFactory

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "executor_router.executors"
MODULE_TEMPLATE = "screwdriver_executor_{name}"
MODULE_ATTRIBUTE = "Executor"


class ExecutorLoader(ABC):
    """Resolves an implementation name to an executor factory"""

    @abstractmethod
    def resolve(self, name: str) -> Optional[ExecutorFactory]:
        """
        Resolve an implementation.

        Args:
            name: Implementation name (spec pluginName or name)

        Returns:
            Factory called with the merged options, or None if unknown

        Raises:
            PluginLoadError: If the implementation exists but cannot be loaded
        """
        pass


class StaticLoader(ExecutorLoader):
    """
    Loader backed by an in-process mapping.

    Example:
        loader = StaticLoader({"k8s": K8sExecutor, "docker": DockerExecutor})
    """

    def __init__(self, factories: Optional[Mapping[str, ExecutorFactory]] = None):
        self._factories: Dict[str, ExecutorFactory] = dict(factories or {})

    def register(self, name: str, factory: ExecutorFactory) -> None:
        """Add or replace a factory"""
        self._factories[name] = factory
        logger.info(f"Registered executor factory: {name}")

    def resolve(self, name: str) -> Optional[ExecutorFactory]:
        return self._factories.get(name)


class EntryPointLoader(ExecutorLoader):
    """
    Loader for executors published as package entry points.

    Packages declare executors in their pyproject.toml:

        [project.entry-points."executor_router.executors"]
        k8s = "my_package.k8s:K8sExecutor"
    """

    def __init__(self, group: str = ENTRY_POINT_GROUP):
        self.group = group
        self._entry_points = None

    def _ensure_loaded(self) -> None:
        if self._entry_points is None:
            self._entry_points = {ep.name: ep for ep in entry_points(group=self.group)}
            logger.debug(f"Found {len(self._entry_points)} executor entry points in {self.group}")

    def resolve(self, name: str) -> Optional[ExecutorFactory]:
        self._ensure_loaded()

        ep = self._entry_points.get(name)
        if ep is None:
            return None

        try:
            return ep.load()
        except Exception as e:
            raise PluginLoadError(name, e) from e


class ModuleLoader(ExecutorLoader):
    """
    Loader importing one module per executor.

    The module name comes from a template, e.g. "k8s-vm" resolves to
    ``screwdriver_executor_k8s_vm`` and its ``Executor`` attribute.
    """

    def __init__(self, template: str = MODULE_TEMPLATE, attribute: str = MODULE_ATTRIBUTE):
        self.template = template
        self.attribute = attribute

    def module_name(self, name: str) -> str:
        return self.template.format(name=name.replace("-", "_"))

    def resolve(self, name: str) -> Optional[ExecutorFactory]:
        module_name = self.module_name(name)

        try:
            module = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing top-level module means "unknown executor"
            if e.name == module_name:
                return None
            raise PluginLoadError(name, e) from e
        except ImportError as e:
            raise PluginLoadError(name, e) from e

        factory = getattr(module, self.attribute, None)
        if factory is None:
            raise PluginLoadError(name, AttributeError(f"{module_name} has no attribute {self.attribute}"))

        return factory


class ChainLoader(ExecutorLoader):
    """Tries loaders in order, the first one that resolves wins"""

    def __init__(self, *loaders: ExecutorLoader):
        self.loaders = loaders

    def resolve(self, name: str) -> Optional[ExecutorFactory]:
        for loader in self.loaders:
            factory = loader.resolve(name)
            if factory is not None:
                return factory
        return None


def default_loader(
    group: str = ENTRY_POINT_GROUP,
    template: str = MODULE_TEMPLATE,
) -> ExecutorLoader:
    """Entry points first, then module import"""
    return ChainLoader(EntryPointLoader(group), ModuleLoader(template))

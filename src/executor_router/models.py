"""
Executor Router Data Models

Executor specs parsed from configuration and the registered pairs built from them.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from .exceptions import ConfigurationError
from .interface import BaseExecutor

# Per-call config. Only "annotations" and "container" are read by the router;
# everything else (buildId, apiUri, token, build) is forwarded untouched.
CallConfig = Mapping[str, Any]


def coerce_weight(value: Any) -> int:
    """
    Coerce a configured weightage to a non-negative integer.

    Integers are used as-is, strings are parsed as integers and then as
    floats (truncated), anything unparsable, non-finite or negative is 0.
    """
    if value is None or isinstance(value, bool):
        return 0

    if isinstance(value, int):
        weight = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 0
        weight = int(value)
    elif isinstance(value, str):
        text = value.strip()
        try:
            weight = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return 0
            if not math.isfinite(number):
                return 0
            weight = int(number)
    else:
        return 0

    return max(weight, 0)


@dataclass(frozen=True)
class ExecutorSpec:
    """Executor entry from the router configuration"""

    # Routing key used for annotations and lookup
    name: str

    # Implementation to resolve when it differs from name
    plugin_name: Optional[str] = None

    # Constructor options for the implementation
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    # Raw configured weightage (see coerce_weight)
    weightage: Any = 0

    # Container patterns this executor must not run
    exclusions: Tuple[str, ...] = ()

    def __post_init__(self):
        # Read-only copy, callers keep no handle on the stored options
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def weight(self) -> int:
        """Weightage coerced to a non-negative integer"""
        return coerce_weight(self.weightage)

    @property
    def implementation(self) -> str:
        """Name passed to the loader"""
        return self.plugin_name or self.name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExecutorSpec":
        """
        Build a spec from a configuration mapping.

        Accepts both ``pluginName`` and ``plugin_name`` for the
        implementation override.

        Raises:
            ConfigurationError: If the entry is not a mapping or has no name
        """
        if isinstance(data, ExecutorSpec):
            return data
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Executor config entry must be a mapping, got {type(data).__name__}")

        name = data.get("name")
        if not name or not isinstance(name, str):
            raise ConfigurationError("Executor config entry is missing a name")

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Options for executor {name} must be a mapping")

        exclusions = data.get("exclusions") or ()
        if isinstance(exclusions, str):
            exclusions = (exclusions,)

        return cls(
            name=name,
            plugin_name=data.get("pluginName") or data.get("plugin_name"),
            options=options,
            weightage=data.get("weightage", 0),
            exclusions=tuple(str(item) for item in exclusions),
        )


@dataclass(frozen=True)
class RegisteredExecutor:
    """Executor spec paired with its constructed implementation"""

    spec: ExecutorSpec
    instance: BaseExecutor

    @property
    def name(self) -> str:
        return self.spec.name

"""
Executor Rule Chain

Ordered selection rules evaluated per call: annotated > weighted > default.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigurationError, ExecutorNotFoundError
from .metrics import RULE_FAILURES
from .models import CallConfig, RegisteredExecutor
from .selection import filter_excluded, select_weighted

logger = logging.getLogger(__name__)

ANNOTATION_EXECUTOR_KEY = "executor"

# Highest precedence first
ANNOTATION_NAMESPACES: Tuple[str, ...] = ("screwdriver.cd/", "beta.screwdriver.cd/")

ANNOTATED = "annotated"
WEIGHTED = "weighted"
DEFAULT = "default"


@dataclass(frozen=True)
class Rule:
    """Named selection strategy returning an executor name or None"""

    name: str
    priority: int
    evaluate: Callable[[CallConfig], Optional[str]]


def parse_annotations(
    annotations: Mapping[str, str],
    namespaces: Sequence[str] = ANNOTATION_NAMESPACES,
) -> Dict[str, str]:
    """
    Normalise annotation keys by stripping known namespaces.

    "screwdriver.cd/executor" and "beta.screwdriver.cd/executor" both become
    "executor". Namespaced keys override bare ones, and earlier namespaces
    override later ones.

    Raises:
        TypeError: If annotations is not a mapping
    """
    if not isinstance(annotations, Mapping):
        raise TypeError(f"annotations must be a mapping, got {type(annotations).__name__}")

    parsed: Dict[str, str] = {}

    for key, value in annotations.items():
        if not any(key.startswith(namespace) for namespace in namespaces):
            parsed[key] = value

    for namespace in reversed(namespaces):
        for key, value in annotations.items():
            if key.startswith(namespace):
                parsed[key[len(namespace):]] = value

    return parsed


def build_rules(
    candidates: Sequence[RegisteredExecutor],
    default_plugin: Optional[str] = None,
    annotation_key: str = ANNOTATION_EXECUTOR_KEY,
    annotation_namespaces: Sequence[str] = ANNOTATION_NAMESPACES,
    rng: Optional[random.Random] = None,
) -> List[Rule]:
    """
    Build the standard rule set over a fixed candidate list.

    Args:
        candidates: Registered executors in configuration order
        default_plugin: Explicit default executor name
        annotation_key: Normalised annotation naming the executor
        annotation_namespaces: Namespaces stripped from annotation keys
        rng: Random source for weighted selection

    Returns:
        Rules for annotated, weighted and default selection
    """
    candidates = tuple(candidates)
    namespaces = tuple(annotation_namespaces)

    def annotated(config: CallConfig) -> Optional[str]:
        annotations = parse_annotations(config.get("annotations") or {}, namespaces)
        return annotations.get(annotation_key)

    def weighted(config: CallConfig) -> Optional[str]:
        allowed = filter_excluded(candidates, config.get("container"))
        chosen = select_weighted(allowed, rng)
        return chosen.name if chosen else None

    def default(config: Optional[CallConfig] = None) -> Optional[str]:
        if default_plugin:
            return default_plugin
        return candidates[0].name if candidates else None

    return [
        Rule(name=ANNOTATED, priority=1, evaluate=annotated),
        Rule(name=WEIGHTED, priority=2, evaluate=weighted),
        Rule(name=DEFAULT, priority=3, evaluate=default),
    ]


class RuleChain:
    """
    Evaluates rules in ascending priority until one names a registered executor.

    A rule that raises is logged and skipped; the next rule is consulted.
    """

    def __init__(self, rules: Iterable[Rule], is_registered: Callable[[str], bool]):
        ordered = tuple(sorted(rules, key=lambda rule: rule.priority))

        priorities = [rule.priority for rule in ordered]
        if len(set(priorities)) != len(priorities):
            raise ConfigurationError(f"Duplicate rule priorities: {priorities}")

        names = [rule.name for rule in ordered]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate rule names: {names}")

        self._rules = ordered
        self._is_registered = is_registered

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    def get_rule(self, name: str) -> Optional[Rule]:
        """Get a rule by name"""
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    def resolve(self, config: CallConfig) -> Tuple[str, str]:
        """
        Run the chain for a call.

        Args:
            config: Call config

        Returns:
            Tuple of (rule name, executor name)

        Raises:
            ExecutorNotFoundError: If no rule produced a registered executor
        """
        for rule in self._rules:
            try:
                name = rule.evaluate(config)
            except Exception as e:
                logger.error(f"Failed to validate executor rule {rule.name}: {e}", exc_info=True)
                RULE_FAILURES.labels(rule=rule.name).inc()
                continue

            if name and self._is_registered(name):
                return rule.name, name

            if name:
                logger.debug(f"Rule {rule.name} selected unregistered executor {name}")

        raise ExecutorNotFoundError()

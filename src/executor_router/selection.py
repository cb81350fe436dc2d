"""
Executor Selection

Exclusion filtering and weighted random selection over registered executors.
"""

import logging
import random
import re
from typing import List, Optional, Sequence

from .models import RegisteredExecutor

logger = logging.getLogger(__name__)


def is_excluded(pattern: str, container: str) -> bool:
    """
    Check a single exclusion pattern against a container.

    Patterns are case-insensitive regular expressions searched anywhere in
    the container string.

    Raises:
        re.error: If the pattern is not a valid regular expression
    """
    return re.search(pattern, container, re.IGNORECASE) is not None


def filter_excluded(
    candidates: Sequence[RegisteredExecutor],
    container: Optional[str],
) -> List[RegisteredExecutor]:
    """
    Remove candidates whose exclusions match the build container.

    Args:
        candidates: Registered executors in configuration order
        container: Container the build runs in (may be missing)

    Returns:
        Eligible candidates, order preserved

    Raises:
        re.error: If an exclusion pattern is not a valid regular expression
    """
    # Nothing to match against
    if not container:
        return list(candidates)

    container = str(container)
    eligible = []

    for candidate in candidates:
        patterns = candidate.spec.exclusions
        if any(is_excluded(pattern, container) for pattern in patterns):
            logger.debug(f"Executor {candidate.name} excluded for container {container}")
            continue
        eligible.append(candidate)

    return eligible


def select_weighted(
    candidates: Sequence[RegisteredExecutor],
    rng: Optional[random.Random] = None,
) -> Optional[RegisteredExecutor]:
    """
    Pick a candidate at random, proportionally to its weight.

    Args:
        candidates: Eligible candidates
        rng: Random source (module level random functions if None)

    Returns:
        Chosen candidate, or None when the total weight is 0
    """
    weights = [candidate.spec.weight for candidate in candidates]
    total = sum(weights)

    if total == 0:
        return None

    draw = (rng or random).randrange(total)

    cumulative = 0
    for candidate, weight in zip(candidates, weights):
        cumulative += weight
        if draw < cumulative:
            return candidate

    # Unreachable: draw < total == final cumulative weight
    return None

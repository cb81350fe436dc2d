"""
Router Setup

Build the executor router from settings.
"""

import logging
from typing import Optional

from .config import Settings, get_settings
from .loader import ExecutorLoader, default_loader
from .router import ExecutorRouter

logger = logging.getLogger(__name__)


def setup_router(
    settings: Optional[Settings] = None,
    loader: Optional[ExecutorLoader] = None,
) -> ExecutorRouter:
    """
    Set up the router based on configuration.

    Args:
        settings: Settings instance (uses default if None)
        loader: Executor loader (entry points then module import if None)

    Returns:
        Configured ExecutorRouter, also stored as the global router

    Raises:
        ConfigurationError: If the executor config is unusable
    """
    global _router

    settings = settings or get_settings()

    logging.getLogger("executor_router").setLevel(settings.log_level.upper())

    if loader is None:
        loader = default_loader(
            group=settings.entry_point_group,
            template=settings.module_template,
        )

    router = ExecutorRouter(
        settings.router_config(),
        loader=loader,
        annotation_key=settings.annotation_key,
        annotation_namespaces=settings.annotation_namespaces,
    )

    _router = router
    logger.info("Executor router setup complete")
    return router


# Global router instance
_router: Optional[ExecutorRouter] = None


def get_router() -> ExecutorRouter:
    """Get the global router (must be set up first)"""
    if _router is None:
        raise RuntimeError("Executor router not initialized. Call setup_router() first.")

    return _router


def reset_router() -> None:
    """Forget the global router (for testing)"""
    global _router
    _router = None

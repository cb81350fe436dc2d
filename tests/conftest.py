"""
Pytest configuration and fixtures for executor router tests
"""

import os
import random
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from executor_router.interface import BaseExecutor  # noqa: E402
from executor_router.loader import StaticLoader  # noqa: E402


class MockExecutor(BaseExecutor):
    """Executor recording every call it receives."""

    def __init__(self, plugin, options):
        self.plugin = plugin
        self.constructor_params = options
        self.start_calls = []
        self.stop_calls = []
        self.verify_calls = []
        self.errors = {}

    def _finish(self, operation):
        if operation in self.errors:
            raise self.errors[operation]
        return f"{self.plugin}ExecutorResult"

    async def start(self, config):
        self.start_calls.append(config)
        return self._finish("start")

    async def stop(self, config):
        self.stop_calls.append(config)
        return self._finish("stop")

    async def verify(self, config):
        self.verify_calls.append(config)
        return self._finish("verify")


class NoVerifyExecutor(BaseExecutor):
    """Executor without verify support."""

    def __init__(self, options):
        self.constructor_params = options

    async def start(self, config):
        return "noVerifyExecutorResult"

    async def stop(self, config):
        return "noVerifyExecutorResult"


def mock_factory(plugin):
    return lambda options: MockExecutor(plugin, options)


# ============== Config Fixtures ==============


@pytest.fixture
def ecosystem():
    """Shared ecosystem values."""
    return {
        "api": "http://api.com",
        "store": "http://store.com",
    }


@pytest.fixture
def k8s_options():
    return {
        "kubernetes": {
            "host": "K8S_HOST",
            "token": "K8S_TOKEN",
            "jobsNamespace": "K8S_JOBS_NAMESPACE",
        },
        "launchVersion": "LAUNCH_VERSION",
        "prefix": "EXECUTOR_PREFIX",
    }


@pytest.fixture
def k8s_vm_options():
    return {
        "kubernetes": {
            "host": "K8SVM_HOST",
            "token": "K8SVM_TOKEN",
            "jobsNamespace": "K8SVM_JOBS_NAMESPACE",
        },
        "launchVersion": "LAUNCH_VERSION",
        "prefix": "EXECUTOR_PREFIX",
    }


@pytest.fixture
def example_options():
    return {
        "example": {
            "host": "somehost",
            "token": "sometoken",
            "jobsNamespace": "somenamespace",
        },
        "launchVersion": "someversion",
        "prefix": "someprefix",
    }


@pytest.fixture
def call_config():
    """Sample start config."""
    return {
        "buildId": 920,
        "container": "node:4",
        "apiUri": "http://api.com",
        "token": "qwer",
    }


# ============== Executor Fixtures ==============


@pytest.fixture
def loader():
    """Loader for the k8s, k8s-vm, example and no-verify plugins."""
    return StaticLoader(
        {
            "k8s": mock_factory("k8s"),
            "k8s-vm": mock_factory("k8sVm"),
            "example": mock_factory("example"),
            "no-verify": NoVerifyExecutor,
        }
    )


@pytest.fixture
def rng():
    """Seeded random source for reproducible weighted selection."""
    return random.Random(1234)


@pytest.fixture
def router_config(ecosystem, k8s_options, k8s_vm_options, example_options):
    """Router config with four executors and no weights."""
    return {
        "ecosystem": ecosystem,
        "executor": [
            {"name": "k8s", "options": k8s_options},
            {"name": "k8s-vm-sandbox", "pluginName": "k8s-vm", "options": k8s_vm_options},
            {"name": "example", "options": example_options},
            {"name": "k8s-vm", "options": k8s_vm_options},
        ],
    }


@pytest.fixture
def router(router_config, loader, rng):
    """Router built from router_config."""
    from executor_router.router import ExecutorRouter

    return ExecutorRouter(router_config, loader=loader, rng=rng)

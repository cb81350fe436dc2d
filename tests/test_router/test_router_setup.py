"""
Tests for settings and router setup.
"""

import json
import logging

import pytest

from executor_router.config import Settings
from executor_router.exceptions import NoExecutorConfigError
from executor_router.router import ExecutorRouter
from executor_router.router_setup import get_router, reset_router, setup_router


@pytest.fixture
def reset_global_router():
    """Reset the global router before and after each test."""
    reset_router()
    yield
    reset_router()
    logging.getLogger("executor_router").setLevel(logging.NOTSET)


class TestSettings:
    """Test Settings."""

    def test_defaults(self, monkeypatch):
        """Test default settings."""
        monkeypatch.delenv("EXECUTOR_ROUTER_EXECUTOR", raising=False)
        settings = Settings(_env_file=None)

        assert settings.default_plugin is None
        assert settings.executor == []
        assert settings.annotation_key == "executor"
        assert settings.annotation_namespaces == ["screwdriver.cd/", "beta.screwdriver.cd/"]
        assert settings.entry_point_group == "executor_router.executors"

    def test_from_environment(self, monkeypatch):
        """Test executor specs are read as JSON from the environment."""
        monkeypatch.setenv("EXECUTOR_ROUTER_DEFAULT_PLUGIN", "k8s")
        monkeypatch.setenv("EXECUTOR_ROUTER_ECOSYSTEM", json.dumps({"api": "http://api.com"}))
        monkeypatch.setenv(
            "EXECUTOR_ROUTER_EXECUTOR",
            json.dumps([{"name": "k8s", "weightage": 8}, {"name": "k8s-vm-sandbox", "pluginName": "k8s-vm"}]),
        )

        settings = Settings(_env_file=None)

        assert settings.router_config() == {
            "defaultPlugin": "k8s",
            "ecosystem": {"api": "http://api.com"},
            "executor": [{"name": "k8s", "weightage": 8}, {"name": "k8s-vm-sandbox", "pluginName": "k8s-vm"}],
        }


class TestSetupRouter:
    """Test setup_router."""

    def test_setup_router(self, loader, ecosystem, reset_global_router):
        """Test building the global router from settings."""
        settings = Settings(
            _env_file=None,
            default_plugin="example",
            ecosystem=ecosystem,
            executor=[{"name": "k8s"}, {"name": "example"}],
            log_level="debug",
        )

        router = setup_router(settings, loader=loader)

        assert isinstance(router, ExecutorRouter)
        assert get_router() is router
        assert router.default_plugin == "example"
        assert router.executors["k8s"].constructor_params == {"ecosystem": ecosystem}
        assert logging.getLogger("executor_router").level == logging.DEBUG

    def test_annotation_settings(self, loader, reset_global_router):
        """Test annotation key and namespaces come from settings."""
        settings = Settings(
            _env_file=None,
            executor=[{"name": "k8s"}, {"name": "example"}],
            annotation_key="runner",
            annotation_namespaces=["ci.example.com/"],
        )

        router = setup_router(settings, loader=loader)

        assert router.resolve({"annotations": {"ci.example.com/runner": "example"}}) == "example"
        assert router.resolve({"annotations": {"screwdriver.cd/executor": "example"}}) == "k8s"

    def test_empty_executor_config(self, loader, reset_global_router):
        """Test setup fails without executors and leaves no global router."""
        with pytest.raises(NoExecutorConfigError):
            setup_router(Settings(_env_file=None, executor=[]), loader=loader)

        with pytest.raises(RuntimeError):
            get_router()

    def test_get_router_not_initialized(self, reset_global_router):
        """Test get_router before setup."""
        with pytest.raises(RuntimeError):
            get_router()

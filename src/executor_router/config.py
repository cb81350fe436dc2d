"""
Executor router configuration
"""
from typing import Any, Dict, List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    """Executor router settings"""

    # Routing
    default_plugin: Optional[str] = None
    ecosystem: Dict[str, Any] = Field(default_factory=dict)

    # Executor specs: [{"name": ..., "pluginName": ..., "options": {...}, "weightage": ..., "exclusions": [...]}]
    executor: List[Dict[str, Any]] = Field(default_factory=list)

    # Annotations
    annotation_key: str = "executor"
    annotation_namespaces: List[str] = Field(
        default_factory=lambda: ["screwdriver.cd/", "beta.screwdriver.cd/"]
    )

    # Plugin loading
    entry_point_group: str = "executor_router.executors"
    module_template: str = "screwdriver_executor_{name}"

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="EXECUTOR_ROUTER_",
        env_file=".env",
        case_sensitive=False,
    )

    def router_config(self) -> Dict[str, Any]:
        """Construction mapping for ExecutorRouter"""
        return {
            "defaultPlugin": self.default_plugin,
            "ecosystem": dict(self.ecosystem),
            "executor": list(self.executor),
        }

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

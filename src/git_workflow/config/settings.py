"""
Configuration management for git-workflow.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Set, Tuple

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings

from git_workflow.core.domain.models import PRODUCTION_BRANCH_NAMES, BugSource

CONFIG_DIR_NAME = ".git-workflow"
CONFIG_FILE_NAME = "config.yaml"


def read_config_file(config_path: Path) -> Dict[str, Any]:
    """Raw key/value pairs stored in a YAML config file (empty if missing)."""
    if not config_path.exists():
        return {}

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def write_config_file(config_path: Path, config_data: Dict[str, Any]) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config_data, f, default_flow_style=False, indent=2)


class WorkflowSettings(BaseSettings):
    """Workflow settings with environment variable support."""

    # Branch names
    development_branch: str = Field(default="development", description="Integration branch")
    production_branch: str = Field(default="main", description="Production (deployed) branch")
    protected_branches: List[str] = Field(
        default_factory=lambda: ["development", *PRODUCTION_BRANCH_NAMES],
        description="Branches delete-branch refuses to remove",
    )
    remote: str = Field(default="origin", description="Remote used for push, delete and tags")

    # Workflow policy
    bug_source: BugSource = Field(
        default=BugSource.DEVELOPMENT,
        description="Where bug branches start from (development or release)",
    )

    # Behaviour
    auto_confirm: bool = Field(default=False, description="Answer yes to confirmation prompts")
    dry_run: bool = Field(default=False, description="Print commands without running them")

    # Debug settings
    log_level: str = Field(default="WARNING", description="Logging level")

    model_config = {
        "env_file": ".env",
        "env_prefix": "GIT_WORKFLOW_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def production_branches(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys((self.production_branch, *PRODUCTION_BRANCH_NAMES)))

    @property
    def all_protected_branches(self) -> Set[str]:
        return {
            self.development_branch,
            *self.production_branches,
            *self.protected_branches,
        }

    @classmethod
    def load_from_file(cls, config_path: Path) -> "WorkflowSettings":
        """
        Load settings from a YAML configuration file.

        The file only supplies defaults: environment variables (and `.env`)
        still take precedence over values found in the file.
        """
        config_data = read_config_file(config_path)
        if not config_data:
            return cls()

        from_environment = cls()
        overrides = from_environment.model_dump(include=from_environment.model_fields_set)
        return cls(**{**config_data, **overrides})

    def save_to_file(self, config_path: Path) -> None:
        """Save all settings to a YAML configuration file."""
        write_config_file(config_path, self.model_dump(mode="json"))

    @staticmethod
    def get_config_path() -> Path:
        """Get the default configuration file path."""
        return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    def update_setting(self, key: str, value: Any, config_path: Optional[Path] = None) -> None:
        """
        Update a single setting and persist only that key.

        Other keys in the file are left as they are, so values that came from
        the environment are never written back.
        """
        if key not in type(self).model_fields:
            raise ValueError(f"Unknown setting: {key}")

        config_path = config_path or self.get_config_path()
        config_data = read_config_file(config_path)
        validated = type(self).model_validate({**config_data, key: value})
        setattr(self, key, getattr(validated, key))

        config_data[key] = validated.model_dump(mode="json")[key]
        write_config_file(config_path, config_data)

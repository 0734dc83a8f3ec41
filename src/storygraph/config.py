"""Project configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

from ruamel.yaml import YAML

from storygraph.models.story_graph import DEFAULT_STORY_TITLE

CONFIG_FILENAME = "storygraph.yaml"

# Default configuration values
DEFAULT_STORIES_DIR = "stories"
DEFAULT_AUTOSAVE_DELAY = 1.0


class ConfigError(Exception):
    """Raised when project configuration cannot be loaded."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load project config at {path}: {reason}")


@dataclass
class ProjectConfig:
    """Configuration for a story project.

    Attributes:
        name: Project name.
        stories_dir: Directory holding story documents, relative to the
            project root.
        autosave_delay: Quiet period in seconds before a debounced save.
        default_title: Title given to newly created stories.
    """

    name: str = "unnamed"
    stories_dir: str = DEFAULT_STORIES_DIR
    autosave_delay: float = DEFAULT_AUTOSAVE_DELAY
    default_title: str = DEFAULT_STORY_TITLE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """Create config from dictionary.

        Args:
            data: Dictionary containing config fields.

        Returns:
            ProjectConfig instance.
        """
        delay = float(data.get("autosave_delay", DEFAULT_AUTOSAVE_DELAY))
        if delay < 0:
            raise ValueError(f"autosave_delay must be >= 0, got {delay}")
        return cls(
            name=str(data.get("name", "unnamed")),
            stories_dir=str(data.get("stories_dir", DEFAULT_STORIES_DIR)),
            autosave_delay=delay,
            default_title=str(data.get("default_title", DEFAULT_STORY_TITLE)),
        )

    def stories_path(self, project_path: Path) -> Path:
        """Absolute location of the stories directory for *project_path*."""
        return project_path / self.stories_dir


def _apply_env_overrides(config: ProjectConfig, config_path: Path) -> ProjectConfig:
    """Apply SG_STORIES_DIR / SG_AUTOSAVE_DELAY on top of file values."""
    stories_dir = os.getenv("SG_STORIES_DIR")
    if stories_dir:
        config = replace(config, stories_dir=stories_dir)

    delay = os.getenv("SG_AUTOSAVE_DELAY")
    if delay:
        try:
            value = float(delay)
        except ValueError:
            raise ConfigError(
                config_path, f"SG_AUTOSAVE_DELAY is not a number: {delay!r}"
            ) from None
        if value < 0:
            raise ConfigError(config_path, f"SG_AUTOSAVE_DELAY must be >= 0, got {value}")
        config = replace(config, autosave_delay=value)
    return config


def load_project_config(project_path: Path) -> ProjectConfig:
    """Load project configuration from storygraph.yaml.

    A missing file yields the defaults; environment overrides apply either
    way.

    Args:
        project_path: Path to the project root directory.

    Returns:
        ProjectConfig instance.

    Raises:
        ConfigError: If the file exists but cannot be read or is invalid.
    """
    config_path = project_path / CONFIG_FILENAME

    if not config_path.exists():
        return _apply_env_overrides(ProjectConfig(), config_path)

    yaml = YAML()
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)

        if data is None:
            raise ConfigError(config_path, "Empty file")
        if not isinstance(data, dict):
            raise ConfigError(config_path, "Expected a mapping at the top level")

        config = ProjectConfig.from_dict(dict(data))
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(config_path, str(e)) from e

    return _apply_env_overrides(config, config_path)

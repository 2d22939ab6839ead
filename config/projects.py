"""
Reads and updates the project registry: the JSON file mapping project names to
repository paths plus the currently active project.
"""
import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from config.models import ProjectRegistry
from core.contracts.models import ProjectContext
from utils.errors import ConfigurationError
from utils.logger import logger


def load_registry(path: Union[str, Path]) -> ProjectRegistry:
    """
    Loads the project registry from disk.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Project registry not found at {path}.")

    try:
        raw = path.read_text(encoding="utf-8")
        registry = ProjectRegistry.model_validate_json(raw)
    except OSError as e:
        raise ConfigurationError(f"Could not read project registry {path}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(f"Project registry {path} is invalid: {e}") from e

    logger.debug(f"Loaded {len(registry.projects)} projects from {path}")
    return registry


def save_registry(registry: ProjectRegistry, path: Union[str, Path]) -> None:
    """Writes the registry back to disk, creating its directory if needed."""
    path = Path(path)
    data = registry.model_dump(by_alias=True, exclude_none=True)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Could not write project registry {path}: {e}") from e
    logger.debug(f"Saved project registry to {path}")


def set_active_project(path: Union[str, Path], name: str) -> ProjectRegistry:
    """
    Marks `name` as the active project and persists the change.

    Raises:
        ConfigurationError: If the registry cannot be loaded or `name` is unknown.
    """
    registry = load_registry(path)
    if name not in registry.projects:
        raise ConfigurationError(f"Unknown project: {name}")
    registry.active_project = name
    save_registry(registry, path)
    logger.info(f"Active project set to {name}")
    return registry


def get_active_project(registry: ProjectRegistry) -> ProjectContext:
    """
    Resolves the active project into the context the pipeline runs against.

    Raises:
        ConfigurationError: If no project is active or its path is missing.
    """
    name = registry.active_project
    if not name:
        raise ConfigurationError("No activeProject in config. Run `worklog set-active <name>` first.")
    repo = registry.projects.get(name)
    if not repo:
        raise ConfigurationError(f"Project path missing for {name}")
    return ProjectContext(
        name=name,
        repo_path=Path(repo).expanduser(),
        output_folder=registry.worklog_folder_name,
    )

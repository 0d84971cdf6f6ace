"""Persistence collaborators for the active project."""

from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from .models import Project


class ProjectStore(Protocol):
    """Whole-project load/save. Last write wins."""

    def load(self) -> Optional[Project]: ...

    def save(self, project: Project) -> None: ...

    def clear(self) -> None: ...


class JsonProjectStore:
    """Keeps the single active project in one JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Optional[Project]:
        """Load the project, or None if there is none or the file is unreadable."""
        if not self.path.exists():
            return None

        try:
            return Project.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.warning(f"Failed to load project from {self.path}: {e}")
            return None

    def save(self, project: Project) -> None:
        """Write the project, refreshing ``updated_at``."""
        project.updated_at = datetime.now()
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(project.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class InMemoryProjectStore:
    """Store that keeps a serialized copy in memory. Saves are counted."""

    def __init__(self, project: Optional[Project] = None):
        self._data: Optional[str] = None
        self.save_count = 0
        if project is not None:
            self._data = project.model_dump_json()

    def load(self) -> Optional[Project]:
        if self._data is None:
            return None
        return Project.model_validate_json(self._data)

    def save(self, project: Project) -> None:
        project.updated_at = datetime.now()
        self._data = project.model_dump_json()
        self.save_count += 1

    def clear(self) -> None:
        self._data = None

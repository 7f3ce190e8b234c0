from __future__ import annotations

import threading
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.task import ModelStats, Task
from storypoints.services.keywords import DEFAULT_TAXONOMY

logger = structlog.get_logger(__name__)

TASKS_FILE = "tasks.json"
MODEL_STATS_FILE = "model-stats.json"
KEYWORDS_FILE = "keywords-config.json"
MODEL_FILE = "story-points-model.joblib"

_tasks_adapter = TypeAdapter(list[Task])


class JsonStore:
    """Key/value persistence for tasks, model stats and the keyword config, one JSON file each."""

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir)
        # Reentrant: read-modify-write sequences hold it around _write
        self._lock = threading.RLock()

    @property
    def model_path(self) -> Path:
        return self.data_dir / MODEL_FILE

    def _path(self, name: str) -> Path:
        return self.data_dir / name

    def _read(self, name: str) -> str | None:
        path = self._path(name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, name: str, payload: str) -> None:
        with self._lock:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp = self._path(name + ".tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(self._path(name))

    # Tasks

    def load_tasks(self) -> list[Task]:
        raw = self._read(TASKS_FILE)
        if not raw:
            return []
        return _tasks_adapter.validate_json(raw)

    def save_tasks(self, tasks: list[Task]) -> None:
        self._write(TASKS_FILE, _tasks_adapter.dump_json(tasks, indent=2).decode("utf-8"))

    def add_tasks(self, new_tasks: list[Task]) -> list[Task]:
        """Prepend ``new_tasks`` to the history (newest first) and return the full list."""
        with self._lock:
            tasks = [*new_tasks, *self.load_tasks()]
            self.save_tasks(tasks)
        return tasks

    # Model stats

    def load_model_stats(self) -> ModelStats:
        raw = self._read(MODEL_STATS_FILE)
        if not raw:
            return ModelStats()
        return ModelStats.model_validate_json(raw)

    def save_model_stats(self, stats: ModelStats) -> None:
        self._write(MODEL_STATS_FILE, stats.model_dump_json(indent=2))

    # Keyword config

    def load_taxonomy(self) -> KeywordTaxonomy:
        raw = self._read(KEYWORDS_FILE)
        if not raw:
            return DEFAULT_TAXONOMY
        try:
            return KeywordTaxonomy.model_validate_json(raw)
        except ValidationError as e:
            logger.error("keywords_config_unreadable", path=str(self._path(KEYWORDS_FILE)), error=str(e))
            return DEFAULT_TAXONOMY

    def save_taxonomy(self, taxonomy: KeywordTaxonomy) -> None:
        self._write(KEYWORDS_FILE, taxonomy.model_dump_json(indent=2))

    def reset_taxonomy(self) -> KeywordTaxonomy:
        with self._lock:
            self._path(KEYWORDS_FILE).unlink(missing_ok=True)
        return DEFAULT_TAXONOMY

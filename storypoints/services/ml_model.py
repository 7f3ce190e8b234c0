from __future__ import annotations

import threading
import warnings
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import joblib
import numpy as np
import structlog
from sklearn.exceptions import ConvergenceWarning
from sklearn.model_selection import train_test_split
from sklearn.neural_network import MLPClassifier

from storypoints.config import settings
from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.task import ModelStats, Task
from storypoints.services.estimator import STORY_POINT_SCALE, snap_to_scale
from storypoints.services.feature_extractor import extract_features, index_to_points, points_to_index
from storypoints.services.keywords import DEFAULT_TAXONOMY

logger = structlog.get_logger(__name__)

HIDDEN_LAYERS = (16, 16)
MAX_BATCH_SIZE = 32


def build_training_set(
    tasks: Iterable[Task], taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY
) -> tuple[np.ndarray, np.ndarray]:
    features: list[list[float]] = []
    labels: list[int] = []
    for task in tasks:
        points = task.final_points
        if points not in STORY_POINT_SCALE:
            points = snap_to_scale(points)
            logger.warning("ml_label_off_scale", task_id=task.id, final_points=task.final_points, snapped_to=points)
        features.append(extract_features(task.description, task.task_type, taxonomy))
        labels.append(points_to_index(points))
    return np.asarray(features, dtype=float), np.asarray(labels, dtype=int)


class StoryPointClassifier:
    """Small feed-forward network that learns story points from saved tasks."""

    def __init__(
        self,
        model_path: Path | None = None,
        *,
        min_tasks: int = settings.ML_MIN_TASKS,
        epochs: int = settings.ML_EPOCHS,
        learning_rate: float = settings.ML_LEARNING_RATE,
        validation_split: float = settings.ML_VALIDATION_SPLIT,
        random_state: int | None = settings.ML_RANDOM_STATE,
    ) -> None:
        self.model_path = model_path
        self.min_tasks = min_tasks
        self.epochs = epochs
        self.learning_rate = learning_rate
        self.validation_split = validation_split
        self.random_state = random_state
        self._model: MLPClassifier | None = None
        self._lock = threading.Lock()

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    def _new_network(self, n_samples: int) -> MLPClassifier:
        return MLPClassifier(
            hidden_layer_sizes=HIDDEN_LAYERS,
            activation="relu",
            solver="adam",
            learning_rate_init=self.learning_rate,
            max_iter=self.epochs,
            batch_size=min(MAX_BATCH_SIZE, n_samples),
            shuffle=True,
            random_state=self.random_state,
        )

    def _fit(self, x: np.ndarray, y: np.ndarray) -> MLPClassifier:
        network = self._new_network(len(x))
        with warnings.catch_warnings():
            # A fixed epoch budget rarely converges on a handful of tasks.
            warnings.simplefilter("ignore", ConvergenceWarning)
            network.fit(x, y)
        return network

    def train(self, tasks: list[Task], taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY) -> ModelStats | None:
        """Train on ``tasks``; returns the new stats, or None when there is not enough data."""
        if len(tasks) < self.min_tasks:
            logger.info("ml_training_skipped", reason="not_enough_tasks", tasks=len(tasks), required=self.min_tasks)
            return None

        x, y = build_training_set(tasks, taxonomy)
        if len(np.unique(y)) < 2:
            logger.info("ml_training_skipped", reason="single_label", tasks=len(tasks))
            return None

        x_train, y_train = x, y
        x_val = y_val = None
        if int(len(x) * self.validation_split) >= 1:
            x_tr, x_v, y_tr, y_v = train_test_split(
                x, y, test_size=self.validation_split, shuffle=True, random_state=self.random_state
            )
            # Hold-out only when the training part still has two labels to separate
            if len(np.unique(y_tr)) >= 2:
                x_train, y_train, x_val, y_val = x_tr, y_tr, x_v, y_v

        network = self._fit(x_train, y_train)
        accuracy = float(network.score(x_val, y_val)) if x_val is not None else None

        with self._lock:
            self._model = network

        stats = ModelStats(
            trained_on=len(tasks),
            last_trained_at=datetime.now(timezone.utc),
            accuracy=accuracy,
        )
        logger.info("ml_model_trained", trained_on=stats.trained_on, accuracy=accuracy)
        return stats

    def predict(self, description: str, task_type: str, taxonomy: KeywordTaxonomy = DEFAULT_TAXONOMY) -> int | None:
        with self._lock:
            model = self._model
        if model is None:
            return None

        features = np.asarray([extract_features(description, task_type, taxonomy)], dtype=float)
        probabilities = model.predict_proba(features)[0]
        best_index = int(model.classes_[int(np.argmax(probabilities))])
        return index_to_points(best_index)

    def save(self) -> None:
        if self._model is None or self.model_path is None:
            return
        self.model_path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self._model, self.model_path)
        logger.info("ml_model_saved", path=str(self.model_path))

    def load(self) -> bool:
        if self.model_path is None or not self.model_path.exists():
            logger.info("ml_model_not_found", path=str(self.model_path))
            return False
        with self._lock:
            self._model = joblib.load(self.model_path)
        logger.info("ml_model_loaded", path=str(self.model_path))
        return True

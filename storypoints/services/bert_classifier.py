from __future__ import annotations

import re
import threading
from typing import Any, Callable

import structlog

from storypoints.config import settings
from storypoints.schemas.predictions import BertModelInfo, BertPrediction
from storypoints.services.estimator import STORY_POINT_SCALE, snap_to_scale

logger = structlog.get_logger(__name__)

FALLBACK_POINTS = 3

_digits = re.compile(r"\d+")


class ModelLoadError(RuntimeError):
    pass


def _default_pipeline_factory(model_name: str):
    from transformers import pipeline

    return pipeline("text-classification", model=model_name, device=-1)


def _load_error_message(error: Exception) -> str:
    text = str(error)
    lower = text.lower()
    if "connection" in lower or "network" in lower or "resolve" in lower:
        return "Network error while downloading the model. Check the internet connection."
    if "memory" in lower:
        return "Not enough memory to load the model."
    return text or "Unknown error while loading the model"


class BertClassifier:
    """Fine-tuned DistilBERT story point classifier, loaded on first use."""

    def __init__(
        self,
        model_name: str = settings.BERT_MODEL_NAME,
        *,
        max_chars: int = settings.BERT_MAX_CHARS,
        pipeline_factory: Callable[[str], Any] | None = None,
    ) -> None:
        self.model_name = model_name
        self.max_chars = max_chars
        self._pipeline_factory = pipeline_factory or _default_pipeline_factory
        self._classifier = None
        self._loading = False
        self._lock = threading.Lock()

    def load(self) -> None:
        if self._classifier is not None:
            return
        # Concurrent callers wait here for the first load instead of starting their own
        with self._lock:
            if self._classifier is not None:
                return
            self._loading = True
            try:
                logger.info("bert_model_loading", model=self.model_name)
                self._classifier = self._pipeline_factory(self.model_name)
                logger.info("bert_model_loaded", model=self.model_name)
            except Exception as e:
                logger.error("bert_model_load_failed", model=self.model_name, error=str(e))
                raise ModelLoadError(_load_error_message(e)) from e
            finally:
                self._loading = False

    def _build_context(self, title: str, description: str) -> str:
        context = f"{title}. {description}".strip()
        if len(context) > self.max_chars:
            return context[: self.max_chars] + "..."
        return context

    def classify(self, title: str, description: str) -> BertPrediction | None:
        try:
            self.load()
            results = self._classifier(self._build_context(title, description), top_k=None)
            if results and isinstance(results[0], list):
                results = results[0]
            if not results:
                raise ValueError("empty result from the classifier")

            best = max(results, key=lambda r: r["score"])
            match = _digits.search(str(best["label"]))
            points = int(match.group()) if match else None
            if points not in STORY_POINT_SCALE:
                points = snap_to_scale(points or FALLBACK_POINTS)

            return BertPrediction(
                points=points,
                confidence=float(best["score"]),
                all_predictions=[{"label": r["label"], "score": float(r["score"])} for r in results],
            )
        except Exception as e:
            logger.error("bert_classification_failed", error=str(e))
            return None

    def info(self) -> BertModelInfo:
        return BertModelInfo(loaded=self._classifier is not None, loading=self._loading, model_name=self.model_name)

    def clear(self) -> None:
        with self._lock:
            self._classifier = None
            self._loading = False

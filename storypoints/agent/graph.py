from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog
from langgraph.graph import StateGraph, START, END

from storypoints.agent.report import build_report
from storypoints.agent.state import EstimationState
from storypoints.clients.llm_client import AIEstimationError, LLMEstimator
from storypoints.config import settings
from storypoints.services.bert_classifier import BertClassifier
from storypoints.services.estimator import score_task
from storypoints.services.keywords import DEFAULT_TAXONOMY
from storypoints.services.ml_model import StoryPointClassifier
from storypoints.storage.json_store import JsonStore

logger = structlog.get_logger(__name__)

# First available estimate wins
FINAL_PRECEDENCE = (
    ("ai", "ai_points"),
    ("bert", "bert_points"),
    ("ml", "ml_points"),
    ("rule", "rule_points"),
)


@dataclass
class EstimatorServices:
    store: JsonStore
    classifier: StoryPointClassifier
    llm: LLMEstimator
    bert: BertClassifier
    _agent: Any = field(default=None, init=False, repr=False)

    @property
    def agent(self):
        if self._agent is None:
            self._agent = build_graph(self)
        return self._agent

    def retrain(self) -> bool:
        """Retrain the local classifier on the stored history; True when a model was produced."""
        stats = self.classifier.train(self.store.load_tasks(), self.store.load_taxonomy())
        if stats is None:
            return False
        self.classifier.save()
        self.store.save_model_stats(stats)
        return True


def create_services() -> EstimatorServices:
    store = JsonStore(settings.DATA_DIR)
    classifier = StoryPointClassifier(store.model_path)
    classifier.load()
    return EstimatorServices(store=store, classifier=classifier, llm=LLMEstimator(), bert=BertClassifier())


# Helpers


def _append_error(state: dict, msg: str) -> dict:
    errs = list(state.get("errors") or [])
    errs.append(msg)
    return {"errors": errs}


def _taxonomy(state: dict):
    return state.get("taxonomy") or DEFAULT_TAXONOMY


def build_graph(services: EstimatorServices):

    # Nodes
    def rule_estimate(state: dict) -> dict:
        breakdown = score_task(state.get("description") or "", state.get("task_type") or "", _taxonomy(state))
        return {"breakdown": breakdown, "rule_points": breakdown.final_points}

    def ml_estimate(state: dict) -> dict:
        if not services.classifier.is_trained:
            return {"ml_points": None}
        try:
            points = services.classifier.predict(state["description"], state["task_type"], _taxonomy(state))
            return {"ml_points": points}
        except Exception as e:
            logger.error("ml_predict_failed", error=str(e))
            return {"ml_points": None, **_append_error(state, f"ML prediction error: {e}")}

    def ai_estimate(state: dict) -> dict:
        model = state.get("ai_model")
        if not model:
            return {"ai_points": None}
        try:
            result = services.llm.estimate(state["description"], state["task_type"], model)
            return {"ai_points": result.points, "ai_note": result.note}
        except AIEstimationError as e:
            return {"ai_points": None, "ai_error": e.user_message, **_append_error(state, f"AI error ({e.code}): {e.message}")}

    def bert_estimate(state: dict) -> dict:
        if not state.get("use_bert"):
            return {"bert_points": None}
        prediction = services.bert.classify(state.get("title") or "", state["description"])
        if prediction is None:
            msg = "BERT classification failed. Check that the model is loaded."
            return {"bert_points": None, "bert_error": msg, **_append_error(state, msg)}
        return {"bert_points": prediction.points, "bert_confidence": prediction.confidence}

    def resolve_final(state: dict) -> dict:
        for source, key in FINAL_PRECEDENCE:
            if state.get(key) is not None:
                return {"final_points": state[key], "final_source": source}
        return {"final_points": state["rule_points"], "final_source": "rule"}

    def report(state: dict) -> dict:
        return {"report_markdown": build_report(state)}

    # Graph wiring
    graph = StateGraph(EstimationState)
    graph.add_node("rule_estimate", rule_estimate)
    graph.add_node("ml_estimate", ml_estimate)
    graph.add_node("ai_estimate", ai_estimate)
    graph.add_node("bert_estimate", bert_estimate)
    graph.add_node("resolve_final", resolve_final)
    graph.add_node("build_report", report)

    graph.add_edge(START, "rule_estimate")
    graph.add_edge("rule_estimate", "ml_estimate")
    graph.add_edge("ml_estimate", "ai_estimate")
    graph.add_edge("ai_estimate", "bert_estimate")
    graph.add_edge("bert_estimate", "resolve_final")
    graph.add_edge("resolve_final", "build_report")
    graph.add_edge("build_report", END)

    return graph.compile()

"""End-to-end runs of the estimation graph with fake model backends."""

from __future__ import annotations

from storypoints.agent.graph import EstimatorServices
from storypoints.agent.report import build_report, summarize_breakdown
from storypoints.clients.llm_client import LLMEstimator
from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.services.bert_classifier import BertClassifier
from storypoints.services.estimator import STORY_POINT_SCALE, score_task


class FailingChat:
    def invoke(self, messages):
        raise RuntimeError("Rate limit reached for model")


def _run(services: EstimatorServices, **overrides) -> dict:
    state = {
        "title": "Tela de login",
        "description": "algoritmo simples",
        "task_type": "feature",
        "errors": [],
        **overrides,
    }
    return services.agent.invoke(state)


def test_rule_estimate_only(services) -> None:
    result = _run(services)
    assert result["rule_points"] == 3
    assert result["breakdown"].final_points == 3
    assert result["ml_points"] is None
    assert result["ai_points"] is None
    assert result["bert_points"] is None
    assert result["final_points"] == 3
    assert result["final_source"] == "rule"
    assert result["errors"] == []


def test_ai_estimate_takes_precedence(services) -> None:
    result = _run(services, ai_model="groq", use_bert=True)
    assert result["ai_points"] == 8
    assert result["bert_points"] == 5
    assert result["final_points"] == 8
    assert result["final_source"] == "ai"


def test_bert_estimate_when_no_ai(services) -> None:
    result = _run(services, use_bert=True)
    assert result["bert_points"] == 5
    assert result["bert_confidence"] == 0.71
    assert result["final_source"] == "bert"


def test_ml_estimate_when_trained(services, training_tasks) -> None:
    services.store.save_tasks(training_tasks)
    assert services.retrain() is True

    result = _run(services)
    assert result["ml_points"] in STORY_POINT_SCALE
    assert result["final_points"] == result["ml_points"]
    assert result["final_source"] == "ml"
    assert services.store.load_model_stats().trained_on == 10
    assert services.store.model_path.exists()


def test_ai_failure_falls_back(services) -> None:
    services.llm = LLMEstimator(chat_factory=lambda p: FailingChat())
    result = _run(services, ai_model="groq")
    assert result["ai_points"] is None
    assert result["ai_error"]
    assert result["final_source"] == "rule"
    assert any("RATE_LIMIT_EXCEEDED" in e for e in result["errors"])


def test_bert_failure_falls_back(services) -> None:
    def broken(name):
        raise OSError("out of memory")

    services.bert = BertClassifier(pipeline_factory=broken)
    result = _run(services, use_bert=True)
    assert result["bert_points"] is None
    assert result["bert_error"]
    assert result["final_source"] == "rule"


def test_state_taxonomy_is_used(services) -> None:
    taxonomy = KeywordTaxonomy(dependency=["login"])
    result = _run(services, description="login", taxonomy=taxonomy)
    assert result["breakdown"].dependency_details.keywords == ["login"]
    assert result["rule_points"] == 3


def test_report_markdown(services) -> None:
    result = _run(services, ai_model="groq")
    report = result["report_markdown"]
    assert report.startswith("# Story Point Estimate")
    assert "*Tela de login*" in report
    assert "AI (groq): **8** points" in report
    assert "`algoritmo`" in report
    assert report.endswith("*Auto-generated report.*")


def test_report_lists_errors() -> None:
    report = build_report({"title": "x", "rule_points": 1, "final_points": 1, "errors": ["boom"]})
    assert "> - boom" in report
    assert "_-_" in report


def test_summarize_breakdown_rows() -> None:
    table = summarize_breakdown(score_task("algoritmo simples", "feature"))
    assert "| Complexity: high | +2 | `algoritmo` |" in table
    assert "| Complexity: low | -1 | `simples` |" in table
    assert "mapped to **3**" in table


"""Shared fixtures for the story point estimator tests.

External models are replaced by in-process fakes: langchain-core's
FakeListChatModel for the LLM and a plain callable for the transformer
pipeline. Nothing touches the network.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from storypoints.agent.graph import EstimatorServices
from storypoints.api.dependencies import get_services
from storypoints.clients.llm_client import LLMEstimator
from storypoints.schemas.task import Task
from storypoints.services.bert_classifier import BertClassifier
from storypoints.services.ml_model import StoryPointClassifier
from storypoints.storage.json_store import JsonStore


class FakeTextClassifier:
    """Stands in for a transformers text-classification pipeline."""

    def __init__(self, results: list[dict]):
        self.results = results
        self.calls: list[str] = []

    def __call__(self, text: str, top_k=None):
        self.calls.append(text)
        return self.results


def make_task(description: str, task_type: str, points: int, index: int = 0) -> Task:
    return Task(
        id=f"task-{index}",
        title=f"Task {index}",
        description=description,
        task_type=task_type,
        estimated_points=points,
        final_points=points,
    )


TRAINING_SET = [
    ("Corrigir typo no texto do botão", "bug", 1),
    ("Ajustar estilo css do label", "bug", 1),
    ("Atualizar documentação do módulo", "documentation", 2),
    ("Adicionar campo de validação simples", "feature", 2),
    ("Criar componente de página de perfil", "feature", 3),
    ("Implementar endpoint da api de pedidos", "feature", 5),
    ("Refatoração da arquitetura do serviço com integração externa", "refactor", 8),
    ("Otimização de performance do algoritmo de busca em todos os módulos", "refactor", 8),
    ("Redesenho completo da plataforma com múltiplas integrações de terceiros", "feature", 13),
    ("Sistema global de segurança com algoritmos complexos e integração com banco de dados", "feature", 21),
]


@pytest.fixture
def training_tasks() -> list[Task]:
    return [make_task(desc, task_type, points, i) for i, (desc, task_type, points) in enumerate(TRAINING_SET)]


@pytest.fixture
def store(tmp_path) -> JsonStore:
    return JsonStore(tmp_path / "data")


@pytest.fixture
def fake_pipeline() -> FakeTextClassifier:
    return FakeTextClassifier([
        {"label": "LABEL_5", "score": 0.71},
        {"label": "LABEL_3", "score": 0.19},
        {"label": "LABEL_8", "score": 0.10},
    ])


@pytest.fixture
def services(store, fake_pipeline) -> EstimatorServices:
    return EstimatorServices(
        store=store,
        classifier=StoryPointClassifier(store.model_path, random_state=0),
        llm=LLMEstimator(chat_factory=lambda provider: FakeListChatModel(responses=["8"])),
        bert=BertClassifier(pipeline_factory=lambda name: fake_pipeline),
    )


@pytest.fixture
def client(services):
    from storypoints.api.main import app

    app.dependency_overrides[get_services] = lambda: services
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

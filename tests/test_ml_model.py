from __future__ import annotations

from storypoints.services.estimator import STORY_POINT_SCALE
from storypoints.services.ml_model import StoryPointClassifier, build_training_set


def test_build_training_set(training_tasks) -> None:
    x, y = build_training_set(training_tasks)
    assert x.shape == (10, 13)
    assert y.tolist() == [0, 0, 1, 1, 2, 3, 4, 4, 5, 6]


def test_off_scale_labels_are_snapped(training_tasks) -> None:
    tasks = [
        training_tasks[0].model_copy(update={"final_points": 4}),
        training_tasks[1].model_copy(update={"final_points": 100}),
        training_tasks[2].model_copy(update={"final_points": 0}),
    ]
    _, y = build_training_set(tasks)
    assert y.tolist() == [2, 6, 0]


def test_training_survives_an_off_scale_task(training_tasks) -> None:
    tasks = [*training_tasks, training_tasks[0].model_copy(update={"id": "odd", "final_points": 6})]
    stats = StoryPointClassifier(random_state=0).train(tasks)
    assert stats is not None
    assert stats.trained_on == 11


def test_untrained_model_predicts_nothing(tmp_path) -> None:
    clf = StoryPointClassifier(tmp_path / "model.joblib")
    assert clf.is_trained is False
    assert clf.predict("qualquer coisa", "feature") is None


def test_too_few_tasks_skips_training(training_tasks) -> None:
    clf = StoryPointClassifier(min_tasks=5, random_state=0)
    assert clf.train(training_tasks[:4]) is None
    assert clf.is_trained is False


def test_single_label_skips_training(training_tasks) -> None:
    same = [t.model_copy(update={"final_points": 3}) for t in training_tasks]
    clf = StoryPointClassifier(random_state=0)
    assert clf.train(same) is None


def test_train_and_predict(training_tasks) -> None:
    clf = StoryPointClassifier(random_state=0)
    stats = clf.train(training_tasks)

    assert stats is not None
    assert stats.trained_on == 10
    assert stats.last_trained_at is not None
    assert stats.accuracy is not None and 0.0 <= stats.accuracy <= 1.0
    assert clf.predict("Implementar endpoint da api", "feature") in STORY_POINT_SCALE


def test_small_history_trains_without_holdout(training_tasks) -> None:
    clf = StoryPointClassifier(min_tasks=2, random_state=0)
    stats = clf.train(training_tasks[:4])
    assert stats is not None
    assert stats.accuracy is None


def test_save_and_load(tmp_path, training_tasks) -> None:
    path = tmp_path / "models" / "model.joblib"
    clf = StoryPointClassifier(path, random_state=0)
    clf.train(training_tasks)
    clf.save()
    assert path.exists()

    restored = StoryPointClassifier(path)
    assert restored.load() is True
    description, task_type = "Criar componente de página", "feature"
    assert restored.predict(description, task_type) == clf.predict(description, task_type)


def test_load_missing_file(tmp_path) -> None:
    assert StoryPointClassifier(tmp_path / "nope.joblib").load() is False

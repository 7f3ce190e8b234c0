from __future__ import annotations

import threading

from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.task import ModelStats
from storypoints.services.keywords import DEFAULT_TAXONOMY
from storypoints.storage.json_store import KEYWORDS_FILE, JsonStore


def test_empty_store_defaults(store: JsonStore) -> None:
    assert store.load_tasks() == []
    assert store.load_model_stats() == ModelStats()
    assert store.load_taxonomy() == DEFAULT_TAXONOMY


def test_add_tasks_prepends_newest_first(store: JsonStore, training_tasks) -> None:
    first, second, third = training_tasks[:3]
    store.add_tasks([first])
    result = store.add_tasks([second, third])

    assert [t.id for t in result] == [second.id, third.id, first.id]
    assert store.load_tasks() == result


def test_concurrent_add_tasks_keeps_every_task(store: JsonStore, training_tasks) -> None:
    tasks = training_tasks[:8]
    barrier = threading.Barrier(len(tasks))

    def add(task):
        barrier.wait()
        store.add_tasks([task])

    threads = [threading.Thread(target=add, args=(task,)) for task in tasks]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(t.id for t in store.load_tasks()) == sorted(t.id for t in tasks)


def test_tasks_survive_a_new_store_instance(store: JsonStore, training_tasks) -> None:
    store.save_tasks(training_tasks)
    reopened = JsonStore(store.data_dir)
    assert reopened.load_tasks() == training_tasks


def test_model_stats_round_trip(store: JsonStore) -> None:
    stats = ModelStats(trained_on=12, accuracy=0.5)
    store.save_model_stats(stats)
    assert store.load_model_stats() == stats


def test_taxonomy_save_and_reset(store: JsonStore) -> None:
    custom = KeywordTaxonomy(dependency=["vendor"])
    store.save_taxonomy(custom)
    assert store.load_taxonomy() == custom

    assert store.reset_taxonomy() == DEFAULT_TAXONOMY
    assert not (store.data_dir / KEYWORDS_FILE).exists()
    assert store.load_taxonomy() == DEFAULT_TAXONOMY


def test_reset_without_saved_taxonomy(store: JsonStore) -> None:
    assert store.reset_taxonomy() == DEFAULT_TAXONOMY


def test_unreadable_taxonomy_falls_back_to_default(store: JsonStore) -> None:
    store.data_dir.mkdir(parents=True)
    (store.data_dir / KEYWORDS_FILE).write_text('{"dependency": ["ok", "   "]}', encoding="utf-8")
    assert store.load_taxonomy() == DEFAULT_TAXONOMY


def test_writes_leave_no_temp_files(store: JsonStore, training_tasks) -> None:
    store.save_tasks(training_tasks)
    store.save_model_stats(ModelStats())
    assert not list(store.data_dir.glob("*.tmp"))

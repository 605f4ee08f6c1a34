from dataclasses import dataclass, field
from typing import Dict

import pytest

from lpsolver import (
    InMemoryStorage,
    KnowledgeBaseError,
    PickleFileStorage,
    TrainableKnowledgeBase,
)


@dataclass
class ModelParameters:
    weights: Dict[str, float] = field(default_factory=dict)


@dataclass
class TrainingParameters:
    learning_rate: float = 0.1


def make_kb(storage, name="model"):
    return TrainableKnowledgeBase(name, storage, ModelParameters, TrainingParameters)


@pytest.fixture(params=["memory", "file"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryStorage()
    return PickleFileStorage(tmp_path / "kb")


def test_new_knowledge_base_is_empty(storage):
    kb = make_kb(storage)
    assert not kb.trained
    assert not kb.is_configured()
    assert kb.model_parameters is None


def test_reinitialize_builds_fresh_objects(storage):
    kb = make_kb(storage)
    kb.reinitialize()
    assert kb.is_configured()
    assert kb.model_parameters == ModelParameters()
    assert kb.training_parameters == TrainingParameters()
    assert not kb.trained


def test_save_empty_raises(storage):
    with pytest.raises(KnowledgeBaseError):
        make_kb(storage).save()


def test_save_and_load(storage):
    kb = make_kb(storage)
    kb.reinitialize()
    kb.model_parameters.weights["x"] = 1.5
    kb.training_parameters.learning_rate = 0.01
    kb.trained = True
    kb.save()

    other = make_kb(storage)
    other.load()
    assert other.trained
    assert other.model_parameters.weights == {"x": 1.5}
    assert other.training_parameters.learning_rate == 0.01


def test_load_missing_raises(storage):
    with pytest.raises(KnowledgeBaseError):
        make_kb(storage, "missing").load()


def test_load_keeps_existing_parameters(storage):
    kb = make_kb(storage)
    kb.reinitialize()
    kb.save()
    kb.model_parameters.weights["y"] = 2.0
    kb.load()
    assert kb.model_parameters.weights == {"y": 2.0}
    assert not kb.trained


def test_erase_drops_storage(storage):
    kb = make_kb(storage)
    kb.reinitialize()
    kb.save()
    kb.erase()
    assert not kb.is_configured()
    assert not kb.trained
    with pytest.raises(KnowledgeBaseError):
        make_kb(storage).load()


def test_empty_training_parameters_is_new_object(storage):
    kb = make_kb(storage)
    kb.reinitialize()
    assert kb.empty_training_parameters() is not kb.training_parameters


def test_file_storage_layout(tmp_path):
    storage = PickleFileStorage(tmp_path)
    kb = make_kb(storage, "classifier")
    kb.reinitialize()
    kb.save()
    assert (tmp_path / "classifier.pkl").exists()
    kb.erase()
    assert not (tmp_path / "classifier.pkl").exists()


def test_in_memory_storage_membership():
    storage = InMemoryStorage()
    kb = make_kb(storage, "ranker")
    kb.reinitialize()
    assert "ranker" not in storage
    kb.save()
    assert "ranker" in storage
    kb.erase()
    assert "ranker" not in storage

"""
Trainable knowledge base.

Keeps the model parameters and training parameters of a trainable algorithm
together with a trained flag, and persists them through a pluggable storage
backend. Empty parameter objects are built by caller-supplied factories.
"""

import logging
import pickle
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

MP = TypeVar("MP")
TP = TypeVar("TP")


class KnowledgeBaseError(RuntimeError):
    pass


class StorageBackend(ABC):
    """Stores one opaque blob per database name."""

    @abstractmethod
    def save(self, db_name: str, state: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def load(self, db_name: str) -> Optional[Dict[str, Any]]:
        """Return the stored state, or None if nothing is stored."""

    @abstractmethod
    def drop(self, db_name: str) -> None:
        ...


class InMemoryStorage(StorageBackend):

    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    def save(self, db_name: str, state: Dict[str, Any]) -> None:
        self._blobs[db_name] = pickle.dumps(state)

    def load(self, db_name: str) -> Optional[Dict[str, Any]]:
        blob = self._blobs.get(db_name)
        return None if blob is None else pickle.loads(blob)

    def drop(self, db_name: str) -> None:
        self._blobs.pop(db_name, None)

    def __contains__(self, db_name: str) -> bool:
        return db_name in self._blobs


class PickleFileStorage(StorageBackend):
    """One ``<db_name>.pkl`` file per database inside ``directory``."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, db_name: str) -> Path:
        return self.directory / f"{db_name}.pkl"

    def save(self, db_name: str, state: Dict[str, Any]) -> None:
        with open(self._path(db_name), 'wb') as f:
            pickle.dump(state, f)

    def load(self, db_name: str) -> Optional[Dict[str, Any]]:
        path = self._path(db_name)
        if not path.exists():
            return None
        with open(path, 'rb') as f:
            return pickle.load(f)

    def drop(self, db_name: str) -> None:
        self._path(db_name).unlink(missing_ok=True)


class TrainableKnowledgeBase(Generic[MP, TP]):
    """
    Lifecycle wrapper around model and training parameters.

    Args:
        db_name: Name under which the state is stored
        storage: Storage backend
        model_parameters_factory: Builds empty model parameters
        training_parameters_factory: Builds empty training parameters
    """

    def __init__(
        self,
        db_name: str,
        storage: StorageBackend,
        model_parameters_factory: Callable[[], MP],
        training_parameters_factory: Callable[[], TP],
    ) -> None:
        self.db_name = db_name
        self.storage = storage
        self.model_parameters_factory = model_parameters_factory
        self.training_parameters_factory = training_parameters_factory

        self.trained = False
        self.model_parameters: Optional[MP] = None
        self.training_parameters: Optional[TP] = None

    def is_configured(self) -> bool:
        return self.model_parameters is not None and self.training_parameters is not None

    def save(self) -> None:
        if self.model_parameters is None:
            raise KnowledgeBaseError("Can not store an empty KnowledgeBase.")
        self.storage.save(self.db_name, {
            'model_parameters': self.model_parameters,
            'training_parameters': self.training_parameters,
        })
        logger.debug(f"Saved knowledge base '{self.db_name}'")

    def load(self) -> None:
        """Load the stored state unless model parameters are already present."""
        if self.model_parameters is not None:
            return
        state = self.storage.load(self.db_name)
        if state is None:
            raise KnowledgeBaseError("The KnowledgeBase could not be loaded.")
        self.training_parameters = state['training_parameters']
        self.model_parameters = state['model_parameters']
        self.trained = True
        logger.debug(f"Loaded knowledge base '{self.db_name}'")

    def erase(self) -> None:
        self.storage.drop(self.db_name)
        self.model_parameters = None
        self.training_parameters = None
        self.trained = False

    def reinitialize(self) -> None:
        self.erase()
        self.model_parameters = self.model_parameters_factory()
        self.training_parameters = self.empty_training_parameters()

    def empty_training_parameters(self) -> TP:
        return self.training_parameters_factory()

    def __repr__(self) -> str:
        return (f"TrainableKnowledgeBase(db_name={self.db_name!r}, trained={self.trained}, "
                f"configured={self.is_configured()})")

"""
Base repository class for record store access.

Provides a common abstraction layer for all repositories, encapsulating
record store access and providing shared utilities for data operations.
"""

import logging
from typing import TYPE_CHECKING, Any, Generic, Optional, Sequence, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from modules.store.interfaces import IRecordStore


T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for record store operations:
    - Record store access via self._store
    - Whole-collection load/save helpers with model mapping

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping through the helpers below.

    Example:
        class CourseRepository(BaseRepository[Course]):
            def list_for(self, institute_id: str) -> list[Course]:
                return [
                    c for c in self._load_models("courses", Course)
                    if c.institute_id == institute_id
                ]
    """

    def __init__(self, store: "IRecordStore") -> None:
        """
        Initialize the repository with a record store.

        Args:
            store: Record store instance for persistence operations.
        """
        self._store = store

    def _load_collection(self, key: str, model: type[T]) -> tuple[list[T], list[Any]]:
        """
        Load a collection, splitting readable models from unreadable entries.

        Returns:
            (models, unreadable) where unreadable holds the raw entries that
            failed validation, in stored order. Pass them back to
            _save_models so a write never drops data it could not read.
        """
        raw = self._store.load(key)
        if not isinstance(raw, list):
            return [], []

        items: list[T] = []
        unreadable: list[Any] = []
        for entry in raw:
            try:
                items.append(model.model_validate(entry))
            except PydanticValidationError:
                logger.warning("Skipping malformed entry in %r", key)
                unreadable.append(entry)
        return items, unreadable

    def _load_models(self, key: str, model: type[T]) -> list[T]:
        """
        Load a collection and map each entry to a model.

        Entries that fail validation are skipped with a warning, the same
        way a corrupt collection is treated as absent.
        """
        return self._load_collection(key, model)[0]

    def _save_models(
        self,
        key: str,
        items: list[T],
        unreadable: Sequence[Any] = (),
    ) -> None:
        """
        Overwrite a collection with the given models.

        Raw unreadable entries are written back unchanged after the models.
        """
        entries: list[Any] = [item.model_dump(mode="json") for item in items]
        entries.extend(unreadable)
        self._store.save(key, entries)

    def _load_model(self, key: str, model: type[T]) -> Optional[T]:
        """Load a singleton record, or None if absent or malformed."""
        raw: Any = self._store.load(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Ignoring malformed record in %r", key)
            return None

    def _save_model(self, key: str, item: T) -> None:
        """Overwrite a singleton record."""
        self._store.save(key, item.model_dump(mode="json"))

"""Primary-key lookups shared by the repositories.

A repository wraps the request's Session and never commits; the service
calling it decides when the transaction ends. Subclasses set ``model_class``
and ``not_found_error`` and may override ``_base_query`` to add eager loads.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from ..database import Base
from ..exceptions import EditorException

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    model_class: Type[ModelT]
    not_found_error: Type[EditorException]
    id_column: str = "id"

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    def get_by_id_optional(self, entity_id: str) -> Optional[ModelT]:
        key = getattr(self.model_class, self.id_column)
        return self._base_query().filter(key == entity_id).first()

    def get_by_id(self, entity_id: str) -> ModelT:
        """Like ``get_by_id_optional`` but raises ``not_found_error`` when absent."""
        found = self.get_by_id_optional(entity_id)
        if found is None:
            raise self.not_found_error(entity_id)
        return found

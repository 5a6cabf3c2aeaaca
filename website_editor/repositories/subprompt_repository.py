"""Repositories for revision nodes (SubPrompt) and their Code payloads."""

from typing import List, Optional

from sqlalchemy.orm import Query, joinedload

from ..models import SubPrompt, Code
from ..exceptions import SubPromptNotFoundError, CodeNotFoundError
from .base import BaseRepository


class SubPromptRepository(BaseRepository[SubPrompt]):
    """SubPrompt rows, always loaded together with their Code."""

    model_class = SubPrompt
    not_found_error = SubPromptNotFoundError

    def _base_query(self) -> Query:
        return self.db.query(SubPrompt).options(joinedload(SubPrompt.code))

    def get_by_ui(self, ui_id: str) -> List[SubPrompt]:
        """Every revision of a UI, oldest first."""
        return (
            self._base_query()
            .filter(SubPrompt.ui_id == ui_id)
            .order_by(SubPrompt.created_at, SubPrompt.sub_id)
            .all()
        )

    def get_sub_ids(self, ui_id: str) -> set[str]:
        """Sibling set used by the sub_id allocator."""
        rows = self.db.query(SubPrompt.sub_id).filter(SubPrompt.ui_id == ui_id).all()
        return {row[0] for row in rows}

    def create_with_code(
        self,
        ui_id: str,
        sub_id: str,
        sub_prompt: str,
        code: str,
        model_id: Optional[str] = None,
    ) -> SubPrompt:
        """Insert a SubPrompt and its Code. Flushes, never commits.

        Raises sqlalchemy.exc.IntegrityError when sub_id is already taken.
        """
        db_subprompt = SubPrompt(
            ui_id=ui_id,
            sub_id=sub_id,
            sub_prompt=sub_prompt,
            model_id=model_id,
        )
        db_subprompt.code = Code(code=code)
        self.db.add(db_subprompt)
        self.db.flush()
        return db_subprompt


class CodeRepository(BaseRepository[Code]):
    """Read access to Code rows."""

    model_class = Code
    not_found_error = CodeNotFoundError

"""Revision service: appends revisions to a UI's tree and resolves them.

Allocation and insertion happen in one transaction. The (ui_id, sub_id)
unique constraint is the source of truth for collisions: when a concurrent
writer takes the allocated id first, the savepoint is rolled back and the
allocation is recomputed against the fresh sibling set.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.revision_path import allocate_sub_id, is_named
from ..exceptions import DatabaseError, RevisionConflictError
from ..models import Code, SubPrompt
from ..repositories import CodeRepository, SubPromptRepository, UiRepository

logger = logging.getLogger(__name__)


class SubPromptService:
    """Business logic for revisions.

    Public methods:
        get_code          -- a single Code payload
        get_subprompt     -- a single revision with its code
        list_for_ui       -- every revision of a UI
        create_with_code  -- allocate a sub_id and persist revision + code atomically
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = SubPromptRepository(db)
        self.code_repo = CodeRepository(db)
        self.ui_repo = UiRepository(db)

    def get_code(self, code_id: str) -> Code:
        return self.code_repo.get_by_id(code_id)

    def get_subprompt(self, subprompt_id: str) -> SubPrompt:
        return self.repo.get_by_id(subprompt_id)

    def list_for_ui(self, ui_id: str) -> List[SubPrompt]:
        return self.repo.get_by_ui(ui_id)

    def create_with_code(
        self,
        ui_id: str,
        sub_prompt: str,
        parent_sub_id: str,
        code: str,
        model_id: Optional[str] = None,
    ) -> SubPrompt:
        """Create a revision under ``parent_sub_id`` together with its code.

        Raises:
            UiNotFoundError: the UI does not exist.
            RevisionConflictError: no free sub_id after the configured attempts,
                or a mode anchor that already exists.
            DatabaseError: any other storage failure. Nothing is persisted.
        """
        self.ui_repo.get_by_id(ui_id)

        try:
            subprompt = self._insert_with_retry(ui_id, sub_prompt, parent_sub_id, code, model_id)
            self.ui_repo.touch(ui_id)
            self.db.commit()
        except RevisionConflictError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Failed to create revision",
                extra={"operation": "create_with_code", "ui_id": ui_id, "parent_sub_id": parent_sub_id},
                exc_info=True,
            )
            raise DatabaseError("Failed to create revision", e) from e

        self.db.refresh(subprompt)
        logger.info(
            "Created revision %s", subprompt.sub_id,
            extra={"ui_id": ui_id, "subprompt_id": subprompt.id, "parent_sub_id": parent_sub_id},
        )
        return subprompt

    def _insert_with_retry(
        self,
        ui_id: str,
        sub_prompt: str,
        parent_sub_id: str,
        code: str,
        model_id: Optional[str],
    ) -> SubPrompt:
        sub_id = parent_sub_id
        for attempt in range(1, settings.revision_allocation_attempts + 1):
            sub_id = allocate_sub_id(parent_sub_id, self.repo.get_sub_ids(ui_id))
            savepoint = self.db.begin_nested()
            try:
                subprompt = self.repo.create_with_code(ui_id, sub_id, sub_prompt, code, model_id)
                savepoint.commit()
                return subprompt
            except IntegrityError:
                savepoint.rollback()
                if is_named(sub_id):
                    # Anchors never advance, so retrying would collide again.
                    raise RevisionConflictError(ui_id, sub_id)
                logger.warning(
                    "sub_id collision, retrying allocation",
                    extra={"ui_id": ui_id, "sub_id": sub_id, "attempt": attempt},
                )
        raise RevisionConflictError(ui_id, sub_id)

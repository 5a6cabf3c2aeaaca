"""UI service: deep module for the UI aggregate.

Owns lookup, fork, update and delete. A UI together with its SubPrompts and
Code is one aggregate: fork copies all of it and delete removes all of it,
each inside a single transaction so no partial state is ever committed.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import (
    DatabaseError,
    ForbiddenError,
    SelfForkError,
    UiNotFoundError,
    ValidationError,
)
from ..models import Ui
from ..repositories import SubPromptRepository, UiRepository
from ..schemas.ui import UiUpdate, UiUpdateResponse

logger = logging.getLogger(__name__)


class UiService:
    """Business logic for UIs.

    Public methods:
        get_ui         -- UI row only
        get_ui_detail  -- UI with owner and full revision tree
        fork_ui        -- copy another user's UI and its whole tree
        update_ui      -- owner-only edit of preview image / prompt
        delete_ui      -- owner-only delete of the aggregate
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = UiRepository(db)
        self.subprompt_repo = SubPromptRepository(db)

    def get_ui(self, ui_id: str) -> Ui:
        return self.repo.get_by_id(ui_id)

    def get_ui_detail(self, ui_id: str) -> Ui:
        ui = self.repo.get_with_revisions(ui_id)
        if ui is None:
            raise UiNotFoundError(ui_id)
        return ui

    def fork_ui(self, source_ui_id: str, requester_id: str) -> Ui:
        """Create a new UI owned by ``requester_id`` holding a full copy of the source tree.

        sub_id strings are copied verbatim: they describe tree shape, not ownership.

        Raises:
            UiNotFoundError: source does not exist.
            SelfForkError: requester already owns the source.
            DatabaseError: storage failure; nothing is persisted.
        """
        source = self.get_ui_detail(source_ui_id)
        if source.owner_id == requester_id:
            raise SelfForkError(source_ui_id)

        try:
            forked = self.repo.create(
                owner_id=requester_id,
                ui_type=source.ui_type,
                prompt=source.prompt,
                preview_image=source.preview_image,
                public=True,
                forked_from=source.id,
            )
            for subprompt in source.subprompts:
                self.subprompt_repo.create_with_code(
                    ui_id=forked.id,
                    sub_id=subprompt.sub_id,
                    sub_prompt=subprompt.sub_prompt,
                    code=subprompt.code.code if subprompt.code else "",
                    model_id=subprompt.model_id,
                )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Fork failed",
                extra={"operation": "fork_ui", "ui_id": source_ui_id, "user_id": requester_id},
                exc_info=True,
            )
            raise DatabaseError("Failed to fork UI", e) from e

        forked_id = forked.id
        logger.info(
            "Forked UI %s", source_ui_id,
            extra={"ui_id": forked_id, "forked_from": source_ui_id, "user_id": requester_id,
                   "revisions": len(source.subprompts)},
        )
        return self.get_ui_detail(forked_id)

    def update_ui(self, ui_id: str, requester_id: str, update: UiUpdate) -> UiUpdateResponse:
        """Persist a new preview image and/or prompt. Owner only."""
        if update.img is None and update.prompt is None:
            raise ValidationError("Nothing to update: provide img or prompt")

        ui = self._get_owned(ui_id, requester_id)
        if update.img is not None:
            ui.preview_image = update.img
        if update.prompt is not None:
            ui.prompt = update.prompt

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Update failed", extra={"operation": "update_ui", "ui_id": ui_id}, exc_info=True)
            raise DatabaseError("Failed to update UI", e) from e

        self.db.refresh(ui)
        return UiUpdateResponse(id=ui.id, img=ui.preview_image, prompt=ui.prompt)

    def delete_ui(self, ui_id: str, requester_id: str) -> None:
        """Delete the UI with every SubPrompt, Code and Like. Owner only."""
        ui = self._get_owned(ui_id, requester_id)
        try:
            self.repo.delete(ui)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Delete failed", extra={"operation": "delete_ui", "ui_id": ui_id}, exc_info=True)
            raise DatabaseError("Failed to delete UI", e) from e
        logger.info("Deleted UI %s", ui_id, extra={"ui_id": ui_id, "user_id": requester_id})

    def _get_owned(self, ui_id: str, requester_id: str) -> Ui:
        ui: Optional[Ui] = self.repo.get_by_id_optional(ui_id)
        if ui is None:
            raise UiNotFoundError(ui_id)
        if ui.owner_id != requester_id:
            raise ForbiddenError("Only the owner can modify this UI", details={"ui_id": ui_id})
        return ui

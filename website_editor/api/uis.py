"""UI endpoints: detail, engagement, fork, update and delete.

Ownership checks happen in UiService; the routes only resolve the caller.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.ui import (
    DeleteResponse,
    LikeResponse,
    UiDetailResponse,
    UiUpdate,
    UiUpdateResponse,
)
from ..services import EngagementService, UiService

router = APIRouter(prefix="/api/website-editor/uis", tags=["uis"])


@router.get("/{ui_id}", response_model=UiDetailResponse)
def get_ui(ui_id: str, db: Session = Depends(get_db)):
    """Get a UI with its owner and full revision tree."""
    return UiService(db).get_ui_detail(ui_id)


@router.post("/{ui_id}/like", response_model=LikeResponse)
def toggle_like(
    ui_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Like the UI, or remove the caller's like if present."""
    liked = EngagementService(db).toggle_like(auth.user_id, ui_id)
    return LikeResponse(liked=liked)


@router.post("/{ui_id}/view", status_code=202, response_class=Response)
def record_view(ui_id: str, db: Session = Depends(get_db)):
    """Count a view. Always accepted, even if the count could not be stored."""
    EngagementService(db).increment_view_count(ui_id)
    return Response(status_code=202)


@router.post("/{ui_id}/fork", response_model=UiDetailResponse, status_code=201)
def fork_ui(
    ui_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Copy another user's UI, with every revision, into the caller's account."""
    return UiService(db).fork_ui(ui_id, auth.user_id)


@router.put("/{ui_id}", response_model=UiUpdateResponse)
def update_ui(
    ui_id: str,
    update: UiUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Change the preview image and/or prompt of an owned UI."""
    return UiService(db).update_ui(ui_id, auth.user_id, update)


@router.delete("/{ui_id}", response_model=DeleteResponse)
def delete_ui(
    ui_id: str,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Delete an owned UI together with its revisions and likes."""
    UiService(db).delete_ui(ui_id, auth.user_id)
    return DeleteResponse()

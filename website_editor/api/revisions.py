"""Revision and code endpoints.

Reads are public; creating a revision requires an authenticated caller.
Allocation of the new sub_id lives entirely in SubPromptService.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.revision import CodeResponse, SubPromptCreate, SubPromptResponse
from ..services import SubPromptService

router = APIRouter(prefix="/api/website-editor", tags=["revisions"])


@router.get("/code/{code_id}", response_model=CodeResponse)
def get_code(code_id: str, db: Session = Depends(get_db)):
    """Get the generated code of one revision."""
    return SubPromptService(db).get_code(code_id)


@router.get("/subprompts/{subprompt_id}", response_model=SubPromptResponse)
def get_subprompt(subprompt_id: str, db: Session = Depends(get_db)):
    """Get a revision with its code."""
    return SubPromptService(db).get_subprompt(subprompt_id)


@router.post("/subprompts", response_model=SubPromptResponse, status_code=201)
def create_subprompt(
    payload: SubPromptCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Append a revision under ``parent_sub_id``; the server picks its sub_id."""
    return SubPromptService(db).create_with_code(
        ui_id=payload.ui_id,
        sub_prompt=payload.sub_prompt,
        parent_sub_id=payload.parent_sub_id,
        code=payload.code,
        model_id=payload.model_id,
    )

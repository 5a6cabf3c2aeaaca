"""Revision schemas."""

from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional


class CodeResponse(BaseModel):
    """Generated code payload."""
    id: str
    code: str

    class Config:
        from_attributes = True


class SubPromptCreate(BaseModel):
    """Schema for creating a revision."""
    sub_prompt: str
    ui_id: str
    parent_sub_id: str
    code: str
    model_id: Optional[str] = None

    class Config:
        protected_namespaces = ()

    @field_validator('sub_prompt', 'ui_id', 'parent_sub_id')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v


class SubPromptResponse(BaseModel):
    """Revision with its code."""
    id: str
    created_at: datetime
    sub_prompt: str
    ui_id: str
    sub_id: str
    model_id: Optional[str] = None
    code: CodeResponse

    class Config:
        from_attributes = True
        protected_namespaces = ()

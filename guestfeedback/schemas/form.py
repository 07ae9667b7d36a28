"""
Pydantic schemas for feedback forms
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from datetime import datetime
import uuid

from guestfeedback.models import FieldType, SemanticRole

CHOICE_TYPES = {FieldType.SINGLE_CHOICE, FieldType.MULTIPLE_CHOICE}


class FormFieldIn(BaseModel):
    label: str = Field(..., min_length=1, max_length=255)
    type: FieldType
    required: bool = False
    placeholder: Optional[str] = Field(default=None, max_length=255)
    options: Optional[List[str]] = None
    semantic_role: Optional[SemanticRole] = None

    @model_validator(mode="after")
    def check_options(self):
        if self.type in CHOICE_TYPES and not self.options:
            raise ValueError("Choice fields need at least one option")
        if self.semantic_role == SemanticRole.RATING and self.type != FieldType.RATING:
            raise ValueError("Only RATING fields can carry the RATING role")
        if self.semantic_role == SemanticRole.GUEST_EMAIL and self.type != FieldType.EMAIL:
            raise ValueError("Only EMAIL fields can carry the GUEST_EMAIL role")
        return self


def _check_roles(fields: List[FormFieldIn]) -> None:
    roles = [f.semantic_role for f in fields if f.semantic_role is not None]
    if len(roles) != len(set(roles)):
        raise ValueError("Each semantic role can be used by one field only")


class FormCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_public: bool = True
    fields: List[FormFieldIn] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_roles(self):
        _check_roles(self.fields)
        return self


class FormUpdate(BaseModel):
    """Partial update; `fields`, when given, replaces the whole list"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None
    fields: Optional[List[FormFieldIn]] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def check_roles(self):
        if self.fields:
            _check_roles(self.fields)
        return self


class FormFieldResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    position: int
    label: str
    type: FieldType
    required: bool
    placeholder: Optional[str]
    options: Optional[List[str]]
    semantic_role: Optional[SemanticRole]


class FormResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    hotel_id: uuid.UUID
    name: str
    description: Optional[str]
    is_active: bool
    is_public: bool
    created_at: datetime
    updated_at: Optional[datetime]
    fields: List[FormFieldResponse]

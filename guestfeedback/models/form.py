"""
Feedback form schema with ordered fields
"""

from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import Column, JSON
from datetime import datetime
from typing import Optional, List
from enum import Enum
import uuid


class FieldType(str, Enum):
    """Input types a form field can have"""
    TEXT = "TEXT"
    TEXTAREA = "TEXTAREA"
    RATING = "RATING"
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    FILE_UPLOAD = "FILE_UPLOAD"


class SemanticRole(str, Enum):
    """Explicit meaning of a field for guest identity and rating extraction"""
    GUEST_NAME = "GUEST_NAME"
    GUEST_EMAIL = "GUEST_EMAIL"
    GUEST_PHONE = "GUEST_PHONE"
    RATING = "RATING"


class Form(SQLModel, table=True):
    """Feedback form owned by a hotel"""

    __tablename__ = "forms"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hotel_id: uuid.UUID = Field(foreign_key="hotels.id", index=True, description="Hotel ID for multi-tenant isolation")

    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

    is_active: bool = Field(default=True, index=True)
    is_public: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    fields: List["FormField"] = Relationship(
        back_populates="form",
        sa_relationship_kwargs={
            "order_by": "FormField.position",
            "cascade": "all, delete-orphan",
            "lazy": "selectin",
        },
    )


class FormField(SQLModel, table=True):
    """Single question on a form"""

    __tablename__ = "form_fields"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    form_id: uuid.UUID = Field(foreign_key="forms.id", index=True)
    position: int = Field(default=0, description="Zero-based display order")

    label: str = Field(max_length=255)
    type: FieldType
    required: bool = Field(default=False)
    placeholder: Optional[str] = Field(default=None, max_length=255)
    options: Optional[List[str]] = Field(default=None, sa_column=Column(JSON))
    semantic_role: Optional[SemanticRole] = None

    form: Optional[Form] = Relationship(back_populates="fields")

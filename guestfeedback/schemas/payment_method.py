"""
Pydantic schemas for stored payment methods
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
import uuid


class PaymentMethodCreate(BaseModel):
    brand: str = Field(..., min_length=1, max_length=30)
    last4: str = Field(..., pattern=r"^\d{4}$")
    exp_month: int = Field(..., ge=1, le=12)
    exp_year: int = Field(..., ge=2000, le=2100)


class PaymentMethodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    brand: str
    last4: str
    exp_month: int
    exp_year: int
    is_default: bool
    created_at: datetime

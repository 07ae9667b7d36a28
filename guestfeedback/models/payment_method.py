"""
Stored card reference for a hotel's subscription billing
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
import uuid


class PaymentMethod(SQLModel, table=True):
    """Card metadata only; the card itself lives with the billing provider"""

    __tablename__ = "payment_methods"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hotel_id: uuid.UUID = Field(foreign_key="hotels.id", index=True)

    brand: str = Field(max_length=30)
    last4: str = Field(max_length=4)
    exp_month: int
    exp_year: int
    is_default: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)

"""Database Models - Pydantic models for backend entities."""
from decimal import Decimal
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from electromart.money import to_decimal as _to_decimal

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class Product(BaseModel):
    """Row of the `products` table."""
    model_config = ConfigDict(extra="ignore")  # Ignore unknown columns

    id: str
    title: str
    price: Decimal
    image: Optional[str] = None
    quantity: int = 0  # Live stock at read time
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        # Supabase returns bigint ids as int
        return str(v)

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @property
    def in_stock(self) -> bool:
        return self.quantity > 0


class AuthUser(BaseModel):
    """Authenticated user with resolved role."""
    id: str
    email: str
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

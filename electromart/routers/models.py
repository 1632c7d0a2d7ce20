"""
API Pydantic Models

Request bodies shared by the routers.
"""
from pydantic import BaseModel, Field


# ==================== AUTH MODELS ====================

class CredentialsRequest(BaseModel):
    email: str = ""
    password: str = ""


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: str


class UpdateCartItemRequest(BaseModel):
    product_id: str
    quantity: int  # below 1 removes the line


# ==================== PRODUCT MODELS ====================

class BuyProductRequest(BaseModel):
    id: str


class CreateProductRequest(BaseModel):
    title: str = Field(min_length=1)
    price: float = Field(ge=0)
    image: str | None = None
    quantity: int = Field(ge=0)


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(ge=0)

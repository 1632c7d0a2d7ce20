"""
Repository Pattern for Database Operations

- ProductRepository: product catalog and stock column
- AuthRepository: email/password sign-in and sign-up
"""
from .product_repo import ProductRepository
from .auth_repo import AuthRepository

__all__ = [
    "ProductRepository",
    "AuthRepository",
]

"""Checkout form, settlement states and results."""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from electromart.money import to_float


class SettlementState(str, Enum):
    """
    Checkout lifecycle.

    Flow:
        idle -> validating -> settling -> committed
                           -> idle      (form errors)
                              settling -> aborted

    - committed: every line decremented, order id issued, cart cleared (final)
    - aborted: a line failed; lines settled before it stay decremented (final)
    """
    IDLE = "idle"
    VALIDATING = "validating"
    SETTLING = "settling"
    COMMITTED = "committed"
    ABORTED = "aborted"


class CheckoutForm(BaseModel):
    """Shipping and payment fields. Card data is checked for presence only."""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = Field(default="", alias="zipCode")
    card_number: str = Field(default="", alias="cardNumber")
    card_expiry: str = Field(default="", alias="cardExpiry")
    card_cvc: str = Field(default="", alias="cardCvc")

    def validate_fields(self) -> Dict[str, str]:
        """Return {json field name: message} for every blank required field."""
        required = (
            ("first_name", "firstName", "First name is required"),
            ("last_name", "lastName", "Last name is required"),
            ("email", "email", "Email is required"),
            ("address", "address", "Address is required"),
            ("city", "city", "City is required"),
            ("state", "state", "State is required"),
            ("zip_code", "zipCode", "ZIP code is required"),
            ("card_number", "cardNumber", "Card number is required"),
            ("card_expiry", "cardExpiry", "Expiry date is required"),
            ("card_cvc", "cardCvc", "CVC is required"),
        )
        return {
            name: message
            for attr, name, message in required
            if not getattr(self, attr).strip()
        }


@dataclass
class StockConflict:
    """Live stock was below the requested quantity for one line."""
    line: str
    title: str
    requested: int
    available: int

    @property
    def message(self) -> str:
        return f'Sorry, only {self.available} units of "{self.title}" are available.'

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "title": self.title,
            "requested": self.requested,
            "available": self.available,
        }


@dataclass
class OrderSummary:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    def to_dict(self) -> dict:
        return {
            "subtotal": to_float(self.subtotal),
            "tax": to_float(self.tax),
            "shipping": to_float(self.shipping),
            "total": to_float(self.total),
        }


@dataclass
class CheckoutResult:
    state: SettlementState
    order_id: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)
    conflict: Optional[StockConflict] = None
    settled: List[str] = field(default_factory=list)  # line ids already decremented
    failed_line: Optional[str] = None
    summary: Optional[OrderSummary] = None
    message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "order_id": self.order_id,
            "errors": self.errors,
            "conflict": self.conflict.to_dict() if self.conflict else None,
            "settled": self.settled,
            "failed_line": self.failed_line,
            "summary": self.summary.to_dict() if self.summary else None,
            "message": self.message,
        }

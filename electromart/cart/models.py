"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, NewType, Optional

from electromart.money import to_decimal, multiply

# Stock ceiling observed when the product was added to the cart. Can be stale.
CapturedCeiling = NewType("CapturedCeiling", int)
# Stock read from the backend at the moment it is needed (checkout).
LiveStock = NewType("LiveStock", int)


@dataclass
class CartLine:
    """One product in the cart."""
    id: str
    title: str
    price: Decimal
    image: str
    quantity: int
    max_quantity: CapturedCeiling

    def __post_init__(self):
        self.price = to_decimal(self.price)
        self.quantity = int(self.quantity)
        self.max_quantity = CapturedCeiling(int(self.max_quantity))

    @property
    def line_total(self) -> Decimal:
        return multiply(self.price, self.quantity)

    def to_dict(self) -> dict:
        """Convert to the persisted record (price as string to keep precision)."""
        return {
            "id": self.id,
            "title": self.title,
            "price": str(self.price),
            "image": self.image,
            "quantity": self.quantity,
            "max_quantity": int(self.max_quantity),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from a persisted record.

        Raises KeyError/TypeError/ValueError/InvalidOperation on bad input:
        missing fields, quantity or ceiling below 1, a price that is not a
        finite non-negative number.
        """
        quantity = int(data["quantity"])
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        max_quantity = int(data["max_quantity"])
        if max_quantity < 1:
            raise ValueError(f"max_quantity must be >= 1, got {max_quantity}")
        price = Decimal(str(data["price"]))
        if not price.is_finite() or price < 0:
            raise ValueError(f"invalid price {data['price']!r}")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            price=price,
            image=data.get("image", ""),
            quantity=quantity,
            max_quantity=CapturedCeiling(max_quantity),
        )


@dataclass
class Cart:
    """Ordered collection of cart lines, unique by id."""
    lines: List[CartLine] = field(default_factory=list)

    def find(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.id == product_id), None)

    @property
    def item_count(self) -> int:
        """Total units across all lines (not the number of lines)."""
        return sum(line.quantity for line in self.lines)

    @property
    def total(self) -> Decimal:
        """Sum of price x quantity, recomputed on every access."""
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def to_list(self) -> list:
        return [line.to_dict() for line in self.lines]

    @classmethod
    def from_list(cls, data: list) -> "Cart":
        if not isinstance(data, list):
            raise TypeError(f"cart snapshot must be a list, got {type(data).__name__}")
        lines: List[CartLine] = []
        for record in data:
            line = CartLine.from_dict(record)
            # Keep the first occurrence if a snapshot ever holds duplicate ids
            if not any(existing.id == line.id for existing in lines):
                lines.append(line)
        return cls(lines=lines)

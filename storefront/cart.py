from __future__ import annotations

from typing import List, Optional

from .catalog import get_product_by_id, unit_price
from .order_models import Order, OrderItem


class Cart:
    """Ordered list of cart lines with price snapshots taken at add time."""

    def __init__(self) -> None:
        self.items: List[OrderItem] = []

    def __len__(self) -> int:
        return len(self.items)

    def add(
        self,
        product_id: str,
        size: Optional[str] = None,
        quantity: int = 1,
        notes: Optional[str] = None,
    ) -> OrderItem:
        product = get_product_by_id(product_id)
        if product is None:
            raise KeyError(product_id)
        if quantity < 1:
            raise ValueError("quantity must be at least 1")
        item = OrderItem(
            productId=product.id,
            productName=product.name,
            size=size,
            quantity=quantity,
            price=unit_price(product, size),
            notes=notes or None,
        )
        self.items.append(item)
        return item

    def remove(self, index: int) -> None:
        del self.items[index]

    def update_quantity(self, index: int, quantity: int) -> None:
        if quantity < 1:
            self.remove(index)
            return
        self.items[index] = self.items[index].model_copy(update={"quantity": quantity})

    @property
    def total(self) -> float:
        return round(sum(i.price * i.quantity for i in self.items), 2)

    def to_order(
        self,
        name: str,
        phone: str,
        pickupOrDelivery: str = "pickup",
        email: Optional[str] = None,
        address: Optional[str] = None,
        desiredDate: Optional[str] = None,
        generalNotes: Optional[str] = None,
    ) -> Order:
        return Order(
            name=name,
            phone=phone,
            email=email,
            pickupOrDelivery=pickupOrDelivery,
            address=address,
            desiredDate=desiredDate,
            generalNotes=generalNotes,
            items=list(self.items),
            total=self.total,
        )

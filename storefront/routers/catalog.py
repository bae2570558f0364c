from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..cart import Cart
from ..catalog import catalog_payload, format_price

router = APIRouter()


class QuoteItem(BaseModel):
    productId: str
    size: Optional[str] = None
    quantity: int = 1
    notes: Optional[str] = None


class QuoteRequest(BaseModel):
    items: List[QuoteItem]


@router.get("/api/products")
def api_products():
    return {"items": catalog_payload()}


@router.post("/api/cart/quote")
def api_cart_quote(req: QuoteRequest):
    cart = Cart()
    for it in req.items:
        try:
            cart.add(it.productId, size=it.size, quantity=it.quantity, notes=it.notes)
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Unknown product: {it.productId}")
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid quantity.")
    return {
        "items": [i.model_dump(exclude_none=True) for i in cart.items],
        "total": cart.total,
        "totalLabel": format_price(cart.total),
    }

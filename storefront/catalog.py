from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

ProductSize = Literal["pequeño", "mediano", "grande"]


class SizeOption(BaseModel):
    size: ProductSize
    price: float


class Product(BaseModel):
    id: str
    name: str
    description: str
    sizes: Optional[List[SizeOption]] = None
    fixedPrice: Optional[float] = None
    featured: bool = False


PRODUCTS: List[Product] = [
    Product(
        id="tres-leches",
        name="Tres Leches",
        description=(
            "Nuestro postre estrella. Esponjoso, cremoso y con el balance perfecto "
            "de dulzura. Hecho con amor y dedicación artesanal."
        ),
        sizes=[
            SizeOption(size="pequeño", price=25),
            SizeOption(size="mediano", price=35),
            SizeOption(size="grande", price=50),
        ],
        featured=True,
    ),
    Product(
        id="flan",
        name="Flan",
        description="Clásico y suave, con caramelo casero. Un postre que siempre reconforta.",
        fixedPrice=25,
    ),
]

_BY_ID: Dict[str, Product] = {p.id: p for p in PRODUCTS}


def get_product_by_id(product_id: str) -> Optional[Product]:
    return _BY_ID.get(product_id)


def unit_price(product: Product, size: Optional[str] = None) -> float:
    """Price for one unit. Unknown sizes fall back to the fixed price, then 0."""
    if size:
        for opt in product.sizes or []:
            if opt.size == size:
                return float(opt.price)
    return float(product.fixedPrice or 0)


def format_price(price: float) -> str:
    return f"${price:.2f}"


def catalog_payload() -> List[dict]:
    out: List[dict] = []
    for p in PRODUCTS:
        item = p.model_dump(exclude_none=True)
        item["priceLabel"] = (
            " / ".join(f"{o.size} {format_price(o.price)}" for o in p.sizes)
            if p.sizes else format_price(p.fixedPrice or 0)
        )
        out.append(item)
    return out

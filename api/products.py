"""
Sample token-gated resource.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from auth.dependencies import get_current_claims
from auth.jwt import SessionClaims

router = APIRouter(tags=["products"])


class Product(BaseModel):
    id: str
    name: str
    price: float


PRODUCTS: List[Product] = [
    Product(id="1", name="Laptop", price=999.99),
    Product(id="2", name="Mouse", price=29.99),
    Product(id="3", name="Keyboard", price=79.99),
]


@router.get("/products", response_model=List[Product])
async def list_products(
    _claims: SessionClaims = Depends(get_current_claims),
) -> List[Product]:
    """Any valid session may list products; no database access."""
    return PRODUCTS

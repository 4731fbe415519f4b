"""
Pricing Routes
================
Price quotes for a canvas size and the inverse "size for a budget" search.
"""

from typing import Optional

from fastapi import APIRouter, Query

from modules.pricing.calculator import (
    calculate_total_price, calculate_size_for_price, has_color_upgrade, format_price,
)

router = APIRouter(prefix="/api/price", tags=["pricing"])


@router.get("")
async def price_quote(
    width: int = Query(..., gt=0),
    height: int = Query(..., gt=0),
    side_color: Optional[str] = None,
):
    breakdown = calculate_total_price(width, height, has_color_upgrade(side_color))
    return {
        **breakdown,
        "formatted": {k: format_price(v) for k, v in breakdown.items()},
    }


@router.get("/size-for")
async def size_for_price(target: float = Query(..., ge=0)):
    return calculate_size_for_price(target)

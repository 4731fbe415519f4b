"""
Basket Routes
===============
JSON API over the basket store: list, add, reconfigure, quantity, remove,
clear, plus image upload for new canvases.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from common.exceptions import SizeValidationError, raise_http
from common.upload import save_upload_file
from config.settings import DEFAULT_SIDE_COLOR
from modules.basket.deps import get_basket_store
from modules.basket.serializer import item_to_dict
from modules.basket.service import BasketStore, build_item_config
from modules.pricing.calculator import format_price
from modules.sizing.validator import validate_canvas_size, calculate_default_size

router = APIRouter(tags=["basket"])

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


# ==========================================
# Schemas
# ==========================================

class AddItemRequest(BaseModel):
    image: Any
    width: int
    height: int
    side_color: str = Field(DEFAULT_SIDE_COLOR, pattern=HEX_COLOR)


class UpdateItemRequest(BaseModel):
    image: Optional[Any] = None
    width: Optional[int] = None
    height: Optional[int] = None
    side_color: Optional[str] = Field(None, pattern=HEX_COLOR)


class QuantityRequest(BaseModel):
    quantity: int


def _basket_payload(store: BasketStore) -> dict:
    summary = store.summary()
    return {
        "items": [item_to_dict(it) for it in store.items],
        "summary": {
            "item_count": summary.item_count,
            "total_items": summary.total_items,
            "subtotal": summary.subtotal,
            "total_price": summary.total_price,
            "formatted_total": format_price(summary.total_price),
        },
        "is_full": store.is_full(),
        "max_items": store.max_items,
    }


def _require_valid_size(width: int, height: int) -> None:
    result = validate_canvas_size(width, height)
    if not result["is_valid"]:
        raise_http(SizeValidationError(result["errors"]), 422)


# ==========================================
# 🛒 View Basket
# ==========================================

@router.get("/api/basket")
async def view_basket(store: BasketStore = Depends(get_basket_store)):
    return _basket_payload(store)


@router.get("/api/basket/items/{item_id}")
async def get_item(item_id: str, store: BasketStore = Depends(get_basket_store)):
    item = store.get(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="הפריט לא נמצא בעגלה")
    return item_to_dict(item)


# ==========================================
# ➕ Add / ✏️ Update
# ==========================================

@router.post("/api/basket/items", status_code=status.HTTP_201_CREATED)
async def add_item(body: AddItemRequest, store: BasketStore = Depends(get_basket_store)):
    _require_valid_size(body.width, body.height)

    result = store.add(build_item_config(body.image, body.width, body.height, body.side_color))
    if not result.success:
        code = status.HTTP_409_CONFLICT if store.is_full() else status.HTTP_422_UNPROCESSABLE_ENTITY
        raise HTTPException(status_code=code, detail=result.error)

    return {"item": item_to_dict(result.item), **_basket_payload(store)}


@router.patch("/api/basket/items/{item_id}")
async def update_item(item_id: str, body: UpdateItemRequest, store: BasketStore = Depends(get_basket_store)):
    """Change image, size or side color; the item is re-priced."""
    item = store.get(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="הפריט לא נמצא בעגלה")

    width = body.width if body.width is not None else item.canvas_size.width
    height = body.height if body.height is not None else item.canvas_size.height
    side_color = body.side_color or item.canvas_options.side_color
    image = body.image if body.image is not None else item.image
    _require_valid_size(width, height)

    config = build_item_config(image, width, height, side_color)
    store.update_configuration(
        item_id,
        image=config.image,
        canvas_size=config.canvas_size,
        canvas_options=config.canvas_options,
        base_price=config.base_price,
        total_price=config.total_price,
    )
    return {"item": item_to_dict(store.get(item_id)), **_basket_payload(store)}


@router.put("/api/basket/items/{item_id}/quantity")
async def update_quantity(item_id: str, body: QuantityRequest, store: BasketStore = Depends(get_basket_store)):
    store.update_quantity(item_id, body.quantity)
    return _basket_payload(store)


# ==========================================
# 🗑️ Remove / Clear
# ==========================================

@router.delete("/api/basket/items/{item_id}")
async def remove_item(item_id: str, store: BasketStore = Depends(get_basket_store)):
    store.remove(item_id)
    return _basket_payload(store)


@router.delete("/api/basket")
async def clear_basket(store: BasketStore = Depends(get_basket_store)):
    store.clear()
    return _basket_payload(store)


# ==========================================
# 🖼️ Image Upload
# ==========================================

@router.post("/api/images", status_code=status.HTTP_201_CREATED)
async def upload_image(file: UploadFile = File(...)):
    image = save_upload_file(file)
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="לא ניתן לקרוא את התמונה")
    return {"image": image, "default_size": calculate_default_size(image["aspect_ratio"])}

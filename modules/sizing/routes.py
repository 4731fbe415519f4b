"""
Sizing Routes
===============
Dimension validation and aspect-ratio helpers for the size calculator.
"""

from fastapi import APIRouter, Query
from pydantic import BaseModel

from common.exceptions import SizeValidationError, raise_http
from modules.sizing.validator import (
    validate_canvas_size, calculate_default_size, calculate_dimension_from_other, constrain_size,
)

router = APIRouter(prefix="/api/size", tags=["sizing"])


class SizeRequest(BaseModel):
    width: int
    height: int


@router.post("/validate")
async def validate_size(body: SizeRequest):
    return validate_canvas_size(body.width, body.height)


@router.post("/constrain")
async def constrain(body: SizeRequest):
    return constrain_size(body.width, body.height)


@router.get("/default")
async def default_size(aspect_ratio: float = Query(...)):
    try:
        return calculate_default_size(aspect_ratio)
    except SizeValidationError as e:
        raise_http(e, 422)


@router.get("/other")
async def other_dimension(
    known: int = Query(..., gt=0),
    aspect_ratio: float = Query(...),
    known_is_width: bool = True,
):
    try:
        value = calculate_dimension_from_other(known, aspect_ratio, known_is_width)
    except SizeValidationError as e:
        raise_http(e, 422)
    return {"width": known, "height": value} if known_is_width else {"width": value, "height": known}

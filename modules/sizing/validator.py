"""
Sizing Module - Validator
===========================
Canvas dimension limits and aspect-ratio-preserving resize math.
"""

from typing import Dict, List

from common.exceptions import SizeValidationError
from common.helpers import round_half_up
from config.settings import MIN_WIDTH, MIN_HEIGHT, MAX_WIDTH, MAX_HEIGHT, DEFAULT_LARGE_SIDE


def validate_canvas_size(width, height) -> Dict:
    """
    Check both dimensions against the configured limits.

    All violations are collected so the caller can show every problem at once.

    Returns:
        dict with: is_valid, errors (list of user-facing messages)
    """
    errors: List[str] = []

    if width < MIN_WIDTH:
        errors.append(f'הרוחב המינימלי הוא {MIN_WIDTH} ס"מ')

    if height < MIN_HEIGHT:
        errors.append(f'הגובה המינימלי הוא {MIN_HEIGHT} ס"מ')

    if width > MAX_WIDTH:
        errors.append(f'הרוחב המקסימלי הוא {MAX_WIDTH} ס"מ')

    if height > MAX_HEIGHT:
        errors.append(f'הגובה המקסימלי הוא {MAX_HEIGHT} ס"מ')

    return {"is_valid": not errors, "errors": errors}


def _require_ratio(aspect_ratio) -> None:
    if aspect_ratio is None or aspect_ratio <= 0:
        raise SizeValidationError(message="יחס הגובה-רוחב חייב להיות חיובי")


def calculate_default_size(aspect_ratio) -> Dict[str, int]:
    """Initial size for an image: the larger side is set to DEFAULT_LARGE_SIDE."""
    _require_ratio(aspect_ratio)

    if aspect_ratio >= 1:
        return {
            "width": DEFAULT_LARGE_SIDE,
            "height": round_half_up(DEFAULT_LARGE_SIDE / aspect_ratio),
        }
    return {
        "width": round_half_up(DEFAULT_LARGE_SIDE * aspect_ratio),
        "height": DEFAULT_LARGE_SIDE,
    }


def calculate_dimension_from_other(known_dimension, aspect_ratio, known_is_width: bool) -> int:
    """Derive the other side from the edited one, keeping the aspect ratio."""
    _require_ratio(aspect_ratio)

    if known_is_width:
        return round_half_up(known_dimension / aspect_ratio)
    return round_half_up(known_dimension * aspect_ratio)


def constrain_size(width, height) -> Dict:
    """
    Clamp each side into its allowed range.

    Sides are clamped independently; the aspect ratio is not re-derived.
    """
    return {
        "width": max(MIN_WIDTH, min(width, MAX_WIDTH)),
        "height": max(MIN_HEIGHT, min(height, MAX_HEIGHT)),
    }

"""
Pricing Module - Calculator
=============================
Canvas print price calculation: tiered linear interpolation over
total size (height + width), large-format surcharge, side-color upcharge
and "clean" customer-facing rounding.
"""

from typing import Dict, List, NamedTuple, Optional

from common.helpers import round_half_up, format_shekel
from config.settings import (
    MIN_WIDTH, MIN_HEIGHT, MAX_WIDTH, MAX_HEIGHT,
    MIN_SIZE_THRESHOLD, MIN_DIMENSION_FOR_EXTRA, DEFAULT_MAX_PRICE,
    PRICE_ROUNDING_THRESHOLD, CANVAS_COLOR_SELECTION, DEFAULT_SIDE_COLOR,
    COLOR_UPCHARGE_PERCENTAGE, MAX_COLOR_UPCHARGE,
)


class PricingTier(NamedTuple):
    """One interpolation range of the price table."""
    max_size: int
    base_price: int
    next_price: int
    base_size: int
    next_size: int
    extra_percentage: Optional[int] = None


# Ordered by max_size; the first tier with max_size >= total size wins.
PRICING_TIERS: List[PricingTier] = [
    PricingTier(70, 90, 110, 60, 70),
    PricingTier(90, 110, 135, 70, 90),
    PricingTier(100, 135, 155, 90, 100),
    PricingTier(120, 155, 195, 100, 120),
    PricingTier(140, 195, 240, 120, 140),
    PricingTier(170, 240, 315, 140, 170),
    PricingTier(200, 315, 390, 170, 200, 5),
    PricingTier(250, 390, 475, 200, 250, 5),
    PricingTier(280, 475, 510, 250, 280, 5),
    PricingTier(300, 510, 550, 280, 300, 5),
    PricingTier(320, 550, 575, 300, 320, 5),
    PricingTier(340, 575, 600, 320, 340, 5),
    PricingTier(380, 600, 650, 340, 380, 10),
    PricingTier(420, 650, 740, 380, 420, 10),
    PricingTier(460, 740, 850, 420, 460, 10),
]

# Inverse search passes: coarse, fine, precise
SIZE_SEARCH_STEPS = (10, 2, 1)
SIZE_SEARCH_WINDOW = 20


def round_display_price(price: int) -> int:
    """Round down to a multiple of 5 below 520, otherwise to a multiple of 10."""
    if price < PRICE_ROUNDING_THRESHOLD:
        return price - price % 5
    return price - price % 10


def interpolate_price(
    size,
    base_price,
    next_price,
    base_size,
    next_size,
    extra_percentage=0,
) -> int:
    """
    Linear interpolation between two price points of a tier.

    Args:
        size: Total size (height + width)
        base_price / next_price: Prices at the tier's start and end
        base_size / next_size: Sizes at the tier's start and end
        extra_percentage: Surcharge percentage added on top (0 = none)

    Returns:
        Interpolated price rounded half-up to an integer
    """
    price = base_price + (next_price - base_price) * (size - base_size) / (next_size - base_size)

    if extra_percentage and extra_percentage > 0:
        return round_half_up(price + price * extra_percentage / 100)

    return round_half_up(price)


def find_tier(total_size) -> Optional[PricingTier]:
    """First tier whose max_size covers total_size (boundaries bind low)."""
    for tier in PRICING_TIERS:
        if total_size <= tier.max_size:
            return tier
    return None


def calculate_print_price(height, width) -> int:
    """Base print price (before side color) for the given dimensions in cm."""
    min_dimension = min(height, width)
    total_size = height + width

    if total_size < MIN_SIZE_THRESHOLD:
        return 0

    tier = find_tier(total_size)
    if tier is None:
        return round_display_price(DEFAULT_MAX_PRICE)

    extra = tier.extra_percentage if tier.extra_percentage and min_dimension > MIN_DIMENSION_FOR_EXTRA else 0
    price = interpolate_price(
        total_size,
        tier.base_price,
        tier.next_price,
        tier.base_size,
        tier.next_size,
        extra,
    )
    return round_display_price(price)


def calculate_color_upcharge(base_price) -> int:
    """Side-color upcharge: 10% of base price, capped at 50."""
    upcharge = round_half_up(base_price * COLOR_UPCHARGE_PERCENTAGE / 100)
    return min(upcharge, MAX_COLOR_UPCHARGE)


def has_color_upgrade(side_color: Optional[str]) -> bool:
    """True when a non-default side color is selected and the feature is on."""
    if not CANVAS_COLOR_SELECTION or not side_color:
        return False
    return side_color.strip().upper() != DEFAULT_SIDE_COLOR.upper()


def calculate_total_price(width, height, has_color_upgrade: bool = False) -> Dict[str, int]:
    """
    Full price breakdown for a canvas.

    Returns:
        dict with: base_price, color_upcharge, total_price
    """
    base_price = calculate_print_price(height, width)
    color_upcharge = calculate_color_upcharge(base_price) if has_color_upgrade else 0

    return {
        "base_price": base_price,
        "color_upcharge": color_upcharge,
        "total_price": round_display_price(base_price + color_upcharge),
    }


def calculate_size_for_price(target_price) -> Dict[str, int]:
    """
    Find a (width, height) whose base price is closest to target_price.

    Coarse-to-fine grid search around the current best candidate. Only a
    strictly closer candidate replaces the best, so the scan order decides ties.
    The scan window follows the best candidate while a pass is running.
    """
    best_width = 50
    best_height = 50
    closest_diff = float("inf")

    for step in SIZE_SEARCH_STEPS:
        w = max(MIN_WIDTH, best_width - SIZE_SEARCH_WINDOW)
        while w <= min(MAX_WIDTH, best_width + SIZE_SEARCH_WINDOW):
            h = max(MIN_HEIGHT, best_height - SIZE_SEARCH_WINDOW)
            while h <= min(MAX_HEIGHT, best_height + SIZE_SEARCH_WINDOW):
                diff = abs(calculate_print_price(h, w) - target_price)
                if diff < closest_diff:
                    closest_diff = diff
                    best_width = w
                    best_height = h
                h += step
            w += step

    return {"width": best_width, "height": best_height}


def format_price(amount) -> str:
    """Display string for a price, e.g. ₪1,250"""
    return format_shekel(amount)

"""Display strings for prices and areas (AED, sq.ft)."""

from typing import Optional

from brokerage.schemas.listing import Listing

CURRENCY = "AED"

_RENTAL_PERIODS = {
    "weekly": ("price_weekly", "/week"),
    "monthly": ("price_monthly", "/month"),
    "yearly": ("price_yearly", "/year"),
}


def format_currency(amount: Optional[float]) -> str:
    if not amount:
        return "Price on Request"
    return f"{CURRENCY} {amount:,.0f}"


def format_rental_price(listing: Listing) -> str:
    """Rent listings show the price for their default rental period (monthly if unset)."""
    if listing.market_type != "rent":
        return format_currency(listing.price)
    field, label = _RENTAL_PERIODS.get(listing.default_rental_period, _RENTAL_PERIODS["monthly"])
    price = getattr(listing, field) or listing.price
    return f"{format_currency(price)} {label}"


def format_price_short(price: float) -> str:
    """Slider label, e.g. 1.5M AED or 750K AED."""
    if price >= 1_000_000:
        return f"{price / 1_000_000:.1f}M {CURRENCY}"
    return f"{price / 1000:.0f}K {CURRENCY}"


def format_area(area: Optional[float]) -> str:
    if area is None:
        return ""
    return f"{area:,.0f} sq.ft"

"""Pricing for registrations, vendor tables, advertisements and special events.

All prices are whole dollars. Every function here is pure: the same
selection always produces the same breakdown.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from src.models.registration import (
    DAY_TO_DAY_TYPE,
    GROUP_MARKER,
    RegistrationSelection,
)
from src.utils.validation import normalize_choices

REGISTRATION_PRICES = {
    "individual-early": 190,
    "individual-regular": 210,
    "georgia-early": 175,
    "georgia-regular": 195,
    "group-5-early": 925,
    "group-5-regular": 975,
    "group-10-early": 1800,
    "group-10-regular": 1925,
    DAY_TO_DAY_TYPE: 75,  # per selected day
}

# Flat tiers, not per table
VENDOR_TABLE_PRICES = {
    1: 250,
    2: 350,
    3: 450,
}

ADVERTISEMENT_PRICES = {
    "full-page-color": 225,
    "half-page-color": 175,
    "full-page-bw": 180,
    "half-page-bw": 125,
    "quarter-page-bw": 80,
}

# The women's luncheon (60) was dropped from the price list.
SPECIAL_EVENT_PRICES = {
    "memorial-banquet": 75,
}

GROUP_HEADCOUNTS = {
    "group-5": 5,
    "group-10": 10,
}


@dataclass(frozen=True)
class PriceBreakdown:
    """Itemized price for one selection."""

    registration_price: int
    vendor_price: int
    advertisement_price: int
    special_events_price: int

    @property
    def total(self) -> int:
        return (
            self.registration_price
            + self.vendor_price
            + self.advertisement_price
            + self.special_events_price
        )

    @property
    def has_chargeable_selection(self) -> bool:
        """True if anything in the selection costs money."""
        return self.total > 0

    def as_dict(self) -> dict:
        return {
            "registrationPrice": self.registration_price,
            "vendorPrice": self.vendor_price,
            "advertisementPrice": self.advertisement_price,
            "specialEventsPrice": self.special_events_price,
            "total": self.total,
        }


def is_day_to_day(registration_type: str) -> bool:
    """Check if registration type is priced per attended day."""
    return registration_type == DAY_TO_DAY_TYPE


def is_group_type(registration_type: str) -> bool:
    """Check if registration type is a fixed-price group tier."""
    return GROUP_MARKER in (registration_type or "")


def group_headcount(registration_type: str) -> Optional[int]:
    """
    Number of attendees covered by a group tier.

    Returns:
        5 or 10 for group tiers, None otherwise
    """
    for prefix, headcount in GROUP_HEADCOUNTS.items():
        if (registration_type or "").startswith(prefix + "-"):
            return headcount
    return None


def requires_attendee_details(registration_type: str, quantity: int) -> bool:
    """
    Check if the registration covers more than one attendee.

    Group tiers always do. Per-person tiers do when quantity > 1. Day-to-day
    and "no registration" never do.
    """
    if is_group_type(registration_type):
        return True
    if not registration_type or is_day_to_day(registration_type):
        return False
    return (quantity or 1) > 1


def registration_price(
    registration_type: str,
    quantity: int = 1,
    day_to_day_dates: Iterable[str] = (),
) -> int:
    """
    Price of the base registration.

    Args:
        registration_type: Registration type id, or "" for none
        quantity: Number of people for per-person tiers (<= 0 treated as 1)
        day_to_day_dates: Selected day ids for the day-to-day tier

    Returns:
        int: price in dollars (0 for empty or unknown types)
    """
    base_price = REGISTRATION_PRICES.get(registration_type or "", 0)

    if is_day_to_day(registration_type):
        return base_price * len(normalize_choices(day_to_day_dates))

    if is_group_type(registration_type):
        return base_price

    if not quantity or quantity < 1:
        quantity = 1
    return base_price * quantity


def vendor_table_price(vendor_tables: int) -> int:
    """Price for 1-3 vendor tables; anything else is free."""
    return VENDOR_TABLE_PRICES.get(vendor_tables, 0)


def advertisement_price(advertisements: Iterable[str]) -> int:
    """Sum of selected advertisement tiers. Unknown tiers cost nothing."""
    return sum(ADVERTISEMENT_PRICES.get(ad, 0) for ad in normalize_choices(advertisements))


def special_events_price(special_events: Iterable[str]) -> int:
    """Sum of priced special events in the selection."""
    return sum(SPECIAL_EVENT_PRICES.get(event, 0) for event in normalize_choices(special_events))


def calculate_price(selection: RegistrationSelection) -> PriceBreakdown:
    """
    Price a selection.

    Args:
        selection: Form input to price

    Returns:
        PriceBreakdown with each component and the total
    """
    return PriceBreakdown(
        registration_price=registration_price(
            selection.registration_type,
            selection.quantity,
            selection.day_to_day_dates,
        ),
        vendor_price=vendor_table_price(selection.vendor_tables),
        advertisement_price=advertisement_price(selection.advertisements),
        special_events_price=special_events_price(selection.special_events),
    )


def unit_registration_price(registration_type: str) -> int:
    """Table price for a registration type (per person, per day or per group)."""
    return REGISTRATION_PRICES.get(registration_type or "", 0)

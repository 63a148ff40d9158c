"""Checkout links for each purchased item on the payment screen."""
from dataclasses import dataclass
from typing import List

from src.models.registration import (
    ADVERTISEMENT_TIERS,
    REGISTRATION_TYPES,
    SPECIAL_EVENTS,
    RegistrationRecord,
)
from src.services.pricing_service import (
    ADVERTISEMENT_PRICES,
    SPECIAL_EVENT_PRICES,
    registration_price,
    vendor_table_price,
)

PAYMENT_LINKS = {
    "individual-early": "https://square.link/u/ieidynuy",
    "individual-regular": "https://square.link/u/VdIdderF",
    "georgia-early": "https://square.link/u/2xwzKLOF",
    "georgia-regular": "https://square.link/u/UACAsYNa",
    "group-5-early": "https://square.link/u/R8ten5jo",
    "group-5-regular": "https://square.link/u/kBhQ4aaj",
    "group-10-early": "https://square.link/u/8TgV0WNa",
    "group-10-regular": "https://square.link/u/c9dLJDyX",
    "day-to-day": "https://square.link/u/day-to-day",
    "memorial-banquet": "https://square.link/u/3EFbURkB",
    "vendor-1-table": "https://square.link/u/MuxoTkEI",
    "vendor-2-tables": "https://square.link/u/2RFSfiYv",
    "vendor-3-tables": "https://square.link/u/VeLw36WE",
    "full-page-color": "https://square.link/u/aDKuberx",
    "half-page-color": "https://square.link/u/soBLCNwD",
    "full-page-bw": "https://square.link/u/oqgDc3Ki",
    "half-page-bw": "https://square.link/u/orWjSbJa",
    "quarter-page-bw": "https://square.link/u/B7ON7VnH",
}


@dataclass(frozen=True)
class PaymentItem:
    """One line on the payment screen."""

    key: str
    label: str
    amount: int
    url: str


def vendor_link_key(tables: int) -> str:
    return f"vendor-{tables}-table{'s' if tables > 1 else ''}"


def payment_links_for(record: RegistrationRecord) -> List[PaymentItem]:
    """
    Payment items for everything the record purchased.

    Returns:
        Items in screen order: registration, vendor tables, ads, events.
        Items without a configured link are left out.
    """
    items = []

    if record.registration_type in PAYMENT_LINKS:
        items.append(PaymentItem(
            key=record.registration_type,
            label=REGISTRATION_TYPES.get(record.registration_type, record.registration_type),
            amount=registration_price(record.registration_type, record.quantity, record.day_to_day_dates),
            url=PAYMENT_LINKS[record.registration_type],
        ))

    if record.vendor_tables > 0:
        key = vendor_link_key(record.vendor_tables)
        if key in PAYMENT_LINKS:
            items.append(PaymentItem(
                key=key,
                label=f"Vendor Tables ({record.vendor_tables})",
                amount=vendor_table_price(record.vendor_tables),
                url=PAYMENT_LINKS[key],
            ))

    for ad in record.advertisements:
        if ad in PAYMENT_LINKS:
            items.append(PaymentItem(ad, ADVERTISEMENT_TIERS.get(ad, ad), ADVERTISEMENT_PRICES.get(ad, 0), PAYMENT_LINKS[ad]))

    for event in record.special_events:
        if event in PAYMENT_LINKS and SPECIAL_EVENT_PRICES.get(event, 0) > 0:
            items.append(PaymentItem(event, SPECIAL_EVENTS.get(event, event), SPECIAL_EVENT_PRICES[event], PAYMENT_LINKS[event]))

    return items

"""
Pricing engine for room stays and tour packages.

Everything here is a pure function of the room/package data and the stay
parameters; nothing touches the database.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from utils.dates import ceil_days, utcnow
from utils.exceptions import ValidationError

# GST-style flat tax applied to room charges
TAX_RATE = 0.18


def round_money(value: float) -> float:
    return round(value, 2)


@dataclass(frozen=True)
class PricedLine:
    room_type_id: int
    room_type: Optional[str]
    quantity: int
    base_price: float
    final_price: float


@dataclass(frozen=True)
class StayQuote:
    number_of_nights: int
    lines: List[PricedLine] = field(default_factory=list)
    room_charges: float = 0.0
    taxes_and_fees: float = 0.0
    discount: float = 0.0
    total_price: float = 0.0
    per_night_price: float = 0.0


@dataclass(frozen=True)
class PackageQuote:
    group_size: int
    price_per_person: float
    discount_percentage: float
    total_price: float


def discount_active(room, now: datetime) -> bool:
    return bool(
        room.discount_percentage
        and room.discount_percentage > 0
        and room.discount_valid_from is not None
        and room.discount_valid_to is not None
        and room.discount_valid_from <= now <= room.discount_valid_to
    )


def effective_nightly_rate(room, now: Optional[datetime] = None) -> float:
    """Base price, reduced by the room's discount only while its window is open."""
    now = now or utcnow()
    if discount_active(room, now):
        return round_money(room.base_price * (1 - room.discount_percentage / 100))
    return round_money(room.base_price)


def number_of_nights(check_in: datetime, check_out: datetime) -> int:
    return ceil_days(check_in, check_out)


def line_total(rate: float, nights: int, quantity: int) -> float:
    return round_money(max(rate * nights * quantity, 0.0))


def price_stay(
    selections: Sequence[tuple],
    check_in: datetime,
    check_out: datetime,
    now: Optional[datetime] = None,
) -> StayQuote:
    """
    Price a stay.

    Args:
        selections: ordered (room, quantity) pairs
        check_in: check-in datetime
        check_out: check-out datetime, must be after check_in
        now: reference time for discount windows

    Returns:
        StayQuote with per-line frozen prices and the totals
    """
    if check_in >= check_out:
        raise ValidationError("Check-out date must be after check-in date")

    now = now or utcnow()
    nights = number_of_nights(check_in, check_out)

    lines = []
    room_charges = 0.0
    for room, quantity in selections:
        rate = effective_nightly_rate(room, now)
        total = line_total(rate, nights, quantity)
        lines.append(
            PricedLine(
                room_type_id=room.id,
                room_type=room.room_type,
                quantity=quantity,
                base_price=rate,
                final_price=total,
            )
        )
        room_charges += total

    room_charges = round_money(room_charges)
    taxes_and_fees = round_money(room_charges * TAX_RATE)
    return StayQuote(
        number_of_nights=nights,
        lines=lines,
        room_charges=room_charges,
        taxes_and_fees=taxes_and_fees,
        discount=0.0,
        total_price=round_money(room_charges + taxes_and_fees),
        per_night_price=round_money(room_charges / nights),
    )


def group_discount(package, group_size: int) -> float:
    # First matching band in declaration order wins
    for band in package.group_discounts or []:
        if band["min_people"] <= group_size <= band["max_people"]:
            return float(band["discount_percentage"])
    return float(package.discount_percentage or 0)


def price_package(package, group_size: int) -> PackageQuote:
    if group_size < package.group_size_min:
        raise ValidationError(f"Minimum group size is {package.group_size_min}")
    if group_size > package.group_size_max:
        raise ValidationError(f"Maximum group size is {package.group_size_max}")

    discount = group_discount(package, group_size)
    per_person = max(package.base_price * (1 - discount / 100), 0.0)
    return PackageQuote(
        group_size=group_size,
        price_per_person=round_money(per_person),
        discount_percentage=discount,
        total_price=round_money(per_person * group_size),
    )

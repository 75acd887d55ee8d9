"""
Utility functions for generating the externally shown identifiers of
bookings, confirmations, payments and refunds.
"""

import random
import re
import string
import time

_CHARACTERS = string.ascii_uppercase + string.digits


def _millis() -> int:
    return int(time.time() * 1000)


def _suffix(length: int) -> str:
    return "".join(random.choices(_CHARACTERS, k=length))


def generate_booking_id() -> str:
    """
    Generate a booking ID in the format BK<epoch-ms><6 chars>.

    Returns:
        str: e.g. 'BK1760659200000X7K9M2'
    """
    return f"BK{_millis()}{_suffix(6)}"


def generate_confirmation_number() -> str:
    """
    Generate a confirmation number shown to the guest.

    Returns:
        str: e.g. 'CONF1760659200000P4Q8ZT'
    """
    return f"CONF{_millis()}{_suffix(6)}"


def generate_transaction_id() -> str:
    """
    Generate a payment transaction ID, also used as the gateway receipt.

    Returns:
        str: e.g. 'TXN1760659200000A1B2C3'
    """
    return f"TXN{_millis()}{_suffix(6)}"


def generate_refund_id() -> str:
    return f"REF{_millis()}{_suffix(4)}"


def generate_invoice_number(transaction_id: str) -> str:
    return f"INV-{transaction_id}"


def slugify(title: str) -> str:
    slug = re.sub(r"[^\w\s-]", "", title.lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return re.sub(r"-+", "-", slug)

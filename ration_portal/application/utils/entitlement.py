from __future__ import annotations

from ration_portal.application.exceptions import ValidationError
from ration_portal.domain.entities.stock import Stock

# Monthly allocation per family member (kg, kerosene in litres)
PER_PERSON_ALLOCATION = Stock(rice=5, wheat=3, sugar=1, kerosene=0.5)

DEFAULT_FAMILY_MEMBERS = 4


def compute_entitlement(family_members: int | None, default: int = DEFAULT_FAMILY_MEMBERS) -> Stock:
    """
    Ration owed to a household of the given size.
    A missing family size falls back to `default`; a non-positive one is rejected.
    """
    members = default if family_members is None else family_members
    if isinstance(members, bool) or not isinstance(members, int) or members <= 0:
        raise ValidationError("family_members must be a positive integer")

    return Stock(
        rice=members * PER_PERSON_ALLOCATION.rice,
        wheat=members * PER_PERSON_ALLOCATION.wheat,
        sugar=members * PER_PERSON_ALLOCATION.sugar,
        kerosene=members * PER_PERSON_ALLOCATION.kerosene,
    )


def is_available(required: Stock, available: Stock) -> bool:
    return available.covers(required)

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ration_portal.domain.entities.stock import Stock


class BookingStatus(str, Enum):
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


@dataclass(frozen=True)
class Booking:
    id: str
    beneficiary_id: str
    beneficiary_name: str
    shop_id: str
    shop_name: str
    slot_id: str
    # copies of the slot's date/time at booking time
    date: str
    time_slot: str
    entitlement: Stock
    qr_code: str
    status: BookingStatus = BookingStatus.confirmed
    created_at: float | None = None
    updated_at: float | None = None

    def matches_code(self, code: str) -> bool:
        return code in (self.id, self.qr_code)

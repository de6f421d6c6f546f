from __future__ import annotations

import threading

from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.domain.entities.booking import Booking
from ration_portal.domain.entities.slot import Slot


class MemoryLedgerStore(LedgerStorePort):
    def __init__(self) -> None:
        self._slots: dict[tuple[str, str], Slot] = {}
        self._bookings: dict[str, Booking] = {}
        self._locks: dict[tuple[str, str], threading.Lock] = {}
        self._lock_lock = threading.Lock()

    def _get_lock(self, key: tuple[str, str]) -> threading.Lock:
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def add_slot(self, slot: Slot) -> None:
        key = (slot.shop_id, slot.id)
        with self._get_lock(key):
            self._slots[key] = slot

    def get_slot(self, shop_id: str, slot_id: str) -> Slot | None:
        return self._slots.get((shop_id, slot_id))

    def list_slots(self, shop_id: str) -> list[Slot]:
        return [slot for (sid, _), slot in list(self._slots.items()) if sid == shop_id]

    def get_booking(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def list_bookings_by_shop(self, shop_id: str) -> list[Booking]:
        return [b for b in list(self._bookings.values()) if b.shop_id == shop_id]

    def list_bookings_by_user(self, user_id: str) -> list[Booking]:
        return [b for b in list(self._bookings.values()) if b.beneficiary_id == user_id]

    def commit(self, slot: Slot, expected_version: int, booking: Booking | None = None) -> bool:
        key = (slot.shop_id, slot.id)
        with self._get_lock(key):
            current = self._slots.get(key)
            if current is None or current.version != expected_version:
                return False
            # Booking first: a reader that sees the new slot version also sees it.
            if booking is not None:
                self._bookings[booking.id] = booking
            self._slots[key] = slot
            return True

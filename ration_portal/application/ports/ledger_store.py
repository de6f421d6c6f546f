from __future__ import annotations

from abc import ABC, abstractmethod

from ration_portal.domain.entities.booking import Booking
from ration_portal.domain.entities.slot import Slot


class LedgerStorePort(ABC):
    @abstractmethod
    def add_slot(self, slot: Slot) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_slot(self, shop_id: str, slot_id: str) -> Slot | None:
        raise NotImplementedError

    @abstractmethod
    def list_slots(self, shop_id: str) -> list[Slot]:
        raise NotImplementedError

    @abstractmethod
    def get_booking(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_bookings_by_shop(self, shop_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def list_bookings_by_user(self, user_id: str) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def commit(self, slot: Slot, expected_version: int, booking: Booking | None = None) -> bool:
        """
        Atomically replace the stored slot and upsert the booking (if given).
        Only applies when the stored slot's version still equals expected_version;
        returns False without writing anything otherwise.
        """
        raise NotImplementedError

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable

from ration_portal.application.exceptions import (
    ConflictRetryable,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.application.utils.authorization import load_shop, manages_shop
from ration_portal.domain.entities.booking import Booking, BookingStatus
from ration_portal.domain.entities.caller import CallerContext


class UpdateBookingStatusUseCase:
    """
    Moves a confirmed booking to completed (collected at the counter) or
    cancelled. Cancelling hands the seat and the entitlement back to the slot
    in the same commit that flips the status.
    """

    def __init__(
        self,
        store: LedgerStorePort,
        directory: DirectoryPort,
        max_retries: int = 3,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._directory = directory
        self._max_retries = max(1, max_retries)
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def complete(self, caller: CallerContext, booking_id: str) -> Booking:
        booking = self._load(booking_id)
        shop = load_shop(self._directory, booking.shop_id)
        if not manages_shop(caller, shop):
            raise PermissionDeniedError("Only the shop's shopkeeper can mark a booking collected")
        return self._transition(booking, BookingStatus.completed, release=False)

    def cancel(self, caller: CallerContext, booking_id: str) -> Booking:
        booking = self._load(booking_id)
        is_owner = caller.is_beneficiary and caller.user_id == booking.beneficiary_id
        if not is_owner:
            shop = load_shop(self._directory, booking.shop_id)
            if not manages_shop(caller, shop):
                raise PermissionDeniedError("Only the beneficiary or the shop's shopkeeper can cancel")
        return self._transition(booking, BookingStatus.cancelled, release=True)

    def _load(self, booking_id: str) -> Booking:
        booking = self._store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    def _transition(self, booking: Booking, target: BookingStatus, release: bool) -> Booking:
        booking_id = booking.id
        for attempt in range(1, self._max_retries + 1):
            # Slot before booking: every booking write bumps the slot version,
            # so a status read older than this snapshot fails the commit.
            slot = self._store.get_slot(booking.shop_id, booking.slot_id)
            if slot is None:
                raise NotFoundError(f"Slot {booking.slot_id} not found")

            booking = self._load(booking_id)
            if booking.status != BookingStatus.confirmed:
                raise ValidationError(
                    f"Booking {booking_id} is {booking.status.value} and cannot become {target.value}"
                )

            now_ts = self._clock()
            updated_booking = replace(booking, status=target, updated_at=now_ts)
            if release:
                updated_slot = slot.release(booking.entitlement, now_ts)
            else:
                # Version still moves so a racing cancel sees the completion.
                updated_slot = replace(slot, version=slot.version + 1, updated_at=now_ts)

            if self._store.commit(updated_slot, expected_version=slot.version, booking=updated_booking):
                self._logger.info(
                    "Booking status changed",
                    extra={"booking_id": booking_id, "slot_id": slot.id, "reason": target.value},
                )
                return updated_booking

            self._logger.warning(
                "Slot changed during status update, retrying",
                extra={"booking_id": booking_id, "attempt": attempt},
            )

        raise ConflictRetryable(f"Booking {booking_id} is busy, try again")

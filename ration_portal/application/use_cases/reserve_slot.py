from __future__ import annotations

import logging
import time
from typing import Callable

from ration_portal.application.exceptions import (
    CapacityExceeded,
    ConflictRetryable,
    InsufficientStock,
    NotFoundError,
    ValidationError,
)
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.application.utils.authorization import load_shop, require_role
from ration_portal.application.utils.entitlement import (
    DEFAULT_FAMILY_MEMBERS,
    compute_entitlement,
    is_available,
)
from ration_portal.application.utils.verification_code import generate_verification_code, new_id
from ration_portal.domain.entities.booking import Booking, BookingStatus
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.domain.entities.slot import Slot
from ration_portal.domain.entities.stock import Stock


class ReserveSlotUseCase:
    """
    Books a slot for a beneficiary.

    The booking and the slot's counters are committed together through a
    compare-and-set on the slot version. When another request got there first,
    the slot is re-read and admission is checked again against the fresh
    numbers, so the last seat or the last kilo is only ever handed out once.
    """

    def __init__(
        self,
        store: LedgerStorePort,
        directory: DirectoryPort,
        max_retries: int = 3,
        default_family_members: int = DEFAULT_FAMILY_MEMBERS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._directory = directory
        self._max_retries = max(1, max_retries)
        self._default_family_members = default_family_members
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def execute(self, caller: CallerContext, shop_id: str, slot_id: str) -> Booking:
        require_role(caller, "beneficiary")

        shop = load_shop(self._directory, shop_id)
        if not shop.is_approved:
            raise ValidationError(f"Shop {shop_id} is not approved for bookings")

        user = self._directory.get_user(caller.user_id)
        if user is None:
            raise NotFoundError(f"User {caller.user_id} not found")
        entitlement = compute_entitlement(user.family_members, default=self._default_family_members)

        for attempt in range(1, self._max_retries + 1):
            slot = self._store.get_slot(shop_id, slot_id)
            if slot is None or slot.shop_id != shop_id:
                raise NotFoundError(f"Slot {slot_id} not found at shop {shop_id}")

            self._check_admission(slot, entitlement)

            now_ts = self._clock()
            booking = Booking(
                id=new_id("bkg"),
                beneficiary_id=user.id,
                beneficiary_name=user.name or caller.name or "",
                shop_id=shop.id,
                shop_name=shop.name,
                slot_id=slot.id,
                date=slot.date,
                time_slot=slot.time_slot,
                entitlement=entitlement,
                qr_code=generate_verification_code(user.id),
                status=BookingStatus.confirmed,
                created_at=now_ts,
                updated_at=now_ts,
            )

            if self._store.commit(slot.reserve(entitlement, now_ts), expected_version=slot.version, booking=booking):
                self._logger.info(
                    "Slot reserved",
                    extra={
                        "booking_id": booking.id,
                        "slot_id": slot.id,
                        "shop_id": shop_id,
                        "user_id": user.id,
                        "attempt": attempt,
                    },
                )
                return booking

            self._logger.warning(
                "Slot changed during reservation, retrying",
                extra={"slot_id": slot_id, "user_id": user.id, "attempt": attempt},
            )

        raise ConflictRetryable(f"Slot {slot_id} is busy, try again")

    def _check_admission(self, slot: Slot, entitlement: Stock) -> None:
        if slot.is_full:
            self._logger.info(
                "Reservation rejected",
                extra={"slot_id": slot.id, "reason": "capacity_exceeded"},
            )
            raise CapacityExceeded(f"Slot {slot.id} is fully booked")

        if not is_available(entitlement, slot.available_stock):
            shortfall = slot.available_stock.shortfall(entitlement)
            self._logger.info(
                "Reservation rejected",
                extra={"slot_id": slot.id, "reason": "insufficient_stock:" + ",".join(shortfall)},
            )
            raise InsufficientStock(shortfall)

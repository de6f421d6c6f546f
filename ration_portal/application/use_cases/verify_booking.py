from __future__ import annotations

import logging
from dataclasses import dataclass

from ration_portal.application.exceptions import PermissionDeniedError
from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.application.utils.authorization import require_role
from ration_portal.domain.entities.booking import Booking
from ration_portal.domain.entities.caller import CallerContext


@dataclass(frozen=True)
class VerificationResult:
    found: bool
    booking: Booking | None = None


class VerifyBookingUseCase:
    def __init__(self, store: LedgerStorePort) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    def execute(self, caller: CallerContext, code: str) -> VerificationResult:
        """
        Look up a booking by id or QR code within the caller's own shop.
        A miss is a normal outcome (typo, wrong shop, forged code), not an error.
        """
        require_role(caller, "shopkeeper")
        if not caller.shop_id:
            raise PermissionDeniedError("Shopkeeper has no shop assigned")

        needle = (code or "").strip()
        if needle:
            for booking in self._store.list_bookings_by_shop(caller.shop_id):
                if booking.shop_id == caller.shop_id and booking.matches_code(needle):
                    self._logger.info(
                        "Booking verified",
                        extra={"booking_id": booking.id, "shop_id": caller.shop_id},
                    )
                    return VerificationResult(found=True, booking=booking)

        self._logger.info("Booking not found", extra={"shop_id": caller.shop_id, "reason": "no_match"})
        return VerificationResult(found=False)

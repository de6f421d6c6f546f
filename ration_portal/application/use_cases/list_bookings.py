from __future__ import annotations

from dataclasses import dataclass

from ration_portal.application.exceptions import PermissionDeniedError
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.application.utils.authorization import load_shop, manages_shop
from ration_portal.domain.entities.booking import Booking
from ration_portal.domain.entities.caller import CallerContext


def _newest_first(bookings: list[Booking]) -> list[Booking]:
    return sorted(bookings, key=lambda b: b.created_at or 0, reverse=True)


@dataclass
class ListBookingsUseCase:
    store: LedgerStorePort
    directory: DirectoryPort

    def by_user(self, caller: CallerContext, user_id: str) -> list[Booking]:
        if not (caller.is_admin or caller.user_id == user_id):
            raise PermissionDeniedError("Users may only list their own bookings")
        return _newest_first(self.store.list_bookings_by_user(user_id))

    def by_shop(self, caller: CallerContext, shop_id: str) -> list[Booking]:
        if not caller.is_admin:
            shop = load_shop(self.directory, shop_id)
            if not manages_shop(caller, shop):
                raise PermissionDeniedError("Shopkeepers may only list their own shop's bookings")
        return _newest_first(self.store.list_bookings_by_shop(shop_id))

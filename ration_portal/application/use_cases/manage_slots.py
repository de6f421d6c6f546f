from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable

from ration_portal.application.exceptions import (
    ConflictRetryable,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.application.utils.authorization import load_shop, manages_shop, require_shop_manager
from ration_portal.application.utils.validation import (
    parse_iso_date,
    require_capacity,
    require_stock,
    require_text,
)
from ration_portal.application.utils.verification_code import new_id
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.domain.entities.slot import Slot
from ration_portal.domain.entities.stock import Stock


class CreateSlotUseCase:
    def __init__(
        self,
        store: LedgerStorePort,
        directory: DirectoryPort,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._directory = directory
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def execute(
        self,
        caller: CallerContext,
        shop_id: str,
        date: str,
        time_slot: str,
        max_capacity: int,
        stock_limit: Stock,
    ) -> Slot:
        require_shop_manager(caller, self._directory, shop_id)

        # Several slots may share the same (date, time_slot); that is left to the shopkeeper.
        now_ts = self._clock()
        slot = Slot(
            id=new_id("slot"),
            shop_id=shop_id,
            date=parse_iso_date(date),
            time_slot=require_text(time_slot, "time_slot"),
            max_capacity=require_capacity(max_capacity),
            stock_limit=require_stock(stock_limit),
            available_stock=stock_limit,
            booked_count=0,
            created_at=now_ts,
            updated_at=now_ts,
        )
        self._store.add_slot(slot)
        self._logger.info(
            "Slot created",
            extra={"slot_id": slot.id, "shop_id": shop_id, "user_id": caller.user_id},
        )
        return slot


@dataclass
class ListSlotsUseCase:
    store: LedgerStorePort

    def execute(self, shop_id: str, date: str | None = None) -> list[Slot]:
        slots = self.store.list_slots(shop_id)
        if date:
            wanted = parse_iso_date(date)
            slots = [s for s in slots if s.date == wanted]
        return sorted(slots, key=lambda s: (s.date, s.time_slot, s.created_at or 0))


class UpdateSlotUseCase:
    """Lets a shopkeeper resize a slot without breaking what is already booked."""

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

    def execute(
        self,
        caller: CallerContext,
        shop_id: str,
        slot_id: str,
        max_capacity: int | None = None,
        stock_limit: Stock | None = None,
    ) -> Slot:
        require_shop_manager(caller, self._directory, shop_id)
        if max_capacity is not None:
            require_capacity(max_capacity)
        if stock_limit is not None:
            require_stock(stock_limit)

        for attempt in range(1, self._max_retries + 1):
            slot = self._store.get_slot(shop_id, slot_id)
            if slot is None:
                raise NotFoundError(f"Slot {slot_id} not found")

            updated = self._apply(slot, max_capacity, stock_limit)
            if self._store.commit(updated, expected_version=slot.version):
                self._logger.info("Slot updated", extra={"slot_id": slot_id, "shop_id": shop_id})
                return updated

            self._logger.warning(
                "Slot changed during update, retrying",
                extra={"slot_id": slot_id, "attempt": attempt},
            )

        raise ConflictRetryable(f"Slot {slot_id} is busy, try again")

    def _apply(self, slot: Slot, max_capacity: int | None, stock_limit: Stock | None) -> Slot:
        new_capacity = slot.max_capacity if max_capacity is None else max_capacity
        if new_capacity < slot.booked_count:
            raise ValidationError(
                f"max_capacity cannot be below the {slot.booked_count} bookings already made"
            )

        new_limit = slot.stock_limit if stock_limit is None else stock_limit
        reserved = slot.distributed_stock
        if not new_limit.covers(reserved):
            raise ValidationError(
                "stock_limit cannot be below stock already reserved for: "
                + ", ".join(new_limit.shortfall(reserved))
            )

        return replace(
            slot,
            max_capacity=new_capacity,
            stock_limit=new_limit,
            available_stock=new_limit.minus(reserved),
            version=slot.version + 1,
            updated_at=self._clock(),
        )


@dataclass(frozen=True)
class StockOverview:
    shop_id: str
    slot_count: int
    total_capacity: int
    total_booked: int
    stock_limit: Stock = field(default_factory=Stock)
    available_stock: Stock = field(default_factory=Stock)
    distributed_stock: Stock = field(default_factory=Stock)


@dataclass
class StockOverviewUseCase:
    store: LedgerStorePort
    directory: DirectoryPort

    def execute(self, caller: CallerContext, shop_id: str) -> StockOverview:
        shop = load_shop(self.directory, shop_id)
        if not (caller.is_admin or manages_shop(caller, shop)):
            raise PermissionDeniedError("Only the shop's shopkeeper or an admin can see its stock")
        slots = self.store.list_slots(shop_id)

        limit = Stock.zero()
        available = Stock.zero()
        for slot in slots:
            limit = limit.plus(slot.stock_limit)
            available = available.plus(slot.available_stock)

        return StockOverview(
            shop_id=shop_id,
            slot_count=len(slots),
            total_capacity=sum(s.max_capacity for s in slots),
            total_booked=sum(s.booked_count for s in slots),
            stock_limit=limit,
            available_stock=available,
            distributed_stock=limit.minus(available),
        )

"""
Tests for slot creation, listing, resizing and the shop stock overview.
"""

from __future__ import annotations

import pytest

from ration_portal.application.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ration_portal.application.use_cases.manage_slots import (
    CreateSlotUseCase,
    ListSlotsUseCase,
    StockOverviewUseCase,
    UpdateSlotUseCase,
)
from ration_portal.application.use_cases.reserve_slot import ReserveSlotUseCase
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.domain.entities.directory import Shop, User
from ration_portal.domain.entities.stock import Stock
from ration_portal.infrastructure.directory.static_directory import StaticDirectory
from ration_portal.infrastructure.store.memory_store import MemoryLedgerStore

SHOPKEEPER = CallerContext(user_id="u_keeper", role="shopkeeper", shop_id="shop_1")
LIMIT = Stock(rice=500, wheat=400, sugar=100, kerosene=50)


def _setup():
    store = MemoryLedgerStore()
    directory = StaticDirectory(
        users=[User(id="u_ben", name="Asha", role="beneficiary", family_members=4)],
        shops=[
            Shop(id="shop_1", name="Fair Price Shop 1", shopkeeper_id="u_keeper", status="approved"),
            Shop(id="shop_2", name="Fair Price Shop 2", shopkeeper_id="u_other", status="approved"),
        ],
    )
    return store, directory, CreateSlotUseCase(store=store, directory=directory)


def test_new_slot_starts_empty_with_full_stock():
    store, _, create = _setup()
    slot = create.execute(SHOPKEEPER, "shop_1", "2026-11-02", " 09:00 - 11:00 ", 20, LIMIT)

    assert slot.booked_count == 0
    assert slot.available_stock == slot.stock_limit == LIMIT
    assert slot.time_slot == "09:00 - 11:00"
    assert store.get_slot("shop_1", slot.id) == slot


def test_duplicate_slots_are_allowed():
    store, _, create = _setup()
    first = create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 20, LIMIT)
    second = create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 20, LIMIT)
    assert first.id != second.id
    assert len(store.list_slots("shop_1")) == 2


@pytest.mark.parametrize(
    "date, time_slot, capacity, limit",
    [
        ("02/11/2026", "09:00 - 11:00", 20, LIMIT),
        ("2026-11-02", "   ", 20, LIMIT),
        ("2026-11-02", "09:00 - 11:00", 0, LIMIT),
        ("2026-11-02", "09:00 - 11:00", 20, Stock(rice=-1, wheat=400, sugar=100, kerosene=50)),
    ],
)
def test_malformed_slot_is_rejected(date, time_slot, capacity, limit):
    store, _, create = _setup()
    with pytest.raises(ValidationError):
        create.execute(SHOPKEEPER, "shop_1", date, time_slot, capacity, limit)
    assert store.list_slots("shop_1") == []


def test_only_the_shops_own_shopkeeper_creates_slots():
    _, _, create = _setup()
    with pytest.raises(PermissionDeniedError):
        create.execute(SHOPKEEPER, "shop_2", "2026-11-02", "09:00 - 11:00", 20, LIMIT)
    with pytest.raises(PermissionDeniedError):
        create.execute(CallerContext(user_id="u_ben", role="beneficiary"), "shop_1", "2026-11-02", "x", 20, LIMIT)
    with pytest.raises(NotFoundError):
        create.execute(SHOPKEEPER, "shop_missing", "2026-11-02", "09:00 - 11:00", 20, LIMIT)


def test_list_slots_filters_by_date_and_sorts():
    store, _, create = _setup()
    create.execute(SHOPKEEPER, "shop_1", "2026-11-03", "09:00 - 11:00", 20, LIMIT)
    create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "14:00 - 16:00", 20, LIMIT)
    create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 20, LIMIT)

    listing = ListSlotsUseCase(store=store)
    assert [(s.date, s.time_slot) for s in listing.execute("shop_1")] == [
        ("2026-11-02", "09:00 - 11:00"),
        ("2026-11-02", "14:00 - 16:00"),
        ("2026-11-03", "09:00 - 11:00"),
    ]
    assert len(listing.execute("shop_1", date="2026-11-02")) == 2
    assert listing.execute("shop_2") == []


def test_resize_keeps_reserved_stock_intact():
    store, directory, create = _setup()
    slot = create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 20, LIMIT)
    ReserveSlotUseCase(store=store, directory=directory).execute(
        CallerContext(user_id="u_ben", role="beneficiary"), "shop_1", slot.id
    )

    update = UpdateSlotUseCase(store=store, directory=directory)
    resized = update.execute(
        SHOPKEEPER, "shop_1", slot.id, max_capacity=10, stock_limit=Stock(rice=100, wheat=100, sugar=10, kerosene=10)
    )

    assert resized.max_capacity == 10
    assert resized.booked_count == 1
    assert resized.available_stock == Stock(rice=80, wheat=88, sugar=6, kerosene=8)


def test_resize_cannot_undercut_existing_bookings():
    store, directory, create = _setup()
    slot = create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 1, LIMIT)
    ReserveSlotUseCase(store=store, directory=directory).execute(
        CallerContext(user_id="u_ben", role="beneficiary"), "shop_1", slot.id
    )
    update = UpdateSlotUseCase(store=store, directory=directory)

    with pytest.raises(ValidationError):
        update.execute(SHOPKEEPER, "shop_1", slot.id, stock_limit=Stock(rice=10, wheat=400, sugar=100, kerosene=50))
    with pytest.raises(ValidationError):
        update.execute(SHOPKEEPER, "shop_1", slot.id, max_capacity=0)
    with pytest.raises(NotFoundError):
        update.execute(SHOPKEEPER, "shop_1", "slot_missing", max_capacity=5)


def test_stock_overview_totals_all_slots():
    store, directory, create = _setup()
    first = create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 20, LIMIT)
    create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "14:00 - 16:00", 10, LIMIT)
    ReserveSlotUseCase(store=store, directory=directory).execute(
        CallerContext(user_id="u_ben", role="beneficiary"), "shop_1", first.id
    )

    overview = StockOverviewUseCase(store=store, directory=directory).execute(SHOPKEEPER, "shop_1")

    assert overview.slot_count == 2
    assert overview.total_capacity == 30
    assert overview.total_booked == 1
    assert overview.stock_limit == LIMIT.plus(LIMIT)
    assert overview.distributed_stock == Stock(rice=20, wheat=12, sugar=4, kerosene=2)
    assert overview.available_stock == overview.stock_limit.minus(overview.distributed_stock)


def test_stock_overview_is_for_the_shopkeeper_or_an_admin():
    store, directory, create = _setup()
    create.execute(SHOPKEEPER, "shop_1", "2026-11-02", "09:00 - 11:00", 20, LIMIT)
    overview = StockOverviewUseCase(store=store, directory=directory)

    assert overview.execute(CallerContext(user_id="u_admin", role="admin"), "shop_1").slot_count == 1
    with pytest.raises(PermissionDeniedError):
        overview.execute(CallerContext(user_id="u_ben", role="beneficiary"), "shop_1")
    with pytest.raises(PermissionDeniedError):
        overview.execute(CallerContext(user_id="u_other", role="shopkeeper", shop_id="shop_2"), "shop_1")

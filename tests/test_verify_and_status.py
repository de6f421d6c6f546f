"""
Tests for collection-point verification, booking listings and status changes.
"""

from __future__ import annotations

import pytest

from ration_portal.application.exceptions import PermissionDeniedError, ValidationError
from ration_portal.application.use_cases.list_bookings import ListBookingsUseCase
from ration_portal.application.use_cases.manage_slots import CreateSlotUseCase
from ration_portal.application.use_cases.reserve_slot import ReserveSlotUseCase
from ration_portal.application.use_cases.update_booking_status import UpdateBookingStatusUseCase
from ration_portal.application.use_cases.verify_booking import VerifyBookingUseCase
from ration_portal.domain.entities.booking import BookingStatus
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.domain.entities.directory import Shop, User
from ration_portal.domain.entities.stock import Stock
from ration_portal.infrastructure.directory.static_directory import StaticDirectory
from ration_portal.infrastructure.store.memory_store import MemoryLedgerStore

KEEPER_1 = CallerContext(user_id="u_keeper", role="shopkeeper", shop_id="shop_1")
KEEPER_2 = CallerContext(user_id="u_keeper2", role="shopkeeper", shop_id="shop_2")
BENEFICIARY = CallerContext(user_id="u_ben", role="beneficiary")
OTHER_BENEFICIARY = CallerContext(user_id="u_ben2", role="beneficiary")
ADMIN = CallerContext(user_id="u_admin", role="admin")
LIMIT = Stock(rice=500, wheat=400, sugar=100, kerosene=50)


def _setup(max_capacity: int = 20, store: MemoryLedgerStore | None = None):
    store = store or MemoryLedgerStore()
    directory = StaticDirectory(
        users=[
            User(id="u_ben", name="Asha", role="beneficiary", family_members=4),
            User(id="u_ben2", name="Ravi", role="beneficiary", family_members=2),
        ],
        shops=[
            Shop(id="shop_1", name="Fair Price Shop 1", shopkeeper_id="u_keeper", status="approved"),
            Shop(id="shop_2", name="Fair Price Shop 2", shopkeeper_id="u_keeper2", status="approved"),
        ],
    )
    slot = CreateSlotUseCase(store=store, directory=directory).execute(
        KEEPER_1, "shop_1", "2026-11-02", "09:00 - 11:00", max_capacity, LIMIT
    )
    booking = ReserveSlotUseCase(store=store, directory=directory).execute(BENEFICIARY, "shop_1", slot.id)
    return store, directory, slot, booking


def test_verify_by_qr_code_or_booking_id():
    store, _, _, booking = _setup()
    verify = VerifyBookingUseCase(store=store)

    by_code = verify.execute(KEEPER_1, booking.qr_code)
    by_id = verify.execute(KEEPER_1, f"  {booking.id} ")

    assert by_code.found and by_code.booking == booking
    assert by_id.found and by_id.booking == booking
    assert by_code.booking.entitlement == Stock(rice=20, wheat=12, sugar=4, kerosene=2)
    assert by_code.booking.status == BookingStatus.confirmed


def test_verify_is_scoped_to_own_shop():
    store, _, _, booking = _setup()
    result = VerifyBookingUseCase(store=store).execute(KEEPER_2, booking.qr_code)
    assert result.found is False
    assert result.booking is None


def test_unknown_code_is_a_miss_not_an_error():
    store, _, _, _ = _setup()
    verify = VerifyBookingUseCase(store=store)
    assert verify.execute(KEEPER_1, "BKG-0-nobody").found is False
    assert verify.execute(KEEPER_1, "").found is False


def test_only_shopkeepers_verify():
    store, _, _, booking = _setup()
    with pytest.raises(PermissionDeniedError):
        VerifyBookingUseCase(store=store).execute(BENEFICIARY, booking.qr_code)
    with pytest.raises(PermissionDeniedError):
        VerifyBookingUseCase(store=store).execute(CallerContext(user_id="k", role="shopkeeper"), booking.qr_code)


def test_cancel_gives_back_seat_and_stock():
    store, directory, slot, booking = _setup()
    cancelled = UpdateBookingStatusUseCase(store=store, directory=directory).cancel(BENEFICIARY, booking.id)

    assert cancelled.status == BookingStatus.cancelled
    after = store.get_slot("shop_1", slot.id)
    assert after.booked_count == 0
    assert after.available_stock == LIMIT
    assert store.get_booking(booking.id).status == BookingStatus.cancelled


def test_cancelled_seat_can_be_booked_again():
    store, directory, slot, booking = _setup(max_capacity=1)
    UpdateBookingStatusUseCase(store=store, directory=directory).cancel(KEEPER_1, booking.id)

    rebooked = ReserveSlotUseCase(store=store, directory=directory).execute(OTHER_BENEFICIARY, "shop_1", slot.id)

    assert rebooked.entitlement == Stock(rice=10, wheat=6, sugar=2, kerosene=1)
    assert store.get_slot("shop_1", slot.id).booked_count == 1


def test_complete_keeps_stock_reserved():
    store, directory, slot, booking = _setup()
    completed = UpdateBookingStatusUseCase(store=store, directory=directory).complete(KEEPER_1, booking.id)

    assert completed.status == BookingStatus.completed
    after = store.get_slot("shop_1", slot.id)
    assert after.booked_count == 1
    assert after.available_stock == Stock(rice=480, wheat=388, sugar=96, kerosene=48)


def test_finished_bookings_cannot_change_again():
    store, directory, _, booking = _setup()
    status = UpdateBookingStatusUseCase(store=store, directory=directory)
    status.complete(KEEPER_1, booking.id)

    with pytest.raises(ValidationError):
        status.cancel(BENEFICIARY, booking.id)
    with pytest.raises(ValidationError):
        status.complete(KEEPER_1, booking.id)


class _InterleavingStore(MemoryLedgerStore):
    """Runs a rival status change at a chosen read inside another status change."""

    def __init__(self) -> None:
        super().__init__()
        self.rival = None
        self.hook = None
        self.skip = 0

    def _maybe_run_rival(self, name: str) -> None:
        if self.rival is None or self.hook != name:
            return
        if self.skip:
            self.skip -= 1
            return
        rival, self.rival = self.rival, None
        rival()

    def get_slot(self, shop_id, slot_id):
        self._maybe_run_rival("get_slot")
        return super().get_slot(shop_id, slot_id)

    def get_booking(self, booking_id):
        booking = super().get_booking(booking_id)
        self._maybe_run_rival("get_booking")
        return booking


@pytest.mark.parametrize("hook, skip", [("get_slot", 0), ("get_booking", 1)])
@pytest.mark.parametrize("rival_action", ["cancel", "complete"])
def test_racing_status_changes_release_a_booking_at_most_once(hook, skip, rival_action):
    store, directory, slot, booking = _setup(max_capacity=2, store=_InterleavingStore())
    other = ReserveSlotUseCase(store=store, directory=directory).execute(OTHER_BENEFICIARY, "shop_1", slot.id)
    status = UpdateBookingStatusUseCase(store=store, directory=directory)

    store.hook, store.skip = hook, skip
    store.rival = lambda: getattr(status, rival_action)(KEEPER_1, booking.id)

    with pytest.raises(ValidationError):
        status.cancel(BENEFICIARY, booking.id)

    assert store.rival is None
    expected = BookingStatus.cancelled if rival_action == "cancel" else BookingStatus.completed
    assert store.get_booking(booking.id).status == expected
    assert store.get_booking(other.id).status == BookingStatus.confirmed

    live = [b for b in store.list_bookings_by_shop("shop_1") if b.status != BookingStatus.cancelled]
    reserved = Stock.zero()
    for b in live:
        reserved = reserved.plus(b.entitlement)
    after = store.get_slot("shop_1", slot.id)
    assert after.booked_count == len(live)
    assert after.available_stock == LIMIT.minus(reserved)


def test_status_changes_need_the_right_caller():
    store, directory, _, booking = _setup()
    status = UpdateBookingStatusUseCase(store=store, directory=directory)

    with pytest.raises(PermissionDeniedError):
        status.cancel(OTHER_BENEFICIARY, booking.id)
    with pytest.raises(PermissionDeniedError):
        status.cancel(KEEPER_2, booking.id)
    with pytest.raises(PermissionDeniedError):
        status.complete(BENEFICIARY, booking.id)


def test_booking_listings():
    store, directory, _, booking = _setup()
    listing = ListBookingsUseCase(store=store, directory=directory)

    assert listing.by_user(BENEFICIARY, "u_ben") == [booking]
    assert listing.by_user(ADMIN, "u_ben") == [booking]
    assert listing.by_user(OTHER_BENEFICIARY, "u_ben2") == []
    assert listing.by_shop(KEEPER_1, "shop_1") == [booking]
    assert listing.by_shop(ADMIN, "shop_2") == []

    with pytest.raises(PermissionDeniedError):
        listing.by_user(OTHER_BENEFICIARY, "u_ben")
    with pytest.raises(PermissionDeniedError):
        listing.by_shop(KEEPER_2, "shop_1")

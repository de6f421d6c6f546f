from functools import lru_cache
import logging

from fastapi import Depends

from ration_portal.core.config import settings
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.application.ports.ledger_store import LedgerStorePort
from ration_portal.application.use_cases.list_bookings import ListBookingsUseCase
from ration_portal.application.use_cases.manage_slots import (
    CreateSlotUseCase,
    ListSlotsUseCase,
    StockOverviewUseCase,
    UpdateSlotUseCase,
)
from ration_portal.application.use_cases.reserve_slot import ReserveSlotUseCase
from ration_portal.application.use_cases.update_booking_status import UpdateBookingStatusUseCase
from ration_portal.application.use_cases.verify_booking import VerifyBookingUseCase
from ration_portal.infrastructure.directory.http_directory import HttpDirectory
from ration_portal.infrastructure.directory.static_directory import StaticDirectory
from ration_portal.infrastructure.store.json_store import JsonLedgerStore
from ration_portal.infrastructure.store.memory_store import MemoryLedgerStore


@lru_cache
def get_ledger_store() -> LedgerStorePort:
    if settings.STORE_PROVIDER.lower() == "json":
        return JsonLedgerStore(data_dir=settings.DATA_DIR)
    return MemoryLedgerStore()


@lru_cache
def get_directory() -> DirectoryPort:
    logger = logging.getLogger(__name__)
    if settings.DIRECTORY_PROVIDER.lower() == "http":
        logger.info("Using HttpDirectory", extra={"url": settings.SHOP_SERVICE_URL})
        return HttpDirectory()

    if settings.DIRECTORY_SEED_PATH:
        return StaticDirectory.from_file(settings.DIRECTORY_SEED_PATH)

    if settings.ENV.lower() not in {"dev", "local", "test"}:
        raise ValueError("DIRECTORY_SEED_PATH or DIRECTORY_PROVIDER=http is required outside dev.")
    logger.info("Using empty StaticDirectory (ENV=%s)", settings.ENV)
    return StaticDirectory()


def get_list_slots_use_case(store: LedgerStorePort = Depends(get_ledger_store)) -> ListSlotsUseCase:
    return ListSlotsUseCase(store=store)


def get_create_slot_use_case(
    store: LedgerStorePort = Depends(get_ledger_store),
    directory: DirectoryPort = Depends(get_directory),
) -> CreateSlotUseCase:
    return CreateSlotUseCase(store=store, directory=directory)


def get_update_slot_use_case(
    store: LedgerStorePort = Depends(get_ledger_store),
    directory: DirectoryPort = Depends(get_directory),
) -> UpdateSlotUseCase:
    return UpdateSlotUseCase(
        store=store,
        directory=directory,
        max_retries=settings.RESERVATION_MAX_RETRIES,
    )


def get_stock_overview_use_case(
    store: LedgerStorePort = Depends(get_ledger_store),
    directory: DirectoryPort = Depends(get_directory),
) -> StockOverviewUseCase:
    return StockOverviewUseCase(store=store, directory=directory)


def get_reserve_slot_use_case(
    store: LedgerStorePort = Depends(get_ledger_store),
    directory: DirectoryPort = Depends(get_directory),
) -> ReserveSlotUseCase:
    return ReserveSlotUseCase(
        store=store,
        directory=directory,
        max_retries=settings.RESERVATION_MAX_RETRIES,
        default_family_members=settings.DEFAULT_FAMILY_MEMBERS,
    )


def get_verify_booking_use_case(store: LedgerStorePort = Depends(get_ledger_store)) -> VerifyBookingUseCase:
    return VerifyBookingUseCase(store=store)


def get_update_booking_status_use_case(
    store: LedgerStorePort = Depends(get_ledger_store),
    directory: DirectoryPort = Depends(get_directory),
) -> UpdateBookingStatusUseCase:
    return UpdateBookingStatusUseCase(
        store=store,
        directory=directory,
        max_retries=settings.RESERVATION_MAX_RETRIES,
    )


def get_list_bookings_use_case(
    store: LedgerStorePort = Depends(get_ledger_store),
    directory: DirectoryPort = Depends(get_directory),
) -> ListBookingsUseCase:
    return ListBookingsUseCase(store=store, directory=directory)

from fastapi import APIRouter, Depends, Query

from ration_portal.api.v1.caller import get_caller
from ration_portal.api.v1.errors import to_http_error
from ration_portal.api.v1.schemas import (
    CreateSlotRequestSchema,
    SlotSchema,
    StockOverviewSchema,
    StockSchema,
    UpdateSlotRequestSchema,
)
from ration_portal.application.exceptions import RationPortalError
from ration_portal.application.use_cases.manage_slots import (
    CreateSlotUseCase,
    ListSlotsUseCase,
    StockOverviewUseCase,
    UpdateSlotUseCase,
)
from ration_portal.application.utils.entitlement import compute_entitlement
from ration_portal.core.config import settings
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.wiring.dependencies import (
    get_create_slot_use_case,
    get_list_slots_use_case,
    get_stock_overview_use_case,
    get_update_slot_use_case,
)

router = APIRouter()


@router.get("/shops/{shop_id}/slots", response_model=list[SlotSchema])
def list_slots(
    shop_id: str,
    date: str | None = Query(None),
    uc: ListSlotsUseCase = Depends(get_list_slots_use_case),
):
    try:
        slots = uc.execute(shop_id=shop_id, date=date)
    except RationPortalError as e:
        raise to_http_error(e)
    return [SlotSchema.from_entity(s) for s in slots]


@router.post("/shops/{shop_id}/slots", response_model=SlotSchema, status_code=201)
def create_slot(
    shop_id: str,
    req: CreateSlotRequestSchema,
    caller: CallerContext = Depends(get_caller),
    uc: CreateSlotUseCase = Depends(get_create_slot_use_case),
):
    try:
        slot = uc.execute(
            caller=caller,
            shop_id=shop_id,
            date=req.date.isoformat(),
            time_slot=req.time_slot,
            max_capacity=req.max_capacity,
            stock_limit=req.stock_limit.to_entity(),
        )
    except RationPortalError as e:
        raise to_http_error(e)
    return SlotSchema.from_entity(slot)


@router.patch("/shops/{shop_id}/slots/{slot_id}", response_model=SlotSchema)
def update_slot(
    shop_id: str,
    slot_id: str,
    req: UpdateSlotRequestSchema,
    caller: CallerContext = Depends(get_caller),
    uc: UpdateSlotUseCase = Depends(get_update_slot_use_case),
):
    try:
        slot = uc.execute(
            caller=caller,
            shop_id=shop_id,
            slot_id=slot_id,
            max_capacity=req.max_capacity,
            stock_limit=req.stock_limit.to_entity() if req.stock_limit else None,
        )
    except RationPortalError as e:
        raise to_http_error(e)
    return SlotSchema.from_entity(slot)


@router.get("/shops/{shop_id}/stock", response_model=StockOverviewSchema)
def stock_overview(
    shop_id: str,
    caller: CallerContext = Depends(get_caller),
    uc: StockOverviewUseCase = Depends(get_stock_overview_use_case),
):
    try:
        overview = uc.execute(caller=caller, shop_id=shop_id)
    except RationPortalError as e:
        raise to_http_error(e)
    return StockOverviewSchema.from_entity(overview)


@router.get("/entitlement", response_model=StockSchema)
def entitlement(family_members: int | None = Query(None)):
    try:
        stock = compute_entitlement(family_members, default=settings.DEFAULT_FAMILY_MEMBERS)
    except RationPortalError as e:
        raise to_http_error(e)
    return StockSchema.from_entity(stock)

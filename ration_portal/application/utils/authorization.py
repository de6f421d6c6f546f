from __future__ import annotations

from ration_portal.application.exceptions import NotFoundError, PermissionDeniedError
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.domain.entities.caller import CallerContext
from ration_portal.domain.entities.directory import Shop


def require_role(caller: CallerContext, *roles: str) -> None:
    if caller.role not in roles:
        raise PermissionDeniedError(f"Role '{caller.role}' may not perform this operation")


def manages_shop(caller: CallerContext, shop: Shop) -> bool:
    if not caller.is_shopkeeper:
        return False
    return caller.shop_id == shop.id or (bool(shop.shopkeeper_id) and shop.shopkeeper_id == caller.user_id)


def load_shop(directory: DirectoryPort, shop_id: str) -> Shop:
    shop = directory.get_shop(shop_id)
    if shop is None:
        raise NotFoundError(f"Shop {shop_id} not found")
    return shop


def require_shop_manager(caller: CallerContext, directory: DirectoryPort, shop_id: str) -> Shop:
    """Load the shop and make sure the caller is its shopkeeper."""
    require_role(caller, "shopkeeper")
    shop = load_shop(directory, shop_id)
    if not manages_shop(caller, shop):
        raise PermissionDeniedError("Shopkeepers may only manage their own shop")
    return shop

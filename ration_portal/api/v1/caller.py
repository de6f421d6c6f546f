from __future__ import annotations

from fastapi import Header, HTTPException

from ration_portal.domain.entities.caller import ROLES, CallerContext


def get_caller(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
    x_shop_id: str | None = Header(None),
    x_user_name: str | None = Header(None),
) -> CallerContext:
    """Caller identity as forwarded by the auth gateway in front of this service."""
    user_id = (x_user_id or "").strip()
    role = (x_user_role or "").strip().lower()
    if not user_id or role not in ROLES:
        raise HTTPException(status_code=401, detail="Missing or invalid caller identity")
    return CallerContext(
        user_id=user_id,
        role=role,
        shop_id=(x_shop_id or "").strip() or None,
        name=x_user_name,
    )

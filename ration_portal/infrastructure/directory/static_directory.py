from __future__ import annotations

import json
import logging
from pathlib import Path

from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.domain.entities.directory import Shop, User


class StaticDirectory(DirectoryPort):
    """In-process user/shop directory for dev, tests and offline demos."""

    def __init__(self, users: list[User] | None = None, shops: list[Shop] | None = None) -> None:
        self._users = {u.id: u for u in (users or [])}
        self._shops = {s.id: s for s in (shops or [])}

    @classmethod
    def from_file(cls, path: str) -> "StaticDirectory":
        """Load a seed file shaped like {"users": [...], "shops": [...]}."""
        with open(Path(path), "r", encoding="utf-8") as f:
            data = json.load(f)
        users = [User.from_payload(u) for u in data.get("users", [])]
        shops = [Shop.from_payload(s) for s in data.get("shops", [])]
        logging.getLogger(__name__).info(
            "Directory seeded", extra={"users": len(users), "shops": len(shops), "path": path}
        )
        return cls(users=users, shops=shops)

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_shop(self, shop_id: str) -> Shop | None:
        return self._shops.get(shop_id)

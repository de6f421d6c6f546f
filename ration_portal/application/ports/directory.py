from __future__ import annotations

from abc import ABC, abstractmethod

from ration_portal.domain.entities.directory import Shop, User


class DirectoryPort(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        """Look up a user by id. Returns None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def get_shop(self, shop_id: str) -> Shop | None:
        """Look up a shop by id. Returns None if unknown."""
        raise NotImplementedError

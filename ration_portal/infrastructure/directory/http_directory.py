from __future__ import annotations

import logging
from typing import Any, Callable
from urllib.parse import quote

import httpx

from ration_portal.application.exceptions import DirectoryUnavailableError
from ration_portal.application.ports.directory import DirectoryPort
from ration_portal.core.config import settings
from ration_portal.domain.entities.directory import Shop, User


class HttpDirectory(DirectoryPort):
    """Reads users and shops from the portal's user/shop services."""

    def __init__(
        self,
        user_service_url: str | None = None,
        shop_service_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._user_url = (user_service_url or settings.USER_SERVICE_URL).rstrip("/") + "/"
        self._shop_url = (shop_service_url or settings.SHOP_SERVICE_URL).rstrip("/") + "/"
        self._client = client or httpx.Client(timeout=timeout or settings.DIRECTORY_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def _fetch(self, url: str) -> dict[str, Any] | None:
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            self._logger.error("Directory request failed", extra={"url": url, "error": str(e)})
            raise DirectoryUnavailableError("Directory service unavailable") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            self._logger.error(
                "Directory returned unexpected status",
                extra={"url": url, "status_code": response.status_code},
            )
            raise DirectoryUnavailableError(f"Directory service returned {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            self._logger.error("Directory returned a non-JSON body", extra={"url": url, "error": str(e)})
            raise DirectoryUnavailableError("Directory service returned an unreadable body") from e
        if not isinstance(data, dict):
            raise DirectoryUnavailableError("Directory service returned an unexpected payload")
        return data

    def _parse(self, url: str, data: dict[str, Any], parse: Callable[[dict[str, Any]], Any]) -> Any:
        try:
            return parse(data)
        except (TypeError, ValueError) as e:
            self._logger.error("Directory record is malformed", extra={"url": url, "error": str(e)})
            raise DirectoryUnavailableError("Directory service returned a malformed record") from e

    def get_user(self, user_id: str) -> User | None:
        url = self._user_url + quote(user_id, safe="")
        data = self._fetch(url)
        return self._parse(url, data, User.from_payload) if data else None

    def get_shop(self, shop_id: str) -> Shop | None:
        url = self._shop_url + quote(shop_id, safe="")
        data = self._fetch(url)
        return self._parse(url, data, Shop.from_payload) if data else None

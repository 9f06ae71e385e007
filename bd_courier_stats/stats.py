"""Customer delivery stats across all supported couriers."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import aiohttp

from .api import PathaoApi, RedXApi, SteadfastApi
from .config import ConfigManager
from .const import PROVIDER_PATHAO, PROVIDER_REDX, PROVIDER_STEADFAST, PROVIDERS
from .exceptions import CourierStatsError
from .phone import format_phone

_LOGGER = logging.getLogger(__name__)

_FACTORIES = {
    PROVIDER_PATHAO: PathaoApi,
    PROVIDER_STEADFAST: SteadfastApi,
    PROVIDER_REDX: RedXApi,
}


def error_record(message: str) -> dict:
    return {"error": message, "success": 0, "cancel": 0, "total": 0}


class CourierCustomerStats:
    """Looks up one phone number across Pathao, Steadfast and RedX.

    Provider clients are built on first use and kept for the lifetime of
    this object. Building a client checks its credentials, so a provider
    with missing credentials fails with ConfigError on its first lookup.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        self._config = ConfigManager(config)
        self._session = session
        self._owns_session = session is None
        self._clients = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            # Cookies are passed explicitly per login, not kept in a jar
            self._session = aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())
        return self._session

    def _client(self, provider: str):
        client = self._clients.get(provider)
        if client is None:
            try:
                factory = _FACTORIES[provider]
            except KeyError:
                raise ValueError(f"Unknown courier provider: {provider}") from None
            client = factory(self._get_session(), self._config)
            self._clients[provider] = client
        return client

    async def check_one(self, provider: str, phone: str) -> dict:
        """Return stats from a single provider, raising on any failure."""
        return await self._client(provider).check(phone)

    async def check_pathao(self, phone: str) -> dict:
        return await self.check_one(PROVIDER_PATHAO, phone)

    async def check_steadfast(self, phone: str) -> dict:
        return await self.check_one(PROVIDER_STEADFAST, phone)

    async def check_redx(self, phone: str) -> dict:
        return await self.check_one(PROVIDER_REDX, phone)

    async def _safe_check(self, provider: str, phone: str) -> dict:
        try:
            return await self.check_one(provider, phone)
        except (CourierStatsError, aiohttp.ClientError, asyncio.TimeoutError) as err:
            _LOGGER.warning("%s lookup failed: %s", provider, err)
            return error_record(str(err))
        except Exception as err:
            _LOGGER.exception("Unexpected error during %s lookup", provider)
            return error_record(str(err))

    async def check(self, phone: str) -> dict:
        """Return stats from every provider.

        A provider that fails is reported as a zeroed record with an
        ``error`` message; this method itself does not raise.

        Unlike ``check_one`` and the ``check_*`` shortcuts, the number is
        sanitized first, so ``+8801786161430`` or ``017-8616-1430`` are
        accepted here while the direct calls reject them with
        ValidationError.
        """
        try:
            phone = format_phone(phone)
        except CourierStatsError as err:
            _LOGGER.warning("Rejected phone number %r: %s", phone, err)
            return {provider: error_record(str(err)) for provider in PROVIDERS}

        results = await asyncio.gather(
            *(self._safe_check(provider, phone) for provider in PROVIDERS)
        )
        return dict(zip(PROVIDERS, results))

    def set_config(self, config: Mapping[str, Any]) -> "CourierCustomerStats":
        """Merge new credentials and rebuild clients on their next use."""
        self._config.set_config(config)
        self._clients.clear()
        return self

    def get_config(self) -> dict:
        return self._config.get_all()

import aiohttp
import logging

from .api_helpers import as_number, build_stats, send_request
from .config import ConfigManager
from .const import CONF_PATHAO_PASSWORD, CONF_PATHAO_USER
from .exceptions import ApiError, AuthError
from .phone import validate_phone

_LOGGER = logging.getLogger(__name__)


class PathaoApi:
    """Pathao merchant API: username/password login returning a bearer token."""

    BASE_URL = "https://merchant.pathao.com/api/v1"
    LABEL = "Pathao"

    def __init__(self, session: aiohttp.ClientSession, config: ConfigManager):
        config.validate_required([CONF_PATHAO_USER, CONF_PATHAO_PASSWORD])
        self._session = session
        self._config = config

    async def request(self, method, path, data=None, token=None, error_cls=ApiError):
        url = f"{self.BASE_URL}/{path.lstrip('/')}"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        return await send_request(
            self._session,
            method,
            url,
            json_data=data,
            headers=headers,
            label=self.LABEL,
            log_401_as_info=True,
            error_cls=error_cls,
        )

    async def check(self, phone):
        validate_phone(phone)
        token = await self.login()
        return await self.fetch_stats(phone, token)

    async def login(self) -> str:
        resp = await self.request(
            "POST",
            "login",
            {
                "username": self._config.get(CONF_PATHAO_USER),
                "password": self._config.get(CONF_PATHAO_PASSWORD),
            },
            error_cls=AuthError,
        )
        if not resp.successful:
            raise AuthError(f"Pathao login failed: HTTP {resp.status}")

        data = resp.json()
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            raise AuthError("Pathao login failed: No access token received")

        _LOGGER.debug("Pathao login succeeded")
        return token.strip()

    async def fetch_stats(self, phone, token):
        resp = await self.request("POST", "user/success", {"phone": phone}, token=token)
        if not resp.successful:
            raise ApiError(f"Pathao customer stats request failed: HTTP {resp.status}")

        data = resp.json()
        customer = (data.get("data") or {}) if isinstance(data, dict) else None
        customer = customer.get("customer") if isinstance(customer, dict) else None
        if not isinstance(customer, dict):
            raise ApiError("Invalid response format from Pathao API")

        successful = as_number(customer.get("successful_delivery"), "successful_delivery", self.LABEL)
        total = as_number(customer.get("total_delivery"), "total_delivery", self.LABEL)
        return build_stats(successful, total - successful, total)

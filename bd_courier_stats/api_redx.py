import aiohttp
import logging
import math

from .api_helpers import as_number, build_stats, send_request
from .config import ConfigManager
from .const import CONF_REDX_PASSWORD, CONF_REDX_USER, COUNTRY_CODE
from .exceptions import ApiError, AuthError
from .phone import sanitize_phone, validate_phone

_LOGGER = logging.getLogger(__name__)


def format_phone_for_api(phone: str) -> str:
    """Return the number as 8801XXXXXXXXX, the format RedX expects."""
    clean = sanitize_phone(phone)
    if clean.startswith(COUNTRY_CODE):
        clean = clean[len(COUNTRY_CODE):]
    return f"{COUNTRY_CODE}{clean}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RedXApi:
    """RedX merchant API: phone/password login returning a session token."""

    AUTH_URL = "https://api.redx.com.bd/v4/auth/login"
    STATS_URL = "https://redx.com.bd/api/redx_se/admin/parcel/customer-success-return-rate"
    LABEL = "RedX"

    def __init__(self, session: aiohttp.ClientSession, config: ConfigManager):
        config.validate_required([CONF_REDX_USER, CONF_REDX_PASSWORD])
        self._session = session
        self._config = config
        self._token = None

    async def request(self, method, url, data=None, params=None, token=None, error_cls=ApiError):
        headers = {"Accept": "application/json"}
        if data is not None:
            headers["Content-Type"] = "application/json"
        if token:
            headers["Authorization"] = f"Bearer {token}"

        return await send_request(
            self._session,
            method,
            url,
            json_data=data,
            params=params,
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
        payload = {
            "phone": format_phone_for_api(self._config.get(CONF_REDX_USER)),
            "password": self._config.get(CONF_REDX_PASSWORD),
        }
        resp = await self.request("POST", self.AUTH_URL, data=payload, error_cls=AuthError)
        if not resp.text:
            raise AuthError("RedX login request failed: No response received")

        result = resp.json()
        if not isinstance(result, dict):
            raise AuthError("RedX authentication failed: No access token received")
        body = result.get("data")
        token = body.get("accessToken") if isinstance(body, dict) else None
        if not token:
            message = result.get("message") or "No access token received"
            raise AuthError(f"RedX authentication failed: {message}")

        _LOGGER.debug("RedX login succeeded")
        self._token = token
        return token

    async def fetch_stats(self, phone, token=None):
        token = token or self._token
        if not token:
            raise AuthError("RedX stats request needs a token, call login() first")

        resp = await self.request(
            "GET",
            self.STATS_URL,
            params={"phoneNumber": format_phone_for_api(phone)},
            token=token,
        )
        if not resp.text:
            raise ApiError("RedX customer stats request failed: No response received")

        data = resp.json()
        if not isinstance(data, dict) or data.get("code") != 200:
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(f"RedX API returned error: {message or 'Unknown error'}")

        customer = data.get("data")
        if not isinstance(customer, dict):
            raise ApiError("Invalid response format from RedX API")

        total = as_number(customer.get("totalParcels"), "totalParcels", self.LABEL)
        delivered = as_number(customer.get("deliveredParcels"), "deliveredParcels", self.LABEL)
        return_pct = as_number(customer.get("returnPercentage"), "returnPercentage", self.LABEL, cast=float)
        # Cancellations are estimated from the return rate, not counted
        cancelled = _round_half_up(total * (return_pct / 100))
        return build_stats(delivered, cancelled, total)

import aiohttp
import asyncio
import async_timeout
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .const import REQUEST_TIMEOUT
from .exceptions import ApiError


_LOGGER = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    """Status, body and captured cookies of a finished request."""

    status: int
    text: str
    cookies: dict = field(default_factory=dict)

    @property
    def successful(self) -> bool:
        return 200 <= self.status < 300

    @property
    def redirect(self) -> bool:
        return 300 <= self.status < 400

    def json(self) -> Any:
        """Return the decoded body, or None when it is not JSON."""
        if not self.text:
            return None
        try:
            return json.loads(self.text)
        except ValueError:
            return None


def cookie_header(cookies: dict) -> str:
    return "; ".join(f"{k}={v}" for k, v in cookies.items())


def parse_set_cookies(headers) -> dict:
    """Collect name=value pairs from every Set-Cookie header."""
    cookies = {}
    for cookie in headers.getall("Set-Cookie", []):
        parts = cookie.split(";", 1)[0].strip().split("=", 1)
        if len(parts) == 2:
            cookies[parts[0]] = parts[1]
    return cookies


async def send_request(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    *,
    json_data=None,
    data=None,
    headers=None,
    params=None,
    cookies: dict | None = None,
    allow_redirects: bool = True,
    timeout: int = REQUEST_TIMEOUT,
    label: str = "API",
    log_401_as_info: bool = False,
    error_cls: type[Exception] = ApiError,
) -> ApiResponse:
    """
    Perform a request and return its status, body and cookies.

    HTTP error statuses are logged but not raised; callers decide what a
    usable response is. Timeouts and client errors are raised as error_cls.
    """
    headers = dict(headers or {})
    api_label = f"{label} API"

    if cookies:
        headers["Cookie"] = cookie_header(cookies)

    kwargs = {
        "headers": headers,
        "params": params,
        "allow_redirects": allow_redirects,
    }
    if json_data is not None:
        kwargs["json"] = json_data
    if data is not None:
        kwargs["data"] = data

    try:
        async with async_timeout.timeout(timeout):
            async with session.request(method, url, **kwargs) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    if resp.status == 401 and log_401_as_info:
                        _LOGGER.info("%s error %s: %s", label, resp.status, text)
                    else:
                        _LOGGER.error("%s error %s: %s", label, resp.status, text)
                return ApiResponse(
                    status=resp.status,
                    text=text,
                    cookies=parse_set_cookies(resp.headers),
                )
    except asyncio.TimeoutError as err:
        _LOGGER.error("%s request to %s timed out", api_label, url)
        raise error_cls(f"{api_label} request timed out") from err
    except aiohttp.ClientError as err:
        _LOGGER.error("%s client error: %s", api_label, err)
        raise error_cls(f"{api_label} client error: {err}") from err


def as_number(value, name: str, label: str, cast=int):
    """Coerce a payload field to a number, treating a missing field as 0."""
    if value is None:
        return cast(0)
    if isinstance(value, bool):
        raise ApiError(f"{label} returned a non-numeric {name}: {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError) as err:
        raise ApiError(f"{label} returned a non-numeric {name}: {value!r}") from err


def build_stats(success: int, cancel: int, total: int) -> dict:
    return {"success": success, "cancel": cancel, "total": total}

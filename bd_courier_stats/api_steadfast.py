import aiohttp
import html
import logging
import re
import urllib.parse

from .api_helpers import as_number, build_stats, send_request
from .config import ConfigManager
from .const import CONF_STEADFAST_PASSWORD, CONF_STEADFAST_USER
from .exceptions import ApiError, AuthError
from .phone import validate_phone

_LOGGER = logging.getLogger(__name__)

_TOKEN_INPUT = re.compile(
    r"<input[^>]*name=[\"']_token[\"'][^>]*value=[\"']([^\"']+)[\"']", re.IGNORECASE
)
_TOKEN_META = re.compile(
    r"<meta[^>]*name=[\"']csrf-token[\"'][^>]*content=[\"']([^\"']+)[\"']", re.IGNORECASE
)


def extract_csrf_token(html_text: str) -> str | None:
    """Return the _token hidden input value, else the csrf-token meta value."""
    for pattern in (_TOKEN_INPUT, _TOKEN_META):
        match = pattern.search(html_text or "")
        if match:
            return html.unescape(match.group(1))
    return None


"""
Steadfast has no public stats API, the merchant panel is used instead:
1. GET login page to collect the CSRF token and session cookies
2. POST login form with email, password and token
3. GET the fraud check endpoint with the merged session cookies
"""
class SteadfastApi:
    BASE_URL = "https://steadfast.com.bd"
    LABEL = "Steadfast"
    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )
    ACCEPT = "application/json, text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    ACCEPT_LANGUAGE = "en-US,en;q=0.5"

    def __init__(self, session: aiohttp.ClientSession, config: ConfigManager, token_extractor=None):
        config.validate_required([CONF_STEADFAST_USER, CONF_STEADFAST_PASSWORD])
        self._session = session
        self._config = config
        self._extract_token = token_extractor or extract_csrf_token

    async def request(self, method, path, cookies=None, data=None, headers=None,
                      allow_redirects=True, error_cls=ApiError):
        url = f"{self.BASE_URL}/{path.lstrip('/')}"
        default_headers = {
            "User-Agent": self.USER_AGENT,
            "Accept": self.ACCEPT,
            "Accept-Language": self.ACCEPT_LANGUAGE,
        }
        headers = {**default_headers, **(headers or {})}

        return await send_request(
            self._session,
            method,
            url,
            data=data,
            headers=headers,
            cookies=cookies,
            allow_redirects=allow_redirects,
            label=self.LABEL,
            error_cls=error_cls,
        )

    async def check(self, phone):
        validate_phone(phone)
        cookies = await self.login()
        return await self.fetch_stats(phone, cookies)

    async def login(self) -> dict:
        page = await self.request("GET", "login", allow_redirects=False, error_cls=AuthError)
        if not page.successful:
            raise AuthError(f"Steadfast login page request failed: HTTP {page.status}")

        token = self._extract_token(page.text)
        if not token:
            raise AuthError("CSRF token not found on Steadfast login page")

        cookies = dict(page.cookies)
        form = {
            "_token": token,
            "email": self._config.get(CONF_STEADFAST_USER),
            "password": self._config.get(CONF_STEADFAST_PASSWORD),
        }
        resp = await self.request(
            "POST",
            "login",
            cookies=cookies,
            data=form,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Referer": f"{self.BASE_URL}/login",
                "Origin": self.BASE_URL,
            },
            allow_redirects=False,
            error_cls=AuthError,
        )
        if not (resp.successful or resp.redirect):
            raise AuthError(f"Steadfast login failed: HTTP {resp.status}")

        _LOGGER.debug("Steadfast session established")
        return {**cookies, **resp.cookies}

    async def fetch_stats(self, phone, cookies):
        path = f"user/frauds/check/{urllib.parse.quote(str(phone), safe='')}"
        resp = await self.request("GET", path, cookies=cookies)
        if not resp.successful:
            raise ApiError(f"Steadfast fraud check request failed: HTTP {resp.status}")

        data = resp.json()
        if not isinstance(data, dict):
            raise ApiError("Invalid JSON response from Steadfast API")

        delivered = as_number(data.get("total_delivered"), "total_delivered", self.LABEL)
        cancelled = as_number(data.get("total_cancelled"), "total_cancelled", self.LABEL)
        return build_stats(delivered, cancelled, delivered + cancelled)

"""Tests for the RedX session-token client"""

import aiohttp
import pytest

from bd_courier_stats.api_redx import RedXApi, format_phone_for_api
from bd_courier_stats.config import ConfigManager
from bd_courier_stats.exceptions import ApiError, AuthError, ConfigError
from tests.conftest import FakeResponse

AUTH_URL = "https://api.redx.com.bd/v4/auth/login"
STATS_URL = "https://redx.com.bd/api/redx_se/admin/parcel/customer-success-return-rate"
PHONE = "01786161430"


@pytest.fixture
def api(session, credentials):
    return RedXApi(session, ConfigManager(credentials))


def _stats(delivered, total, pct):
    return {
        "code": 200,
        "data": {"deliveredParcels": delivered, "totalParcels": total, "returnPercentage": pct},
    }


class TestFormatPhoneForApi:

    @pytest.mark.parametrize(
        "raw", ["01786161430", "8801786161430", "+8801786161430", "+88 01786-161430"]
    )
    def test_adds_country_code_once(self, raw):
        assert format_phone_for_api(raw) == "8801786161430"


class TestConstruction:

    def test_missing_password(self, session):
        with pytest.raises(ConfigError, match="redx_password"):
            RedXApi(session, ConfigManager({"redx_user": "01711111111"}))


class TestLogin:

    @pytest.mark.asyncio
    async def test_posts_formatted_username(self, api, session):
        session.add("POST", AUTH_URL, FakeResponse(200, {"data": {"accessToken": "jwt"}}))

        assert await api.login() == "jwt"

        call = session.calls[0]
        assert call["json"] == {"phone": "8801711111111", "password": "redx-secret"}

    @pytest.mark.asyncio
    async def test_surfaces_error_message(self, api, session):
        session.add("POST", AUTH_URL, FakeResponse(401, {"message": "Invalid password"}))
        with pytest.raises(AuthError, match="RedX authentication failed: Invalid password"):
            await api.login()

    @pytest.mark.asyncio
    async def test_empty_response(self, api, session):
        session.add("POST", AUTH_URL, FakeResponse(502, ""))
        with pytest.raises(AuthError, match="No response received"):
            await api.login()

    @pytest.mark.asyncio
    async def test_non_json_response(self, api, session):
        session.add("POST", AUTH_URL, FakeResponse(200, "<html>"))
        with pytest.raises(AuthError, match="No access token received"):
            await api.login()

    @pytest.mark.asyncio
    async def test_connection_error(self, api, session):
        session.add("POST", AUTH_URL, aiohttp.ClientConnectionError("unreachable"))
        with pytest.raises(AuthError, match="unreachable"):
            await api.login()


class TestFetchStats:

    @pytest.mark.asyncio
    async def test_scenario(self, api, session):
        session.add("POST", AUTH_URL, FakeResponse(200, {"data": {"accessToken": "jwt"}}))
        session.add("GET", STATS_URL, FakeResponse(200, _stats(9, 10, 10)))

        result = await api.check(PHONE)

        assert result == {"success": 9, "cancel": 1, "total": 10}
        call = session.calls_to(STATS_URL)[0]
        assert call["params"] == {"phoneNumber": "8801786161430"}
        assert call["headers"]["Authorization"] == "Bearer jwt"

    @pytest.mark.asyncio
    async def test_uses_stored_token(self, api, session):
        session.add("POST", AUTH_URL, FakeResponse(200, {"data": {"accessToken": "stored"}}))
        session.add("GET", STATS_URL, FakeResponse(200, _stats(1, 1, 0)))
        await api.login()
        await api.fetch_stats(PHONE)
        assert session.calls[1]["headers"]["Authorization"] == "Bearer stored"

    @pytest.mark.asyncio
    async def test_requires_token(self, api, session):
        with pytest.raises(AuthError, match=r"call login\(\) first"):
            await api.fetch_stats(PHONE)
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_cancel_is_estimate(self, api, session):
        # 7 * 50% = 3.5 rounds up; total != success + cancel is kept as reported
        session.add("GET", STATS_URL, FakeResponse(200, _stats(5, 7, "50")))
        assert await api.fetch_stats(PHONE, "jwt") == {"success": 5, "cancel": 4, "total": 7}

    @pytest.mark.asyncio
    async def test_error_code(self, api, session):
        session.add("GET", STATS_URL, FakeResponse(200, {"code": 401, "message": "Token expired"}))
        with pytest.raises(ApiError, match="Token expired"):
            await api.fetch_stats(PHONE, "jwt")

    @pytest.mark.asyncio
    async def test_missing_data(self, api, session):
        session.add("GET", STATS_URL, FakeResponse(200, {"code": 200}))
        with pytest.raises(ApiError, match="Invalid response format"):
            await api.fetch_stats(PHONE, "jwt")

    @pytest.mark.asyncio
    async def test_garbage_body(self, api, session):
        session.add("GET", STATS_URL, FakeResponse(200, "not json"))
        with pytest.raises(ApiError, match="Unknown error"):
            await api.fetch_stats(PHONE, "jwt")

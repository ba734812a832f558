"""Tests for the Daraja token provider and STK push client."""

import base64
import json
from datetime import datetime, timezone

import httpx
import pytest

from src.integrations.clients.real_http.mpesa import DarajaPaymentsClient, DarajaTokenProvider
from src.integrations.contracts.interfaces import AccessToken
from src.integrations.contracts.payments import build_stk_request
from src.integrations.errors import AuthError, GatewayError, ProviderTimeoutError, TokenRejectedError
from src.utils.config_loader import MpesaConfig


def _stk_request():
    return build_stk_request(
        short_code="174379",
        passkey="test-passkey",
        phone="254712345678",
        amount=100,
        account_reference="440047",
        description="Jersey",
        callback_url="https://shop.example.com/api/stkpush/callback",
        timestamp=datetime(2025, 3, 14, 9, 30, 5, tzinfo=timezone.utc),
    )


def _token():
    return AccessToken(value="tok-123", expires_at=datetime(2099, 1, 1, tzinfo=timezone.utc))


@pytest.mark.asyncio
async def test_token_request_uses_basic_credential_and_sandbox_url(settings, mock_http):
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return httpx.Response(200, json={"access_token": "tok-123", "expires_in": "3599"})

    provider = DarajaTokenProvider(settings.mpesa, http_client=mock_http(handler))
    token = await provider.get_access_token()

    assert token.value == "tok-123"
    assert len(seen) == 1
    expected = base64.b64encode(b"consumer-key:consumer-secret").decode()
    assert seen[0].headers["Authorization"] == f"Basic {expected}"
    assert seen[0].method == "GET"
    assert seen[0].url.host == "sandbox.safaricom.co.ke"
    assert seen[0].url.path == "/oauth/v1/generate"
    assert seen[0].url.params["grant_type"] == "client_credentials"


def test_production_environment_selects_production_host():
    config = MpesaConfig(environment="production")
    assert config.oauth_url.startswith("https://api.safaricom.co.ke/")
    assert config.stk_push_url == "https://api.safaricom.co.ke/mpesa/stkpush/v1/processrequest"


@pytest.mark.asyncio
async def test_missing_access_token_raises_auth_error(settings, mock_http):
    def handler(request):
        return httpx.Response(200, json={"error": "invalid_client"})

    provider = DarajaTokenProvider(settings.mpesa, http_client=mock_http(handler))
    with pytest.raises(AuthError) as exc:
        await provider.get_access_token()
    assert exc.value.payload == {"error": "invalid_client"}


@pytest.mark.asyncio
async def test_rejected_credentials_raise_auth_error(settings, mock_http):
    def handler(request):
        return httpx.Response(400, json={"errorCode": "400.008.01", "errorMessage": "Invalid Authentication passed"})

    provider = DarajaTokenProvider(settings.mpesa, http_client=mock_http(handler))
    with pytest.raises(AuthError):
        await provider.get_access_token()


@pytest.mark.asyncio
async def test_token_is_cached_until_expiry(settings, clock, mock_http):
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        return httpx.Response(200, json={"access_token": f"tok-{calls['count']}", "expires_in": "3599"})

    provider = DarajaTokenProvider(settings.mpesa, http_client=mock_http(handler), clock=clock)

    first = await provider.get_access_token()
    clock.advance(1200)
    second = await provider.get_access_token()
    assert first.value == second.value == "tok-1"
    assert calls["count"] == 1

    # Within the refresh margin of the stated expiry
    clock.advance(2360)
    third = await provider.get_access_token()
    assert third.value == "tok-2"
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_token_timeout_raises_provider_timeout(settings, mock_http):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    provider = DarajaTokenProvider(settings.mpesa, http_client=mock_http(handler))
    with pytest.raises(ProviderTimeoutError):
        await provider.get_access_token()


@pytest.mark.asyncio
async def test_initiate_posts_bearer_json_and_returns_body_verbatim(settings, mock_http):
    ack = {
        "MerchantRequestID": "29115-34620561-1",
        "CheckoutRequestID": "ws_CO_191220191020363925",
        "ResponseCode": "0",
        "ResponseDescription": "Success. Request accepted for processing",
        "CustomerMessage": "Success. Request accepted for processing",
    }
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=ack)

    client = DarajaPaymentsClient(settings.mpesa, http_client=mock_http(handler))
    result = await client.initiate(_token(), _stk_request())

    assert result == ack
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/mpesa/stkpush/v1/processrequest"
    assert seen[0].headers["Authorization"] == "Bearer tok-123"
    body = json.loads(seen[0].content)
    assert body["Amount"] == 100
    assert body["PartyA"] == "254712345678"


@pytest.mark.asyncio
async def test_initiate_does_not_interpret_response_code(settings, mock_http):
    ack = {"CheckoutRequestID": "ws_CO_1", "ResponseCode": "1", "ResponseDescription": "Rejected"}

    client = DarajaPaymentsClient(settings.mpesa, http_client=mock_http(lambda r: httpx.Response(200, json=ack)))
    assert await client.initiate(_token(), _stk_request()) == ack


@pytest.mark.asyncio
async def test_initiate_non_2xx_raises_gateway_error_with_raw_payload(settings, mock_http):
    error_body = {"requestId": "abc", "errorCode": "400.002.02", "errorMessage": "Bad Request - Invalid PhoneNumber"}

    client = DarajaPaymentsClient(settings.mpesa, http_client=mock_http(lambda r: httpx.Response(400, json=error_body)))
    with pytest.raises(GatewayError) as exc:
        await client.initiate(_token(), _stk_request())
    assert exc.value.payload == error_body


@pytest.mark.asyncio
async def test_initiate_malformed_json_raises_gateway_error(settings, mock_http):
    client = DarajaPaymentsClient(
        settings.mpesa,
        http_client=mock_http(lambda r: httpx.Response(200, text="<html>upstream error</html>")),
    )
    with pytest.raises(GatewayError) as exc:
        await client.initiate(_token(), _stk_request())
    assert exc.value.payload == "<html>upstream error</html>"


@pytest.mark.asyncio
async def test_initiate_transport_failure_raises_gateway_error(settings, mock_http):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = DarajaPaymentsClient(settings.mpesa, http_client=mock_http(handler))
    with pytest.raises(GatewayError):
        await client.initiate(_token(), _stk_request())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,body",
    [
        (401, {"errorCode": "401.003.01", "errorMessage": "Error Occurred - Invalid Access Token"}),
        (404, {"errorCode": "404.001.03", "errorMessage": "Invalid Access Token"}),
    ],
)
async def test_initiate_rejected_token_raises_token_rejected(settings, mock_http, status, body):
    client = DarajaPaymentsClient(settings.mpesa, http_client=mock_http(lambda r: httpx.Response(status, json=body)))

    with pytest.raises(TokenRejectedError) as exc:
        await client.initiate(_token(), _stk_request())
    assert exc.value.payload == body


@pytest.mark.asyncio
async def test_invalidate_forces_a_new_token(settings, clock, mock_http):
    calls = {"count": 0}

    def handler(request):
        calls["count"] += 1
        return httpx.Response(200, json={"access_token": f"tok-{calls['count']}", "expires_in": "3599"})

    provider = DarajaTokenProvider(settings.mpesa, http_client=mock_http(handler), clock=clock)

    assert (await provider.get_access_token()).value == "tok-1"
    provider.invalidate()
    assert (await provider.get_access_token()).value == "tok-2"

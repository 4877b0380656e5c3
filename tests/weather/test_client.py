import httpx
import pytest

from weather_proxy.weather.client import OpenWeatherClient, UpstreamOperation
from weather_proxy.weather.errors import (
    CredentialNotConfigured, ResponseReadFailure, UpstreamError, UpstreamUnreachable
)


@pytest.mark.asyncio
async def test_fetch_builds_geocoding_url(provider):
    provider.respond("/geo/1.0/direct", content=b"[]")

    async with OpenWeatherClient("secret", transport=httpx.MockTransport(provider)) as client:
        body = await client.fetch(UpstreamOperation.GEOCODE, {"q": "São Paulo"})

    assert body == b"[]"
    (request,) = provider.requests
    assert request.url.host == "api.openweathermap.org"
    assert dict(request.url.params) == {"q": "São Paulo", "limit": "5", "appid": "secret"}


@pytest.mark.asyncio
async def test_fetch_adds_forecast_units_and_locale(provider):
    provider.respond("/data/2.5/forecast", content=b"{}")

    async with OpenWeatherClient("secret", transport=httpx.MockTransport(provider)) as client:
        await client.fetch(UpstreamOperation.FORECAST, {"lat": "-6.2", "lon": "106.8"})

    params = dict(provider.requests[0].url.params)
    assert params == {"lat": "-6.2", "lon": "106.8", "units": "metric", "lang": "id", "appid": "secret"}


@pytest.mark.asyncio
async def test_fetch_without_key_makes_no_request(provider):
    async with OpenWeatherClient(None, transport=httpx.MockTransport(provider)) as client:
        with pytest.raises(CredentialNotConfigured):
            await client.fetch(UpstreamOperation.AIR_QUALITY, {"lat": "1", "lon": "2"})

    assert provider.requests == []


@pytest.mark.asyncio
async def test_fetch_connection_failure(provider):
    provider.fail("/data/2.5/air_pollution", httpx.ConnectError("refused"))

    async with OpenWeatherClient("secret", transport=httpx.MockTransport(provider)) as client:
        with pytest.raises(UpstreamUnreachable) as exc_info:
            await client.fetch(UpstreamOperation.AIR_QUALITY, {"lat": "1", "lon": "2"})

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_fetch_non_200_carries_status_and_body(provider):
    provider.respond("/data/2.5/forecast", status_code=401, content=b'{"cod":401,"message":"Invalid API key"}')

    async with OpenWeatherClient("secret", transport=httpx.MockTransport(provider)) as client:
        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch(UpstreamOperation.FORECAST, {"lat": "1", "lon": "2"})

    assert exc_info.value.status_code == 401
    assert exc_info.value.body == '{"cod":401,"message":"Invalid API key"}'
    assert exc_info.value.to_response() == {
        "error": "Error from the weather service",
        "details": '{"cod":401,"message":"Invalid API key"}',
    }


@pytest.mark.asyncio
async def test_fetch_read_failure_on_200(provider):
    provider.break_body("/data/2.5/air_pollution")

    async with OpenWeatherClient("secret", transport=httpx.MockTransport(provider)) as client:
        with pytest.raises(ResponseReadFailure):
            await client.fetch(UpstreamOperation.AIR_QUALITY, {"lat": "1", "lon": "2"})


@pytest.mark.asyncio
@pytest.mark.parametrize("upstream_status", [204, 304])
async def test_fetch_bodiless_status_maps_to_bad_gateway(provider, upstream_status):
    provider.respond("/data/2.5/air_pollution", status_code=upstream_status)

    async with OpenWeatherClient("secret", transport=httpx.MockTransport(provider)) as client:
        with pytest.raises(UpstreamError) as exc_info:
            await client.fetch(UpstreamOperation.AIR_QUALITY, {"lat": "1", "lon": "2"})

    assert exc_info.value.upstream_status == upstream_status
    assert exc_info.value.status_code == 502

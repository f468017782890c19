"""Tests for the reverse geocoder client using a mocked transport."""
import httpx
import pytest

from core.exceptions import ConfigurationError, UpstreamServiceError
from services.geocoder import ReverseGeocoder


def _geocoder(handler, api_key="test-key"):
    return ReverseGeocoder(api_key=api_key, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_returns_first_formatted_address():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={
            "status": "OK",
            "results": [{"formatted_address": "Jalan Ampang, Kuala Lumpur"}, {"formatted_address": "Malaysia"}],
        })

    address = _geocoder(handler).reverse_geocode(3.15, 101.7)

    assert address == "Jalan Ampang, Kuala Lumpur"
    assert seen["params"] == {"latlng": "3.15,101.7", "key": "test-key"}


def test_zero_results_is_an_upstream_error():
    geocoder = _geocoder(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}))

    with pytest.raises(UpstreamServiceError) as exc_info:
        geocoder.reverse_geocode(0, 0)
    assert "ZERO_RESULTS" in exc_info.value.message


def test_transport_failure_is_an_upstream_error():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(UpstreamServiceError):
        _geocoder(handler).reverse_geocode(1, 1)


def test_http_error_status_is_an_upstream_error():
    with pytest.raises(UpstreamServiceError):
        _geocoder(lambda request: httpx.Response(503)).reverse_geocode(1, 1)


def test_missing_api_key_is_a_configuration_error():
    geocoder = _geocoder(lambda request: httpx.Response(200, json={}), api_key="")
    with pytest.raises(ConfigurationError) as exc_info:
        geocoder.reverse_geocode(1, 1)
    assert exc_info.value.status_code == 500

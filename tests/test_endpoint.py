import time
from types import SimpleNamespace

import pytest

from gcmstub.endpoint import make_gcm_endpoint
from gcmstub.gcm import ACK_TOKEN, BasicGcmService, EmptyRegistrationId


@pytest.mark.asyncio
async def test_endpoint_forwards_request():
    endpoint = make_gcm_endpoint(BasicGcmService())
    assert await endpoint(None, "abc123") == ACK_TOKEN


@pytest.mark.asyncio
async def test_endpoint_propagates_failure():
    endpoint = make_gcm_endpoint(BasicGcmService())
    with pytest.raises(EmptyRegistrationId):
        await endpoint(None, "")


@pytest.mark.asyncio
async def test_endpoint_rejects_non_string_request():
    endpoint = make_gcm_endpoint(BasicGcmService())
    with pytest.raises(TypeError):
        await endpoint(None, 42)


@pytest.mark.asyncio
async def test_delay_is_applied_before_send():
    calls = []

    class Recorder:
        def send(self, registration_id):
            calls.append(time.monotonic())
            return ACK_TOKEN

    endpoint = make_gcm_endpoint(Recorder(), delay=50)
    start = time.monotonic()
    assert await endpoint(None, "abc123") == ACK_TOKEN
    assert calls[0] - start >= 0.049


@pytest.mark.asyncio
async def test_no_delay_by_default(monkeypatch):
    async def fail_sleep(_):
        raise AssertionError("sleep must not be called without a delay")

    monkeypatch.setattr("gcmstub.endpoint.asyncio", SimpleNamespace(sleep=fail_sleep))
    endpoint = make_gcm_endpoint(BasicGcmService(), delay=0)
    assert await endpoint(None, "abc123") == ACK_TOKEN


def test_negative_delay_is_rejected():
    with pytest.raises(ValueError):
        make_gcm_endpoint(BasicGcmService(), delay=-1)

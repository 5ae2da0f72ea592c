# endpoint.py
import asyncio
from typing import Any, Awaitable, Callable

from .gcm import GcmService

# (ctx, request) -> response, errors are raised
Endpoint = Callable[[Any, Any], Awaitable[Any]]


def make_gcm_endpoint(svc: GcmService, delay: int = 0) -> Endpoint:
    """Expose svc.send as an endpoint, sleeping `delay` milliseconds first."""
    if delay < 0:
        raise ValueError(f"delay must be >= 0, got {delay}")

    async def gcm_endpoint(ctx, request):
        if delay:
            # ctx is not consulted, the simulated delay always runs to the end
            await asyncio.sleep(delay / 1000)
        if not isinstance(request, str):
            raise TypeError(f"expected a registration id string, got {type(request).__name__}")
        return svc.send(request)

    return gcm_endpoint

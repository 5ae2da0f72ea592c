# middleware.py
import time
from typing import Callable

from .gcm import GcmService

Middleware = Callable[[GcmService], GcmService]


class LoggingMiddleware:
    """Logs one record per send() call and returns the wrapped result as is."""

    def __init__(self, svc: GcmService, logger):
        self.svc = svc
        self.logger = logger

    def send(self, registration_id: str) -> str:
        output = ""
        err = None
        begin = time.perf_counter()
        try:
            output = self.svc.send(registration_id)
            return output
        except Exception as exc:
            err = str(exc)
            raise
        finally:
            self.logger.info(
                "send",
                method="send",
                input=registration_id,
                output=output,
                err=err,
                took=time.perf_counter() - begin,
            )


def logging_middleware(logger) -> Middleware:
    def middleware(svc: GcmService) -> GcmService:
        return LoggingMiddleware(svc, logger)
    return middleware


def wrap(svc: GcmService, *middlewares: Middleware) -> GcmService:
    """Apply middlewares in order; the last one ends up outermost."""
    for middleware in middlewares:
        svc = middleware(svc)
    return svc

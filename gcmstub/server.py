# server.py
import asyncio
import functools

from . import config
from .endpoint import make_gcm_endpoint
from .gcm import BasicGcmService, GcmService
from .logs import new_logger, redirect_stdlib
from .middleware import logging_middleware, wrap
from .supervisor import Supervisor, interrupt, listen
from .transport import GCM_SEND_PATH, Server, decode_gcm_request, encode_response, make_app


def build_service(logger) -> GcmService:
    return wrap(BasicGcmService(), logging_middleware(logger))


def build_app(svc: GcmService, delay: int, logger):
    gcm = make_gcm_endpoint(svc, delay)
    routes = {
        GCM_SEND_PATH: Server(gcm, decode_gcm_request, encode_response, logger),
    }
    return make_app(routes, logger)


async def serve(settings: config.Settings, logger) -> Exception:
    app = build_app(build_service(logger), settings.delay, logger)
    supervisor = Supervisor(
        logger,
        interrupt,
        functools.partial(listen, app, settings.bind, settings.port, logger),
    )
    return await supervisor.run()


def main(argv=None):
    settings = config.parse_args(argv)
    logger = new_logger()
    redirect_stdlib(logger)
    asyncio.run(serve(settings, logger))


if __name__ == "__main__":
    main()

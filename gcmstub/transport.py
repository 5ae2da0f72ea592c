# transport.py
import json

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import PlainTextResponse, Response
from starlette.requests import ClientDisconnect

from .endpoint import Endpoint

GCM_SEND_PATH = "/gcm/send"


class DecodeError(Exception):
    """The request body could not be turned into an endpoint request."""

    status_code = 400


async def decode_gcm_request(request: Request) -> str:
    try:
        body = await request.body()
        return body.decode("utf-8")
    except (ClientDisconnect, UnicodeDecodeError) as exc:
        raise DecodeError(f"cannot read request body: {exc!r}") from exc


def encode_response(response) -> Response:
    # strings go out verbatim, everything else as key-ordered JSON
    if isinstance(response, str):
        return PlainTextResponse(response)
    body = json.dumps(jsonable_encoder(response), sort_keys=True) + "\n"
    return Response(content=body, media_type="application/json")


def encode_error(exc: Exception) -> Response:
    status_code = getattr(exc, "status_code", 500)
    body = json.dumps({"error": str(exc)}, sort_keys=True) + "\n"
    return Response(content=body, status_code=status_code, media_type="application/json")


class Server:
    """Binds one endpoint to HTTP: decode the request, call, encode the result."""

    def __init__(self, endpoint: Endpoint, decode, encode, logger, error_encoder=encode_error):
        self.endpoint = endpoint
        self.decode = decode
        self.encode = encode
        self.error_encoder = error_encoder
        self.logger = logger

    async def serve(self, request: Request):
        try:
            decoded = await self.decode(request)
        except Exception as exc:
            self.logger.warning("transport_error", stage="decode", path=request.url.path, err=str(exc))
            return self.error_encoder(exc)

        try:
            response = await self.endpoint(request, decoded)
        except Exception as exc:
            self.logger.warning("transport_error", stage="endpoint", path=request.url.path, err=str(exc))
            return self.error_encoder(exc)

        return self.encode(response)


def make_app(routes: dict, logger) -> FastAPI:
    """Build the HTTP app from a {path: Server} table, all bound to POST."""
    app = FastAPI()
    for path, server in routes.items():
        app.add_api_route(path, server.serve, methods=["POST"], response_model=None)
    logger.debug("routes", paths=",".join(routes))
    return app

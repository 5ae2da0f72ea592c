# client.py
import argparse
import asyncio
import time

import httpx

from .logs import new_logger

URL = "http://localhost:8081/gcm/send"


async def send_one(client: httpx.AsyncClient, url: str, registration_id: str):
    """POST one registration id, return (status_code, body, elapsed seconds)."""
    start = time.perf_counter()
    resp = await client.post(url, content=registration_id.encode("utf-8"), timeout=100)
    return resp.status_code, resp.text, time.perf_counter() - start


async def make_request(i, client, url, registration_id, logger):
    try:
        status, body, elapsed = await send_one(client, url, registration_id)
        logger.info("reply", client=i, status=status, body=body.strip(), took=round(elapsed, 4))
    except httpx.HTTPError as e:
        logger.error("reply", client=i, err=repr(e))


async def request_loop(url=URL, registration_id="abc123", rate_per_sec=5.0, count=0, logger=None, transport=None):
    """Send requests at a fixed rate, `count` of them (0 means forever)."""
    if rate_per_sec <= 0:
        raise ValueError(f"rate must be > 0, got {rate_per_sec}")
    logger = logger if logger is not None else new_logger()
    interval = 1.0 / rate_per_sec
    pending = set()
    i = 0
    async with httpx.AsyncClient(transport=transport) as client:
        while count == 0 or i < count:
            task = asyncio.create_task(make_request(i, client, url, registration_id, logger))
            pending.add(task)
            task.add_done_callback(pending.discard)
            i += 1
            await asyncio.sleep(interval)
        if pending:
            await asyncio.gather(*pending)
    return i


def _positive(value: str) -> float:
    rate = float(value)
    if rate <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {rate}")
    return rate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gcmstub-load", description="Fire requests at a gcmstub server")
    parser.add_argument("--url", default=URL)
    parser.add_argument("--rate", type=_positive, default=5.0, help="requests per second")
    parser.add_argument("--count", type=int, default=0, help="stop after this many requests (0 = never)")
    parser.add_argument("--id", dest="registration_id", default="abc123", help="registration id to send")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(request_loop(args.url, args.registration_id, args.rate, args.count))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

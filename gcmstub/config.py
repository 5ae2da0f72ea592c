# config.py
import argparse
from dataclasses import dataclass

DEFAULT_PORT = 8081
DEFAULT_BIND = "0.0.0.0"


@dataclass
class Settings:
    port: int = DEFAULT_PORT
    bind: str = DEFAULT_BIND
    delay: int = 0  # milliseconds


def _non_negative(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gcmstub-server", description="Stub GCM send server")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Server port")
    parser.add_argument("--bind", default=DEFAULT_BIND, help="Bind address")
    parser.add_argument(
        "--delay",
        type=_non_negative,
        default=0,
        help="Simulate some delay (in milliseconds) before sending a response",
    )
    return parser


def parse_args(argv=None) -> Settings:
    args = build_parser().parse_args(argv)
    return Settings(port=args.port, bind=args.bind, delay=args.delay)

"""ravenpost command line: send a test event or run the dev ingestion server."""

import argparse
import asyncio
import logging
import sys

from .client import RavenClient
from .errors import DsnError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="ravenpost", description="Send events to a Sentry-compatible endpoint")
    sub = p.add_subparsers(dest="command", required=True)

    test = sub.add_parser("test", help="Send a test message and print its event id")
    test.add_argument("--dsn", required=True, help="Project DSN")
    test.add_argument("--message", default="This is a test message generated by ravenpost")
    test.add_argument("--no-compression", action="store_true", help="Send the body uncompressed")
    test.add_argument("--timeout", type=float, default=5.0, help="Request timeout in seconds")

    serve = sub.add_parser("serve", help="Run the local development ingestion server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=9000)
    return p.parse_args(argv)


async def send_test(args: argparse.Namespace) -> int:
    client = RavenClient(args.dsn, compression=not args.no_compression, timeout=args.timeout)
    print(f"Sending test message to {client.dsn.store_uri}...")
    event_id = await client.capture_message(args.message)
    if event_id is None:
        print("Failed to send test message")
        return 1
    print(f"Event id: {event_id}")
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    args = parse_args(argv)

    if args.command == "serve":
        import uvicorn

        from .devserver import app

        uvicorn.run(app, host=args.host, port=args.port)
        return 0

    try:
        return asyncio.run(send_test(args))
    except DsnError as e:
        logging.error(f"Invalid DSN: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())

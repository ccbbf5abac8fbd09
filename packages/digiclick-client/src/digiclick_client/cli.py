"""
digiclick-client: issue a single request against the DigiClick API.

Usage:
    digiclick-client health
    digiclick-client request /api/services --cache
    digiclick-client request /api/contact --method POST --data '{"name": "Ada", ...}'
    digiclick-client --api-url https://api.example.com request /api/admin/demos --token TOKEN
"""

import argparse
import asyncio
import json
import sys

from digiclick_client.client import ResilientFetchClient
from digiclick_client.config import Settings, configure_logging, get_settings
from digiclick_client.endpoints import DigiClickApi, bearer
from digiclick_client.schemas.result import ApiResult


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="digiclick-client",
        description="Send a request to the DigiClick API with rate limiting, caching and retries",
    )
    parser.add_argument("--api-url", help="Override DIGICLICK_API_URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check backend health")

    req = subparsers.add_parser("request", help="Send an arbitrary request")
    req.add_argument("endpoint", help="Path appended to the API URL, e.g. /api/services")
    req.add_argument("--method", "-X", default="GET")
    req.add_argument("--data", "-d", help="JSON request body")
    req.add_argument("--token", help="Bearer token for authenticated endpoints")
    req.add_argument("--cache", action="store_true", help="Allow serving from cache (GET only)")
    req.add_argument("--retries", type=int, help="Retries after the first attempt")
    req.add_argument("--timeout", type=float, help="Per-attempt timeout in seconds")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    if args.api_url:
        settings = settings.model_copy(update={"api_url": args.api_url})
    if args.verbose:
        settings = settings.model_copy(update={"environment": "development"})
    return settings


async def run(args: argparse.Namespace, settings: Settings) -> ApiResult:
    async with ResilientFetchClient(settings) as client:
        if args.command == "health":
            return await DigiClickApi(client).get_health_status()

        body = json.loads(args.data) if args.data else None
        return await client.request(
            args.endpoint,
            method=args.method,
            json=body,
            headers=bearer(args.token) if args.token else None,
            cache=args.cache,
            retries=args.retries,
            timeout=args.timeout,
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = _settings_from_args(args)
    configure_logging(settings)

    if getattr(args, "data", None):
        try:
            json.loads(args.data)
        except json.JSONDecodeError as exc:
            parser.error(f"--data is not valid JSON: {exc}")

    result = asyncio.run(run(args, settings))
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point for resolving and calling described resources."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any, List, Optional

from .client import build_client
from .config import Settings, get_settings
from .errors import ResourceClientError
from .logging import configure_logging
from .resources import ResourceDescriptor
from .urls import resolve_resource_url


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openapi-resources",
        description="Resolve resource URLs and read resources from the configured backend",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("url", "Print the URL of a resource collection or instance"),
        ("get", "Read a resource instance and print the response body"),
        ("list", "List a resource collection and print the response body"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("--path", required=True, help="Resource path, e.g. /v1/cdns/{id}/firewalls")
        command.add_argument(
            "--parent-id",
            action="append",
            default=[],
            dest="parent_ids",
            help="Parent resource id, repeat once per path parameter",
        )
        command.add_argument("--host", default=None, help="Override the backend host for this resource")
        if name != "list":
            command.add_argument("--id", default=None, dest="instance_id", help="Resource instance id")
    return parser


async def _run(settings: Settings, args: argparse.Namespace) -> Any:
    resource = ResourceDescriptor(name="cli", path=args.path, host=args.host)
    client = build_client(settings)

    if args.command == "url":
        return resolve_resource_url(
            resource,
            client.backend,
            parent_ids=args.parent_ids,
            instance_id=args.instance_id,
            region=client.provider_configuration.region,
        )

    if args.command == "list":
        response = await client.list(resource, parent_ids=args.parent_ids)
    else:
        response = await client.get(resource, args.instance_id or "", parent_ids=args.parent_ids)
    return response.json() if response.content else None


def main(argv: Optional[List[str]] = None) -> None:
    args = _parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.client_log_level)

    try:
        result = asyncio.run(_run(settings, args))
    except ResourceClientError as exc:
        raise SystemExit(str(exc)) from exc

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Linode Commander

Terminal UI for inspecting and controlling Linode instances.

Usage:
    lc              Launch interactive TUI
    lc --once       Print instances once and exit (no TUI)
    lc --json       Print instances as JSON and exit

Requires LINODE_TOKEN in the environment.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping, Sequence

from commander.config import Settings, build_parser
from commander.errors import CommanderError, ConfigError
from commander.linode_provider import LinodeProvider
from commander.providers import InstanceStatus, ResourceProvider

logger = logging.getLogger("commander")

STATUS_ICONS = {
    InstanceStatus.RUNNING: "▶",
    InstanceStatus.OFFLINE: "✗",
    InstanceStatus.BOOTING: "↑",
    InstanceStatus.SHUTTING_DOWN: "↓",
    InstanceStatus.OTHER: "·",
}


def configure_logging(settings: Settings) -> None:
    """Log to a file; the terminal belongs to the TUI."""
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(settings.log_file),
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_status_once(provider: ResourceProvider) -> int:
    """Print an instance summary and exit."""
    instances = provider.list_instances()
    if not instances:
        print("No instances found.")
        return 0

    print(f"Instances: {len(instances)}")
    print()
    for instance in instances:
        icon = STATUS_ICONS.get(instance.status, "·")
        ips = ", ".join(instance.ipv4) or "-"
        print(
            f"  {icon} {instance.label:<24} {instance.status.value:<14} "
            f"{instance.type:<18} {instance.region:<12} {ips}"
        )

    counts: dict[str, int] = {}
    for instance in instances:
        counts[instance.status.value] = counts.get(instance.status.value, 0) + 1
    print()
    print("Status breakdown:")
    for status, count in sorted(counts.items()):
        print(f"  {status}: {count}")
    return 0


def print_status_json(provider: ResourceProvider) -> int:
    """Print instances as JSON and exit."""
    output = {
        "instances": [
            {
                "id": i.id,
                "label": i.label,
                "status": i.status.value,
                "type": i.type,
                "region": i.region,
                "ipv4": list(i.ipv4),
            }
            for i in provider.list_instances()
        ],
    }
    print(json.dumps(output, indent=2))
    return 0


def main(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_args(args, environ)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 1

    configure_logging(settings)

    with LinodeProvider(token=settings.token, api_url=settings.api_url) as provider:
        try:
            if args.json:
                return print_status_json(provider)
            if args.once:
                return print_status_once(provider)
        except CommanderError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        from commander.app import run

        try:
            return run(provider, settings)
        except Exception:
            logger.exception("Commander crashed")
            raise


if __name__ == "__main__":
    sys.exit(main())

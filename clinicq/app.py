from __future__ import annotations

# Single-entrypoint runner.
#
# CLI:
# - Patients run:
#     python -m clinicq.app watch --name NAME [--join]
# - The waiting-room screen runs:
#     python -m clinicq.app monitor
# - Front desk / demo helpers:
#     python -m clinicq.app add NAME | advance | status [--set available|unavailable | --toggle]
#
# The service origin comes from --api-base-url, then CLINICQ_API_BASE_URL
# (environment or .env), then http://localhost:3001.

import argparse
import logging
import sys

from .config import API_BASE_URL_ENV, load_env_file, resolve_base_url
from .endpoints import DEFAULT_BASE_URL


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="ClinicQ patient queue client - main entrypoint")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def add_service_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--api-base-url",
            default=None,
            help=f"service origin (default: ${API_BASE_URL_ENV} or {DEFAULT_BASE_URL})",
        )
        p.add_argument("--timeout", type=float, default=5.0, help="REST request timeout in seconds")
        p.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    # ---- Normal operation ----
    p_watch = sub.add_parser("watch", help="Follow the queue and get alerted when it is your turn")
    add_service_args(p_watch)
    p_watch.add_argument("--name", required=True, help="name to be notified for")
    p_watch.add_argument("--join", action="store_true", help="also add this name to the queue")
    p_watch.add_argument("--no-sound", action="store_true", help="do not play the alert sound")
    p_watch.add_argument("--no-desktop", action="store_true", help="do not post desktop notifications")

    p_mon = sub.add_parser("monitor", help="Show the next patient and the waiting list")
    add_service_args(p_mon)

    # ---- Front desk / demo ----
    p_add = sub.add_parser("add", help="Add a patient to the queue")
    add_service_args(p_add)
    p_add.add_argument("name")

    p_adv = sub.add_parser("advance", help="Serve the current head of the queue")
    add_service_args(p_adv)

    p_status = sub.add_parser("status", help="Show or change doctor availability")
    add_service_args(p_status)
    group = p_status.add_mutually_exclusive_group()
    group.add_argument("--set", dest="set_status", choices=("available", "unavailable"))
    group.add_argument("--toggle", action="store_true", help="flip the current availability (demo)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_env_file()
    base_url = resolve_base_url(args.api_base_url)

    if args.cmd == "watch":
        from .session import run_watch

        run_watch(
            base_url=base_url,
            name=args.name,
            join=args.join,
            sound=not args.no_sound,
            desktop=not args.no_desktop,
            timeout=args.timeout,
        )
        return

    if args.cmd == "monitor":
        from .monitor import run_monitor

        run_monitor(base_url=base_url, timeout=args.timeout)
        return

    from .actions import run_action

    if args.cmd == "add":
        code = run_action(base_url=base_url, action="add", name=args.name, timeout=args.timeout)
    elif args.cmd == "advance":
        code = run_action(base_url=base_url, action="advance", timeout=args.timeout)
    elif args.toggle:
        code = run_action(base_url=base_url, action="toggle", timeout=args.timeout)
    else:
        available = None if args.set_status is None else args.set_status == "available"
        code = run_action(base_url=base_url, action="status", available=available, timeout=args.timeout)
    sys.exit(code)


if __name__ == "__main__":
    main()

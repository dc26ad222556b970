#!/usr/bin/env python3
"""Watch a Signal K delta stream from the command line.

Connects to a server, optionally subscribes to a set of paths and prints
every value update as it lands in the value store.  Useful to check what
a server actually publishes and how often.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pysignalk import (  # noqa: E402
    ConnectionState,
    SignalKClient,
    SignalKConfig,
    SubscriptionRequest,
    ValueUpdate,
)

_LOG = logging.getLogger("stream_probe")


@dataclass
class ProbeStats:
    started_at: float
    total_updates: int = 0
    paths: set[str] = field(default_factory=set)
    last_update_at: float | None = None


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print value updates from a Signal K delta stream.")
    parser.add_argument("host", help="Server host name or address.")
    parser.add_argument("port", type=int, nargs="?", default=3000, help="Server port (default 3000).")
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Subscribe to this path (repeatable). Implies subscribe=none on connect.",
    )
    parser.add_argument(
        "--period",
        type=float,
        default=None,
        help="Requested update period in seconds for --path subscriptions.",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument("--tls", action="store_true", default=None, help="Force wss/https.")
    parser.add_argument("--relative", action="store_true", help="Print context-stripped paths.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs.")
    return parser.parse_args()


def _print_summary(stats: ProbeStats) -> None:
    runtime = time.time() - stats.started_at
    print("[probe] Summary")
    print(f"[probe]   runtime_s      : {runtime:.1f}")
    print(f"[probe]   total_updates  : {stats.total_updates}")
    print(f"[probe]   distinct_paths : {len(stats.paths)}")


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {}
    if args.path:
        overrides["subscribe_all_on_connect"] = False
    if args.tls:
        overrides["use_tls"] = True
    config = SignalKConfig.from_env(**overrides)

    stats = ProbeStats(started_at=time.time())
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop.set)

    async with SignalKClient(config) as client:

        def on_update(update: ValueUpdate) -> None:
            stats.total_updates += 1
            stats.last_update_at = time.time()
            stats.paths.add(update.relative_path)
            path = update.relative_path if args.relative else update.absolute_path
            print(f"[probe] {path} = {update.value!r}")

        def on_state(state: ConnectionState) -> None:
            print(f"[probe] state={state.value}")
            if state is ConnectionState.ERROR:
                print(f"[probe] error: {client.connection.last_error}", file=sys.stderr)
                stop.set()
            elif state is ConnectionState.DISCONNECTED:
                stop.set()

        client.store.add_listener(on_update)
        client.connection.add_state_listener(on_state)

        url = await client.connect(args.host, args.port)
        print(f"[probe] Connecting to {url}")
        if args.path:
            _LOG.debug("Subscribing to %s", args.path)
            await client.subscribe(SubscriptionRequest(path=p, period=args.period) for p in args.path)

        timeout = args.duration if args.duration > 0 else None
        try:
            await asyncio.wait_for(stop.wait(), timeout=timeout)
        except TimeoutError:
            print(f"[probe] Reached --duration={args.duration}s, stopping.")

        failed = client.state is ConnectionState.ERROR

    _print_summary(stats)
    return 2 if failed else 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(_main())

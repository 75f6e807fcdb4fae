"""Live feed printer — one JSON line per client event.

Requires iRacing running on the same machine.  Press Ctrl+C to quit.

Usage:
    uv run python scripts/stream_feed.py
    uv run python scripts/stream_feed.py --vars Speed,RPM,Gear
    uv run python scripts/stream_feed.py --no-telemetry      # session/lifecycle events only
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time

from dotenv import load_dotenv

load_dotenv()

from iracing_feed.client.options import ClientOptions  # noqa: E402
from iracing_feed.client.poller import SessionUpdate, TelemetryClient  # noqa: E402


def _print_event(event: str, payload: object = None) -> None:
    record: dict = {"event": event, "ts": round(time.time(), 3)}
    if isinstance(payload, SessionUpdate):
        record["data"] = payload.to_dict()
    elif isinstance(payload, Exception):
        record["data"] = repr(payload)
    elif payload is not None:
        record["data"] = payload
    print(json.dumps(record, default=str), flush=True)


def main() -> None:
    ap = argparse.ArgumentParser(description="Print the iRacing feed as JSON lines")
    ap.add_argument("--vars", default=None, help="Comma-separated telemetry variables (default: all)")
    ap.add_argument("--no-telemetry", action="store_true", help="Suppress telemetry events")
    ap.add_argument("--interval", type=float, default=None, help="Poll interval in ms")
    ap.add_argument("--wait", type=float, default=None, help="Per-tick data wait timeout in ms")
    args = ap.parse_args()

    logging.basicConfig(
        level=os.environ.get("IRACING_FEED_LOG_LEVEL", "INFO").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict = {}
    if args.interval is not None:
        overrides["poll_interval_ms"] = args.interval
    if args.wait is not None:
        overrides["wait_timeout_ms"] = args.wait
    if args.no_telemetry:
        overrides["telemetry_variables"] = []
    elif args.vars:
        overrides["telemetry_variables"] = [v.strip() for v in args.vars.split(",") if v.strip()]

    client = TelemetryClient(options=ClientOptions.from_env(**overrides))
    client.on("connect", lambda: _print_event("connect"))
    client.on("disconnect", lambda: _print_event("disconnect"))
    client.on("session", lambda update: _print_event("session", update))
    client.on("telemetry", lambda frame: _print_event("telemetry", frame))
    client.on("error", lambda exc: _print_event("error", exc))

    client.start()
    print("Waiting for iRacing... Press Ctrl+C to stop.", file=sys.stderr, flush=True)
    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        client.stop()


if __name__ == "__main__":
    main()

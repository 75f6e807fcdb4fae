"""Parse a saved iRacing session-info text file and print it as JSON.

Usage:
    uv run python scripts/dump_session.py session_info.yaml
    uv run python scripts/dump_session.py session_info.yaml --key DriverInfo
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from iracing_feed.session.parser import parse_session_info


def main() -> None:
    ap = argparse.ArgumentParser(description="Convert iRacing session-info text to JSON")
    ap.add_argument("path", help="Session-info text file (as written by the sim)")
    ap.add_argument("--key", default="", help="Only print this top-level section")
    ap.add_argument("--encoding", default="cp1252", help="File encoding")
    args = ap.parse_args()

    text = Path(args.path).read_text(encoding=args.encoding)
    tree = parse_session_info(text)

    if args.key:
        if args.key not in tree:
            print(f"Section {args.key!r} not found. Available: {', '.join(tree)}", file=sys.stderr)
            sys.exit(1)
        tree = tree[args.key]

    json.dump(tree, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
# PURPOSE: Command-line interface to run the proposal engine on a local JSON file.
# CONTEXT: Lets you try every router action without deploying the Lambda.
# CREDITS: Original work — no reused or adapted external code.

import argparse
import json
import sys

from proposal_engine.logging_setup import configure_logging
from proposal_engine.proposal_io import error_to_string
from proposal_engine.router import DEFAULT_ACTION, route

log = configure_logging()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Build an investment proposal from a JSON request.")
    parser.add_argument("path", help="request JSON file ('-' for stdin)")
    parser.add_argument("--action", default=None,
                        help=f"router action (default: the file's 'action' or {DEFAULT_ACTION})")
    parser.add_argument("--markdown", action="store_true",
                        help="print only the Markdown document (proposal action)")
    args = parser.parse_args(argv)

    # Read the request from a file or stdin.
    with (sys.stdin if args.path == "-" else open(args.path, encoding="utf-8")) as fh:
        payload = json.load(fh)
    if args.action:
        payload["action"] = args.action

    try:
        out = route(payload)
    except Exception as e:
        log.error("cli.failed", error=error_to_string(e))
        print(error_to_string(e), file=sys.stderr)
        return 1

    if args.markdown and "document" in out:
        print(out["document"])
    else:
        print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

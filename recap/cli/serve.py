from __future__ import annotations

import argparse
import sys
from typing import Sequence

import uvicorn
from dotenv import load_dotenv

from recap.config import load_config
from recap.logging import setup_logging
from recap.server.app import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the recap HTTP API.")
    parser.add_argument("--host", default=None, help="Bind address (defaults to HOST).")
    parser.add_argument("--port", type=int, default=None, help="Bind port (defaults to PORT).")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    load_dotenv()
    config = load_config()
    setup_logging(config.log_level)
    try:
        app = create_app(config)
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    uvicorn.run(
        app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

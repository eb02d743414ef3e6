#!/usr/bin/env python
"""
Serve the Postly backend with uvicorn.

Usage:
    python run_api.py
    python run_api.py --reload                 # Development mode
    python run_api.py --port 9000 --log-level debug

Host, port and log level default to the HOST, PORT and LOG_LEVEL settings.
"""

import argparse
import uvicorn

from shared.config import get_settings

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Postly backend")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--host", type=str, help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = get_settings()

    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=args.log_level or settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

"""
BossRush Backend Entry Point

Usage:
    python -m bossrush

Or with custom host/port:
    python -m bossrush --host 127.0.0.1 --port 9000 --reload

Defaults come from the environment (BACKEND_HOST, BACKEND_PORT, LOG_LEVEL).
"""

import argparse
import logging
import sys

import uvicorn

from bossrush.config import settings

logger = logging.getLogger("bossrush")


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="bossrush",
        description="BossRush API server",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--host", type=str, default=settings.backend_host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.backend_port, help="Port to bind to")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Logging level",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        uvicorn.run(
            "bossrush.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level,
        )
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())

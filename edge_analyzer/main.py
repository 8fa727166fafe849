"""Main entry point for the Edge analyzer MCP server."""

import atexit
import logging
import os
import signal
import sys

from .config import LOG_LEVEL_ENV
from .tools import analyzer, mcp


def _cleanup():
    """Drop cached documents on exit."""
    analyzer.invalidate_all()


def _signal_handler(signum, frame):
    """Handle termination signals gracefully."""
    _cleanup()
    sys.exit(0)


# Register cleanup handlers
atexit.register(_cleanup)
signal.signal(signal.SIGTERM, _signal_handler)
signal.signal(signal.SIGINT, _signal_handler)


def _configure_logging():
    # stdout carries the MCP protocol, so logs go to stderr
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """Main entry point."""
    _configure_logging()
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

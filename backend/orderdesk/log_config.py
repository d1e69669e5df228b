"""
Order Desk Backend - Logging Configuration
============================================

What:  Configures the standard-library root logger for the process.
Who:   The app lifespan (orderdesk.main) and the diagnostics CLI.
When:  Once, before anything else logs.

Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
(container platforms collect stdout).
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-call chatter from the HTTP and Google client libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)

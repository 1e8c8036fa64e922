"""Command line entry point (`python -m soundpoint`)."""

import asyncio
import sys

from .app import run
from .config import load_settings
from .errors import ConfigurationError, log_error
from .logs.logger import logger


def main() -> int:
    # Simple health check mode: validate settings and exit
    if len(sys.argv) > 1 and sys.argv[1] == "--health-check":
        logger.log_event("app", "health_check")
        try:
            settings = load_settings()
        except ConfigurationError as e:
            log_error("Health check failed", e)
            return 1
        logger.log_event(
            "app", "health_check_passed", sounds=len(settings.audio.references)
        )
        return 0

    settings_file = sys.argv[1] if len(sys.argv) > 1 else None
    logger.log_event("app", "starting")
    try:
        return asyncio.run(run(settings_file))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted")
        return 0


if __name__ == "__main__":
    sys.exit(main())

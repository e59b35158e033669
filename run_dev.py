# run_dev.py
"""
Launcher for the gateway.
Refuses to start without GEMINI_STIMULI_KEY; on SIGINT/SIGTERM uvicorn stops
accepting connections and gives in-flight requests SHUTDOWN_GRACE_SECONDS.
"""

import sys

import uvicorn
from pydantic import ValidationError

from src.logging_config import get_logger
from src.settings import get_settings

logger = get_logger("run_dev")


def main() -> int:
    try:
        settings = get_settings()
    except ValidationError as e:
        if any(err.get("loc", ("",))[0] == "GEMINI_STIMULI_KEY" for err in e.errors()):
            logger.error("FATAL ERROR: GEMINI_STIMULI_KEY environment variable is not set. Server cannot start.")
        else:
            logger.error("FATAL ERROR: invalid configuration: %s", e)
        return 1

    from src.app import create_app

    try:
        app = create_app(settings)
    except Exception:
        logger.exception("FATAL ERROR: AI client initialization failed. Server cannot start.")
        return 1

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

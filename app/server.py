# =============================================================================
# app/server.py - Server Entry Point
# =============================================================================
# Validates configuration, configures logging and runs uvicorn.
#
# Usage:
#   python -m app.server
#
# uvicorn owns SIGINT/SIGTERM. The signal it received is recorded on the
# lifecycle handler so the shutdown log names it.
# =============================================================================

import logging
import signal
import sys

import uvicorn
from dotenv import load_dotenv

from app.config import Settings, load_settings
from app.logging_config import configure_logging
from core.lifecycle import LifecycleHandler, install_process_hooks

logger = logging.getLogger(__name__)


class LifecycleServer(uvicorn.Server):
    """uvicorn Server that reports exit signals to the lifecycle handler."""

    def __init__(self, config: uvicorn.Config, lifecycle: LifecycleHandler):
        super().__init__(config)
        self.lifecycle = lifecycle

    def handle_exit(self, sig: int, frame) -> None:
        try:
            name = signal.Signals(sig).name
        except ValueError:
            name = str(sig)
        self.lifecycle.record_signal(name)
        super().handle_exit(sig, frame)


def run(settings: Settings) -> None:
    from app.main import create_app

    app = create_app(settings)
    lifecycle: LifecycleHandler = app.state.lifecycle
    install_process_hooks(lifecycle)

    config = uvicorn.Config(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL,
        log_config=None,
    )

    display_host = "localhost" if settings.API_HOST == "0.0.0.0" else settings.API_HOST
    logger.info(f"Server running in {settings.ENVIRONMENT} mode")
    logger.info(f"API docs available at http://{display_host}:{settings.API_PORT}/docs")

    server = LifecycleServer(config, lifecycle)
    server.run()

    if not server.started:
        raise RuntimeError("Server failed to start")


def main() -> None:
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)

    try:
        run(settings)
    except Exception:
        logger.critical("Fatal error during bootstrap", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

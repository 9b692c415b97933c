# =============================================================================
# core/lifecycle.py - Service Lifecycle Coordinator
# =============================================================================
# Coordinates startup and graceful shutdown of the process's services
# (database, rate limit store, ...):
# - register(): services start in registration order, stop in reverse
# - startup(): start each service; on failure stop what started and re-raise
# - shutdown(signal): stop each started service with a time budget; a failing
#   service is logged and the next one still runs
# - is_alive() / is_ready() / are_all_services_healthy(): health state
#
# Service callables may be plain functions or coroutines.
#
# Usage:
#   lifecycle = LifecycleHandler(stop_timeout=10)
#   lifecycle.register([
#       LifecycleService("database", start=db.connect, stop=db.disconnect, check=db.ping),
#   ])
#   await lifecycle.startup()
#   ...
#   await lifecycle.shutdown("SIGTERM")
# =============================================================================

from __future__ import annotations

import asyncio
import atexit
import inspect
import logging
import sys
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

ServiceCallable = Callable[[], Any]


@dataclass
class LifecycleService:
    """
    A named unit with optional start, stop and health check hooks.

    `check` should return a truthy value when the service is healthy.
    """
    name: str
    start: ServiceCallable | None = None
    stop: ServiceCallable | None = None
    check: ServiceCallable | None = None


async def _invoke(fn: ServiceCallable) -> Any:
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return result


def _elapsed_ms(started: float) -> str:
    return f"{(time.perf_counter() - started) * 1000:.2f}"


class LifecycleHandler:
    """
    Startup/shutdown coordinator for one process.

    Both startup() and shutdown() run at most once; later calls return
    immediately.
    """

    def __init__(self, stop_timeout: float = 10.0):
        self.stop_timeout = stop_timeout

        self._startup_services: list[LifecycleService] = []
        self._running: list[LifecycleService] = []

        self._startup_started = False
        self._shutdown_started = False
        self._ready = False
        self._alive = True

        self._created = time.perf_counter()
        self.signal: str | None = None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, services: Iterable[LifecycleService]) -> None:
        started = time.perf_counter()
        logger.debug("Initiating registration...")

        services = list(services)
        self._startup_services.extend(services)

        logger.debug(f"↳ registered services: {len(services)}")
        logger.debug(f"↳ registration complete ({_elapsed_ms(started)}ms)")

    @property
    def services(self) -> list[LifecycleService]:
        return list(self._startup_services)

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    async def startup(self) -> None:
        """
        Start every registered service in order.

        Raises:
            Exception: Whatever the failing service raised, after the
                services that did start have been stopped
        """
        if self._startup_started:
            return
        self._startup_started = True

        started = time.perf_counter()
        logger.debug("Initiating startup sequence...")

        for service in self._startup_services:
            if service.start is not None:
                try:
                    await _invoke(service.start)
                except Exception:
                    logger.exception(f"Failed to start service → {service.name}")
                    await self.shutdown("STARTUP_FAILURE")
                    raise
                logger.debug(f"↳ successfully started service → {service.name}")
            self._running.append(service)

        self._ready = True
        logger.debug(f"↳ startup complete ({_elapsed_ms(started)}ms)")

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    async def shutdown(self, signal: str | None = None) -> None:
        """
        Stop started services in reverse registration order.

        Each stop hook gets `stop_timeout` seconds. Failures and timeouts are
        logged and do not prevent the remaining services from stopping.
        """
        if self._shutdown_started:
            return
        self._shutdown_started = True
        self._ready = False

        signal = signal or self.signal or "SHUTDOWN"
        started = time.perf_counter()
        uptime = time.perf_counter() - self._created

        logger.warning(
            f"{signal} received - initiating graceful shutdown (uptime {uptime:.2f}s)..."
        )

        for service in reversed(self._running):
            if service.stop is None:
                continue

            service_started = time.perf_counter()
            try:
                await asyncio.wait_for(_invoke(service.stop), timeout=self.stop_timeout)
                logger.debug(
                    f"↳ successfully stopped service → {service.name} "
                    f"({_elapsed_ms(service_started)}ms)"
                )
            except asyncio.TimeoutError:
                logger.error(
                    f"Timed out stopping service → {service.name} after {self.stop_timeout}s"
                )
            except Exception:
                logger.exception(
                    f"Failed to stop service → {service.name} "
                    f"after {_elapsed_ms(service_started)}ms"
                )

        self._running.clear()
        self._alive = False
        logger.info(f"↳ shutdown complete ({_elapsed_ms(started)}ms)")

    def record_signal(self, signal: str) -> None:
        """Remember which signal asked the server to exit."""
        if self.signal is None:
            self.signal = signal

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def is_alive(self) -> bool:
        return self._alive

    def is_ready(self) -> bool:
        return self._ready

    def uptime(self) -> float:
        return time.perf_counter() - self._created

    async def are_all_services_healthy(self) -> bool:
        """
        Run every registered health check.

        A check that raises counts as unhealthy.
        """
        for service in self._startup_services:
            if service.check is None:
                continue
            try:
                healthy = await _invoke(service.check)
            except Exception as e:
                logger.warning(f"Health check raised for service → {service.name}: {e}")
                healthy = False
            if not healthy:
                logger.warning(f"Service unhealthy → {service.name}")
                return False
        return True


# =============================================================================
# Process Hooks
# =============================================================================

def install_process_hooks(lifecycle: LifecycleHandler) -> None:
    """
    Log uncaught exceptions and process exit.

    - sys.excepthook: uncaught exceptions are logged at critical level
    - atexit: the exit is logged with the process uptime
    """
    previous_hook = sys.excepthook

    def _excepthook(exc_type, exc, tb):
        if not issubclass(exc_type, KeyboardInterrupt):
            logger.critical("Uncaught exception - forcing exit", exc_info=(exc_type, exc, tb))
        previous_hook(exc_type, exc, tb)

    sys.excepthook = _excepthook
    atexit.register(
        lambda: logger.info(f"Application exited after {lifecycle.uptime():.2f}s")
    )


def install_loop_exception_handler(loop: asyncio.AbstractEventLoop) -> None:
    """Log exceptions from tasks nobody awaited."""

    def _handler(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        logger.critical(
            f"Unhandled task exception: {context.get('message', exc)}",
            exc_info=exc,
        )

    loop.set_exception_handler(_handler)

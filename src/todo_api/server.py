"""
Process lifecycle: start uvicorn, wait for an interrupt, shut down within a grace period.

States move strictly forward::

    STARTING -> LISTENING -> SHUTTING_DOWN -> STOPPED

Only an interrupt signal (SIGINT/SIGTERM) moves a listening server to
SHUTTING_DOWN. The signal is observed by ``watch_interrupt``, which sets an
``asyncio.Event`` used as the shutdown token; ``TodoServer.run`` waits on that
token and then lets uvicorn drain in-flight requests for at most
``Settings.shutdown_timeout`` seconds before connections are closed.

Startup failures (store unreachable, landing page missing, address in use)
raise ``StartupError``; ``main`` turns that into a non-zero exit.
"""
from __future__ import annotations

import asyncio
import contextlib
import signal
import sys
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence

import uvicorn
from fastapi import FastAPI

from .logging_config import get_logger, setup_logging
from .main import create_app
from .settings import Settings, get_settings

logger = get_logger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class StartupError(Exception):
    """The server could not reach the listening state."""


class ServerState(str, Enum):
    STARTING = "starting"
    LISTENING = "listening"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


_ORDER = [ServerState.STARTING, ServerState.LISTENING, ServerState.SHUTTING_DOWN, ServerState.STOPPED]


class _UvicornServer(uvicorn.Server):
    """uvicorn server that leaves signals to the lifecycle and reports when it listens."""

    def __init__(self, config: uvicorn.Config, on_listening: Callable[[], None]) -> None:
        super().__init__(config)
        self._on_listening = on_listening

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self._on_listening()


# PUBLIC_INTERFACE
class TodoServer:
    """
    Runs the app under uvicorn and tracks its lifecycle state.

    ``server_factory`` builds the underlying uvicorn server from a config and a
    "now listening" callback; tests pass a stand-in.
    """

    def __init__(
        self,
        app: FastAPI,
        settings: Settings,
        server_factory: Callable[[uvicorn.Config, Callable[[], None]], uvicorn.Server] = _UvicornServer,
    ) -> None:
        self.state = ServerState.STARTING
        self.config = uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            lifespan="on",
            timeout_keep_alive=settings.idle_timeout,
            timeout_graceful_shutdown=settings.shutdown_timeout,
            log_config=None,
            access_log=False,
        )
        self._server = server_factory(self.config, self._listening)

    def _transition(self, new_state: ServerState) -> None:
        if _ORDER.index(new_state) <= _ORDER.index(self.state):
            return
        logger.debug("Server state %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    def _listening(self) -> None:
        if self.state is ServerState.STARTING:
            self._transition(ServerState.LISTENING)
            logger.info("Listening on %s:%s", self.config.host, self.config.port)

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind the address.
            raise StartupError(f"cannot listen on {self.config.host}:{self.config.port}") from e

    async def run(self, stop: asyncio.Event) -> None:
        """
        Serve until ``stop`` is set, then shut down gracefully.

        Raises:
            StartupError: the server never reached LISTENING.
        """
        serve_task = asyncio.ensure_future(self._serve())
        stop_task = asyncio.ensure_future(stop.wait())
        try:
            done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
            if stop_task in done and not serve_task.done():
                self._transition(ServerState.SHUTTING_DOWN)
                logger.info("Shutting down server...")
                self._server.should_exit = True
            await serve_task
        finally:
            stop_task.cancel()
            self._transition(ServerState.STOPPED)

        if not self._server.started:
            raise StartupError("application startup failed")
        logger.info("Server gracefully stopped")


# PUBLIC_INTERFACE
async def watch_interrupt(stop: asyncio.Event, signals: Sequence[signal.Signals] = INTERRUPT_SIGNALS) -> None:
    """
    Set ``stop`` on the first interrupt signal received.

    Handlers are removed again when the watcher finishes or is cancelled.
    """
    loop = asyncio.get_running_loop()
    received = asyncio.Event()
    installed = []
    for sig in signals:
        try:
            loop.add_signal_handler(sig, received.set)
            installed.append(sig)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler.
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(received.set))
    try:
        await received.wait()
        logger.info("Interrupt received")
        stop.set()
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


# PUBLIC_INTERFACE
async def serve(app: FastAPI, settings: Settings, stop: Optional[asyncio.Event] = None) -> None:
    """Run ``app`` until an interrupt signal (or ``stop``) requests shutdown."""
    if stop is None:
        stop = asyncio.Event()
    watcher = asyncio.ensure_future(watch_interrupt(stop))
    try:
        await TodoServer(app, settings).run(stop)
    finally:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher


# PUBLIC_INTERFACE
def main() -> None:
    """Console entry point: configure logging, build the app and serve it."""
    settings = get_settings()
    setup_logging(settings.log_level)
    try:
        app = create_app(settings)
        asyncio.run(serve(app, settings))
    except StartupError as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

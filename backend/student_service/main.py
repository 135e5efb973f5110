"""
Student Service entry point.

Builds config -> database -> token manager -> storage -> services ->
handlers -> server, serves in a background task, and shuts down within
SHUTDOWN_TIMEOUT seconds of SIGINT or SIGTERM.
"""
import asyncio
import contextlib
import logging
import signal
import sys
from contextlib import AsyncExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from student_service.config import DEFAULT_CONFIG_PATH, load_settings
from student_service.core.exceptions import (
    ApplicationException,
    ConfigurationException,
    DatabaseConnectionException,
    RepositoryException,
    ServerRuntimeException,
    ShutdownTimeoutException,
    TokenManagerException,
)
from student_service.core.logging import setup_logging
from student_service.core.security import TokenManager
from student_service.database.connections import close_database, connect_database
from student_service.handler import Handler
from student_service.server import Server
from student_service.services import Services
from student_service.storage import Storage

logger = logging.getLogger(__name__)

SHUTDOWN_TIMEOUT = 5.0
SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class LifecycleState(str, Enum):
    """Lifecycle controller states."""
    CONSTRUCTING = "constructing"
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Categories of fatal errors."""
    CONFIG = "config"
    DATABASE = "database"
    TOKEN_MANAGER = "token_manager"
    SERVER_RUNTIME = "server_runtime"
    SHUTDOWN = "shutdown"


@dataclass(frozen=True)
class LifecycleError:
    kind: FailureKind
    message: str
    cause: Optional[BaseException] = None


@dataclass(frozen=True)
class LifecycleResult:
    """Outcome of a run: success, or the fatal error that ended it."""
    error: Optional[LifecycleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class _Fatal(Exception):
    def __init__(self, error: LifecycleError):
        self.error = error
        super().__init__(error.message)


def _fatal(kind: FailureKind, context: str, exc: ApplicationException) -> _Fatal:
    return _Fatal(LifecycleError(kind, f"{context}: {exc.message}", exc))


class Lifecycle:
    """
    Runs the service from construction to shutdown.

    Resources acquired during construction are released on every exit
    path. Signal handlers are only installed once every dependency was
    built, so a failed construction never starts the server.
    """

    def __init__(
        self,
        config_path: str | Path = DEFAULT_CONFIG_PATH,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT,
        signals: Sequence[signal.Signals] = SHUTDOWN_SIGNALS,
    ):
        self.config_path = config_path
        self.shutdown_timeout = shutdown_timeout
        self.signals = tuple(signals)
        self.state = LifecycleState.CONSTRUCTING
        self.server: Optional[Server] = None
        self._stop_requested: Optional[asyncio.Event] = None

    async def run(self) -> LifecycleResult:
        """Construct, serve, and shut down. Never raises for fatal errors."""
        try:
            async with AsyncExitStack() as stack:
                server = await self._construct(stack)
                await self._serve(server)
        except _Fatal as fatal:
            self.state = LifecycleState.FAILED
            return LifecycleResult(fatal.error)

        self.state = LifecycleState.STOPPED
        logger.info("Service stopped")
        return LifecycleResult()

    def request_stop(self, sig: Optional[signal.Signals] = None) -> None:
        """Ask a running service to shut down."""
        if sig is not None:
            logger.info("Received signal %s, shutting down", sig.name)
        if self._stop_requested is not None:
            self._stop_requested.set()

    # ==================== Construction ====================

    async def _construct(self, stack: AsyncExitStack) -> Server:
        self.state = LifecycleState.CONSTRUCTING

        try:
            settings = load_settings(self.config_path)
        except ConfigurationException as e:
            raise _fatal(FailureKind.CONFIG, "can't load config", e) from e
        setup_logging(settings.log_level)

        db = settings.database
        try:
            engine = await connect_database(
                db.driver, db.dsn, pool_size=db.pool_size, echo=db.echo
            )
        except DatabaseConnectionException as e:
            raise _fatal(FailureKind.DATABASE, "error creating database object", e) from e
        stack.push_async_callback(close_database, engine)

        try:
            token_manager = TokenManager(settings.jwt.signing_key, settings.jwt.algorithm)
        except TokenManagerException as e:
            raise _fatal(FailureKind.TOKEN_MANAGER, "error while creating token manager", e) from e

        storage = Storage(engine)
        if db.auto_migrate:
            try:
                await storage.create_schema()
            except RepositoryException as e:
                raise _fatal(FailureKind.DATABASE, "error creating database schema", e) from e

        services = Services(storage, token_manager, settings)
        handlers = Handler(services, token_manager)
        self.server = Server(settings, handlers.init(settings))
        return self.server

    # ==================== Serving ====================

    async def _serve(self, server: Server) -> None:
        self.state = LifecycleState.STARTING
        loop = asyncio.get_running_loop()
        self._stop_requested = asyncio.Event()

        serve_task = asyncio.create_task(server.run(), name="http-server")
        self._install_signal_handlers(loop)
        try:
            self.state = LifecycleState.RUNNING
            stop_task = asyncio.create_task(self._stop_requested.wait(), name="stop-signal")
            done, _ = await asyncio.wait(
                {serve_task, stop_task},
                return_when=asyncio.FIRST_COMPLETED,
            )

            if serve_task in done:
                stop_task.cancel()
                raise self._serve_failure(serve_task)

            await self._shutdown(server, serve_task)
        finally:
            self._remove_signal_handlers(loop)
            if not serve_task.done():
                serve_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await serve_task

    async def _shutdown(self, server: Server, serve_task: asyncio.Task) -> None:
        self.state = LifecycleState.SHUTTING_DOWN
        logger.info("Shutting down HTTP server (timeout %gs)", self.shutdown_timeout)

        try:
            await server.stop(self.shutdown_timeout)
        except ShutdownTimeoutException as e:
            raise _fatal(FailureKind.SHUTDOWN, "error stopping HTTP server", e) from e

        # The serve loop ended because it was stopped; only a real error counts.
        await asyncio.wait({serve_task})
        if serve_task.exception() is not None:
            raise self._serve_failure(serve_task)

    @staticmethod
    def _serve_failure(serve_task: asyncio.Task) -> _Fatal:
        exc = serve_task.exception()
        if not isinstance(exc, ApplicationException):
            exc = ServerRuntimeException(repr(exc) if exc else "HTTP server stopped unexpectedly")
        return _fatal(FailureKind.SERVER_RUNTIME, "HTTP server closed with error", exc)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in self.signals:
            loop.add_signal_handler(sig, self.request_stop, sig)

    def _remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in self.signals:
            loop.remove_signal_handler(sig)


def main(config_path: str | Path = DEFAULT_CONFIG_PATH) -> None:
    """Run the service; exit with status 1 on any fatal error."""
    setup_logging()
    result = asyncio.run(Lifecycle(config_path).run())
    if not result.ok:
        fatal(result.error)


def fatal(error: LifecycleError) -> None:
    """Log a fatal error and terminate the process."""
    logger.critical("%s", error.message, extra={"failure": error.kind.value})
    sys.exit(1)


if __name__ == "__main__":
    main()

"""
HTTP server wrapping uvicorn with explicit run/stop control.
"""
import asyncio
import contextlib
import logging
from typing import Iterator, Optional

import uvicorn
from fastapi import FastAPI

from student_service.config import Settings
from student_service.core.exceptions import (
    ServerRuntimeException,
    ShutdownTimeoutException,
)

logger = logging.getLogger(__name__)


class _UvicornServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to its owner."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class Server:
    """
    Serves an ASGI application until stopped.

    `run()` only returns normally once `stop()` has been requested, the
    equivalent of a "server closed" condition. Any other way the serve
    loop can end is reported as ServerRuntimeException.
    """

    def __init__(self, settings: Settings, app: FastAPI):
        config = uvicorn.Config(
            app,
            host=settings.server.host,
            port=settings.server.port,
            log_config=None,
            lifespan="on",
        )
        self._server = _UvicornServer(config)
        self._closing = False
        self._stopped = asyncio.Event()

    @property
    def started(self) -> bool:
        return self._server.started

    @property
    def port(self) -> Optional[int]:
        """Port the server is bound to, once started."""
        for server in self._server.servers:
            for sock in server.sockets:
                return sock.getsockname()[1]
        return None

    async def run(self) -> None:
        """
        Serve until stopped.

        Raises:
            ServerRuntimeException: If serving ends without a stop request
        """
        config = self._server.config
        logger.info("HTTP server starting on %s:%s", config.host, config.port)
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it can't bind or start up
            raise ServerRuntimeException(
                f"HTTP server failed to start on {config.host}:{config.port}",
                {"exit_code": e.code},
            ) from e
        finally:
            self._stopped.set()

        if not self._closing:
            raise ServerRuntimeException("HTTP server stopped unexpectedly")
        logger.info("HTTP server closed")

    async def stop(self, timeout: float) -> None:
        """
        Stop the server gracefully.

        New connections are refused at once; in-flight requests get until
        the deadline to finish and are cancelled when it passes.

        Args:
            timeout: Seconds allowed for the shutdown

        Raises:
            ShutdownTimeoutException: If the server is still running at the deadline
        """
        self._closing = True
        self._server.should_exit = True

        try:
            await asyncio.wait_for(self._stopped.wait(), timeout)
        except asyncio.TimeoutError:
            pending = list(self._server.server_state.tasks)
            logger.warning("Cancelling %d in-flight request(s) after %gs", len(pending), timeout)
            self._server.force_exit = True
            for task in pending:
                task.cancel()
            raise ShutdownTimeoutException(timeout) from None

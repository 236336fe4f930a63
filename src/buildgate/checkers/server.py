"""Application server bootstrap for the browser-test harness."""

import logging
import subprocess
import time
from pathlib import Path
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config.harness import WebServerConfig
from ..errors import HarnessFailure, ToolMissing

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5
SHUTDOWN_GRACE = 10.0


def is_server_ready(url: str, timeout: float = 2.0) -> bool:
    """Return True when url answers with a non-5xx status."""
    try:
        req = Request(url, headers={"User-Agent": "buildgate"})
        with urlopen(req, timeout=timeout) as response:
            return response.status < 500
    except HTTPError as e:
        return e.code < 500
    except (URLError, OSError, ValueError):
        return False


class ServerBootstrap:
    """Context manager that makes sure the application server is up.

    An already-running server is reused when the configuration allows it;
    otherwise the server command is started, polled until ready, and
    terminated on exit.
    """

    def __init__(
        self,
        config: WebServerConfig,
        cwd: Optional[Path] = None,
        probe: Callable[[str], bool] = is_server_ready,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.cwd = cwd
        self._probe = probe
        self._clock = clock
        self._sleep = sleep
        self.process: Optional[subprocess.Popen] = None
        self.reused = False

    def __enter__(self) -> "ServerBootstrap":
        url = self.config.url
        if self._probe(url):
            if self.config.reuse_existing_server:
                logger.info(f"Reusing server already answering on {url}")
                self.reused = True
                return self
            raise HarnessFailure(
                f"{url} is already in use; set reuse_existing_server to reuse it"
            )

        logger.info(f"Starting server: {' '.join(self.config.command)}")
        try:
            self.process = subprocess.Popen(
                self.config.command,
                cwd=self.cwd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ToolMissing(
                f"{self.config.command[0]}: server cannot be started ({e})"
            ) from e

        try:
            self._wait_until_ready()
        except BaseException:
            self._stop()
            raise
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._stop()

    def _wait_until_ready(self) -> None:
        deadline = self._clock() + self.config.timeout_ms / 1000.0
        while True:
            if self._probe(self.config.url):
                logger.info(f"Server ready on {self.config.url}")
                return
            if self.process is not None and self.process.poll() is not None:
                raise HarnessFailure(
                    f"Server exited with code {self.process.returncode} "
                    "before becoming ready",
                    exit_code=self.process.returncode,
                )
            if self._clock() >= deadline:
                raise HarnessFailure(
                    f"Server did not answer on {self.config.url} within "
                    f"{self.config.timeout_ms}ms"
                )
            self._sleep(POLL_INTERVAL)

    def _stop(self) -> None:
        if self.process is None or self.process.poll() is not None:
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=SHUTDOWN_GRACE)
        except subprocess.TimeoutExpired:
            logger.warning("Server did not stop after terminate, killing it")
            self.process.kill()
            self.process.wait()

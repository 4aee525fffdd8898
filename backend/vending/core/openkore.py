"""
OpenKore process control.

WHAT: Start and stop the bot, locate its console log and shop config
WHY: The cart is only reported after the bot logs in and prints it
HOW: subprocess.Popen in the bot home; bounded blocking wait for its output
"""

import shlex
import subprocess
from pathlib import Path
from typing import Optional

from ..models.cart import CartSnapshot
from ..services.cart_parser import read_cart_log
from ..utils.exceptions import BotProcessError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class OpenKore:
    """Handle on an OpenKore installation and its running process."""
    
    STOP_GRACE_SECONDS = 10.0
    
    def __init__(
        self,
        home: str | Path,
        command: str = "perl openkore.pl",
        console_log: str | Path = "logs/console.txt",
        shop_config: str | Path = "control/shop.txt"
    ):
        self.home = Path(home)
        self.command = command
        self.console_log_path = self._resolve(console_log)
        self.shop_config_path = self._resolve(shop_config)
        self._process: Optional[subprocess.Popen] = None
    
    def _resolve(self, path: str | Path) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.home / candidate
    
    @property
    def running(self) -> bool:
        return self._process is not None and self._process.poll() is None
    
    def start(self) -> None:
        """
        Launch the bot if it is not already running.
        
        Raises:
            BotProcessError: the command cannot be executed
        """
        if self.running:
            logger.info("OpenKore already running")
            return
        
        logger.info(f"Starting OpenKore in {self.home}: {self.command}")
        try:
            self._process = subprocess.Popen(
                shlex.split(self.command),
                cwd=self.home,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL
            )
        except OSError as e:
            raise BotProcessError(f"Cannot start OpenKore: {e}", command=self.command) from e
    
    def wait(self, timeout: float) -> bool:
        """
        Block until the bot exits or `timeout` seconds pass.
        
        Returns:
            True if the process exited, False on timeout (the normal case)
        """
        if self._process is None:
            return True
        try:
            self._process.wait(timeout=timeout)
            return True
        except subprocess.TimeoutExpired:
            return False
    
    def stop(self) -> None:
        """Terminate the bot, killing it if it ignores the request."""
        process = self._process
        if process is None:
            return
        if process.poll() is None:
            logger.info("Stopping OpenKore")
            process.terminate()
            try:
                process.wait(timeout=self.STOP_GRACE_SECONDS)
            except subprocess.TimeoutExpired:
                logger.warning("OpenKore did not exit, killing it")
                process.kill()
                process.wait()
        self._process = None
    
    def close(self) -> None:
        self.stop()
    
    def __enter__(self) -> "OpenKore":
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def acquire_cart_snapshot(openkore: OpenKore, wait_seconds: float) -> CartSnapshot | None:
    """
    Run the bot long enough for it to report its cart, then parse the log.
    
    A bot still warming up and a log without a cart report look the same to
    the caller: None, so the caller can simply try again later.
    
    Args:
        openkore: Bot handle
        wait_seconds: Deadline for the bot to populate its console log
    
    Raises:
        BotProcessError: the bot cannot be started
        MalformedCartLineError: the cart report cannot be parsed
    """
    openkore.start()
    try:
        if openkore.wait(wait_seconds):
            logger.warning("OpenKore exited before the wait deadline")
    finally:
        openkore.stop()
    
    snapshot = read_cart_log(openkore.console_log_path)
    if snapshot is None:
        logger.info(f"No cart report after {wait_seconds}s")
    return snapshot

#!/usr/bin/env python3
"""
Dev mode runner for mcp-find-replace

Restarts the streamable-http server whenever a source file under
mcp_find_replace/ changes. Vault notes are read fresh on every tool call,
so edits to the vault itself never need a restart.

Usage:
    python dev.py --vault-dir ~/notes
    FIND_REPLACE_DEV_PORT=9000 python dev.py
"""
import logging
import os
import subprocess
import sys
import time
from pathlib import Path

from watchdog.events import FileSystemEvent, PatternMatchingEventHandler
from watchdog.observers import Observer

logging.basicConfig(level=logging.INFO, format="%(asctime)s [dev] %(message)s")
logger = logging.getLogger("mcp_find_replace.dev")

PACKAGE_DIR = Path(__file__).parent / "mcp_find_replace"
DEBOUNCE_SECONDS = 0.5


def server_command(extra_args: list[str]) -> list[str]:
    port = os.getenv("FIND_REPLACE_DEV_PORT", "8080")
    return [
        "poetry", "run", "mcp-find-replace",
        "--transport", "streamable-http",
        "--port", port,
        *extra_args,
    ]


class SourceChangeRestarter(PatternMatchingEventHandler):
    """Runs the server as a child process and restarts it on .py changes"""

    def __init__(self, command: list[str]):
        super().__init__(patterns=["*.py"], ignore_directories=True)
        self.command = command
        self.process: subprocess.Popen | None = None
        self.last_restart = 0.0

    def start(self) -> None:
        self.stop()
        # Output is inherited so server logs go straight to this terminal
        self.process = subprocess.Popen(self.command)
        self.last_restart = time.monotonic()
        logger.info(f"server started (pid {self.process.pid}): {' '.join(self.command)}")

    def stop(self) -> None:
        if self.process is None or self.process.poll() is not None:
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=5)
        except subprocess.TimeoutExpired:
            logger.warning("server did not stop, killing it")
            self.process.kill()
            self.process.wait()

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in ("created", "modified", "moved"):
            return
        # Editors save in bursts; one restart per burst
        if time.monotonic() - self.last_restart < DEBOUNCE_SECONDS:
            return
        logger.info(f"{event.src_path} changed, restarting")
        self.start()


def main():
    """Run the server and restart it on source changes until Ctrl+C"""
    restarter = SourceChangeRestarter(server_command(sys.argv[1:]))
    observer = Observer()
    observer.schedule(restarter, str(PACKAGE_DIR), recursive=True)

    restarter.start()
    observer.start()
    logger.info(f"watching {PACKAGE_DIR} (Ctrl+C to stop)")

    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        logger.info("stopping")
    finally:
        observer.stop()
        observer.join()
        restarter.stop()


if __name__ == "__main__":
    main()

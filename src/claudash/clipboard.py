"""Non-blocking copy to the system clipboard.

The copy runs on a worker thread; callers get a Future resolving to a
ClipboardResult and decide how to surface it. Failures are reported through
the result, never raised.
"""

import logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

logger = logging.getLogger(__name__)

Runner = Callable[[Sequence[str], str], None]

# Primary command first, then at most one fallback
CLIPBOARD_COMMANDS: dict[str, list[list[str]]] = {
    "darwin": [["pbcopy"]],
    "linux": [["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"]],
    "win32": [["clip"]],
}


@dataclass(frozen=True)
class ClipboardResult:
    ok: bool
    message: str


def run_command(cmd: Sequence[str], text: str) -> None:
    """Pipe text into cmd, raising if it cannot start or exits non-zero."""
    subprocess.run(list(cmd), input=text, text=True, check=True, capture_output=True)


class Clipboard:
    """Owns the worker that performs clipboard copies."""

    def __init__(self, platform: str | None = None, runner: Runner = run_command):
        self.platform = platform if platform is not None else sys.platform
        self.runner = runner
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="clipboard")

    def copy(self, text: str) -> "Future[ClipboardResult]":
        commands = CLIPBOARD_COMMANDS.get(self.platform)
        if not commands:
            future: Future[ClipboardResult] = Future()
            future.set_result(ClipboardResult(False, f"Clipboard not supported on {self.platform}"))
            return future
        return self._executor.submit(self._copy, text, commands)

    def _copy(self, text: str, commands: list[list[str]]) -> ClipboardResult:
        error: Exception | None = None
        for cmd in commands:
            try:
                self.runner(cmd, text)
            except (OSError, subprocess.SubprocessError) as e:
                logger.debug("Clipboard command %s failed: %s", cmd[0], e)
                error = e
                continue
            return ClipboardResult(True, f"Copied: {text}")

        if len(commands) > 1:
            return ClipboardResult(False, "Copy failed: Install xclip or xsel")
        return ClipboardResult(False, f"Copy failed: {error}")

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)

"""
Command Gateway
===============
Synchronous access to the external tools wg-quick drives: ip(8), wg(8) and the
ndc network-policy control client. Every mutating command is echoed as a
`[#] ...` trace line before it runs.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Iterator, List, Optional, Sequence

from wgquick.errors import CommandError, ControlServiceError

logger = logging.getLogger("wg-quick")

NDC_SUCCESS = "200 0"


def _launch_error(argv: Sequence[str], exc: OSError) -> CommandError:
    return CommandError(f"{argv[0]}: {exc.strerror or exc}", exit_code=exc.errno or 1)


def _status(returncode: int) -> int:
    """Map a subprocess return code to a process exit status."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class CommandStream:
    """Restartable line reader over one command at a time.

    Issuing a new command closes the process behind the previous one; the
    returned iterator ends when the command's output is exhausted.
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self._proc: Optional[subprocess.Popen] = None

    def lines(self, argv: Sequence[str]) -> Iterator[str]:
        self.close()
        try:
            self._proc = subprocess.Popen(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL if self.quiet else None,
                text=True,
                errors="surrogateescape",
            )
        except OSError as e:
            raise _launch_error(argv, e) from e
        return self._read(self._proc)

    @staticmethod
    def _read(proc: subprocess.Popen) -> Iterator[str]:
        if proc.stdout is None:
            return
        for line in proc.stdout:
            yield line

    def first_line(self, argv: Sequence[str]) -> Optional[str]:
        return next(self.lines(argv), None)

    def close(self) -> None:
        proc, self._proc = self._proc, None
        if proc is None:
            return
        if proc.stdout is not None:
            proc.stdout.close()
        proc.wait()

    def __enter__(self) -> "CommandStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class CommandGateway:
    """Runs external commands; nonzero exits abort unless a teardown is in progress."""

    def __init__(self, ip_bin: str = "ip", wg_bin: str = "wg", ndc_bin: str = "ndc"):
        self.ip_bin = ip_bin
        self.wg_bin = wg_bin
        self.ndc_bin = ndc_bin
        self.exiting = False

    def ip(self, *args: str) -> List[str]:
        return [self.ip_bin, *args]

    def wg(self, *args: str) -> List[str]:
        return [self.wg_bin, *args]

    def stream(self, quiet: bool = False) -> CommandStream:
        return CommandStream(quiet=quiet)

    def run(self, argv: Sequence[str]) -> None:
        """Echo and run a command, raising CommandError on failure."""
        logger.info("[#] %s", shlex.join(argv))
        try:
            result = subprocess.run(list(argv), check=False)
        except OSError as e:
            raise _launch_error(argv, e) from e
        self._check(argv, result.returncode)

    def feed(self, argv: Sequence[str], text: str) -> None:
        """Echo and run a command with `text` on its standard input."""
        logger.info("[#] %s", shlex.join(argv))
        try:
            result = subprocess.run(list(argv), input=text, text=True, errors="surrogateescape", check=False)
        except OSError as e:
            raise _launch_error(argv, e) from e
        self._check(argv, result.returncode)

    def ndc(self, *args: str) -> None:
        """Send one request to the network-policy control service."""
        argv = [self.ndc_bin, *args]
        logger.info("[#] %s", shlex.join(argv))
        with CommandStream() as stream:
            response = stream.first_line(argv)
        if response is None or NDC_SUCCESS not in response:
            detail = response.strip() if response else "no response"
            if response:
                logger.error("Error: %s", detail)
            if self.exiting:
                logger.warning("%s failed during teardown", shlex.join(argv))
                return
            raise ControlServiceError(f"{shlex.join(argv)}: {detail}")

    def _check(self, argv: Sequence[str], returncode: int) -> None:
        if not returncode:
            return
        status = _status(returncode)
        if self.exiting:
            logger.warning("%s exited with status %d during teardown", argv[0], status)
            return
        raise CommandError(f"`{shlex.join(argv)}' exited with status {status}", exit_code=status)
